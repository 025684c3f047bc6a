"""Headless browser session (Playwright sync API) for careers and job pages."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import Browser, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from careerscout.config import Settings
from careerscout.errors import BrowserSessionError, ExtractionError, NavigationError
from careerscout.models.job import JobPageSnapshot, RawAnchor
from careerscout.models.policy import ScreeningPolicy
from careerscout.tools.deadline import Deadline

logger = logging.getLogger(__name__)

ANCHOR_EXTRACTOR = """() => Array.from(document.querySelectorAll('a')).map(a => ({
    href: a.href || '',
    text: (a.innerText || '').trim(),
    title: a.title || '',
    aria_label: a.getAttribute('aria-label') || ''
}))"""

JOB_PAGE_EXTRACTOR = """(maxChars) => {
    const pick = (sel) => {
        const el = document.querySelector(sel);
        return el && el.innerText ? el.innerText.trim() : '';
    };
    const title = pick('h1') || pick('[class*="title"]') || (document.title || '').trim();
    const location = pick('[class*="location" i]') || pick('[data-testid*="location" i]');
    const body = document.body ? document.body.innerText : '';
    return {
        title: title || 'Job Position',
        body_text: body.substring(0, maxChars),
        location: location ? location.substring(0, 120) : null
    };
}"""


class BrowserSession:
    """One Chromium instance shared by the whole run.

    Use as a context manager: the browser and the Playwright driver are shut
    down on every exit path. Each page load gets its own isolated context,
    which is closed as soon as the DOM has been read.
    """

    def __init__(self, settings: Settings, policy: ScreeningPolicy) -> None:
        self.settings = settings
        self.policy = policy
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    def __enter__(self) -> "BrowserSession":
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.settings.headless)
        except PlaywrightError as e:
            self.close()
            raise BrowserSessionError(f"Could not launch browser: {e}") from e
        logger.info("Launched headless=%s Chromium", self.settings.headless)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        except PlaywrightError as e:
            logger.warning("Error closing browser: %s", e)
        finally:
            self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None

    # -- Scoped pages -------------------------------------------------------------

    @contextmanager
    def _page(self) -> Iterator[Page]:
        if self._browser is None or not self._browser.is_connected():
            raise BrowserSessionError("Browser session is not running")
        try:
            context = self._browser.new_context(user_agent=self.settings.user_agent)
        except PlaywrightError as e:
            raise BrowserSessionError(f"Could not open browser context: {e}") from e
        try:
            try:
                page = context.new_page()
            except PlaywrightError as e:
                raise BrowserSessionError(f"Could not open page: {_first_line(e)}") from e
            yield page
        finally:
            try:
                context.close()
            except PlaywrightError as e:
                logger.debug("Error closing browser context: %s", e)

    def _goto(self, page: Page, url: str, deadline: Deadline, cap_secs: float) -> None:
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=deadline.timeout_ms(cap_secs))
        except PlaywrightTimeoutError as e:
            raise NavigationError(f"Timed out loading {url}") from e
        except PlaywrightError as e:
            self._raise_if_dead(e)
            raise NavigationError(f"Failed to load {url}: {_first_line(e)}") from e

    def _settle(self, page: Page, deadline: Deadline, secs: float) -> None:
        try:
            page.wait_for_timeout(deadline.timeout_ms(secs))
        except PlaywrightError as e:
            self._raise_if_dead(e)
            raise NavigationError(f"Page closed while rendering: {_first_line(e)}") from e

    def _raise_if_dead(self, error: Exception) -> None:
        if self._browser is None or not self._browser.is_connected():
            raise BrowserSessionError(f"Browser disconnected: {_first_line(error)}") from error

    # -- Public operations --------------------------------------------------------

    def collect_anchors(
        self,
        url: str,
        deadline: Deadline,
        search_term: str | None = None,
    ) -> list[RawAnchor]:
        """Load a careers page, let scripts render, and return every anchor on it."""
        with self._page() as page:
            self._goto(page, url, deadline, self.settings.navigation_timeout_secs)
            if page.url != url:
                logger.debug("  → Redirected to: %s", page.url)
            self._settle(page, deadline, self.settings.settle_delay_secs)
            self._wait_for_job_list(page, deadline)

            if search_term and self.policy.use_search_box:
                self._try_search(page, search_term, deadline)

            deadline.check()
            try:
                items = page.evaluate(ANCHOR_EXTRACTOR)
            except PlaywrightError as e:
                self._raise_if_dead(e)
                raise ExtractionError(f"Could not read links on {url}: {_first_line(e)}") from e

        anchors = [RawAnchor.model_validate(item) for item in items or [] if isinstance(item, dict)]
        logger.debug("  → %d anchors on %s", len(anchors), url)
        return anchors

    def fetch_job_page(self, url: str, deadline: Deadline) -> JobPageSnapshot:
        """Load a job page in a fresh context and capture its title, text and location."""
        with self._page() as page:
            self._goto(page, url, deadline, self.settings.job_navigation_timeout_secs)
            self._settle(page, deadline, self.settings.job_settle_delay_secs)
            deadline.check()
            try:
                data = page.evaluate(JOB_PAGE_EXTRACTOR, self.settings.snapshot_max_chars)
            except PlaywrightError as e:
                self._raise_if_dead(e)
                raise ExtractionError(f"Could not read job page {url}: {_first_line(e)}") from e

        if not isinstance(data, dict):
            raise ExtractionError(f"Unexpected extraction result for {url}")
        return JobPageSnapshot.model_validate(data)

    # -- Best-effort helpers ------------------------------------------------------

    def _wait_for_job_list(self, page: Page, deadline: Deadline) -> None:
        selector = ", ".join(self.policy.job_list_selectors)
        try:
            page.wait_for_selector(selector, timeout=deadline.timeout_ms(5.0))
            logger.debug("  → Job list rendered")
        except PlaywrightTimeoutError:
            logger.debug("  → No dynamic job list detected")
        except PlaywrightError as e:
            self._raise_if_dead(e)

    def _try_search(self, page: Page, term: str, deadline: Deadline) -> bool:
        """Submit the role through the page's search box. Failures fall through silently."""
        for selector in self.policy.search_box_selectors:
            try:
                box = page.locator(selector).first
                if box.count() == 0 or not box.is_visible():
                    continue
                box.fill(term, timeout=deadline.timeout_ms(3.0))
                box.press("Enter", timeout=deadline.timeout_ms(3.0))
                page.wait_for_load_state(
                    "domcontentloaded", timeout=deadline.timeout_ms(self.settings.navigation_timeout_secs)
                )
                self._settle(page, deadline, self.settings.settle_delay_secs)
                logger.debug("  → Searched careers page for '%s' via %s", term, selector)
                return True
            except PlaywrightError as e:
                self._raise_if_dead(e)
                logger.debug("  → Search box %s unusable: %s", selector, _first_line(e))
        return False


def _first_line(error: Exception) -> str:
    return str(error).strip().split("\n")[0][:150]
