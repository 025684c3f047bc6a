"""Per-company crawl → classify → score → customize loop."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from careerscout.agents.cv_customizer import customize_cv, unchanged_cv
from careerscout.agents.link_classifier import classify_links
from careerscout.agents.match_scorer import resolve_location, score_job
from careerscout.config import Settings
from careerscout.errors import (
    BrowserSessionError,
    DeadlineExceeded,
    ExtractionError,
    NavigationError,
)
from careerscout.models.criteria import SearchCriteria
from careerscout.models.job import CandidateLink, CompanyTarget, JobListing, JobMatch, JobPageSnapshot
from careerscout.models.policy import ScreeningPolicy
from careerscout.models.results import CompanyResult, CompanyStatus, RunSummary
from careerscout.tools.deadline import Deadline

logger = logging.getLogger(__name__)


class CompanyState(str, Enum):
    PENDING = "pending"
    CRAWLING = "crawling"
    EXTRACTING = "extracting"
    SCORING = "scoring"
    CUSTOMIZING = "customizing"


class JobDiscoveryOrchestrator:
    """Processes companies one after another on a single shared browser session.

    ``browser`` must provide ``collect_anchors(url, deadline, search_term)`` and
    ``fetch_job_page(url, deadline)`` (see ``careerscout.tools.browser``);
    ``client`` provides ``complete(...)``. Failures are isolated to the job or
    company they happen in, except a dead browser session, which ends the run
    and reports every remaining company as an error.
    """

    def __init__(
        self,
        browser,
        client,
        criteria: SearchCriteria,
        template_cv: str,
        settings: Settings,
        policy: ScreeningPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.browser = browser
        self.client = client
        self.criteria = criteria
        self.template_cv = template_cv
        self.settings = settings
        self.policy = policy
        self.sleep = sleep
        self.notes: list[str] = []

    def run(self, targets: list[CompanyTarget], summary: RunSummary | None = None) -> RunSummary:
        summary = summary if summary is not None else RunSummary()
        run_deadline = Deadline(self.settings.run_budget_secs, label="Run")
        fatal: str | None = None

        for i, target in enumerate(targets):
            if fatal is not None:
                summary.add(CompanyResult.error(target.company, target.careers_url, fatal))
                continue
            if run_deadline.expired:
                summary.add(
                    CompanyResult.error(
                        target.company,
                        target.careers_url,
                        f"Not processed: run time budget of {self.settings.run_budget_secs:.0f}s exhausted",
                    )
                )
                continue

            logger.info("Processing %d/%d: %s at %s", i + 1, len(targets), target.company, target.careers_url)
            try:
                result = self.process_company(target, run_deadline)
            except BrowserSessionError as e:
                fatal = f"Browser session unavailable: {e}"
                logger.error("Fatal browser failure at %s — aborting remaining companies: %s", target.company, e)
                result = CompanyResult.error(target.company, target.careers_url, fatal)
            except Exception as e:
                logger.exception("Unexpected error processing %s", target.company)
                result = CompanyResult.error(target.company, target.careers_url, f"Failed to scrape: {e}")

            summary.add(result)
            logger.info("  %s: %s (%d jobs)", target.company, result.status.value, len(result.jobs))

            if fatal is None and i < len(targets) - 1 and self.settings.courtesy_delay_secs > 0:
                self.sleep(self.settings.courtesy_delay_secs)

        return summary.finalize()

    def process_company(self, target: CompanyTarget, run_deadline: Deadline) -> CompanyResult:
        """Run one company through the state machine. Never raises except on a dead browser."""
        company, careers_url = target.company, target.careers_url
        if not careers_url:
            return CompanyResult.error(company, None, "No careers URL resolved")

        deadline = run_deadline.child(self.settings.company_budget_secs, label=company)

        self._transition(company, CompanyState.CRAWLING)
        try:
            anchors = self.browser.collect_anchors(careers_url, deadline, self.criteria.primary_role)
        except DeadlineExceeded as e:
            return CompanyResult.error(company, careers_url, f"Timed out loading careers page: {e}")
        except (NavigationError, ExtractionError) as e:
            return CompanyResult.error(company, careers_url, f"Failed to scrape: {e}")

        self._transition(company, CompanyState.EXTRACTING)
        links = classify_links(anchors, self.policy.links)
        logger.info("  → Found %d potential job links", len(links))
        if not links:
            return CompanyResult.no_matches(company, careers_url, "No job listings found on careers page")

        self._transition(company, CompanyState.SCORING)
        accepted, timed_out = self._score_links(company, links, deadline)

        if not accepted:
            if timed_out:
                return CompanyResult.error(
                    company,
                    careers_url,
                    f"Abandoned after the {self.settings.company_budget_secs:.0f}s company budget ran out",
                )
            return CompanyResult.no_matches(company, careers_url, self._no_match_message())

        self._transition(company, CompanyState.CUSTOMIZING)
        jobs = [
            self._customize(company, link, snapshot, budget_left=not (timed_out or deadline.expired))
            for link, snapshot in accepted
        ]
        message = None
        if timed_out:
            message = f"Company budget ran out after {len(jobs)} match(es); remaining links skipped"
        return CompanyResult(
            company=company,
            careers_url=careers_url,
            status=CompanyStatus.SUCCESS,
            message=message,
            jobs=jobs,
        )

    def _score_links(
        self,
        company: str,
        links: list[CandidateLink],
        deadline: Deadline,
    ) -> tuple[list[tuple[CandidateLink, JobPageSnapshot]], bool]:
        accepted: list[tuple[CandidateLink, JobPageSnapshot]] = []
        for link in links[: self.settings.max_links_checked]:
            if deadline.expired:
                logger.warning("  ⏱ %s budget exhausted during scoring", company)
                return accepted, True
            try:
                snapshot = self.browser.fetch_job_page(link.href, deadline)
            except DeadlineExceeded:
                logger.warning("  ⏱ %s budget exhausted fetching %s", company, link.href)
                return accepted, True
            except (NavigationError, ExtractionError) as e:
                logger.info("  ⚠ Skipped job link %s: %s", link.href, e)
                continue
            except BrowserSessionError:
                raise
            except Exception as e:
                logger.warning("  ⚠ Unexpected error on job link %s: %s", link.href, e)
                continue

            decision = score_job(snapshot, link.href, self.criteria, self.policy.matching)
            if decision.accepted:
                logger.info("  ✅ Matched: %s (%s)", snapshot.title, link.href)
                accepted.append((link, snapshot))
                # Cap before customization bounds the number of LLM calls.
                if len(accepted) >= self.settings.max_matches_per_company:
                    break
            else:
                logger.debug("  ⏭ Skipped: %s — %s", snapshot.title, "; ".join(decision.reasons))
        return accepted, False

    def _customize(
        self,
        company: str,
        link: CandidateLink,
        snapshot: JobPageSnapshot,
        budget_left: bool = True,
    ) -> JobMatch:
        body = snapshot.body_text.strip()
        listing = JobListing(
            title=snapshot.title,
            location=resolve_location(snapshot, self.criteria, self.policy.matching),
            description=body[:200] + ("..." if len(body) > 200 else ""),
            url=link.href,
        )
        if budget_left:
            result = customize_cv(
                listing,
                company,
                self.template_cv,
                self.client,
                max_template_chars=self.settings.template_max_chars,
            )
        else:
            result = unchanged_cv(
                self.template_cv, f"CV customization for {listing.title} at {company} skipped: company budget ran out"
            )
        if result.fell_back and result.reason:
            self.notes.append(result.reason)
        return JobMatch(job=listing, customized_cv=result.value.cv, cv_changes=result.value.changes)

    def _no_match_message(self) -> str:
        message = f"No jobs matching {', '.join(self.criteria.roles)}"
        if self.criteria.seniority:
            message += f" at {self.criteria.seniority} level"
        return message

    def _transition(self, company: str, state: CompanyState) -> None:
        logger.debug("  [%s] → %s", company, state.value.upper())
