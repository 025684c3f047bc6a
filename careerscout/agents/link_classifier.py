"""Classify careers-page anchors as likely job postings or noise."""

from __future__ import annotations

import logging
from urllib.parse import urldefrag, urlparse

from careerscout.models.job import CandidateLink, RawAnchor
from careerscout.models.policy import LinkPolicy

logger = logging.getLogger(__name__)


def classify_links(anchors: list[RawAnchor], policy: LinkPolicy) -> list[CandidateLink]:
    """Return the anchors that look like job postings, in DOM order.

    Pure and deterministic: exclusion rules run first and any hit rejects
    the anchor; otherwise it must satisfy at least one inclusion rule and
    carry an absolute http(s) href. Repeated hrefs are kept once and the
    result is capped at ``policy.max_links``.
    """
    kept: list[CandidateLink] = []
    seen: set[str] = set()

    for anchor in anchors:
        href = urldefrag(anchor.href.strip())[0]
        if not _is_fetchable(href) or href in seen:
            continue

        text = " ".join(anchor.text.split())
        if _is_excluded(href, anchor, policy):
            continue
        if not _is_included(href, text, policy):
            continue

        seen.add(href)
        kept.append(
            CandidateLink(
                href=href,
                anchor_text=text,
                aria_label=anchor.aria_label.strip() or None,
            )
        )
        if len(kept) >= policy.max_links:
            break

    logger.debug("Classified %d anchors → %d candidate links", len(anchors), len(kept))
    return kept


def _is_fetchable(href: str) -> bool:
    parsed = urlparse(href)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_excluded(href: str, anchor: RawAnchor, policy: LinkPolicy) -> bool:
    url = href.lower()
    label = f"{anchor.text} {anchor.aria_label} {anchor.title}".lower()
    return any(term in url or term in label for term in policy.exclude_terms)


def _is_included(href: str, text: str, policy: LinkPolicy) -> bool:
    path = urlparse(href).path.lower()
    if any(segment in path for segment in policy.job_path_segments):
        return True

    lowered = text.lower()
    if lowered in policy.ui_labels:
        return False
    if policy.min_title_length <= len(lowered) <= policy.max_title_length:
        return True
    return any(keyword in lowered for keyword in policy.title_keywords)
