"""Declarative screening policy shared by the link classifier and match scorer.

Every heuristic keyword list lives here so tuning the screening never touches
control flow. Defaults can be overridden from ``policy.yaml``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class LinkPolicy(BaseModel):
    """Rules for deciding which anchors on a careers page look like postings."""

    # Any match in URL or anchor text rejects the link.
    exclude_terms: list[str] = Field(
        default_factory=lambda: [
            "blog",
            "/news",
            "newsroom",
            "/press",
            "/about",
            "/contact",
            "/team",
            "meet-",
            "meet the team",
            "linkedin.com",
            "facebook.com",
            "twitter.com",
            "instagram.com",
            "youtube.com",
            "tiktok.com",
            "glassdoor.",
            "cookie",
            "privacy",
            "/terms",
            "/legal",
            "/login",
            "/signin",
            "sign in",
            "mailto:",
            "tel:",
            "javascript:",
        ]
    )
    # URL path segments that indicate a single posting.
    job_path_segments: list[str] = Field(
        default_factory=lambda: [
            "/job/",
            "/jobs/",
            "/role/",
            "/roles/",
            "/position/",
            "/positions/",
            "/opening/",
            "/openings/",
            "/vacancy/",
            "/vacancies/",
            "/career/",
            "/listing/",
            "/listings/",
        ]
    )
    # Words that make anchor text read like a job title.
    title_keywords: list[str] = Field(
        default_factory=lambda: [
            "engineer",
            "developer",
            "analyst",
            "manager",
            "designer",
            "scientist",
            "architect",
            "lead",
            "senior",
            "junior",
            "intern",
            "consultant",
            "specialist",
        ]
    )
    # Navigation chrome that has plausible length but is never a title.
    ui_labels: list[str] = Field(
        default_factory=lambda: [
            "view all jobs",
            "see all jobs",
            "view all openings",
            "see open positions",
            "view open roles",
            "search jobs",
            "learn more",
            "read more",
            "back to top",
            "skip to content",
            "skip to main content",
            "join our talent community",
            "accept all cookies",
        ]
    )
    min_title_length: int = 10
    max_title_length: int = 120
    max_links: int = Field(default=10, ge=1)


class MatchPolicy(BaseModel):
    """Rules for accepting a fetched job page against the search criteria."""

    # Whole-word terms in the title or URL that mark non-job content.
    negative_terms: list[str] = Field(
        default_factory=lambda: [
            "meet",
            "blog",
            "story",
            "stories",
            "interview",
            "day in the life",
            "podcast",
            "webinar",
            "press release",
            "news",
        ]
    )
    min_body_mentions: int = Field(default=2, ge=1)
    require_seniority: bool = False
    known_cities: list[str] = Field(
        default_factory=lambda: [
            "london",
            "paris",
            "new york",
            "berlin",
            "amsterdam",
            "dublin",
            "madrid",
            "barcelona",
            "lisbon",
            "munich",
            "zurich",
            "stockholm",
            "san francisco",
            "toronto",
            "singapore",
            "remote",
        ]
    )
    default_location_to_first_city: bool = False
    unknown_location: str = "Location not specified"


class ScreeningPolicy(BaseModel):
    links: LinkPolicy = Field(default_factory=LinkPolicy)
    matching: MatchPolicy = Field(default_factory=MatchPolicy)
    # Try the careers page's own search box with the primary role before extracting links.
    use_search_box: bool = True
    search_box_selectors: list[str] = Field(
        default_factory=lambda: [
            "input[type='search']",
            "input[name*='search' i]",
            "input[placeholder*='search' i]",
            "input[aria-label*='search' i]",
            "input[name='q']",
        ]
    )
    job_list_selectors: list[str] = Field(
        default_factory=lambda: [
            "a[href*='job']",
            "a[href*='role']",
            "a[href*='position']",
            ".job",
            ".role",
            ".position",
        ]
    )


def load_policy(filepath: str = "policy.yaml") -> ScreeningPolicy:
    """Load the screening policy from YAML, falling back to built-in defaults."""
    path = Path(filepath)
    if not path.exists():
        logger.info("Policy file not found at %s — using built-in defaults", filepath)
        return ScreeningPolicy()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    policy = ScreeningPolicy.model_validate(data)
    logger.info(
        "Loaded policy from %s: %d exclusion terms, %d negative terms, seniority %s",
        filepath,
        len(policy.links.exclude_terms),
        len(policy.matching.negative_terms),
        "required" if policy.matching.require_seniority else "advisory",
    )
    return policy
