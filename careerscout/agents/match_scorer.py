"""Deterministic scoring of a fetched job page against the search criteria."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field

from careerscout.models.criteria import SearchCriteria
from careerscout.models.job import JobPageSnapshot
from careerscout.models.policy import MatchPolicy

logger = logging.getLogger(__name__)


class MatchDecision(BaseModel):
    """Accept/reject verdict with the signals that produced it."""

    accepted: bool
    reasons: list[str] = Field(default_factory=list)
    negative: bool = False
    role_match: bool = False
    city_match: bool = False
    seniority_match: bool | None = None


def score_job(
    snapshot: JobPageSnapshot,
    url: str,
    criteria: SearchCriteria,
    policy: MatchPolicy,
) -> MatchDecision:
    """Decide whether a job page matches the criteria.

    Precedence:
    1. Negative filter on title/URL rejects outright.
    2. Role: any expanded role in the title, or mentioned at least
       ``policy.min_body_mentions`` times in the body.
    3. City: vacuous when no cities were requested.
    4. Seniority: advisory unless ``policy.require_seniority``.
    """
    title = snapshot.title.lower()
    body = snapshot.body_text.lower()

    negative_term = _negative_hit(title, url, policy)
    if negative_term:
        return MatchDecision(
            accepted=False,
            negative=True,
            reasons=[f"Not a job posting: '{negative_term}' in title or URL"],
        )

    reasons: list[str] = []

    role_reason = _role_match(title, body, criteria, policy)
    role_match = role_reason is not None
    reasons.append(role_reason or "No target role in title or description")

    city_match = _city_match(snapshot, criteria)
    if not criteria.cities:
        reasons.append("No city restriction")
    elif city_match:
        reasons.append(f"City match: {city_match}")
    else:
        reasons.append(f"None of {', '.join(criteria.cities)} mentioned")

    seniority_match: bool | None = None
    if criteria.seniority:
        level = criteria.seniority.lower()
        seniority_match = level in title or level in body
        if seniority_match:
            reasons.append(f"Seniority '{criteria.seniority}' mentioned")
        elif policy.require_seniority:
            reasons.append(f"Seniority '{criteria.seniority}' not mentioned (required)")
        else:
            reasons.append(f"Seniority '{criteria.seniority}' not mentioned (advisory)")

    accepted = role_match and bool(city_match)
    if policy.require_seniority and seniority_match is False:
        accepted = False

    return MatchDecision(
        accepted=accepted,
        reasons=reasons,
        role_match=role_match,
        city_match=bool(city_match),
        seniority_match=seniority_match,
    )


def resolve_location(
    snapshot: JobPageSnapshot,
    criteria: SearchCriteria,
    policy: MatchPolicy,
) -> str:
    """Location to report for a match, back-filled from the body when absent."""
    if snapshot.location and snapshot.location.strip():
        return snapshot.location.strip()

    body = snapshot.body_text.lower()
    for city in criteria.cities:
        if city.lower() in body:
            return city
    for city in policy.known_cities:
        if _contains_phrase(body, city):
            return city.title()

    if policy.default_location_to_first_city and criteria.cities:
        return criteria.cities[0]
    return policy.unknown_location


def _role_match(
    title: str, body: str, criteria: SearchCriteria, policy: MatchPolicy
) -> str | None:
    # A title hit on any role outranks body frequency.
    for role in criteria.expanded_roles:
        if role.lower() in title:
            return f"Role '{role}' in title"
    for role in criteria.expanded_roles:
        mentions = body.count(role.lower())
        if mentions >= policy.min_body_mentions:
            return f"Role '{role}' mentioned {mentions}x in description"
    return None


def _city_match(snapshot: JobPageSnapshot, criteria: SearchCriteria) -> str | bool:
    """The first requested city found on the page, True when unrestricted, else False."""
    if not criteria.cities:
        return True
    haystacks = (
        snapshot.body_text.lower(),
        (snapshot.location or "").lower(),
        snapshot.title.lower(),
    )
    for city in criteria.cities:
        city_lower = city.lower()
        if any(city_lower in h for h in haystacks):
            return city
    return False


def _negative_hit(title: str, url: str, policy: MatchPolicy) -> str | None:
    url_words = re.sub(r"[^a-z0-9]+", " ", url.lower())
    for term in policy.negative_terms:
        if _contains_phrase(title, term) or _contains_phrase(url_words, term):
            return term
    return None


def _contains_phrase(text: str, phrase: str) -> bool:
    pattern = r"\b" + r"\s+".join(re.escape(w) for w in phrase.lower().split()) + r"\b"
    return re.search(pattern, text) is not None
