"""Criteria parser — reads a criteria.md request file into a Submission."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from careerscout.models.criteria import Submission

logger = logging.getLogger(__name__)


def parse_criteria(filepath: str = "criteria.md") -> Submission:
    """Parse a human-written criteria.md file into a Submission.

    The parser looks for ``- Key: value`` bullet lines and is intentionally
    lenient about headings, casing and spacing. Lets a run start from a file
    instead of the submission store.
    """
    path = Path(filepath)
    if not path.exists():
        logger.warning("Criteria file not found at %s — using empty request", filepath)
        return Submission(id=path.stem)

    raw_text = path.read_text(encoding="utf-8")
    logger.info("Loaded criteria from %s (%d chars)", filepath, len(raw_text))

    data: dict = {"id": path.stem}
    data["email"] = _parse_value(raw_text, r"e-?mail") or ""
    data["companies"] = _parse_list(raw_text, r"(?:target\s+)?compan(?:y|ies)")
    data["roles"] = _parse_list(raw_text, r"roles?")
    data["seniority"] = _parse_value(raw_text, r"seniority")
    data["cities"] = _parse_list(raw_text, r"(?:cities|city|locations?)")
    data["visa_required"] = _parse_bool(raw_text, r"visa(?:\s+sponsorship)?(?:\s+required)?", default=False)
    data["template_path"] = _parse_value(raw_text, r"(?:template\s+cv|cv|resume)")
    frequency = _parse_value(raw_text, r"frequency")
    if frequency:
        data["frequency"] = frequency.lower()

    submission = Submission(**data)
    logger.info(
        "Parsed criteria: %d companies, %d roles, %d cities, seniority=%s",
        len(submission.companies),
        len(submission.roles),
        len(submission.cities),
        submission.seniority or "any",
    )
    return submission


# =============================================================================
# Parsing helpers
# =============================================================================


def _line_pattern(key: str) -> str:
    return r"^[ \t]*[-*]?[ \t]*" + key + r"[ \t]*:[ \t]*(.*)$"


def _parse_value(text: str, key: str) -> str | None:
    """Return the stripped value after ``key:``, or None if absent or blank."""
    match = re.search(_line_pattern(key), text, re.IGNORECASE | re.MULTILINE)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def _parse_bool(text: str, key: str, default: bool = False) -> bool:
    value = _parse_value(text, key)
    if value is None:
        return default
    return value.lower() in ("yes", "true", "required", "y")


def _parse_list(text: str, key: str) -> list[str]:
    """Extract a comma-separated list following ``key:``."""
    value = _parse_value(text, key)
    if not value:
        return []
    items = [item.strip().strip("-").strip() for item in value.split(",")]
    return [item for item in items if item][:200]
