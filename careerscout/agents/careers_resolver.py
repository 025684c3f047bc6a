"""Resolve each company's careers page URL with the completion service."""

from __future__ import annotations

import logging
import re
import time
from urllib.parse import urlparse

from careerscout.errors import ParseError, ServiceError
from careerscout.models.job import CompanyTarget, Confidence
from careerscout.models.llm import CareersUrlOutput, StageResult
from careerscout.tools.json_extract import parse_llm_output

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert at finding company careers pages. "
    "You always return valid JSON objects with careersUrl and confidence fields."
)

URL_PROMPT = """For the company "{company}", what is the most likely URL for their careers/jobs page?

Return ONLY a JSON object in this exact format, with no additional text:
{{
  "careersUrl": "https://example.com/careers",
  "confidence": "high|medium|low"
}}

Common patterns:
- https://company.com/careers
- https://company.com/jobs
- https://careers.company.com
- https://jobs.company.com
- https://company.com/about/careers

If you're not sure of the exact URL, provide your best guess based on common patterns.
"""


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "", name.lower())
    return slug or "company"


def fallback_careers_url(company: str) -> str:
    return f"https://{slugify(company)}.com/careers"


def resolve_careers_url(company: str, client) -> StageResult[CompanyTarget]:
    """Best-guess careers URL for one company, or the synthesized low-confidence fallback."""
    try:
        raw = client.complete(
            SYSTEM_PROMPT, URL_PROMPT.format(company=company), temperature=0.3, max_tokens=150
        )
        output = parse_llm_output(raw, CareersUrlOutput)
        parsed = urlparse(output.careers_url.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ParseError(f"Not an absolute URL: {output.careers_url!r}")
    except (ServiceError, ParseError) as e:
        url = fallback_careers_url(company)
        logger.warning("Careers URL lookup failed for %s (%s) — guessing %s", company, e, url)
        return StageResult.fallback(
            CompanyTarget(company=company, careers_url=url, confidence=Confidence.LOW),
            f"Careers URL for {company} guessed: {e}",
        )

    return StageResult.ok(
        CompanyTarget(
            company=company,
            careers_url=output.careers_url.strip(),
            confidence=Confidence(output.confidence),
        )
    )


def resolve_careers_urls(
    companies: list[str],
    client,
    delay_s: float = 0.0,
) -> list[StageResult[CompanyTarget]]:
    """Resolve every company in input order. One failure never affects the others."""
    results: list[StageResult[CompanyTarget]] = []
    for i, company in enumerate(companies):
        result = resolve_careers_url(company, client)
        logger.info(
            "Careers URL %d/%d: %s → %s (%s)",
            i + 1,
            len(companies),
            company,
            result.value.careers_url,
            result.value.confidence.value,
        )
        results.append(result)
        if delay_s > 0 and i < len(companies) - 1:
            time.sleep(delay_s)
    return results
