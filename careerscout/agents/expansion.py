"""LLM-assisted expansion of the seed company list and the target roles."""

from __future__ import annotations

import logging

from careerscout.errors import ParseError, ServiceError
from careerscout.models.criteria import normalize_key, unique_ordered
from careerscout.models.llm import CompanyExpansionOutput, RoleExpansionOutput, StageResult
from careerscout.tools.json_extract import parse_llm_output

logger = logging.getLogger(__name__)

COMPANY_SYSTEM_PROMPT = "You are a job search expert. Return only valid JSON."

COMPANY_PROMPT = """Given these companies: {companies}
And these target roles: {roles}

Suggest {count} similar companies that hire for these roles. Prefer companies
in the same industry, of a similar size and stage, that are known to hire for
these roles.

Return ONLY valid JSON:
{{"companies": ["Company 1", "Company 2", ...]}}
"""

ROLE_SYSTEM_PROMPT = "You are a recruitment expert. Return only valid JSON."

ROLE_PROMPT = """Generate {count} similar job titles for: {roles}
Use titles that companies actually put on job postings for the same work.

Return ONLY valid JSON:
{{"expandedRoles": ["role 1", "role 2", ...]}}
"""


def expand_companies(
    seeds: list[str],
    roles: list[str] | tuple[str, ...],
    client,
    max_companies: int = 15,
) -> StageResult[list[str]]:
    """Seed companies followed by model-suggested siblings, de-duplicated and capped.

    Falls back to the seed list unchanged when the service fails or its
    answer cannot be parsed.
    """
    prompt = COMPANY_PROMPT.format(
        companies=", ".join(seeds),
        roles=", ".join(roles) or "Any",
        count=max(max_companies - len(seeds), 1),
    )
    try:
        raw = client.complete(COMPANY_SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=400)
        output = parse_llm_output(raw, CompanyExpansionOutput)
    except (ServiceError, ParseError) as e:
        logger.warning("Company expansion failed, using original list: %s", e)
        return StageResult.fallback(list(seeds), f"Company expansion unavailable: {e}")

    merged = unique_ordered(list(seeds) + output.companies)[:max_companies]
    seed_keys = {normalize_key(s) for s in seeds}
    added = [c for c in merged if normalize_key(c) not in seed_keys]
    logger.info("Expanded %d seed companies with %d suggestions", len(seeds), len(added))
    return StageResult.ok(merged)


def expand_roles(
    roles: list[str] | tuple[str, ...],
    client,
    max_suggestions: int = 3,
) -> StageResult[tuple[str, ...]]:
    """Original roles followed by up to ``max_suggestions`` similar titles.

    The originals are always kept first; on any failure only they are returned.
    """
    originals = tuple(unique_ordered(list(roles)))
    if max_suggestions <= 0 or not originals:
        return StageResult.ok(originals)

    prompt = ROLE_PROMPT.format(count=max_suggestions, roles=", ".join(originals))
    try:
        raw = client.complete(ROLE_SYSTEM_PROMPT, prompt, temperature=0.3, max_tokens=200)
        output = parse_llm_output(raw, RoleExpansionOutput)
    except (ServiceError, ParseError) as e:
        logger.warning("Role expansion failed, matching on original roles only: %s", e)
        return StageResult.fallback(originals, f"Role expansion unavailable: {e}")

    original_keys = {normalize_key(r) for r in originals}
    suggestions = [
        r for r in unique_ordered(output.expanded_roles) if normalize_key(r) not in original_keys
    ][:max_suggestions]
    logger.info("Expanded roles: %s", ", ".join(originals + tuple(suggestions)))
    return StageResult.ok(originals + tuple(suggestions))
