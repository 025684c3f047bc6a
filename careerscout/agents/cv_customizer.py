"""Tailor the template CV to a matched job posting."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from careerscout.errors import ParseError, ServiceError
from careerscout.models.job import JobListing
from careerscout.models.llm import CvCustomizationOutput, StageResult
from careerscout.tools.json_extract import parse_llm_output

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_CV = "Professional with experience in software development and analytics."

UNAVAILABLE_CHANGE = "CV customization unavailable — template CV returned unchanged"

SYSTEM_PROMPT = "You are a professional CV writer. You always return valid JSON with customized CVs."

CV_PROMPT = """Customize this CV for the job below.

Job: {title} at {company}
Location: {location}
Description: {description}

Original CV:
{template}

Rewrite the summary and shift the emphasis towards the experience and skills
this role asks for. Keep the CV's structure, sections and facts; do not invent
employers, dates or qualifications.

Return ONLY valid JSON:
{{
  "customizedCv": "Full customized CV text",
  "changes": ["change 1", "change 2", "change 3"]
}}
"""


class CustomizedCv(BaseModel):
    cv: str
    changes: list[str] = Field(default_factory=list)


def load_template_cv(filepath: str | None) -> str:
    """Read the uploaded template CV as plain text.

    ``.pdf`` goes through pypdf and ``.docx`` through python-docx; anything
    else is read as text. A missing or unreadable file yields a generic
    one-line CV so the run can still produce output.
    """
    if not filepath:
        logger.warning("No template CV configured — using generic CV text")
        return DEFAULT_TEMPLATE_CV

    path = Path(filepath)
    if not path.exists():
        logger.warning("Template CV not found at %s — using generic CV text", filepath)
        return DEFAULT_TEMPLATE_CV

    try:
        suffix = path.suffix.lower()
        if suffix == ".pdf":
            from pypdf import PdfReader

            reader = PdfReader(str(path))
            text = "\n".join(page.extract_text() or "" for page in reader.pages)
        elif suffix == ".docx":
            import docx

            document = docx.Document(str(path))
            text = "\n".join(p.text for p in document.paragraphs)
        else:
            text = path.read_text(encoding="utf-8", errors="ignore")
    except Exception as e:
        logger.warning("Could not read template CV %s: %s — using generic CV text", filepath, e)
        return DEFAULT_TEMPLATE_CV

    text = text.strip()
    if not text:
        logger.warning("Template CV %s is empty — using generic CV text", filepath)
        return DEFAULT_TEMPLATE_CV

    logger.info("Loaded template CV from %s (%d chars)", filepath, len(text))
    return text


def unchanged_cv(template_cv: str, reason: str) -> StageResult[CustomizedCv]:
    """The template CV as-is, flagged as a fallback."""
    return StageResult.fallback(CustomizedCv(cv=template_cv, changes=[UNAVAILABLE_CHANGE]), reason)


def customize_cv(
    listing: JobListing,
    company: str,
    template_cv: str,
    client,
    max_template_chars: int = 1500,
) -> StageResult[CustomizedCv]:
    """Rewrite the CV for one job; the untouched template is the fallback."""
    prompt = CV_PROMPT.format(
        title=listing.title,
        company=company,
        location=listing.location,
        description=listing.description[:500],
        template=template_cv[:max_template_chars],
    )
    try:
        raw = client.complete(SYSTEM_PROMPT, prompt, temperature=0.6, max_tokens=2000)
        output = parse_llm_output(raw, CvCustomizationOutput)
    except (ServiceError, ParseError) as e:
        logger.warning("CV customization failed for '%s' at %s: %s", listing.title, company, e)
        return unchanged_cv(template_cv, f"CV customization for {listing.title} at {company} unavailable: {e}")

    changes = output.changes or ["Tailored CV for the role"]
    return StageResult.ok(CustomizedCv(cv=output.customized_cv, changes=changes))
