"""Render a run's results as plain text and HTML email bodies."""

from __future__ import annotations

from html import escape

from careerscout.models.criteria import SearchCriteria
from careerscout.models.results import CompanyStatus, RunSummary


def render_subject(summary: RunSummary) -> str:
    return f"Your Job Search Results - {summary.total_jobs} Matches Found"


def _criteria_lines(criteria: SearchCriteria) -> list[str]:
    return [
        f"Roles: {', '.join(criteria.roles)}",
        f"Seniority: {criteria.seniority or 'Any'}",
        f"Cities: {', '.join(criteria.cities) or 'Any'}",
        f"Visa sponsorship: {'Required' if criteria.visa_required else 'Not required'}",
    ]


def render_text(criteria: SearchCriteria, summary: RunSummary) -> str:
    lines = ["YOUR JOB SEARCH RESULTS", "=" * 24, ""]
    lines.extend(_criteria_lines(criteria))
    lines.append("")
    lines.append(
        f"Searched {summary.total_companies} companies: {summary.successful_matches} with matches, "
        f"{summary.no_matches} without, {summary.errors} failed. {summary.total_jobs} jobs found."
    )

    for result in summary.results:
        if result.status != CompanyStatus.SUCCESS:
            continue
        lines.extend(["", f"## {result.company} ({len(result.jobs)} jobs)"])
        for i, match in enumerate(result.jobs, 1):
            job = match.job
            lines.append(f"{i}. {job.title} — {job.location}")
            lines.append(f"   {job.url}")
            lines.append(f"   {job.description}")
            lines.append("   CV changes:")
            lines.extend(f"     - {change}" for change in match.cv_changes)
            lines.append("   Customized CV:")
            lines.extend(f"     {line}" for line in match.customized_cv.splitlines())

    skipped = [r for r in summary.results if r.status != CompanyStatus.SUCCESS]
    if skipped:
        lines.extend(["", "Companies without matches:"])
        lines.extend(f"- {r.company}: {r.message or r.status.value}" for r in skipped)

    return "\n".join(lines) + "\n"


def render_html(criteria: SearchCriteria, summary: RunSummary) -> str:
    parts = [
        "<html><body style=\"font-family: Arial, sans-serif; max-width: 720px;\">",
        "<h1>Your Job Search Results</h1>",
        "<ul>",
    ]
    parts.extend(f"<li>{escape(line)}</li>" for line in _criteria_lines(criteria))
    parts.append("</ul>")
    parts.append(
        f"<p>Searched <b>{summary.total_companies}</b> companies and found "
        f"<b>{summary.total_jobs}</b> matching jobs.</p>"
    )

    for result in summary.results:
        if result.status != CompanyStatus.SUCCESS:
            continue
        parts.append(f"<h2>{escape(result.company)}</h2>")
        for match in result.jobs:
            job = match.job
            parts.append("<div style=\"border: 1px solid #ddd; padding: 12px; margin-bottom: 12px;\">")
            parts.append(f"<h3><a href=\"{escape(job.url)}\">{escape(job.title)}</a></h3>")
            parts.append(f"<p>📍 {escape(job.location)}</p>")
            parts.append(f"<p>{escape(job.description)}</p>")
            parts.append("<p><b>CV changes:</b></p><ul>")
            parts.extend(f"<li>{escape(change)}</li>" for change in match.cv_changes)
            parts.append("</ul>")
            parts.append(f"<pre style=\"white-space: pre-wrap;\">{escape(match.customized_cv)}</pre>")
            parts.append("</div>")

    skipped = [r for r in summary.results if r.status != CompanyStatus.SUCCESS]
    if skipped:
        parts.append("<h2>Companies without matches</h2><ul>")
        parts.extend(
            f"<li>{escape(r.company)}: {escape(r.message or r.status.value)}</li>" for r in skipped
        )
        parts.append("</ul>")

    parts.append("</body></html>")
    return "\n".join(parts)
