"""Notification dispatcher: hands a finished run to the seeker by email."""

from __future__ import annotations

import logging

from careerscout.config import Settings
from careerscout.models.criteria import SearchCriteria
from careerscout.models.results import RunSummary
from careerscout.report.email_sender import send_report_email
from careerscout.report.renderer import render_html, render_subject, render_text

logger = logging.getLogger(__name__)


def dispatch_results(
    email: str,
    criteria: SearchCriteria,
    summary: RunSummary,
    settings: Settings,
) -> bool:
    """Render and send the results. Returns True if an email actually went out.

    Without SMTP credentials the email is logged as a preview instead.
    """
    subject = render_subject(summary)
    text_body = render_text(criteria, summary)

    if not settings.smtp_configured:
        logger.info("SMTP not configured — logging email preview instead")
        logger.info("\n📧 ===== EMAIL PREVIEW =====\nTo: %s\nSubject: %s\n\n%s===== END EMAIL =====",
                    email, subject, text_body)
        return False

    send_report_email(
        html_body=render_html(criteria, summary),
        text_body=text_body,
        subject=subject,
        from_addr=settings.smtp_sender or settings.smtp_user or "",
        to_addr=email,
        username=settings.smtp_user or "",
        password=settings.smtp_password or "",
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
    )
    return True
