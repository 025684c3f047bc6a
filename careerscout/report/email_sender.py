"""SMTP email sender for job match results."""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

logger = logging.getLogger(__name__)


def send_report_email(
    html_body: str,
    text_body: str,
    subject: str,
    from_addr: str,
    to_addr: str,
    username: str,
    password: str,
    smtp_host: str = "smtp.gmail.com",
    smtp_port: int = 587,
) -> None:
    """Send a multipart (text + HTML) email via SMTP with STARTTLS.

    Raises:
        smtplib.SMTPException, OSError: If the email cannot be sent.
    """
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"CareerScout <{from_addr}>"
    msg["To"] = to_addr

    # Clients render the last part they support, so HTML goes last
    msg.attach(MIMEText(text_body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))

    logger.info("Connecting to SMTP (%s:%d)...", smtp_host, smtp_port)

    with smtplib.SMTP(smtp_host, smtp_port) as server:
        server.ehlo()
        server.starttls()
        server.ehlo()
        server.login(username, password)
        server.sendmail(from_addr, to_addr, msg.as_string())

    logger.info("Email sent successfully: '%s' → %s", subject, to_addr)
