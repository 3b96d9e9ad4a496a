"""Email notifier for newly found rental listings."""

import logging
import os
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models.listing import ListingRecord
from .changes import NotificationSummary

logger = logging.getLogger(__name__)


class EmailNotifier:
    """
    Send "new listings" emails over SMTP.

    Credentials come from the environment (SMTP_HOST, SMTP_PORT, SMTP_USER,
    SMTP_PASSWORD, SMTP_TIMEOUT). One message is sent per recipient so the
    summary can report delivered and failed counts separately.
    """

    TEMPLATE_NAME = "new_listings.html"

    def __init__(self, recipients: Sequence[str], template_dir: Optional[str] = None):
        self.recipients = [r for r in recipients if r and r != "your_email@example.com"]

        self.smtp_host = os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_password = os.getenv("SMTP_PASSWORD")
        self.smtp_timeout = float(os.getenv("SMTP_TIMEOUT", "30"))

        if template_dir is None:
            # Default to templates/ relative to project root
            template_dir = Path(__file__).parent.parent.parent.parent / "templates"
        self.template_dir = Path(template_dir)

        if self.template_dir.exists():
            self.jinja_env = Environment(
                loader=FileSystemLoader(str(self.template_dir)),
                autoescape=True,
            )
        else:
            self.jinja_env = None
            logger.warning(f"Template directory not found: {self.template_dir}")

    def is_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password and self.recipients)

    def send_new_listings(self, records: Sequence[ListingRecord]) -> NotificationSummary:
        """
        Email the batch of new listings to every recipient.

        Returns:
            NotificationSummary with one ``sent`` or ``errors`` per recipient
        """
        if not records:
            return NotificationSummary()
        if not self.is_configured():
            logger.warning("Email not configured - check SMTP_* variables and recipients")
            return NotificationSummary()

        count = len(records)
        subject = f"{count} nieuwe huurwoning{'en' if count != 1 else ''} gevonden"
        html_content = self.render(records)

        sent = errors = 0
        for recipient in self.recipients:
            if self._send_via_smtp(recipient, subject, html_content):
                sent += 1
            else:
                errors += 1
        return NotificationSummary(sent=sent, errors=errors)

    def render(self, records: Sequence[ListingRecord]) -> str:
        context = {
            "listings": list(records),
            "date": datetime.now().strftime("%d-%m-%Y"),
            "total_listings": len(records),
        }
        if self.jinja_env is None:
            return self._generate_fallback_html(context)

        try:
            template = self.jinja_env.get_template(self.TEMPLATE_NAME)
            return template.render(**context)
        except Exception as e:
            logger.warning(f"Failed to render template: {e}")
            return self._generate_fallback_html(context)

    def _generate_fallback_html(self, context: dict) -> str:
        """Generate simple HTML email if template is unavailable."""
        listings: List[ListingRecord] = context["listings"]
        html = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #2563eb;">Nieuwe huurwoningen</h1>
            <p>{context['date']} - <strong>{context['total_listings']}</strong> nieuwe woningen:</p>
        """

        for record in listings:
            html += f"""
            <div style="border: 1px solid #ddd; padding: 15px; margin: 10px 0; border-radius: 8px;">
                <h3 style="margin: 0;">{record.title[:60]}</h3>
                <p style="color: #059669; font-size: 18px; font-weight: bold;">{record.display_price()}</p>
                <p>{record.display_size()} | {record.agency_name}</p>
                <a href="{record.source_url}" style="color: #2563eb;">Bekijk woning</a>
            </div>
            """

        html += """
        </body>
        </html>
        """
        return html

    def _send_via_smtp(self, recipient: str, subject: str, html_content: str) -> bool:
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = self.smtp_user
            msg["To"] = recipient
            msg.attach(MIMEText(html_content, "html"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.smtp_user, [recipient], msg.as_string())

            logger.info(f"Email sent to {recipient}")
            return True

        except smtplib.SMTPAuthenticationError:
            logger.error("SMTP authentication failed. For Gmail, use an App Password.")
            return False
        except Exception as e:
            logger.error(f"Failed to send email to {recipient}: {e}")
            return False
