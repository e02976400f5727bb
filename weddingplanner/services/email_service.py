"""
Outgoing email over SMTP
"""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from weddingplanner.core.config import settings

logger = logging.getLogger(__name__)

@dataclass
class SendResult:
    status: str  # sent, failed, skipped
    error: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.status == "sent"

class EmailService:
    """Thin SMTP sender; an unconfigured transport skips instead of raising"""

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.SMTP_HOST)

    @staticmethod
    def build_message(
        to_email: str,
        to_name: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        reply_to: Optional[str] = None
    ) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['From'] = formataddr((from_name or "", from_email or settings.EMAIL_FROM))
        msg['To'] = formataddr((to_name or "", to_email))
        msg['Subject'] = subject
        if reply_to:
            msg['Reply-To'] = reply_to

        # Plain text first so clients prefer the HTML part
        if body_text:
            msg.attach(MIMEText(body_text, 'plain'))
        msg.attach(MIMEText(body_html, 'html'))
        return msg

    @staticmethod
    def send(
        to_email: Optional[str],
        to_name: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        reply_to: Optional[str] = None
    ) -> SendResult:
        if not to_email:
            return SendResult("skipped", "Guest has no email address")
        if not EmailService.is_configured():
            logger.info(f"SMTP not configured, skipping email to {to_email}")
            return SendResult("skipped", "Email delivery is not configured")

        msg = EmailService.build_message(
            to_email, to_name, subject, body_html, body_text, from_email, from_name, reply_to
        )
        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return SendResult("failed", str(e))

        logger.info(f"Email sent to {to_email}")
        return SendResult("sent")
