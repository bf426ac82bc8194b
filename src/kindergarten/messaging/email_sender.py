from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

from ..core.constants import DEFAULT_NOTIFY_TIMEOUT_SECONDS
from ..core.exceptions import NotificationDeliveryFailure

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, *, to: str, subject: str, html_body: str) -> None:
        """Deliver one message or raise NotificationDeliveryFailure."""

        raise NotImplementedError


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    from_address: str = "no-reply@kindergarten.local"
    use_tls: bool = True
    timeout: float = DEFAULT_NOTIFY_TIMEOUT_SECONDS


class SmtpEmailSender(EmailSender):
    def __init__(self, settings: SmtpSettings):
        self._settings = settings

    def send(self, *, to: str, subject: str, html_body: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._settings.from_address
        msg["To"] = to
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html_body, subtype="html")

        s = self._settings
        try:
            with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as smtp:
                if s.use_tls:
                    smtp.starttls()
                if s.username:
                    smtp.login(s.username, s.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationDeliveryFailure(f"Email to {to} failed: {e}") from e

        logger.info("Email sent to %s: %s", to, subject)


class LoggingEmailSender(EmailSender):
    """Development mode: log the email instead of sending it."""

    def send(self, *, to: str, subject: str, html_body: str) -> None:
        logger.info("DEV email to=%s subject=%r body=%s", to, subject, html_body)
