from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import requests

from ..core.constants import DEFAULT_NOTIFY_TIMEOUT_SECONDS
from ..core.exceptions import NotificationDeliveryFailure

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class SmsSender(Protocol):
    def send(self, *, to: str, body: str) -> None:
        """Deliver one SMS or raise NotificationDeliveryFailure."""

        raise NotImplementedError


@dataclass(frozen=True)
class TwilioSettings:
    account_sid: str
    auth_token: str
    from_number: str
    timeout: float = DEFAULT_NOTIFY_TIMEOUT_SECONDS
    api_base: str = TWILIO_API_BASE


class TwilioSmsSender(SmsSender):
    """Twilio Messages REST API."""

    def __init__(self, settings: TwilioSettings, session: requests.Session | None = None):
        self._settings = settings
        self._session = session or requests.Session()

    def send(self, *, to: str, body: str) -> None:
        s = self._settings
        url = f"{s.api_base}/Accounts/{s.account_sid}/Messages.json"
        try:
            r = self._session.post(
                url,
                data={"To": to, "From": s.from_number, "Body": body},
                auth=(s.account_sid, s.auth_token),
                timeout=s.timeout,
            )
        except requests.RequestException as e:
            raise NotificationDeliveryFailure(f"SMS gateway unavailable: {e}") from e

        if r.status_code >= 300:
            raise NotificationDeliveryFailure(f"SMS to {to} rejected ({r.status_code}): {r.text[:200]}")

        logger.info("SMS sent to %s", to)


class LoggingSmsSender(SmsSender):
    """Development mode: log the SMS instead of sending it."""

    def send(self, *, to: str, body: str) -> None:
        logger.info("DEV sms to=%s body=%r", to, body)
