from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType

from .attendance.cooldown import CooldownGuard
from .attendance.factory import TransitionFactory
from .attendance.report_service import AttendanceReportService
from .attendance.service import AttendanceService
from .children.service import ChildService
from .core.constants import DEFAULT_NOTIFY_TIMEOUT_SECONDS, DEFAULT_SCAN_COOLDOWN_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import MySQLUnitOfWork, UnitOfWork
from .messaging.email_sender import EmailSender, LoggingEmailSender, SmtpEmailSender, SmtpSettings
from .messaging.sms_sender import LoggingSmsSender, SmsSender, TwilioSettings, TwilioSmsSender
from .messaging.templates import MessageTemplates
from .notifications.service import NotificationFanout, NotificationService
from .pickup.service import PickupService


@dataclass(frozen=True)
class Container:
    uow: UnitOfWork

    fanout: NotificationFanout
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    pickup_service: PickupService
    notification_service: NotificationService
    child_service: ChildService


def build_services(
    uow: UnitOfWork,
    *,
    email_sender: EmailSender,
    sms_sender: SmsSender,
    cooldown_seconds: float = DEFAULT_SCAN_COOLDOWN_SECONDS,
    templates: MessageTemplates | None = None,
) -> Container:
    templates = templates or MessageTemplates()
    fanout = NotificationFanout(uow, email_sender, templates)
    return Container(
        uow=uow,
        fanout=fanout,
        attendance_service=AttendanceService(
            uow,
            fanout,
            cooldown=CooldownGuard(cooldown_seconds),
            transitions=TransitionFactory(),
        ),
        report_service=AttendanceReportService(uow),
        pickup_service=PickupService(uow, sms_sender, templates),
        notification_service=NotificationService(uow),
        child_service=ChildService(uow),
    )


def _email_sender(settings: ModuleType, timeout: float) -> EmailSender:
    host = getattr(settings, "SMTP_HOST", "")
    if not host:
        return LoggingEmailSender()
    return SmtpEmailSender(
        SmtpSettings(
            host=host,
            port=int(getattr(settings, "SMTP_PORT", 587)),
            username=getattr(settings, "SMTP_USER", "") or None,
            password=getattr(settings, "SMTP_PASSWORD", "") or None,
            from_address=getattr(settings, "SMTP_FROM", "no-reply@kindergarten.local"),
            use_tls=bool(getattr(settings, "SMTP_USE_TLS", True)),
            timeout=timeout,
        )
    )


def _sms_sender(settings: ModuleType, timeout: float) -> SmsSender:
    sid = getattr(settings, "TWILIO_ACCOUNT_SID", "")
    token = getattr(settings, "TWILIO_AUTH_TOKEN", "")
    number = getattr(settings, "TWILIO_PHONE_NUMBER", "")
    if not (sid and token and number):
        return LoggingSmsSender()
    return TwilioSmsSender(TwilioSettings(account_sid=sid, auth_token=token, from_number=number, timeout=timeout))


def build_container(settings: ModuleType) -> Container:
    """Wire MySQL and the configured email/SMS senders into the services."""

    conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    timeout = float(getattr(settings, "NOTIFY_TIMEOUT_SECONDS", DEFAULT_NOTIFY_TIMEOUT_SECONDS))

    return build_services(
        MySQLUnitOfWork(conn),
        email_sender=_email_sender(settings, timeout),
        sms_sender=_sms_sender(settings, timeout),
        cooldown_seconds=float(getattr(settings, "SCAN_COOLDOWN_SECONDS", DEFAULT_SCAN_COOLDOWN_SECONDS)),
    )
