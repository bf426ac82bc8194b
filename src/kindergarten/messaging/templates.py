from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional

from ..core.enums import ChildStatus, NotificationType


@dataclass(frozen=True)
class MessageTemplates:
    """Text used for notifications, emails and SMS.

    Placeholders: {child}, {parent}, {time}, {date}, {name}.
    """

    check_in_notification: str = "{child} has been checked in at {time}"
    pick_up_notification: str = "{child} has been picked up at {time}"

    email_subject: str = "Attendance update for {child}"
    email_check_in: str = "{child} arrived at the kindergarten on {date} at {time}."
    email_pick_up: str = "{child} left the kindergarten on {date} at {time}."

    sms_picked_up_by_parent: str = "{child} has been picked up by the parent at {time}."
    sms_picked_up_by_other: str = "{child} has been picked up by {name} at {time}."

    def notification_message(self, *, type: NotificationType, child_name: str, timestamp: datetime) -> str:
        template = self.check_in_notification if type == NotificationType.CHECK_IN else self.pick_up_notification
        return template.format(child=child_name, time=_time(timestamp), date=_date(timestamp))

    def email(self, *, child_name: str, parent_name: Optional[str], status: ChildStatus, timestamp: datetime) -> tuple[str, str]:
        line = self.email_check_in if status == ChildStatus.PRESENT else self.email_pick_up
        text = line.format(child=child_name, time=_time(timestamp), date=_date(timestamp))
        greeting = f"Dear {parent_name}," if parent_name else "Hello,"
        body = (
            "<html><body>"
            f"<p>{escape(greeting)}</p>"
            f"<p>{escape(text)}</p>"
            "<p>This is an automated message, please do not reply.</p>"
            "</body></html>"
        )
        return self.email_subject.format(child=child_name), body

    def pickup_sms(self, *, child_name: str, picked_up_by: Optional[str], timestamp: datetime) -> str:
        if picked_up_by:
            return self.sms_picked_up_by_other.format(child=child_name, name=picked_up_by, time=_time(timestamp))
        return self.sms_picked_up_by_parent.format(child=child_name, time=_time(timestamp))


def _time(value: datetime) -> str:
    return value.strftime("%H:%M")


def _date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")
