from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"
    PARENT = "PARENT"


class ChildStatus(str, Enum):
    """Current, authoritative status stored on the child row."""

    ABSENT = "ABSENT"
    PRESENT = "PRESENT"
    PICKUP_REQUESTED = "PICKUP_REQUESTED"
    PICKED_UP = "PICKED_UP"


class AttendanceStatus(str, Enum):
    """Status of one attendance record (ledger entry)."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    PICKED_UP = "PICKED_UP"


class NotificationType(str, Enum):
    CHECK_IN = "CHECK_IN"
    PICK_UP = "PICK_UP"


class PickupActor(str, Enum):
    """Who collected the child in a manual pickup."""

    PARENT = "parent"
    OTHER = "other"
