from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, NotificationType


def format_long_date(value: date) -> str:
    """'Thursday, March 14, 2024' (no zero padding on the day)."""
    return f"{value:%A, %B} {value.day}, {value.year}"


@dataclass(frozen=True)
class Notification:
    notification_id: int
    student_id: int
    type: NotificationType
    title: str
    message: str
    read: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NotificationIntent:
    """A notification that should be created once the attendance write has committed."""

    student_id: int
    type: NotificationType
    on_date: date

    @property
    def title(self) -> str:
        if self.type == NotificationType.ABSENCE:
            return "Absence Recorded"
        if self.type == NotificationType.LATE:
            return "Late Arrival Recorded"
        return "Attendance Update"

    @property
    def message(self) -> str:
        day = format_long_date(self.on_date)
        if self.type == NotificationType.ABSENCE:
            return (
                f"You were marked absent on {day}. "
                "If you believe this is an error, please contact your instructor."
            )
        if self.type == NotificationType.LATE:
            return f"You were marked late on {day}. Please try to arrive on time for future classes."
        return f"Your attendance for {day} was updated."


_TYPE_BY_STATUS = {
    AttendanceStatus.ABSENT: NotificationType.ABSENCE,
    AttendanceStatus.LATE: NotificationType.LATE,
}


def intent_for_status(student_id: int, status: AttendanceStatus, on_date: date) -> Optional[NotificationIntent]:
    """Absent and late produce one intent each; present produces none."""
    kind = _TYPE_BY_STATUS.get(status)
    if kind is None:
        return None
    return NotificationIntent(student_id=int(student_id), type=kind, on_date=on_date)
