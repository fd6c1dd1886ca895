from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Who is logged in; stored in the Flask session."""

    ADMIN = "admin"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance outcome stored in the `attendance.status` column."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class NotificationType(str, Enum):
    ABSENCE = "absence"
    LATE = "late"
    GENERAL = "general"


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
