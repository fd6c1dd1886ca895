from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..notifications.model import NotificationIntent
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance on one calendar day."""

    attendance_id: int
    student_id: int
    attendance_date: date
    status: AttendanceStatus
    remarks: Optional[str] = None
    class_id: Optional[int] = None
    marked_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "remarks": self.remarks,
            "classId": self.class_id,
            "markedBy": self.marked_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class AttendanceEntry:
    """One (student, status, remarks) line of a bulk submission."""

    student_id: int
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AttendanceFilter:
    """Conjunctive filters for attendance listings; None means "any"."""

    on_date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    student_id: Optional[int] = None
    class_id: Optional[int] = None
    class_ids: Optional[tuple[int, ...]] = None
    status: Optional[AttendanceStatus] = None

    def matches(self, record: AttendanceRecord) -> bool:
        d = record.attendance_date
        if self.on_date is not None and d != self.on_date:
            return False
        if self.start_date is not None and d < self.start_date:
            return False
        if self.end_date is not None and d > self.end_date:
            return False
        if self.student_id is not None and record.student_id != self.student_id:
            return False
        if self.class_id is not None and record.class_id != self.class_id:
            return False
        if self.class_ids is not None and record.class_id not in self.class_ids:
            return False
        if self.status is not None and record.status != self.status:
            return False
        return True


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model: a record joined with its student and (optional) class."""

    record: AttendanceRecord
    student: Optional[Student] = None
    class_name: Optional[str] = None
    class_code: Optional[str] = None
    class_subject: Optional[str] = None

    def to_dict(self) -> dict:
        out = self.record.to_dict()
        out["student"] = self.student.to_brief() if self.student else None
        if self.record.class_id is not None:
            out["class"] = {
                "id": self.record.class_id,
                "name": self.class_name,
                "code": self.class_code,
                "subject": self.class_subject,
            }
        else:
            out["class"] = None
        return out


@dataclass(frozen=True)
class MarkOutcome:
    """Result of a single mark: the stored row plus post-commit notification intents."""

    record: AttendanceRecord
    notifications: tuple[NotificationIntent, ...] = ()
    delivered: int = 0


@dataclass(frozen=True)
class BulkOutcome:
    count: int
    notifications: tuple[NotificationIntent, ...] = field(default_factory=tuple)
    delivered: int = 0


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "late": self.late, "total": self.total}

    @classmethod
    def from_statuses(cls, statuses) -> "StatusCounts":
        present = absent = late = 0
        for status in statuses:
            if status == AttendanceStatus.PRESENT:
                present += 1
            elif status == AttendanceStatus.ABSENT:
                absent += 1
            elif status == AttendanceStatus.LATE:
                late += 1
        return cls(present=present, absent=absent, late=late)
