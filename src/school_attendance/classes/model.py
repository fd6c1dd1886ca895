from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..students.model import Student


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class students join with its code."""

    class_id: int
    name: str
    code: str
    description: Optional[str] = None
    subject: Optional[str] = None
    schedule: Optional[str] = None
    is_active: bool = True
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    # read-model extras filled by list/get queries
    student_count: int = 0
    instructor_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "subject": self.subject,
            "schedule": self.schedule,
            "isActive": self.is_active,
            "createdBy": self.created_by,
            "createdAt": _iso(self.created_at),
            "studentCount": self.student_count,
            "instructor": self.instructor_name,
        }


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    class_id: int
    student_id: int
    enrolled_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.enrollment_id,
            "classId": self.class_id,
            "studentId": self.student_id,
            "enrolledAt": _iso(self.enrolled_at),
        }


@dataclass(frozen=True)
class EnrolledStudent:
    """Read-model: a student row seen through a class roster."""

    student: Student
    enrollment_id: int
    enrolled_at: Optional[datetime]

    def to_dict(self) -> dict:
        out = self.student.to_dict()
        out.update({"enrollmentId": self.enrollment_id, "enrolledAt": _iso(self.enrolled_at)})
        return out


@dataclass(frozen=True)
class StudentClass:
    """Read-model: a class seen from the enrolled student's side."""

    school_class: SchoolClass
    enrollment_id: int
    enrolled_at: Optional[datetime]

    def to_dict(self) -> dict:
        out = self.school_class.to_dict()
        out.update({"enrollmentId": self.enrollment_id, "enrolledAt": _iso(self.enrolled_at)})
        return out
