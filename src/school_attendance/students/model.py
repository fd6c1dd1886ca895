from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on the roster.

    `student_code` is the human-readable school id, distinct from the row id.
    """

    student_id: int
    student_code: str
    name: str
    email: str
    course: str
    year: int
    section: str
    password_hash: str = ""
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "studentId": self.student_code,
            "name": self.name,
            "email": self.email,
            "course": self.course,
            "year": self.year,
            "section": self.section,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def to_brief(self) -> dict:
        return {
            "id": self.student_id,
            "studentId": self.student_code,
            "name": self.name,
            "course": self.course,
            "year": self.year,
            "section": self.section,
        }


@dataclass(frozen=True)
class StudentFilter:
    """Exact-match roster filters; None means "any"."""

    course: Optional[str] = None
    year: Optional[int] = None
    section: Optional[str] = None
    search: Optional[str] = None

    def matches(self, student: Student) -> bool:
        if self.course is not None and student.course != self.course:
            return False
        if self.year is not None and student.year != self.year:
            return False
        if self.section is not None and student.section != self.section:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (student.name, student.student_code, student.email)
            if not any(needle in value.lower() for value in haystack):
                return False
        return True
