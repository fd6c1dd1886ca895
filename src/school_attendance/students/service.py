from __future__ import annotations

from typing import Any, Optional

from werkzeug.security import generate_password_hash

from ..common.pagination import Page, normalize_page
from ..common.validators import clean_optional, require_int, require_min_length, require_non_empty
from ..core.constants import DEFAULT_PAGE_SIZE, MIN_PASSWORD_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from .model import Student, StudentFilter
from .repository import StudentRepository


class StudentService:
    """Use case: manage the student roster (admin)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(
        self,
        *,
        course: Optional[str] = None,
        year: Optional[int] = None,
        section: Optional[str] = None,
        search: Optional[str] = None,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Page[Student]:
        page, limit = normalize_page(page, limit, default_limit=DEFAULT_PAGE_SIZE)
        flt = StudentFilter(
            course=clean_optional(course),
            year=year,
            section=clean_optional(section),
            search=clean_optional(search),
        )
        items = self._students.list_filtered(flt, offset=(page - 1) * limit, limit=limit)
        total = self._students.count_filtered(flt)
        return Page(items=items, page=page, limit=limit, total=total)

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create_student(
        self,
        *,
        student_code: str,
        name: str,
        email: str,
        password: str,
        course: str,
        year: Any,
        section: str,
    ) -> Student:
        student_code = require_non_empty(student_code, "Student ID")
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email").lower()
        course = require_non_empty(course, "Course")
        section = require_non_empty(section, "Section")
        year = require_int(year, "Year")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._students.find_conflict(student_code=student_code, email=email):
            raise ValidationError("Student ID or email already exists")

        new_id = self._students.create(
            student_code=student_code,
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            course=course,
            year=year,
            section=section,
        )
        return self.get_student(new_id)

    def update_student(self, student_id: int, data: dict) -> Student:
        """Partial update; only non-empty fields are applied."""
        current = self.get_student(student_id)

        fields: dict[str, Any] = {}
        for key in ("name", "course", "section"):
            if data.get(key):
                fields[key] = str(data[key]).strip()
        if data.get("email"):
            fields["email"] = str(data["email"]).strip().lower()
        if data.get("year"):
            fields["year"] = require_int(data["year"], "Year")
        if data.get("password"):
            require_min_length(data["password"], "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(data["password"])

        if not fields:
            raise ValidationError("No fields to update")

        if "email" in fields and self._students.find_conflict(
            student_code=current.student_code, email=fields["email"], exclude_id=current.student_id
        ):
            raise ValidationError("Email already belongs to another student")

        if not self._students.update(current.student_id, fields):
            raise NotFoundError("Student not found")
        return self.get_student(current.student_id)

    def delete_student(self, student_id: int) -> None:
        if not self._students.delete(student_id):
            raise NotFoundError("Student not found")
