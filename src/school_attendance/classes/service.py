from __future__ import annotations

import secrets
from typing import Any, Callable, Optional, Sequence

from ..common.validators import clean_optional, require_int, require_non_empty
from ..core.constants import CLASS_CODE_ALPHABET, CLASS_CODE_LENGTH, CLASS_CODE_MAX_ATTEMPTS
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import EnrolledStudent, Enrollment, SchoolClass, StudentClass
from .repository import ClassRepository


def generate_class_code() -> str:
    return "".join(secrets.choice(CLASS_CODE_ALPHABET) for _ in range(CLASS_CODE_LENGTH))


class ClassService:
    """Use cases: classes, rosters and joining by code."""

    def __init__(
        self,
        classes: ClassRepository,
        students: StudentRepository,
        *,
        code_generator: Optional[Callable[[], str]] = None,
    ):
        self._classes = classes
        self._students = students
        self._generate_code = code_generator or generate_class_code

    def list_classes(self, *, active_only: bool = False) -> Sequence[SchoolClass]:
        return self._classes.list_classes(active_only=active_only)

    def get_class(self, class_id: int) -> SchoolClass:
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class

    def _unique_code(self) -> str:
        # Give up after a few collisions; the unique key still guards the insert.
        code = self._generate_code()
        for _ in range(CLASS_CODE_MAX_ATTEMPTS):
            if not self._classes.get_by_code(code):
                break
            code = self._generate_code()
        return code

    def create_class(
        self,
        *,
        name: str,
        created_by: Optional[int],
        description: Optional[str] = None,
        subject: Optional[str] = None,
        schedule: Optional[str] = None,
    ) -> SchoolClass:
        name = require_non_empty(name, "Class name")
        class_id = self._classes.create(
            name=name,
            code=self._unique_code(),
            description=clean_optional(description),
            subject=clean_optional(subject),
            schedule=clean_optional(schedule),
            created_by=created_by,
        )
        return self.get_class(class_id)

    def update_class(self, class_id: int, data: dict) -> SchoolClass:
        """Apply every supplied key, including explicit nulls (e.g. clearing a subject)."""
        fields: dict[str, Any] = {}
        if "name" in data:
            fields["name"] = require_non_empty(data["name"], "Class name")
        for key in ("description", "subject", "schedule"):
            if key in data:
                fields[key] = clean_optional(data[key])
        if "is_active" in data:
            if not isinstance(data["is_active"], bool):
                raise ValidationError("is_active must be true or false")
            fields["is_active"] = data["is_active"]

        if not fields:
            raise ValidationError("No fields to update")

        if not self._classes.update(class_id, fields):
            raise NotFoundError("Class not found")
        return self.get_class(class_id)

    def set_active(self, class_id: int, *, is_active: bool) -> SchoolClass:
        return self.update_class(class_id, {"is_active": is_active})

    def delete_class(self, class_id: int) -> None:
        if not self._classes.delete(class_id):
            raise NotFoundError("Class not found")

    def list_students(self, class_id: int) -> Sequence[EnrolledStudent]:
        return self._classes.list_students(class_id)

    def enroll_student(self, *, class_id: int, student_id: Any) -> Enrollment:
        if not student_id:
            raise ValidationError("Student ID is required")
        student_id = require_int(student_id, "Student ID")

        self.get_class(class_id)
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")
        if self._classes.get_enrollment(class_id=class_id, student_id=student_id):
            raise ValidationError("Student already enrolled")

        return self._classes.enroll(class_id=class_id, student_id=student_id)

    def remove_student(self, *, class_id: int, student_id: Any) -> None:
        if not student_id:
            raise ValidationError("Student ID is required")
        self._classes.unenroll(class_id=class_id, student_id=require_int(student_id, "Student ID"))

    def join_by_code(self, *, student_id: int, code: Optional[str]) -> tuple[SchoolClass, Enrollment]:
        code = require_non_empty(code, "Class code").upper()

        school_class = self._classes.get_by_code(code)
        if not school_class:
            raise NotFoundError("Invalid class code")
        if not school_class.is_active:
            raise ValidationError("This class is no longer active")
        if self._classes.get_enrollment(class_id=school_class.class_id, student_id=student_id):
            raise ValidationError("You are already enrolled in this class")

        enrollment = self._classes.enroll(class_id=school_class.class_id, student_id=student_id)
        return school_class, enrollment

    def list_for_student(self, student_id: int) -> Sequence[StudentClass]:
        return self._classes.list_for_student(student_id)
