from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EnrolledStudent, Enrollment, SchoolClass, StudentClass


class ClassRepository(Protocol):
    def list_classes(self, *, active_only: bool = False) -> Sequence[SchoolClass]:
        """Newest first, with enrollment counts."""

        raise NotImplementedError

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        code: str,
        description: Optional[str],
        subject: Optional[str],
        schedule: Optional[str],
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update(self, class_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, class_id: int) -> bool:
        raise NotImplementedError

    def get_enrollment(self, *, class_id: int, student_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def enroll(self, *, class_id: int, student_id: int) -> Enrollment:
        raise NotImplementedError

    def unenroll(self, *, class_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def list_students(self, class_id: int) -> Sequence[EnrolledStudent]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[StudentClass]:
        raise NotImplementedError

    def enrolled_class_ids(self, student_id: int) -> list[int]:
        raise NotImplementedError
