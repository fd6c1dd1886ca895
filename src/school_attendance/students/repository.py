from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, StudentFilter


class StudentRepository(Protocol):
    """Repository interface for students.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_login(self, login: str) -> Optional[Student]:
        """Look a student up by email or student code."""

        raise NotImplementedError

    def find_conflict(self, *, student_code: str, email: str, exclude_id: Optional[int] = None) -> Optional[Student]:
        raise NotImplementedError

    def list_filtered(
        self,
        flt: StudentFilter,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Sequence[Student]:
        """Students matching every filter, ordered by name ascending."""

        raise NotImplementedError

    def count_filtered(self, flt: StudentFilter) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        student_code: str,
        name: str,
        email: str,
        password_hash: str,
        course: str,
        year: int,
        section: str,
    ) -> int:
        raise NotImplementedError

    def update(self, student_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError

    def course_distribution(self) -> dict[str, int]:
        raise NotImplementedError
