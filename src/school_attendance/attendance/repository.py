from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry, AttendanceFilter, AttendanceListRow, AttendanceRecord, StatusCounts


class AttendanceRepository(Protocol):
    """Data access for the `attendance` table.

    Writes are upserts keyed on (student_id, date): an existing row has its
    status, remarks, class and marker fully replaced.
    """

    def upsert(
        self,
        *,
        student_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
        class_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def upsert_many(
        self,
        *,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        class_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> int:
        """All rows in one transaction; on failure nothing is committed."""

        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_in_range(
        self,
        *,
        student_ids: Optional[Sequence[int]],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        """Rows with start_date <= date <= end_date; student_ids=None means every student."""

        raise NotImplementedError

    def list_records(self, flt: AttendanceFilter, *, offset: int, limit: int) -> Sequence[AttendanceListRow]:
        """Newest date first."""

        raise NotImplementedError

    def count_records(self, flt: AttendanceFilter) -> int:
        raise NotImplementedError

    def status_counts(self, flt: AttendanceFilter) -> StatusCounts:
        raise NotImplementedError

    def recent(self, *, limit: int) -> Sequence[AttendanceListRow]:
        """Most recently written rows first."""

        raise NotImplementedError
