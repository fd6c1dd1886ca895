from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence, Union

from ..classes.repository import ClassRepository
from ..common.pagination import Page, normalize_page
from ..common.validators import clean_optional
from ..core.constants import DEFAULT_HISTORY_PAGE_SIZE, DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.model import NotificationIntent, intent_for_status
from ..notifications.service import NotificationDispatcher
from .model import (
    AttendanceEntry,
    AttendanceFilter,
    AttendanceListRow,
    AttendanceRecord,
    BulkOutcome,
    MarkOutcome,
    StatusCounts,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

EntryLike = Union[AttendanceEntry, Mapping[str, Any]]


def parse_status(value: Any) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Invalid status {value!r} (expected one of: {allowed})") from None


def notification_intents(entries: Sequence[AttendanceEntry], on_date: date) -> tuple[NotificationIntent, ...]:
    """Intents for the submitted entries, in submission order."""
    intents = []
    for entry in entries:
        intent = intent_for_status(entry.student_id, entry.status, on_date)
        if intent is not None:
            intents.append(intent)
    return tuple(intents)


def _to_entry(raw: EntryLike) -> AttendanceEntry:
    if isinstance(raw, AttendanceEntry):
        return AttendanceEntry(student_id=raw.student_id, status=parse_status(raw.status), remarks=raw.remarks)
    if not isinstance(raw, Mapping):
        raise ValidationError("Every record must be an object with studentId and status")

    student_id = raw.get("student_id", raw.get("studentId"))
    if student_id in (None, ""):
        raise ValidationError("Every record needs a student ID")
    try:
        student_id = int(student_id)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid student ID {student_id!r}") from None

    return AttendanceEntry(
        student_id=student_id,
        status=parse_status(raw.get("status")),
        remarks=clean_optional(raw.get("remarks")),
    )


class AttendanceService:
    """Attendance recorder: upserts attendance and hands absence/late intents to the dispatcher."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        dispatcher: NotificationDispatcher,
    ):
        self._attendance = attendance
        self._classes = classes
        self._dispatcher = dispatcher

    def mark(
        self,
        *,
        student_id: Any,
        attendance_date: Optional[date],
        status: Any,
        remarks: Optional[str] = None,
        class_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> MarkOutcome:
        if student_id in (None, "") or attendance_date is None or status in (None, ""):
            raise ValidationError("Student ID, date, and status are required")
        entry = _to_entry({"student_id": student_id, "status": status, "remarks": remarks})

        record = self._attendance.upsert(
            student_id=entry.student_id,
            attendance_date=attendance_date,
            status=entry.status,
            remarks=entry.remarks,
            class_id=class_id,
            marked_by=marked_by,
        )

        intents = notification_intents([entry], attendance_date)
        delivered = self._dispatcher.dispatch(intents)
        return MarkOutcome(record=record, notifications=intents, delivered=delivered)

    def mark_bulk(
        self,
        *,
        attendance_date: Optional[date],
        records: Optional[Sequence[EntryLike]],
        class_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> BulkOutcome:
        if attendance_date is None or not records or isinstance(records, (str, bytes, Mapping)):
            raise ValidationError("Date and records array are required")

        entries = [_to_entry(r) for r in records]

        seen: set[int] = set()
        for entry in entries:
            if entry.student_id in seen:
                raise ValidationError(f"Student {entry.student_id} appears more than once in this submission")
            seen.add(entry.student_id)

        count = self._attendance.upsert_many(
            attendance_date=attendance_date,
            entries=entries,
            class_id=class_id,
            marked_by=marked_by,
        )
        logger.info("Saved %d attendance records for %s (class=%s)", count, attendance_date, class_id)

        intents = notification_intents(entries, attendance_date)
        delivered = self._dispatcher.dispatch(intents)
        return BulkOutcome(count=count, notifications=intents, delivered=delivered)

    def get_record(self, student_id: int, attendance_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_student_and_date(student_id, attendance_date)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def list_records(
        self,
        *,
        on_date: Optional[date] = None,
        student_id: Optional[int] = None,
        class_id: Optional[int] = None,
        status: Any = None,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Page[AttendanceListRow]:
        page, limit = normalize_page(page, limit, default_limit=DEFAULT_PAGE_SIZE)
        flt = AttendanceFilter(
            on_date=on_date,
            student_id=student_id,
            class_id=class_id,
            status=parse_status(status) if status else None,
        )
        items = self._attendance.list_records(flt, offset=(page - 1) * limit, limit=limit)
        return Page(items=items, page=page, limit=limit, total=self._attendance.count_records(flt))

    def student_history(
        self,
        *,
        student_id: int,
        class_id: Optional[int] = None,
        page: Any = 1,
        limit: Any = DEFAULT_HISTORY_PAGE_SIZE,
    ) -> tuple[Page[AttendanceListRow], StatusCounts]:
        """A student's own records plus status counts.

        Without an explicit class the listing is scoped to the student's
        enrolled classes; a student with no enrollments sees every record.
        The counts always cover the enrolled scope, not the class filter.
        """
        page, limit = normalize_page(page, limit, default_limit=DEFAULT_HISTORY_PAGE_SIZE)
        enrolled = tuple(self._classes.enrolled_class_ids(student_id))
        scope = enrolled or None

        if class_id is not None:
            flt = AttendanceFilter(student_id=student_id, class_id=class_id)
        else:
            flt = AttendanceFilter(student_id=student_id, class_ids=scope)

        items = self._attendance.list_records(flt, offset=(page - 1) * limit, limit=limit)
        total = self._attendance.count_records(flt)
        stats = self._attendance.status_counts(AttendanceFilter(student_id=student_id, class_ids=scope))
        return Page(items=items, page=page, limit=limit, total=total), stats
