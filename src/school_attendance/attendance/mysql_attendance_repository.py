from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause
from ..students.model import Student
from .model import AttendanceEntry, AttendanceFilter, AttendanceListRow, AttendanceRecord, StatusCounts
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, date, status, remarks, class_id, marked_by, created_at, updated_at"

# Conflict target is the (student_id, date) unique key; every writable column is replaced.
_UPSERT_SQL = """
    INSERT INTO attendance(student_id, date, status, remarks, class_id, marked_by)
    VALUES(%s,%s,%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE
        status=VALUES(status),
        remarks=VALUES(remarks),
        class_id=VALUES(class_id),
        marked_by=VALUES(marked_by)
"""

_LIST_SELECT = """
    SELECT
        a.id, a.student_id, a.date, a.status, a.remarks, a.class_id, a.marked_by,
        a.created_at, a.updated_at,
        s.student_code, s.name AS student_name, s.email AS student_email,
        s.course, s.year, s.section,
        c.name AS class_name, c.code AS class_code, c.subject AS class_subject
    FROM attendance a
    JOIN students s ON s.id = a.student_id
    LEFT JOIN classes c ON c.id = a.class_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        student_id=int(r["student_id"]),
        attendance_date=r["date"],
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
        class_id=r.get("class_id"),
        marked_by=r.get("marked_by"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_list_row(r: dict) -> AttendanceListRow:
    return AttendanceListRow(
        record=_row_to_record(r),
        student=Student(
            student_id=int(r["student_id"]),
            student_code=r["student_code"],
            name=r["student_name"],
            email=r["student_email"],
            course=r["course"],
            year=int(r["year"]),
            section=r["section"],
        ),
        class_name=r.get("class_name"),
        class_code=r.get("class_code"),
        class_subject=r.get("class_subject"),
    )


def _filter_clauses(flt: AttendanceFilter) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if flt.on_date is not None:
        clauses.append("a.date=%s")
        params.append(flt.on_date)
    if flt.start_date is not None:
        clauses.append("a.date>=%s")
        params.append(flt.start_date)
    if flt.end_date is not None:
        clauses.append("a.date<=%s")
        params.append(flt.end_date)
    if flt.student_id is not None:
        clauses.append("a.student_id=%s")
        params.append(int(flt.student_id))
    if flt.class_id is not None:
        clauses.append("a.class_id=%s")
        params.append(int(flt.class_id))
    if flt.class_ids is not None:
        if flt.class_ids:
            clauses.append(f"a.class_id IN ({in_clause(flt.class_ids)})")
            params.extend(int(c) for c in flt.class_ids)
        else:
            clauses.append("1=0")
    if flt.status is not None:
        clauses.append("a.status=%s")
        params.append(flt.status.value)

    return clauses, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT_SQL, (int(student_id), attendance_date, status.value, remarks, class_id, marked_by))
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE student_id=%s AND date=%s",
                (int(student_id), attendance_date),
            )
            return _row_to_record(fetchone(cur))

    def upsert_many(
        self,
        *,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        class_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> int:
        rows = [
            (int(e.student_id), attendance_date, e.status.value, e.remarks, class_id, marked_by)
            for e in entries
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_UPSERT_SQL, rows)
        return len(rows)

    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE student_id=%s AND date=%s",
                (int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_in_range(
        self,
        *,
        student_ids: Optional[Sequence[int]],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        if student_ids is not None and not student_ids:
            return []

        sql = f"SELECT {_COLUMNS} FROM attendance WHERE date BETWEEN %s AND %s"
        params: list[object] = [start_date, end_date]
        if student_ids is not None:
            sql += f" AND student_id IN ({in_clause(student_ids)})"
            params.extend(int(s) for s in student_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY date ASC, student_id ASC", tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_records(self, flt: AttendanceFilter, *, offset: int, limit: int) -> Sequence[AttendanceListRow]:
        clauses, params = _filter_clauses(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_LIST_SELECT} {build_where(clauses)} ORDER BY a.date DESC, a.id DESC LIMIT %s OFFSET %s",
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_list_row(r) for r in fetchall(cur)]

    def count_records(self, flt: AttendanceFilter) -> int:
        clauses, params = _filter_clauses(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance a {build_where(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def status_counts(self, flt: AttendanceFilter) -> StatusCounts:
        clauses, params = _filter_clauses(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT a.status, COUNT(*) AS n FROM attendance a {build_where(clauses)} GROUP BY a.status",
                tuple(params),
            )
            by_status = {r["status"]: int(r["n"]) for r in fetchall(cur)}
        return StatusCounts(
            present=by_status.get(AttendanceStatus.PRESENT.value, 0),
            absent=by_status.get(AttendanceStatus.ABSENT.value, 0),
            late=by_status.get(AttendanceStatus.LATE.value, 0),
        )

    def recent(self, *, limit: int) -> Sequence[AttendanceListRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_LIST_SELECT} ORDER BY a.created_at DESC, a.id DESC LIMIT %s", (int(limit),))
            return [_row_to_list_row(r) for r in fetchall(cur)]
