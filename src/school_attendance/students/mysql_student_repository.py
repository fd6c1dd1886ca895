from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import Student, StudentFilter
from .repository import StudentRepository

_COLUMNS = "id, student_code, name, email, password_hash, course, year, section, created_at"

# Columns an update is allowed to touch.
UPDATABLE_COLUMNS = ("name", "email", "password_hash", "course", "year", "section")


def row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["id"]),
        student_code=r["student_code"],
        name=r["name"],
        email=r["email"],
        course=r["course"],
        year=int(r["year"]),
        section=r["section"],
        password_hash=r.get("password_hash") or "",
        created_at=r.get("created_at"),
    )


def _filter_clauses(flt: StudentFilter) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if flt.course is not None:
        clauses.append("course=%s")
        params.append(flt.course)
    if flt.year is not None:
        clauses.append("year=%s")
        params.append(int(flt.year))
    if flt.section is not None:
        clauses.append("section=%s")
        params.append(flt.section)
    if flt.search:
        like = f"%{flt.search}%"
        clauses.append("(name LIKE %s OR student_code LIKE %s OR email LIKE %s)")
        params.extend([like, like, like])

    return clauses, params


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def get_by_login(self, login: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE email=%s OR student_code=%s LIMIT 1",
                (login, login),
            )
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def find_conflict(self, *, student_code: str, email: str, exclude_id: Optional[int] = None) -> Optional[Student]:
        sql = f"SELECT {_COLUMNS} FROM students WHERE (student_code=%s OR email=%s)"
        params: list[object] = [student_code, email]
        if exclude_id is not None:
            sql += " AND id<>%s"
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def list_filtered(
        self,
        flt: StudentFilter,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Sequence[Student]:
        clauses, params = _filter_clauses(flt)
        sql = f"SELECT {_COLUMNS} FROM students {build_where(clauses)} ORDER BY name ASC"
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [row_to_student(r) for r in fetchall(cur)]

    def count_filtered(self, flt: StudentFilter) -> int:
        clauses, params = _filter_clauses(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM students {build_where(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(student_code, name, email, password_hash, course, year, section)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (student_code, name, email, password_hash, course, int(year), section),
            )
            return int(cur.lastrowid)

    def update(self, student_id: int, fields: dict) -> bool:
        cols = [c for c in UPDATABLE_COLUMNS if c in fields]
        if not cols:
            return False

        assignments = ", ".join(f"{c}=%s" for c in cols)
        params = [fields[c] for c in cols] + [int(student_id)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE students SET {assignments} WHERE id=%s", tuple(params))
            # rowcount is 0 when values are unchanged, so re-check existence
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS ok FROM students WHERE id=%s", (int(student_id),))
            return fetchone(cur) is not None

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            return cur.rowcount > 0

    def course_distribution(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT course, COUNT(*) AS n FROM students GROUP BY course ORDER BY course")
            return {r["course"]: int(r["n"]) for r in fetchall(cur)}
