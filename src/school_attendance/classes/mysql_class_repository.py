from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..students.mysql_student_repository import row_to_student
from .model import EnrolledStudent, Enrollment, SchoolClass, StudentClass
from .repository import ClassRepository

UPDATABLE_COLUMNS = ("name", "description", "subject", "schedule", "is_active")

_CLASS_SELECT = """
    SELECT
        c.id, c.name, c.code, c.description, c.subject, c.schedule, c.is_active,
        c.created_by, c.created_at,
        a.name AS instructor_name,
        (SELECT COUNT(*) FROM class_enrollments e WHERE e.class_id = c.id) AS student_count
    FROM classes c
    LEFT JOIN admins a ON a.id = c.created_by
"""


def _row_to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["id"]),
        name=r["name"],
        code=r["code"],
        description=r.get("description"),
        subject=r.get("subject"),
        schedule=r.get("schedule"),
        is_active=bool(r.get("is_active", True)),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        student_count=int(r.get("student_count") or 0),
        instructor_name=r.get("instructor_name"),
    )


def _row_to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["id"]),
        class_id=int(r["class_id"]),
        student_id=int(r["student_id"]),
        enrolled_at=r.get("enrolled_at"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_classes(self, *, active_only: bool = False) -> Sequence[SchoolClass]:
        where = "WHERE c.is_active = 1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_CLASS_SELECT} {where} ORDER BY c.created_at DESC, c.id DESC")
            return [_row_to_class(r) for r in fetchall(cur)]

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_CLASS_SELECT} WHERE c.id=%s", (int(class_id),))
            r = fetchone(cur)
            return _row_to_class(r) if r else None

    def get_by_code(self, code: str) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_CLASS_SELECT} WHERE c.code=%s", (code,))
            r = fetchone(cur)
            return _row_to_class(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classes(name, code, description, subject, schedule, is_active, created_by)
                VALUES(%s,%s,%s,%s,%s,1,%s)
                """,
                (name, code, description, subject, schedule, created_by),
            )
            return int(cur.lastrowid)

    def update(self, class_id: int, fields: dict) -> bool:
        cols = [c for c in UPDATABLE_COLUMNS if c in fields]
        if not cols:
            return False

        assignments = ", ".join(f"{c}=%s" for c in cols)
        params = [fields[c] for c in cols] + [int(class_id)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE classes SET {assignments} WHERE id=%s", tuple(params))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS ok FROM classes WHERE id=%s", (int(class_id),))
            return fetchone(cur) is not None

    def delete(self, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE id=%s", (int(class_id),))
            return cur.rowcount > 0

    def get_enrollment(self, *, class_id: int, student_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, class_id, student_id, enrolled_at
                FROM class_enrollments
                WHERE class_id=%s AND student_id=%s
                """,
                (int(class_id), int(student_id)),
            )
            r = fetchone(cur)
            return _row_to_enrollment(r) if r else None

    def enroll(self, *, class_id: int, student_id: int) -> Enrollment:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO class_enrollments(class_id, student_id) VALUES(%s,%s)",
                (int(class_id), int(student_id)),
            )
            enrollment_id = int(cur.lastrowid)
            cur.execute(
                "SELECT id, class_id, student_id, enrolled_at FROM class_enrollments WHERE id=%s",
                (enrollment_id,),
            )
            return _row_to_enrollment(fetchone(cur))

    def unenroll(self, *, class_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM class_enrollments WHERE class_id=%s AND student_id=%s",
                (int(class_id), int(student_id)),
            )
            return cur.rowcount > 0

    def list_students(self, class_id: int) -> Sequence[EnrolledStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    e.id AS enrollment_id, e.enrolled_at,
                    s.id, s.student_code, s.name, s.email, s.password_hash,
                    s.course, s.year, s.section, s.created_at
                FROM class_enrollments e
                JOIN students s ON s.id = e.student_id
                WHERE e.class_id=%s
                ORDER BY e.enrolled_at DESC, e.id DESC
                """,
                (int(class_id),),
            )
            return [
                EnrolledStudent(
                    student=row_to_student(r),
                    enrollment_id=int(r["enrollment_id"]),
                    enrolled_at=r.get("enrolled_at"),
                )
                for r in fetchall(cur)
            ]

    def list_for_student(self, student_id: int) -> Sequence[StudentClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    e.id AS enrollment_id, e.enrolled_at,
                    c.id, c.name, c.code, c.description, c.subject, c.schedule, c.is_active,
                    c.created_by, c.created_at,
                    a.name AS instructor_name,
                    (SELECT COUNT(*) FROM class_enrollments x WHERE x.class_id = c.id) AS student_count
                FROM class_enrollments e
                JOIN classes c ON c.id = e.class_id
                LEFT JOIN admins a ON a.id = c.created_by
                WHERE e.student_id=%s
                ORDER BY e.enrolled_at DESC, e.id DESC
                """,
                (int(student_id),),
            )
            return [
                StudentClass(
                    school_class=_row_to_class(r),
                    enrollment_id=int(r["enrollment_id"]),
                    enrolled_at=r.get("enrolled_at"),
                )
                for r in fetchall(cur)
            ]

    def enrolled_class_ids(self, student_id: int) -> list[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id FROM class_enrollments WHERE student_id=%s", (int(student_id),))
            return [int(r["class_id"]) for r in fetchall(cur)]
