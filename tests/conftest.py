from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from types import SimpleNamespace
from typing import Optional

import pytest

from school_attendance.attendance.model import (
    AttendanceFilter,
    AttendanceListRow,
    AttendanceRecord,
    StatusCounts,
)
from school_attendance.classes.model import EnrolledStudent, Enrollment, SchoolClass, StudentClass
from school_attendance.container import wire
from school_attendance.core.enums import Role
from school_attendance.notifications.model import Notification
from school_attendance.students.model import Student, StudentFilter
from school_attendance.users.model import Admin


class StoreError(RuntimeError):
    """Stands in for a database constraint violation."""


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[int, Student] = {}
        self._id = 0

    def add(self, code, name, *, course="BSIT", year=1, section="A", email=None, password_hash="") -> Student:
        new_id = self.create(
            student_code=code,
            name=name,
            email=email or f"{code.lower()}@school.test",
            password_hash=password_hash,
            course=course,
            year=year,
            section=section,
        )
        return self.rows[new_id]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.rows.get(int(student_id))

    def get_by_login(self, login: str) -> Optional[Student]:
        for s in self.rows.values():
            if s.email == login or s.student_code == login:
                return s
        return None

    def find_conflict(self, *, student_code, email, exclude_id=None):
        for s in self.rows.values():
            if s.student_id == exclude_id:
                continue
            if s.student_code == student_code or s.email == email:
                return s
        return None

    def list_filtered(self, flt: StudentFilter, *, offset: int = 0, limit=None):
        items = sorted((s for s in self.rows.values() if flt.matches(s)), key=lambda s: s.name)
        return items[offset:] if limit is None else items[offset : offset + limit]

    def count_filtered(self, flt: StudentFilter) -> int:
        return sum(1 for s in self.rows.values() if flt.matches(s))

    def create(self, *, student_code, name, email, password_hash, course, year, section) -> int:
        self._id += 1
        self.rows[self._id] = Student(
            student_id=self._id,
            student_code=student_code,
            name=name,
            email=email,
            course=course,
            year=int(year),
            section=section,
            password_hash=password_hash,
            created_at=datetime(2024, 1, 1, 8, 0),
        )
        return self._id

    def update(self, student_id: int, fields: dict) -> bool:
        current = self.rows.get(int(student_id))
        if not current:
            return False
        self.rows[current.student_id] = replace(current, **fields)
        return True

    def delete(self, student_id: int) -> bool:
        return self.rows.pop(int(student_id), None) is not None

    def course_distribution(self) -> dict[str, int]:
        out: dict[str, int] = {}
        for s in self.rows.values():
            out[s.course] = out.get(s.course, 0) + 1
        return dict(sorted(out.items()))


class InMemoryClasses:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.rows: dict[int, SchoolClass] = {}
        self.enrollments: dict[tuple[int, int], Enrollment] = {}
        self._id = 0
        self._enrollment_id = 0

    def _with_count(self, c: SchoolClass) -> SchoolClass:
        count = sum(1 for (class_id, _) in self.enrollments if class_id == c.class_id)
        return replace(c, student_count=count)

    def list_classes(self, *, active_only: bool = False):
        items = [c for c in self.rows.values() if c.is_active or not active_only]
        return [self._with_count(c) for c in sorted(items, key=lambda c: c.class_id, reverse=True)]

    def get_by_id(self, class_id: int):
        c = self.rows.get(int(class_id))
        return self._with_count(c) if c else None

    def get_by_code(self, code: str):
        for c in self.rows.values():
            if c.code == code:
                return self._with_count(c)
        return None

    def create(self, *, name, code, description, subject, schedule, created_by) -> int:
        self._id += 1
        self.rows[self._id] = SchoolClass(
            class_id=self._id,
            name=name,
            code=code,
            description=description,
            subject=subject,
            schedule=schedule,
            is_active=True,
            created_by=created_by,
        )
        return self._id

    def update(self, class_id: int, fields: dict) -> bool:
        current = self.rows.get(int(class_id))
        if not current:
            return False
        self.rows[current.class_id] = replace(current, **fields)
        return True

    def delete(self, class_id: int) -> bool:
        if self.rows.pop(int(class_id), None) is None:
            return False
        for key in [k for k in self.enrollments if k[0] == int(class_id)]:
            del self.enrollments[key]
        return True

    def get_enrollment(self, *, class_id: int, student_id: int):
        return self.enrollments.get((int(class_id), int(student_id)))

    def enroll(self, *, class_id: int, student_id: int) -> Enrollment:
        key = (int(class_id), int(student_id))
        if key in self.enrollments:
            raise StoreError("duplicate enrollment")
        self._enrollment_id += 1
        e = Enrollment(
            enrollment_id=self._enrollment_id,
            class_id=key[0],
            student_id=key[1],
            enrolled_at=datetime(2024, 1, 1, 9, self._enrollment_id % 60),
        )
        self.enrollments[key] = e
        return e

    def unenroll(self, *, class_id: int, student_id: int) -> bool:
        return self.enrollments.pop((int(class_id), int(student_id)), None) is not None

    def list_students(self, class_id: int):
        out = []
        for (cid, sid), e in self.enrollments.items():
            if cid == int(class_id):
                out.append(EnrolledStudent(student=self._students.rows[sid], enrollment_id=e.enrollment_id, enrolled_at=e.enrolled_at))
        return sorted(out, key=lambda x: x.enrollment_id, reverse=True)

    def list_for_student(self, student_id: int):
        out = []
        for (cid, sid), e in self.enrollments.items():
            if sid == int(student_id):
                out.append(StudentClass(school_class=self.get_by_id(cid), enrollment_id=e.enrollment_id, enrolled_at=e.enrolled_at))
        return sorted(out, key=lambda x: x.enrollment_id, reverse=True)

    def enrolled_class_ids(self, student_id: int) -> list[int]:
        return [cid for (cid, sid) in self.enrollments if sid == int(student_id)]


class InMemoryAttendance:
    """Upserts keyed on (student_id, date); a failing write leaves the store untouched."""

    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self.fail_writes = False
        self._id = 0
        self._tick = 0

    def _check(self, student_id: int) -> None:
        if self.fail_writes:
            raise StoreError("write rejected")
        if student_id not in self._students.rows:
            raise StoreError(f"foreign key violation: student {student_id}")

    def _put(self, *, student_id, attendance_date, status, remarks, class_id, marked_by) -> AttendanceRecord:
        key = (int(student_id), attendance_date)
        self._tick += 1
        stamp = datetime(2024, 1, 1) + timedelta(seconds=self._tick)
        existing = self.rows.get(key)
        if existing:
            rec = replace(existing, status=status, remarks=remarks, class_id=class_id, marked_by=marked_by, updated_at=stamp)
        else:
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                student_id=key[0],
                attendance_date=attendance_date,
                status=status,
                remarks=remarks,
                class_id=class_id,
                marked_by=marked_by,
                created_at=stamp,
                updated_at=stamp,
            )
        self.rows[key] = rec
        return rec

    def upsert(self, *, student_id, attendance_date, status, remarks=None, class_id=None, marked_by=None):
        self._check(int(student_id))
        return self._put(
            student_id=student_id,
            attendance_date=attendance_date,
            status=status,
            remarks=remarks,
            class_id=class_id,
            marked_by=marked_by,
        )

    def upsert_many(self, *, attendance_date, entries, class_id=None, marked_by=None) -> int:
        for e in entries:
            self._check(int(e.student_id))
        for e in entries:
            self._put(
                student_id=e.student_id,
                attendance_date=attendance_date,
                status=e.status,
                remarks=e.remarks,
                class_id=class_id,
                marked_by=marked_by,
            )
        return len(entries)

    def get_for_student_and_date(self, student_id, attendance_date):
        return self.rows.get((int(student_id), attendance_date))

    def find_in_range(self, *, student_ids, start_date, end_date):
        wanted = None if student_ids is None else set(student_ids)
        return [
            r
            for r in sorted(self.rows.values(), key=lambda r: (r.attendance_date, r.student_id))
            if start_date <= r.attendance_date <= end_date and (wanted is None or r.student_id in wanted)
        ]

    def _joined(self, records):
        return [AttendanceListRow(record=r, student=self._students.rows.get(r.student_id)) for r in records]

    def _filtered(self, flt: AttendanceFilter):
        items = [r for r in self.rows.values() if flt.matches(r)]
        return sorted(items, key=lambda r: (r.attendance_date, r.attendance_id), reverse=True)

    def list_records(self, flt, *, offset, limit):
        return self._joined(self._filtered(flt)[offset : offset + limit])

    def count_records(self, flt) -> int:
        return len(self._filtered(flt))

    def status_counts(self, flt) -> StatusCounts:
        return StatusCounts.from_statuses(r.status for r in self._filtered(flt))

    def recent(self, *, limit):
        items = sorted(self.rows.values(), key=lambda r: r.created_at, reverse=True)
        return self._joined(items[:limit])


class InMemoryNotifications:
    def __init__(self):
        self.rows: list[Notification] = []
        self.fail_for_students: set[int] = set()

    def create(self, *, student_id, type, title, message) -> int:
        if student_id in self.fail_for_students:
            raise StoreError("notification insert failed")
        n = Notification(
            notification_id=len(self.rows) + 1,
            student_id=student_id,
            type=type,
            title=title,
            message=message,
            created_at=datetime(2024, 1, 1, 0, 0, len(self.rows) % 60),
        )
        self.rows.append(n)
        return n.notification_id

    def list_for_student(self, student_id, *, limit):
        items = [n for n in self.rows if n.student_id == student_id]
        return sorted(items, key=lambda n: n.notification_id, reverse=True)[:limit]

    def mark_read(self, *, notification_id, student_id) -> bool:
        for i, n in enumerate(self.rows):
            if n.notification_id == notification_id and n.student_id == student_id:
                self.rows[i] = replace(n, read=True)
                return True
        return False


class InMemoryAdmins:
    def __init__(self):
        self.rows: dict[int, Admin] = {}

    def get_by_id(self, admin_id):
        return self.rows.get(int(admin_id))

    def get_by_email(self, email):
        for a in self.rows.values():
            if a.email == email:
                return a
        return None

    def create(self, *, name, email, password_hash) -> int:
        new_id = len(self.rows) + 1
        self.rows[new_id] = Admin(admin_id=new_id, name=name, email=email, password_hash=password_hash)
        return new_id


@pytest.fixture
def store():
    students = InMemoryStudents()
    return SimpleNamespace(
        students=students,
        classes=InMemoryClasses(students),
        attendance=InMemoryAttendance(students),
        notifications=InMemoryNotifications(),
        admins=InMemoryAdmins(),
    )


@pytest.fixture
def container(store):
    return wire(
        admins=store.admins,
        students=store.students,
        classes=store.classes,
        attendance=store.attendance,
        notifications=store.notifications,
    )


@pytest.fixture
def app(container, monkeypatch):
    from school_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, role: Role, user_id: int) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role.value


@pytest.fixture
def admin_client(client):
    login_as(client, Role.ADMIN, 1)
    return client


@pytest.fixture
def login():
    return login_as
