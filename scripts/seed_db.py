"""Seed a demo admin and roster through the service layer (idempotent)."""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from school_attendance.config import get_settings_module
from school_attendance.container import build_container
from school_attendance.core.exceptions import ValidationError

DEMO_ADMIN = {"name": "Admin User", "email": "admin@school.local", "password": "admin123"}

DEMO_STUDENTS = [
    ("STU001", "John Doe", "john@student.local", "BSIT", 3, "A"),
    ("STU002", "Jane Smith", "jane@student.local", "BSIT", 3, "A"),
    ("STU003", "Mike Johnson", "mike@student.local", "BSIT", 3, "B"),
    ("STU004", "Sarah Williams", "sarah@student.local", "BSCS", 2, "A"),
    ("STU005", "David Brown", "david@student.local", "BSCS", 2, "A"),
    ("STU006", "Emily Davis", "emily@student.local", "BSCS", 4, "B"),
]


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    try:
        container.auth_service.register_admin(**DEMO_ADMIN)
        print(f"admin: {DEMO_ADMIN['email']}")
    except ValidationError as e:
        print(f"admin: skipped ({e})")

    for code, name, email, course, year, section in DEMO_STUDENTS:
        try:
            container.student_service.create_student(
                student_code=code,
                name=name,
                email=email,
                password="password123",
                course=course,
                year=year,
                section=section,
            )
            print(f"student: {code} {name}")
        except ValidationError as e:
            print(f"student: {code} skipped ({e})")


if __name__ == "__main__":
    main()
