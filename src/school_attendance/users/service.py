from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .repository import AdminRepository
from .model import SessionUser


def _password_matches(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hashes
        return False


class AuthService:
    """Use case: admin registration and login for admins and students."""

    def __init__(self, admins: AdminRepository, students: StudentRepository):
        self._admins = admins
        self._students = students

    def register_admin(self, *, name: str, email: str, password: str) -> SessionUser:
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email").lower()
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._admins.get_by_email(email):
            raise ValidationError("Email already registered")

        admin_id = self._admins.create(name=name, email=email, password_hash=generate_password_hash(password))
        return SessionUser(user_id=admin_id, name=name, email=email, role=Role.ADMIN)

    def authenticate_admin(self, email: Optional[str], password: Optional[str]) -> SessionUser:
        if not email or not password:
            raise ValidationError("Email and password are required")

        admin = self._admins.get_by_email(email.strip().lower())
        if not admin or not _password_matches(admin.password_hash, password):
            raise AuthenticationError("Invalid email or password")
        return SessionUser(user_id=admin.admin_id, name=admin.name, email=admin.email, role=Role.ADMIN)

    def authenticate_student(self, login: Optional[str], password: Optional[str]) -> SessionUser:
        """`login` may be the student's email or student code."""
        if not login or not password:
            raise ValidationError("Email or student ID and password are required")

        login = login.strip()
        student = self._students.get_by_login(login.lower()) or self._students.get_by_login(login)
        if not student or not _password_matches(student.password_hash, password):
            raise AuthenticationError("Invalid credentials")
        return SessionUser(user_id=student.student_id, name=student.name, email=student.email, role=Role.STUDENT)

    def current_admin(self, admin_id: int) -> SessionUser:
        admin = self._admins.get_by_id(admin_id)
        if not admin:
            raise NotFoundError("Admin not found")
        return SessionUser(user_id=admin.admin_id, name=admin.name, email=admin.email, role=Role.ADMIN)
