from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Admin:
    """Domain entity: an administrator account.

    Plain data object; no database access here.
    """

    admin_id: int
    name: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.admin_id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email, "role": self.role.value}
