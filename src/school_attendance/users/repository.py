from __future__ import annotations

from typing import Optional, Protocol

from .model import Admin


class AdminRepository(Protocol):
    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Admin]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, password_hash: str) -> int:
        raise NotImplementedError
