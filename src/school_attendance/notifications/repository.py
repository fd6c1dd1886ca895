from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, student_id: int, type: NotificationType, title: str, message: str) -> int:
        raise NotImplementedError

    def list_for_student(self, student_id: int, *, limit: int) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def mark_read(self, *, notification_id: int, student_id: int) -> bool:
        raise NotImplementedError
