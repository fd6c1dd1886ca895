from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..common.validators import require_non_empty
from ..core.constants import NOTIFICATION_LIST_LIMIT
from ..core.enums import NotificationType
from .model import Notification, NotificationIntent
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Owns the notification rows: creation, listing and the read flag."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def create(self, *, student_id: int, type: NotificationType, title: str, message: str) -> int:
        return self._notifications.create(
            student_id=int(student_id),
            type=NotificationType(type),
            title=require_non_empty(title, "Title"),
            message=require_non_empty(message, "Message"),
        )

    def list_for_student(self, student_id: int, *, limit: int = NOTIFICATION_LIST_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_student(int(student_id), limit=limit)

    def mark_read(self, *, notification_id: int, student_id: int) -> bool:
        """Only the owning student can flip the flag; other ids are a silent no-op."""
        return self._notifications.mark_read(notification_id=int(notification_id), student_id=int(student_id))


class NotificationDispatcher:
    """Delivers post-commit notification intents.

    Intents are sent one at a time in order. A failing intent is logged and
    skipped; it never reaches the caller and never undoes the attendance write.
    """

    def __init__(self, notifications: NotificationService):
        self._notifications = notifications

    def dispatch(self, intents: Iterable[NotificationIntent]) -> int:
        delivered = 0
        for intent in intents:
            try:
                self._notifications.create(
                    student_id=intent.student_id,
                    type=intent.type,
                    title=intent.title,
                    message=intent.message,
                )
            except Exception:
                logger.exception(
                    "Failed to create %s notification for student %s on %s",
                    intent.type.value,
                    intent.student_id,
                    intent.on_date.isoformat(),
                )
                continue
            delivered += 1
        return delivered
