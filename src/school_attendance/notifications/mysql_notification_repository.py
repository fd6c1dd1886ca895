from __future__ import annotations

from typing import Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, student_id: int, type: NotificationType, title: str, message: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(student_id, type, title, message)
                VALUES(%s,%s,%s,%s)
                """,
                (int(student_id), type.value, title, message),
            )
            return int(cur.lastrowid)

    def list_for_student(self, student_id: int, *, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, type, title, message, `read`, created_at
                FROM notifications
                WHERE student_id=%s
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (int(student_id), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["id"]),
                    student_id=int(r["student_id"]),
                    type=NotificationType(r["type"]),
                    title=r["title"],
                    message=r["message"],
                    read=bool(r["read"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def mark_read(self, *, notification_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET `read`=1 WHERE id=%s AND student_id=%s",
                (int(notification_id), int(student_id)),
            )
            return cur.rowcount > 0
