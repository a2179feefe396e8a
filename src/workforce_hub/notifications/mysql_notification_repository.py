from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NewNotification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: NewNotification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, type, title, message, link)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(notification.user_id),
                    notification.type.value,
                    notification.title,
                    notification.message,
                    notification.link,
                ),
            )
            return int(cur.lastrowid)
