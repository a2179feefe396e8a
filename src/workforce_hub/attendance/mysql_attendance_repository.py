from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceEventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import AttendanceEvent
from .repository import AttendanceRepository


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        event_type=AttendanceEventType(r["type"]),
        timestamp=r["timestamp"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_users(
        self,
        user_ids: Sequence[int],
        *,
        since: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        if not user_ids:
            return []

        placeholders, params = in_clause(user_ids)
        clauses = [f"user_id IN ({placeholders})"]
        args: list[object] = list(params)
        if since is not None:
            clauses.append("`timestamp` >= %s")
            args.append(since)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, user_id, type, `timestamp`
                FROM attendance
                WHERE {where}
                ORDER BY `timestamp` ASC
                """,
                tuple(args),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, type, `timestamp`
                FROM attendance
                WHERE user_id=%s
                ORDER BY `timestamp` DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def create_event(self, *, user_id: int, event_type: AttendanceEventType, timestamp: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance(user_id, type, `timestamp`) VALUES(%s,%s,%s)",
                (int(user_id), event_type.value, timestamp),
            )
            return int(cur.lastrowid)
