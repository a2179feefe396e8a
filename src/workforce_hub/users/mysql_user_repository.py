from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, first_name, last_name, email, role, team_id, annual_leave_quota"


def _to_user(r: dict) -> User:
    quota = r.get("annual_leave_quota")
    return User(
        user_id=int(r["user_id"]),
        first_name=r.get("first_name"),
        last_name=r.get("last_name"),
        email=r["email"],
        role=Role(r["role"]),
        team_id=int(r["team_id"]) if r.get("team_id") is not None else None,
        annual_leave_quota=int(quota) if quota is not None else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_by_ids(self, user_ids: Sequence[int]) -> Sequence[User]:
        if not user_ids:
            return []
        placeholders, params = in_clause(user_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id IN ({placeholders})", params)
            return [_to_user(r) for r in fetchall(cur)]

    def list_team_members(self, team_id: int) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE team_id=%s ORDER BY first_name ASC",
                (int(team_id),),
            )
            return [_to_user(r) for r in fetchall(cur)]
