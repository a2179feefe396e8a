from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import LeaveHistoryFilter, LeaveRequest, LeaveTypeRecord, NewLeaveRequest
from .repository import LeaveRepository, LeaveTypeRepository

_COLUMNS = """
    request_id, user_id, type, custom_type_id, start_date, end_date, reason,
    status, approved_by, approved_at, rejection_reason, created_at
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_type=LeaveType(r["type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        approver_id=r.get("approved_by"),
        custom_type_id=r.get("custom_type_id"),
        reason=r.get("reason"),
        decided_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
    )


def _append_filter_clauses(filters: LeaveHistoryFilter, clauses: list[str], params: list[object]) -> None:
    if filters.status is not None:
        clauses.append("status=%s")
        params.append(filters.status.value)
    if filters.month is not None:
        clauses.append("MONTH(start_date)=%s")
        params.append(int(filters.month))
    if filters.year is not None:
        clauses.append("YEAR(start_date)=%s")
        params.append(int(filters.year))
    if filters.start is not None:
        clauses.append("end_date>=%s")
        params.append(filters.start)
    if filters.end is not None:
        clauses.append("start_date<=%s")
        params.append(filters.end)


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, type, custom_type_id, start_date, end_date, reason, status, approved_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.user_id),
                    request.leave_type.value,
                    request.custom_type_id,
                    request.start_date,
                    request.end_date,
                    request.reason,
                    RequestStatus.PENDING.value,
                    int(request.approver_id),
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        user_ids: Optional[Sequence[int]] = None,
        status: Optional[RequestStatus] = None,
        filters: Optional[LeaveHistoryFilter] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[LeaveRequest]:
        if user_ids is not None and not user_ids:
            return []

        clauses = ["1=1"]
        params: list[object] = []

        if user_ids is not None:
            placeholders, ids = in_clause(user_ids)
            clauses.append(f"user_id IN ({placeholders})")
            params.extend(ids)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if filters is not None:
            _append_filter_clauses(filters, clauses, params)

        sql = f"SELECT {_COLUMNS} FROM leave_requests WHERE {' AND '.join(clauses)} ORDER BY created_at DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def update_dates(self, *, request_id: int, start_date: date, end_date: date, reason: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET start_date=%s, end_date=%s, reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (start_date, end_date, reason, int(request_id), RequestStatus.PENDING.value),
            )
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when nothing changed.
            cur.execute(
                "SELECT request_id FROM leave_requests WHERE request_id=%s AND status=%s",
                (int(request_id), RequestStatus.PENDING.value),
            )
            return fetchone(cur) is not None

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=NOW(), rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), rejection_reason, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete(self, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0


class MySQLLeaveTypeRepository(LeaveTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[LeaveTypeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT type_id, name FROM leave_types ORDER BY name ASC")
            return [LeaveTypeRecord(type_id=int(r["type_id"]), name=r["name"]) for r in fetchall(cur)]

    def get_by_id(self, type_id: int) -> Optional[LeaveTypeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT type_id, name FROM leave_types WHERE type_id=%s", (int(type_id),))
            r = fetchone(cur)
            return LeaveTypeRecord(type_id=int(r["type_id"]), name=r["name"]) if r else None
