from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Sequence

from ..core.enums import BookingStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import MeetingRoom, NewBooking, RoomBooking
from .repository import BookingRepository

_COLUMNS = "booking_id, room_id, user_id, title, description, start_time, end_time, status"


def _to_booking(r: dict, attendees: Collection[int]) -> RoomBooking:
    return RoomBooking(
        booking_id=int(r["booking_id"]),
        room_id=int(r["room_id"]),
        user_id=int(r["user_id"]),
        title=r["title"],
        start_time=r["start_time"],
        end_time=r["end_time"],
        status=BookingStatus(r["status"]),
        description=r.get("description"),
        attendees=frozenset(int(a) for a in attendees),
    )


def _insert_attendees(cur, booking_id: int, attendees: Collection[int]) -> None:
    for user_id in sorted(attendees):
        cur.execute(
            "INSERT INTO booking_attendees(booking_id, user_id) VALUES(%s,%s)",
            (int(booking_id), int(user_id)),
        )


class MySQLBookingRepository(BookingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Rooms --------
    def list_rooms(self, *, active_only: bool = True) -> Sequence[MeetingRoom]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT room_id, name, is_active FROM meeting_rooms {where} ORDER BY name ASC")
            return [
                MeetingRoom(room_id=int(r["room_id"]), name=r["name"], is_active=bool(r["is_active"]))
                for r in fetchall(cur)
            ]

    def get_room(self, room_id: int) -> Optional[MeetingRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, name, is_active FROM meeting_rooms WHERE room_id=%s", (int(room_id),))
            r = fetchone(cur)
            if not r:
                return None
            return MeetingRoom(room_id=int(r["room_id"]), name=r["name"], is_active=bool(r["is_active"]))

    # -------- Bookings --------
    def _attendees_for(self, cur, booking_ids: Sequence[int]) -> dict[int, list[int]]:
        out: dict[int, list[int]] = {int(b): [] for b in booking_ids}
        if not booking_ids:
            return out
        placeholders, params = in_clause(booking_ids)
        cur.execute(
            f"SELECT booking_id, user_id FROM booking_attendees WHERE booking_id IN ({placeholders})",
            params,
        )
        for r in fetchall(cur):
            out[int(r["booking_id"])].append(int(r["user_id"]))
        return out

    def create(self, booking: NewBooking) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO room_bookings(room_id, user_id, title, description, start_time, end_time, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(booking.room_id),
                    int(booking.user_id),
                    booking.title,
                    booking.description,
                    booking.start_time,
                    booking.end_time,
                    BookingStatus.PENDING.value,
                ),
            )
            booking_id = int(cur.lastrowid)
            _insert_attendees(cur, booking_id, booking.attendees)
            return booking_id

    def get(self, *, booking_id: int) -> Optional[RoomBooking]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM room_bookings WHERE booking_id=%s", (int(booking_id),))
            r = fetchone(cur)
            if not r:
                return None
            attendees = self._attendees_for(cur, [int(r["booking_id"])])
            return _to_booking(r, attendees[int(r["booking_id"])])

    def list_bookings(
        self,
        *,
        room_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[RoomBooking]:
        clauses = ["1=1"]
        params: list[object] = []
        if room_id is not None:
            clauses.append("room_id=%s")
            params.append(int(room_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        sql = f"SELECT {_COLUMNS} FROM room_bookings WHERE {' AND '.join(clauses)} ORDER BY start_time DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)
            attendees = self._attendees_for(cur, [int(r["booking_id"]) for r in rows])
            return [_to_booking(r, attendees[int(r["booking_id"])]) for r in rows]

    def update_details(
        self,
        *,
        booking_id: int,
        room_id: int,
        title: str,
        description: Optional[str],
        start_time: datetime,
        end_time: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE room_bookings
                SET room_id=%s, title=%s, description=%s, start_time=%s, end_time=%s
                WHERE booking_id=%s
                """,
                (int(room_id), title, description, start_time, end_time, int(booking_id)),
            )
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when nothing changed.
            cur.execute("SELECT booking_id FROM room_bookings WHERE booking_id=%s", (int(booking_id),))
            return fetchone(cur) is not None

    def set_status(
        self,
        *,
        booking_id: int,
        status: BookingStatus,
        expected: Collection[BookingStatus],
    ) -> bool:
        expected_values = [s.value for s in expected]
        placeholders = ",".join(["%s"] * len(expected_values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE room_bookings SET status=%s WHERE booking_id=%s AND status IN ({placeholders})",
                (status.value, int(booking_id), *expected_values),
            )
            return cur.rowcount > 0

    def set_attendees(self, *, booking_id: int, attendees: Collection[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT booking_id FROM room_bookings WHERE booking_id=%s", (int(booking_id),))
            if not fetchone(cur):
                return False
            cur.execute("DELETE FROM booking_attendees WHERE booking_id=%s", (int(booking_id),))
            _insert_attendees(cur, int(booking_id), attendees)
            return True
