from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_RECENT_EVENTS
from ..core.enums import AttendanceEventType
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def record(self, user_id: int, event_type: str, *, now: Optional[datetime] = None) -> int:
        try:
            kind = AttendanceEventType(event_type)
        except ValueError:
            raise ValidationError("Event type must be check_in or check_out")

        if not self._users.get_by_id(int(user_id)):
            raise ValidationError("User does not exist")

        now = now or now_local()
        return self._attendance.create_event(user_id=int(user_id), event_type=kind, timestamp=now)

    def check_in(self, user_id: int, *, now: Optional[datetime] = None) -> int:
        return self.record(user_id, AttendanceEventType.CHECK_IN.value, now=now)

    def check_out(self, user_id: int, *, now: Optional[datetime] = None) -> int:
        return self.record(user_id, AttendanceEventType.CHECK_OUT.value, now=now)

    def get_history_ui(self, user_id: int, *, limit: int = DEFAULT_RECENT_EVENTS) -> list[dict]:
        rows = self._attendance.get_recent_for_user(int(user_id), limit)
        return [
            {
                "id": e.event_id,
                "type": e.event_type.value,
                "date": e.timestamp.strftime("%Y-%m-%d"),
                "time": e.timestamp.strftime("%H:%M:%S"),
            }
            for e in rows
        ]
