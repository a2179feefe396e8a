from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceEventType
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def list_for_users(
        self,
        user_ids: Sequence[int],
        *,
        since: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def create_event(self, *, user_id: int, event_type: AttendanceEventType, timestamp: datetime) -> int:
        raise NotImplementedError
