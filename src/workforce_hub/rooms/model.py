from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import BookingStatus
from ..scheduling.intervals import Span


@dataclass(frozen=True)
class MeetingRoom:
    room_id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class RoomBooking:
    """Domain entity: a room reservation on a single calendar day.

    `attendees` never contains the owner and has no meaningful order.
    """

    booking_id: int
    room_id: int
    user_id: int
    title: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    description: Optional[str] = None
    attendees: frozenset[int] = frozenset()

    def as_span(self) -> Span:
        return Span(start=self.start_time, end=self.end_time, status=self.status, record_id=self.booking_id)


@dataclass(frozen=True)
class NewBooking:
    room_id: int
    user_id: int
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    attendees: frozenset[int] = frozenset()
