from __future__ import annotations

from datetime import datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import BookingStatus
from .model import MeetingRoom, NewBooking, RoomBooking


class BookingRepository(Protocol):
    # Rooms
    def list_rooms(self, *, active_only: bool = True) -> Sequence[MeetingRoom]:
        raise NotImplementedError

    def get_room(self, room_id: int) -> Optional[MeetingRoom]:
        raise NotImplementedError

    # Bookings
    def create(self, booking: NewBooking) -> int:
        """Insert as pending together with its attendees. Returns booking id."""

        raise NotImplementedError

    def get(self, *, booking_id: int) -> Optional[RoomBooking]:
        raise NotImplementedError

    def list_bookings(
        self,
        *,
        room_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[RoomBooking]:
        """Newest start first."""

        raise NotImplementedError

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
        raise NotImplementedError

    def set_status(
        self,
        *,
        booking_id: int,
        status: BookingStatus,
        expected: Collection[BookingStatus],
    ) -> bool:
        """Compare-and-set on the current status; False when it no longer matches."""

        raise NotImplementedError

    def set_attendees(self, *, booking_id: int, attendees: Collection[int]) -> bool:
        raise NotImplementedError
