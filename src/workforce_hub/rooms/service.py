from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import local_date, now_local
from ..common.validators import optional_text
from ..core.enums import QUALIFYING_BOOKING_STATUSES, BookingStatus, Role, can_transition
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..notifications.service import NotificationService
from ..scheduling.intervals import Boundary, IntervalSet, Span
from ..users.repository import UserRepository
from .model import MeetingRoom, NewBooking, RoomBooking
from .repository import BookingRepository


class BookingService:
    def __init__(self, bookings: BookingRepository, users: UserRepository, notifications: NotificationService):
        self._bookings = bookings
        self._users = users
        self._notifications = notifications

    @staticmethod
    def _validate(
        *,
        title: Optional[str],
        room_id: Optional[int],
        start_time: Optional[datetime],
        end_time: Optional[datetime],
    ) -> str:
        title = optional_text(title, "Title") or ""
        if not title or not room_id or not start_time or not end_time:
            raise ValidationError("Please fill in all required fields")
        if local_date(start_time) != local_date(end_time):
            raise ValidationError("Booking must be on the same day")
        if start_time >= end_time:
            raise ValidationError("End time must be after start time")
        return title

    def _active_room(self, room_id: int) -> MeetingRoom:
        room = self._bookings.get_room(int(room_id))
        if not room or not room.is_active:
            raise ValidationError("Meeting room does not exist")
        return room

    def _ensure_room_free(
        self,
        room_id: int,
        start_time: datetime,
        end_time: datetime,
        *,
        exclude_id: Optional[int] = None,
    ) -> None:
        existing = self._bookings.list_bookings(room_id=int(room_id), status=BookingStatus.APPROVED, limit=None)
        intervals = IntervalSet(
            (b.as_span() for b in existing),
            boundary=Boundary.HALF_OPEN,
            relevant_statuses=QUALIFYING_BOOKING_STATUSES,
        )
        if intervals.has_conflict(Span(start=start_time, end=end_time), exclude_id=exclude_id):
            raise ConflictError("This room is already booked for the selected time")

    def _get(self, booking_id: int) -> RoomBooking:
        booking = self._bookings.get(booking_id=int(booking_id))
        if not booking:
            raise ValidationError("Booking does not exist")
        return booking

    @staticmethod
    def _require_owner_or_admin(*, current_role: Role, user_id: int, booking: RoomBooking) -> None:
        if current_role != Role.ADMIN and booking.user_id != int(user_id):
            raise AuthorizationError("Only the organizer can change this booking")

    def _move(self, booking: RoomBooking, status: BookingStatus) -> None:
        if not can_transition(booking.status, status):
            raise ValidationError(f"Cannot change a {booking.status.value} booking to {status.value}")
        ok = self._bookings.set_status(booking_id=booking.booking_id, status=status, expected={booking.status})
        if not ok:
            raise ValidationError("Failed to update booking")

    def create(
        self,
        *,
        user_id: int,
        room_id: Optional[int],
        title: Optional[str],
        start_time: Optional[datetime],
        end_time: Optional[datetime],
        description: str = "",
        attendees: Iterable[int] = (),
    ) -> int:
        title = self._validate(title=title, room_id=room_id, start_time=start_time, end_time=end_time)
        room = self._active_room(room_id)
        self._ensure_room_free(room.room_id, start_time, end_time)

        invited = frozenset(int(a) for a in attendees) - {int(user_id)}
        booking_id = self._bookings.create(
            NewBooking(
                room_id=room.room_id,
                user_id=int(user_id),
                title=title,
                start_time=start_time,
                end_time=end_time,
                description=optional_text(description, "Description"),
                attendees=invited,
            )
        )
        for attendee_id in sorted(invited):
            self._notifications.booking_created(user_id=attendee_id, booking_title=title, room_name=room.name)
        return booking_id

    def edit(
        self,
        *,
        current_role: Role,
        user_id: int,
        booking_id: int,
        room_id: Optional[int],
        title: Optional[str],
        start_time: Optional[datetime],
        end_time: Optional[datetime],
        description: str = "",
    ) -> None:
        title = self._validate(title=title, room_id=room_id, start_time=start_time, end_time=end_time)

        booking = self._get(booking_id)
        self._require_owner_or_admin(current_role=current_role, user_id=user_id, booking=booking)
        if booking.status not in {BookingStatus.PENDING, BookingStatus.APPROVED}:
            raise ValidationError(f"A {booking.status.value} booking cannot be edited")

        room = self._active_room(room_id)
        self._ensure_room_free(room.room_id, start_time, end_time, exclude_id=booking.booking_id)

        ok = self._bookings.update_details(
            booking_id=booking.booking_id,
            room_id=room.room_id,
            title=title,
            description=optional_text(description, "Description"),
            start_time=start_time,
            end_time=end_time,
        )
        if not ok:
            raise ValidationError("Failed to update booking")

    def approve(self, *, current_role: Role, booking_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can approve bookings")

        booking = self._get(booking_id)
        if booking.status != BookingStatus.PENDING:
            raise ValidationError("Booking was already processed")
        # Another booking may have been approved since this one was created.
        self._ensure_room_free(booking.room_id, booking.start_time, booking.end_time, exclude_id=booking.booking_id)
        self._move(booking, BookingStatus.APPROVED)

        room = self._bookings.get_room(booking.room_id)
        self._notifications.booking_approved(
            user_id=booking.user_id,
            booking_title=booking.title,
            room_name=room.name if room else "",
        )

    def reject(self, *, current_role: Role, booking_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reject bookings")
        self._move(self._get(booking_id), BookingStatus.REJECTED)

    def cancel(self, *, current_role: Role, user_id: int, booking_id: int) -> None:
        booking = self._get(booking_id)
        self._require_owner_or_admin(current_role=current_role, user_id=user_id, booking=booking)
        self._move(booking, BookingStatus.CANCELLED)

    def _set_membership(self, *, user_id: int, booking_id: int, joining: bool) -> None:
        booking = self._get(booking_id)
        if booking.user_id == int(user_id):
            raise ValidationError("The organizer is always part of the booking")
        if booking.status in {BookingStatus.CANCELLED, BookingStatus.REJECTED}:
            raise ValidationError(f"Cannot change attendees of a {booking.status.value} booking")

        if joining:
            attendees = booking.attendees | {int(user_id)}
        else:
            attendees = booking.attendees - {int(user_id)}
        if attendees == booking.attendees:
            return

        if not self._bookings.set_attendees(booking_id=booking.booking_id, attendees=attendees):
            raise ValidationError("Failed to update attendance")

    def join(self, *, user_id: int, booking_id: int) -> None:
        self._set_membership(user_id=user_id, booking_id=booking_id, joining=True)

    def leave(self, *, user_id: int, booking_id: int) -> None:
        self._set_membership(user_id=user_id, booking_id=booking_id, joining=False)

    def list_rooms(self) -> list[dict]:
        return [{"id": r.room_id, "name": r.name} for r in self._bookings.list_rooms(active_only=True)]

    def list_bookings(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        rows = self._bookings.list_bookings()
        names = {u.user_id: u.display_name for u in self._users.list_by_ids(sorted({b.user_id for b in rows}))}
        return [
            {
                "id": b.booking_id,
                "room_id": b.room_id,
                "user_id": b.user_id,
                "organizer": names.get(b.user_id, "Unknown"),
                "title": b.title,
                "description": b.description or "",
                "start_time": b.start_time.strftime("%Y-%m-%d %H:%M"),
                "end_time": b.end_time.strftime("%Y-%m-%d %H:%M"),
                "status": b.status.value,
                "attendees": sorted(b.attendees),
                "attendee_count": len(b.attendees),
                "is_past": b.end_time < now,
            }
            for b in rows
        ]
