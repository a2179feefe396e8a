from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from workforce_hub.attendance.model import AttendanceEvent
from workforce_hub.container import wire
from workforce_hub.core.enums import AttendanceEventType, BookingStatus, LeaveType, RequestStatus, Role
from workforce_hub.leave.model import LeaveRequest, LeaveTypeRecord
from workforce_hub.rooms.model import MeetingRoom, RoomBooking
from workforce_hub.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}

    def add(self, user_id, role=Role.STAFF, team_id=1, quota=None, first="User", last=None) -> User:
        user = User(
            user_id=user_id,
            first_name=first,
            last_name=last or str(user_id),
            email=f"u{user_id}@example.com",
            role=role,
            team_id=team_id,
            annual_leave_quota=quota,
        )
        self.users[user_id] = user
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def list_by_ids(self, user_ids):
        return [self.users[i] for i in user_ids if i in self.users]

    def list_team_members(self, team_id):
        return [u for u in self.users.values() if u.team_id == team_id]


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def add(self, *, user_id, start, end, status=RequestStatus.PENDING, leave_type="annual") -> LeaveRequest:
        rid = self._next_id
        self._next_id += 1
        req = LeaveRequest(
            request_id=rid,
            user_id=user_id,
            leave_type=LeaveType(leave_type),
            start_date=start,
            end_date=end,
            status=status,
            created_at=datetime(2024, 6, 1, 9, rid % 60),
        )
        self.rows[rid] = req
        return req

    def create(self, request):
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = LeaveRequest(
            request_id=rid,
            user_id=request.user_id,
            leave_type=request.leave_type,
            start_date=request.start_date,
            end_date=request.end_date,
            status=RequestStatus.PENDING,
            created_at=datetime(2024, 6, 1, 9, 0),
            approver_id=request.approver_id,
            custom_type_id=request.custom_type_id,
            reason=request.reason,
        )
        return rid

    def get(self, *, request_id):
        return self.rows.get(int(request_id))

    def list_requests(self, *, user_ids=None, status=None, filters=None, limit=200):
        out = [
            r
            for r in self.rows.values()
            if (user_ids is None or r.user_id in user_ids)
            and (status is None or r.status == status)
            and (filters is None or filters.matches(r))
        ]
        out.sort(key=lambda r: r.request_id, reverse=True)
        return out if limit is None else out[:limit]

    def update_dates(self, *, request_id, start_date, end_date, reason):
        req = self.rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.rows[req.request_id] = replace(req, start_date=start_date, end_date=end_date, reason=reason)
        return True

    def decide(self, *, request_id, status, decided_by, rejection_reason=None):
        req = self.rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.rows[req.request_id] = replace(
            req,
            status=status,
            approver_id=decided_by,
            decided_at=datetime(2024, 6, 2, 9, 0),
            rejection_reason=rejection_reason,
        )
        return True

    def delete(self, *, request_id):
        return self.rows.pop(int(request_id), None) is not None


class InMemoryLeaveTypes:
    def __init__(self):
        self.types = {7: LeaveTypeRecord(type_id=7, name="Wedding")}

    def list_all(self):
        return list(self.types.values())

    def get_by_id(self, type_id):
        return self.types.get(int(type_id))


class InMemoryBookings:
    def __init__(self):
        self.rooms = {
            1: MeetingRoom(room_id=1, name="Aurora"),
            2: MeetingRoom(room_id=2, name="Borealis"),
            3: MeetingRoom(room_id=3, name="Closed", is_active=False),
        }
        self.rows: dict[int, RoomBooking] = {}
        self._next_id = 1

    def add(self, *, room_id, user_id, start, end, status=BookingStatus.APPROVED, attendees=()) -> RoomBooking:
        bid = self._next_id
        self._next_id += 1
        booking = RoomBooking(
            booking_id=bid,
            room_id=room_id,
            user_id=user_id,
            title=f"Meeting {bid}",
            start_time=start,
            end_time=end,
            status=status,
            attendees=frozenset(attendees),
        )
        self.rows[bid] = booking
        return booking

    def list_rooms(self, *, active_only=True):
        return [r for r in self.rooms.values() if r.is_active or not active_only]

    def get_room(self, room_id):
        return self.rooms.get(int(room_id))

    def create(self, booking):
        bid = self._next_id
        self._next_id += 1
        self.rows[bid] = RoomBooking(
            booking_id=bid,
            room_id=booking.room_id,
            user_id=booking.user_id,
            title=booking.title,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=BookingStatus.PENDING,
            description=booking.description,
            attendees=booking.attendees,
        )
        return bid

    def get(self, *, booking_id):
        return self.rows.get(int(booking_id))

    def list_bookings(self, *, room_id=None, status=None, limit=200):
        out = [
            b
            for b in self.rows.values()
            if (room_id is None or b.room_id == room_id) and (status is None or b.status == status)
        ]
        out.sort(key=lambda b: b.start_time, reverse=True)
        return out if limit is None else out[:limit]

    def update_details(self, *, booking_id, room_id, title, description, start_time, end_time):
        b = self.rows.get(int(booking_id))
        if not b:
            return False
        self.rows[b.booking_id] = replace(
            b, room_id=room_id, title=title, description=description, start_time=start_time, end_time=end_time
        )
        return True

    def set_status(self, *, booking_id, status, expected):
        b = self.rows.get(int(booking_id))
        if not b or b.status not in expected:
            return False
        self.rows[b.booking_id] = replace(b, status=status)
        return True

    def set_attendees(self, *, booking_id, attendees):
        b = self.rows.get(int(booking_id))
        if not b:
            return False
        self.rows[b.booking_id] = replace(b, attendees=frozenset(attendees))
        return True


class InMemoryAttendance:
    def __init__(self):
        self.events: list[AttendanceEvent] = []

    def add(self, user_id, event_type, ts) -> AttendanceEvent:
        e = AttendanceEvent(
            event_id=len(self.events) + 1,
            user_id=user_id,
            event_type=AttendanceEventType(event_type),
            timestamp=ts,
        )
        self.events.append(e)
        return e

    def list_for_users(self, user_ids, *, since: Optional[datetime] = None):
        return [e for e in self.events if e.user_id in user_ids and (since is None or e.timestamp >= since)]

    def get_recent_for_user(self, user_id, limit):
        rows = sorted((e for e in self.events if e.user_id == user_id), key=lambda e: e.timestamp, reverse=True)
        return rows[:limit]

    def create_event(self, *, user_id, event_type, timestamp):
        return self.add(user_id, event_type.value, timestamp).event_id


class InMemoryNotifications:
    def __init__(self):
        self.created = []
        self.fail = False

    def create(self, notification):
        if self.fail:
            raise RuntimeError("notifications table unavailable")
        self.created.append(notification)
        return len(self.created)


@pytest.fixture
def users():
    repo = InMemoryUsers()
    repo.add(1, role=Role.ADMIN, team_id=None, first="Ada")
    repo.add(2, role=Role.LEADER, team_id=1, first="Lea")
    repo.add(3, role=Role.STAFF, team_id=1, first="Sam")
    repo.add(4, role=Role.STAFF, team_id=1, first="Tom")
    repo.add(5, role=Role.STAFF, team_id=2, first="Olga")
    return repo


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def leave_types():
    return InMemoryLeaveTypes()


@pytest.fixture
def bookings():
    return InMemoryBookings()


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def notifications():
    return InMemoryNotifications()


@pytest.fixture
def container(users, leaves, leave_types, bookings, attendance, notifications):
    return wire(
        users_repo=users,
        attendance_repo=attendance,
        leave_repo=leaves,
        leave_types_repo=leave_types,
        bookings_repo=bookings,
        notifications_repo=notifications,
    )
