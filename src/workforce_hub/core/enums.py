from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for permission checks."""

    ADMIN = "admin"
    LEADER = "leader"
    STAFF = "staff"


class RequestStatus(str, Enum):
    """Leave request approval flow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    """Room booking lifecycle. Same flow as requests plus cancellation."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    UNPAID = "unpaid"
    CUSTOM = "custom"


STANDARD_LEAVE_TYPES = (LeaveType.ANNUAL, LeaveType.SICK, LeaveType.PERSONAL, LeaveType.UNPAID)


class AttendanceEventType(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class NotificationType(str, Enum):
    BOOKING = "booking"
    LEAVE_REQUEST = "leave_request"
    BOOKING_APPROVED = "booking_approved"
    LEAVE_APPROVED = "leave_approved"


# Statuses that still occupy a slot. Rejected/cancelled records never conflict.
QUALIFYING_LEAVE_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.APPROVED})
QUALIFYING_BOOKING_STATUSES = frozenset({BookingStatus.APPROVED})

_LEAVE_TRANSITIONS = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
}

_BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
    BookingStatus.APPROVED: frozenset({BookingStatus.CANCELLED}),
}


def can_transition(current: Enum, target: Enum) -> bool:
    """One-way status flow; nothing ever goes back to pending."""
    if isinstance(current, BookingStatus):
        table = _BOOKING_TRANSITIONS
    else:
        table = _LEAVE_TRANSITIONS
    return target in table.get(current, frozenset())
