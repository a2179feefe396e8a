from __future__ import annotations

import pytest

from workforce_hub.core.enums import BookingStatus, RequestStatus, can_transition


@pytest.mark.parametrize("target", [RequestStatus.APPROVED, RequestStatus.REJECTED])
def test_pending_leave_can_be_decided(target):
    assert can_transition(RequestStatus.PENDING, target)


@pytest.mark.parametrize("current", [RequestStatus.APPROVED, RequestStatus.REJECTED])
def test_decided_leave_is_final(current):
    for target in RequestStatus:
        assert not can_transition(current, target)


def test_booking_lifecycle():
    assert can_transition(BookingStatus.PENDING, BookingStatus.APPROVED)
    assert can_transition(BookingStatus.PENDING, BookingStatus.REJECTED)
    assert can_transition(BookingStatus.APPROVED, BookingStatus.CANCELLED)
    assert not can_transition(BookingStatus.REJECTED, BookingStatus.APPROVED)
    assert not can_transition(BookingStatus.CANCELLED, BookingStatus.APPROVED)
    assert not can_transition(BookingStatus.APPROVED, BookingStatus.PENDING)
