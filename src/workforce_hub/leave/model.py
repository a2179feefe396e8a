from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveType, RequestStatus
from ..scheduling.intervals import Span


@dataclass(frozen=True)
class LeaveTypeRecord:
    """A custom leave type defined by admins (beyond the standard tags)."""

    type_id: int
    name: str


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: RequestStatus
    created_at: datetime
    approver_id: Optional[int] = None
    custom_type_id: Optional[int] = None
    reason: Optional[str] = None
    decided_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    def as_span(self) -> Span:
        return Span(start=self.start_date, end=self.end_date, status=self.status, record_id=self.request_id)


@dataclass(frozen=True)
class NewLeaveRequest:
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    approver_id: int
    custom_type_id: Optional[int] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class LeaveHistoryFilter:
    """History filters. Month/year look at the first day of leave only; the
    start/end window keeps requests whose range overlaps it."""

    status: Optional[RequestStatus] = None
    month: Optional[int] = None
    year: Optional[int] = None
    start: Optional[date] = None
    end: Optional[date] = None

    def matches(self, r: LeaveRequest) -> bool:
        if self.status is not None and r.status != self.status:
            return False
        if self.month is not None and r.start_date.month != self.month:
            return False
        if self.year is not None and r.start_date.year != self.year:
            return False
        if self.start is not None and r.end_date < self.start:
            return False
        if self.end is not None and r.start_date > self.end:
            return False
        return True
