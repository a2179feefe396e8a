from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveHistoryFilter, LeaveRequest, LeaveTypeRecord, NewLeaveRequest


class LeaveRepository(Protocol):
    def create(self, request: NewLeaveRequest) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        user_ids: Optional[Sequence[int]] = None,
        status: Optional[RequestStatus] = None,
        filters: Optional[LeaveHistoryFilter] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first. `user_ids=None` means every user, `limit=None` no cap.

        `filters` are applied before the limit.
        """

        raise NotImplementedError

    def update_dates(self, *, request_id: int, start_date: date, end_date: date, reason: Optional[str]) -> bool:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Only a pending row is updated; returns False otherwise."""

        raise NotImplementedError

    def delete(self, *, request_id: int) -> bool:
        raise NotImplementedError


class LeaveTypeRepository(Protocol):
    def list_all(self) -> Sequence[LeaveTypeRecord]:
        raise NotImplementedError

    def get_by_id(self, type_id: int) -> Optional[LeaveTypeRecord]:
        raise NotImplementedError
