from __future__ import annotations

from typing import Iterable, Optional

from ..core.constants import DEFAULT_LEAVE_QUOTA
from ..core.enums import QUALIFYING_LEAVE_STATUSES
from .model import LeaveRequest


class LeaveBalanceCounter:
    """Remaining allowance = annual quota - requests that still count.

    Pending and approved requests consume the allowance, rejected ones do not.
    """

    def __init__(self, *, default_quota: int = DEFAULT_LEAVE_QUOTA):
        self._default_quota = int(default_quota)

    def quota(self, configured: Optional[int]) -> int:
        return self._default_quota if configured is None else int(configured)

    @staticmethod
    def used_count(requests: Iterable[LeaveRequest], user_id: int) -> int:
        return sum(1 for r in requests if r.user_id == user_id and r.status in QUALIFYING_LEAVE_STATUSES)

    @staticmethod
    def raw_remaining(quota: int, used_count: int) -> int:
        return int(quota) - int(used_count)

    def remaining(self, quota: int, used_count: int) -> int:
        """Display value, never below zero."""
        return max(self.raw_remaining(quota, used_count), 0)

    def can_submit(self, quota: int, used_count: int) -> bool:
        return self.raw_remaining(quota, used_count) > 0
