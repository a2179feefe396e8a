from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.aggregator import AttendanceAggregator
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import PRESENCE_WINDOWS_DAYS
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..leave.repository import LeaveRepository
from ..scheduling.intervals import Boundary, Span, overlaps
from ..users.model import User
from ..users.repository import UserRepository


@dataclass(frozen=True)
class TeamMetrics:
    presence_ratio_7_days: int
    presence_ratio_30_days: int
    total_working_hours: float
    pending_leave_requests: int
    team_size: int

    def as_dict(self) -> dict:
        return {
            "presence_ratio_7_days": self.presence_ratio_7_days,
            "presence_ratio_30_days": self.presence_ratio_30_days,
            "total_working_hours": self.total_working_hours,
            "pending_leave_requests": self.pending_leave_requests,
            "team_size": self.team_size,
        }


@dataclass(frozen=True)
class CalendarEntry:
    request_id: int
    user_id: int
    user_name: str
    start_date: date
    end_date: date
    status: RequestStatus


@dataclass(frozen=True)
class TeamLeaveCalendar:
    year: int
    month: int
    entries: Sequence[CalendarEntry] = field(default_factory=tuple)

    def leaves_on(self, day: date) -> list[CalendarEntry]:
        return [e for e in self.entries if e.start_date <= day <= e.end_date]

    def days(self) -> list[date]:
        last = calendar.monthrange(self.year, self.month)[1]
        return [date(self.year, self.month, d) for d in range(1, last + 1)]

    def as_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "entries": [
                {
                    "id": e.request_id,
                    "user_id": e.user_id,
                    "user_name": e.user_name,
                    "start_date": e.start_date.strftime("%Y-%m-%d"),
                    "end_date": e.end_date.strftime("%Y-%m-%d"),
                    "status": e.status.value,
                }
                for e in self.entries
            ],
            "days": {
                d.strftime("%Y-%m-%d"): [e.request_id for e in self.leaves_on(d)]
                for d in self.days()
            },
        }


class TeamDashboardService:
    """Leader views over the members of the leader's own team."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        aggregator: Optional[AttendanceAggregator] = None,
    ):
        self._users = users
        self._attendance = attendance
        self._leaves = leaves
        self._aggregator = aggregator or AttendanceAggregator()

    def _team_members(self, *, current_role: Role, user_id: int) -> Sequence[User]:
        if current_role not in {Role.LEADER, Role.ADMIN}:
            raise AuthorizationError("Only leaders can view team data")
        leader = self._users.get_by_id(int(user_id))
        if not leader or leader.team_id is None:
            raise ValidationError("You are not assigned to a team")
        return self._users.list_team_members(leader.team_id)

    def metrics(self, *, current_role: Role, user_id: int, now: Optional[datetime] = None) -> TeamMetrics:
        now = now or now_local()
        members = self._team_members(current_role=current_role, user_id=user_id)
        member_ids = [m.user_id for m in members]

        events = self._attendance.list_for_users(member_ids) if member_ids else []
        short_window, long_window = PRESENCE_WINDOWS_DAYS
        pending = (
            self._leaves.list_requests(user_ids=member_ids, status=RequestStatus.PENDING, limit=None)
            if member_ids
            else []
        )

        return TeamMetrics(
            presence_ratio_7_days=self._aggregator.presence_ratio(events, window_days=short_window, now=now),
            presence_ratio_30_days=self._aggregator.presence_ratio(events, window_days=long_window, now=now),
            total_working_hours=self._aggregator.total_worked_hours(events),
            pending_leave_requests=len(pending),
            team_size=len(member_ids),
        )

    def leave_calendar(self, *, current_role: Role, user_id: int, year: int, month: int) -> TeamLeaveCalendar:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")

        members = self._team_members(current_role=current_role, user_id=user_id)
        names = {m.user_id: m.display_name for m in members}
        if not names:
            return TeamLeaveCalendar(year=int(year), month=int(month))

        month_span = Span(
            start=date(int(year), int(month), 1),
            end=date(int(year), int(month), calendar.monthrange(int(year), int(month))[1]),
        )
        rows = self._leaves.list_requests(user_ids=list(names), limit=None)
        entries = [
            CalendarEntry(
                request_id=r.request_id,
                user_id=r.user_id,
                user_name=names.get(r.user_id, "Unknown"),
                start_date=r.start_date,
                end_date=r.end_date,
                status=r.status,
            )
            for r in rows
            if overlaps(r.as_span(), month_span, Boundary.INCLUSIVE)
        ]
        entries.sort(key=lambda e: (e.start_date, e.user_name))
        return TeamLeaveCalendar(year=int(year), month=int(month), entries=tuple(entries))
