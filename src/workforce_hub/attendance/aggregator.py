from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import local_date, now_local, round_half_up
from ..core.constants import MAX_WORKED_HOURS_PER_DAY
from ..core.enums import AttendanceEventType
from .model import AttendanceEvent


@dataclass
class _DayPunches:
    first_in: Optional[datetime] = None
    last_out: Optional[datetime] = None


class AttendanceAggregator:
    """Presence and worked-hours figures over a flat list of punches.

    Days are keyed by (user, local calendar date of the raw timestamp); a shift
    crossing midnight therefore splits into two days.
    """

    def __init__(self, *, max_hours_per_day: float = MAX_WORKED_HOURS_PER_DAY):
        self._max_hours = float(max_hours_per_day)

    def presence_ratio(
        self,
        events: Iterable[AttendanceEvent],
        *,
        window_days: int,
        now: Optional[datetime] = None,
    ) -> int:
        """Percent of present-days over present-days inside `[now - window_days, now]`.

        Known anomaly: the ratio counts presence against itself, so it is 100
        whenever any event falls in the window and 0 otherwise. Kept as is until the
        expected denominator (scheduled working days?) is defined.
        """
        now = now or now_local()
        cutoff = now - timedelta(days=int(window_days))

        present: set[tuple[int, date]] = set()
        for e in events:
            if cutoff <= e.timestamp <= now:
                present.add((e.user_id, local_date(e.timestamp)))

        total_days = len(present)
        if total_days == 0:
            return 0
        on_time_days = total_days
        return int(round_half_up(on_time_days / total_days * 100))

    def worked_hours_by_day(self, events: Iterable[AttendanceEvent]) -> dict[tuple[int, date], float]:
        """Unrounded hours per (user, day); days missing either punch are left out."""
        days: dict[tuple[int, date], _DayPunches] = {}
        for e in events:
            day = days.setdefault((e.user_id, local_date(e.timestamp)), _DayPunches())
            if e.event_type == AttendanceEventType.CHECK_IN:
                if day.first_in is None or e.timestamp < day.first_in:
                    day.first_in = e.timestamp
            elif e.event_type == AttendanceEventType.CHECK_OUT:
                if day.last_out is None or e.timestamp > day.last_out:
                    day.last_out = e.timestamp

        out: dict[tuple[int, date], float] = {}
        for key, day in days.items():
            if not day.first_in or not day.last_out:
                continue
            hours = (day.last_out - day.first_in).total_seconds() / 3600
            if 0 < hours <= self._max_hours:
                out[key] = hours
        return out

    def total_worked_hours(self, events: Iterable[AttendanceEvent]) -> float:
        total = sum(self.worked_hours_by_day(events).values())
        return round_half_up(total, 1)
