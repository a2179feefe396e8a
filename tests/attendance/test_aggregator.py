from __future__ import annotations

from datetime import datetime

import pytest

from workforce_hub.attendance.aggregator import AttendanceAggregator
from workforce_hub.attendance.model import AttendanceEvent
from workforce_hub.core.enums import AttendanceEventType

IN = AttendanceEventType.CHECK_IN
OUT = AttendanceEventType.CHECK_OUT


def _events(*rows):
    return [
        AttendanceEvent(event_id=i, user_id=user_id, event_type=kind, timestamp=datetime.fromisoformat(ts))
        for i, (user_id, kind, ts) in enumerate(rows, start=1)
    ]


def test_single_day_hours_and_rounded_total():
    agg = AttendanceAggregator()
    events = _events((1, IN, "2024-06-10T08:55:00"), (1, OUT, "2024-06-10T17:10:00"))

    by_day = agg.worked_hours_by_day(events)

    assert by_day == {(1, datetime(2024, 6, 10).date()): pytest.approx(8.25)}
    assert agg.total_worked_hours(events) == 8.3


def test_day_without_check_out_contributes_nothing():
    agg = AttendanceAggregator()
    events = _events((1, IN, "2024-06-10T08:55:00"))

    assert agg.worked_hours_by_day(events) == {}
    assert agg.total_worked_hours(events) == 0


def test_earliest_check_in_and_latest_check_out_win():
    agg = AttendanceAggregator()
    events = _events(
        (1, IN, "2024-06-10T09:00:00"),
        (1, OUT, "2024-06-10T12:00:00"),
        (1, IN, "2024-06-10T08:00:00"),
        (1, OUT, "2024-06-10T17:00:00"),
    )

    assert agg.total_worked_hours(events) == 9.0


def test_days_are_summed_per_user():
    agg = AttendanceAggregator()
    events = _events(
        (1, IN, "2024-06-10T09:00:00"),
        (1, OUT, "2024-06-10T17:00:00"),
        (2, IN, "2024-06-10T10:00:00"),
        (2, OUT, "2024-06-10T14:30:00"),
        (1, IN, "2024-06-11T09:00:00"),
        (1, OUT, "2024-06-11T10:00:00"),
    )

    assert len(agg.worked_hours_by_day(events)) == 3
    assert agg.total_worked_hours(events) == 13.5


def test_non_positive_and_oversized_days_are_dropped():
    agg = AttendanceAggregator(max_hours_per_day=10)
    events = _events(
        (1, IN, "2024-06-10T17:00:00"),
        (1, OUT, "2024-06-10T09:00:00"),
        (2, IN, "2024-06-10T06:00:00"),
        (2, OUT, "2024-06-10T20:00:00"),
    )

    assert agg.worked_hours_by_day(events) == {}


def test_empty_input():
    agg = AttendanceAggregator()

    assert agg.total_worked_hours([]) == 0
    assert agg.presence_ratio([], window_days=7, now=datetime(2024, 6, 10, 12, 0)) == 0


def test_presence_ratio_is_full_when_anyone_punched_in_the_window():
    agg = AttendanceAggregator()
    now = datetime(2024, 6, 10, 12, 0)
    events = _events((1, IN, "2024-06-09T09:00:00"), (2, IN, "2024-05-01T09:00:00"))

    assert agg.presence_ratio(events, window_days=7, now=now) == 100
    assert agg.presence_ratio(events, window_days=30, now=now) == 100


def test_presence_ratio_ignores_events_outside_the_window():
    agg = AttendanceAggregator()
    now = datetime(2024, 6, 10, 12, 0)
    events = _events((1, IN, "2024-05-01T09:00:00"), (1, IN, "2024-06-10T13:00:00"))

    assert agg.presence_ratio(events, window_days=7, now=now) == 0
