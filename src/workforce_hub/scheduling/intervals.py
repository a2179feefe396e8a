"""Overlap checks for leave date ranges and room booking time ranges.

Leave requests occupy whole days, so their ranges are inclusive on both ends:
10..12 and 12..14 share day 12 and conflict. Bookings are timestamp ranges with an
excluded end instant, so a meeting ending at 10:00 and another starting at 10:00
do not conflict.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Iterable, Optional


class Boundary(str, Enum):
    INCLUSIVE = "inclusive"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class Span:
    """A start/end pair tagged with a status and the id of the record it came from."""

    start: Any
    end: Any
    status: Optional[Enum] = None
    record_id: Optional[int] = None


def overlaps(a: Span, b: Span, boundary: Boundary) -> bool:
    if boundary == Boundary.INCLUSIVE:
        return not (a.end < b.start or a.start > b.end)
    return not (a.end <= b.start or a.start >= b.end)


class IntervalSet:
    """Existing ranges of one owner (leave) or one room (bookings).

    The set does no fetching of its own; callers hand it the records they loaded.
    """

    def __init__(
        self,
        spans: Iterable[Span],
        *,
        boundary: Boundary,
        relevant_statuses: Collection[Enum],
    ):
        self._spans = list(spans)
        self._boundary = boundary
        self._relevant = frozenset(relevant_statuses)

    def __len__(self) -> int:
        return len(self._spans)

    def first_conflict(self, candidate: Span, *, exclude_id: Optional[int] = None) -> Optional[Span]:
        for other in self._spans:
            if other.status not in self._relevant:
                continue
            if exclude_id is not None and other.record_id == exclude_id:
                continue
            if overlaps(candidate, other, self._boundary):
                return other
        return None

    def has_conflict(self, candidate: Span, *, exclude_id: Optional[int] = None) -> bool:
        return self.first_conflict(candidate, exclude_id=exclude_id) is not None


def has_conflict(
    candidate: Span,
    existing: Iterable[Span],
    relevant_statuses: Collection[Enum],
    *,
    boundary: Boundary,
    exclude_id: Optional[int] = None,
) -> bool:
    return IntervalSet(existing, boundary=boundary, relevant_statuses=relevant_statuses).has_conflict(
        candidate, exclude_id=exclude_id
    )
