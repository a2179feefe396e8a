from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceEventType


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one check-in or check-out punch."""

    event_id: int
    user_id: int
    event_type: AttendanceEventType
    timestamp: datetime
