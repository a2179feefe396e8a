from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse `YYYY-MM-DDTHH:MM[:SS]` (datetime-local inputs)."""
    return datetime.fromisoformat(value.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def local_date(ts: datetime) -> date:
    """Calendar date of a timestamp in the ambient local timezone.

    Naive timestamps are taken as already local; aware ones are converted first.
    """
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a spreadsheet (2.5 -> 3), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
