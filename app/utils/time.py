"""Date helpers shared by ledger and reporting code."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return the current timestamp in UTC; all ledger timestamps use UTC."""
    return datetime.now(timezone.utc)


def iter_days(start: date, end: date) -> list[date]:
    """Return every calendar day in the inclusive range; empty when start > end."""
    days: list[date] = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days
