"""Weekday set encoding used by policy and student overrides.

Weekday sets are stored as comma-joined tokens (``"MON,WED,FRI"``). Inside
the application they are handled as ``frozenset[Weekday]``; the string form
only exists at the database and API boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from enum import Enum

logger = logging.getLogger(__name__)


class Weekday(str, Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @classmethod
    def of(cls, value: date) -> "Weekday":
        """Return the weekday token for a calendar date."""
        return WEEKDAY_ORDER[value.weekday()]


WEEKDAY_ORDER: tuple[Weekday, ...] = tuple(Weekday)


class InvalidWeekdayError(ValueError):
    """Raised when a weekday token is not one of MON..SUN."""


def parse_weekdays(raw: str | Iterable[str] | None, *, strict: bool = True) -> frozenset[Weekday]:
    """Decode comma-joined tokens or a token list into a weekday set.

    Tokens are trimmed and case-insensitive. Unknown tokens raise
    ``InvalidWeekdayError`` when ``strict``; otherwise they are dropped with a
    warning, which is how stored values are read back.
    """
    if raw is None:
        return frozenset()
    tokens = raw.split(",") if isinstance(raw, str) else list(raw)

    days: set[Weekday] = set()
    for token in tokens:
        cleaned = str(token).strip().upper()
        if not cleaned:
            continue
        try:
            days.add(Weekday(cleaned))
        except ValueError as exc:
            if strict:
                raise InvalidWeekdayError(f"Unknown weekday token: {token!r}") from exc
            logger.warning("Ignoring unknown weekday token %r", token)
    return frozenset(days)


def format_weekdays(days: Iterable[Weekday]) -> str:
    """Encode a weekday set in canonical MON..SUN order."""
    selected = set(days)
    return ",".join(day.value for day in WEEKDAY_ORDER if day in selected)


def ordered_weekdays(days: Iterable[Weekday]) -> list[str]:
    """Return weekday tokens in canonical order, for JSON responses."""
    selected = set(days)
    return [day.value for day in WEEKDAY_ORDER if day in selected]
