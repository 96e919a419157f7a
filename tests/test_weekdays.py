"""Weekday set encoding tests."""

from datetime import date

import pytest

from app.utils.weekdays import InvalidWeekdayError, Weekday, format_weekdays, ordered_weekdays, parse_weekdays


def test_parse_is_case_and_order_insensitive() -> None:
    assert parse_weekdays(" fri,Mon , wed") == frozenset({Weekday.MON, Weekday.WED, Weekday.FRI})
    assert parse_weekdays(["sun", "SAT"]) == frozenset({Weekday.SAT, Weekday.SUN})


def test_empty_inputs_give_empty_set() -> None:
    assert parse_weekdays(None) == frozenset()
    assert parse_weekdays("") == frozenset()
    assert parse_weekdays(" , ,") == frozenset()


def test_format_uses_canonical_order() -> None:
    days = {Weekday.FRI, Weekday.MON, Weekday.WED}
    assert format_weekdays(days) == "MON,WED,FRI"
    assert ordered_weekdays(days) == ["MON", "WED", "FRI"]


def test_unknown_token_is_rejected_in_strict_mode() -> None:
    with pytest.raises(InvalidWeekdayError):
        parse_weekdays("MON,FUNDAY")


def test_unknown_token_is_dropped_when_reading_stored_values() -> None:
    assert parse_weekdays("MON,FUNDAY", strict=False) == frozenset({Weekday.MON})


def test_weekday_of_date() -> None:
    assert Weekday.of(date(2025, 9, 1)) is Weekday.MON
    assert Weekday.of(date(2025, 9, 7)) is Weekday.SUN
