"""Tests for recurrence phrases and five-field matching."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from kairos.scheduler.recurrence import clock_fields, is_valid, match_field, matches, translate

PARIS = ZoneInfo("Europe/Paris")


@pytest.mark.parametrize(
    ("phrase", "expr"),
    [
        ("every minute", "* * * * *"),
        ("every hour", "0 * * * *"),
        ("every day at 9:00", "0 9 * * *"),
        ("every morning at 7", "0 7 * * *"),
        ("every evening at 21h15", "15 21 * * *"),
        ("every monday at 10:30", "30 10 * * 1"),
        ("every sunday at 8:00", "0 8 * * 0"),
        ("every fri at 18:00", "0 18 * * 5"),
        ("every weekday at 8:30", "30 8 * * 1-5"),
        ("every weekend at 10:00", "0 10 * * 0,6"),
        ("every 15 minutes", "*/15 * * * *"),
        ("every 2 hours", "0 */2 * * *"),
        ("Every Day At 9:05", "5 9 * * *"),
    ],
)
def test_translate(phrase: str, expr: str) -> None:
    assert translate(phrase) == expr


def test_translate_passes_through_five_tokens() -> None:
    assert translate("30  9 * * 1-5") == "30 9 * * 1-5"


def test_translate_unrecognised() -> None:
    assert translate("every fortnight") is None
    assert translate("sometimes") is None


@pytest.mark.parametrize(
    ("expr", "valid"),
    [
        ("0 9 * * *", True),
        ("*/15 * * * *", True),
        ("1-5,7 * * * 0,6", True),
        ("61 * * * *", True),
        ("0 9 * *", False),
        ("0 9 * * mon", False),
        ("0 9 * * * *", False),
    ],
)
def test_is_valid(expr: str, valid: bool) -> None:
    assert is_valid(expr) is valid


@pytest.mark.parametrize(
    ("field", "value", "expected"),
    [
        ("*", 3, True),
        ("*/15", 30, True),
        ("*/15", 31, False),
        ("1-5", 5, True),
        ("1-5", 6, False),
        ("0,6", 6, True),
        ("0,6", 3, False),
        ("1-3,5", 2, True),
        ("1-3,5", 5, True),
        ("1-3,5", 4, False),
        ("7", 7, True),
        ("7", 8, False),
        ("*/0", 0, False),
        ("abc", 1, False),
    ],
)
def test_match_field(field: str, value: int, expected: bool) -> None:
    assert match_field(field, value) is expected


def test_clock_fields_sunday_is_zero() -> None:
    assert clock_fields(datetime(2026, 3, 15, 9, 0, tzinfo=PARIS)) == (0, 9, 15, 3, 0)


def test_daily_nine_oclock_matches_only_nine() -> None:
    expr = "0 9 * * *"
    assert not matches(expr, datetime(2026, 3, 10, 8, 59, tzinfo=PARIS))
    assert matches(expr, datetime(2026, 3, 10, 9, 0, tzinfo=PARIS))
    assert not matches(expr, datetime(2026, 3, 10, 9, 1, tzinfo=PARIS))


def test_weekday_matching() -> None:
    tuesday = datetime(2026, 3, 10, 9, 0, tzinfo=PARIS)
    sunday = datetime(2026, 3, 15, 9, 0, tzinfo=PARIS)
    assert matches("0 9 * * 1-5", tuesday)
    assert not matches("0 9 * * 1-5", sunday)
    assert matches("0 9 * * 0,6", sunday)


# Monday 9 March 2026, 00:00 in Paris; no DST change that week
WEEK_START = datetime(2026, 3, 9, 0, 0, tzinfo=PARIS)


def _matching_minutes(expr: str) -> list[datetime]:
    week = (WEEK_START + timedelta(minutes=n) for n in range(7 * 24 * 60))
    return [moment for moment in week if matches(expr, moment)]


def test_every_weekday_matches_only_five_minutes_a_week() -> None:
    hits = _matching_minutes(translate("every weekday at 8:30"))
    assert hits == [datetime(2026, 3, day, 8, 30, tzinfo=PARIS) for day in range(9, 14)]


def test_every_weekend_matches_only_two_minutes_a_week() -> None:
    hits = _matching_minutes(translate("every weekend at 10:15"))
    assert hits == [
        datetime(2026, 3, 14, 10, 15, tzinfo=PARIS),
        datetime(2026, 3, 15, 10, 15, tzinfo=PARIS),
    ]


def test_matches_rejects_wrong_field_count() -> None:
    assert not matches("0 9 * *", datetime(2026, 3, 10, 9, 0, tzinfo=PARIS))
