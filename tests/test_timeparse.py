"""Tests for natural-language time parsing in the scheduler timezone."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from kairos.scheduler.timeparse import (
    format_local,
    is_current_minute,
    is_in_past,
    now_local,
    parse_absolute,
    parse_instant,
    parse_relative,
    parse_time,
)

PARIS = ZoneInfo("Europe/Paris")

# Tuesday 10 March 2026, 08:59 in Paris (UTC+1)
NOW = datetime(2026, 3, 10, 8, 59, tzinfo=PARIS)


# -- relative ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "delta"),
    [
        ("in 20 minutes", timedelta(minutes=20)),
        ("in 1 min", timedelta(minutes=1)),
        ("in 2 hours", timedelta(hours=2)),
        ("in 3 hrs", timedelta(hours=3)),
        ("in 3 days", timedelta(days=3)),
        ("in 1 wk", timedelta(weeks=1)),
        ("In 2 Weeks", timedelta(weeks=2)),
    ],
)
def test_parse_relative(text: str, delta: timedelta) -> None:
    assert parse_relative(text, NOW) == (NOW + delta).astimezone(UTC)


def test_relative_days_keep_wall_clock_across_dst() -> None:
    # Clocks go forward on 29 March 2026
    before = datetime(2026, 3, 28, 10, 0, tzinfo=PARIS)
    result = parse_relative("in 1 day", before)
    assert result == datetime(2026, 3, 29, 8, 0, tzinfo=UTC)


def test_relative_days_keep_wall_clock_when_clocks_go_back() -> None:
    # Clocks go back on 25 October 2026
    before = datetime(2026, 10, 24, 10, 0, tzinfo=PARIS)
    assert parse_relative("in 1 day", before) == datetime(2026, 10, 25, 9, 0, tzinfo=UTC)


def test_relative_hours_are_elapsed_time_when_clocks_go_forward() -> None:
    now = datetime(2026, 3, 29, 0, 30, tzinfo=UTC)
    assert parse_relative("in 2 hours", now) == datetime(2026, 3, 29, 2, 30, tzinfo=UTC)


def test_relative_minutes_are_elapsed_time_when_clocks_go_back() -> None:
    now = datetime(2026, 10, 25, 0, 45, tzinfo=UTC)
    assert parse_relative("in 30 minutes", now) == datetime(2026, 10, 25, 1, 15, tzinfo=UTC)


def test_parse_relative_rejects_other_phrases() -> None:
    assert parse_relative("tomorrow at 9:00", NOW) is None
    assert parse_relative("in a bit", NOW) is None


# -- absolute ------------------------------------------------------------------


def test_today_at() -> None:
    assert parse_absolute("today at 14:30", NOW) == datetime(2026, 3, 10, 13, 30, tzinfo=UTC)


def test_today_at_h_separator() -> None:
    assert parse_absolute("today at 14h30", NOW) == datetime(2026, 3, 10, 13, 30, tzinfo=UTC)


def test_today_at_hour_only() -> None:
    assert parse_absolute("today at 14", NOW) == datetime(2026, 3, 10, 13, 0, tzinfo=UTC)


def test_tomorrow_at() -> None:
    assert parse_absolute("Tomorrow AT 9:00", NOW) == datetime(2026, 3, 11, 8, 0, tzinfo=UTC)


def test_explicit_date() -> None:
    assert parse_absolute("2026-02-15 at 10:00", NOW) == datetime(2026, 2, 15, 9, 0, tzinfo=UTC)


def test_explicit_date_in_summer_time() -> None:
    assert parse_absolute("2026-07-01 at 10:00", NOW) == datetime(2026, 7, 1, 8, 0, tzinfo=UTC)


def test_other_timezone() -> None:
    ny = ZoneInfo("America/New_York")
    result = parse_absolute("2026-02-15 at 10:00", NOW, tz=ny)
    assert result == datetime(2026, 2, 15, 15, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "text",
    ["today at 25:00", "today at 12:75", "2026-02-30 at 10:00", "2026-13-01 at 10:00"],
)
def test_impossible_values_return_none(text: str) -> None:
    assert parse_absolute(text, NOW) is None


# -- parse_time ----------------------------------------------------------------


def test_parse_time_tries_relative_then_absolute() -> None:
    assert parse_time("in 1 hour", NOW) == datetime(2026, 3, 10, 8, 59, tzinfo=UTC)
    assert parse_time("tomorrow at 9", NOW) == datetime(2026, 3, 11, 8, 0, tzinfo=UTC)


@pytest.mark.parametrize("text", ["", "next tuesday", "at noon", "soon"])
def test_parse_time_unrecognised(text: str) -> None:
    assert parse_time(text, NOW) is None


# -- helpers -------------------------------------------------------------------


def test_now_local_converts_to_paris() -> None:
    utc_now = datetime(2026, 3, 10, 7, 59, tzinfo=UTC)
    assert now_local(utc_now).hour == 8
    assert now_local(utc_now).tzinfo == PARIS


def test_parse_instant_naive_is_utc() -> None:
    assert parse_instant("2026-03-10T08:00:00") == datetime(2026, 3, 10, 8, 0, tzinfo=UTC)


def test_is_current_minute() -> None:
    assert is_current_minute(datetime(2026, 3, 10, 7, 59, 30, tzinfo=UTC), NOW)
    assert not is_current_minute(datetime(2026, 3, 10, 8, 0, tzinfo=UTC), NOW)
    assert is_current_minute("2026-03-10T07:59:00+00:00", NOW)


def test_is_in_past() -> None:
    assert is_in_past(datetime(2026, 3, 10, 7, 0, tzinfo=UTC), NOW)
    assert not is_in_past(datetime(2026, 3, 10, 9, 0, tzinfo=UTC), NOW)


def test_format_local() -> None:
    assert format_local("2026-03-10T13:30:00+00:00") == "10/03/2026 14:30"
    assert format_local(datetime(2026, 7, 1, 8, 0, tzinfo=UTC)) == "01/07/2026 10:00"
