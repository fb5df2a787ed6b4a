"""Recurrence phrases, five-field expressions, and minute matching.

A normalized expression has five whitespace-separated fields:
minute, hour, day-of-month, month, day-of-week (0 = Sunday). Each field is
``*``, ``*/n``, ``a-b``, a comma list whose items may be ranges, or an
exact integer.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

DAY_NUMBERS: dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "sun": 0,
    "mon": 1,
    "tue": 2,
    "wed": 3,
    "thu": 4,
    "fri": 5,
    "sat": 6,
}

_AT = r"\s+at\s+(\d{1,2})(?:[h:](\d{2}))?$"
_DAILY_RE = re.compile(rf"^every\s+(?:day|morning|evening){_AT}")
_DAY_NAME_RE = re.compile(rf"^every\s+({'|'.join(DAY_NUMBERS)}){_AT}")
_WEEKDAY_RE = re.compile(rf"^every\s+weekday{_AT}")
_WEEKEND_RE = re.compile(rf"^every\s+weekend{_AT}")
_EVERY_N_MINUTES_RE = re.compile(r"^every\s+(\d+)\s+minutes?$")
_EVERY_N_HOURS_RE = re.compile(r"^every\s+(\d+)\s+hours?$")

# Syntax only: bounds such as minute <= 59 are not checked.
_FIELD_RE = re.compile(r"^(\*|\*/\d+|\d+(-\d+)?(,\d+(-\d+)?)*)$")


def _clock(hour: str, minute: str | None) -> str:
    return f"{int(minute or 0)} {int(hour)}"


def translate(text: str) -> str | None:
    """Translate a recurrence phrase into a five-field expression.

    Falls back to passing through anything already shaped as five
    whitespace-separated tokens. Returns None when nothing matches.
    """
    lower = text.lower().strip()

    if lower == "every minute":
        return "* * * * *"
    if lower == "every hour":
        return "0 * * * *"

    if match := _DAILY_RE.match(lower):
        return f"{_clock(*match.groups())} * * *"

    if match := _DAY_NAME_RE.match(lower):
        day, hour, minute = match.groups()
        return f"{_clock(hour, minute)} * * {DAY_NUMBERS[day]}"

    if match := _WEEKDAY_RE.match(lower):
        return f"{_clock(*match.groups())} * * 1-5"

    if match := _WEEKEND_RE.match(lower):
        return f"{_clock(*match.groups())} * * 0,6"

    if match := _EVERY_N_MINUTES_RE.match(lower):
        return f"*/{int(match.group(1))} * * * *"

    if match := _EVERY_N_HOURS_RE.match(lower):
        return f"0 */{int(match.group(1))} * * *"

    parts = lower.split()
    if len(parts) == 5:
        return " ".join(parts)

    return None


def is_valid(expr: str) -> bool:
    """Check that *expr* has five syntactically valid fields."""
    parts = expr.strip().split()
    if len(parts) != 5:
        return False
    return all(_FIELD_RE.match(part) for part in parts)


def _in_range(item: str, value: int) -> bool:
    start, _, end = item.partition("-")
    return int(start) <= value <= int(end)


def match_field(field: str, value: int) -> bool:
    """Evaluate one expression field against one clock component."""
    try:
        if field == "*":
            return True
        if field.startswith("*/"):
            return value % int(field[2:]) == 0
        if "," in field:
            return any(
                _in_range(item, value) if "-" in item else int(item) == value
                for item in field.split(",")
            )
        if "-" in field:
            return _in_range(field, value)
        return int(field) == value
    except (ValueError, ZeroDivisionError):
        return False


def clock_fields(moment: datetime) -> tuple[int, int, int, int, int]:
    """Split a wall-clock moment into (minute, hour, day, month, weekday)."""
    return (
        moment.minute,
        moment.hour,
        moment.day,
        moment.month,
        moment.isoweekday() % 7,
    )


def matches(expr: str, moment: datetime) -> bool:
    """True when all five fields of *expr* match *moment*.

    *moment* must already be expressed in the scheduler timezone.
    """
    fields = expr.split()
    if len(fields) != 5:
        return False
    return all(
        match_field(field, value)
        for field, value in zip(fields, clock_fields(moment), strict=True)
    )
