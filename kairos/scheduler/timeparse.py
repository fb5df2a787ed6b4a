"""Natural-language time expressions anchored to the scheduler timezone.

Recognised (case-insensitive):

- relative: ``in 20 minutes``, ``in 2 hrs``, ``in 3 days``, ``in 1 wk``
- absolute: ``today at 14``, ``today at 14:30``, ``today at 14h30``,
  ``tomorrow at 9:00``, ``2026-02-15 at 10:00``

Absolute times are interpreted as wall-clock times in the scheduler
timezone, whatever the process's own timezone is. Every function that
depends on the current time takes an optional ``now`` so callers (and
tests) can pin the clock.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING

from kairos.config import settings

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

DISPLAY_FORMAT = "%d/%m/%Y %H:%M"

_RELATIVE_RE = re.compile(
    r"^in\s+(\d+)\s*(minutes?|mins?|hours?|hrs?|days?|weeks?|wks?)$", re.IGNORECASE
)
_CLOCK = r"(\d{1,2})(?:[h:](\d{2}))?"
_TODAY_RE = re.compile(rf"^today\s+at\s+{_CLOCK}$", re.IGNORECASE)
_TOMORROW_RE = re.compile(rf"^tomorrow\s+at\s+{_CLOCK}$", re.IGNORECASE)
_DATE_RE = re.compile(rf"^(\d{{4}})-(\d{{2}})-(\d{{2}})\s+at\s+{_CLOCK}$", re.IGNORECASE)


def _tz(tz: ZoneInfo | None) -> ZoneInfo:
    return tz or settings.tz


def now_local(now: datetime | None = None, tz: ZoneInfo | None = None) -> datetime:
    """Return *now* (default: the current instant) in the scheduler timezone."""
    zone = _tz(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)


def _unit_delta(amount: int, unit: str) -> tuple[timedelta, bool]:
    """Return the offset and whether it is counted in calendar days."""
    unit = unit.lower()
    if unit.startswith("min"):
        return timedelta(minutes=amount), False
    if unit.startswith(("hour", "hr")):
        return timedelta(hours=amount), False
    if unit.startswith("day"):
        return timedelta(days=amount), True
    return timedelta(weeks=amount), True


def parse_relative(
    text: str, now: datetime | None = None, tz: ZoneInfo | None = None
) -> datetime | None:
    """Parse ``in <N> <unit>``. Returns a UTC instant or None.

    Minutes and hours are elapsed time. Days and weeks keep the local
    wall-clock time across a DST change.
    """
    match = _RELATIVE_RE.match(text.strip())
    if not match:
        return None
    delta, calendar = _unit_delta(int(match.group(1)), match.group(2))
    local = now_local(now, tz)
    if not calendar:
        return local.astimezone(UTC) + delta
    return (local + delta).astimezone(UTC)


def _at(day: date, hour: str, minute: str | None, tz: ZoneInfo) -> datetime | None:
    try:
        clock = time(int(hour), int(minute or 0))
    except ValueError:
        return None
    return datetime.combine(day, clock, tzinfo=tz).astimezone(UTC)


def parse_absolute(
    text: str, now: datetime | None = None, tz: ZoneInfo | None = None
) -> datetime | None:
    """Parse ``today at``, ``tomorrow at`` and ``YYYY-MM-DD at``. Returns a UTC instant or None."""
    zone = _tz(tz)
    text = text.strip()
    today = now_local(now, zone).date()

    if match := _TODAY_RE.match(text):
        return _at(today, match.group(1), match.group(2), zone)

    if match := _TOMORROW_RE.match(text):
        return _at(today + timedelta(days=1), match.group(1), match.group(2), zone)

    if match := _DATE_RE.match(text):
        year, month, day, hour, minute = match.groups()
        try:
            target_day = date(int(year), int(month), int(day))
        except ValueError:
            return None
        return _at(target_day, hour, minute, zone)

    return None


def parse_time(
    text: str, now: datetime | None = None, tz: ZoneInfo | None = None
) -> datetime | None:
    """Parse a relative or absolute time phrase into a UTC instant.

    Returns None when the phrase is not recognised or names an impossible
    date or clock time.
    """
    if not text:
        return None
    return parse_relative(text, now, tz) or parse_absolute(text, now, tz)


def parse_instant(value: str) -> datetime:
    """Read a stored ISO 8601 instant. Naive values are taken as UTC."""
    instant = datetime.fromisoformat(value)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant


def _floor_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def is_current_minute(instant: datetime | str, now: datetime | None = None) -> bool:
    """True when *instant* falls within the same wall-clock minute as *now*."""
    if isinstance(instant, str):
        instant = parse_instant(instant)
    current = now_local(now)
    return _floor_minute(instant.astimezone(UTC)) == _floor_minute(current.astimezone(UTC))


def is_in_past(instant: datetime | str, now: datetime | None = None) -> bool:
    """True when *instant* is strictly before *now*."""
    if isinstance(instant, str):
        instant = parse_instant(instant)
    return instant < now_local(now)


def format_local(instant: datetime | str, tz: ZoneInfo | None = None) -> str:
    """Format an instant for display in the scheduler timezone (``dd/MM/yyyy HH:mm``)."""
    if isinstance(instant, str):
        instant = parse_instant(instant)
    return instant.astimezone(_tz(tz)).strftime(DISPLAY_FORMAT)
