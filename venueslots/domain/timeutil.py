"""
Calendar and wall-clock helpers shared by the schedule components.

All zone handling goes through pendulum so that day boundaries follow the
IANA database instead of fixed UTC offsets.
"""

from __future__ import annotations

import re
from typing import Tuple, Union

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidRequest

_HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DateLike = Union[str, Date]


def parse_date(value: DateLike) -> Date:
    """
    Parse a local calendar date.

    Args:
        value: ``YYYY-MM-DD`` string or a date object

    Returns:
        Pendulum Date

    Raises:
        InvalidRequest: If the value is not a valid calendar date
    """
    if isinstance(value, DateTime):
        return value.date()
    if isinstance(value, Date):
        return value
    try:
        return pendulum.from_format(str(value).strip(), "YYYY-MM-DD").date()
    except ValueError as exc:
        raise InvalidRequest(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def parse_hhmm(value: str) -> Tuple[int, int]:
    """Split an ``HH:mm`` string into hour and minute."""
    match = _HHMM_PATTERN.match(value or "")
    if not match:
        raise InvalidRequest(f"Invalid time '{value}', expected HH:mm")
    return int(match.group(1)), int(match.group(2))


def format_hhmm(total_minutes: int) -> str:
    """Format minutes since midnight as ``HH:mm``, wrapping at 24:00."""
    total_minutes %= 24 * 60
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def validate_timezone(name: str) -> str:
    """Return ``name`` if it is a known IANA timezone."""
    try:
        pendulum.timezone(name)
    except (ValueError, KeyError) as exc:
        raise InvalidRequest(f"Unknown timezone: '{name}'") from exc
    return name


def parse_instant(value: Union[str, DateTime]) -> DateTime:
    """
    Parse an ISO 8601 instant.

    Strings without an offset are read as UTC, matching how the booking
    store serializes TIMESTAMPTZ columns.
    """
    if isinstance(value, DateTime):
        return value
    try:
        parsed = pendulum.parse(str(value))
    except ValueError as exc:
        raise InvalidRequest(f"Invalid instant '{value}'") from exc
    if not isinstance(parsed, DateTime):
        raise InvalidRequest(f"Invalid instant '{value}', expected a date and time")
    return parsed


def local_day_start(date: Date, timezone: str) -> DateTime:
    """Midnight at the start of ``date`` in ``timezone``."""
    return pendulum.datetime(date.year, date.month, date.day, tz=timezone)


def local_slot_start(date: Date, start_time: str, timezone: str) -> DateTime:
    """The instant a slot labelled ``start_time`` begins on ``date``."""
    hour, minute = parse_hhmm(start_time)
    return pendulum.datetime(date.year, date.month, date.day, hour, minute, tz=timezone)
