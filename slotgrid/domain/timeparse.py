"""
Parsing of the string forms the engine accepts.

Every helper returns offset-aware pendulum values and raises
``TimeParseError`` instead of guessing when the input is malformed.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

import pendulum
from pendulum import DateTime, Duration

from .exceptions import InvalidPeriodError, TimeParseError

UTC_ISO_FORMAT = "YYYY-MM-DD[T]HH:mm:ss[Z]"
UTC_ISO_MS_FORMAT = "YYYY-MM-DD[T]HH:mm:ss.SSS[Z]"

_PERIOD_PATTERN = re.compile(
    r"^(?P<hours>\d+):(?P<minutes>[0-5]\d)(?::(?P<seconds>[0-5]\d))?$"
)


def parse_instant(value: DateTime | datetime | str) -> DateTime:
    """
    Parse an ISO-8601 instant.

    Strings without an offset are read as UTC, which is pendulum's own rule.
    Naive ``datetime`` objects are refused.
    """
    if isinstance(value, DateTime):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise TimeParseError(f"Naive datetime {value!r} has no UTC offset")
        return pendulum.instance(value)
    if not isinstance(value, str):
        raise TimeParseError(f"Unsupported instant value: {value!r}")

    try:
        parsed = pendulum.parse(value.strip())
    except ValueError as exc:
        raise TimeParseError(f"Invalid ISO-8601 instant: {value!r}") from exc

    if not isinstance(parsed, DateTime):
        raise TimeParseError(f"Expected a date-time, got {value!r}")
    return parsed


def parse_date(value: str, date_format: str = "YYYY-MM-DD") -> DateTime:
    """Parse a calendar date into midnight UTC of that day."""
    try:
        return pendulum.from_format(value, date_format, tz="UTC").start_of("day")
    except ValueError as exc:
        raise TimeParseError(
            f"Invalid date {value!r}, expected format {date_format}"
        ) from exc


def parse_time(value: str, time_format: str = "HH:mm") -> DateTime:
    """Parse a wall-clock time; only hour and minute of the result are meaningful."""
    try:
        return pendulum.from_format(value, time_format, tz="UTC")
    except ValueError as exc:
        raise TimeParseError(
            f"Invalid time {value!r}, expected format {time_format}"
        ) from exc


def parse_period(value: Duration | timedelta | str) -> Duration:
    """
    Parse a slot period.

    Accepts ``HH:MM:SS``, ``HH:MM``, an ISO-8601 duration such as ``PT30M``,
    or a timedelta.
    """
    if isinstance(value, Duration):
        period = value
    elif isinstance(value, timedelta):
        period = pendulum.duration(seconds=value.total_seconds())
    elif isinstance(value, str):
        period = _parse_period_string(value.strip())
    else:
        raise TimeParseError(f"Unsupported period value: {value!r}")

    if period.total_seconds() <= 0:
        raise InvalidPeriodError(f"Period must be positive, got {value!r}")
    return period


def _parse_period_string(value: str) -> Duration:
    match = _PERIOD_PATTERN.match(value)
    if match:
        return pendulum.duration(
            hours=int(match.group("hours")),
            minutes=int(match.group("minutes")),
            seconds=int(match.group("seconds") or 0),
        )

    if value.upper().startswith("P"):
        try:
            parsed = pendulum.parse(value)
        except ValueError as exc:
            raise TimeParseError(f"Invalid ISO-8601 duration: {value!r}") from exc
        if isinstance(parsed, Duration):
            return parsed

    raise TimeParseError(f"Invalid period {value!r}, expected HH:MM:SS")


def to_utc_iso(value: DateTime) -> str:
    """Render an instant as a UTC ISO-8601 string with milliseconds and a ``Z`` designator."""
    return value.in_timezone("UTC").format(UTC_ISO_MS_FORMAT)
