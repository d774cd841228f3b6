"""
Calendar-date helpers shared by the slot engine and the host application.

Dates travel as formatted strings (``YYYY-MM-DD`` by default). The formats
and the display timezone are supplied by the host; the current date comes
from an injectable clock.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Dict, Optional

import pendulum
from pendulum import DateTime

from .clock import Clock, SystemClock
from .timeparse import UTC_ISO_FORMAT, parse_date, parse_instant, parse_time

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
DEFAULT_TIME_FORMAT = "HH:mm"


def resolve_timezone(timezone: Optional[str]):
    """Return a pendulum timezone, falling back to the system local zone."""
    if timezone:
        return pendulum.timezone(timezone)
    return pendulum.local_timezone()


def format_number(value: float) -> str:
    """
    Render a number without a trailing ``.0`` when it is integral.

    ``18.0`` becomes ``"18"``, ``0.5`` stays ``"0.5"``.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class DateArithmetic:
    """
    Pure date utilities bound to a date format, a display timezone and a clock.
    """

    def __init__(
        self,
        date_format: str = DEFAULT_DATE_FORMAT,
        time_format: str = DEFAULT_TIME_FORMAT,
        timezone: Optional[str] = None,
        clock: Optional[Clock] = None,
    ):
        self.date_format = date_format
        self.time_format = time_format
        self.timezone = resolve_timezone(timezone)
        self.clock = clock or SystemClock()

    def parse_date(self, date_string: str) -> DateTime:
        return parse_date(date_string, self.date_format)

    def parse_instant(self, value) -> DateTime:
        return parse_instant(value)

    def today(self) -> DateTime:
        """Current date in the display timezone, at midnight."""
        return self.clock.now(self.timezone).start_of("day")

    def add_days(self, date_string: str, days: int) -> str:
        """Shift a calendar date by ``days`` (negative values go back in time)."""
        return self.parse_date(date_string).add(days=days).format(self.date_format)

    def day_bounds(self, date_string: Optional[str]) -> Dict[str, str]:
        """
        Return the UTC start and end instants of a calendar date.

        Example: ``2015-10-10`` gives ``2015-10-10T00:00:00Z`` and
        ``2015-10-10T23:59:59Z``. A missing date gives an empty dict.
        """
        if not date_string:
            return {}

        day = self.parse_date(date_string)
        return {
            "start": day.start_of("day").format(UTC_ISO_FORMAT),
            "end": day.end_of("day").format(UTC_ISO_FORMAT),
        }

    def current_or_given_date_string(self, date_string: Optional[str]) -> str:
        """Return ``date_string`` unchanged, or today's date when it is empty."""
        if date_string:
            return date_string
        return self.today().format(self.date_format)

    def is_past_date(self, date_string: str) -> bool:
        """True if the date is strictly before today (date granularity)."""
        return self.parse_date(date_string).date() < self.today().date()

    def prettify_duration(self, hours: float, show_minutes: bool = False) -> str:
        """
        Format a duration given in hours.

        Durations under half an hour are shown in minutes when
        ``show_minutes`` is set; everything else is rounded to the nearest
        half hour.
        """
        if show_minutes and hours < 0.5:
            return f"{format_number(hours * 60)} min"

        rounded = math.floor(hours * 2 + 0.5) / 2
        return f"{format_number(rounded)} h"

    def combine(self, date_string: str, time_string: str) -> str:
        """ISO-8601 instant for a wall-clock time on a date in the display timezone."""
        day = self.parse_date(date_string)
        clock_time = parse_time(time_string, self.time_format)
        local = pendulum.datetime(
            day.year,
            day.month,
            day.day,
            clock_time.hour,
            clock_time.minute,
            tz=self.timezone,
        )
        return local.to_iso8601_string()


@lru_cache(maxsize=1)
def _default_arithmetic() -> DateArithmetic:
    return DateArithmetic()


def add_days(date_string: str, days: int) -> str:
    return _default_arithmetic().add_days(date_string, days)


def day_bounds(date_string: Optional[str]) -> Dict[str, str]:
    return _default_arithmetic().day_bounds(date_string)


def current_or_given_date_string(date_string: Optional[str]) -> str:
    return _default_arithmetic().current_or_given_date_string(date_string)


def is_past_date(date_string: str) -> bool:
    return _default_arithmetic().is_past_date(date_string)


def prettify_duration(hours: float, show_minutes: bool = False) -> str:
    return _default_arithmetic().prettify_duration(hours, show_minutes)
