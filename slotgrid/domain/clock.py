"""
Clock abstraction so that "today" can be pinned in tests.
"""

from __future__ import annotations

from typing import Protocol

import pendulum
from pendulum import DateTime, Timezone


class Clock(Protocol):
    """Protocol describing the wall-clock behaviour needed by date helpers."""

    def now(self, tz: str | Timezone | None = None) -> DateTime:
        """Return the current instant in the given timezone."""


class SystemClock:
    """Reads the real wall clock."""

    def now(self, tz: str | Timezone | None = None) -> DateTime:
        return pendulum.now(tz)


class FixedClock:
    """
    Clock pinned to a single instant.

    Accepts an ISO-8601 string or a pendulum DateTime.
    """

    def __init__(self, instant: DateTime | str):
        if isinstance(instant, str):
            instant = pendulum.parse(instant)
        self._instant = instant

    def now(self, tz: str | Timezone | None = None) -> DateTime:
        if tz is None:
            return self._instant.in_timezone(pendulum.local_timezone())
        return self._instant.in_timezone(tz)
