"""
Domain models for time ranges, reservations and generated slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from pendulum import DateTime

from .exceptions import InvalidRangeError, InvalidReservationError
from .timeparse import parse_instant


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidRangeError(f"Start time {self.start} must be before end time {self.end}")

    @classmethod
    def parse(cls, start: DateTime | str, end: DateTime | str) -> "TimeRange":
        """Build a range from ISO-8601 strings or pendulum values."""
        return cls(start=parse_instant(start), end=parse_instant(end))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (touching ends do not count)."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def to_utc(self) -> "TimeRange":
        """Return the same range expressed in UTC."""
        return TimeRange(start=self.start.in_timezone("UTC"), end=self.end.in_timezone("UTC"))

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class ReservationInterval:
    """
    A confirmed reservation or one being edited.

    Occupies the half-open interval ``[begin, end)``.
    """
    begin: DateTime
    end: DateTime

    def __post_init__(self):
        if self.begin >= self.end:
            raise InvalidRangeError(
                f"Reservation begin {self.begin} must be before its end {self.end}"
            )

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "ReservationInterval":
        """
        Build an interval from a reservation record.

        Only ``begin`` and ``end`` are read; full reservation records carry
        many more fields which are ignored here.
        """
        missing = [key for key in ("begin", "end") if not record.get(key)]
        if missing:
            raise InvalidReservationError(
                f"Reservation record is missing {', '.join(missing)}: {dict(record)!r}"
            )
        return cls(begin=parse_instant(record["begin"]), end=parse_instant(record["end"]))

    @classmethod
    def coerce(cls, value: "ReservationInterval | Mapping[str, Any]") -> "ReservationInterval":
        """Accept an interval as-is or convert a ``{begin, end}`` mapping."""
        if isinstance(value, ReservationInterval):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        raise InvalidReservationError(f"Unsupported reservation value: {value!r}")

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        """True if ``[start, end)`` shares any instant with this reservation."""
        return start < self.end and end > self.begin

    def to_dict(self) -> Dict[str, str]:
        return {
            "begin": self.begin.to_iso8601_string(),
            "end": self.end.to_iso8601_string(),
        }


@dataclass(frozen=True)
class Slot:
    """
    One fixed-width piece of a partitioned time range.

    ``start`` and ``end`` are UTC ISO-8601 strings; ``as_string`` is the
    local display form, e.g. ``08:00–08:30``.
    """
    start: str
    end: str
    as_iso_string: str
    as_string: str
    reserved: bool = False
    editing: bool = False
    reservation_starting: bool = False
    reservation_ending: bool = False

    @property
    def occupied(self) -> bool:
        """True if the slot is reserved or being edited."""
        return self.reserved or self.editing

    @property
    def time_range(self) -> TimeRange:
        return TimeRange.parse(self.start, self.end)

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase mapping consumed by the UI layer."""
        return {
            "start": self.start,
            "end": self.end,
            "asISOString": self.as_iso_string,
            "asString": self.as_string,
            "reserved": self.reserved,
            "editing": self.editing,
            "reservationStarting": self.reservation_starting,
            "reservationEnding": self.reservation_ending,
        }
