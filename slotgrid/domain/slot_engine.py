"""
Core business logic for partitioning a time range into reservation slots.

Pure domain logic: no clock, no I/O. The same inputs always give the same
slots.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import pendulum
from pendulum import DateTime, Duration

from .date_arithmetic import DEFAULT_TIME_FORMAT, resolve_timezone
from .exceptions import RangeAlignmentError
from .models import ReservationInterval, Slot, TimeRange
from .timeparse import parse_period, to_utc_iso

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = pendulum.duration(minutes=30)

ReservationLike = Union[ReservationInterval, Mapping[str, object]]


class RemainderPolicy(str, enum.Enum):
    """What to do when the range is not a whole number of periods."""

    TRUNCATE = "truncate"
    REJECT = "reject"


class SlotEngine:
    """
    Splits a time range into fixed-width slots and marks reservation state.

    Algorithm:
    1. Convert the range to UTC
    2. Walk a cursor from start to end in steps of ``period``
    3. Test each slot against confirmed and editing reservations
    4. Mark the first and last slot of every occupied run in one pass
    """

    def __init__(
        self,
        time_format: str = DEFAULT_TIME_FORMAT,
        timezone: Optional[str] = None,
        default_period: Duration = DEFAULT_PERIOD,
        remainder_policy: RemainderPolicy = RemainderPolicy.TRUNCATE,
    ):
        self.time_format = time_format
        self.timezone = resolve_timezone(timezone)
        self.default_period = parse_period(default_period)
        self.remainder_policy = RemainderPolicy(remainder_policy)

    def generate_slots(
        self,
        range_start: DateTime | str | None,
        range_end: DateTime | str | None,
        period: Duration | str | None = None,
        reservations: Optional[Iterable[ReservationLike]] = None,
        editing_reservations: Optional[Iterable[ReservationLike]] = None,
    ) -> List[Slot]:
        """
        Partition ``[range_start, range_end)`` into slots of length ``period``.

        Args:
            range_start: Start of the range (ISO-8601 string or DateTime)
            range_end: End of the range
            period: Slot length; the engine default when omitted
            reservations: Confirmed reservations as intervals or ``{begin, end}`` records
            editing_reservations: Reservations currently being edited

        Returns:
            Slots in time order. Empty when either range bound is missing.
        """
        if not range_start or not range_end:
            return []

        time_range = TimeRange.parse(range_start, range_end).to_utc()
        step = self.default_period if period is None or period == "" else parse_period(period)
        confirmed = self._coerce_all(reservations)
        editing = self._coerce_all(editing_reservations)

        bounds = self._partition(time_range, step)
        reserved_flags = [self._overlaps_any(start, end, confirmed) for start, end in bounds]
        editing_flags = [self._overlaps_any(start, end, editing) for start, end in bounds]

        slots = self._build_slots(bounds, reserved_flags, editing_flags)

        logger.debug(
            "Generated %d slots of %s for %s (%d reserved, %d editing)",
            len(slots),
            step.in_words(),
            time_range,
            sum(reserved_flags),
            sum(editing_flags),
        )
        return slots

    def _partition(self, time_range: TimeRange, step: Duration) -> List[tuple]:
        """
        Generate (start, end) pairs covering the range.

        A trailing remainder shorter than ``step`` is dropped or rejected
        according to the remainder policy.
        """
        bounds = []
        cursor = time_range.start

        while cursor + step <= time_range.end:
            bounds.append((cursor, cursor + step))
            cursor = cursor + step

        if cursor < time_range.end:
            remainder = time_range.end - cursor
            if self.remainder_policy is RemainderPolicy.REJECT:
                raise RangeAlignmentError(
                    f"Range {time_range} is not a whole number of {step.in_words()} periods"
                )
            logger.warning(
                "Dropping trailing %s of range %s that does not fill a whole slot",
                remainder.in_words(),
                time_range,
            )

        return bounds

    def _build_slots(
        self,
        bounds: Sequence[tuple],
        reserved_flags: Sequence[bool],
        editing_flags: Sequence[bool],
    ) -> List[Slot]:
        occupied = [r or e for r, e in zip(reserved_flags, editing_flags)]
        last = len(bounds) - 1
        slots: List[Slot] = []

        for index, (start, end) in enumerate(bounds):
            previous_occupied = index > 0 and occupied[index - 1]
            next_occupied = index < last and occupied[index + 1]
            start_iso = to_utc_iso(start)
            end_iso = to_utc_iso(end)

            slots.append(
                Slot(
                    start=start_iso,
                    end=end_iso,
                    as_iso_string=f"{start_iso}/{end_iso}",
                    as_string=self._display_string(start, end),
                    reserved=reserved_flags[index],
                    editing=editing_flags[index],
                    reservation_starting=occupied[index] and not previous_occupied,
                    reservation_ending=occupied[index] and not next_occupied,
                )
            )

        return slots

    def _display_string(self, start: DateTime, end: DateTime) -> str:
        local_start = start.in_timezone(self.timezone).format(self.time_format)
        local_end = end.in_timezone(self.timezone).format(self.time_format)
        return f"{local_start}–{local_end}"

    @staticmethod
    def _overlaps_any(
        start: DateTime,
        end: DateTime,
        intervals: Sequence[ReservationInterval],
    ) -> bool:
        return any(interval.overlaps(start, end) for interval in intervals)

    @staticmethod
    def _coerce_all(
        values: Optional[Iterable[ReservationLike]],
    ) -> List[ReservationInterval]:
        if not values:
            return []
        return [ReservationInterval.coerce(value) for value in values]


def generate_slots(
    range_start: DateTime | str | None,
    range_end: DateTime | str | None,
    period: Duration | str | None = None,
    reservations: Optional[Iterable[ReservationLike]] = None,
    editing_reservations: Optional[Iterable[ReservationLike]] = None,
    *,
    time_format: str = DEFAULT_TIME_FORMAT,
    timezone: Optional[str] = None,
) -> List[Slot]:
    """Function form of :meth:`SlotEngine.generate_slots`."""
    engine = SlotEngine(time_format=time_format, timezone=timezone)
    return engine.generate_slots(
        range_start,
        range_end,
        period,
        reservations,
        editing_reservations,
    )
