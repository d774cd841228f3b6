"""
Application services for building annotated slot lists.

The service fetches reservations through a source adapter and delegates the
partitioning to the domain-level ``SlotEngine``. The source is described by a
small protocol so tests can pass an in-memory stub.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from pendulum import DateTime

from ..adapters.reservation_file import ReservationBook
from ..domain.date_arithmetic import DateArithmetic
from ..domain.models import Slot, TimeRange
from ..domain.slot_engine import SlotEngine


class ReservationSourceProtocol(Protocol):
    """Protocol describing the reservation source behaviour needed by the service."""

    def get_reservations(self, start_time: DateTime, end_time: DateTime) -> ReservationBook:
        """Return reservations overlapping the window."""


class SlotService:
    """
    Orchestrates reservation retrieval and slot generation.
    """

    def __init__(
        self,
        reservation_source: ReservationSourceProtocol,
        slot_engine: SlotEngine,
        date_arithmetic: Optional[DateArithmetic] = None,
    ) -> None:
        self._reservation_source = reservation_source
        self._slot_engine = slot_engine
        self._date_arithmetic = date_arithmetic or DateArithmetic()

    def find_slots(
        self,
        *,
        range_start: DateTime | str,
        range_end: DateTime | str,
        period: Optional[str] = None,
    ) -> List[Slot]:
        """
        Retrieve reservations for the range and compute its slots.
        """
        window = TimeRange.parse(range_start, range_end)
        book = self.fetch_reservations(window)

        return self.calculate_slots(
            window=window,
            book=book,
            period=period,
        )

    def fetch_reservations(self, window: TimeRange) -> ReservationBook:
        """Fetch reservations overlapping the window."""
        return self._reservation_source.get_reservations(
            start_time=window.start,
            end_time=window.end,
        )

    def calculate_slots(
        self,
        *,
        window: TimeRange,
        book: ReservationBook,
        period: Optional[str] = None,
    ) -> List[Slot]:
        """Calculate slots from already fetched reservations."""
        return self._slot_engine.generate_slots(
            window.start,
            window.end,
            period,
            book.reservations,
            book.editing,
        )

    def slots_for_date(
        self,
        *,
        date_string: Optional[str],
        opens: str,
        closes: str,
        period: Optional[str] = None,
    ) -> List[Slot]:
        """
        Slots for one day's opening hours.

        An empty date means today.
        """
        day = self._date_arithmetic.current_or_given_date_string(date_string)
        return self.find_slots(
            range_start=self._date_arithmetic.combine(day, opens),
            range_end=self._date_arithmetic.combine(day, closes),
            period=period,
        )
