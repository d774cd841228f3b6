"""
Reservation sources backed by a YAML/JSON file or by in-memory lists.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

import yaml
from pendulum import DateTime

from ..domain.exceptions import ReservationSourceError, SlotGridError
from ..domain.models import ReservationInterval, TimeRange

logger = logging.getLogger(__name__)


@dataclass
class ReservationBook:
    """Confirmed reservations and the ones being edited, for one window."""
    reservations: List[ReservationInterval] = field(default_factory=list)
    editing: List[ReservationInterval] = field(default_factory=list)

    def within(self, window: TimeRange) -> "ReservationBook":
        """Return only the intervals overlapping ``window``."""
        return ReservationBook(
            reservations=[r for r in self.reservations if r.overlaps(window.start, window.end)],
            editing=[r for r in self.editing if r.overlaps(window.start, window.end)],
        )


class InMemoryReservationSource:
    """Serves reservations held in memory."""

    def __init__(
        self,
        reservations: Optional[Iterable[Any]] = None,
        editing: Optional[Iterable[Any]] = None,
    ):
        self._book = ReservationBook(
            reservations=[ReservationInterval.coerce(r) for r in reservations or []],
            editing=[ReservationInterval.coerce(r) for r in editing or []],
        )

    def get_reservations(self, start_time: DateTime, end_time: DateTime) -> ReservationBook:
        return self._book.within(TimeRange(start=start_time, end=end_time))


class ReservationFileSource:
    """
    Reads reservations from a YAML or JSON document.

    Expected layout::

        reservations:
          - begin: "2015-10-09T08:30:00+03:00"
            end: "2015-10-09T09:30:00+03:00"
        editing:
          - begin: ...
            end: ...

    Records that cannot be parsed are skipped with a warning.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def get_reservations(self, start_time: DateTime, end_time: DateTime) -> ReservationBook:
        """
        Load reservations overlapping the requested window.

        Args:
            start_time: Start of the time window
            end_time: End of the time window

        Returns:
            ReservationBook with the confirmed and editing intervals

        Raises:
            ReservationSourceError: If the file is missing or unreadable
        """
        data = self._load()
        book = ReservationBook(
            reservations=self._parse_records(data.get("reservations"), "reservations"),
            editing=self._parse_records(data.get("editing"), "editing"),
        )
        return book.within(TimeRange(start=start_time, end=end_time))

    def _load(self) -> Mapping[str, Any]:
        if not self.path.exists():
            raise ReservationSourceError(f"Reservation file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ReservationSourceError(f"Invalid reservation file {self.path}: {exc}") from exc

        if data is None:
            return {}
        if isinstance(data, list):
            # A bare list holds confirmed reservations only
            return {"reservations": data}
        if not isinstance(data, dict):
            raise ReservationSourceError(
                f"Reservation file {self.path} must contain a mapping or a list"
            )
        return data

    def _parse_records(self, records: Any, section: str) -> List[ReservationInterval]:
        if not records:
            return []
        if not isinstance(records, list):
            raise ReservationSourceError(f"'{section}' in {self.path} must be a list")

        intervals: List[ReservationInterval] = []
        for index, record in enumerate(records):
            try:
                intervals.append(ReservationInterval.coerce(record))
            except SlotGridError as exc:
                logger.warning("Skipping %s[%d] in %s: %s", section, index, self.path, exc)
        return intervals
