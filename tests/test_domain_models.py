"""
Tests for domain models.
"""

import pendulum
import pytest

from slotgrid.domain.exceptions import InvalidRangeError, InvalidReservationError, TimeParseError
from slotgrid.domain.models import ReservationInterval, Slot, TimeRange


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2015-10-09T08:00:00+03:00")
        end = pendulum.parse("2015-10-09T10:00:00+03:00")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 120

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2015-10-09T10:00:00+03:00")
        end = pendulum.parse("2015-10-09T08:00:00+03:00")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_empty_time_range_raises_invalid_range(self):
        """A range that starts when it ends is rejected."""
        with pytest.raises(InvalidRangeError):
            TimeRange.parse("2015-10-09T08:00:00+03:00", "2015-10-09T05:00:00Z")

    def test_parse_rejects_malformed_instant(self):
        """Malformed strings raise instead of being coerced."""
        with pytest.raises(TimeParseError):
            TimeRange.parse("yesterday-ish", "2015-10-09T10:00:00+03:00")

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange.parse("2015-10-09T08:00:00+03:00", "2015-10-09T11:00:00+03:00")
        tr2 = TimeRange.parse("2015-10-09T10:00:00+03:00", "2015-10-09T13:00:00+03:00")
        tr3 = TimeRange.parse("2015-10-09T13:00:00+03:00", "2015-10-09T16:00:00+03:00")

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)
        # Touching ends do not overlap
        assert not tr2.overlaps(tr3)

    def test_intersect(self):
        """Test intersection calculation."""
        tr1 = TimeRange.parse("2015-10-09T08:00:00+03:00", "2015-10-09T11:00:00+03:00")
        tr2 = TimeRange.parse("2015-10-09T10:00:00+03:00", "2015-10-09T13:00:00+03:00")

        intersection = tr1.intersect(tr2)

        assert intersection is not None
        assert intersection.start == pendulum.parse("2015-10-09T10:00:00+03:00")
        assert intersection.end == pendulum.parse("2015-10-09T11:00:00+03:00")

    def test_intersect_no_overlap(self):
        """Test intersection with no overlap returns None."""
        tr1 = TimeRange.parse("2015-10-09T08:00:00+03:00", "2015-10-09T09:00:00+03:00")
        tr2 = TimeRange.parse("2015-10-09T12:00:00+03:00", "2015-10-09T13:00:00+03:00")

        assert tr1.intersect(tr2) is None

    def test_to_utc_keeps_the_same_instants(self):
        """Converting to UTC changes the offset, not the instant."""
        tr = TimeRange.parse("2015-10-09T08:00:00+03:00", "2015-10-09T10:00:00+03:00")

        utc = tr.to_utc()

        assert utc.start == tr.start
        assert utc.start.hour == 5
        assert utc.end.hour == 7


class TestReservationInterval:
    """Tests for ReservationInterval model."""

    def test_from_mapping_ignores_extra_fields(self):
        """Full reservation records carry more than begin and end."""
        record = {
            "id": 42,
            "resource": "meeting-room-1",
            "begin": "2015-10-09T08:30:00+03:00",
            "end": "2015-10-09T09:30:00+03:00",
        }

        interval = ReservationInterval.from_mapping(record)

        assert interval.begin == pendulum.parse("2015-10-09T05:30:00Z")
        assert interval.end == pendulum.parse("2015-10-09T06:30:00Z")

    def test_from_mapping_missing_end(self):
        """A record without an end is an error."""
        with pytest.raises(InvalidReservationError, match="end"):
            ReservationInterval.from_mapping({"begin": "2015-10-09T08:30:00+03:00"})

    def test_coerce_returns_interval_unchanged(self):
        """Intervals pass through coerce as-is."""
        interval = ReservationInterval(
            begin=pendulum.parse("2015-10-09T08:30:00+03:00"),
            end=pendulum.parse("2015-10-09T09:30:00+03:00"),
        )

        assert ReservationInterval.coerce(interval) is interval

    def test_coerce_rejects_other_types(self):
        """Only intervals and mappings are accepted."""
        with pytest.raises(InvalidReservationError):
            ReservationInterval.coerce(("2015-10-09T08:30:00+03:00", "2015-10-09T09:30:00+03:00"))

    def test_overlaps_is_half_open(self):
        """Slots touching the reservation at either end do not overlap it."""
        interval = ReservationInterval.from_mapping(
            {"begin": "2015-10-09T08:30:00+03:00", "end": "2015-10-09T09:30:00+03:00"}
        )

        before = (pendulum.parse("2015-10-09T08:00:00+03:00"), pendulum.parse("2015-10-09T08:30:00+03:00"))
        inside = (pendulum.parse("2015-10-09T08:30:00+03:00"), pendulum.parse("2015-10-09T09:00:00+03:00"))
        after = (pendulum.parse("2015-10-09T09:30:00+03:00"), pendulum.parse("2015-10-09T10:00:00+03:00"))

        assert not interval.overlaps(*before)
        assert interval.overlaps(*inside)
        assert not interval.overlaps(*after)

    def test_reversed_interval_raises(self):
        """A reservation ending before it begins is rejected."""
        with pytest.raises(InvalidRangeError):
            ReservationInterval.from_mapping(
                {"begin": "2015-10-09T09:30:00+03:00", "end": "2015-10-09T08:30:00+03:00"}
            )


class TestSlot:
    """Tests for Slot model."""

    def test_to_dict_uses_camel_case_keys(self):
        """The dict form matches what the UI layer reads."""
        slot = Slot(
            start="2015-10-09T05:00:00Z",
            end="2015-10-09T05:30:00Z",
            as_iso_string="2015-10-09T05:00:00Z/2015-10-09T05:30:00Z",
            as_string="08:00–08:30",
            reserved=True,
            reservation_starting=True,
        )

        assert slot.to_dict() == {
            "start": "2015-10-09T05:00:00Z",
            "end": "2015-10-09T05:30:00Z",
            "asISOString": "2015-10-09T05:00:00Z/2015-10-09T05:30:00Z",
            "asString": "08:00–08:30",
            "reserved": True,
            "editing": False,
            "reservationStarting": True,
            "reservationEnding": False,
        }

    def test_occupied_and_time_range(self):
        """A slot exposes its combined state and its range."""
        slot = Slot(
            start="2015-10-09T05:00:00Z",
            end="2015-10-09T05:30:00Z",
            as_iso_string="2015-10-09T05:00:00Z/2015-10-09T05:30:00Z",
            as_string="08:00–08:30",
            editing=True,
        )

        assert slot.occupied
        assert slot.time_range.duration_minutes() == 30
