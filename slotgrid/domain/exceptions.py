"""
Domain-specific exception hierarchy for the slotgrid engine.
"""


class SlotGridError(Exception):
    """Base class for all application-level errors."""


class TimeParseError(SlotGridError, ValueError):
    """Raised when a date, instant, time or period string cannot be parsed."""


class InvalidRangeError(SlotGridError, ValueError):
    """Raised when a range does not start strictly before it ends."""


class InvalidPeriodError(SlotGridError, ValueError):
    """Raised when a slot period is zero or negative."""


class RangeAlignmentError(SlotGridError, ValueError):
    """Raised when a range is not a whole multiple of the slot period."""


class InvalidReservationError(SlotGridError, ValueError):
    """Raised when a reservation record lacks its begin or end."""


class ReservationSourceError(SlotGridError):
    """Raised when reservation data cannot be read."""
