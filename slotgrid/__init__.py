"""
slotgrid - split time ranges into reservation slots.
"""

from .domain.date_arithmetic import (
    DateArithmetic,
    add_days,
    current_or_given_date_string,
    day_bounds,
    is_past_date,
    prettify_duration,
)
from .domain.models import ReservationInterval, Slot, TimeRange
from .domain.slot_engine import RemainderPolicy, SlotEngine, generate_slots
from .services.slot_service import SlotService

__version__ = "0.1.0"

__all__ = [
    "DateArithmetic",
    "RemainderPolicy",
    "ReservationInterval",
    "Slot",
    "SlotEngine",
    "SlotService",
    "TimeRange",
    "add_days",
    "current_or_given_date_string",
    "day_bounds",
    "generate_slots",
    "is_past_date",
    "prettify_duration",
]
