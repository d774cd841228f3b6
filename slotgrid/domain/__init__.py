"""
Domain layer - Pure business logic without external dependencies.
"""

from .clock import Clock, FixedClock, SystemClock
from .date_arithmetic import DateArithmetic
from .models import ReservationInterval, Slot, TimeRange
from .slot_engine import RemainderPolicy, SlotEngine

__all__ = [
    "Clock",
    "DateArithmetic",
    "FixedClock",
    "RemainderPolicy",
    "ReservationInterval",
    "Slot",
    "SlotEngine",
    "SystemClock",
    "TimeRange",
]
