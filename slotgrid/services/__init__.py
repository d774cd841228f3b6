"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .slot_service import ReservationSourceProtocol, SlotService

__all__ = ["ReservationSourceProtocol", "SlotService"]
