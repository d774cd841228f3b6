"""
Adapters layer - Sources of reservation data.
"""

from .reservation_file import InMemoryReservationSource, ReservationBook, ReservationFileSource

__all__ = ["InMemoryReservationSource", "ReservationBook", "ReservationFileSource"]
