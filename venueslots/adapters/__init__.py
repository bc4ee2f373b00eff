"""
Adapters layer - Reservation store integrations.
"""

from .http_store import HttpReservationStore
from .json_store import JsonReservationStore
from .parsing import parse_reservation_row, parse_reservation_rows

__all__ = [
    "HttpReservationStore",
    "JsonReservationStore",
    "parse_reservation_row",
    "parse_reservation_rows",
]
