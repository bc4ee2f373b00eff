"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .factory import build_service, build_store
from .schedule_service import ReservationStoreProtocol, ScheduleService

__all__ = ["ReservationStoreProtocol", "ScheduleService", "build_service", "build_store"]
