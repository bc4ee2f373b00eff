"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import require_slot_run, validate_slot_availability
from .calculator import ScheduleCalculator
from .dates import enumerate_dates
from .elapsed import classify_elapsed
from .exceptions import (
    InvalidConfiguration,
    InvalidRequest,
    OccupancyConflict,
    OutOfRange,
    ScheduleError,
    SlotNotFound,
    StoreUnavailable,
)
from .models import (
    DaySchedule,
    OccupancyEntry,
    OperatingHours,
    ReservationSpan,
    ReservationStatus,
    SlotStatus,
    TimeSlot,
)
from .occupancy import map_occupancy
from .schedule import assemble_schedule
from .slot_grid import generate_slot_grid

__all__ = [
    "DaySchedule",
    "InvalidConfiguration",
    "InvalidRequest",
    "OccupancyConflict",
    "OccupancyEntry",
    "OperatingHours",
    "OutOfRange",
    "ReservationSpan",
    "ReservationStatus",
    "ScheduleCalculator",
    "ScheduleError",
    "SlotNotFound",
    "SlotStatus",
    "StoreUnavailable",
    "TimeSlot",
    "assemble_schedule",
    "classify_elapsed",
    "enumerate_dates",
    "generate_slot_grid",
    "map_occupancy",
    "require_slot_run",
    "validate_slot_availability",
]
