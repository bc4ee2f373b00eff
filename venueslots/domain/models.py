"""
Domain models for slot grids, reservations and day schedules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from pendulum import DateTime

from .exceptions import InvalidConfiguration


class SlotStatus(str, Enum):
    """Display status of a single slot."""
    AVAILABLE = "available"
    BOOKED = "booked"
    PASSED = "passed"


class ReservationStatus(str, Enum):
    """
    Lifecycle of a reservation row owned by the booking store.

    pending -> confirmed -> completed, and pending|confirmed -> cancelled.
    completed and cancelled are terminal.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def occupies_slots(self) -> bool:
        """Only live reservations block slots in forward-looking schedules."""
        return self in OCCUPYING_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    def can_transition_to(self, target: "ReservationStatus") -> bool:
        """Check whether the store may move a reservation to ``target``."""
        return target in _TRANSITIONS[self]


OCCUPYING_STATUSES: FrozenSet[ReservationStatus] = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}
)

_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OperatingHours:
    """
    Opening window and slot size for one venue.

    Invariant: slot_duration_minutes evenly divides 60, and open_hour is
    before close_hour unless the venue is open 24 hours, in which case the
    effective window is [0, 24).
    """
    open_hour: int = 10
    close_hour: int = 22
    slot_duration_minutes: int = 30
    is_open_24_hours: bool = False

    def __post_init__(self):
        if self.slot_duration_minutes <= 0 or 60 % self.slot_duration_minutes:
            raise InvalidConfiguration(
                f"Slot duration must evenly divide 60, got {self.slot_duration_minutes}"
            )
        if self.is_open_24_hours:
            return
        if not 0 <= self.open_hour <= 23:
            raise InvalidConfiguration(f"open_hour must be between 0 and 23, got {self.open_hour}")
        if not 1 <= self.close_hour <= 24:
            raise InvalidConfiguration(f"close_hour must be between 1 and 24, got {self.close_hour}")
        if self.open_hour >= self.close_hour:
            raise InvalidConfiguration(
                f"open_hour ({self.open_hour}) must be before close_hour ({self.close_hour})"
            )

    @property
    def effective_open_hour(self) -> int:
        return 0 if self.is_open_24_hours else self.open_hour

    @property
    def effective_close_hour(self) -> int:
        return 24 if self.is_open_24_hours else self.close_hour

    def slots_per_day(self) -> int:
        """Number of slots in every day's grid, independent of date or load."""
        hours = self.effective_close_hour - self.effective_open_hour
        return hours * 60 // self.slot_duration_minutes


@dataclass(frozen=True)
class TimeSlot:
    """
    One fixed-duration slot of a day grid.

    Skeletons coming out of the grid generator have no status yet; the
    schedule assembler fills it in.
    """
    id: str
    start_time: str  # HH:mm, local
    end_time: str    # HH:mm, local
    status: Optional[SlotStatus] = None
    booking_ref: Optional[str] = None
    is_cross_midnight: bool = False

    @property
    def is_available(self) -> bool:
        return self.status is SlotStatus.AVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the camelCase shape used by the booking frontend."""
        data: Dict[str, Any] = {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "status": self.status.value if self.status else None,
        }
        if self.booking_ref is not None:
            data["bookingId"] = self.booking_ref
            data["isCrossMidnight"] = self.is_cross_midnight
        return data


@dataclass(frozen=True)
class OccupancyEntry:
    """Which reservation holds a slot key on the target date."""
    booking_ref: str
    is_cross_midnight: bool = False


@dataclass(frozen=True)
class ReservationSpan:
    """
    A reservation row as handed over by the booking store.

    Invariant: start_at must be before end_at.
    """
    id: str
    machine_id: str
    start_at: DateTime
    end_at: DateTime
    local_date: str = ""
    local_start_time: str = ""
    local_end_time: str = ""
    is_cross_midnight: bool = False
    status: ReservationStatus = ReservationStatus.CONFIRMED
    created_at: Optional[DateTime] = None

    def __post_init__(self):
        if self.start_at >= self.end_at:
            raise ValueError(
                f"Reservation {self.id}: start {self.start_at} must be before end {self.end_at}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end_at - self.start_at).total_seconds() / 60)

    def overlaps(self, other: "ReservationSpan") -> bool:
        """Check if the instant spans of two reservations overlap."""
        return self.start_at < other.end_at and self.end_at > other.start_at


@dataclass(frozen=True)
class DaySchedule:
    """
    Final schedule for one machine on one local date.

    Invariant: available_slots + booked_slots + passed_slots == total_slots.
    """
    date: str
    machine_id: str
    timezone: str
    slots: Tuple[TimeSlot, ...] = field(default_factory=tuple)
    total_slots: int = 0
    available_slots: int = 0
    booked_slots: int = 0

    @property
    def passed_slots(self) -> int:
        """Slots that elapsed without being booked."""
        return sum(1 for slot in self.slots if slot.status is SlotStatus.PASSED)

    def find_slot_index(self, start_time: str) -> Optional[int]:
        """Index of the slot starting exactly at ``start_time``, if any."""
        for index, slot in enumerate(self.slots):
            if slot.start_time == start_time:
                return index
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "machineId": self.machine_id,
            "timezone": self.timezone,
            "timeSlots": [slot.to_dict() for slot in self.slots],
            "totalSlots": self.total_slots,
            "availableSlots": self.available_slots,
            "bookedSlots": self.booked_slots,
        }
