"""
Core business logic for computing day schedules and checking availability.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). The reservation
snapshot is always passed in; nothing is kept between calls.
"""

from typing import Iterable, List, Optional

from pendulum import DateTime

from .availability import find_bookable_start_times, validate_slot_availability
from .elapsed import classify_elapsed
from .models import DaySchedule, OperatingHours, ReservationSpan
from .occupancy import map_occupancy
from .schedule import assemble_schedule
from .slot_grid import generate_slot_grid
from .timeutil import DateLike, parse_date, validate_timezone


class ScheduleCalculator:
    """
    Computes day schedules for a venue's operating hours.

    Algorithm:
    1. Generate the slot grid for the date
    2. Map the reservation snapshot onto slot keys
    3. Tag slots that elapsed before the reference instant
    4. Assemble statuses and aggregate counts
    """

    def __init__(self, operating_hours: OperatingHours):
        self.operating_hours = operating_hours

    @property
    def slot_duration_minutes(self) -> int:
        return self.operating_hours.slot_duration_minutes

    def compute_day_schedule(
        self,
        machine_id: str,
        target_date: DateLike,
        timezone: str,
        reservations: Iterable[ReservationSpan],
        reference_instant: Optional[DateTime] = None,
    ) -> DaySchedule:
        """
        Compute the schedule for one machine on one local date.

        Args:
            machine_id: Machine the reservations belong to
            target_date: Local calendar date
            timezone: IANA shop timezone
            reservations: Point-in-time snapshot from the booking store
            reference_instant: "Now" for marking passed slots; None marks nothing

        Returns:
            DaySchedule with every slot resolved
        """
        date = parse_date(target_date)
        validate_timezone(timezone)

        grid = generate_slot_grid(date, self.operating_hours)
        occupancy = map_occupancy(
            reservations,
            date,
            timezone,
            self.slot_duration_minutes,
        )
        elapsed = classify_elapsed(grid, date, reference_instant, timezone)

        return assemble_schedule(grid, occupancy, elapsed, date, machine_id, timezone)

    def is_slot_available(
        self,
        schedule: DaySchedule,
        start_time: str,
        duration_minutes: int,
    ) -> bool:
        """Check a requested start time and duration against a fresh schedule."""
        return validate_slot_availability(
            schedule,
            start_time,
            duration_minutes,
            self.slot_duration_minutes,
        )

    def bookable_start_times(self, schedule: DaySchedule, duration_minutes: int) -> List[str]:
        """Start times at which ``duration_minutes`` still fits."""
        return find_bookable_start_times(schedule, duration_minutes, self.slot_duration_minutes)
