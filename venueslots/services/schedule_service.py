"""
Application services for day schedules and availability checks.

The service coordinates fetching the reservation snapshot via a store
adapter and delegates every calculation to the domain-level
``ScheduleCalculator``. The store is passed in explicitly, which keeps the
CLI and HTTP layers thin and lets tests plug in a stub.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Union

from pendulum import DateTime

from ..domain.calculator import ScheduleCalculator
from ..domain.dates import enumerate_dates
from ..domain.exceptions import ScheduleError, StoreUnavailable
from ..domain.models import DaySchedule, ReservationSpan
from ..domain.timeutil import DateLike, parse_date, parse_instant, validate_timezone

logger = logging.getLogger(__name__)

InstantLike = Union[str, DateTime]


class ReservationStoreProtocol(Protocol):
    """Protocol describing the booking store behaviour needed by the service."""

    async def get_active_reservations(
        self,
        machine_id: str,
        date: DateLike,
        timezone: str,
    ) -> List[ReservationSpan]:
        """Return pending/confirmed reservations that may touch ``date``, including the day before."""


class ScheduleService:
    """
    Orchestrates reservation retrieval and schedule calculation.

    Store failures always propagate as ``StoreUnavailable``; the service
    never falls back to an empty snapshot, since that would report booked
    slots as free.
    """

    def __init__(
        self,
        store: ReservationStoreProtocol,
        calculator: ScheduleCalculator,
        timezone: str = "Asia/Bangkok",
        days_ahead: int = 7,
    ) -> None:
        self._store = store
        self._calculator = calculator
        self._timezone = validate_timezone(timezone)
        self._days_ahead = days_ahead

    @property
    def timezone(self) -> str:
        return self._timezone

    @property
    def calculator(self) -> ScheduleCalculator:
        return self._calculator

    async def fetch_reservations(
        self,
        *,
        machine_id: str,
        date: DateLike,
        timezone: str,
    ) -> List[ReservationSpan]:
        """Fetch the reservation snapshot for one machine and date."""
        try:
            reservations = await self._store.get_active_reservations(
                machine_id=machine_id,
                date=date,
                timezone=timezone,
            )
        except ScheduleError:
            raise
        except Exception as exc:
            logger.warning("Reservation store failed for %s on %s: %s", machine_id, date, exc)
            raise StoreUnavailable(f"Could not load reservations for {machine_id}: {exc}") from exc

        if reservations is None:
            raise StoreUnavailable(f"Reservation store returned no data for {machine_id}")

        return list(reservations)

    async def compute_day_schedule(
        self,
        *,
        machine_id: str,
        date: DateLike,
        timezone: Optional[str] = None,
        reference_instant: Optional[InstantLike] = None,
    ) -> DaySchedule:
        """
        Retrieve the reservation snapshot and compute the day schedule.

        Args:
            machine_id: Machine to schedule
            date: Local calendar date (YYYY-MM-DD)
            timezone: IANA timezone; defaults to the shop timezone
            reference_instant: "Now" for marking passed slots

        Returns:
            DaySchedule for the date

        Raises:
            StoreUnavailable: If the reservation snapshot cannot be loaded
            OccupancyConflict: If the snapshot contains overlapping reservations
        """
        tz = validate_timezone(timezone or self._timezone)
        target = parse_date(date)
        reference = parse_instant(reference_instant) if reference_instant is not None else None

        reservations = await self.fetch_reservations(
            machine_id=machine_id,
            date=target,
            timezone=tz,
        )

        schedule = self._calculator.compute_day_schedule(
            machine_id,
            target,
            tz,
            reservations,
            reference_instant=reference,
        )
        logger.debug(
            "Schedule %s %s: %d total, %d available, %d booked",
            machine_id, schedule.date, schedule.total_slots,
            schedule.available_slots, schedule.booked_slots,
        )
        return schedule

    async def validate_slot_availability(
        self,
        *,
        machine_id: str,
        date: DateLike,
        start_time: str,
        duration_minutes: int,
        timezone: Optional[str] = None,
        reference_instant: Optional[InstantLike] = None,
    ) -> bool:
        """
        Check a requested reservation against a freshly fetched schedule.

        The result is only valid for the snapshot it was computed from; the
        store must re-check atomically when the reservation is written.
        """
        schedule = await self.compute_day_schedule(
            machine_id=machine_id,
            date=date,
            timezone=timezone,
            reference_instant=reference_instant,
        )
        return self._calculator.is_slot_available(schedule, start_time, duration_minutes)

    def enumerate_available_dates(self, today: DateLike, days_ahead: Optional[int] = None) -> List[str]:
        """Dates a customer may book, starting at ``today``."""
        count = self._days_ahead if days_ahead is None else days_ahead
        return enumerate_dates(today, count)
