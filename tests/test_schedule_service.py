"""
Tests for the ScheduleService orchestration layer.
"""

import asyncio
from typing import Dict, List, Optional

import pendulum
import pytest

from venueslots.domain.calculator import ScheduleCalculator
from venueslots.domain.exceptions import (
    InvalidRequest,
    OccupancyConflict,
    StoreUnavailable,
)
from venueslots.domain.models import OperatingHours, ReservationSpan, SlotStatus
from venueslots.services.schedule_service import ScheduleService

TZ = "Asia/Bangkok"


class StubReservationStore:
    """Minimal stub matching ReservationStoreProtocol."""

    def __init__(
        self,
        reservations: Optional[List[ReservationSpan]] = None,
        error: Optional[Exception] = None,
    ):
        self._reservations = reservations
        self._error = error
        self.calls: List[Dict[str, str]] = []

    async def get_active_reservations(self, machine_id, date, timezone):
        self.calls.append(
            {
                "machine_id": machine_id,
                "date": date.to_date_string(),
                "timezone": timezone,
            }
        )
        if self._error is not None:
            raise self._error
        return self._reservations


def _reservation(reservation_id: str, start: str, end: str) -> ReservationSpan:
    return ReservationSpan(
        id=reservation_id,
        machine_id="machine-001",
        start_at=pendulum.parse(start, tz=TZ),
        end_at=pendulum.parse(end, tz=TZ),
    )


def _build_service(store: StubReservationStore, days_ahead: int = 7) -> ScheduleService:
    calculator = ScheduleCalculator(OperatingHours(10, 22, 30))
    return ScheduleService(store=store, calculator=calculator, timezone=TZ, days_ahead=days_ahead)


def test_compute_day_schedule_uses_store_snapshot():
    """The store is asked for the machine, date and shop timezone."""
    store = StubReservationStore([_reservation("bk-001", "2026-01-15 14:00", "2026-01-15 15:00")])
    service = _build_service(store)

    schedule = asyncio.run(
        service.compute_day_schedule(
            machine_id="machine-001",
            date="2026-01-15",
            reference_instant="2026-01-15T09:00:00+07:00",
        )
    )

    assert store.calls == [{"machine_id": "machine-001", "date": "2026-01-15", "timezone": TZ}]
    assert schedule.total_slots == 24
    assert schedule.available_slots == 22
    assert schedule.booked_slots == 2


def test_reference_instant_as_iso_string_marks_passed_slots():
    service = _build_service(StubReservationStore([]))

    schedule = asyncio.run(
        service.compute_day_schedule(
            machine_id="machine-001",
            date="2026-01-15",
            reference_instant="2026-01-15T05:00:00Z",
        )
    )

    # 05:00 UTC is noon in Bangkok
    assert schedule.passed_slots == 4
    assert schedule.slots[4].status is SlotStatus.AVAILABLE


def test_timezone_override_is_passed_to_store():
    store = StubReservationStore([])
    service = _build_service(store)

    schedule = asyncio.run(
        service.compute_day_schedule(machine_id="machine-001", date="2026-01-15", timezone="UTC")
    )

    assert store.calls[0]["timezone"] == "UTC"
    assert schedule.timezone == "UTC"


def test_store_errors_become_store_unavailable():
    service = _build_service(StubReservationStore(error=RuntimeError("connection reset")))

    with pytest.raises(StoreUnavailable, match="connection reset"):
        asyncio.run(service.compute_day_schedule(machine_id="machine-001", date="2026-01-15"))


def test_store_returning_nothing_is_unavailable():
    """A missing snapshot is never treated as an empty day."""
    service = _build_service(StubReservationStore(reservations=None))

    with pytest.raises(StoreUnavailable):
        asyncio.run(service.compute_day_schedule(machine_id="machine-001", date="2026-01-15"))


def test_store_unavailable_passes_through_unchanged():
    error = StoreUnavailable("file missing")
    service = _build_service(StubReservationStore(error=error))

    with pytest.raises(StoreUnavailable) as exc_info:
        asyncio.run(service.compute_day_schedule(machine_id="machine-001", date="2026-01-15"))

    assert exc_info.value is error


def test_overlapping_snapshot_raises_conflict():
    store = StubReservationStore(
        [
            _reservation("bk-a", "2026-01-15 14:00", "2026-01-15 15:00"),
            _reservation("bk-b", "2026-01-15 14:30", "2026-01-15 15:30"),
        ]
    )
    service = _build_service(store)

    with pytest.raises(OccupancyConflict):
        asyncio.run(service.compute_day_schedule(machine_id="machine-001", date="2026-01-15"))


def test_invalid_date_is_rejected_before_fetch():
    store = StubReservationStore([])
    service = _build_service(store)

    with pytest.raises(InvalidRequest):
        asyncio.run(service.compute_day_schedule(machine_id="machine-001", date="2026-13-01"))

    assert store.calls == []


def test_validate_slot_availability():
    store = StubReservationStore([_reservation("bk-001", "2026-01-15 14:00", "2026-01-15 15:00")])
    service = _build_service(store)

    def check(start_time: str, duration: int) -> bool:
        return asyncio.run(
            service.validate_slot_availability(
                machine_id="machine-001",
                date="2026-01-15",
                start_time=start_time,
                duration_minutes=duration,
            )
        )

    assert check("13:00", 60) is True
    assert check("13:30", 60) is False
    assert check("14:15", 30) is False
    assert len(store.calls) == 3


def test_enumerate_available_dates_uses_configured_horizon():
    service = _build_service(StubReservationStore([]), days_ahead=3)

    assert service.enumerate_available_dates("2026-01-31") == [
        "2026-01-31",
        "2026-02-01",
        "2026-02-02",
    ]
    assert service.enumerate_available_dates("2026-01-31", 1) == ["2026-01-31"]


def test_unknown_shop_timezone_rejected():
    with pytest.raises(InvalidRequest):
        ScheduleService(
            store=StubReservationStore([]),
            calculator=ScheduleCalculator(OperatingHours()),
            timezone="Nowhere/City",
        )
