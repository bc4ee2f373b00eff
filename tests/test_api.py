"""
Tests for the HTTP schedule endpoints.
"""

from typing import List, Optional

import pendulum
import pytest
from fastapi.testclient import TestClient

from venueslots.api.app import create_app
from venueslots.config import AppConfig
from venueslots.domain.exceptions import StoreUnavailable
from venueslots.domain.models import ReservationSpan

TZ = "Asia/Bangkok"


class StubReservationStore:
    def __init__(self, reservations: Optional[List[ReservationSpan]] = None, error: Optional[Exception] = None):
        self._reservations = reservations or []
        self._error = error

    async def get_active_reservations(self, machine_id, date, timezone):
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


def _client(store: StubReservationStore) -> TestClient:
    config = AppConfig(timezone=TZ, days_ahead=7)
    return TestClient(create_app(config=config, store=store))


@pytest.fixture
def client():
    return _client(
        StubReservationStore([_reservation("bk-001", "2026-01-15 14:00", "2026-01-15 15:00")])
    )


class TestGetSchedule:
    """GET /schedule"""

    def test_day_schedule(self, client):
        response = client.get(
            "/schedule",
            params={
                "machineId": "machine-001",
                "date": "2026-01-15",
                "referenceTime": "2026-01-15T09:00:00+07:00",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["date"] == "2026-01-15"
        assert body["machineId"] == "machine-001"
        assert body["timezone"] == TZ
        assert body["totalSlots"] == 24
        assert body["availableSlots"] == 22
        assert body["bookedSlots"] == 2
        assert len(body["timeSlots"]) == 24

        first, booked = body["timeSlots"][0], body["timeSlots"][8]
        assert first == {
            "id": "slot-2026-01-15-10:00",
            "startTime": "10:00",
            "endTime": "10:30",
            "status": "available",
        }
        assert booked["status"] == "booked"
        assert booked["bookingId"] == "bk-001"
        assert booked["isCrossMidnight"] is False

    def test_passed_slots_after_reference(self, client):
        response = client.get(
            "/schedule",
            params={
                "machineId": "machine-001",
                "date": "2026-01-15",
                "referenceTime": "2026-01-15T16:00:00+07:00",
            },
        )

        body = response.json()
        assert body["availableSlots"] == 12
        assert body["bookedSlots"] == 2
        assert body["timeSlots"][0]["status"] == "passed"

    def test_invalid_date(self, client):
        response = client.get("/schedule", params={"machineId": "machine-001", "date": "15-01-2026"})

        assert response.status_code == 400
        assert "YYYY-MM-DD" in response.json()["detail"]

    def test_missing_machine_id(self, client):
        response = client.get("/schedule", params={"date": "2026-01-15"})

        assert response.status_code == 422

    def test_store_unavailable(self):
        client = _client(StubReservationStore(error=StoreUnavailable("booking API down")))

        response = client.get("/schedule", params={"machineId": "machine-001", "date": "2026-01-15"})

        assert response.status_code == 503
        assert "booking API down" in response.json()["detail"]

    def test_double_booking_conflict(self):
        client = _client(
            StubReservationStore(
                [
                    _reservation("bk-a", "2026-01-15 14:00", "2026-01-15 15:00"),
                    _reservation("bk-b", "2026-01-15 14:30", "2026-01-15 15:30"),
                ]
            )
        )

        response = client.get("/schedule", params={"machineId": "machine-001", "date": "2026-01-15"})

        assert response.status_code == 409


class TestCheckSlot:
    """POST /schedule"""

    def _post(self, client, **overrides):
        body = {"machineId": "machine-001", "date": "2026-01-15", "startTime": "13:00", "duration": 60}
        body.update(overrides)
        return client.post("/schedule", json=body)

    def test_free_run(self, client):
        response = self._post(client)

        assert response.status_code == 200
        assert response.json() == {"available": True}

    def test_run_hits_booking(self, client):
        assert self._post(client, startTime="13:30").json() == {"available": False}

    def test_unaligned_start_reports_reason(self, client):
        body = self._post(client, startTime="14:15").json()

        assert body["available"] is False
        assert "Choose a different start time" in body["reason"]

    def test_run_past_closing_reports_reason(self, client):
        body = self._post(client, startTime="21:30").json()

        assert body["available"] is False
        assert "closing" in body["reason"]

    def test_passed_slot_with_reference_time(self, client):
        body = self._post(client, startTime="12:00", referenceTime="2026-01-15T12:10:00+07:00").json()

        assert body == {"available": False}

    def test_malformed_start_time(self, client):
        assert self._post(client, startTime="25:00").status_code == 400

    def test_non_positive_duration(self, client):
        assert self._post(client, duration=0).status_code == 422


class TestAvailableDates:
    """GET /schedule/dates"""

    def test_dates_with_explicit_range(self, client):
        response = client.get("/schedule/dates", params={"today": "2026-01-30", "daysAhead": 3})

        assert response.status_code == 200
        assert response.json() == {"dates": ["2026-01-30", "2026-01-31", "2026-02-01"]}

    def test_default_horizon(self, client):
        response = client.get("/schedule/dates", params={"today": "2026-01-15"})

        assert len(response.json()["dates"]) == 7

    def test_negative_days_rejected(self, client):
        response = client.get("/schedule/dates", params={"today": "2026-01-15", "daysAhead": -1})

        assert response.status_code == 422


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
