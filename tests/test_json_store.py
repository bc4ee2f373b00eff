"""
Tests for the JSON snapshot reservation store.
"""

import asyncio
import json
from pathlib import Path

import pytest

from venueslots.adapters.json_store import JsonReservationStore
from venueslots.domain.exceptions import StoreUnavailable
from venueslots.domain.models import ReservationStatus

TZ = "Asia/Bangkok"


def _row(booking_id: str, start: str, end: str, **extra) -> dict:
    row = {
        "booking_id": booking_id,
        "machine_id": "machine-001",
        "start_at": start,
        "end_at": end,
        "status": "confirmed",
    }
    row.update(extra)
    return row


def _store(tmp_path: Path, payload) -> JsonReservationStore:
    data_file = tmp_path / "reservations.json"
    data_file.write_text(json.dumps(payload), encoding="utf-8")
    return JsonReservationStore(data_file)


def _fetch(store: JsonReservationStore, date: str = "2026-01-15", machine_id: str = "machine-001"):
    return asyncio.run(store.get_active_reservations(machine_id=machine_id, date=date, timezone=TZ))


class TestJsonReservationStore:
    """Tests for JsonReservationStore."""

    def test_filters_machine_status_and_window(self, tmp_path):
        rows = [
            _row("same-day", "2026-01-15T14:00:00+07:00", "2026-01-15T15:00:00+07:00"),
            _row("prev-night", "2026-01-14T23:00:00+07:00", "2026-01-15T01:00:00+07:00"),
            _row("two-days-ago", "2026-01-13T14:00:00+07:00", "2026-01-13T15:00:00+07:00"),
            _row("next-day", "2026-01-16T10:00:00+07:00", "2026-01-16T11:00:00+07:00"),
            _row("cancelled", "2026-01-15T16:00:00+07:00", "2026-01-15T17:00:00+07:00", status="cancelled"),
            _row(
                "other-machine",
                "2026-01-15T16:00:00+07:00",
                "2026-01-15T17:00:00+07:00",
                machine_id="machine-002",
            ),
        ]
        store = _store(tmp_path, rows)

        reservations = _fetch(store)

        assert {r.id for r in reservations} == {"same-day", "prev-night"}

    def test_accepts_object_with_reservations_list(self, tmp_path):
        store = _store(
            tmp_path,
            {"reservations": [_row("bk-1", "2026-01-15T14:00:00+07:00", "2026-01-15T15:00:00+07:00")]},
        )

        assert [r.id for r in _fetch(store)] == ["bk-1"]

    def test_accepts_camel_case_rows(self, tmp_path):
        row = {
            "bookingId": "bk-camel",
            "machineId": "machine-001",
            "startAt": "2026-01-15T07:00:00Z",
            "endAt": "2026-01-15T08:00:00Z",
            "isCrossMidnight": False,
            "status": "PENDING",
            "createdAt": "2026-01-10T00:00:00Z",
        }
        store = _store(tmp_path, [row])

        reservations = _fetch(store)

        assert len(reservations) == 1
        assert reservations[0].status is ReservationStatus.PENDING
        assert reservations[0].created_at is not None

    def test_missing_file(self, tmp_path):
        store = JsonReservationStore(tmp_path / "missing.json")

        with pytest.raises(StoreUnavailable, match="not found"):
            _fetch(store)

    def test_invalid_json(self, tmp_path):
        data_file = tmp_path / "reservations.json"
        data_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreUnavailable):
            _fetch(JsonReservationStore(data_file))

    def test_unexpected_root(self, tmp_path):
        with pytest.raises(StoreUnavailable):
            _fetch(_store(tmp_path, {"rows": []}))

    @pytest.mark.parametrize(
        "row",
        [
            {"machine_id": "machine-001", "start_at": "2026-01-15T14:00:00Z"},
            _row("bk-bad", "not a time", "2026-01-15T15:00:00+07:00"),
            _row("bk-reversed", "2026-01-15T15:00:00+07:00", "2026-01-15T14:00:00+07:00"),
            _row("bk-status", "2026-01-15T14:00:00+07:00", "2026-01-15T15:00:00+07:00", status="held"),
            "not an object",
        ],
    )
    def test_malformed_row_fails_fetch(self, tmp_path, row):
        """A malformed row must not silently free up its slots."""
        good = _row("bk-good", "2026-01-15T10:00:00+07:00", "2026-01-15T11:00:00+07:00")

        with pytest.raises(StoreUnavailable, match="Malformed"):
            _fetch(_store(tmp_path, [good, row]))

    def test_file_is_reread_on_every_call(self, tmp_path):
        store = _store(tmp_path, [])
        assert _fetch(store) == []

        store.data_file.write_text(
            json.dumps([_row("bk-new", "2026-01-15T14:00:00+07:00", "2026-01-15T15:00:00+07:00")]),
            encoding="utf-8",
        )

        assert [r.id for r in _fetch(store)] == ["bk-new"]


def test_example_snapshot_loads():
    """The shipped example file parses and yields the two live machine-001 rows."""
    example = Path(__file__).parent.parent / "reservations.example.json"
    store = JsonReservationStore(example)

    assert {r.id for r in _fetch(store)} == {"bk-001", "bk-002"}
    assert _fetch(store, machine_id="machine-002") == []
