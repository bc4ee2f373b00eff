"""
Conversion of booking store rows into ReservationSpan values.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from ..domain.exceptions import StoreUnavailable
from ..domain.models import ReservationSpan, ReservationStatus
from ..domain.timeutil import DateLike, local_day_start, parse_date, parse_instant

logger = logging.getLogger(__name__)


def _pick(row: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present; rows come in snake_case or camelCase."""
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def parse_reservation_row(row: Mapping[str, Any]) -> ReservationSpan:
    """
    Parse one reservation row.

    Response format (either key style is accepted):
    {
        "booking_id": "bk-001",
        "machine_id": "machine-001",
        "start_at": "2026-01-15T22:30:00+07:00",
        "end_at": "2026-01-16T01:30:00+07:00",
        "local_date": "2026-01-15",
        "local_start_time": "22:30",
        "local_end_time": "01:30",
        "is_cross_midnight": true,
        "status": "confirmed",
        "created_at": "2026-01-10T08:00:00Z"
    }

    Raises:
        KeyError: If a required field is missing
        ValueError: If a value cannot be parsed
    """
    reservation_id = _pick(row, "booking_id", "bookingId", "id")
    machine_id = _pick(row, "machine_id", "machineId")
    start_raw = _pick(row, "start_at", "startAt")
    end_raw = _pick(row, "end_at", "endAt")

    if reservation_id is None or machine_id is None or start_raw is None or end_raw is None:
        raise KeyError("reservation row needs id, machine_id, start_at and end_at")

    created_raw = _pick(row, "created_at", "createdAt")

    return ReservationSpan(
        id=str(reservation_id),
        machine_id=str(machine_id),
        start_at=parse_instant(start_raw),
        end_at=parse_instant(end_raw),
        local_date=str(_pick(row, "local_date", "localDate", default="")),
        local_start_time=str(_pick(row, "local_start_time", "localStartTime", default="")),
        local_end_time=str(_pick(row, "local_end_time", "localEndTime", default="")),
        is_cross_midnight=bool(_pick(row, "is_cross_midnight", "isCrossMidnight", default=False)),
        status=ReservationStatus(str(_pick(row, "status", default="confirmed")).lower()),
        created_at=parse_instant(created_raw) if created_raw is not None else None,
    )


def parse_reservation_rows(rows: Iterable[Mapping[str, Any]], source: str) -> List[ReservationSpan]:
    """
    Parse a batch of rows, failing the whole batch on the first bad row.

    A dropped row would show its slots as free, so a malformed row is
    reported as an unavailable store instead of being skipped.
    """
    reservations: List[ReservationSpan] = []

    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            logger.warning("Row %d from %s is not an object: %r", index, source, row)
            raise StoreUnavailable(f"Malformed reservation row {index} from {source}")
        try:
            reservations.append(parse_reservation_row(row))
        except (KeyError, ValueError) as exc:
            logger.warning("Could not parse reservation row %d from %s: %s", index, source, exc)
            raise StoreUnavailable(f"Malformed reservation row {index} from {source}: {exc}") from exc

    return reservations


def touches_schedule_window(
    reservation: ReservationSpan,
    target_date: DateLike,
    timezone: str,
    machine_id: Optional[str] = None,
) -> bool:
    """
    Whether a reservation could show up on the target date's schedule.

    The window starts at the previous local midnight so reservations that
    began the day before and cross midnight are kept.
    """
    if machine_id is not None and reservation.machine_id != machine_id:
        return False
    if not reservation.status.occupies_slots:
        return False

    date = parse_date(target_date)
    window_start = local_day_start(date.subtract(days=1), timezone)
    window_end = local_day_start(date.add(days=1), timezone)

    return reservation.start_at < window_end and reservation.end_at > window_start
