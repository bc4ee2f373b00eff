"""
Reconciles reservation instants against the slot keys of one local date.

This is where the timezone and cross-midnight handling lives: the store
hands over absolute instants, and every reservation has to be cut down to
the part that falls on the target date before it can block grid slots.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from pendulum import DateTime

from .exceptions import OccupancyConflict
from .models import OccupancyEntry, ReservationSpan
from .timeutil import DateLike, parse_date

logger = logging.getLogger(__name__)


def precedence_key(reservation: ReservationSpan):
    """
    Defined order in which reservations claim slots.

    Rows with a creation timestamp come first, oldest first; then start
    instant; then id as the final tie-breaker.
    """
    return (
        reservation.created_at is None,
        reservation.created_at or reservation.start_at,
        reservation.start_at,
        reservation.id,
    )


def segment_on_date(
    reservation: ReservationSpan,
    date_str: str,
    timezone: str,
) -> Optional[Tuple[DateTime, DateTime, bool]]:
    """
    Cut a reservation down to the part that lies on ``date_str``.

    Returns:
        (segment_start, segment_end, crosses_midnight), or None when the
        reservation does not touch the date
    """
    local_start = reservation.start_at.in_timezone(timezone)
    local_end = reservation.end_at.in_timezone(timezone)
    start_date = local_start.to_date_string()
    end_date = local_end.to_date_string()

    crosses = reservation.is_cross_midnight or start_date != end_date

    if not crosses:
        if date_str != start_date:
            return None
        return local_start, local_end, False

    if date_str == start_date:
        return local_start, local_start.end_of("day"), True
    if date_str == end_date:
        return local_end.start_of("day"), local_end, True

    return None


def floor_to_slot(moment: DateTime, slot_duration_minutes: int) -> DateTime:
    """Round down to the nearest slot boundary (14:15 -> 14:00 on a 30 min grid)."""
    remainder = moment.minute % slot_duration_minutes
    return moment.subtract(minutes=remainder).set(second=0, microsecond=0)


def map_occupancy(
    reservations: Iterable[ReservationSpan],
    target_date: DateLike,
    timezone: str,
    slot_duration_minutes: int,
) -> Dict[str, OccupancyEntry]:
    """
    Map slot start times on the target date to the reservation holding them.

    Algorithm:
    1. Drop reservations that no longer occupy slots (cancelled, completed)
    2. Order the rest by precedence_key
    3. Cut each reservation to its segment on the target date
    4. Floor-align the segment start and walk to its end in slot steps
    5. First writer wins; a collision between reservations whose instant
       spans really overlap is a double booking and raises

    Args:
        reservations: Reservation snapshot for one machine
        target_date: Local calendar date to map
        timezone: IANA shop timezone
        slot_duration_minutes: Grid step

    Returns:
        Dict mapping "HH:mm" to OccupancyEntry

    Raises:
        OccupancyConflict: If two overlapping reservations claim one slot
    """
    date_str = parse_date(target_date).to_date_string()

    active: List[ReservationSpan] = sorted(
        (r for r in reservations if r.status.occupies_slots),
        key=precedence_key,
    )

    occupancy: Dict[str, OccupancyEntry] = {}
    owners: Dict[str, ReservationSpan] = {}

    for reservation in active:
        segment = segment_on_date(reservation, date_str, timezone)
        if segment is None:
            continue

        segment_start, segment_end, crosses = segment
        current = floor_to_slot(segment_start, slot_duration_minutes)

        while current < segment_end:
            key = current.format("HH:mm")
            owner = owners.get(key)

            if owner is None:
                occupancy[key] = OccupancyEntry(
                    booking_ref=reservation.id,
                    is_cross_midnight=crosses,
                )
                owners[key] = reservation
            elif owner.id != reservation.id and owner.overlaps(reservation):
                logger.error(
                    "Double booking on %s %s: %s overlaps %s",
                    date_str, key, owner.id, reservation.id,
                )
                raise OccupancyConflict(key, owner.id, reservation.id)

            current = current.add(minutes=slot_duration_minutes)

    return occupancy
