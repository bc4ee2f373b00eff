"""
Combines grid, occupancy and elapsed tags into a DaySchedule.
"""

from dataclasses import replace
from typing import AbstractSet, List, Mapping, Sequence

from .models import DaySchedule, OccupancyEntry, SlotStatus, TimeSlot
from .timeutil import DateLike, parse_date


def assemble_schedule(
    grid: Sequence[TimeSlot],
    occupancy: Mapping[str, OccupancyEntry],
    elapsed: AbstractSet[str],
    target_date: DateLike,
    machine_id: str,
    timezone: str,
) -> DaySchedule:
    """
    Resolve every slot's status and count the aggregates in one pass.

    Precedence is Booked, then Passed, then Available: a booked slot that
    already started still counts toward booked_slots.
    """
    slots: List[TimeSlot] = []
    available = 0
    booked = 0

    for skeleton in grid:
        entry = occupancy.get(skeleton.start_time)

        if entry is not None:
            slot = replace(
                skeleton,
                status=SlotStatus.BOOKED,
                booking_ref=entry.booking_ref,
                is_cross_midnight=entry.is_cross_midnight,
            )
        elif skeleton.start_time in elapsed:
            slot = replace(skeleton, status=SlotStatus.PASSED)
        else:
            slot = replace(skeleton, status=SlotStatus.AVAILABLE)

        if slot.status is SlotStatus.AVAILABLE:
            available += 1
        if slot.booking_ref is not None:
            booked += 1
        slots.append(slot)

    return DaySchedule(
        date=parse_date(target_date).to_date_string(),
        machine_id=machine_id,
        timezone=timezone,
        slots=tuple(slots),
        total_slots=len(slots),
        available_slots=available,
        booked_slots=booked,
    )
