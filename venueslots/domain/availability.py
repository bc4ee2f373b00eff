"""
Checks whether a requested reservation fits a contiguous run of free slots.

Requested start times must match a grid boundary exactly; nothing here
rounds. The check is a pure read over a schedule snapshot and has to be
repeated right before the reservation is written.
"""

import math
from typing import List

from .exceptions import InvalidRequest, OutOfRange, SlotNotFound
from .models import DaySchedule, TimeSlot
from .timeutil import parse_hhmm


def slots_needed(duration_minutes: int, slot_duration_minutes: int) -> int:
    """Number of grid slots a reservation of ``duration_minutes`` covers."""
    if duration_minutes <= 0:
        raise InvalidRequest(f"Duration must be greater than zero, got {duration_minutes}")
    return math.ceil(duration_minutes / slot_duration_minutes)


def require_slot_run(
    schedule: DaySchedule,
    start_time: str,
    duration_minutes: int,
    slot_duration_minutes: int,
) -> List[TimeSlot]:
    """
    Return the run of slots a reservation would occupy.

    Raises:
        InvalidRequest: If start_time is not HH:mm or the duration is not positive
        SlotNotFound: If no slot starts exactly at start_time
        OutOfRange: If the run extends past the end of the grid
    """
    parse_hhmm(start_time)
    needed = slots_needed(duration_minutes, slot_duration_minutes)

    start_index = schedule.find_slot_index(start_time)
    if start_index is None:
        raise SlotNotFound(start_time, schedule.date)

    end_index = start_index + needed
    if end_index > len(schedule.slots):
        raise OutOfRange(start_time, duration_minutes, schedule.date)

    return list(schedule.slots[start_index:end_index])


def validate_slot_availability(
    schedule: DaySchedule,
    start_time: str,
    duration_minutes: int,
    slot_duration_minutes: int,
) -> bool:
    """True only if every slot of the requested run exists and is available."""
    try:
        run = require_slot_run(schedule, start_time, duration_minutes, slot_duration_minutes)
    except (SlotNotFound, OutOfRange):
        return False

    return all(slot.is_available for slot in run)


def find_bookable_start_times(
    schedule: DaySchedule,
    duration_minutes: int,
    slot_duration_minutes: int,
) -> List[str]:
    """All start times at which a reservation of ``duration_minutes`` fits."""
    needed = slots_needed(duration_minutes, slot_duration_minutes)
    slots = schedule.slots
    starts: List[str] = []

    for index in range(len(slots) - needed + 1):
        if all(slot.is_available for slot in slots[index:index + needed]):
            starts.append(slots[index].start_time)

    return starts
