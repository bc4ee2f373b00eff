"""
Slot grid generation for a single calendar date.
"""

from typing import List

from .models import OperatingHours, TimeSlot
from .timeutil import DateLike, format_hhmm, parse_date


def slot_id(date_str: str, start_time: str) -> str:
    """Deterministic slot identifier derived from date and start time."""
    return f"slot-{date_str}-{start_time}"


def generate_slot_grid(target_date: DateLike, operating_hours: OperatingHours) -> List[TimeSlot]:
    """
    Build the ordered slot skeletons for one day.

    The grid covers [open:00, close:00) in slot_duration_minutes steps. The
    final slot of a 24-hour grid ends at 00:00.

    Args:
        target_date: Local calendar date (no time of day)
        operating_hours: Validated opening window

    Returns:
        List of TimeSlot objects with status left unset
    """
    date_str = parse_date(target_date).to_date_string()
    step = operating_hours.slot_duration_minutes
    first = operating_hours.effective_open_hour * 60
    last = operating_hours.effective_close_hour * 60

    slots: List[TimeSlot] = []
    for minute_of_day in range(first, last, step):
        start_time = format_hhmm(minute_of_day)
        slots.append(
            TimeSlot(
                id=slot_id(date_str, start_time),
                start_time=start_time,
                end_time=format_hhmm(minute_of_day + step),
            )
        )

    return slots
