"""
Marks slots that already started relative to a caller-supplied "now".
"""

from typing import FrozenSet, Iterable, Optional

from pendulum import DateTime

from .models import TimeSlot
from .timeutil import DateLike, local_slot_start, parse_date


def classify_elapsed(
    slots: Iterable[TimeSlot],
    target_date: DateLike,
    reference_instant: Optional[DateTime],
    timezone: str,
) -> FrozenSet[str]:
    """
    Return the start times of slots that elapsed before ``reference_instant``.

    A slot is elapsed only if a reference instant is given, the target date
    is the reference instant's local date, and the slot's local start is
    strictly before the reference instant. Without a reference instant
    nothing is elapsed, so missing clock data never hides availability.
    """
    if reference_instant is None:
        return frozenset()

    date = parse_date(target_date)
    local_now = reference_instant.in_timezone(timezone)
    if local_now.to_date_string() != date.to_date_string():
        return frozenset()

    return frozenset(
        slot.start_time
        for slot in slots
        if local_slot_start(date, slot.start_time, timezone) < reference_instant
    )
