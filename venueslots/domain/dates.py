"""
Enumeration of bookable calendar dates.
"""

from typing import List

from .exceptions import InvalidRequest
from .timeutil import DateLike, parse_date


def enumerate_dates(today: DateLike, days_ahead: int) -> List[str]:
    """
    Return ``days_ahead`` consecutive YYYY-MM-DD strings starting at ``today``.

    Uses calendar arithmetic, so month and year boundaries roll over
    correctly (2026-01-31 is followed by 2026-02-01).
    """
    if days_ahead < 0:
        raise InvalidRequest(f"days_ahead must not be negative, got {days_ahead}")

    start = parse_date(today)
    return [start.add(days=offset).to_date_string() for offset in range(days_ahead)]
