"""
Domain-specific exception hierarchy for the venue scheduling engine.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class InvalidConfiguration(ScheduleError, ValueError):
    """Raised when operating hours cannot produce a valid slot grid."""


class InvalidRequest(ScheduleError, ValueError):
    """Raised when a caller passes a malformed date, time, duration or timezone."""


class SlotNotFound(ScheduleError):
    """Raised when a requested start time is not a slot boundary of the grid."""

    def __init__(self, start_time: str, date: str):
        super().__init__(
            f"No slot starts at {start_time} on {date}. Choose a different start time."
        )
        self.start_time = start_time
        self.date = date


class OutOfRange(ScheduleError):
    """Raised when a requested run of slots extends past closing time."""

    def __init__(self, start_time: str, duration_minutes: int, date: str):
        super().__init__(
            f"A {duration_minutes} minute reservation starting at {start_time} "
            f"on {date} runs past closing time."
        )
        self.start_time = start_time
        self.duration_minutes = duration_minutes
        self.date = date


class StoreUnavailable(ScheduleError):
    """Raised when reservation data cannot be fetched from the booking store."""


class OccupancyConflict(ScheduleError):
    """Raised when two overlapping reservations claim the same slot."""

    def __init__(self, slot_key: str, first_ref: str, second_ref: str):
        super().__init__(
            f"Reservations {first_ref} and {second_ref} overlap on slot {slot_key}"
        )
        self.slot_key = slot_key
        self.first_ref = first_ref
        self.second_ref = second_ref
