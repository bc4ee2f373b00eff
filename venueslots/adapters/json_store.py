"""
Reservation store backed by a JSON snapshot file.
"""

import json
import logging
from pathlib import Path
from typing import Any, List

from ..domain.exceptions import StoreUnavailable
from ..domain.models import ReservationSpan
from ..domain.timeutil import DateLike
from .parsing import parse_reservation_rows, touches_schedule_window

logger = logging.getLogger(__name__)


class JsonReservationStore:
    """
    Store that reads reservation rows from a JSON file.

    The file holds either a list of rows or an object with a
    ``reservations`` list. It is re-read on every call, so each schedule
    is computed from the file's current content.
    """

    def __init__(self, data_file: Path):
        """
        Initialize the store.

        Args:
            data_file: Path to the JSON snapshot
        """
        self.data_file = Path(data_file)

    def load_rows(self) -> List[Any]:
        """Load raw rows from the JSON file."""
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise StoreUnavailable(f"Reservation file not found: {self.data_file}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailable(f"Could not read reservations from {self.data_file}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("reservations")
        if not isinstance(data, list):
            raise StoreUnavailable(
                f"{self.data_file} must contain a list of reservations or a 'reservations' list"
            )
        return data

    async def get_active_reservations(
        self,
        machine_id: str,
        date: DateLike,
        timezone: str,
    ) -> List[ReservationSpan]:
        """
        Return live reservations of ``machine_id`` that may touch ``date``.

        Cancelled and completed rows are excluded; rows from the previous
        day are kept for cross-midnight coverage.
        """
        reservations = parse_reservation_rows(self.load_rows(), str(self.data_file))

        active = [
            reservation
            for reservation in reservations
            if touches_schedule_window(reservation, date, timezone, machine_id=machine_id)
        ]
        logger.debug(
            "Loaded %d of %d reservation(s) for %s on %s from %s",
            len(active), len(reservations), machine_id, date, self.data_file,
        )
        return active
