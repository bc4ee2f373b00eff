"""
Reservation store client for a remote booking API.
"""

import asyncio
import logging
from typing import Any, Dict, List

import requests

from ..domain.exceptions import StoreUnavailable
from ..domain.models import ReservationSpan
from ..domain.timeutil import DateLike, parse_date
from .parsing import parse_reservation_rows, touches_schedule_window

logger = logging.getLogger(__name__)


class HttpReservationStore:
    """
    Client for the booking API's reservation listing.

    Uses ``GET {base_url}/reservations`` with machine, date and timezone
    query parameters. The API is expected to already include the previous
    day's cross-midnight reservations; rows outside the window are dropped
    here as well.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 10.0):
        """
        Initialize the client.

        Args:
            base_url: Booking API base URL
            timeout_seconds: Per-request timeout
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.headers = {"Accept": "application/json"}

    def fetch_rows(self, machine_id: str, date: str, timezone: str) -> List[Any]:
        """
        Fetch raw reservation rows.

        Raises:
            StoreUnavailable: If the API call fails or returns an unexpected body
        """
        url = f"{self.base_url}/reservations"
        params = {"machineId": machine_id, "date": date, "timezone": timezone}

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise StoreUnavailable(f"Failed to fetch reservations from {url}: {e}") from e
        except ValueError as e:
            raise StoreUnavailable(f"Booking API returned invalid JSON: {e}") from e

        if isinstance(data, dict):
            data = data.get("reservations", data.get("data"))
        if not isinstance(data, list):
            raise StoreUnavailable("Booking API response does not contain a reservation list")

        return data

    async def get_active_reservations(
        self,
        machine_id: str,
        date: DateLike,
        timezone: str,
    ) -> List[ReservationSpan]:
        """Return live reservations of ``machine_id`` that may touch ``date``."""
        date_str = parse_date(date).to_date_string()
        rows = await asyncio.to_thread(self.fetch_rows, machine_id, date_str, timezone)
        reservations = parse_reservation_rows(rows, self.base_url)

        return [
            reservation
            for reservation in reservations
            if touches_schedule_window(reservation, date_str, timezone, machine_id=machine_id)
        ]

    def ping(self) -> Dict[str, Any]:
        """
        Test the connection by calling the API's health endpoint.

        Raises:
            StoreUnavailable: If the health check fails
        """
        url = f"{self.base_url}/health"

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout_seconds)
            response.raise_for_status()
            return response.json()

        except (requests.exceptions.RequestException, ValueError) as e:
            raise StoreUnavailable(f"Health check failed: {e}") from e
