"""
Wiring of configuration, store adapter and calculator into a ScheduleService.
"""

from typing import Optional

from ..adapters.http_store import HttpReservationStore
from ..adapters.json_store import JsonReservationStore
from ..config import AppConfig
from ..domain.calculator import ScheduleCalculator
from ..domain.exceptions import InvalidConfiguration
from .schedule_service import ReservationStoreProtocol, ScheduleService


def build_store(config: AppConfig) -> ReservationStoreProtocol:
    """
    Pick the reservation store configured under ``store``.

    Raises:
        InvalidConfiguration: If neither a data file nor an API URL is set
    """
    if config.store.api_url:
        return HttpReservationStore(
            base_url=config.store.api_url,
            timeout_seconds=config.store.timeout_seconds,
        )
    if config.store.data_file is not None:
        return JsonReservationStore(config.store.data_file)

    raise InvalidConfiguration("Configure either store.api_url or store.data_file")


def build_service(
    config: AppConfig,
    store: Optional[ReservationStoreProtocol] = None,
) -> ScheduleService:
    """Create a ScheduleService from configuration."""
    calculator = ScheduleCalculator(operating_hours=config.get_operating_hours())
    return ScheduleService(
        store=store if store is not None else build_store(config),
        calculator=calculator,
        timezone=config.timezone,
        days_ahead=config.days_ahead,
    )
