import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import (
    InvalidRequest,
    OccupancyConflict,
    OutOfRange,
    ScheduleError,
    SlotNotFound,
    StoreUnavailable,
)
from ..services.factory import build_service
from ..services.schedule_service import ReservationStoreProtocol
from . import routes

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (InvalidRequest, 400),
    (SlotNotFound, 400),
    (OutOfRange, 400),
    (OccupancyConflict, 409),
    (StoreUnavailable, 503),
)


def _configure_logging() -> None:
    if os.getenv("ENV") != "production":
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
        )


def status_code_for(exc: ScheduleError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[ReservationStoreProtocol] = None,
) -> FastAPI:
    """
    Build the HTTP app around a ScheduleService.

    Without an explicit config, config.yaml is loaded from the default path.
    Run with ``uvicorn --factory venueslots.api.app:create_app``.
    """
    _configure_logging()
    if config is None:
        config = AppConfig.load_from_yaml(get_default_config_path())

    app = FastAPI(
        title="venueslots API",
        description="Day schedules and slot availability for venue machines",
        version=__version__,
    )
    app.state.schedule_service = build_service(config, store=store)
    app.include_router(routes.router)

    @app.exception_handler(ScheduleError)
    async def schedule_error_handler(request: Request, exc: ScheduleError) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    logger.info(
        "Schedule API ready: timezone=%s, %s slots of %d min",
        config.timezone,
        config.get_operating_hours().slots_per_day(),
        config.operating_hours.slot_duration_minutes,
    )
    return app
