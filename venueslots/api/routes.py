from typing import Optional

import pendulum
from fastapi import APIRouter, Depends, Query, Request

from ..domain.availability import require_slot_run
from ..domain.exceptions import OutOfRange, SlotNotFound
from ..services.schedule_service import ScheduleService
from .schemas import (
    AvailableDatesResponse,
    DayScheduleResponse,
    SlotCheckRequest,
    SlotCheckResponse,
)

router = APIRouter(prefix="/schedule", tags=["schedule"])


def get_schedule_service(request: Request) -> ScheduleService:
    return request.app.state.schedule_service


@router.get("", response_model=DayScheduleResponse, response_model_exclude_none=True)
async def day_schedule(
    machine_id: str = Query(..., alias="machineId"),
    date_param: str = Query(..., alias="date"),
    reference_time: Optional[str] = Query(None, alias="referenceTime"),
    timezone: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
) -> DayScheduleResponse:
    """Return every slot of the machine's day with status and aggregate counts."""
    schedule = await service.compute_day_schedule(
        machine_id=machine_id,
        date=date_param,
        timezone=timezone,
        reference_instant=reference_time,
    )
    return DayScheduleResponse.model_validate(schedule.to_dict())


@router.post("", response_model=SlotCheckResponse, response_model_exclude_none=True)
async def check_slot(
    body: SlotCheckRequest,
    service: ScheduleService = Depends(get_schedule_service),
) -> SlotCheckResponse:
    """Check whether a start time and duration fit a run of free slots."""
    schedule = await service.compute_day_schedule(
        machine_id=body.machine_id,
        date=body.date,
        timezone=body.timezone,
        reference_instant=body.reference_time,
    )
    try:
        run = require_slot_run(
            schedule,
            body.start_time,
            body.duration,
            service.calculator.slot_duration_minutes,
        )
    except (SlotNotFound, OutOfRange) as exc:
        return SlotCheckResponse(available=False, reason=str(exc))

    return SlotCheckResponse(available=all(slot.is_available for slot in run))


@router.get("/dates", response_model=AvailableDatesResponse)
async def available_dates(
    today: Optional[str] = Query(None),
    days_ahead: Optional[int] = Query(None, alias="daysAhead", ge=0),
    service: ScheduleService = Depends(get_schedule_service),
) -> AvailableDatesResponse:
    """List bookable dates; ``today`` defaults to the current shop date."""
    start = today or pendulum.now(service.timezone).to_date_string()
    return AvailableDatesResponse(dates=service.enumerate_available_dates(start, days_ahead))
