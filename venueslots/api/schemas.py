from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeSlotInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    status: str
    booking_id: Optional[str] = Field(default=None, alias="bookingId")
    is_cross_midnight: Optional[bool] = Field(default=None, alias="isCrossMidnight")


class DayScheduleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str  # YYYY-MM-DD, local to the shop timezone
    machine_id: str = Field(alias="machineId")
    timezone: str
    time_slots: List[TimeSlotInfo] = Field(alias="timeSlots")
    total_slots: int = Field(alias="totalSlots")
    available_slots: int = Field(alias="availableSlots")
    booked_slots: int = Field(alias="bookedSlots")


class SlotCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    machine_id: str = Field(alias="machineId")
    date: str
    start_time: str = Field(alias="startTime")
    duration: int = Field(gt=0)
    reference_time: Optional[str] = Field(default=None, alias="referenceTime")
    timezone: Optional[str] = None


class SlotCheckResponse(BaseModel):
    available: bool
    reason: Optional[str] = None


class AvailableDatesResponse(BaseModel):
    dates: List[str]
