from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime


from app.models.enums import DayOfWeekEnum
from .utility_schemas import validate_time_of_day


class WorkingHourBase(BaseModel):
    """
    Schema for opening hours of one weekday.
    """
    day_of_week: DayOfWeekEnum
    open_time: str = Field("09:00", description="Opening time, HH:MM")
    close_time: str = Field("18:00", description="Closing time, HH:MM")
    is_open: bool = True

    @field_validator("open_time", "close_time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return validate_time_of_day(value)


class WorkingHourIn(WorkingHourBase):
    """
    Schema for saving opening hours of one weekday.
    """

    @model_validator(mode="after")
    def check_order(self):
        if self.is_open and self.close_time <= self.open_time:
            raise ValueError("Closing time must be after opening time")
        return self


class WorkingHourPublic(WorkingHourBase):
    """
    Schema for stored opening hours.
    """
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DealershipPublic(BaseModel):
    """
    Schema for dealership details with its weekly schedule.
    """
    id: int
    name: str
    address: str
    phone: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    working_hours: List[WorkingHourPublic] = []

    model_config = ConfigDict(from_attributes=True)
