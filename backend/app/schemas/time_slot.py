from __future__ import annotations

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from app.models.time_slot import TIME_SLOT_DAY_TO_WEEKDAY, TimeSlotDay, TimeSlotType
from app.services.time_utils import TIME_PATTERN, parse_time_to_minutes


def _validate_time(value: str | None) -> str | None:
    if value is not None and not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


class TimeSlotGenerateRequest(BaseModel):
    class_id: int = Field(alias="classId", ge=1)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    period_length: int = Field(alias="periodLength", ge=1, le=600)
    break_length: int = Field(default=0, alias="breakLength", ge=0, le=600)
    days: list[TimeSlotDay] = Field(default_factory=lambda: [TimeSlotDay.MON], min_length=1, max_length=6)

    model_config = {"populate_by_name": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return _validate_time(value)

    @model_validator(mode="after")
    def validate_window(self) -> "TimeSlotGenerateRequest":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("endTime must be after startTime")
        if len(set(self.days)) != len(self.days):
            raise ValueError("Duplicate day entries")
        return self


class TimeSlotUpdate(BaseModel):
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    day: TimeSlotDay | None = None
    type: TimeSlotType | None = None

    model_config = {"populate_by_name": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str | None) -> str | None:
        return _validate_time(value)


class TimeSlotOut(BaseModel):
    id: int
    class_id: int | None = Field(default=None, alias="classId")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    day: TimeSlotDay
    type: TimeSlotType

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @computed_field(alias="dayOfWeek")
    @property
    def day_of_week(self) -> str:
        """Timetable weekday name matching this slot."""
        return TIME_SLOT_DAY_TO_WEEKDAY[self.day]
