from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.services.time_utils import TIME_PATTERN, WEEKDAYS

ORM_CONFIG = {
    "populate_by_name": True,
    "from_attributes": True,
}


class TimetableGenerationConfig(BaseModel):
    periods_per_day_overrides: dict[str, int] = Field(default_factory=dict, alias="periodsPerDayOverrides")
    break_start_time: str | None = Field(default=None, alias="breakStartTime")
    break_end_time: str | None = Field(default=None, alias="breakEndTime")
    replace_existing: bool = Field(default=False, alias="replaceExisting")

    model_config = {"populate_by_name": True}

    @field_validator("periods_per_day_overrides")
    @classmethod
    def validate_override_days(cls, value: dict[str, int]) -> dict[str, int]:
        cleaned = {day.strip(): count for day, count in value.items()}
        invalid = sorted(day for day in cleaned if day not in WEEKDAYS)
        if invalid:
            raise ValueError(f"Invalid override day(s): {', '.join(invalid)}")
        if any(count > 24 for count in cleaned.values()):
            raise ValueError("Per-day overrides cannot exceed 24 periods")
        return cleaned

    @field_validator("break_start_time", "break_end_time")
    @classmethod
    def validate_time_format(cls, value: str | None) -> str | None:
        if value is not None and not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value


class SubjectBrief(BaseModel):
    id: int
    name: str
    code: str | None = None

    model_config = ORM_CONFIG


class TeacherBrief(BaseModel):
    id: int
    name: str

    model_config = ORM_CONFIG


class SectionBrief(BaseModel):
    id: int
    name: str
    class_id: int = Field(alias="classId")

    model_config = ORM_CONFIG


class ClassBrief(BaseModel):
    id: int
    name: str

    model_config = ORM_CONFIG


class TimetableEntryOut(BaseModel):
    id: int
    timetable_id: int = Field(alias="timetableId")
    class_id: int = Field(alias="classId")
    section_id: int = Field(alias="sectionId")
    subject_id: int = Field(alias="subjectId")
    teacher_id: int = Field(alias="teacherId")
    day_of_week: str = Field(alias="dayOfWeek")
    period_number: int = Field(alias="periodNumber")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    subject: SubjectBrief | None = None
    teacher: TeacherBrief | None = None

    model_config = ORM_CONFIG


class TeacherTimetableEntryOut(TimetableEntryOut):
    section: SectionBrief | None = None
    school_class: ClassBrief | None = Field(default=None, alias="class")


class TimetableOut(BaseModel):
    id: int
    class_id: int = Field(alias="classId")
    section_id: int = Field(alias="sectionId")
    periods_per_day: int = Field(alias="periodsPerDay")
    periods_per_day_overrides: dict[str, int] = Field(default_factory=dict, alias="periodsPerDayOverrides")
    break_start_time: str | None = Field(default=None, alias="breakStartTime")
    break_end_time: str | None = Field(default=None, alias="breakEndTime")
    teacher_id: int = Field(alias="teacherId")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    section: SectionBrief | None = None
    entries: list[TimetableEntryOut] = Field(default_factory=list)

    model_config = ORM_CONFIG


WeeklyTimetableOut = dict[str, list[TeacherTimetableEntryOut]]
