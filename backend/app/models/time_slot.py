from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class TimeSlotDay(str, Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"


class TimeSlotType(str, Enum):
    PERIOD = "PERIOD"
    BREAK = "BREAK"
    LUNCH = "LUNCH"


TIME_SLOT_DAY_TO_WEEKDAY: dict[TimeSlotDay, str] = {
    TimeSlotDay.MON: "Monday",
    TimeSlotDay.TUE: "Tuesday",
    TimeSlotDay.WED: "Wednesday",
    TimeSlotDay.THU: "Thursday",
    TimeSlotDay.FRI: "Friday",
    TimeSlotDay.SAT: "Saturday",
}


class TimeSlot(Base):
    __tablename__ = "time_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    class_id: Mapped[int | None] = mapped_column(
        ForeignKey("classes.id", ondelete="CASCADE"), nullable=True, index=True
    )
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    day: Mapped[TimeSlotDay] = mapped_column(SAEnum(TimeSlotDay, name="time_slot_day"), nullable=False)
    type: Mapped[TimeSlotType] = mapped_column(
        SAEnum(TimeSlotType, name="time_slot_type"),
        nullable=False,
        default=TimeSlotType.PERIOD,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
