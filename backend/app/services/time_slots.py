from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models.school_class import SchoolClass
from app.models.time_slot import TimeSlot, TimeSlotDay, TimeSlotType
from app.services.time_utils import format_minutes, parse_time_to_minutes

logger = logging.getLogger(__name__)

_DAY_ORDER = case(
    {day: index for index, day in enumerate(TimeSlotDay)},
    value=TimeSlot.day,
    else_=len(TimeSlotDay),
)


@dataclass(frozen=True)
class TimeSlotBlock:
    start_time: str
    end_time: str
    day: TimeSlotDay
    type: TimeSlotType = TimeSlotType.PERIOD


def generate_time_slots(
    start_time: str,
    end_time: str,
    period_length: int,
    break_length: int = 0,
    day: TimeSlotDay = TimeSlotDay.MON,
) -> list[TimeSlotBlock]:
    """Lay out one day of period blocks, each optionally followed by a break.

    A period that would run past ``end_time`` is dropped rather than truncated.
    Breaks are not bounded by ``end_time``.
    """
    if period_length <= 0:
        raise ValidationError("Period length must be positive", details={"period_length": period_length})
    if break_length < 0:
        raise ValidationError("Break length cannot be negative", details={"break_length": break_length})

    current = parse_time_to_minutes(start_time)
    day_end = parse_time_to_minutes(end_time)
    slots: list[TimeSlotBlock] = []

    while current < day_end:
        slot_end = current + period_length
        if slot_end > day_end:
            break
        slots.append(TimeSlotBlock(format_minutes(current), format_minutes(slot_end), day))

        if break_length > 0:
            break_end = slot_end + break_length
            slots.append(
                TimeSlotBlock(format_minutes(slot_end), format_minutes(break_end), day, TimeSlotType.BREAK)
            )
            current = break_end
        else:
            current = slot_end

    return slots


def generate_time_slots_for_class(
    db: Session,
    class_id: int,
    *,
    start_time: str,
    end_time: str,
    period_length: int,
    break_length: int = 0,
    days: list[TimeSlotDay] | None = None,
) -> list[TimeSlot]:
    if db.get(SchoolClass, class_id) is None:
        raise NotFoundError("Class", class_id)

    rows: list[TimeSlot] = []
    for day in days or [TimeSlotDay.MON]:
        for block in generate_time_slots(start_time, end_time, period_length, break_length, day):
            rows.append(
                TimeSlot(
                    class_id=class_id,
                    start_time=block.start_time,
                    end_time=block.end_time,
                    day=block.day,
                    type=block.type,
                )
            )

    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    logger.info("TIME SLOTS GENERATED | class_id=%s | count=%s", class_id, len(rows))
    return rows


def list_time_slots(db: Session, class_id: int) -> list[TimeSlot]:
    stmt = (
        select(TimeSlot)
        .where(TimeSlot.class_id == class_id)
        .order_by(_DAY_ORDER, TimeSlot.start_time, TimeSlot.id)
    )
    return list(db.execute(stmt).scalars())


def update_time_slot(db: Session, slot_id: int, changes: dict) -> TimeSlot:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise NotFoundError("Time slot", slot_id)

    for key, value in changes.items():
        setattr(slot, key, value)
    if parse_time_to_minutes(slot.end_time) <= parse_time_to_minutes(slot.start_time):
        db.rollback()
        raise ValidationError("end_time must be after start_time", details={"slot_id": slot_id})

    db.commit()
    db.refresh(slot)
    return slot


def delete_time_slot(db: Session, slot_id: int) -> None:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise NotFoundError("Time slot", slot_id)
    db.delete(slot)
    db.commit()
