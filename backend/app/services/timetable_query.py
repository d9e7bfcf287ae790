from __future__ import annotations

import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError, ValidationError
from app.models.timetable import Timetable, TimetableEntry
from app.services.query_filters import Equals, In, Predicate, all_of, compile_predicate
from app.services.time_utils import WEEKDAYS, WORKWEEK

logger = logging.getLogger(__name__)


def _day_order(days: tuple[str, ...]):
    return case(
        {day: index for index, day in enumerate(days)},
        value=TimetableEntry.day_of_week,
        else_=len(days),
    )


def _require_positive_id(label: str, value: int | None) -> None:
    if value is None or value <= 0:
        raise ValidationError(f"Invalid {label} ID provided", details={label.replace(" ", "_"): value})


def _timetable_options():
    return (
        selectinload(Timetable.section),
        selectinload(Timetable.entries).selectinload(TimetableEntry.subject),
        selectinload(Timetable.entries).selectinload(TimetableEntry.teacher),
    )


def _entry_options():
    return (
        selectinload(TimetableEntry.timetable),
        selectinload(TimetableEntry.section),
        selectinload(TimetableEntry.school_class),
        selectinload(TimetableEntry.subject),
        selectinload(TimetableEntry.teacher),
    )


def latest_timetable_ids(db: Session, class_id: int | None = None) -> tuple[int, ...]:
    """Id of the most recent timetable of every section, optionally within one class."""
    stmt = select(func.max(Timetable.id)).group_by(Timetable.section_id)
    if class_id is not None:
        stmt = stmt.where(compile_predicate(Timetable, Equals("class_id", class_id)))
    return tuple(db.execute(stmt).scalars())


def find_entries(
    db: Session,
    predicate: Predicate,
    *,
    day_order: tuple[str, ...] = WEEKDAYS,
) -> list[TimetableEntry]:
    stmt = (
        select(TimetableEntry)
        .where(compile_predicate(TimetableEntry, predicate))
        .options(*_entry_options())
        .order_by(_day_order(day_order), TimetableEntry.period_number, TimetableEntry.id)
    )
    return list(db.execute(stmt).scalars())


def get_timetable(db: Session, class_id: int, section_id: int) -> Timetable | None:
    """Latest timetable generated for the section, or ``None``."""
    _require_positive_id("class", class_id)
    _require_positive_id("section", section_id)
    stmt = (
        select(Timetable)
        .where(compile_predicate(Timetable, all_of(Equals("class_id", class_id), Equals("section_id", section_id))))
        .options(*_timetable_options())
        .order_by(Timetable.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()


def get_timetables_by_class(db: Session, class_id: int) -> list[Timetable]:
    _require_positive_id("class", class_id)
    stmt = (
        select(Timetable)
        .where(compile_predicate(Timetable, Equals("class_id", class_id)))
        .options(*_timetable_options())
        .order_by(Timetable.section_id, Timetable.id)
    )
    return list(db.execute(stmt).scalars())


def get_teacher_timetable(db: Session, teacher_id: int) -> list[TimetableEntry]:
    _require_positive_id("teacher", teacher_id)
    entries = find_entries(
        db,
        all_of(Equals("teacher_id", teacher_id), In("timetable_id", latest_timetable_ids(db))),
    )
    if not entries:
        raise NotFoundError("Timetable entries for teacher", teacher_id)
    return entries


def get_weekly_timetable(
    db: Session,
    class_id: int,
    section_id: int | None = None,
    teacher_id: int | None = None,
) -> dict[str, list[TimetableEntry]]:
    """Monday to Friday view for one section or one teacher within a class.

    Only the latest timetable of each section is read. Weekend entries are
    left out of this view.
    """
    _require_positive_id("class", class_id)
    if (section_id is None) == (teacher_id is None):
        raise ValidationError(
            "Exactly one of section ID or teacher ID is required",
            details={"section_id": section_id, "teacher_id": teacher_id},
        )

    if section_id is not None:
        _require_positive_id("section", section_id)
        scope = Equals("section_id", section_id)
    else:
        _require_positive_id("teacher", teacher_id)
        scope = Equals("teacher_id", teacher_id)

    scope = all_of(Equals("class_id", class_id), scope, In("timetable_id", latest_timetable_ids(db, class_id)))
    entries = find_entries(
        db,
        all_of(scope, In("day_of_week", WORKWEEK)),
        day_order=WORKWEEK,
    )
    if not entries:
        raise NotFoundError(
            "Weekly timetable for class",
            class_id,
            details={"section_id": section_id, "teacher_id": teacher_id},
        )

    weekend_predicate = all_of(scope, In("day_of_week", WEEKDAYS[5:]))
    omitted = db.execute(
        select(func.count(TimetableEntry.id)).where(compile_predicate(TimetableEntry, weekend_predicate))
    ).scalar_one()
    if omitted:
        logger.warning(
            "WEEKLY TIMETABLE WEEKEND ENTRIES OMITTED | class_id=%s | section_id=%s | teacher_id=%s | omitted=%s",
            class_id,
            section_id,
            teacher_id,
            omitted,
        )

    grouped: dict[str, list[TimetableEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.day_of_week, []).append(entry)
    return grouped
