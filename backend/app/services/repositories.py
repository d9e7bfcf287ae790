from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from app.models.school_class import SchoolClass
from app.models.section_teacher import SectionTeacher
from app.models.timetable import Timetable, TimetableEntry


class ClassRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, class_id: int) -> SchoolClass | None:
        stmt = (
            select(SchoolClass)
            .where(SchoolClass.id == class_id)
            .options(selectinload(SchoolClass.sections))
        )
        return self.db.execute(stmt).scalar_one_or_none()


class SectionRosterRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_section_teachers(self, section_id: int) -> list[SectionTeacher]:
        stmt = (
            select(SectionTeacher)
            .where(SectionTeacher.section_id == section_id)
            .order_by(SectionTeacher.id)
        )
        return list(self.db.execute(stmt).scalars())


class TimetableStore:
    """Writes generated timetables into the caller's open transaction.

    Nothing here commits; the caller decides when the unit of work ends.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def create_timetable(self, **values) -> Timetable:
        timetable = Timetable(**values)
        self.db.add(timetable)
        self.db.flush()
        return timetable

    def bulk_create_entries(self, rows: Iterable[dict]) -> list[TimetableEntry]:
        entries = [TimetableEntry(**row) for row in rows]
        self.db.add_all(entries)
        self.db.flush()
        return entries

    def delete_for_class(self, class_id: int) -> int:
        timetable_ids = list(
            self.db.execute(select(Timetable.id).where(Timetable.class_id == class_id)).scalars()
        )
        if not timetable_ids:
            return 0
        self.db.execute(delete(TimetableEntry).where(TimetableEntry.timetable_id.in_(timetable_ids)))
        self.db.execute(delete(Timetable).where(Timetable.id.in_(timetable_ids)))
        return len(timetable_ids)
