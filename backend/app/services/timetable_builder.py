from __future__ import annotations

import logging
from time import perf_counter

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConfigurationError, ConflictError, NotFoundError, ValidationError
from app.models.school_class import SchoolClass, Section
from app.models.section_teacher import SectionTeacher
from app.models.timetable import Timetable
from app.schemas.timetable import TimetableGenerationConfig
from app.services.repositories import ClassRepository, SectionRosterRepository, TimetableStore
from app.services.time_utils import TIME_PATTERN, WEEKDAYS, add_minutes, parse_time_to_minutes

SCHOOL_START_TIME = "08:00"

module_logger = logging.getLogger(__name__)


def break_duration_minutes(break_start_time: str | None, break_end_time: str | None) -> int | None:
    if not break_start_time or not break_end_time:
        return None
    duration = parse_time_to_minutes(break_end_time) - parse_time_to_minutes(break_start_time)
    if duration <= 0:
        raise ValidationError(
            "Break end time must be after break start time",
            details={"break_start_time": break_start_time, "break_end_time": break_end_time},
        )
    return duration


def calculate_start_time(
    period_number: int,
    period_length: int,
    break_start_time: str | None = None,
    break_end_time: str | None = None,
    school_start_time: str = SCHOOL_START_TIME,
) -> str:
    """Start of ``period_number`` counted from the school start.

    Periods whose unadjusted start falls at or after the break start are
    pushed back by one break length. The shift is applied once.
    """
    if period_number < 1:
        raise ValidationError("Period number must be at least 1", details={"period_number": period_number})
    if period_number == 1:
        return school_start_time

    minutes_to_add = (period_number - 1) * period_length
    duration = break_duration_minutes(break_start_time, break_end_time)
    if duration is not None:
        candidate = add_minutes(school_start_time, minutes_to_add)
        if parse_time_to_minutes(candidate) >= parse_time_to_minutes(break_start_time):
            minutes_to_add += duration
    return add_minutes(school_start_time, minutes_to_add)


def periods_for_day(day: str, periods_per_day: int, overrides: dict[str, int] | None) -> int:
    if overrides and day in overrides:
        return overrides[day]
    return periods_per_day


class TimetableBuilder:
    """Generates one timetable per section of a class in a single transaction."""

    def __init__(
        self,
        db: Session,
        *,
        classes: ClassRepository | None = None,
        rosters: SectionRosterRepository | None = None,
        store: TimetableStore | None = None,
        logger: logging.Logger | None = None,
        school_start_time: str = SCHOOL_START_TIME,
    ) -> None:
        if not TIME_PATTERN.match(school_start_time or ""):
            raise ConfigurationError(f"School start time must be HH:MM, got {school_start_time!r}")
        self.db = db
        self.classes = classes or ClassRepository(db)
        self.rosters = rosters or SectionRosterRepository(db)
        self.store = store or TimetableStore(db)
        self.logger = logger or module_logger
        self.school_start_time = school_start_time

    def generate_timetable(
        self,
        class_id: int,
        config: TimetableGenerationConfig | None = None,
    ) -> list[Timetable]:
        config = config or TimetableGenerationConfig()
        started = perf_counter()
        self.logger.info(
            "TIMETABLE GENERATION START | class_id=%s | overrides=%s | break=%s-%s | replace_existing=%s",
            class_id,
            config.periods_per_day_overrides,
            config.break_start_time,
            config.break_end_time,
            config.replace_existing,
        )
        try:
            school_class = self._load_class(class_id)
            break_duration_minutes(config.break_start_time, config.break_end_time)
            if config.replace_existing:
                removed = self.store.delete_for_class(class_id)
                self.logger.info("TIMETABLE GENERATION CLEANUP | class_id=%s | removed=%s", class_id, removed)

            timetables = [
                self._create_for_section(school_class, section, config)
                for section in school_class.sections
            ]
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            self.logger.exception("TIMETABLE GENERATION CONFLICT | class_id=%s", class_id)
            raise ConflictError(
                "Timetable rows collided with existing data",
                details={"class_id": class_id},
            ) from exc
        except Exception:
            self.db.rollback()
            self.logger.exception(
                "TIMETABLE GENERATION FAILED | class_id=%s | wall_ms=%s",
                class_id,
                int((perf_counter() - started) * 1000),
            )
            raise

        for timetable in timetables:
            self.db.refresh(timetable)
        self.logger.info(
            "TIMETABLE GENERATION COMPLETE | class_id=%s | sections=%s | entries=%s | wall_ms=%s",
            class_id,
            len(timetables),
            sum(len(timetable.entries) for timetable in timetables),
            int((perf_counter() - started) * 1000),
        )
        return timetables

    def _load_class(self, class_id: int) -> SchoolClass:
        school_class = self.classes.find_by_id(class_id)
        if school_class is None:
            raise NotFoundError("Class", class_id)
        if not school_class.sections:
            raise ValidationError("No sections found for this class", details={"class_id": class_id})
        if not school_class.periods_per_day or school_class.periods_per_day <= 0:
            raise ValidationError(
                f"Invalid periods per day defined for class {class_id}",
                details={"periods_per_day": school_class.periods_per_day},
            )
        if not school_class.period_length or school_class.period_length <= 0:
            raise ValidationError(
                f"Invalid period length defined for class {class_id}",
                details={"period_length": school_class.period_length},
            )
        return school_class

    def _create_for_section(
        self,
        school_class: SchoolClass,
        section: Section,
        config: TimetableGenerationConfig,
    ) -> Timetable:
        roster = self.rosters.find_section_teachers(section.id)
        if not roster:
            raise ValidationError(
                f"No subject-teacher assignments found for section {section.id}",
                details={"class_id": school_class.id, "section_id": section.id},
            )

        overrides = {**(school_class.periods_per_day_overrides or {}), **config.periods_per_day_overrides}
        timetable = self.store.create_timetable(
            class_id=school_class.id,
            section_id=section.id,
            periods_per_day=school_class.periods_per_day,
            periods_per_day_overrides=overrides,
            break_start_time=config.break_start_time,
            break_end_time=config.break_end_time,
            teacher_id=roster[0].teacher_id,
        )

        rows = list(self._entry_rows(timetable, school_class, roster))
        self.store.bulk_create_entries(rows)
        self.logger.debug(
            "TIMETABLE SECTION GENERATED | class_id=%s | section_id=%s | timetable_id=%s | entries=%s",
            school_class.id,
            section.id,
            timetable.id,
            len(rows),
        )
        return timetable

    def _entry_rows(self, timetable: Timetable, school_class: SchoolClass, roster: list[SectionTeacher]):
        for day in WEEKDAYS:
            count = periods_for_day(day, timetable.periods_per_day, timetable.periods_per_day_overrides)
            if count <= 0:
                continue
            for period_number in range(1, count + 1):
                assignment = roster[(period_number - 1) % len(roster)]
                start_time = calculate_start_time(
                    period_number,
                    school_class.period_length,
                    timetable.break_start_time,
                    timetable.break_end_time,
                    self.school_start_time,
                )
                yield {
                    "timetable_id": timetable.id,
                    "class_id": school_class.id,
                    "section_id": timetable.section_id,
                    "subject_id": assignment.subject_id,
                    "teacher_id": assignment.teacher_id,
                    "day_of_week": day,
                    "period_number": period_number,
                    "start_time": start_time,
                    "end_time": add_minutes(start_time, school_class.period_length),
                }


def generate_timetable(
    db: Session,
    class_id: int,
    config: TimetableGenerationConfig | None = None,
) -> list[Timetable]:
    return TimetableBuilder(db).generate_timetable(class_id, config)
