from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_timetable_builder
from app.core.exceptions import NotFoundError
from app.schemas.timetable import (
    TeacherTimetableEntryOut,
    TimetableGenerationConfig,
    TimetableOut,
    WeeklyTimetableOut,
)
from app.services import timetable_query
from app.services.timetable_builder import TimetableBuilder

router = APIRouter()


@router.post("/generate/{class_id}", response_model=list[TimetableOut], status_code=status.HTTP_201_CREATED)
def generate_timetable(
    class_id: int,
    config: TimetableGenerationConfig | None = Body(default=None),
    builder: TimetableBuilder = Depends(get_timetable_builder),
) -> list[TimetableOut]:
    return builder.generate_timetable(class_id, config)


@router.get("/class/{class_id}", response_model=list[TimetableOut])
def list_class_timetables(class_id: int, db: Session = Depends(get_db)) -> list[TimetableOut]:
    return timetable_query.get_timetables_by_class(db, class_id)


@router.get("/teacher/{teacher_id}", response_model=list[TeacherTimetableEntryOut])
def get_teacher_timetable(teacher_id: int, db: Session = Depends(get_db)) -> list[TeacherTimetableEntryOut]:
    return timetable_query.get_teacher_timetable(db, teacher_id)


@router.get("/weekly/{class_id}/teacher/{teacher_id}", response_model=WeeklyTimetableOut)
def get_weekly_teacher_timetable(
    class_id: int,
    teacher_id: int,
    db: Session = Depends(get_db),
) -> WeeklyTimetableOut:
    return timetable_query.get_weekly_timetable(db, class_id, teacher_id=teacher_id)


@router.get("/weekly/{class_id}/{section_id}", response_model=WeeklyTimetableOut)
def get_weekly_section_timetable(
    class_id: int,
    section_id: int,
    db: Session = Depends(get_db),
) -> WeeklyTimetableOut:
    return timetable_query.get_weekly_timetable(db, class_id, section_id=section_id)


@router.get("/{class_id}/{section_id}", response_model=TimetableOut)
def get_timetable(class_id: int, section_id: int, db: Session = Depends(get_db)) -> TimetableOut:
    timetable = timetable_query.get_timetable(db, class_id, section_id)
    if timetable is None:
        raise NotFoundError("Timetable for section", section_id, details={"class_id": class_id})
    return timetable
