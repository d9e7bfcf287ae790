from collections.abc import Generator
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.db.session import SessionLocal
from app.services.timetable_builder import TimetableBuilder


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_timetable_builder(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TimetableBuilder:
    return TimetableBuilder(
        db,
        logger=logging.getLogger("app.timetable"),
        school_start_time=settings.school_start_time,
    )
