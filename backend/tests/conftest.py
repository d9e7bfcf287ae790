import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.models.school_class import SchoolClass, Section  # noqa: E402
from app.models.section_teacher import SectionTeacher  # noqa: E402
from app.models.subject import Subject  # noqa: E402
from app.models.teacher import Teacher  # noqa: E402


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def make_class(db_session):
    """Build a class with sections and rosters.

    ``rosters`` holds one list of (subject_id, teacher_id) pairs per section;
    subjects and teachers are created on demand with those ids.
    """

    def factory(
        *,
        periods_per_day: int = 3,
        period_length: int = 45,
        rosters: list[list[tuple[int, int]]] | None = None,
        overrides: dict[str, int] | None = None,
        name: str = "Grade 1",
    ) -> SchoolClass:
        rosters = [[(1, 10), (2, 11)]] if rosters is None else rosters
        school_class = SchoolClass(
            name=name,
            periods_per_day=periods_per_day,
            period_length=period_length,
            periods_per_day_overrides=overrides or {},
        )
        db_session.add(school_class)
        db_session.flush()

        for index, roster in enumerate(rosters):
            section = Section(class_id=school_class.id, name=chr(ord("A") + index))
            db_session.add(section)
            db_session.flush()
            for subject_id, teacher_id in roster:
                if db_session.get(Subject, subject_id) is None:
                    db_session.add(Subject(id=subject_id, name=f"Subject {subject_id}", code=f"S{subject_id}"))
                if db_session.get(Teacher, teacher_id) is None:
                    db_session.add(Teacher(id=teacher_id, name=f"Teacher {teacher_id}"))
                db_session.flush()
                db_session.add(SectionTeacher(section_id=section.id, subject_id=subject_id, teacher_id=teacher_id))
        db_session.commit()
        db_session.refresh(school_class)
        return school_class

    return factory
