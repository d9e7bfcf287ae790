"""Seed a small demo school and generate its timetables.

Run:
  PYTHONPATH=backend python scripts/seed_demo_school.py
"""

from __future__ import annotations

import os

from sqlalchemy import func, select

from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.school_class import SchoolClass, Section
from app.models.section_teacher import SectionTeacher
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.models.timetable import TimetableEntry
from app.schemas.timetable import TimetableGenerationConfig
from app.services.timetable_builder import TimetableBuilder

MOCK_EMAIL_DOMAIN = os.getenv("SEED_MOCK_EMAIL_DOMAIN", "school.edu").strip().lower() or "school.edu"
BREAK_START = os.getenv("SEED_BREAK_START", "10:15").strip() or None
BREAK_END = os.getenv("SEED_BREAK_END", "10:30").strip() or None

SUBJECTS = [
    ("Mathematics", "MATH"),
    ("English", "ENG"),
    ("Computer Science", "CS"),
    ("Physics", "PHY"),
    ("Chemistry", "CHEM"),
    ("Urdu", "URDU"),
]

TEACHERS = [
    "Ayesha Khan",
    "Bilal Ahmed",
    "Sara Malik",
    "Usman Tariq",
    "Hina Raza",
    "Omar Farooq",
]

CLASSES = [
    {"name": "Grade 1", "periods_per_day": 7, "period_length": 40, "sections": ["A", "B"]},
    {"name": "Grade 2", "periods_per_day": 7, "period_length": 45, "sections": ["A"]},
]


def teacher_email(name: str) -> str:
    local = ".".join(part.lower() for part in name.split())
    return f"{local}@{MOCK_EMAIL_DOMAIN}"


def upsert_subjects(session) -> list[Subject]:
    subjects: list[Subject] = []
    for name, code in SUBJECTS:
        subject = session.execute(select(Subject).where(Subject.code == code)).scalar_one_or_none()
        if subject is None:
            subject = Subject(name=name, code=code)
            session.add(subject)
        else:
            subject.name = name
        subjects.append(subject)
    session.flush()
    return subjects


def upsert_teachers(session) -> list[Teacher]:
    teachers: list[Teacher] = []
    for name in TEACHERS:
        email = teacher_email(name)
        teacher = session.execute(select(Teacher).where(Teacher.email == email)).scalar_one_or_none()
        if teacher is None:
            teacher = Teacher(name=name, email=email)
            session.add(teacher)
        else:
            teacher.name = name
        teachers.append(teacher)
    session.flush()
    return teachers


def upsert_class(session, class_def: dict) -> SchoolClass:
    school_class = session.execute(
        select(SchoolClass).where(SchoolClass.name == class_def["name"])
    ).scalar_one_or_none()
    if school_class is None:
        school_class = SchoolClass(
            name=class_def["name"],
            periods_per_day=class_def["periods_per_day"],
            period_length=class_def["period_length"],
            periods_per_day_overrides={"Friday": 5, "Saturday": 0, "Sunday": 0},
        )
        session.add(school_class)
        session.flush()
    else:
        school_class.periods_per_day = class_def["periods_per_day"]
        school_class.period_length = class_def["period_length"]

    existing = {section.name for section in school_class.sections}
    for name in class_def["sections"]:
        if name not in existing:
            session.add(Section(class_id=school_class.id, name=name))
    session.flush()
    session.refresh(school_class)
    return school_class


def upsert_rosters(session, school_class: SchoolClass, subjects: list[Subject], teachers: list[Teacher]) -> None:
    for offset, section in enumerate(school_class.sections):
        for index, subject in enumerate(subjects):
            teacher = teachers[(index + offset) % len(teachers)]
            exists = session.execute(
                select(SectionTeacher.id).where(
                    SectionTeacher.section_id == section.id,
                    SectionTeacher.subject_id == subject.id,
                    SectionTeacher.teacher_id == teacher.id,
                )
            ).scalar_one_or_none()
            if exists is None:
                session.add(SectionTeacher(section_id=section.id, subject_id=subject.id, teacher_id=teacher.id))
    session.flush()


def main() -> None:
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        subjects = upsert_subjects(session)
        teachers = upsert_teachers(session)
        classes = []
        for class_def in CLASSES:
            school_class = upsert_class(session, class_def)
            upsert_rosters(session, school_class, subjects, teachers)
            classes.append(school_class)
        session.commit()

        config = TimetableGenerationConfig(
            break_start_time=BREAK_START,
            break_end_time=BREAK_END,
            replace_existing=True,
        )
        builder = TimetableBuilder(session)
        generated = 0
        for school_class in classes:
            generated += len(builder.generate_timetable(school_class.id, config))

        entry_count = session.execute(select(func.count(TimetableEntry.id))).scalar_one()

    print("Demo school seeded successfully.")
    print("")
    print(f"Subjects: {len(SUBJECTS)}")
    print(f"Teachers: {len(TEACHERS)}")
    print(f"Classes: {len(CLASSES)}")
    print(f"Timetables generated: {generated}")
    print(f"Timetable entries: {entry_count}")


if __name__ == "__main__":
    main()
