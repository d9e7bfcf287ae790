from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.subject import Subject
from app.models.teacher import Teacher


class SectionTeacher(Base):
    """One subject-teacher assignment on a section's roster."""

    __tablename__ = "section_teachers"
    __table_args__ = (
        UniqueConstraint(
            "section_id",
            "subject_id",
            "teacher_id",
            name="uq_section_teachers_section_subject_teacher",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    section_id: Mapped[int] = mapped_column(ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id: Mapped[int] = mapped_column(ForeignKey("subjects.id"), nullable=False)
    teacher_id: Mapped[int] = mapped_column(ForeignKey("teachers.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    subject: Mapped[Subject] = relationship()
    teacher: Mapped[Teacher] = relationship()
