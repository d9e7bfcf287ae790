from app.models.school_class import SchoolClass, Section  # noqa: F401
from app.models.section_teacher import SectionTeacher  # noqa: F401
from app.models.subject import Subject  # noqa: F401
from app.models.teacher import Teacher  # noqa: F401
from app.models.time_slot import TIME_SLOT_DAY_TO_WEEKDAY, TimeSlot, TimeSlotDay, TimeSlotType  # noqa: F401
from app.models.timetable import Timetable, TimetableEntry  # noqa: F401
