import logging

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.timetable import TimetableGenerationConfig
from app.services.repositories import TimetableStore
from app.services.timetable_builder import generate_timetable
from app.services.timetable_query import (
    get_teacher_timetable,
    get_timetable,
    get_timetables_by_class,
    get_weekly_timetable,
)


def _store_entries(db, school_class, rows):
    section = school_class.sections[0]
    store = TimetableStore(db)
    timetable = store.create_timetable(
        class_id=school_class.id,
        section_id=section.id,
        periods_per_day=school_class.periods_per_day,
        periods_per_day_overrides={},
        teacher_id=10,
    )
    store.bulk_create_entries(
        {
            "timetable_id": timetable.id,
            "class_id": school_class.id,
            "section_id": section.id,
            "subject_id": 1,
            "teacher_id": 10,
            "day_of_week": day,
            "period_number": period,
            "start_time": start,
            "end_time": end,
        }
        for day, period, start, end in rows
    )
    db.commit()
    return timetable


def test_get_timetable_returns_latest_run(db_session, make_class):
    school_class = make_class()
    section_id = school_class.sections[0].id
    generate_timetable(db_session, school_class.id)
    latest = generate_timetable(db_session, school_class.id)[0]

    timetable = get_timetable(db_session, school_class.id, section_id)

    assert timetable.id == latest.id
    assert len(timetable.entries) == 3 * 7
    assert timetable.entries[0].subject.name == "Subject 1"
    assert timetable.entries[0].teacher.name == "Teacher 10"


def test_get_timetable_absent_returns_none(db_session, make_class):
    school_class = make_class()

    assert get_timetable(db_session, school_class.id, school_class.sections[0].id) is None


@pytest.mark.parametrize(("class_id", "section_id"), [(0, 1), (1, -3)])
def test_get_timetable_rejects_invalid_ids(db_session, class_id, section_id):
    with pytest.raises(ValidationError):
        get_timetable(db_session, class_id, section_id)


def test_get_timetables_by_class_lists_every_section(db_session, make_class):
    school_class = make_class(rosters=[[(1, 10)], [(2, 11)]])
    generate_timetable(db_session, school_class.id)

    timetables = get_timetables_by_class(db_session, school_class.id)

    assert [timetable.section.name for timetable in timetables] == ["A", "B"]
    assert get_timetables_by_class(db_session, school_class.id + 1) == []


def test_teacher_timetable_follows_week_then_period_order(db_session, make_class):
    school_class = make_class(periods_per_day=3, rosters=[[(1, 10), (2, 11)]])
    generate_timetable(db_session, school_class.id)

    entries = get_teacher_timetable(db_session, 10)

    assert [(entry.day_of_week, entry.period_number) for entry in entries[:4]] == [
        ("Monday", 1),
        ("Monday", 3),
        ("Tuesday", 1),
        ("Tuesday", 3),
    ]
    assert entries[-1].day_of_week == "Sunday"
    assert len(entries) == 2 * 7
    assert entries[0].section.name == "A"
    assert entries[0].school_class.name == "Grade 1"
    assert entries[0].timetable.class_id == school_class.id


def test_teacher_timetable_errors(db_session, make_class):
    make_class()

    with pytest.raises(ValidationError):
        get_teacher_timetable(db_session, 0)
    with pytest.raises(NotFoundError) as exc_info:
        get_teacher_timetable(db_session, 99)
    assert exc_info.value.status_code == 404


def test_weekly_view_orders_days_and_drops_weekend(db_session, make_class, caplog):
    school_class = make_class()
    _store_entries(
        db_session,
        school_class,
        [
            ("Friday", 1, "08:00", "08:45"),
            ("Saturday", 1, "08:00", "08:45"),
            ("Wednesday", 2, "08:45", "09:30"),
            ("Monday", 1, "08:00", "08:45"),
            ("Wednesday", 1, "08:00", "08:45"),
        ],
    )

    with caplog.at_level(logging.WARNING, logger="app.services.timetable_query"):
        weekly = get_weekly_timetable(db_session, school_class.id, section_id=school_class.sections[0].id)

    assert list(weekly) == ["Monday", "Wednesday", "Friday"]
    assert [entry.period_number for entry in weekly["Wednesday"]] == [1, 2]
    assert any("WEEKEND ENTRIES OMITTED" in record.getMessage() for record in caplog.records)


def test_weekly_view_for_teacher_only_includes_their_periods(db_session, make_class):
    school_class = make_class(periods_per_day=4, rosters=[[(1, 10), (2, 11)]])
    generate_timetable(db_session, school_class.id, TimetableGenerationConfig(periods_per_day_overrides={"Friday": 1}))

    weekly = get_weekly_timetable(db_session, school_class.id, teacher_id=11)

    assert list(weekly) == ["Monday", "Tuesday", "Wednesday", "Thursday"]
    assert {entry.teacher_id for entries in weekly.values() for entry in entries} == {11}
    assert [entry.period_number for entry in weekly["Monday"]] == [2, 4]


def test_weekly_view_requires_exactly_one_scope(db_session, make_class):
    school_class = make_class()

    with pytest.raises(ValidationError):
        get_weekly_timetable(db_session, school_class.id)
    with pytest.raises(ValidationError):
        get_weekly_timetable(db_session, school_class.id, section_id=1, teacher_id=10)
    with pytest.raises(ValidationError):
        get_weekly_timetable(db_session, 0, section_id=1)


def test_weekly_view_without_entries_is_not_found(db_session, make_class):
    school_class = make_class()
    _store_entries(db_session, school_class, [("Sunday", 1, "08:00", "08:45")])

    with pytest.raises(NotFoundError):
        get_weekly_timetable(db_session, school_class.id, section_id=school_class.sections[0].id)


def test_views_read_only_the_latest_run(db_session, make_class):
    school_class = make_class(periods_per_day=3, rosters=[[(1, 10), (2, 11)], [(1, 10)]])
    section_id = school_class.sections[0].id
    generate_timetable(db_session, school_class.id)
    latest = generate_timetable(db_session, school_class.id)
    latest_ids = {timetable.id for timetable in latest}

    weekly = get_weekly_timetable(db_session, school_class.id, section_id=section_id)
    assert [entry.period_number for entry in weekly["Monday"]] == [1, 2, 3]
    assert {entry.timetable_id for entries in weekly.values() for entry in entries} == {latest[0].id}

    entries = get_teacher_timetable(db_session, 10)
    # two periods a day in section A plus three in section B
    assert len(entries) == (2 + 3) * 7
    assert {entry.timetable_id for entry in entries} == latest_ids
