import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.time_slot import TimeSlot, TimeSlotDay, TimeSlotType
from app.services.time_slots import (
    delete_time_slot,
    generate_time_slots,
    generate_time_slots_for_class,
    list_time_slots,
    update_time_slot,
)
from app.services.time_utils import parse_time_to_minutes


def test_periods_without_breaks_drop_partial_tail():
    slots = generate_time_slots("08:00", "10:00", 45)

    assert [(slot.start_time, slot.end_time) for slot in slots] == [
        ("08:00", "08:45"),
        ("08:45", "09:30"),
    ]
    assert all(slot.type == TimeSlotType.PERIOD for slot in slots)
    assert all(slot.day == TimeSlotDay.MON for slot in slots)


def test_every_period_is_followed_by_a_break():
    slots = generate_time_slots("08:00", "10:00", 45, break_length=15)

    assert [(slot.start_time, slot.end_time, slot.type) for slot in slots] == [
        ("08:00", "08:45", TimeSlotType.PERIOD),
        ("08:45", "09:00", TimeSlotType.BREAK),
        ("09:00", "09:45", TimeSlotType.PERIOD),
        ("09:45", "10:00", TimeSlotType.BREAK),
    ]


def test_day_label_is_fixed_per_call():
    slots = generate_time_slots("09:00", "11:00", 60, day=TimeSlotDay.SAT)
    assert {slot.day for slot in slots} == {TimeSlotDay.SAT}


@pytest.mark.parametrize(
    ("start", "end", "period", "gap"),
    [
        ("08:00", "14:00", 45, 0),
        ("08:00", "14:00", 45, 10),
        ("07:30", "13:10", 40, 5),
        ("08:00", "08:30", 45, 0),
        ("12:00", "23:59", 55, 15),
    ],
)
def test_no_period_extends_past_end(start, end, period, gap):
    slots = generate_time_slots(start, end, period, break_length=gap)
    day_end = parse_time_to_minutes(end)
    for slot in slots:
        if slot.type == TimeSlotType.PERIOD:
            assert parse_time_to_minutes(slot.end_time) <= day_end
            assert parse_time_to_minutes(slot.end_time) - parse_time_to_minutes(slot.start_time) == period


def test_window_shorter_than_one_period_yields_nothing():
    assert generate_time_slots("08:00", "08:30", 45) == []


def test_rejects_malformed_times_and_lengths():
    with pytest.raises(ValidationError):
        generate_time_slots("8am", "10:00", 45)
    with pytest.raises(ValidationError):
        generate_time_slots("08:00", "10:00", 0)
    with pytest.raises(ValidationError):
        generate_time_slots("08:00", "10:00", 45, break_length=-1)


def test_generate_for_class_persists_slots(db_session, make_class):
    school_class = make_class()

    rows = generate_time_slots_for_class(
        db_session,
        school_class.id,
        start_time="08:00",
        end_time="10:00",
        period_length=45,
        break_length=15,
        days=[TimeSlotDay.MON, TimeSlotDay.TUE],
    )

    assert len(rows) == 8
    assert all(row.id is not None and row.class_id == school_class.id for row in rows)
    assert db_session.query(TimeSlot).count() == 8

    listed = list_time_slots(db_session, school_class.id)
    assert [row.day for row in listed[:4]] == [TimeSlotDay.MON] * 4
    assert [row.start_time for row in listed[:4]] == ["08:00", "08:45", "09:00", "09:45"]


def test_generate_for_missing_class(db_session):
    with pytest.raises(NotFoundError):
        generate_time_slots_for_class(db_session, 999, start_time="08:00", end_time="10:00", period_length=45)


def test_update_and_delete_time_slot(db_session, make_class):
    school_class = make_class()
    rows = generate_time_slots_for_class(
        db_session, school_class.id, start_time="08:00", end_time="09:30", period_length=45
    )

    updated = update_time_slot(db_session, rows[0].id, {"type": TimeSlotType.LUNCH, "end_time": "08:50"})
    assert updated.type == TimeSlotType.LUNCH
    assert updated.end_time == "08:50"

    with pytest.raises(ValidationError):
        update_time_slot(db_session, rows[1].id, {"end_time": "08:00"})

    delete_time_slot(db_session, rows[0].id)
    assert db_session.get(TimeSlot, rows[0].id) is None

    with pytest.raises(NotFoundError):
        delete_time_slot(db_session, rows[0].id)
    with pytest.raises(NotFoundError):
        update_time_slot(db_session, 12345, {"end_time": "09:00"})
