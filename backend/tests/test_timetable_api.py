def test_generate_and_read_back_timetable(client, make_class):
    school_class = make_class(periods_per_day=3, period_length=45, rosters=[[(1, 10), (2, 11)]])
    section_id = school_class.sections[0].id

    response = client.post(
        f"/api/timetable/generate/{school_class.id}",
        json={"breakStartTime": "09:30", "breakEndTime": "09:45", "periodsPerDayOverrides": {"Sunday": 0}},
    )
    assert response.status_code == 201
    payload = response.json()
    assert len(payload) == 1
    created = payload[0]
    assert created["classId"] == school_class.id
    assert created["sectionId"] == section_id
    assert created["teacherId"] == 10
    assert created["breakStartTime"] == "09:30"
    assert len(created["entries"]) == 3 * 6
    third = [entry for entry in created["entries"] if entry["dayOfWeek"] == "Monday"][2]
    assert (third["startTime"], third["endTime"]) == ("09:45", "10:30")

    fetched = client.get(f"/api/timetable/{school_class.id}/{section_id}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == created["id"]
    assert fetched.json()["entries"][0]["subject"]["name"] == "Subject 1"

    listed = client.get(f"/api/timetable/class/{school_class.id}")
    assert [item["id"] for item in listed.json()] == [created["id"]]


def test_generate_without_body_uses_defaults(client, make_class):
    school_class = make_class()

    response = client.post(f"/api/timetable/generate/{school_class.id}")

    assert response.status_code == 201
    created = response.json()[0]
    assert created["periodsPerDayOverrides"] == {}
    assert created["breakStartTime"] is None
    assert len(created["entries"]) == 3 * 7


def test_generate_errors_render_message_payload(client, make_class):
    missing = client.post("/api/timetable/generate/999")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Class with id 999 not found"

    school_class = make_class(rosters=[[]])
    empty_roster = client.post(f"/api/timetable/generate/{school_class.id}")
    assert empty_roster.status_code == 400
    assert empty_roster.json()["details"]["section_id"] == school_class.sections[0].id


def test_generate_rejects_malformed_config(client, make_class):
    school_class = make_class()

    bad_day = client.post(
        f"/api/timetable/generate/{school_class.id}",
        json={"periodsPerDayOverrides": {"Funday": 2}},
    )
    assert bad_day.status_code == 422

    bad_time = client.post(f"/api/timetable/generate/{school_class.id}", json={"breakStartTime": "9am"})
    assert bad_time.status_code == 422

    inverted = client.post(
        f"/api/timetable/generate/{school_class.id}",
        json={"breakStartTime": "10:00", "breakEndTime": "09:00"},
    )
    assert inverted.status_code == 400


def test_missing_timetable_is_404(client, make_class):
    school_class = make_class()
    section_id = school_class.sections[0].id

    response = client.get(f"/api/timetable/{school_class.id}/{section_id}")

    assert response.status_code == 404
    assert response.json() == {
        "message": f"Timetable for section with id {section_id} not found",
        "details": {"class_id": school_class.id},
    }


def test_teacher_and_weekly_views(client, make_class):
    school_class = make_class(periods_per_day=2, rosters=[[(1, 10), (2, 11)]])
    section_id = school_class.sections[0].id
    client.post(f"/api/timetable/generate/{school_class.id}")

    teacher = client.get("/api/timetable/teacher/11")
    assert teacher.status_code == 200
    entries = teacher.json()
    assert len(entries) == 7
    assert entries[0]["dayOfWeek"] == "Monday"
    assert entries[0]["section"]["name"] == "A"
    assert entries[0]["class"]["name"] == "Grade 1"

    weekly = client.get(f"/api/timetable/weekly/{school_class.id}/{section_id}")
    assert weekly.status_code == 200
    assert list(weekly.json()) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert [entry["periodNumber"] for entry in weekly.json()["Friday"]] == [1, 2]

    weekly_teacher = client.get(f"/api/timetable/weekly/{school_class.id}/teacher/10")
    assert weekly_teacher.status_code == 200
    assert all(entry["teacherId"] == 10 for entries in weekly_teacher.json().values() for entry in entries)

    assert client.get("/api/timetable/teacher/0").status_code == 400
    assert client.get("/api/timetable/teacher/77").status_code == 404


def test_time_slot_crud(client, make_class):
    school_class = make_class()

    created = client.post(
        "/api/time-slots",
        json={
            "classId": school_class.id,
            "startTime": "08:00",
            "endTime": "10:00",
            "periodLength": 50,
            "breakLength": 10,
            "days": ["TUE", "MON"],
        },
    )
    assert created.status_code == 201
    slots = created.json()
    assert [(slot["day"], slot["type"], slot["startTime"]) for slot in slots[:4]] == [
        ("TUE", "PERIOD", "08:00"),
        ("TUE", "BREAK", "08:50"),
        ("TUE", "PERIOD", "09:00"),
        ("TUE", "BREAK", "09:50"),
    ]
    assert {slot["day"]: slot["dayOfWeek"] for slot in slots} == {"TUE": "Tuesday", "MON": "Monday"}

    listed = client.get(f"/api/time-slots/class/{school_class.id}").json()
    assert [slot["day"] for slot in listed] == ["MON"] * 4 + ["TUE"] * 4

    slot_id = listed[0]["id"]
    updated = client.put(f"/api/time-slots/{slot_id}", json={"type": "LUNCH", "endTime": "08:40"})
    assert updated.status_code == 200
    assert updated.json()["type"] == "LUNCH"
    assert updated.json()["endTime"] == "08:40"

    inverted = client.put(f"/api/time-slots/{slot_id}", json={"endTime": "07:00"})
    assert inverted.status_code == 400

    assert client.delete(f"/api/time-slots/{slot_id}").status_code == 204
    assert client.delete(f"/api/time-slots/{slot_id}").status_code == 404


def test_time_slot_request_validation(client, make_class):
    school_class = make_class()

    inverted_window = client.post(
        "/api/time-slots",
        json={"classId": school_class.id, "startTime": "10:00", "endTime": "09:00", "periodLength": 30},
    )
    assert inverted_window.status_code == 422

    missing_class = client.post(
        "/api/time-slots",
        json={"classId": 999, "startTime": "08:00", "endTime": "09:00", "periodLength": 30},
    )
    assert missing_class.status_code == 404
