import pytest
from datetime import date

from agency_hr.core.exceptions import BusinessRuleError
from agency_hr.services.attendance import AttendanceService, calculate_working_hours


@pytest.mark.parametrize(
    "check_in, check_out, expected",
    [
        ("09:00", "18:00", (8.0, 1.0)),
        ("09:00", "17:00", (8.0, 0.0)),
        ("09:00", "08:00", (0.0, 0.0)),
        ("09:15", "13:45", (4.5, 0.0)),
        ("08:00", "19:20", (8.0, 3.33)),
    ],
)
def test_calculate_working_hours(check_in, check_out, expected):
    assert calculate_working_hours(check_in, check_out) == expected


def test_calculate_working_hours_rejects_garbage():
    with pytest.raises(BusinessRuleError):
        calculate_working_hours("nine", "18:00")
    with pytest.raises(BusinessRuleError):
        calculate_working_hours("09:00", "24:30")


def test_working_hours_endpoint(client):
    response = client.post("/api/attendance/working-hours", json={"check_in": "09:00", "check_out": "18:00"})
    assert response.status_code == 200
    assert response.json() == {"working_hours": 8.0, "overtime_hours": 1.0}


def test_create_attendance_computes_hours(client, make_member):
    member = make_member()
    response = client.post(
        "/api/attendance",
        json={"team_member_id": member.id, "date": "2024-03-04", "check_in": "09:00", "check_out": "18:30"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PRESENT"
    assert data["working_hours"] == 8.0
    assert data["overtime_hours"] == 1.5
    assert data["member_email"] == member.email


def test_duplicate_day_conflicts(client, make_member):
    member = make_member()
    payload = {"team_member_id": member.id, "date": "2024-03-04", "check_in": "09:00"}
    assert client.post("/api/attendance", json=payload).status_code == 201

    response = client.post("/api/attendance", json=payload)
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "CONFLICT"


def test_invalid_time_format_is_a_validation_error(client, make_member):
    member = make_member()
    response = client.post(
        "/api/attendance",
        json={"team_member_id": member.id, "date": "2024-03-04", "check_in": "9am"},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "check_in"


def test_bulk_create_is_all_or_nothing(client, db_session, make_member):
    member = make_member()
    response = client.post(
        "/api/attendance/bulk",
        json={"records": [
            {"team_member_id": member.id, "date": "2024-03-04", "status": "PRESENT"},
            {"team_member_id": member.id, "date": "2024-03-05", "status": "HALF_DAY"},
        ]},
    )
    assert response.status_code == 201
    assert len(response.json()) == 2

    response = client.post(
        "/api/attendance/bulk",
        json={"records": [
            {"team_member_id": member.id, "date": "2024-03-06"},
            {"team_member_id": member.id, "date": "2024-03-04"},
        ]},
    )
    assert response.status_code == 409
    assert len(AttendanceService(db_session).list_attendance(team_member_id=member.id)) == 2


def test_update_recomputes_hours_when_both_times_present(client, make_member):
    member = make_member()
    record_id = client.post(
        "/api/attendance",
        json={"team_member_id": member.id, "date": "2024-03-04", "check_in": "09:00"},
    ).json()["id"]

    response = client.patch(f"/api/attendance/{record_id}", json={"check_out": "17:00"})
    assert response.status_code == 200
    assert response.json()["working_hours"] == 8.0

    response = client.patch(f"/api/attendance/{record_id}", json={"working_hours": 6.5})
    assert response.json()["working_hours"] == 6.5


@pytest.mark.parametrize("field", ["status", "date", "working_hours"])
def test_update_rejects_null_for_required_fields(client, make_member, field):
    member = make_member()
    record_id = client.post(
        "/api/attendance",
        json={"team_member_id": member.id, "date": "2024-03-04", "status": "PRESENT"},
    ).json()["id"]

    response = client.patch(f"/api/attendance/{record_id}", json={field: None})
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == field

    record = client.get(f"/api/attendance/{record_id}").json()
    assert (record["status"], record["date"]) == ("PRESENT", "2024-03-04")


def test_list_filters_and_orders_newest_first(client, make_member):
    member = make_member()
    other = make_member()
    for day in ("2024-03-04", "2024-03-06", "2024-03-05"):
        client.post("/api/attendance", json={"team_member_id": member.id, "date": day})
    client.post("/api/attendance", json={"team_member_id": other.id, "date": "2024-03-05"})

    response = client.get(
        "/api/attendance",
        params={"team_member_id": member.id, "from_date": "2024-03-05", "to_date": "2024-03-31"},
    )
    assert [r["date"] for r in response.json()] == ["2024-03-06", "2024-03-05"]


def test_delete_attendance(client, make_member):
    member = make_member()
    record_id = client.post(
        "/api/attendance", json={"team_member_id": member.id, "date": "2024-03-04"}
    ).json()["id"]

    assert client.delete(f"/api/attendance/{record_id}").status_code == 200
    assert client.get(f"/api/attendance/{record_id}").status_code == 404


def test_upsert_for_day_creates_then_updates(db_session, make_member):
    member = make_member()
    service = AttendanceService(db_session)

    first = service.upsert_for_day(member.id, date(2024, 3, 4), check_in="09:00")
    second = service.upsert_for_day(member.id, date(2024, 3, 4), check_out="18:00")
    db_session.commit()

    assert first.id == second.id
    assert (second.working_hours, second.overtime_hours) == (8.0, 1.0)
    assert len(service.list_attendance(team_member_id=member.id)) == 1
