import pytest
from datetime import date

from agency_hr.models.leave_request import LeaveStatus

THIS_YEAR = date.today().year


def _create_leave_request(client, member, leave_type, days=3, start=None):
    start = start or date(THIS_YEAR, 2, 2)
    return client.post(
        "/api/leave-requests",
        json={
            "team_member_id": member.id,
            "leave_type_id": leave_type.id,
            "start_date": start.isoformat(),
            "end_date": start.replace(day=start.day + 2).isoformat(),
            "total_days": days,
            "reason": "Family trip",
        },
    )


def _balance(client, member, leave_type):
    response = client.get(
        "/api/leave-balances", params={"team_member_id": member.id, "year": THIS_YEAR}
    )
    assert response.status_code == 200
    return next(b for b in response.json() if b["leave_type_id"] == leave_type.id)


def _assert_invariant(balance):
    expected = max(0.0, balance["total_quota"] + balance["carry_forward"] - balance["used"] - balance["pending"])
    assert balance["available"] == pytest.approx(round(expected, 2))


def test_create_leave_request_moves_days_to_pending(client, leave_types, make_member):
    member = make_member()
    response = _create_leave_request(client, member, leave_types["CL"])
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == LeaveStatus.PENDING.value
    assert data["leave_type_code"] == "CL"
    assert data["member_name"] == member.name

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["used"], balance["available"]) == (3, 0, 9)
    _assert_invariant(balance)


def test_approve_moves_pending_to_used(client, leave_types, make_member):
    member = make_member()
    req_id = _create_leave_request(client, member, leave_types["CL"]).json()["id"]

    response = client.post(f"/api/leave-requests/{req_id}/approve", json={"approved_by": "hr@agency.test"})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == LeaveStatus.APPROVED.value
    assert data["approved_by"] == "hr@agency.test"
    assert data["approved_at"] is not None

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["used"], balance["available"]) == (0, 3, 9)
    _assert_invariant(balance)


def test_cancel_pending_request_releases_pending(client, leave_types, make_member):
    member = make_member()
    req_id = _create_leave_request(client, member, leave_types["CL"]).json()["id"]

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["used"], balance["available"]) == (3, 0, 9)

    response = client.post(f"/api/leave-requests/{req_id}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == LeaveStatus.CANCELLED.value

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["used"], balance["available"]) == (0, 0, 12)
    _assert_invariant(balance)


def test_cancel_approved_request_restores_balance(client, leave_types, make_member):
    member = make_member()
    req_id = _create_leave_request(client, member, leave_types["CL"]).json()["id"]
    client.post(f"/api/leave-requests/{req_id}/approve", json={"approved_by": "hr"})

    response = client.post(f"/api/leave-requests/{req_id}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == LeaveStatus.CANCELLED.value

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["used"], balance["available"]) == (0, 0, 12)


def test_rejected_request_can_only_be_cancelled(client, leave_types, make_member):
    member = make_member()
    req_id = _create_leave_request(client, member, leave_types["CL"]).json()["id"]

    response = client.post(f"/api/leave-requests/{req_id}/reject", json={"rejection_reason": "Deadline week"})
    assert response.status_code == 200
    assert response.json()["rejection_reason"] == "Deadline week"
    assert _balance(client, member, leave_types["CL"])["available"] == 12

    response = client.post(f"/api/leave-requests/{req_id}/approve", json={"approved_by": "hr"})
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "INVALID_STATUS_TRANSITION"

    response = client.post(f"/api/leave-requests/{req_id}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == LeaveStatus.CANCELLED.value
    assert _balance(client, member, leave_types["CL"])["available"] == 12

    response = client.post(f"/api/leave-requests/{req_id}/cancel")
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "INVALID_STATUS_TRANSITION"


def test_insufficient_balance_is_rejected_with_shortfall(client, leave_types, make_member):
    member = make_member()
    _create_leave_request(client, member, leave_types["CL"], days=10)

    response = _create_leave_request(client, member, leave_types["CL"], days=5, start=date(THIS_YEAR, 3, 2))
    assert response.status_code == 422
    error = response.json()["errors"][0]
    assert error["code"] == "INSUFFICIENT_LEAVE_BALANCE"
    assert error["details"]["balance"] == 2
    assert error["details"]["shortfall"] == 3
    assert error["details"]["available"] is False

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["available"]) == (10, 2)


def test_delete_request_recalculates(client, leave_types, make_member):
    member = make_member()
    req_id = _create_leave_request(client, member, leave_types["CL"]).json()["id"]

    response = client.delete(f"/api/leave-requests/{req_id}")
    assert response.status_code == 200
    assert client.get(f"/api/leave-requests/{req_id}").status_code == 404

    balance = _balance(client, member, leave_types["CL"])
    assert (balance["pending"], balance["available"]) == (0, 12)


def test_end_before_start_is_a_validation_error(client, leave_types, make_member):
    member = make_member()
    response = client.post(
        "/api/leave-requests",
        json={
            "team_member_id": member.id,
            "leave_type_id": leave_types["CL"].id,
            "start_date": date(THIS_YEAR, 5, 10).isoformat(),
            "end_date": date(THIS_YEAR, 5, 9).isoformat(),
            "total_days": 1,
        },
    )
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_inactive_leave_type_is_refused(client, leave_types, make_member):
    member = make_member()
    client.patch(f"/api/leave-types/{leave_types['EL'].id}", json={"is_active": False})

    response = _create_leave_request(client, member, leave_types["EL"])
    assert response.status_code == 422
    assert response.json()["errors"][0]["code"] == "BUSINESS_ERROR"


def test_unknown_member_is_not_found(client, leave_types):
    response = client.post(
        "/api/leave-requests",
        json={
            "team_member_id": "missing",
            "leave_type_id": leave_types["CL"].id,
            "start_date": date(THIS_YEAR, 5, 10).isoformat(),
            "end_date": date(THIS_YEAR, 5, 10).isoformat(),
            "total_days": 1,
        },
    )
    assert response.status_code == 404


def test_list_filters_by_status(client, leave_types, make_member):
    member = make_member()
    first = _create_leave_request(client, member, leave_types["CL"], days=1).json()["id"]
    _create_leave_request(client, member, leave_types["SL"], days=1)
    client.post(f"/api/leave-requests/{first}/approve", json={"approved_by": "hr"})

    response = client.get("/api/leave-requests", params={"team_member_id": member.id, "status": "APPROVED"})
    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [first]
