from datetime import date

THIS_YEAR = date.today().year


def test_create_member_opens_leave_balances(client, leave_types):
    response = client.post(
        "/api/team-members",
        json={"name": "Ada", "email": "ada@agency.test", "joined_date": f"{THIS_YEAR}-07-01"},
    )
    assert response.status_code == 201
    member_id = response.json()["id"]

    balances = client.get("/api/leave-balances", params={"team_member_id": member_id}).json()
    by_code = {b["leave_type_code"]: b for b in balances}
    assert by_code["CL"]["total_quota"] == 6.0
    assert by_code["EL"]["total_quota"] == 7.5


def test_member_email_and_slack_id_are_unique(client):
    client.post("/api/team-members", json={"name": "Ada", "email": "ada@agency.test", "slack_user_id": "U1"})

    assert client.post("/api/team-members", json={"name": "Bob", "email": "ada@agency.test"}).status_code == 409
    response = client.post("/api/team-members", json={"name": "Bob", "email": "bob@agency.test", "slack_user_id": "U1"})
    assert response.status_code == 409


def test_update_member(client):
    member_id = client.post("/api/team-members", json={"name": "Ada", "email": "ada@agency.test"}).json()["id"]

    response = client.patch(f"/api/team-members/{member_id}", json={"slack_user_id": "U77", "status": "INACTIVE"})
    assert response.status_code == 200
    assert response.json()["slack_user_id"] == "U77"
    assert response.json()["status"] == "INACTIVE"
    assert client.get("/api/team-members/nope").status_code == 404


def test_reinitialize_endpoint(client, leave_types, make_member):
    member = make_member()
    assert len(client.post(f"/api/leave-balances/{member.id}/initialize").json()) == 3

    response = client.post(f"/api/leave-balances/{member.id}/reinitialize")
    assert response.status_code == 200
    assert {b["leave_type_code"] for b in response.json()} == {"CL", "SL", "EL"}


def test_availability_endpoint(client, leave_types, make_member):
    member = make_member()
    response = client.get(
        "/api/leave-balances/availability",
        params={"team_member_id": member.id, "leave_type_id": leave_types["SL"].id, "days": 12},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    assert data["shortfall"] == 2


def test_job_roles(client):
    assert client.post("/api/job-roles", json={"title": "Developer"}).status_code == 201
    assert client.post("/api/job-roles", json={"title": "Developer"}).status_code == 409
    assert [r["title"] for r in client.get("/api/job-roles").json()] == ["Developer"]
