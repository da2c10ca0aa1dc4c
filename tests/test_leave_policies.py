from agency_hr.services.leave_policies import LeavePolicyService, default_quota_for


def test_default_quota_falls_back_to_other():
    assert default_quota_for("CASUAL") == {"annual": 12, "carry_forward": 3}
    assert default_quota_for("SABBATICAL") == {"annual": 5, "carry_forward": 0}


def test_seed_leave_types_only_once(client):
    first = client.post("/api/leave-types/seed")
    assert first.status_code == 200
    assert sorted(t["code"] for t in first.json()) == ["CL", "EL", "SL"]
    assert client.post("/api/leave-types/seed").json() == []


def test_leave_type_code_is_unique(client):
    payload = {"name": "Work From Home", "code": "wfh", "category": "OTHER"}
    response = client.post("/api/leave-types", json=payload)
    assert response.status_code == 201
    assert response.json()["code"] == "WFH"

    response = client.post("/api/leave-types", json={**payload, "name": "Remote"})
    assert response.status_code == 409


def test_create_policy_and_reject_duplicate_pair(client, leave_types, designer_role):
    payload = {
        "job_role_id": designer_role.id,
        "leave_type_id": leave_types["CL"].id,
        "annual_quota": 14,
        "carry_forward_limit": 2,
    }
    response = client.post("/api/leave-policies", json=payload)
    assert response.status_code == 201
    data = response.json()
    assert data["job_role_title"] == "Designer"
    assert data["leave_type_code"] == "CL"

    assert client.post("/api/leave-policies", json=payload).status_code == 409


def test_create_policy_for_unknown_role(client, leave_types):
    response = client.post(
        "/api/leave-policies",
        json={"job_role_id": "missing", "leave_type_id": leave_types["CL"].id, "annual_quota": 5},
    )
    assert response.status_code == 404


def test_update_and_delete_policy(client, leave_types, designer_role):
    policy_id = client.post(
        "/api/leave-policies",
        json={"job_role_id": designer_role.id, "leave_type_id": leave_types["SL"].id, "annual_quota": 8},
    ).json()["id"]

    response = client.patch(f"/api/leave-policies/{policy_id}", json={"annual_quota": 9})
    assert response.json()["annual_quota"] == 9

    assert client.delete(f"/api/leave-policies/{policy_id}").status_code == 200
    assert client.delete(f"/api/leave-policies/{policy_id}").status_code == 404


def test_seed_policies_skips_existing_pairs(client, db_session, leave_types, designer_role):
    client.post(
        "/api/leave-policies",
        json={"job_role_id": designer_role.id, "leave_type_id": leave_types["CL"].id, "annual_quota": 20},
    )

    response = client.post("/api/leave-policies/seed")
    assert response.json() == {"created": 2, "skipped": 1}

    service = LeavePolicyService(db_session)
    assert service.policy_for(designer_role.id, leave_types["CL"].id).annual_quota == 20
    assert service.policy_for(designer_role.id, leave_types["EL"].id).annual_quota == 15
    assert client.post("/api/leave-policies/seed").json() == {"created": 0, "skipped": 3}
