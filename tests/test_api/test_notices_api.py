"""Tests for /notices routes, including the role-aware listing."""

import pytest


def _notice_body(**overrides):
    body = {
        "title": "Mid-term schedule",
        "category": "Exam",
        "description": "Mid-term exams start on Sunday.",
        "date": "2025-03-01",
        "targetAudience": "student",
        "department": "CSE",
    }
    body.update(overrides)
    return body


@pytest.fixture
def seeded(client, add_user, login_as):
    add_user("admin@x.com", role="admin", department="ADM", user_type="staff")
    add_user("cse@x.com", department="CSE", user_type="student")
    add_user("eee@x.com", department="EEE", user_type="student")

    login_as("admin@x.com")
    client.post("/notices", json=_notice_body(title="faculty-cse", targetAudience="faculty", department="CSE"))
    client.post("/notices", json=_notice_body(title="all-bba", targetAudience="All", department="BBA"))
    client.post("/notices", json=_notice_body(title="student-law", targetAudience="student", department="LAW"))


def _titles(resp):
    return {n["title"] for n in resp.json()}


def test_admin_creates_notice(client, add_user, login_as):
    add_user("admin@x.com", role="admin")
    login_as("admin@x.com")

    resp = client.post("/notices", json=_notice_body(image="https://img/n.png"))

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Notice created successfully"
    assert body["notice"]["targetAudience"] == "student"
    assert body["notice"]["image"] == "https://img/n.png"
    assert body["notice"]["updatedAt"] is None


def test_create_notice_requires_fields(client, add_user, login_as):
    add_user("admin@x.com", role="admin")
    login_as("admin@x.com")

    resp = client.post("/notices", json=_notice_body(targetAudience=""))

    assert resp.status_code == 400
    assert "targetAudience" in resp.json()["message"]


def test_user_cannot_create_notice(client, add_user, login_as):
    add_user("cse@x.com")
    login_as("cse@x.com")
    assert client.post("/notices", json=_notice_body()).status_code == 403


def test_admin_lists_every_notice(client, seeded, login_as):
    login_as("admin@x.com")
    assert _titles(client.get("/notices")) == {"faculty-cse", "all-bba", "student-law"}


def test_cse_student_sees_department_and_audience_matches(client, seeded, login_as):
    login_as("cse@x.com")
    assert _titles(client.get("/notices")) == {"faculty-cse", "all-bba", "student-law"}


def test_eee_student_does_not_see_cse_faculty_notice(client, seeded, login_as):
    login_as("eee@x.com")
    assert _titles(client.get("/notices")) == {"all-bba", "student-law"}


def test_notice_by_id_needs_only_authentication(client, seeded, login_as):
    login_as("eee@x.com")
    notice_id = client.get("/notices").json()[0]["id"]
    resp = client.get(f"/notices/{notice_id}")
    assert resp.status_code == 200


def test_notice_by_id_not_found(client, seeded, login_as):
    login_as("eee@x.com")
    resp = client.get("/notices/9999")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Notice not found", "code": "not_found"}


def test_non_numeric_notice_id_is_400(client, seeded, login_as):
    login_as("eee@x.com")
    assert client.get("/notices/abc").status_code == 400


def test_admin_updates_notice(client, seeded, login_as):
    login_as("admin@x.com")
    notice_id = client.get("/notices").json()[0]["id"]

    resp = client.put(f"/notices/{notice_id}", json=_notice_body(title="Rescheduled"))

    assert resp.status_code == 200
    assert resp.json()["notice"]["title"] == "Rescheduled"
    assert resp.json()["notice"]["updatedAt"] is not None


def test_update_missing_notice(client, seeded, login_as):
    login_as("admin@x.com")
    assert client.put("/notices/9999", json=_notice_body()).status_code == 404


def test_admin_deletes_notice(client, seeded, login_as):
    login_as("admin@x.com")
    notice_id = client.get("/notices").json()[0]["id"]

    assert client.delete(f"/notices/{notice_id}").status_code == 200
    assert client.delete(f"/notices/{notice_id}").status_code == 404


def test_user_cannot_delete_notice(client, seeded, login_as):
    login_as("cse@x.com")
    notice_id = client.get("/notices").json()[0]["id"]
    assert client.delete(f"/notices/{notice_id}").status_code == 403
