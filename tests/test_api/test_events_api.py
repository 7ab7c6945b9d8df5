"""Tests for /events routes (public reads, admin writes)."""


def _event_body(**overrides):
    body = {
        "name": "Tech Fest",
        "date": "2025-04-10",
        "time": "10:00",
        "venue": "Main Auditorium",
        "details": "Annual technology festival.",
    }
    body.update(overrides)
    return body


def _create(client, add_user, login_as, **overrides):
    add_user("admin@x.com", role="admin")
    login_as("admin@x.com")
    return client.post("/events", json=_event_body(**overrides))


def test_admin_creates_event(client, add_user, login_as):
    resp = _create(client, add_user, login_as)

    assert resp.status_code == 201
    event = resp.json()["event"]
    assert event["name"] == "Tech Fest"
    assert event["image"] is None
    assert "createdAt" in event


def test_events_are_public(client, add_user, login_as):
    event_id = _create(client, add_user, login_as).json()["event"]["id"]
    client.cookies.clear()

    assert [e["id"] for e in client.get("/events").json()] == [event_id]
    assert client.get(f"/events/{event_id}").json()["venue"] == "Main Auditorium"


def test_event_not_found(client):
    resp = client.get("/events/42")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Event not found"


def test_create_event_requires_fields(client, add_user, login_as):
    resp = _create(client, add_user, login_as, venue=None)
    assert resp.status_code == 400
    assert "venue" in resp.json()["message"]


def test_create_event_requires_login(client):
    assert client.post("/events", json=_event_body()).status_code == 401


def test_user_cannot_create_event(client, add_user, login_as):
    add_user("u@x.com")
    login_as("u@x.com")
    assert client.post("/events", json=_event_body()).status_code == 403


def test_superadmin_passes_admin_gate(client, add_user, login_as):
    add_user("root@x.com", role="superadmin")
    login_as("root@x.com")
    assert client.post("/events", json=_event_body()).status_code == 201


def test_admin_updates_event(client, add_user, login_as):
    event_id = _create(client, add_user, login_as).json()["event"]["id"]

    resp = client.put(f"/events/{event_id}", json=_event_body(venue="Field", image="https://img/e.png"))

    assert resp.status_code == 200
    assert resp.json()["event"]["venue"] == "Field"
    assert resp.json()["event"]["image"] == "https://img/e.png"


def test_update_missing_event(client, add_user, login_as):
    _create(client, add_user, login_as)
    assert client.put("/events/999", json=_event_body()).status_code == 404


def test_admin_deletes_event(client, add_user, login_as):
    event_id = _create(client, add_user, login_as).json()["event"]["id"]

    assert client.delete(f"/events/{event_id}").json() == {"message": "Event deleted successfully"}
    assert client.get(f"/events/{event_id}").status_code == 404
