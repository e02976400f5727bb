"""
Tests for accounts, bearer tokens and per-event access
"""

from datetime import date, datetime, timedelta

from weddingplanner.models import (
    Accommodation, AuthToken, RoomAllocation, TransportAllocation, TransportGroup, WeddingEvent
)
from weddingplanner.services.auth_service import AuthService

from conftest import make_event, make_guest

EVENT_PAYLOAD = {
    "title": "Asha & Rohan",
    "couple_names": "Asha & Rohan",
    "bride_name": "Asha",
    "groom_name": "Rohan",
    "start_date": "2030-12-10",
    "end_date": "2030-12-12",
    "location": "Udaipur",
    "accommodation_mode": "selected",
}

def login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})

def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}

def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "username": "couple", "password": "long-enough", "name": "Asha", "email": "asha@wedmail.org",
        "role": "couple"
    })
    assert response.status_code == 201
    assert "password_hash" not in response.json()["data"]

    response = login(client, "couple", "long-enough")
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["role"] == "couple"

def test_register_duplicate_username(client, planner):
    response = client.post("/api/auth/register", json={
        "username": "planner", "password": "long-enough", "name": "Other", "email": "o@wedmail.org"
    })
    assert response.status_code == 409

def test_register_cannot_claim_admin(client):
    response = client.post("/api/auth/register", json={
        "username": "sneaky", "password": "long-enough", "name": "S", "email": "s@wedmail.org",
        "role": "admin"
    })
    assert response.status_code == 422

def test_wrong_password(client, planner):
    assert login(client, "planner", "nope").status_code == 401

def test_requests_without_token_are_rejected(client):
    assert client.get("/api/events").status_code == 401
    assert client.get("/api/events", headers={"Authorization": "Bearer unknown"}).status_code == 401

def test_expired_token_is_removed(client, db_session, planner):
    token = AuthService.issue_token(db_session, planner)
    token.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token.token}"})
    assert response.status_code == 401
    assert db_session.query(AuthToken).count() == 0

def test_logout_revokes_token(client, auth_headers):
    assert client.post("/api/auth/logout", headers=auth_headers).status_code == 200
    assert client.get("/api/auth/me", headers=auth_headers).status_code == 401

def test_create_event_seeds_templates(client, auth_headers):
    response = client.post("/api/events", headers=auth_headers, json=EVENT_PAYLOAD)
    assert response.status_code == 201
    event_id = response.json()["data"]["id"]

    templates = client.get(f"/api/events/{event_id}/email-templates", headers=auth_headers)
    assert len(templates.json()["data"]) == 5

    detail = client.get(f"/api/events/{event_id}", headers=auth_headers).json()["data"]
    assert detail["accommodation_mode"] == "selected"
    assert detail["statistics"]["guests"]["total"] == 0

def test_create_event_rejects_reversed_dates(client, auth_headers):
    payload = dict(EVENT_PAYLOAD, end_date="2030-12-01")
    assert client.post("/api/events", headers=auth_headers, json=payload).status_code == 422

def test_other_planners_event_is_forbidden(client, db_session, auth_headers):
    other, _ = AuthService.register(db_session, "other", "s3cret-pass", "Olga", "olga@wedmail.org")
    foreign = make_event(db_session, other, title="Not yours")
    guest = make_guest(db_session, foreign)

    assert client.get(f"/api/events/{foreign.id}", headers=auth_headers).status_code == 403
    assert client.get(f"/api/events/{foreign.id}/guests/{guest.id}", headers=auth_headers).status_code == 403
    assert client.get("/api/events", headers=auth_headers).json()["data"] == []

def test_missing_event_is_not_found(client, auth_headers):
    response = client.get("/api/events/999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Event not found",
        "error_code": "not_found",
        "details": None,
    }

def test_guest_from_other_event_is_not_found(client, db_session, planner, auth_headers, sample_event):
    second = make_event(db_session, planner, title="Reception")
    guest = make_guest(db_session, second)

    response = client.get(f"/api/events/{sample_event.id}/guests/{guest.id}", headers=auth_headers)
    assert response.status_code == 404

def test_admin_sees_every_event(client, db_session):
    other, _ = AuthService.register(db_session, "other", "s3cret-pass", "Olga", "olga@wedmail.org")
    make_event(db_session, other)
    admin, _ = AuthService.register(db_session, "root", "s3cret-pass", "Root", "root@wedmail.org", role="admin")
    token = AuthService.issue_token(db_session, admin)

    response = client.get("/api/events", headers={"Authorization": f"Bearer {token.token}"})
    assert len(response.json()["data"]) == 1

def test_guest_crud_and_search(client, auth_headers, db_session, sample_event):
    response = client.post(f"/api/events/{sample_event.id}/guests", headers=auth_headers, json={
        "first_name": "Meera", "last_name": "Iyer", "side": "bride", "relationship": "Cousin",
        "children_details": [{"name": "Kabir", "age": 6}]
    })
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["relationship"] == "Cousin"
    assert created["children_details"][0]["name"] == "Kabir"

    response = client.patch(
        f"/api/events/{sample_event.id}/guests/{created['id']}",
        headers=auth_headers,
        json={"rsvp_status": "confirmed"}
    )
    assert response.json()["data"]["rsvp_status"] == "confirmed"

    response = client.get(f"/api/events/{sample_event.id}/guests", headers=auth_headers,
                          params={"search": "iye", "side": "bride"})
    assert response.json()["data"]["pagination"]["total"] == 1

    response = client.delete(f"/api/events/{sample_event.id}/guests/{created['id']}", headers=auth_headers)
    assert response.status_code == 200

def test_partial_update_rejects_null_for_required_fields(client, auth_headers, db_session, sample_event):
    guest = make_guest(db_session, sample_event)
    room = Accommodation(event_id=sample_event.id, name="Deluxe", room_type="double",
                         max_occupancy=2, total_rooms=3)
    db_session.add(room)
    db_session.commit()
    base = f"/api/events/{sample_event.id}"

    for path, body in [
        (base, {"title": None}),
        (base, {"accommodation_mode": None}),
        (f"{base}/guests/{guest.id}", {"side": None}),
        (f"{base}/accommodations/{room.id}", {"total_rooms": None}),
    ]:
        response = client.patch(path, headers=auth_headers, json=body)
        assert response.status_code == 422, (path, body)

    db_session.refresh(sample_event)
    db_session.refresh(room)
    assert sample_event.title == "Asha & Rohan"
    assert room.total_rooms == 3

def test_partial_update_can_clear_optional_fields(client, auth_headers, db_session, sample_event):
    sample_event.description = "Three days by the lake"
    db_session.commit()

    response = client.patch(f"/api/events/{sample_event.id}", headers=auth_headers,
                            json={"description": None})
    assert response.status_code == 200
    assert response.json()["data"]["description"] is None

def test_planner_decline_releases_room_and_transport(client, auth_headers, db_session, sample_event):
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=2)
    room = Accommodation(event_id=sample_event.id, name="Deluxe", room_type="double",
                         max_occupancy=2, total_rooms=3, allocated_rooms=1)
    db_session.add(room)
    db_session.flush()
    db_session.add(RoomAllocation(accommodation_id=room.id, guest_id=guest.id))
    group = TransportGroup(event_id=sample_event.id, name="Airport", pickup_location="UDR",
                           pickup_date=date(2030, 12, 10), pickup_time_slot="10:00-12:00",
                           dropoff_location="Venue")
    group.allocations = [TransportAllocation(guest_id=guest.id)]
    db_session.add(group)
    db_session.commit()

    response = client.patch(f"/api/events/{sample_event.id}/guests/{guest.id}",
                            headers=auth_headers, json={"rsvp_status": "declined"})

    assert response.status_code == 200
    assert db_session.query(RoomAllocation).count() == 0
    assert db_session.query(TransportAllocation).count() == 0
    db_session.refresh(room)
    assert room.allocated_rooms == 0

def test_delete_event_cascades(client, auth_headers, db_session, sample_event):
    make_guest(db_session, sample_event)

    assert client.delete(f"/api/events/{sample_event.id}", headers=auth_headers).status_code == 200
    assert db_session.query(WeddingEvent).count() == 0
