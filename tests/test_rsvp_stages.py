"""
Tests for the two-stage RSVP workflow and provision modes
"""

from datetime import date

import pytest

from weddingplanner.core.config import settings
from weddingplanner.models import (
    Accommodation, Ceremony, CoupleMessage, RoomAllocation, TransportAllocation, TransportGroup
)
from weddingplanner.schemas.rsvp import RsvpStage1Request, RsvpStage2Request
from weddingplanner.services.provision import guest_sections, section_state
from weddingplanner.services.rsvp_service import RsvpService, RsvpTokenService

from conftest import make_event, make_guest

def stage1(guest, **overrides):
    fields = dict(
        token=RsvpTokenService.generate_token(guest.id, guest.event_id),
        first_name=guest.first_name,
        last_name=guest.last_name,
        email="meera@wedmail.org",
        rsvp_status="confirmed",
        ceremonies=[],
    )
    fields.update(overrides)
    return RsvpStage1Request(**fields)

def stage2(guest, **overrides):
    fields = dict(token=RsvpTokenService.generate_token(guest.id, guest.event_id))
    fields.update(overrides)
    return RsvpStage2Request(**fields)

@pytest.mark.parametrize("mode,selected,expected", [
    ("none", True, "hidden"),
    ("all", False, "required"),
    ("special_deal", False, "optional"),
    ("selected", True, "required"),
    ("selected", False, "hidden"),
])
def test_section_state(mode, selected, expected):
    assert section_state(mode, selected) == expected

def test_flight_section_follows_transport_selection(db_session, sample_event):
    sample_event.flight_mode = "selected"
    sample_event.transport_mode = "none"
    flagged = make_guest(db_session, sample_event, transport_selected=True)
    other = make_guest(db_session, sample_event, "Dev", "Rao")

    assert guest_sections(sample_event, flagged)["flight"]["required"]
    assert guest_sections(sample_event, flagged)["travel"]["shown"]
    assert not guest_sections(sample_event, other)["flight"]["shown"]
    assert not guest_sections(sample_event, other)["travel"]["shown"]

def test_stage1_confirm_records_attendance(db_session, sample_event):
    guest = make_guest(db_session, sample_event)
    ceremony = sample_event.ceremonies[0]

    ok, errors, result = RsvpService.submit_stage1(db_session, stage1(
        guest,
        ceremonies=[{"ceremony_id": ceremony.id, "attending": True}],
        message="So happy for you both!"
    ))

    assert ok, errors
    assert result["rsvp_stage"] == 1
    assert result["next_stage"] == 2
    assert guest.rsvp_status == "confirmed"
    assert guest.email == "meera@wedmail.org"
    assert guest.ceremonies[0].attending is True
    assert db_session.query(CoupleMessage).filter(CoupleMessage.guest_id == guest.id).count() == 1

def test_stage1_after_deadline_rejected(db_session, sample_event):
    sample_event.rsvp_deadline = date(2030, 11, 1)
    db_session.commit()
    guest = make_guest(db_session, sample_event)

    ok, errors, _ = RsvpService.submit_stage1(db_session, stage1(guest), today=date(2030, 11, 2))
    assert not ok
    assert "deadline" in errors[0]

    # the deadline day itself is still open
    ok, _, _ = RsvpService.submit_stage1(db_session, stage1(guest), today=date(2030, 11, 1))
    assert ok

def test_stage1_plus_one_requires_permission(db_session, sample_event):
    guest = make_guest(db_session, sample_event, plus_one_allowed=False)

    ok, errors, _ = RsvpService.submit_stage1(
        db_session, stage1(guest, plus_one_attending=True, plus_one_name="Arjun Iyer")
    )
    assert not ok
    assert "plus one" in errors[0].lower()

def test_stage1_plus_one_needs_a_name():
    with pytest.raises(ValueError):
        RsvpStage1Request(
            token="x", first_name="Meera", last_name="Iyer", email="meera@wedmail.org",
            rsvp_status="confirmed", plus_one_attending=True
        )

def test_stage1_rejects_other_events_ceremony(db_session, sample_event, planner):
    other = make_event(db_session, planner, title="Other wedding")
    foreign = Ceremony(event_id=other.id, name="Mehndi", date=date(2030, 12, 9), start_time="15:00",
                       end_time="18:00", location="Garden")
    db_session.add(foreign)
    db_session.commit()
    guest = make_guest(db_session, sample_event)

    ok, errors, _ = RsvpService.submit_stage1(
        db_session, stage1(guest, ceremonies=[{"ceremony_id": foreign.id, "attending": True}])
    )
    assert not ok
    assert "does not belong" in errors[0]

def test_stage1_invalid_token(db_session, sample_event):
    guest = make_guest(db_session, sample_event)

    ok, errors, _ = RsvpService.submit_stage1(db_session, stage1(guest, token="garbage"))
    assert not ok
    assert errors == ["Invalid or expired RSVP link"]

def test_decline_releases_room_and_transport(db_session, sample_event):
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

    ok, errors, result = RsvpService.submit_stage1(db_session, stage1(guest, rsvp_status="declined"))

    assert ok, errors
    assert result["next_stage"] is None
    assert guest.rsvp_stage == 2
    assert db_session.query(RoomAllocation).count() == 0
    assert db_session.query(TransportAllocation).count() == 0
    db_session.refresh(room)
    assert room.allocated_rooms == 0

def test_reconfirming_complete_guest_keeps_stage_two(db_session, sample_event):
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=2)

    ok, _, result = RsvpService.submit_stage1(db_session, stage1(guest))
    assert ok
    assert result["rsvp_stage"] == 2

def test_stage2_only_for_confirmed_guests(db_session, sample_event):
    guest = make_guest(db_session, sample_event, rsvp_status="declined")

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(guest))
    assert not ok
    assert "confirmed" in errors[0]

def test_stage2_rejects_hidden_sections(db_session, sample_event):
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=1)

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(
        guest, needs_accommodation=True, travel_mode="air", flight_details={"flight_number": "AI 471"}
    ))
    assert not ok
    assert any("Accommodation is not offered" in e for e in errors)
    assert any("Flight details" in e for e in errors)
    assert any("Travel details" in e for e in errors)

def test_stage2_requires_answers_for_required_sections(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    sample_event.transport_mode = "all"
    db_session.commit()
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=1)

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(guest))
    assert not ok
    assert len(errors) == 2

def test_stage2_special_deal_cannot_request_provided(db_session, sample_event):
    sample_event.accommodation_mode = "special_deal"
    db_session.commit()
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=1)

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(
        guest, needs_accommodation=True, accommodation_preference="provided"
    ))
    assert not ok
    assert "special rate" in errors[0]

def test_stage2_saves_travel_meals_and_assigns_room(db_session, sample_event, monkeypatch):
    monkeypatch.setattr(settings, "AUTO_ASSIGN_ROOMS", True)
    sample_event.accommodation_mode = "all"
    sample_event.transport_mode = "all"
    sample_event.flight_mode = "all"
    db_session.add(Accommodation(event_id=sample_event.id, name="Lake View", room_type="double",
                                 max_occupancy=2, total_rooms=5))
    db_session.commit()
    guest = make_guest(db_session, sample_event)
    ceremony = sample_event.ceremonies[0]
    meal = ceremony.meal_options[0]
    RsvpService.submit_stage1(db_session, stage1(
        guest, ceremonies=[{"ceremony_id": ceremony.id, "attending": True}]
    ))

    ok, errors, result = RsvpService.submit_stage2(db_session, stage2(
        guest,
        needs_accommodation=True,
        accommodation_preference="provided",
        needs_transportation=True,
        transportation_preference="provided",
        transportation_type="pickup",
        travel_mode="air",
        flight_details={"flight_number": "AI 471", "airline": "Air India", "arrival_airport": "UDR"},
        arrival_date=date(2030, 12, 9),
        arrival_time="11:30",
        departure_date=date(2030, 12, 13),
        meal_selections=[{"ceremony_id": ceremony.id, "meal_option_id": meal.id}],
    ))

    assert ok, errors
    assert result["rsvp_stage"] == 2
    assert guest.travel_info.arrival_location == "UDR"
    assert guest.travel_info.flight_number == "AI 471"
    assert guest.meal_selections[0].meal_option_id == meal.id
    assert result["room_allocation"]["needs_review"] is True
    assert result["room_allocation"]["early_check_in"] is True

def test_stage2_withdrawal_releases_room_and_transport(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    sample_event.transport_mode = "all"
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=2,
                       needs_accommodation=True, accommodation_preference="provided",
                       needs_transportation=True)
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

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(
        guest, needs_accommodation=False, needs_transportation=False
    ))

    assert ok, errors
    assert guest.needs_accommodation is False
    assert db_session.query(RoomAllocation).count() == 0
    assert db_session.query(TransportAllocation).count() == 0
    db_session.refresh(room)
    assert room.allocated_rooms == 0

def test_stage2_self_managed_stay_gives_up_room(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=2,
                       needs_accommodation=True, accommodation_preference="provided")
    room = Accommodation(event_id=sample_event.id, name="Deluxe", room_type="double",
                         max_occupancy=2, total_rooms=3, allocated_rooms=1)
    db_session.add(room)
    db_session.flush()
    db_session.add(RoomAllocation(accommodation_id=room.id, guest_id=guest.id))
    db_session.commit()

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(
        guest, needs_accommodation=True, accommodation_preference="self_managed"
    ))

    assert ok, errors
    db_session.refresh(room)
    assert room.allocated_rooms == 0
    assert guest.room_allocations == []

def test_stage2_rejects_meal_for_other_ceremony(db_session, sample_event):
    guest = make_guest(db_session, sample_event, rsvp_status="confirmed", rsvp_stage=1)
    meal = sample_event.ceremonies[0].meal_options[0]

    ok, errors, _ = RsvpService.submit_stage2(db_session, stage2(
        guest, meal_selections=[{"ceremony_id": meal.ceremony_id, "meal_option_id": meal.id}]
    ))
    assert not ok
    assert "not attending" in errors[0]

def test_verify_endpoint(client, db_session, sample_event):
    guest = make_guest(db_session, sample_event, plus_one_allowed=True)
    token = RsvpTokenService.generate_token(guest.id, sample_event.id)

    response = client.get("/api/rsvp/verify", params={"token": token})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["guest"]["id"] == guest.id
    assert data["guest"]["plus_one_allowed"] is True
    assert data["ceremonies"][0]["name"] == "Sangeet"
    assert len(data["ceremonies"][0]["meal_options"]) == 2
    assert data["sections"]["accommodation"]["shown"] is False

    response = client.get("/api/rsvp/verify", params={"token": "garbage"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "invalid_token"

def test_stage1_endpoint(client, db_session, sample_event):
    guest = make_guest(db_session, sample_event)

    response = client.post("/api/rsvp/stage1", json={
        "token": RsvpTokenService.generate_token(guest.id, sample_event.id),
        "first_name": "Meera",
        "last_name": "Iyer",
        "email": "meera@wedmail.org",
        "rsvp_status": "declined"
    })
    assert response.status_code == 200
    assert response.json()["data"]["rsvp_status"] == "declined"
