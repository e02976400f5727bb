"""
Tests for room allocation and auto-assignment
"""

from datetime import date

from weddingplanner.models import Accommodation, Hotel, RoomAllocation, TravelInfo
from weddingplanner.services.accommodation_service import (
    AccommodationService, is_early_check_in, parse_time, pick_room_type
)

from conftest import make_guest

def add_room(db, event, name, max_occupancy, total_rooms, hotel=None):
    room = Accommodation(
        event_id=event.id,
        hotel_id=hotel.id if hotel else None,
        name=name,
        room_type=name.lower(),
        max_occupancy=max_occupancy,
        total_rooms=total_rooms,
        allocated_rooms=0
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    return room

def needs_room(db, event, first_name, **overrides):
    fields = dict(
        rsvp_status="confirmed",
        rsvp_stage=2,
        needs_accommodation=True,
        accommodation_preference="provided",
    )
    fields.update(overrides)
    return make_guest(db, event, first_name, "Guest", **fields)

def test_parse_time():
    assert parse_time("09:05") == 545
    assert parse_time("24:00") is None
    assert parse_time("soon") is None
    assert parse_time(None) is None

def test_early_check_in_window_is_exclusive():
    assert not is_early_check_in("10:00")
    assert is_early_check_in("10:01")
    assert is_early_check_in("13:59")
    assert not is_early_check_in("14:00")
    assert not is_early_check_in(None)

def test_pick_room_type_prefers_smallest_fit(db_session, sample_event):
    single = add_room(db_session, sample_event, "Single", 1, 2)
    double = add_room(db_session, sample_event, "Double", 2, 2)
    suite = add_room(db_session, sample_event, "Suite", 4, 1)

    assert pick_room_type([single, double, suite], 1) is single
    assert pick_room_type([single, double, suite], 2) is double
    assert pick_room_type([single, double, suite], 3) is suite

def test_pick_room_type_falls_back_to_largest_free(db_session, sample_event):
    single = add_room(db_session, sample_event, "Single", 1, 2)
    double = add_room(db_session, sample_event, "Double", 2, 2)
    full_suite = add_room(db_session, sample_event, "Suite", 4, 1)
    full_suite.allocated_rooms = 1

    assert pick_room_type([single, double, full_suite], 3) is double
    assert pick_room_type([], 1) is None

def test_auto_assign_guest_party_size(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    db_session.commit()
    add_room(db_session, sample_event, "Double", 2, 5)
    family = add_room(db_session, sample_event, "Family", 4, 5)
    guest = needs_room(
        db_session, sample_event, "Nikhil",
        plus_one_confirmed=True, plus_one_name="Sara Guest",
        children_details=[{"name": "Ira", "age": 4}]
    )

    allocation = AccommodationService.auto_assign_guest(db_session, sample_event, guest)

    assert allocation.accommodation_id == family.id
    assert allocation.source == "auto"
    assert allocation.needs_review is True
    assert allocation.confirmed is False
    assert allocation.includes_plus_one is True
    assert allocation.children_count == 1
    assert allocation.check_in_date == sample_event.start_date
    db_session.refresh(family)
    assert family.allocated_rooms == 1

def test_auto_assign_uses_travel_dates(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    db_session.commit()
    add_room(db_session, sample_event, "Double", 2, 5)
    guest = needs_room(db_session, sample_event, "Kiran")
    db_session.add(TravelInfo(guest_id=guest.id, arrival_date=date(2030, 12, 9),
                              arrival_time="12:15", departure_date=date(2030, 12, 13)))
    db_session.commit()

    allocation = AccommodationService.auto_assign_guest(db_session, sample_event, guest)

    assert allocation.check_in_date == date(2030, 12, 9)
    assert allocation.check_out_date == date(2030, 12, 13)
    assert allocation.early_check_in is True

def test_auto_assign_skips_ineligible(db_session, sample_event):
    add_room(db_session, sample_event, "Double", 2, 5)
    # accommodation_mode is "none"
    guest = needs_room(db_session, sample_event, "Kiran")
    assert AccommodationService.auto_assign_guest(db_session, sample_event, guest) is None

    sample_event.accommodation_mode = "selected"
    db_session.commit()
    assert AccommodationService.auto_assign_guest(db_session, sample_event, guest) is None

    guest.accommodation_selected = True
    guest.accommodation_preference = "self_managed"
    db_session.commit()
    assert AccommodationService.auto_assign_guest(db_session, sample_event, guest) is None

def test_auto_assign_event_reports_unassigned(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    db_session.commit()
    add_room(db_session, sample_event, "Double", 2, 1)
    first = needs_room(db_session, sample_event, "Anil")
    second = needs_room(db_session, sample_event, "Bina")
    needs_room(db_session, sample_event, "Chetan", rsvp_status="declined")

    result = AccommodationService.auto_assign_event(db_session, sample_event)

    assert [a.guest_id for a in result["assigned"]] == [first.id]
    assert [g.id for g in result["unassigned"]] == [second.id]

def test_manual_allocation_checks_capacity(db_session, sample_event):
    room = add_room(db_session, sample_event, "Double", 2, 1)
    first = make_guest(db_session, sample_event, "Anil", "Rao")
    second = make_guest(db_session, sample_event, "Bina", "Rao")

    allocation, error = AccommodationService.create_allocation(db_session, sample_event, room.id, first.id)
    assert error is None
    assert allocation.source == "manual"
    assert allocation.confirmed is True

    _, error = AccommodationService.create_allocation(db_session, sample_event, room.id, second.id)
    assert "No rooms left" in error

    _, error = AccommodationService.create_allocation(db_session, sample_event, room.id, first.id)
    assert "already has a room" in error

def test_reassign_and_delete_keep_counts(db_session, sample_event):
    hotel = Hotel(event_id=sample_event.id, name="Lake Palace", address="Pichola")
    db_session.add(hotel)
    db_session.commit()
    double = add_room(db_session, sample_event, "Double", 2, 2, hotel)
    suite = add_room(db_session, sample_event, "Suite", 4, 1, hotel)
    guest = make_guest(db_session, sample_event)
    allocation, _ = AccommodationService.create_allocation(db_session, sample_event, double.id, guest.id)

    allocation, error = AccommodationService.reassign(db_session, sample_event, allocation, suite.id)
    assert error is None
    db_session.refresh(double)
    db_session.refresh(suite)
    assert (double.allocated_rooms, suite.allocated_rooms) == (0, 1)

    AccommodationService.delete_allocation(db_session, allocation)
    db_session.refresh(suite)
    assert suite.allocated_rooms == 0
    assert db_session.query(RoomAllocation).count() == 0

def test_total_rooms_cannot_drop_below_allocated(db_session, sample_event):
    room = add_room(db_session, sample_event, "Double", 2, 3)
    room.allocated_rooms = 2

    assert AccommodationService.check_total_rooms(room, 2) is None
    assert "cannot be lower" in AccommodationService.check_total_rooms(room, 1)

def test_report_lists_pending_review(db_session, sample_event):
    sample_event.accommodation_mode = "all"
    db_session.commit()
    hotel = Hotel(event_id=sample_event.id, name="Lake Palace", address="Pichola")
    db_session.add(hotel)
    db_session.commit()
    add_room(db_session, sample_event, "Double", 2, 1, hotel)
    assigned = needs_room(db_session, sample_event, "Anil")
    waiting = needs_room(db_session, sample_event, "Bina")
    AccommodationService.auto_assign_event(db_session, sample_event)

    report = AccommodationService.report(db_session, sample_event)

    assert report["totals"] == {"total_rooms": 1, "allocated_rooms": 1, "available_rooms": 0}
    assert report["hotels"][0]["hotel"] == "Lake Palace"
    assert [g["id"] for g in report["unassigned_guests"]] == [waiting.id]
    assert report["pending_review"][0]["guest_id"] == assigned.id

def test_approve_endpoint(client, auth_headers, db_session, sample_event):
    sample_event.accommodation_mode = "all"
    db_session.commit()
    add_room(db_session, sample_event, "Double", 2, 1)
    guest = needs_room(db_session, sample_event, "Anil")
    allocation = AccommodationService.auto_assign_guest(db_session, sample_event, guest)

    response = client.post(
        f"/api/events/{sample_event.id}/allocations/{allocation.id}/approve",
        headers=auth_headers
    )
    assert response.status_code == 200
    db_session.refresh(allocation)
    assert allocation.needs_review is False
    assert allocation.confirmed is True
