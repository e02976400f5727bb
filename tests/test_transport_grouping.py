"""
Tests for transport group generation
"""

from datetime import date

import pytest

from weddingplanner.models import TransportGroup, TravelInfo
from weddingplanner.services.transport_service import (
    TransportService, are_connected, connected_components, time_slot_for, vehicle_for
)

from conftest import make_guest

ARRIVAL = date(2030, 12, 9)

def traveller(db, event, first_name, last_name="Guest", location="UDR Airport",
              arrival_time="11:30", arrival_date=ARRIVAL, **overrides):
    fields = dict(rsvp_status="confirmed", rsvp_stage=2, needs_transportation=True)
    fields.update(overrides)
    guest = make_guest(db, event, first_name, last_name, **fields)
    db.add(TravelInfo(
        guest_id=guest.id,
        travel_mode="air",
        arrival_date=arrival_date,
        arrival_time=arrival_time,
        arrival_location=location,
        needs_transportation=True,
        transportation_type="pickup"
    ))
    db.commit()
    db.refresh(guest)
    return guest

@pytest.fixture
def transport_event(db_session, sample_event):
    sample_event.transport_mode = "all"
    sample_event.accommodation_hotel_name = "Lake Palace"
    db_session.commit()
    return sample_event

@pytest.mark.parametrize("arrival,slot", [
    ("11:30", "10:00-12:00"),
    ("12:00", "12:00-14:00"),
    ("2:45 PM", "14:00-16:00"),
    ("23:10", "22:00-00:00"),
    ("late", None),
])
def test_time_slot_for(arrival, slot):
    assert time_slot_for(arrival) == slot

@pytest.mark.parametrize("total,shared,expected", [
    (2, False, ("sedan", 4, 1)),
    (5, False, ("suv", 6, 1)),
    (9, False, ("van", 10, 2)),
    (10, True, ("bus", 50, 1)),
    (46, True, ("bus", 50, 2)),
])
def test_vehicle_for(total, shared, expected):
    assert vehicle_for(total, shared) == expected

def test_family_and_plus_one_connections(db_session, transport_event):
    first = traveller(db_session, transport_event, "Anil", "Rao", is_family=True, side="bride")
    second = traveller(db_session, transport_event, "Bina", "Rao", is_family=True, side="bride")
    other_side = traveller(db_session, transport_event, "Chetan", "Rao", is_family=True, side="groom")
    host = traveller(db_session, transport_event, "Dev", "Shah", plus_one_allowed=True,
                     plus_one_confirmed=True, plus_one_name="Esha Kulkarni")
    named = traveller(db_session, transport_event, "Esha", "Kulkarni")

    assert are_connected(first, second)
    assert not are_connected(first, other_side)
    assert are_connected(named, host)

    components = connected_components([first, other_side, host, second, named])
    assert [[g.first_name for g in c] for c in components] == [["Anil", "Bina"], ["Chetan"], ["Dev", "Esha"]]

def test_connections_are_transitive(db_session, transport_event):
    a = traveller(db_session, transport_event, "Anil", "Rao", is_family=True, plus_one_allowed=True,
                  plus_one_confirmed=True, plus_one_name="Farah Khan")
    b = traveller(db_session, transport_event, "Bina", "Rao", is_family=True)
    c = traveller(db_session, transport_event, "Farah", "Khan")

    components = connected_components([b, c, a])
    assert len(components) == 1

def test_generate_groups_by_arrival(db_session, transport_event):
    traveller(db_session, transport_event, "Anil", "Rao", is_family=True)
    traveller(db_session, transport_event, "Bina", "Rao", is_family=True)
    traveller(db_session, transport_event, "Chetan", "Mehta")
    traveller(db_session, transport_event, "Dev", "Shah", location="Udaipur City Station", arrival_time="16:00")
    # missing arrival time is not grouped
    traveller(db_session, transport_event, "Esha", "Kulkarni", arrival_time=None)

    groups = TransportService.generate_groups(db_session, transport_event)

    assert len(groups) == 3
    rao = next(g for g in groups if len(g.allocations) == 2)
    assert rao.pickup_time_slot == "10:00-12:00"
    assert rao.vehicle_type == "sedan"
    assert rao.dropoff_location == "Lake Palace"
    assert rao.status == "draft"
    assert rao.name == "UDR Airport - Dec 09 (10:00-12:00)"

def test_shared_transport_makes_one_bus_per_bucket(db_session, transport_event):
    transport_event.shared_transport = True
    db_session.commit()
    traveller(db_session, transport_event, "Anil", "Rao")
    traveller(db_session, transport_event, "Chetan", "Mehta")

    groups = TransportService.generate_groups(db_session, transport_event)

    assert len(groups) == 1
    assert groups[0].vehicle_type == "bus"
    assert groups[0].name.endswith("- Shared")

def test_regeneration_keeps_confirmed_groups(db_session, transport_event):
    traveller(db_session, transport_event, "Anil", "Rao")
    traveller(db_session, transport_event, "Chetan", "Mehta")
    first_run = TransportService.generate_groups(db_session, transport_event)
    locked = first_run[0]
    TransportService.confirm_group(db_session, locked)
    locked_guest = locked.allocations[0].guest_id

    second_run = TransportService.generate_groups(db_session, transport_event)

    assert db_session.query(TransportGroup).filter(TransportGroup.event_id == transport_event.id).count() == 2
    assert all(a.guest_id != locked_guest for g in second_run for a in g.allocations)
    assert locked.status == "confirmed"
    assert all(a.status == "confirmed" for a in locked.allocations)

def test_transport_mode_none_generates_nothing(db_session, sample_event):
    traveller(db_session, sample_event, "Anil", "Rao")

    assert TransportService.generate_groups(db_session, sample_event) == []

def test_check_for_updates_flags_changed_arrivals(db_session, transport_event):
    guest = traveller(db_session, transport_event, "Anil", "Rao")
    TransportService.generate_groups(db_session, transport_event)
    assert TransportService.check_for_updates(db_session, transport_event)["needs_update"] is False

    guest.travel_info.arrival_time = "18:30"
    db_session.commit()

    result = TransportService.check_for_updates(db_session, transport_event)
    assert result["needs_update"] is True
    assert result["modified_guests"][0]["guest_id"] == guest.id

def test_add_and_remove_guest(db_session, transport_event):
    guest = traveller(db_session, transport_event, "Anil", "Rao")
    other = make_guest(db_session, transport_event, "Walk", "In")
    group = TransportService.generate_groups(db_session, transport_event)[0]

    allocation, error = TransportService.add_guest(db_session, transport_event, group, other.id)
    assert error is None
    assert allocation.guest_id == other.id

    _, error = TransportService.add_guest(db_session, transport_event, group, guest.id)
    assert error == "Guest is already in this group"

    assert TransportService.remove_guest(db_session, group, other.id)
    assert not TransportService.remove_guest(db_session, group, other.id)

def test_flight_listing(db_session, transport_event):
    guest = traveller(db_session, transport_event, "Anil", "Rao")
    guest.travel_info.flight_number = "6E 203"
    db_session.commit()

    flights = TransportService.flight_listing(db_session, transport_event)
    assert flights[0]["flight_number"] == "6E 203"
    assert flights[0]["guest_name"] == "Anil Rao"
