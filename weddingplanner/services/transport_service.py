"""
Transport grouping by arrival and vehicle sizing
"""

import logging
import math
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from weddingplanner.models import Guest, TransportAllocation, TransportGroup, TravelInfo, WeddingEvent
from weddingplanner.services.provision import transport_allowed

logger = logging.getLogger(__name__)

DEFAULT_TIME_SLOT = "12:00-14:00"

def parse_arrival_hour(value: Optional[str]) -> Optional[int]:
    """Hour of day from '14:30', '2:30 PM' or '14'"""
    if not value:
        return None
    text = value.strip().upper()
    for fmt in ("%H:%M", "%I:%M %p", "%I:%M%p", "%I %p", "%H"):
        try:
            return datetime.strptime(text, fmt).hour
        except ValueError:
            continue
    return None

def time_slot_for(arrival_time: Optional[str]) -> Optional[str]:
    """Two-hour slot starting at the even hour at or below the arrival"""
    hour = parse_arrival_hour(arrival_time)
    if hour is None:
        return None
    start = (hour // 2) * 2
    # 22:00 slots end at midnight
    return f"{start:02d}:00-{(start + 2) % 24:02d}:00"

def vehicle_for(party_total: int, shared: bool) -> Tuple[str, int, int]:
    """(vehicle type, seats per vehicle, vehicle count)"""
    if shared:
        return "bus", 50, max(1, math.ceil(party_total / 45))
    if party_total > 6:
        return "van", 10, math.ceil(party_total / 8)
    if party_total > 4:
        return "suv", 6, 1
    return "sedan", 4, 1

def names_plus_one(guest: Guest, other: Guest) -> bool:
    if not (guest.plus_one_allowed and guest.plus_one_confirmed and guest.plus_one_name):
        return False
    name = guest.plus_one_name.strip().lower()
    return other.first_name.lower() in name and other.last_name.lower() in name

def are_connected(first: Guest, second: Guest) -> bool:
    """Same family on the same side, or one named as the other's plus one"""
    if (first.is_family and second.is_family
            and first.last_name.lower() == second.last_name.lower()
            and first.side == second.side):
        return True
    return names_plus_one(first, second) or names_plus_one(second, first)

def connected_components(guests: List[Guest]) -> List[List[Guest]]:
    remaining = list(guests)
    components = []
    while remaining:
        component = [remaining.pop(0)]
        index = 0
        while index < len(component):
            current = component[index]
            linked = [guest for guest in remaining if are_connected(current, guest)]
            for guest in linked:
                remaining.remove(guest)
            component.extend(linked)
            index += 1
        components.append(component)
    return components

def party_total(guests: List[Guest]) -> int:
    return sum(guest.party_size for guest in guests)

class TransportService:
    """Generation and maintenance of transport groups"""

    @staticmethod
    def eligible_guests(db: Session, event: WeddingEvent) -> List[Guest]:
        guests = db.query(Guest).join(TravelInfo).filter(
            Guest.event_id == event.id,
            Guest.rsvp_status == "confirmed",
            TravelInfo.needs_transportation == True
        ).order_by(Guest.id).all()
        return [
            guest for guest in guests
            if transport_allowed(event, guest)
            and guest.travel_info.arrival_date
            and guest.travel_info.arrival_time
            and guest.travel_info.arrival_location
        ]

    @staticmethod
    def bucket_guests(guests: List[Guest]) -> "OrderedDict[tuple, List[Guest]]":
        buckets: "OrderedDict[tuple, List[Guest]]" = OrderedDict()
        for guest in guests:
            travel = guest.travel_info
            key = (travel.arrival_location.strip().lower(), travel.arrival_date, travel.arrival_time.strip())
            buckets.setdefault(key, []).append(guest)
        return buckets

    @staticmethod
    def _allocation_for(guest: Guest) -> TransportAllocation:
        return TransportAllocation(
            guest_id=guest.id,
            status="pending",
            includes_plus_one=bool(guest.plus_one_allowed and guest.plus_one_confirmed),
            includes_children=guest.children_count > 0,
            children_count=guest.children_count,
        )

    @staticmethod
    def generate_groups(db: Session, event: WeddingEvent) -> List[TransportGroup]:
        """
        Rebuild draft groups from travel data.

        Confirmed groups and their guests are left alone.
        """
        drafts = db.query(TransportGroup).filter(
            TransportGroup.event_id == event.id,
            TransportGroup.status == "draft"
        ).all()
        for group in drafts:
            db.delete(group)
        db.flush()

        locked_guest_ids = {
            allocation.guest_id
            for group in db.query(TransportGroup).filter(
                TransportGroup.event_id == event.id,
                TransportGroup.status == "confirmed"
            ).all()
            for allocation in group.allocations
        }

        guests = [
            guest for guest in TransportService.eligible_guests(db, event)
            if guest.id not in locked_guest_ids
        ]
        shared = bool(event.shared_transport)
        dropoff = event.accommodation_hotel_name or event.location or "Venue"

        created = []
        for bucket in TransportService.bucket_guests(guests).values():
            parts = [bucket] if shared else connected_components(bucket)
            for members in parts:
                reference = members[0].travel_info
                slot = time_slot_for(reference.arrival_time) or DEFAULT_TIME_SLOT
                vehicle_type, capacity, count = vehicle_for(party_total(members), shared)
                name = f"{reference.arrival_location} - {reference.arrival_date.strftime('%b %d')} ({slot})"
                if shared:
                    name += " - Shared"

                group = TransportGroup(
                    event_id=event.id,
                    name=name,
                    transport_mode="bus" if shared else "car",
                    vehicle_type=vehicle_type,
                    vehicle_capacity=capacity,
                    vehicle_count=count,
                    pickup_location=reference.arrival_location,
                    pickup_location_details="",
                    pickup_date=reference.arrival_date,
                    pickup_time_slot=slot,
                    dropoff_location=dropoff,
                    status="draft",
                )
                group.allocations = [TransportService._allocation_for(guest) for guest in members]
                db.add(group)
                created.append(group)

        db.commit()
        for group in created:
            db.refresh(group)
        logger.info(
            f"Generated {len(created)} transport groups for event {event.id} "
            f"({len(drafts)} drafts replaced, {len(locked_guest_ids)} guests in confirmed groups)"
        )
        return created

    @staticmethod
    def add_guest(db: Session, event: WeddingEvent, group: TransportGroup, guest_id: int) -> Tuple[Optional[TransportAllocation], Optional[str]]:
        guest = db.query(Guest).filter(Guest.id == guest_id, Guest.event_id == event.id).first()
        if not guest:
            return None, "Guest not found"
        if any(allocation.guest_id == guest.id for allocation in group.allocations):
            return None, "Guest is already in this group"

        allocation = TransportService._allocation_for(guest)
        group.allocations.append(allocation)
        db.commit()
        db.refresh(allocation)
        return allocation, None

    @staticmethod
    def remove_guest(db: Session, group: TransportGroup, guest_id: int) -> bool:
        for allocation in group.allocations:
            if allocation.guest_id == guest_id:
                group.allocations.remove(allocation)
                db.commit()
                return True
        return False

    @staticmethod
    def confirm_group(db: Session, group: TransportGroup) -> TransportGroup:
        group.status = "confirmed"
        for allocation in group.allocations:
            allocation.status = "confirmed"
        db.commit()
        db.refresh(group)
        return group

    @staticmethod
    def check_for_updates(db: Session, event: WeddingEvent) -> Dict:
        """Allocated guests whose travel data no longer matches their group"""
        groups = db.query(TransportGroup).filter(TransportGroup.event_id == event.id).all()
        modified = []
        for group in groups:
            for allocation in group.allocations:
                travel = allocation.guest.travel_info
                if travel is None:
                    continue
                slot = time_slot_for(travel.arrival_time) or DEFAULT_TIME_SLOT
                same_location = (travel.arrival_location or "").strip().lower() == group.pickup_location.strip().lower()
                if not same_location or travel.arrival_date != group.pickup_date or slot != group.pickup_time_slot:
                    modified.append({
                        "guest_id": allocation.guest_id,
                        "guest_name": allocation.guest.full_name,
                        "group_id": group.id,
                        "group_name": group.name,
                        "arrival_location": travel.arrival_location,
                        "arrival_date": travel.arrival_date,
                        "arrival_time": travel.arrival_time,
                    })
        return {"needs_update": bool(modified), "modified_guests": modified}

    @staticmethod
    def flight_listing(db: Session, event: WeddingEvent) -> List[Dict]:
        guests = db.query(Guest).join(TravelInfo).filter(
            Guest.event_id == event.id,
            TravelInfo.travel_mode == "air"
        ).order_by(TravelInfo.arrival_date, TravelInfo.arrival_time, Guest.last_name).all()

        return [
            {
                "guest_id": guest.id,
                "guest_name": guest.full_name,
                "rsvp_status": guest.rsvp_status,
                "party_size": guest.party_size,
                "airline": guest.travel_info.airline,
                "flight_number": guest.travel_info.flight_number,
                "arrival_date": guest.travel_info.arrival_date,
                "arrival_time": guest.travel_info.arrival_time,
                "arrival_location": guest.travel_info.arrival_location,
                "departure_date": guest.travel_info.departure_date,
                "departure_time": guest.travel_info.departure_time,
                "departure_location": guest.travel_info.departure_location,
                "needs_transportation": bool(guest.travel_info.needs_transportation),
            }
            for guest in guests
        ]
