"""
Room allocations and capacity-based auto-assignment
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from weddingplanner.models import Accommodation, Guest, RoomAllocation, WeddingEvent
from weddingplanner.services.provision import accommodation_allowed

logger = logging.getLogger(__name__)

# Arrivals strictly inside this window (minutes after midnight) get early check-in
EARLY_CHECK_IN_START = 10 * 60
EARLY_CHECK_IN_END = 14 * 60

def parse_time(value: Optional[str]) -> Optional[int]:
    """'HH:MM' -> minutes after midnight, None when unparseable"""
    if not value:
        return None
    try:
        hours, minutes = value.strip().split(":")[:2]
        hours, minutes = int(hours), int(minutes[:2])
    except ValueError:
        return None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return hours * 60 + minutes

def is_early_check_in(arrival_time: Optional[str]) -> bool:
    minutes = parse_time(arrival_time)
    return minutes is not None and EARLY_CHECK_IN_START < minutes < EARLY_CHECK_IN_END

def pick_room_type(room_types: List[Accommodation], party_size: int) -> Optional[Accommodation]:
    """
    Smallest room type with a free room that fits the party, otherwise
    the largest room type that still has a free room.
    """
    free = [room for room in room_types if room.available_rooms > 0]
    if not free:
        return None
    fitting = [room for room in free if room.max_occupancy >= party_size]
    if fitting:
        return min(fitting, key=lambda room: (room.max_occupancy, room.id))
    return max(free, key=lambda room: (room.max_occupancy, -room.id))

class AccommodationService:
    """Allocation bookkeeping for hotels and room types"""

    @staticmethod
    def sync_allocated_count(db: Session, accommodation: Accommodation):
        db.flush()
        accommodation.allocated_rooms = db.query(RoomAllocation).filter(
            RoomAllocation.accommodation_id == accommodation.id
        ).count()

    @staticmethod
    def check_total_rooms(accommodation: Accommodation, total_rooms: int) -> Optional[str]:
        if total_rooms < (accommodation.allocated_rooms or 0):
            return (
                f"Total rooms cannot be lower than the {accommodation.allocated_rooms} "
                f"rooms already allocated"
            )
        return None

    @staticmethod
    def _party_fields(guest: Guest) -> Dict:
        extra = []
        if guest.plus_one_confirmed and guest.plus_one_name:
            extra.append(f"Plus one: {guest.plus_one_name}")
        for child in guest.children_details or []:
            name = child.get("name") if isinstance(child, dict) else None
            if name:
                extra.append(f"Child: {name}")
        return {
            "includes_plus_one": bool(guest.plus_one_confirmed),
            "includes_children": guest.children_count > 0,
            "children_count": guest.children_count,
            "additional_guests_info": "; ".join(extra) or None,
        }

    @staticmethod
    def create_allocation(
        db: Session,
        event: WeddingEvent,
        accommodation_id: int,
        guest_id: int,
        room_number: Optional[str] = None,
        check_in_date=None,
        check_out_date=None,
        special_requests: Optional[str] = None
    ) -> Tuple[Optional[RoomAllocation], Optional[str]]:
        accommodation = db.query(Accommodation).filter(
            Accommodation.id == accommodation_id,
            Accommodation.event_id == event.id
        ).first()
        if not accommodation:
            return None, "Room type not found"

        guest = db.query(Guest).filter(Guest.id == guest_id, Guest.event_id == event.id).first()
        if not guest:
            return None, "Guest not found"

        if db.query(RoomAllocation).filter(RoomAllocation.guest_id == guest.id).first():
            return None, "Guest already has a room allocation"

        if accommodation.available_rooms <= 0:
            return None, f"No rooms left for {accommodation.name}"

        travel = guest.travel_info
        allocation = RoomAllocation(
            accommodation_id=accommodation.id,
            guest_id=guest.id,
            room_number=room_number,
            check_in_date=check_in_date or (travel.arrival_date if travel else None) or event.start_date,
            check_out_date=check_out_date or (travel.departure_date if travel else None) or event.end_date,
            special_requests=special_requests or guest.special_requests,
            source="manual",
            confirmed=True,
            **AccommodationService._party_fields(guest)
        )
        db.add(allocation)
        AccommodationService.sync_allocated_count(db, accommodation)
        db.commit()
        db.refresh(allocation)
        logger.info(f"Allocated guest {guest.id} to room type {accommodation.id}")
        return allocation, None

    @staticmethod
    def reassign(
        db: Session,
        event: WeddingEvent,
        allocation: RoomAllocation,
        accommodation_id: int,
        room_number: Optional[str] = None
    ) -> Tuple[Optional[RoomAllocation], Optional[str]]:
        target = db.query(Accommodation).filter(
            Accommodation.id == accommodation_id,
            Accommodation.event_id == event.id
        ).first()
        if not target:
            return None, "Room type not found"
        if target.id == allocation.accommodation_id:
            return None, "Guest is already allocated to this room type"
        if target.available_rooms <= 0:
            return None, f"No rooms left for {target.name}"

        previous = allocation.accommodation
        allocation.accommodation = target
        allocation.room_number = room_number
        allocation.needs_review = False
        AccommodationService.sync_allocated_count(db, previous)
        AccommodationService.sync_allocated_count(db, target)
        db.commit()
        db.refresh(allocation)
        logger.info(f"Reassigned allocation {allocation.id} from room type {previous.id} to {target.id}")
        return allocation, None

    @staticmethod
    def approve(db: Session, allocation: RoomAllocation) -> RoomAllocation:
        allocation.needs_review = False
        allocation.confirmed = True
        db.commit()
        db.refresh(allocation)
        return allocation

    @staticmethod
    def delete_allocation(db: Session, allocation: RoomAllocation):
        accommodation = allocation.accommodation
        db.delete(allocation)
        AccommodationService.sync_allocated_count(db, accommodation)
        db.commit()

    @staticmethod
    def release_guest(db: Session, guest: Guest) -> int:
        """Drop a guest's room allocations; caller commits"""
        released = 0
        for allocation in list(guest.room_allocations):
            accommodation = allocation.accommodation
            guest.room_allocations.remove(allocation)
            db.delete(allocation)
            AccommodationService.sync_allocated_count(db, accommodation)
            released += 1
        return released

    @staticmethod
    def is_eligible(event: WeddingEvent, guest: Guest) -> bool:
        return (
            guest.rsvp_status == "confirmed"
            and bool(guest.needs_accommodation)
            and guest.accommodation_preference == "provided"
            and accommodation_allowed(event, guest)
            and not guest.room_allocations
        )

    @staticmethod
    def auto_assign_guest(db: Session, event: WeddingEvent, guest: Guest) -> Optional[RoomAllocation]:
        """Match one guest's party to a room type; the result waits for review"""
        if not AccommodationService.is_eligible(event, guest):
            return None

        room_types = db.query(Accommodation).filter(Accommodation.event_id == event.id).all()
        room = pick_room_type(room_types, guest.party_size)
        if room is None:
            logger.warning(f"No free room type for guest {guest.id} in event {event.id}")
            return None

        travel = guest.travel_info
        allocation = RoomAllocation(
            accommodation_id=room.id,
            guest_id=guest.id,
            check_in_date=(travel.arrival_date if travel else None) or event.start_date,
            check_out_date=(travel.departure_date if travel else None) or event.end_date,
            special_requests=guest.special_requests,
            source="auto",
            needs_review=True,
            confirmed=False,
            early_check_in=is_early_check_in(travel.arrival_time if travel else None),
            **AccommodationService._party_fields(guest)
        )
        db.add(allocation)
        guest.room_allocations.append(allocation)
        AccommodationService.sync_allocated_count(db, room)
        db.commit()
        db.refresh(allocation)
        logger.info(
            f"Auto-assigned guest {guest.id} (party of {guest.party_size}) "
            f"to room type {room.id} ({room.max_occupancy} max)"
        )
        return allocation

    @staticmethod
    def auto_assign_event(db: Session, event: WeddingEvent) -> Dict[str, List]:
        guests = db.query(Guest).filter(
            Guest.event_id == event.id,
            Guest.rsvp_status == "confirmed",
            Guest.needs_accommodation == True
        ).order_by(Guest.id).all()

        assigned, unassigned = [], []
        for guest in guests:
            if not AccommodationService.is_eligible(event, guest):
                continue
            allocation = AccommodationService.auto_assign_guest(db, event, guest)
            if allocation:
                assigned.append(allocation)
            else:
                unassigned.append(guest)

        logger.info(f"Auto-assignment for event {event.id}: {len(assigned)} assigned, {len(unassigned)} without a room")
        return {"assigned": assigned, "unassigned": unassigned}

    @staticmethod
    def report(db: Session, event: WeddingEvent) -> Dict:
        room_types = db.query(Accommodation).filter(Accommodation.event_id == event.id).all()

        hotels: Dict[str, Dict] = {}
        for room in room_types:
            hotel_name = room.hotel.name if room.hotel else "Unassigned hotel"
            entry = hotels.setdefault(hotel_name, {
                "hotel_id": room.hotel_id,
                "hotel": hotel_name,
                "total_rooms": 0,
                "allocated_rooms": 0,
                "available_rooms": 0,
                "room_types": [],
            })
            entry["total_rooms"] += room.total_rooms
            entry["allocated_rooms"] += room.allocated_rooms or 0
            entry["available_rooms"] += room.available_rooms
            entry["room_types"].append({
                "id": room.id,
                "name": room.name,
                "room_type": room.room_type,
                "max_occupancy": room.max_occupancy,
                "total_rooms": room.total_rooms,
                "allocated_rooms": room.allocated_rooms or 0,
                "available_rooms": room.available_rooms,
            })

        waiting = db.query(Guest).filter(
            Guest.event_id == event.id,
            Guest.rsvp_status == "confirmed",
            Guest.needs_accommodation == True
        ).all()
        unassigned = [
            {"id": guest.id, "name": guest.full_name, "party_size": guest.party_size}
            for guest in waiting if not guest.room_allocations
        ]

        pending_review = db.query(RoomAllocation).join(Accommodation).filter(
            Accommodation.event_id == event.id,
            RoomAllocation.needs_review == True
        ).all()

        return {
            "hotels": list(hotels.values()),
            "totals": {
                "total_rooms": sum(room.total_rooms for room in room_types),
                "allocated_rooms": sum(room.allocated_rooms or 0 for room in room_types),
                "available_rooms": sum(room.available_rooms for room in room_types),
            },
            "unassigned_guests": unassigned,
            "pending_review": [
                {
                    "allocation_id": allocation.id,
                    "guest_id": allocation.guest_id,
                    "guest_name": allocation.guest.full_name,
                    "room_type": allocation.accommodation.name,
                    "early_check_in": bool(allocation.early_check_in),
                }
                for allocation in pending_review
            ],
        }
