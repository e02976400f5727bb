"""
Guest contact helpers and communication filtering
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from weddingplanner.models import Guest, TravelInfo
from weddingplanner.schemas.guest import GuestCreate, GuestUpdate, TravelInfoUpdate
from weddingplanner.services.accommodation_service import AccommodationService

logger = logging.getLogger(__name__)

def whatsapp_number(guest: Guest) -> Optional[str]:
    """Effective WhatsApp number: the phone when whatsapp_same is set"""
    if guest.whatsapp_same:
        number, code = guest.phone, guest.country_code
    else:
        number, code = guest.whatsapp_number, guest.whatsapp_country_code or guest.country_code
    if not number:
        return None
    if code and not number.startswith("+"):
        return f"{code}{number}"
    return number

def release_allocations(db: Session, guest: Guest, rooms: bool = True, transport: bool = True):
    """Give up the rooms and transport seats a guest holds; caller commits"""
    if rooms and guest.room_allocations:
        released = AccommodationService.release_guest(db, guest)
        logger.info(f"Released {released} room allocation(s) held by guest {guest.id}")
    if transport and guest.transport_allocations:
        guest.transport_allocations = []
        logger.info(f"Removed guest {guest.id} from its transport groups")

def contact_summary(guest: Guest) -> Dict:
    return {
        "id": guest.id,
        "name": guest.full_name,
        "email": guest.email,
        "phone": guest.phone,
        "whatsapp_available": bool(guest.whatsapp_available),
        "whatsapp_number": whatsapp_number(guest),
        "side": guest.side,
        "rsvp_status": guest.rsvp_status,
    }

class GuestService:
    """Guest writes and communication filtering"""

    @staticmethod
    def create(db: Session, event_id: int, data: GuestCreate) -> Guest:
        fields = data.model_dump(exclude={"relationship", "children_details"})
        guest = Guest(
            event_id=event_id,
            relationship_label=data.relationship,
            children_details=[child.model_dump() for child in data.children_details],
            **fields
        )
        db.add(guest)
        db.commit()
        db.refresh(guest)
        logger.info(f"Added guest {guest.id} to event {event_id}")
        return guest

    @staticmethod
    def update(db: Session, guest: Guest, data: GuestUpdate) -> Guest:
        changes = data.model_dump(exclude_unset=True)
        if "relationship" in changes:
            guest.relationship_label = changes.pop("relationship")
        if "children_details" in changes:
            children = changes.pop("children_details")
            guest.children_details = children or []
        for field, value in changes.items():
            setattr(guest, field, value)
        if changes.get("rsvp_status") == "declined":
            guest.plus_one_confirmed = False
            release_allocations(db, guest)
        db.commit()
        db.refresh(guest)
        return guest

    @staticmethod
    def update_travel(db: Session, guest: Guest, data: TravelInfoUpdate) -> TravelInfo:
        travel = guest.travel_info or TravelInfo(guest_id=guest.id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(travel, field, value)
        guest.travel_info = travel
        db.commit()
        db.refresh(travel)
        return travel

    @staticmethod
    def whatsapp_guests(db: Session, event_id: int) -> List[Dict]:
        guests = db.query(Guest).filter(
            Guest.event_id == event_id,
            Guest.whatsapp_available == True
        ).order_by(Guest.id).all()
        return [contact_summary(guest) for guest in guests if whatsapp_number(guest)]

    @staticmethod
    def guests_by_side(db: Session, event_id: int, side: str) -> List[Dict]:
        query = db.query(Guest).filter(Guest.event_id == event_id)
        if side == "mutual":
            query = query.filter((Guest.side == "mutual") | (Guest.side == None))
        else:
            query = query.filter(Guest.side == side)
        return [contact_summary(guest) for guest in query.order_by(Guest.id).all()]

    @staticmethod
    def communication_stats(db: Session, event_id: int) -> Dict[str, int]:
        guests = db.query(Guest).filter(Guest.event_id == event_id).all()
        return {
            "total": len(guests),
            "whatsapp_enabled": sum(1 for g in guests if g.whatsapp_available and whatsapp_number(g)),
            "email_available": sum(1 for g in guests if g.email),
            "bride_side": sum(1 for g in guests if g.side == "bride"),
            "groom_side": sum(1 for g in guests if g.side == "groom"),
            "mutual_side": sum(1 for g in guests if g.side in ("mutual", None)),
            "confirmed": sum(1 for g in guests if g.rsvp_status == "confirmed"),
            "pending": sum(1 for g in guests if g.rsvp_status == "pending"),
            "declined": sum(1 for g in guests if g.rsvp_status == "declined"),
        }
