"""
Wedding event lifecycle and dashboard statistics
"""

import logging
from collections import Counter
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from weddingplanner.models import Accommodation, Guest, TransportGroup, User, WeddingEvent
from weddingplanner.schemas.event import EventCreate, EventUpdate
from weddingplanner.services.guest_service import whatsapp_number
from weddingplanner.services.template_service import TemplateService

logger = logging.getLogger(__name__)

class EventService:
    """Event CRUD helpers"""

    @staticmethod
    def create(db: Session, owner: User, data: EventCreate) -> WeddingEvent:
        event = WeddingEvent(created_by=owner.id, **data.model_dump())
        db.add(event)
        db.commit()
        db.refresh(event)
        TemplateService.seed_defaults(db, event)
        logger.info(f"Event {event.id} '{event.title}' created by {owner.username}")
        return event

    @staticmethod
    def update(db: Session, event: WeddingEvent, data: EventUpdate) -> Tuple[Optional[WeddingEvent], Optional[str]]:
        changes = data.model_dump(exclude_unset=True)
        start = changes.get("start_date", event.start_date)
        end = changes.get("end_date", event.end_date)
        if start and end and end < start:
            return None, "End date must be on or after start date"

        for field, value in changes.items():
            setattr(event, field, value)
        db.commit()
        db.refresh(event)
        return event, None

    @staticmethod
    def delete(db: Session, event: WeddingEvent):
        event_id = event.id
        db.delete(event)
        db.commit()
        logger.info(f"Event {event_id} deleted")

    @staticmethod
    def statistics(db: Session, event: WeddingEvent) -> Dict[str, Any]:
        guests = db.query(Guest).filter(Guest.event_id == event.id).all()
        confirmed = [g for g in guests if g.rsvp_status == "confirmed"]

        dietary = Counter()
        for guest in confirmed:
            for item in (guest.dietary_restrictions or "").split(","):
                item = item.strip().lower()
                if item and item != "none":
                    dietary[item] += 1

        needs_room = [g for g in confirmed if g.needs_accommodation]
        needs_transport = [g for g in confirmed if g.needs_transportation]
        room_types = db.query(Accommodation).filter(Accommodation.event_id == event.id).all()
        grouped_ids = {
            allocation.guest_id
            for group in db.query(TransportGroup).filter(TransportGroup.event_id == event.id).all()
            for allocation in group.allocations
        }

        return {
            "guests": {
                "total": len(guests),
                "confirmed": len(confirmed),
                "declined": sum(1 for g in guests if g.rsvp_status == "declined"),
                "pending": sum(1 for g in guests if g.rsvp_status == "pending"),
                "stage2_complete": sum(1 for g in confirmed if g.rsvp_stage == 2),
                "plus_ones": sum(1 for g in confirmed if g.plus_one_confirmed),
                "children": sum(g.children_count for g in confirmed),
                "expected_attendees": sum(g.party_size for g in confirmed),
            },
            "sides": dict(Counter(g.side or "mutual" for g in guests)),
            "dietary": dict(dietary),
            "accommodation": {
                "needed": len(needs_room),
                "allocated": sum(1 for g in needs_room if g.room_allocations),
                "total_rooms": sum(r.total_rooms for r in room_types),
                "allocated_rooms": sum(r.allocated_rooms or 0 for r in room_types),
            },
            "transport": {
                "needed": len(needs_transport),
                "grouped": sum(1 for g in needs_transport if g.id in grouped_ids),
            },
            "communication": {
                "email_available": sum(1 for g in guests if g.email),
                "whatsapp_available": sum(1 for g in guests if g.whatsapp_available and whatsapp_number(g)),
            },
        }
