"""
Event-scoped lookups shared by the routers.

Every child resource is fetched through its event id, so an id that
belongs to another event behaves like a missing row.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from weddingplanner.models import (
    Accommodation, Ceremony, EmailStyle, EmailTemplate, Guest, Hotel, MealOption,
    RoomAllocation, RsvpFollowupTemplate, TransportGroup, User, WeddingEvent
)


class EventRepo:
    @staticmethod
    def list_for_user(db: Session, user: User) -> List[WeddingEvent]:
        query = db.query(WeddingEvent)
        if not user.is_admin:
            query = query.filter(WeddingEvent.created_by == user.id)
        return query.order_by(WeddingEvent.start_date).all()

    @staticmethod
    def get_ceremony(db: Session, event_id: int, ceremony_id: int) -> Optional[Ceremony]:
        return db.query(Ceremony).filter(
            Ceremony.id == ceremony_id, Ceremony.event_id == event_id
        ).first()

    @staticmethod
    def get_meal_option(db: Session, event_id: int, ceremony_id: int, option_id: int) -> Optional[MealOption]:
        return db.query(MealOption).filter(
            MealOption.id == option_id,
            MealOption.ceremony_id == ceremony_id,
            MealOption.event_id == event_id
        ).first()


class GuestRepo:
    @staticmethod
    def get(db: Session, event_id: int, guest_id: int) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.id == guest_id, Guest.event_id == event_id).first()

    @staticmethod
    def search(
        db: Session,
        event_id: int,
        search: Optional[str] = None,
        rsvp_status: Optional[str] = None,
        side: Optional[str] = None
    ):
        """Query of an event's guests filtered by name/email text, status and side"""
        query = db.query(Guest).filter(Guest.event_id == event_id)
        if search:
            term = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Guest.first_name).like(term),
                func.lower(Guest.last_name).like(term),
                func.lower(func.coalesce(Guest.first_name, "") + " " + func.coalesce(Guest.last_name, "")).like(term),
                func.lower(func.coalesce(Guest.email, "")).like(term),
            ))
        if rsvp_status:
            query = query.filter(Guest.rsvp_status == rsvp_status)
        if side:
            query = query.filter(Guest.side == side)
        return query.order_by(Guest.last_name, Guest.first_name)


class AccommodationRepo:
    @staticmethod
    def get_hotel(db: Session, event_id: int, hotel_id: int) -> Optional[Hotel]:
        return db.query(Hotel).filter(Hotel.id == hotel_id, Hotel.event_id == event_id).first()

    @staticmethod
    def get_room_type(db: Session, event_id: int, accommodation_id: int) -> Optional[Accommodation]:
        return db.query(Accommodation).filter(
            Accommodation.id == accommodation_id, Accommodation.event_id == event_id
        ).first()

    @staticmethod
    def get_allocation(db: Session, event_id: int, allocation_id: int) -> Optional[RoomAllocation]:
        return db.query(RoomAllocation).join(Accommodation).filter(
            RoomAllocation.id == allocation_id, Accommodation.event_id == event_id
        ).first()

    @staticmethod
    def list_allocations(db: Session, event_id: int, needs_review: Optional[bool] = None) -> List[RoomAllocation]:
        query = db.query(RoomAllocation).join(Accommodation).filter(Accommodation.event_id == event_id)
        if needs_review is not None:
            query = query.filter(RoomAllocation.needs_review == needs_review)
        return query.order_by(RoomAllocation.id).all()


class TransportRepo:
    @staticmethod
    def get_group(db: Session, event_id: int, group_id: int) -> Optional[TransportGroup]:
        return db.query(TransportGroup).filter(
            TransportGroup.id == group_id, TransportGroup.event_id == event_id
        ).first()


class TemplateRepo:
    @staticmethod
    def get_template(db: Session, event_id: int, template_id: int) -> Optional[EmailTemplate]:
        return db.query(EmailTemplate).filter(
            EmailTemplate.id == template_id, EmailTemplate.event_id == event_id
        ).first()

    @staticmethod
    def get_style(db: Session, event_id: int, style_id: int) -> Optional[EmailStyle]:
        return db.query(EmailStyle).filter(
            EmailStyle.id == style_id, EmailStyle.event_id == event_id
        ).first()

    @staticmethod
    def get_followup(db: Session, event_id: int, template_id: int) -> Optional[RsvpFollowupTemplate]:
        return db.query(RsvpFollowupTemplate).filter(
            RsvpFollowupTemplate.id == template_id, RsvpFollowupTemplate.event_id == event_id
        ).first()
