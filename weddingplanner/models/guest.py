"""
Guest model and per-guest RSVP records
"""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship

from weddingplanner.core.db import Base

class Guest(Base):
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255))
    gender = Column(String(20))
    salutation = Column(String(20))
    country_code = Column(String(10))
    phone = Column(String(30))
    whatsapp_same = Column(Boolean, default=True)
    whatsapp_country_code = Column(String(10))
    whatsapp_number = Column(String(30))
    whatsapp_available = Column(Boolean, default=False)
    address = Column(Text)
    side = Column(String(20), nullable=False, default="mutual")  # bride, groom, mutual
    is_family = Column(Boolean, default=False)
    relationship_label = Column("relationship", String(100))

    # RSVP
    rsvp_status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, declined
    rsvp_stage = Column(Integer, nullable=False, default=0)  # 0 none, 1 attendance, 2 complete
    rsvp_date = Column(DateTime)

    # Plus one
    plus_one_allowed = Column(Boolean, default=False)
    plus_one_confirmed = Column(Boolean, default=False)
    plus_one_name = Column(String(255))
    plus_one_email = Column(String(255))
    plus_one_phone = Column(String(30))

    # Children: list of {name, age, gender, dietary_restrictions}
    children_details = Column(JSON, default=list)

    dietary_restrictions = Column(Text)
    allergies = Column(Text)

    # Accommodation and transport
    needs_accommodation = Column(Boolean, default=False)
    accommodation_preference = Column(String(30))  # provided, self_managed, special_arrangement
    accommodation_notes = Column(Text)
    accommodation_selected = Column(Boolean, default=False)
    needs_transportation = Column(Boolean, default=False)
    transportation_preference = Column(String(30))
    transportation_notes = Column(Text)
    transport_selected = Column(Boolean, default=False)
    special_requests = Column(Text)

    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event = relationship("WeddingEvent", back_populates="guests")
    ceremonies = relationship("GuestCeremony", back_populates="guest", cascade="all, delete-orphan")
    meal_selections = relationship("GuestMealSelection", back_populates="guest", cascade="all, delete-orphan")
    travel_info = relationship("TravelInfo", back_populates="guest", uselist=False, cascade="all, delete-orphan")
    room_allocations = relationship("RoomAllocation", back_populates="guest", cascade="all, delete-orphan")
    transport_allocations = relationship("TransportAllocation", back_populates="guest", cascade="all, delete-orphan")
    messages = relationship("CoupleMessage", back_populates="guest", cascade="all, delete-orphan")
    followup_logs = relationship("RsvpFollowupLog", back_populates="guest", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def children_count(self) -> int:
        return len(self.children_details or [])

    @property
    def party_size(self) -> int:
        """Guest plus confirmed plus-one plus children"""
        return 1 + (1 if self.plus_one_confirmed else 0) + self.children_count


class GuestCeremony(Base):
    __tablename__ = "guest_ceremonies"
    __table_args__ = (UniqueConstraint("guest_id", "ceremony_id", name="uq_guest_ceremony"),)

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    ceremony_id = Column(Integer, ForeignKey("ceremonies.id"), nullable=False)
    attending = Column(Boolean, default=False)

    guest = relationship("Guest", back_populates="ceremonies")
    ceremony = relationship("Ceremony", back_populates="attendance")


class GuestMealSelection(Base):
    __tablename__ = "guest_meal_selections"
    __table_args__ = (UniqueConstraint("guest_id", "ceremony_id", name="uq_guest_meal_ceremony"),)

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    ceremony_id = Column(Integer, ForeignKey("ceremonies.id"), nullable=False)
    meal_option_id = Column(Integer, ForeignKey("meal_options.id"), nullable=False)
    notes = Column(String(200))

    guest = relationship("Guest", back_populates="meal_selections")
    meal_option = relationship("MealOption")


class CoupleMessage(Base):
    __tablename__ = "couple_messages"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("WeddingEvent", back_populates="messages")
    guest = relationship("Guest", back_populates="messages")


class TravelInfo(Base):
    __tablename__ = "travel_info"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, unique=True)
    travel_mode = Column(String(20))  # air, train, bus, car, other
    arrival_date = Column(Date)
    arrival_time = Column(String(10))
    arrival_location = Column(String(255))
    departure_date = Column(Date)
    departure_time = Column(String(10))
    departure_location = Column(String(255))
    flight_number = Column(String(20))
    airline = Column(String(100))
    needs_transportation = Column(Boolean, default=False)
    transportation_type = Column(String(20))  # pickup, drop, both
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    guest = relationship("Guest", back_populates="travel_info")
