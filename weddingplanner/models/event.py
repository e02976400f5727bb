"""
Wedding event, ceremony and meal option models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from weddingplanner.core.db import Base

class WeddingEvent(Base):
    __tablename__ = "wedding_events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    couple_names = Column(String(255), nullable=False)
    bride_name = Column(String(255), nullable=False)
    groom_name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text)
    rsvp_deadline = Column(Date)

    # RSVP settings
    allow_plus_ones = Column(Boolean, default=True)
    allow_children_details = Column(Boolean, default=True)

    # Accommodation settings
    accommodation_mode = Column(String(20), nullable=False, default="none")
    accommodation_instructions = Column(Text)
    accommodation_hotel_name = Column(String(255))
    accommodation_hotel_address = Column(String(500))
    accommodation_hotel_phone = Column(String(50))
    accommodation_hotel_website = Column(String(255))
    accommodation_special_rates = Column(Text)
    accommodation_special_deals = Column(Text)

    # Transport settings
    transport_mode = Column(String(20), nullable=False, default="none")
    transport_instructions = Column(Text)
    transport_provider_name = Column(String(255))
    transport_provider_contact = Column(String(255))
    transport_special_deals = Column(Text)
    shared_transport = Column(Boolean, default=False)
    default_arrival_location = Column(String(255))
    default_departure_location = Column(String(255))

    # Flight settings
    flight_mode = Column(String(20), nullable=False, default="none")
    flight_instructions = Column(Text)
    recommended_airlines = Column(Text)
    airline_discount_codes = Column(Text)

    # Email settings
    email_from = Column(String(255))
    email_reply_to = Column(String(255))

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="events")
    ceremonies = relationship("Ceremony", back_populates="event", cascade="all, delete-orphan")
    guests = relationship("Guest", back_populates="event", cascade="all, delete-orphan")
    hotels = relationship("Hotel", back_populates="event", cascade="all, delete-orphan")
    accommodations = relationship("Accommodation", back_populates="event", cascade="all, delete-orphan")
    transport_groups = relationship("TransportGroup", back_populates="event", cascade="all, delete-orphan")
    email_templates = relationship("EmailTemplate", back_populates="event", cascade="all, delete-orphan")
    email_styles = relationship("EmailStyle", back_populates="event", cascade="all, delete-orphan")
    followup_templates = relationship("RsvpFollowupTemplate", back_populates="event", cascade="all, delete-orphan")
    messages = relationship("CoupleMessage", back_populates="event", cascade="all, delete-orphan")


class Ceremony(Base):
    __tablename__ = "ceremonies"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String(10), nullable=False)
    end_time = Column(String(10), nullable=False)
    location = Column(String(200), nullable=False)
    description = Column(Text)
    attire_code = Column(String(100))

    event = relationship("WeddingEvent", back_populates="ceremonies")
    meal_options = relationship("MealOption", back_populates="ceremony", cascade="all, delete-orphan")
    attendance = relationship("GuestCeremony", back_populates="ceremony", cascade="all, delete-orphan")


class MealOption(Base):
    __tablename__ = "meal_options"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False)
    ceremony_id = Column(Integer, ForeignKey("ceremonies.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    is_vegetarian = Column(Boolean, default=False)
    is_vegan = Column(Boolean, default=False)
    is_gluten_free = Column(Boolean, default=False)
    is_nut_free = Column(Boolean, default=False)

    ceremony = relationship("Ceremony", back_populates="meal_options")
