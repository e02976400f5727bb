"""
Hotel, room type and room allocation models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from weddingplanner.core.db import Base

class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    phone = Column(String(50))
    website = Column(String(255))
    description = Column(Text)
    price_range = Column(String(100))
    distance_from_venue = Column(String(100))
    amenities = Column(Text)
    booking_instructions = Column(Text)
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("WeddingEvent", back_populates="hotels")
    accommodations = relationship("Accommodation", back_populates="hotel", cascade="all, delete-orphan")


class Accommodation(Base):
    """A room type offered by a hotel, with an inventory of rooms"""
    __tablename__ = "accommodations"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=True)
    name = Column(String(255), nullable=False)
    room_type = Column(String(100), nullable=False)
    bed_type = Column(String(50))
    max_occupancy = Column(Integer, nullable=False)
    total_rooms = Column(Integer, nullable=False)
    allocated_rooms = Column(Integer, nullable=False, default=0)
    price_per_night = Column(String(50))
    special_features = Column(Text)

    event = relationship("WeddingEvent", back_populates="accommodations")
    hotel = relationship("Hotel", back_populates="accommodations")
    allocations = relationship("RoomAllocation", back_populates="accommodation", cascade="all, delete-orphan")

    @property
    def available_rooms(self) -> int:
        return self.total_rooms - (self.allocated_rooms or 0)


class RoomAllocation(Base):
    __tablename__ = "room_allocations"

    id = Column(Integer, primary_key=True, index=True)
    accommodation_id = Column(Integer, ForeignKey("accommodations.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, unique=True)
    room_number = Column(String(20))
    check_in_date = Column(Date)
    check_in_status = Column(String(20), default="pending")  # pending, confirmed, checked-in, no-show
    check_in_time = Column(String(10))
    check_out_date = Column(Date)
    check_out_status = Column(String(20), default="pending")  # pending, checked-out
    check_out_time = Column(String(10))
    special_requests = Column(Text)
    includes_plus_one = Column(Boolean, default=False)
    includes_children = Column(Boolean, default=False)
    children_count = Column(Integer, default=0)
    additional_guests_info = Column(Text)

    # Review workflow
    source = Column(String(20), nullable=False, default="manual")  # manual, auto
    needs_review = Column(Boolean, default=False)
    early_check_in = Column(Boolean, default=False)
    confirmed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    accommodation = relationship("Accommodation", back_populates="allocations")
    guest = relationship("Guest", back_populates="room_allocations")
