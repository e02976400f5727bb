"""
Transport group models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from weddingplanner.core.db import Base

class TransportGroup(Base):
    __tablename__ = "transport_groups"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    transport_mode = Column(String(20), nullable=False, default="car")  # car, bus
    vehicle_type = Column(String(20), nullable=False, default="sedan")
    vehicle_capacity = Column(Integer, nullable=False, default=4)
    vehicle_count = Column(Integer, nullable=False, default=1)
    pickup_location = Column(String(255), nullable=False)
    pickup_location_details = Column(String(500))
    pickup_date = Column(Date, nullable=False)
    pickup_time_slot = Column(String(20), nullable=False)
    dropoff_location = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="draft")  # draft, confirmed
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("WeddingEvent", back_populates="transport_groups")
    allocations = relationship("TransportAllocation", back_populates="group", cascade="all, delete-orphan")


class TransportAllocation(Base):
    __tablename__ = "transport_allocations"

    id = Column(Integer, primary_key=True, index=True)
    transport_group_id = Column(Integer, ForeignKey("transport_groups.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed
    includes_plus_one = Column(Boolean, default=False)
    includes_children = Column(Boolean, default=False)
    children_count = Column(Integer, default=0)

    group = relationship("TransportGroup", back_populates="allocations")
    guest = relationship("Guest", back_populates="transport_allocations")
