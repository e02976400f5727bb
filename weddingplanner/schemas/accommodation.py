"""
Hotel, room type and allocation schemas
"""

from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .common import reject_null

class HotelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=500)
    phone: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    price_range: Optional[str] = None
    distance_from_venue: Optional[str] = None
    amenities: Optional[str] = None
    booking_instructions: Optional[str] = None
    is_default: bool = False

class HotelUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    phone: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    price_range: Optional[str] = None
    distance_from_venue: Optional[str] = None
    amenities: Optional[str] = None
    booking_instructions: Optional[str] = None
    is_default: Optional[bool] = None

    @field_validator("name", "address", "is_default", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class HotelResponse(HotelCreate):
    id: int
    event_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class AccommodationCreate(BaseModel):
    hotel_id: Optional[int] = None
    name: str = Field(min_length=1, max_length=255)
    room_type: str = Field(min_length=1, max_length=100)
    bed_type: Optional[str] = None
    max_occupancy: int = Field(ge=1)
    total_rooms: int = Field(ge=0)
    price_per_night: Optional[str] = None
    special_features: Optional[str] = None

class AccommodationUpdate(BaseModel):
    hotel_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    room_type: Optional[str] = Field(None, min_length=1, max_length=100)
    bed_type: Optional[str] = None
    max_occupancy: Optional[int] = Field(None, ge=1)
    total_rooms: Optional[int] = Field(None, ge=0)
    price_per_night: Optional[str] = None
    special_features: Optional[str] = None

    @field_validator("name", "room_type", "max_occupancy", "total_rooms", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class AccommodationResponse(AccommodationCreate):
    id: int
    event_id: int
    allocated_rooms: int
    available_rooms: int

    class Config:
        from_attributes = True

class AllocationCreate(BaseModel):
    accommodation_id: int
    guest_id: int
    room_number: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    special_requests: Optional[str] = None

class AllocationUpdate(BaseModel):
    room_number: Optional[str] = None
    check_in_date: Optional[date] = None
    check_in_status: Optional[Literal["pending", "confirmed", "checked-in", "no-show"]] = None
    check_in_time: Optional[str] = None
    check_out_date: Optional[date] = None
    check_out_status: Optional[Literal["pending", "checked-out"]] = None
    check_out_time: Optional[str] = None
    special_requests: Optional[str] = None

class AllocationReassign(BaseModel):
    accommodation_id: int
    room_number: Optional[str] = None

class AllocationResponse(BaseModel):
    id: int
    accommodation_id: int
    guest_id: int
    room_number: Optional[str] = None
    check_in_date: Optional[date] = None
    check_in_status: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_date: Optional[date] = None
    check_out_status: Optional[str] = None
    check_out_time: Optional[str] = None
    special_requests: Optional[str] = None
    includes_plus_one: Optional[bool] = None
    includes_children: Optional[bool] = None
    children_count: Optional[int] = None
    additional_guests_info: Optional[str] = None
    source: str
    needs_review: Optional[bool] = None
    early_check_in: Optional[bool] = None
    confirmed: Optional[bool] = None

    class Config:
        from_attributes = True
