"""
Guest-related Pydantic schemas
"""

from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import ArrangementPreference, GuestSide, RsvpStatus, TravelMode, reject_null

class ChildDetail(BaseModel):
    name: str = Field(min_length=1)
    age: Optional[int] = Field(None, ge=0, le=18)
    gender: Optional[str] = None
    dietary_restrictions: Optional[str] = Field(None, max_length=200)

class GuestCreate(BaseModel):
    """Schema for creating a guest"""
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    gender: Optional[str] = None
    salutation: Optional[str] = None
    country_code: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    whatsapp_same: bool = True
    whatsapp_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_available: bool = False
    address: Optional[str] = None
    side: GuestSide = "mutual"
    is_family: bool = False
    relationship: Optional[str] = None
    plus_one_allowed: bool = False
    plus_one_name: Optional[str] = None
    children_details: List[ChildDetail] = []
    dietary_restrictions: Optional[str] = None
    allergies: Optional[str] = None
    accommodation_selected: bool = False
    transport_selected: bool = False
    notes: Optional[str] = None

class GuestUpdate(BaseModel):
    """Schema for updating a guest"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    gender: Optional[str] = None
    salutation: Optional[str] = None
    country_code: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    whatsapp_same: Optional[bool] = None
    whatsapp_country_code: Optional[str] = None
    whatsapp_number: Optional[str] = None
    whatsapp_available: Optional[bool] = None
    address: Optional[str] = None
    side: Optional[GuestSide] = None
    is_family: Optional[bool] = None
    relationship: Optional[str] = None
    rsvp_status: Optional[RsvpStatus] = None
    plus_one_allowed: Optional[bool] = None
    plus_one_confirmed: Optional[bool] = None
    plus_one_name: Optional[str] = None
    children_details: Optional[List[ChildDetail]] = None
    dietary_restrictions: Optional[str] = None
    allergies: Optional[str] = None
    needs_accommodation: Optional[bool] = None
    accommodation_preference: Optional[ArrangementPreference] = None
    accommodation_selected: Optional[bool] = None
    needs_transportation: Optional[bool] = None
    transportation_preference: Optional[ArrangementPreference] = None
    transport_selected: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator(
        "first_name", "last_name", "side", "rsvp_status", "children_details",
        "whatsapp_same", "whatsapp_available", "is_family", "plus_one_allowed", "plus_one_confirmed",
        "accommodation_selected", "transport_selected",
        mode="before"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: int
    event_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    country_code: Optional[str] = None
    whatsapp_same: Optional[bool] = None
    whatsapp_number: Optional[str] = None
    whatsapp_available: Optional[bool] = None
    side: str
    is_family: Optional[bool] = None
    relationship: Optional[str] = Field(None, validation_alias="relationship_label")
    rsvp_status: str
    rsvp_stage: int
    rsvp_date: Optional[datetime] = None
    plus_one_allowed: Optional[bool] = None
    plus_one_confirmed: Optional[bool] = None
    plus_one_name: Optional[str] = None
    children_details: Optional[List[ChildDetail]] = None
    dietary_restrictions: Optional[str] = None
    allergies: Optional[str] = None
    needs_accommodation: Optional[bool] = None
    accommodation_preference: Optional[str] = None
    accommodation_selected: Optional[bool] = None
    needs_transportation: Optional[bool] = None
    transportation_preference: Optional[str] = None
    transport_selected: Optional[bool] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class TravelInfoUpdate(BaseModel):
    """Planner-side edit of a guest's travel record"""
    travel_mode: Optional[TravelMode] = None
    arrival_date: Optional[date] = None
    arrival_time: Optional[str] = None
    arrival_location: Optional[str] = None
    departure_date: Optional[date] = None
    departure_time: Optional[str] = None
    departure_location: Optional[str] = None
    flight_number: Optional[str] = None
    airline: Optional[str] = None
    needs_transportation: Optional[bool] = None
    transportation_type: Optional[Literal["pickup", "drop", "both"]] = None
