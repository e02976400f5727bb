"""
Event, ceremony and meal option schemas
"""

import datetime as dt
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from .common import ProvisionMode, reject_null

class EventBase(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    couple_names: str = Field(min_length=1, max_length=100)
    bride_name: str = Field(min_length=1, max_length=100)
    groom_name: str = Field(min_length=1, max_length=100)
    start_date: date
    end_date: date
    location: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    rsvp_deadline: Optional[date] = None

    allow_plus_ones: bool = True
    allow_children_details: bool = True

    accommodation_mode: ProvisionMode = "none"
    accommodation_instructions: Optional[str] = None
    accommodation_hotel_name: Optional[str] = None
    accommodation_hotel_address: Optional[str] = None
    accommodation_hotel_phone: Optional[str] = None
    accommodation_hotel_website: Optional[str] = None
    accommodation_special_rates: Optional[str] = None
    accommodation_special_deals: Optional[str] = None

    transport_mode: ProvisionMode = "none"
    transport_instructions: Optional[str] = None
    transport_provider_name: Optional[str] = None
    transport_provider_contact: Optional[str] = None
    transport_special_deals: Optional[str] = None
    shared_transport: bool = False
    default_arrival_location: Optional[str] = None
    default_departure_location: Optional[str] = None

    flight_mode: ProvisionMode = "none"
    flight_instructions: Optional[str] = None
    recommended_airlines: Optional[str] = None
    airline_discount_codes: Optional[str] = None

    email_from: Optional[EmailStr] = None
    email_reply_to: Optional[EmailStr] = None

class EventCreate(EventBase):
    """Schema for creating an event"""

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self

class EventUpdate(BaseModel):
    """Partial event update; every field optional"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    couple_names: Optional[str] = Field(None, min_length=1, max_length=100)
    bride_name: Optional[str] = Field(None, min_length=1, max_length=100)
    groom_name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    rsvp_deadline: Optional[date] = None
    allow_plus_ones: Optional[bool] = None
    allow_children_details: Optional[bool] = None
    accommodation_mode: Optional[ProvisionMode] = None
    accommodation_instructions: Optional[str] = None
    accommodation_hotel_name: Optional[str] = None
    accommodation_hotel_address: Optional[str] = None
    accommodation_hotel_phone: Optional[str] = None
    accommodation_hotel_website: Optional[str] = None
    accommodation_special_rates: Optional[str] = None
    accommodation_special_deals: Optional[str] = None
    transport_mode: Optional[ProvisionMode] = None
    transport_instructions: Optional[str] = None
    transport_provider_name: Optional[str] = None
    transport_provider_contact: Optional[str] = None
    transport_special_deals: Optional[str] = None
    shared_transport: Optional[bool] = None
    default_arrival_location: Optional[str] = None
    default_departure_location: Optional[str] = None
    flight_mode: Optional[ProvisionMode] = None
    flight_instructions: Optional[str] = None
    recommended_airlines: Optional[str] = None
    airline_discount_codes: Optional[str] = None
    email_from: Optional[EmailStr] = None
    email_reply_to: Optional[EmailStr] = None

    @field_validator(
        "title", "couple_names", "bride_name", "groom_name", "start_date", "end_date", "location",
        "allow_plus_ones", "allow_children_details", "shared_transport",
        "accommodation_mode", "transport_mode", "flight_mode",
        mode="before"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class EventResponse(EventBase):
    """Basic event response"""
    id: int
    created_by: int
    created_at: datetime

    class Config:
        from_attributes = True

class CeremonyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    date: dt.date
    start_time: str = Field(min_length=1, max_length=10)
    end_time: str = Field(min_length=1, max_length=10)
    location: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    attire_code: Optional[str] = None

class CeremonyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(None, min_length=1, max_length=10)
    end_time: Optional[str] = Field(None, min_length=1, max_length=10)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    attire_code: Optional[str] = None

    @field_validator("name", "date", "start_time", "end_time", "location", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class CeremonyResponse(CeremonyCreate):
    id: int
    event_id: int

    class Config:
        from_attributes = True

class MealOptionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    is_nut_free: bool = False

class MealOptionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_vegetarian: Optional[bool] = None
    is_vegan: Optional[bool] = None
    is_gluten_free: Optional[bool] = None
    is_nut_free: Optional[bool] = None

    @field_validator("name", "is_vegetarian", "is_vegan", "is_gluten_free", "is_nut_free", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class MealOptionResponse(MealOptionCreate):
    id: int
    event_id: int
    ceremony_id: int

    class Config:
        from_attributes = True
