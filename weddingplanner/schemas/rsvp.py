"""
Two-stage RSVP schemas
"""

from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from .common import ArrangementPreference, TravelMode
from .guest import ChildDetail

class CeremonyAttendance(BaseModel):
    ceremony_id: int
    attending: bool

class RsvpStage1Request(BaseModel):
    """Stage 1: basic attendance"""
    token: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    rsvp_status: Literal["confirmed", "declined"]
    plus_one_attending: bool = False
    plus_one_name: Optional[str] = None
    plus_one_email: Optional[EmailStr] = None
    plus_one_phone: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    allergies: Optional[str] = None
    ceremonies: List[CeremonyAttendance] = []
    message: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_plus_one(self):
        if self.plus_one_attending and not (self.plus_one_name or "").strip():
            raise ValueError("Plus one name is required when bringing a plus one")
        return self

class FlightDetails(BaseModel):
    flight_number: Optional[str] = None
    airline: Optional[str] = None
    arrival_airport: Optional[str] = None
    departure_airport: Optional[str] = None

class MealSelectionRequest(BaseModel):
    ceremony_id: int
    meal_option_id: int
    notes: Optional[str] = Field(None, max_length=200)

class RsvpStage2Request(BaseModel):
    """Stage 2: travel, accommodation, children and meals"""
    token: str
    needs_accommodation: Optional[bool] = None
    accommodation_preference: Optional[ArrangementPreference] = None
    accommodation_notes: Optional[str] = Field(None, max_length=500)
    needs_transportation: Optional[bool] = None
    transportation_preference: Optional[ArrangementPreference] = None
    transportation_type: Optional[Literal["pickup", "drop", "both"]] = None
    transportation_notes: Optional[str] = Field(None, max_length=500)
    travel_mode: Optional[TravelMode] = None
    flight_details: Optional[FlightDetails] = None
    arrival_date: Optional[date] = None
    arrival_time: Optional[str] = None
    arrival_location: Optional[str] = None
    departure_date: Optional[date] = None
    departure_time: Optional[str] = None
    departure_location: Optional[str] = None
    children_details: Optional[List[ChildDetail]] = None
    meal_selections: List[MealSelectionRequest] = []
    special_requests: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_travel_dates(self):
        if self.arrival_date and self.departure_date and self.departure_date < self.arrival_date:
            raise ValueError("Departure date must be on or after arrival date")
        return self

class GenerateLinksRequest(BaseModel):
    guest_ids: Optional[List[int]] = None

class SendInvitesRequest(BaseModel):
    guest_ids: Optional[List[int]] = None
    template_id: Optional[int] = None
