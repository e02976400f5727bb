"""
Transport group schemas
"""

from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .common import reject_null

class TransportGroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    transport_mode: Literal["car", "bus"] = "car"
    vehicle_type: str = "sedan"
    vehicle_capacity: int = Field(4, ge=1)
    vehicle_count: int = Field(1, ge=1)
    pickup_location: str = Field(min_length=1)
    pickup_location_details: Optional[str] = None
    pickup_date: date
    pickup_time_slot: str
    dropoff_location: str = Field(min_length=1)

class TransportGroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    transport_mode: Optional[Literal["car", "bus"]] = None
    vehicle_type: Optional[str] = None
    vehicle_capacity: Optional[int] = Field(None, ge=1)
    vehicle_count: Optional[int] = Field(None, ge=1)
    pickup_location: Optional[str] = None
    pickup_location_details: Optional[str] = None
    pickup_date: Optional[date] = None
    pickup_time_slot: Optional[str] = None
    dropoff_location: Optional[str] = None
    status: Optional[Literal["draft", "confirmed"]] = None

    @field_validator(
        "name", "transport_mode", "vehicle_type", "vehicle_capacity", "vehicle_count",
        "pickup_location", "pickup_date", "pickup_time_slot", "dropoff_location", "status",
        mode="before"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class TransportAllocationCreate(BaseModel):
    guest_id: int

class TransportAllocationResponse(BaseModel):
    id: int
    transport_group_id: int
    guest_id: int
    status: str
    includes_plus_one: Optional[bool] = None
    includes_children: Optional[bool] = None
    children_count: Optional[int] = None

    class Config:
        from_attributes = True

class TransportGroupResponse(BaseModel):
    id: int
    event_id: int
    name: str
    transport_mode: str
    vehicle_type: str
    vehicle_capacity: int
    vehicle_count: int
    pickup_location: str
    pickup_location_details: Optional[str] = None
    pickup_date: date
    pickup_time_slot: str
    dropoff_location: str
    status: str
    allocations: List[TransportAllocationResponse] = []

    class Config:
        from_attributes = True
