"""
Pydantic schemas package
"""

from .common import *
from .auth import *
from .event import *
from .guest import *
from .rsvp import *
from .accommodation import *
from .transport import *
from .communication import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "CeremonyCreate",
    "CeremonyUpdate",
    "CeremonyResponse",
    "MealOptionCreate",
    "MealOptionUpdate",
    "MealOptionResponse",
    "GuestCreate",
    "GuestUpdate",
    "GuestResponse",
    "TravelInfoUpdate",
    "RsvpStage1Request",
    "RsvpStage2Request",
    "GenerateLinksRequest",
    "SendInvitesRequest",
    "HotelCreate",
    "HotelUpdate",
    "HotelResponse",
    "AccommodationCreate",
    "AccommodationUpdate",
    "AccommodationResponse",
    "AllocationCreate",
    "AllocationUpdate",
    "AllocationReassign",
    "AllocationResponse",
    "TransportGroupCreate",
    "TransportGroupUpdate",
    "TransportGroupResponse",
    "TransportAllocationCreate",
    "EmailTemplateCreate",
    "EmailTemplateUpdate",
    "EmailStyleCreate",
    "EmailStyleUpdate",
    "TemplatePreviewRequest",
    "FollowupTemplateCreate",
    "FollowupTemplateUpdate",
]
