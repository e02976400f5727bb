"""
Database models package
"""

from .user import User, AuthToken
from .event import WeddingEvent, Ceremony, MealOption
from .guest import Guest, GuestCeremony, GuestMealSelection, CoupleMessage, TravelInfo
from .accommodation import Hotel, Accommodation, RoomAllocation
from .transport import TransportGroup, TransportAllocation
from .communication import EmailTemplate, EmailStyle, RsvpFollowupTemplate, RsvpFollowupLog

__all__ = [
    "User",
    "AuthToken",
    "WeddingEvent",
    "Ceremony",
    "MealOption",
    "Guest",
    "GuestCeremony",
    "GuestMealSelection",
    "CoupleMessage",
    "TravelInfo",
    "Hotel",
    "Accommodation",
    "RoomAllocation",
    "TransportGroup",
    "TransportAllocation",
    "EmailTemplate",
    "EmailStyle",
    "RsvpFollowupTemplate",
    "RsvpFollowupLog",
]
