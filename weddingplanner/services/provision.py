"""
Provision modes: which RSVP sections a guest sees and must answer
"""

from typing import Dict

from weddingplanner.models import Guest, WeddingEvent

HIDDEN = "hidden"
REQUIRED = "required"
OPTIONAL = "optional"

def section_state(mode: str, guest_selected: bool = False) -> str:
    """
    none -> hidden, all -> required, special_deal -> optional,
    selected -> required for flagged guests and hidden for the rest
    """
    if mode == "all":
        return REQUIRED
    if mode == "special_deal":
        return OPTIONAL
    if mode == "selected":
        return REQUIRED if guest_selected else HIDDEN
    return HIDDEN

def guest_sections(event: WeddingEvent, guest: Guest) -> Dict[str, Dict]:
    # flight eligibility under "selected" follows the transport flag
    accommodation = section_state(event.accommodation_mode, bool(guest.accommodation_selected))
    transport = section_state(event.transport_mode, bool(guest.transport_selected))
    flight = section_state(event.flight_mode, bool(guest.transport_selected))

    def describe(mode: str, state: str) -> Dict:
        return {
            "mode": mode,
            "shown": state != HIDDEN,
            "required": state == REQUIRED,
            "special_deal": mode == "special_deal",
        }

    return {
        "accommodation": describe(event.accommodation_mode, accommodation),
        "transport": describe(event.transport_mode, transport),
        "flight": describe(event.flight_mode, flight),
        "travel": {"shown": transport != HIDDEN or flight != HIDDEN},
    }

def accommodation_allowed(event: WeddingEvent, guest: Guest) -> bool:
    return section_state(event.accommodation_mode, bool(guest.accommodation_selected)) != HIDDEN

def transport_allowed(event: WeddingEvent, guest: Guest) -> bool:
    return section_state(event.transport_mode, bool(guest.transport_selected)) != HIDDEN
