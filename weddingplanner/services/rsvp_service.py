"""
Signed RSVP links and the two-stage RSVP workflow
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import time
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from weddingplanner.core.config import settings
from weddingplanner.models import (
    Ceremony, CoupleMessage, Guest, GuestCeremony, GuestMealSelection, MealOption,
    EmailTemplate, TravelInfo, WeddingEvent
)
from weddingplanner.schemas.rsvp import RsvpStage1Request, RsvpStage2Request
from weddingplanner.services.accommodation_service import AccommodationService
from weddingplanner.services.email_service import EmailService
from weddingplanner.services.guest_service import release_allocations
from weddingplanner.services.template_service import TemplateService
from weddingplanner.services.provision import HIDDEN, REQUIRED, guest_sections, section_state

logger = logging.getLogger(__name__)

def _sign(payload: str) -> str:
    return hmac.new(settings.RSVP_SECRET_KEY.encode(), payload.encode(), hashlib.sha256).hexdigest()

class RsvpTokenService:
    """base64url("guest:event:timestamp_ms:random_hex:hmac_hex") tokens"""

    @staticmethod
    def generate_token(guest_id: int, event_id: int, timestamp_ms: Optional[int] = None) -> str:
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        payload = f"{guest_id}:{event_id}:{timestamp_ms}:{secrets.token_hex(16)}"
        raw = f"{payload}:{_sign(payload)}".encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    @staticmethod
    def verify_token(token: str, now_ms: Optional[int] = None) -> Optional[Dict[str, int]]:
        """Return guest/event ids, or None for malformed, expired or forged tokens"""
        if not token:
            return None
        try:
            padded = token + "=" * (-len(token) % 4)
            decoded = base64.urlsafe_b64decode(padded.encode()).decode()
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

        parts = decoded.split(":")
        if len(parts) != 5:
            return None
        guest_str, event_str, timestamp_str, random_hex, signature = parts
        try:
            guest_id, event_id, timestamp = int(guest_str), int(event_str), int(timestamp_str)
        except ValueError:
            return None

        if now_ms is None:
            now_ms = int(time.time() * 1000)
        if now_ms > timestamp + settings.RSVP_TOKEN_EXPIRY_DAYS * 24 * 60 * 60 * 1000:
            logger.info(f"Expired RSVP token for guest {guest_id}")
            return None

        expected = _sign(f"{guest_str}:{event_str}:{timestamp_str}:{random_hex}")
        if not hmac.compare_digest(signature, expected):
            logger.warning(f"Invalid RSVP token signature for guest {guest_id}")
            return None

        return {"guest_id": guest_id, "event_id": event_id, "timestamp": timestamp}

    @staticmethod
    def generate_link(guest: Guest) -> str:
        token = RsvpTokenService.generate_token(guest.id, guest.event_id)
        return f"{settings.BASE_URL.rstrip('/')}/rsvp?token={token}"

class RsvpService:
    """Guest-facing RSVP operations; failures come back as (ok, errors, result)"""

    @staticmethod
    def resolve_token(db: Session, token: str) -> Tuple[Optional[Guest], Optional[WeddingEvent]]:
        payload = RsvpTokenService.verify_token(token)
        if payload is None:
            return None, None
        guest = db.query(Guest).filter(
            Guest.id == payload["guest_id"],
            Guest.event_id == payload["event_id"]
        ).first()
        if guest is None:
            return None, None
        return guest, guest.event

    @staticmethod
    def deadline_passed(event: WeddingEvent, today: Optional[date] = None) -> bool:
        if not event.rsvp_deadline:
            return False
        return (today or date.today()) > event.rsvp_deadline

    @staticmethod
    def verify(db: Session, token: str) -> Optional[Dict[str, Any]]:
        """Everything the RSVP form needs for one guest"""
        guest, event = RsvpService.resolve_token(db, token)
        if guest is None:
            return None

        attendance = {row.ceremony_id: bool(row.attending) for row in guest.ceremonies}
        meals = {row.ceremony_id: row.meal_option_id for row in guest.meal_selections}
        ceremonies = db.query(Ceremony).filter(Ceremony.event_id == event.id).order_by(
            Ceremony.date, Ceremony.start_time
        ).all()

        return {
            "guest": {
                "id": guest.id,
                "first_name": guest.first_name,
                "last_name": guest.last_name,
                "email": guest.email,
                "phone": guest.phone,
                "rsvp_status": guest.rsvp_status,
                "rsvp_stage": guest.rsvp_stage,
                "plus_one_allowed": bool(event.allow_plus_ones and guest.plus_one_allowed),
                "plus_one_confirmed": bool(guest.plus_one_confirmed),
                "plus_one_name": guest.plus_one_name,
                "children_details": guest.children_details or [],
                "dietary_restrictions": guest.dietary_restrictions,
                "allergies": guest.allergies,
            },
            "event": {
                "id": event.id,
                "title": event.title,
                "couple_names": event.couple_names,
                "start_date": event.start_date,
                "end_date": event.end_date,
                "location": event.location,
                "rsvp_deadline": event.rsvp_deadline,
                "allow_plus_ones": bool(event.allow_plus_ones),
                "allow_children_details": bool(event.allow_children_details),
                "accommodation_instructions": event.accommodation_instructions,
                "transport_instructions": event.transport_instructions,
                "flight_instructions": event.flight_instructions,
            },
            "ceremonies": [
                {
                    "id": ceremony.id,
                    "name": ceremony.name,
                    "date": ceremony.date,
                    "start_time": ceremony.start_time,
                    "end_time": ceremony.end_time,
                    "location": ceremony.location,
                    "attire_code": ceremony.attire_code,
                    "attending": attendance.get(ceremony.id, False),
                    "selected_meal_option_id": meals.get(ceremony.id),
                    "meal_options": [
                        {
                            "id": option.id,
                            "name": option.name,
                            "description": option.description,
                            "is_vegetarian": bool(option.is_vegetarian),
                            "is_vegan": bool(option.is_vegan),
                            "is_gluten_free": bool(option.is_gluten_free),
                            "is_nut_free": bool(option.is_nut_free),
                        }
                        for option in ceremony.meal_options
                    ],
                }
                for ceremony in ceremonies
            ],
            "sections": guest_sections(event, guest),
            "deadline_passed": RsvpService.deadline_passed(event),
        }

    @staticmethod
    def submit_stage1(
        db: Session,
        data: RsvpStage1Request,
        today: Optional[date] = None
    ) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
        guest, event = RsvpService.resolve_token(db, data.token)
        if guest is None:
            return False, ["Invalid or expired RSVP link"], None

        if RsvpService.deadline_passed(event, today):
            return False, [f"The RSVP deadline ({event.rsvp_deadline.isoformat()}) has passed"], None

        errors = []
        if data.plus_one_attending and not (event.allow_plus_ones and guest.plus_one_allowed):
            errors.append("A plus one is not allowed for this invitation")

        ceremony_ids = {
            ceremony_id for (ceremony_id,) in
            db.query(Ceremony.id).filter(Ceremony.event_id == event.id).all()
        }
        for answer in data.ceremonies:
            if answer.ceremony_id not in ceremony_ids:
                errors.append(f"Ceremony {answer.ceremony_id} does not belong to this event")
        if errors:
            return False, errors, None

        previously_complete = guest.rsvp_status == "confirmed" and guest.rsvp_stage == 2

        guest.first_name = data.first_name
        guest.last_name = data.last_name
        guest.email = data.email
        if data.phone:
            guest.phone = data.phone
        guest.rsvp_status = data.rsvp_status
        guest.rsvp_date = datetime.utcnow()
        guest.dietary_restrictions = data.dietary_restrictions
        guest.allergies = data.allergies

        if data.rsvp_status == "declined":
            guest.plus_one_confirmed = False
            guest.ceremonies = []
            guest.meal_selections = []
            release_allocations(db, guest)
            guest.rsvp_stage = 2
        else:
            guest.plus_one_confirmed = data.plus_one_attending
            if data.plus_one_attending:
                guest.plus_one_name = data.plus_one_name
                guest.plus_one_email = data.plus_one_email
                guest.plus_one_phone = data.plus_one_phone
            existing = {row.ceremony_id: row for row in guest.ceremonies}
            for answer in data.ceremonies:
                row = existing.get(answer.ceremony_id)
                if row is None:
                    guest.ceremonies.append(GuestCeremony(ceremony_id=answer.ceremony_id, attending=answer.attending))
                else:
                    row.attending = answer.attending
            guest.rsvp_stage = 2 if previously_complete else 1

        if data.message and data.message.strip():
            db.add(CoupleMessage(event_id=event.id, guest_id=guest.id, message=data.message.strip()))

        db.commit()
        db.refresh(guest)
        logger.info(f"Stage 1 RSVP from guest {guest.id} for event {event.id}: {guest.rsvp_status}")

        next_stage = 2 if guest.rsvp_status == "confirmed" else None
        return True, [], {
            "guest_id": guest.id,
            "event_id": event.id,
            "rsvp_status": guest.rsvp_status,
            "rsvp_stage": guest.rsvp_stage,
            "next_stage": next_stage,
            "message": (
                "Thank you! Please continue with your travel and accommodation details."
                if next_stage else "Thank you for letting us know."
            ),
        }

    @staticmethod
    def validate_sections(event: WeddingEvent, guest: Guest, data: RsvpStage2Request) -> List[str]:
        errors = []

        accommodation = section_state(event.accommodation_mode, bool(guest.accommodation_selected))
        if accommodation == HIDDEN and data.needs_accommodation:
            errors.append("Accommodation is not offered for this invitation")
        if accommodation == REQUIRED and data.needs_accommodation is None:
            errors.append("Please tell us whether you need accommodation")
        if event.accommodation_mode == "special_deal" and data.accommodation_preference == "provided":
            errors.append("Accommodation is available at the special rate; please book it yourself")

        transport = section_state(event.transport_mode, bool(guest.transport_selected))
        if transport == HIDDEN and data.needs_transportation:
            errors.append("Transportation is not offered for this invitation")
        if transport == REQUIRED and data.needs_transportation is None:
            errors.append("Please tell us whether you need transportation")
        if event.transport_mode == "special_deal" and data.transportation_preference == "provided":
            errors.append("Transportation is available at the special rate; please arrange it yourself")

        flight = section_state(event.flight_mode, bool(guest.transport_selected))
        if flight == HIDDEN and data.flight_details is not None:
            errors.append("Flight details are not collected for this invitation")
        if flight == REQUIRED and data.travel_mode is None:
            errors.append("Please tell us how you will travel")

        travel_shown = transport != HIDDEN or flight != HIDDEN
        has_travel = any([
            data.travel_mode, data.arrival_date, data.arrival_time, data.arrival_location,
            data.departure_date, data.departure_time, data.departure_location
        ])
        if not travel_shown and has_travel:
            errors.append("Travel details are not collected for this invitation")

        return errors

    @staticmethod
    def submit_stage2(
        db: Session,
        data: RsvpStage2Request
    ) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
        guest, event = RsvpService.resolve_token(db, data.token)
        if guest is None:
            return False, ["Invalid or expired RSVP link"], None
        if guest.rsvp_status != "confirmed":
            return False, ["Travel and accommodation details are only collected from confirmed guests"], None

        errors = RsvpService.validate_sections(event, guest, data)

        if data.children_details and not event.allow_children_details:
            errors.append("Children details are not collected for this event")

        attending = {row.ceremony_id for row in guest.ceremonies if row.attending}
        options = {}
        for selection in data.meal_selections:
            option = db.query(MealOption).filter(
                MealOption.id == selection.meal_option_id,
                MealOption.event_id == event.id
            ).first()
            if option is None or option.ceremony_id != selection.ceremony_id:
                errors.append(f"Meal option {selection.meal_option_id} is not served at ceremony {selection.ceremony_id}")
            elif selection.ceremony_id not in attending:
                errors.append(f"You are not attending ceremony {selection.ceremony_id}")
            options[selection.ceremony_id] = selection

        if errors:
            return False, errors, None

        guest.needs_accommodation = bool(data.needs_accommodation)
        guest.accommodation_preference = data.accommodation_preference if data.needs_accommodation else None
        guest.accommodation_notes = data.accommodation_notes
        guest.needs_transportation = bool(data.needs_transportation)
        guest.transportation_preference = data.transportation_preference if data.needs_transportation else None
        guest.transportation_notes = data.transportation_notes
        guest.special_requests = data.special_requests
        release_allocations(
            db, guest,
            rooms=not (guest.needs_accommodation and guest.accommodation_preference == "provided"),
            transport=not guest.needs_transportation
        )
        if data.children_details is not None:
            guest.children_details = [child.model_dump() for child in data.children_details]

        existing = {row.ceremony_id: row for row in guest.meal_selections}
        for ceremony_id, selection in options.items():
            row = existing.get(ceremony_id)
            if row is None:
                guest.meal_selections.append(GuestMealSelection(
                    ceremony_id=ceremony_id,
                    meal_option_id=selection.meal_option_id,
                    notes=selection.notes
                ))
            else:
                row.meal_option_id = selection.meal_option_id
                row.notes = selection.notes

        travel = guest.travel_info or TravelInfo(guest_id=guest.id)
        flight = data.flight_details
        travel.travel_mode = data.travel_mode
        travel.flight_number = flight.flight_number if flight else None
        travel.airline = flight.airline if flight else None
        travel.arrival_date = data.arrival_date
        travel.arrival_time = data.arrival_time
        travel.arrival_location = (
            data.arrival_location
            or (flight.arrival_airport if flight else None)
            or (event.default_arrival_location if data.needs_transportation else None)
        )
        travel.departure_date = data.departure_date
        travel.departure_time = data.departure_time
        travel.departure_location = (
            data.departure_location
            or (flight.departure_airport if flight else None)
            or (event.default_departure_location if data.needs_transportation else None)
        )
        travel.needs_transportation = bool(data.needs_transportation)
        travel.transportation_type = data.transportation_type if data.needs_transportation else None
        guest.travel_info = travel

        guest.rsvp_stage = 2
        db.commit()
        db.refresh(guest)
        logger.info(f"Stage 2 RSVP completed by guest {guest.id} for event {event.id}")

        allocation = None
        if settings.AUTO_ASSIGN_ROOMS and guest.needs_accommodation and guest.accommodation_preference == "provided":
            allocation = AccommodationService.auto_assign_guest(db, event, guest)

        return True, [], {
            "guest_id": guest.id,
            "event_id": event.id,
            "rsvp_status": guest.rsvp_status,
            "rsvp_stage": guest.rsvp_stage,
            "room_allocation": {
                "id": allocation.id,
                "accommodation_id": allocation.accommodation_id,
                "needs_review": bool(allocation.needs_review),
                "early_check_in": bool(allocation.early_check_in),
            } if allocation else None,
        }

    @staticmethod
    def send_invitations(
        db: Session,
        event: WeddingEvent,
        guests: List[Guest],
        template: EmailTemplate
    ) -> Dict[str, Any]:
        """Email each guest their personal RSVP link using the given template"""
        style = TemplateService.get_default_style(db, event.id)
        results = []
        for guest in guests:
            link = RsvpTokenService.generate_link(guest)
            values = TemplateService.build_values(event, guest, rsvp_link=link)
            rendered = TemplateService.render(template, values, style)
            outcome = EmailService.send(
                guest.email,
                guest.full_name,
                rendered["subject"],
                rendered["body_html"],
                rendered["body_text"],
                from_email=event.email_from,
                from_name=event.couple_names,
                reply_to=event.email_reply_to
            )
            results.append({
                "guest_id": guest.id,
                "email": guest.email,
                "status": outcome.status,
                "error": outcome.error,
            })

        counts = {status: sum(1 for r in results if r["status"] == status) for status in ("sent", "failed", "skipped")}
        logger.info(f"Invitations for event {event.id}: {counts}")
        return {"results": results, **counts}
