"""
Email template variables, rendering and defaults
"""

import logging
import re
from typing import Dict, List, Optional

import jinja2
from markupsafe import escape
from sqlalchemy.orm import Session

from weddingplanner.models import EmailStyle, EmailTemplate, Guest, WeddingEvent

logger = logging.getLogger(__name__)

VARIABLE_PATTERN = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")

# name -> (description, placeholder shown when there is no value)
TEMPLATE_VARIABLES: Dict[str, Dict[str, tuple]] = {
    "guest": {
        "guest_name": ("Guest full name", "[Guest Name]"),
        "guest_first_name": ("Guest first name", "[First Name]"),
        "guest_last_name": ("Guest last name", "[Last Name]"),
        "guest_email": ("Guest email address", "[Email]"),
        "guest_phone": ("Guest phone number", "[Phone]"),
        "plus_one_name": ("Name of the guest's plus one", "[Plus One Name]"),
    },
    "event": {
        "event_name": ("Wedding event title", "[Event Name]"),
        "couple_names": ("Couple names together", "[Couple Names]"),
        "bride_name": ("Bride name", "[Bride Name]"),
        "groom_name": ("Groom name", "[Groom Name]"),
        "start_date": ("Wedding start date", "[Start Date]"),
        "end_date": ("Wedding end date", "[End Date]"),
        "location": ("Wedding location", "[Location]"),
        "description": ("Wedding description", "[Description]"),
    },
    "rsvp": {
        "rsvp_deadline": ("RSVP deadline date", "[RSVP Deadline]"),
        "rsvp_link": ("Personal RSVP link", "[RSVP Link]"),
        "rsvp_status": ("Current RSVP status", "[RSVP Status]"),
    },
    "accommodation": {
        "hotel_name": ("Hotel name", "[Hotel Name]"),
        "hotel_address": ("Hotel address", "[Hotel Address]"),
        "hotel_phone": ("Hotel phone number", "[Hotel Phone]"),
        "hotel_website": ("Hotel website", "[Hotel Website]"),
        "booking_instructions": ("Hotel booking instructions", "[Booking Instructions]"),
        "special_rates": ("Special hotel rates", "[Special Rates]"),
        "room_type": ("Allocated room type", "[Room Type]"),
        "check_in_date": ("Allocated check-in date", "[Check-in Date]"),
        "check_out_date": ("Allocated check-out date", "[Check-out Date]"),
    },
    "transport": {
        "transport_provider_name": ("Transport provider name", "[Transport Provider]"),
        "transport_provider_contact": ("Transport provider contact", "[Provider Contact]"),
        "pickup_date": ("Assigned pickup date", "[Pickup Date]"),
        "pickup_time": ("Assigned pickup time slot", "[Pickup Time]"),
        "pickup_location": ("Assigned pickup location", "[Pickup Location]"),
    },
    "flight": {
        "flight_number": ("Guest flight number", "[Flight Number]"),
        "airline": ("Guest airline", "[Airline]"),
        "arrival_date": ("Guest arrival date", "[Arrival Date]"),
        "arrival_time": ("Guest arrival time", "[Arrival Time]"),
        "flight_instructions": ("Flight coordination information", "[Flight Information]"),
        "recommended_airlines": ("Recommended airlines", "[Recommended Airlines]"),
        "airline_discount_codes": ("Airline discount codes", "[Discount Codes]"),
    },
}

SAMPLE_GUEST = {
    "guest_name": "Priya Sharma",
    "guest_first_name": "Priya",
    "guest_last_name": "Sharma",
    "guest_email": "priya@example.com",
    "guest_phone": "+91 98765 43210",
    "rsvp_status": "confirmed",
}

# <style> is raw text, so style values go in unescaped; the EmailStyle schemas restrict them
STYLE_LAYOUT = jinja2.Environment(autoescape=True).from_string("""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
body { margin: 0; background: {{ style.body_background | safe }}; color: {{ style.text_color | safe }}; font-family: {{ style.font_family | safe }}; font-size: {{ style.font_size | safe }}; }
a { color: {{ style.link_color | safe }}; }
.button { background: {{ style.button_color | safe }}; color: {{ style.button_text_color | safe }}; padding: 10px 18px; text-decoration: none; border-radius: 4px; }
.container { max-width: 600px; margin: 0 auto; border: 1px solid {{ style.border_color | safe }}; }
.header { background: {{ style.header_background | safe }}; padding: 16px; text-align: center; }
.content { padding: 24px; }
.footer { background: {{ style.footer_background | safe }}; padding: 12px; font-size: 12px; text-align: center; }
{% if style.css %}{{ style.css | safe }}{% endif %}
</style>
</head>
<body>
<div class="container">
<div class="header">{% if style.header_logo %}<img src="{{ style.header_logo }}" alt="{{ title }}">{% else %}<h2>{{ title }}</h2>{% endif %}</div>
<div class="content">{{ body | safe }}</div>
{% if style.footer_text %}<div class="footer">{{ style.footer_text }}</div>{% endif %}
</div>
</body>
</html>""")

DEFAULT_STYLE = {
    "header_logo": None,
    "header_background": "#FFFFFF",
    "body_background": "#FFFFFF",
    "text_color": "#000000",
    "link_color": "#0000FF",
    "button_color": "#4CAF50",
    "button_text_color": "#FFFFFF",
    "font_family": "Arial, sans-serif",
    "font_size": "16px",
    "border_color": "#DDDDDD",
    "footer_text": None,
    "footer_background": "#F5F5F5",
    "css": None,
}

DEFAULT_TEMPLATES = [
    {
        "name": "Wedding Invitation",
        "category": "invitation",
        "description": "Initial invitation with the personal RSVP link",
        "subject": "You're invited to {{event_name}}",
        "body_html": (
            "<p>Dear {{guest_first_name}},</p>"
            "<p>{{couple_names}} would love for you to join them at {{location}} "
            "from {{start_date}} to {{end_date}}.</p>"
            "<p>Please let us know by {{rsvp_deadline}}.</p>"
            "<p><a class=\"button\" href=\"{{rsvp_link}}\">RSVP now</a></p>"
        ),
        "body_text": (
            "Dear {{guest_first_name}},\n\n{{couple_names}} would love for you to join them at "
            "{{location}} from {{start_date}} to {{end_date}}.\n\nPlease RSVP by {{rsvp_deadline}}: "
            "{{rsvp_link}}"
        ),
    },
    {
        "name": "RSVP Confirmation",
        "category": "confirmation",
        "description": "Sent once a guest completes their RSVP",
        "subject": "Your RSVP for {{event_name}}",
        "body_html": (
            "<p>Dear {{guest_name}},</p>"
            "<p>Thank you for your response. Your RSVP status is <strong>{{rsvp_status}}</strong>.</p>"
            "<p>You can review your answers at any time: <a href=\"{{rsvp_link}}\">{{rsvp_link}}</a></p>"
        ),
        "body_text": (
            "Dear {{guest_name}},\n\nThank you for your response. Your RSVP status is "
            "{{rsvp_status}}.\n\nReview your answers: {{rsvp_link}}"
        ),
    },
    {
        "name": "RSVP Reminder",
        "category": "reminder",
        "description": "Nudge for guests who have not answered yet",
        "subject": "Reminder: please RSVP for {{event_name}} by {{rsvp_deadline}}",
        "body_html": (
            "<p>Dear {{guest_first_name}},</p>"
            "<p>We haven't heard from you yet. Please RSVP by {{rsvp_deadline}}.</p>"
            "<p><a class=\"button\" href=\"{{rsvp_link}}\">RSVP now</a></p>"
        ),
        "body_text": (
            "Dear {{guest_first_name}},\n\nWe haven't heard from you yet. Please RSVP by "
            "{{rsvp_deadline}}: {{rsvp_link}}"
        ),
    },
    {
        "name": "Accommodation Details",
        "category": "accommodation",
        "description": "Hotel and room information",
        "subject": "Your stay for {{event_name}}",
        "body_html": (
            "<p>Dear {{guest_name}},</p>"
            "<p>You are staying at {{hotel_name}}, {{hotel_address}} in a {{room_type}} "
            "from {{check_in_date}} to {{check_out_date}}.</p>"
            "<p>{{booking_instructions}}</p>"
        ),
        "body_text": (
            "Dear {{guest_name}},\n\nYou are staying at {{hotel_name}}, {{hotel_address}} in a "
            "{{room_type}} from {{check_in_date}} to {{check_out_date}}.\n\n{{booking_instructions}}"
        ),
    },
    {
        "name": "Travel Details",
        "category": "travel",
        "description": "Pickup and flight information",
        "subject": "Travel arrangements for {{event_name}}",
        "body_html": (
            "<p>Dear {{guest_name}},</p>"
            "<p>We have your arrival on {{arrival_date}} at {{arrival_time}} ({{airline}} {{flight_number}}).</p>"
            "<p>Pickup: {{pickup_date}}, {{pickup_time}} from {{pickup_location}}. "
            "Provider: {{transport_provider_name}} ({{transport_provider_contact}}).</p>"
        ),
        "body_text": (
            "Dear {{guest_name}},\n\nArrival: {{arrival_date}} {{arrival_time}} ({{airline}} "
            "{{flight_number}}).\nPickup: {{pickup_date}}, {{pickup_time}} from {{pickup_location}}.\n"
            "Provider: {{transport_provider_name}} ({{transport_provider_contact}})."
        ),
    },
]

def format_date(value) -> Optional[str]:
    if not value:
        return None
    return value.strftime("%A, %B %d, %Y")

class TemplateService:
    """Variable substitution and template rendering"""

    @staticmethod
    def variable_catalogue() -> Dict[str, List[Dict[str, str]]]:
        return {
            category: [
                {"name": name, "description": description, "placeholder": placeholder}
                for name, (description, placeholder) in variables.items()
            ]
            for category, variables in TEMPLATE_VARIABLES.items()
        }

    @staticmethod
    def placeholders() -> Dict[str, str]:
        return {
            name: placeholder
            for variables in TEMPLATE_VARIABLES.values()
            for name, (_, placeholder) in variables.items()
        }

    @staticmethod
    def extract_variables(content: str) -> List[str]:
        found = []
        for name in VARIABLE_PATTERN.findall(content or ""):
            if name not in found:
                found.append(name)
        return found

    @staticmethod
    def substitute(content: str, values: Dict[str, Optional[str]], html_escape: bool = False) -> str:
        """
        Replace {{name}} placeholders.

        Known variables without a value render their bracketed placeholder,
        unknown names are left as written. With html_escape the values are
        escaped, for content that ends up in an HTML body.
        """
        if not content:
            return content or ""
        placeholders = TemplateService.placeholders()

        def replace(match):
            name = match.group(1)
            value = values.get(name)
            if value not in (None, ""):
                return str(escape(value)) if html_escape else str(value)
            if name in placeholders:
                return placeholders[name]
            return match.group(0)

        return VARIABLE_PATTERN.sub(replace, content)

    @staticmethod
    def event_values(event: Optional[WeddingEvent]) -> Dict[str, Optional[str]]:
        if event is None:
            return {}
        return {
            "event_name": event.title,
            "couple_names": event.couple_names,
            "bride_name": event.bride_name,
            "groom_name": event.groom_name,
            "start_date": format_date(event.start_date),
            "end_date": format_date(event.end_date),
            "location": event.location,
            "description": event.description,
            "rsvp_deadline": format_date(event.rsvp_deadline),
            "hotel_name": event.accommodation_hotel_name,
            "hotel_address": event.accommodation_hotel_address,
            "hotel_phone": event.accommodation_hotel_phone,
            "hotel_website": event.accommodation_hotel_website,
            "booking_instructions": event.accommodation_instructions,
            "special_rates": event.accommodation_special_rates,
            "transport_provider_name": event.transport_provider_name,
            "transport_provider_contact": event.transport_provider_contact,
            "flight_instructions": event.flight_instructions,
            "recommended_airlines": event.recommended_airlines,
            "airline_discount_codes": event.airline_discount_codes,
        }

    @staticmethod
    def guest_values(guest: Optional[Guest]) -> Dict[str, Optional[str]]:
        if guest is None:
            return {}
        values = {
            "guest_name": guest.full_name,
            "guest_first_name": guest.first_name,
            "guest_last_name": guest.last_name,
            "guest_email": guest.email,
            "guest_phone": guest.phone,
            "plus_one_name": guest.plus_one_name if guest.plus_one_confirmed else None,
            "rsvp_status": guest.rsvp_status,
        }

        if guest.room_allocations:
            allocation = guest.room_allocations[0]
            room = allocation.accommodation
            values["room_type"] = room.room_type
            values["check_in_date"] = format_date(allocation.check_in_date)
            values["check_out_date"] = format_date(allocation.check_out_date)
            if room.hotel:
                values["hotel_name"] = room.hotel.name
                values["hotel_address"] = room.hotel.address
                values["hotel_phone"] = room.hotel.phone
                values["hotel_website"] = room.hotel.website

        if guest.transport_allocations:
            group = guest.transport_allocations[0].group
            values["pickup_date"] = format_date(group.pickup_date)
            values["pickup_time"] = group.pickup_time_slot
            values["pickup_location"] = group.pickup_location

        travel = guest.travel_info
        if travel:
            values["flight_number"] = travel.flight_number
            values["airline"] = travel.airline
            values["arrival_date"] = format_date(travel.arrival_date)
            values["arrival_time"] = travel.arrival_time

        return values

    @staticmethod
    def build_values(
        event: Optional[WeddingEvent],
        guest: Optional[Guest] = None,
        rsvp_link: Optional[str] = None,
        custom_variables: Optional[Dict[str, str]] = None
    ) -> Dict[str, Optional[str]]:
        """Merge event, guest, link and custom values; later sources win"""
        values = TemplateService.event_values(event)
        for key, value in TemplateService.guest_values(guest).items():
            if value not in (None, ""):
                values[key] = value
        if rsvp_link:
            values["rsvp_link"] = rsvp_link
        values.update(custom_variables or {})
        return values

    @staticmethod
    def get_default_style(db: Session, event_id: int) -> Optional[EmailStyle]:
        return db.query(EmailStyle).filter(
            EmailStyle.event_id == event_id,
            EmailStyle.is_default == True
        ).first()

    @staticmethod
    def wrap_html(body_html: str, style: Optional[EmailStyle], title: str = "") -> str:
        """Place rendered HTML inside the style layout"""
        if style is None:
            style_values = DEFAULT_STYLE
        else:
            style_values = {key: getattr(style, key) or default for key, default in DEFAULT_STYLE.items()}
        return STYLE_LAYOUT.render(style=style_values, body=body_html, title=title)

    @staticmethod
    def render(
        template: EmailTemplate,
        values: Dict[str, Optional[str]],
        style: Optional[EmailStyle] = None
    ) -> Dict[str, str]:
        subject = TemplateService.substitute(template.subject, values)
        body_html = TemplateService.substitute(template.body_html, values, html_escape=True)
        return {
            "subject": subject,
            "body_html": TemplateService.wrap_html(body_html, style, title=subject),
            "body_text": TemplateService.substitute(template.body_text, values),
        }

    @staticmethod
    def preview(
        db: Session,
        event: WeddingEvent,
        template: EmailTemplate,
        guest: Optional[Guest] = None,
        style: Optional[EmailStyle] = None,
        custom_variables: Optional[Dict[str, str]] = None,
        rsvp_link: Optional[str] = None
    ) -> Dict[str, str]:
        """Render with a real guest, or sample guest values when none is given"""
        values = TemplateService.build_values(event, guest, rsvp_link, custom_variables)
        if guest is None:
            for key, value in SAMPLE_GUEST.items():
                values.setdefault(key, value)
            values.setdefault("rsvp_link", "https://example.com/rsvp?token=sample")
        if style is None:
            style = TemplateService.get_default_style(db, event.id)
        return TemplateService.render(template, values, style)

    @staticmethod
    def seed_defaults(db: Session, event: WeddingEvent) -> int:
        """Create the system templates and a default style for a new event"""
        for data in DEFAULT_TEMPLATES:
            db.add(EmailTemplate(event_id=event.id, is_default=True, is_system=True, **data))
        db.add(EmailStyle(
            event_id=event.id,
            name="Classic",
            description="Default email style",
            footer_text=f"{event.couple_names} | {event.location}",
            is_default=True
        ))
        db.commit()
        logger.info(f"Seeded {len(DEFAULT_TEMPLATES)} email templates for event {event.id}")
        return len(DEFAULT_TEMPLATES)

    @staticmethod
    def get_template_for_category(db: Session, event_id: int, category: str) -> Optional[EmailTemplate]:
        """Prefer the default template of a category, otherwise the newest"""
        query = db.query(EmailTemplate).filter(
            EmailTemplate.event_id == event_id,
            EmailTemplate.category == category
        )
        return query.filter(EmailTemplate.is_default == True).first() or \
            query.order_by(EmailTemplate.id.desc()).first()

    @staticmethod
    def set_default_style(db: Session, style: EmailStyle):
        """Make one style the event default and clear the flag elsewhere"""
        db.query(EmailStyle).filter(
            EmailStyle.event_id == style.event_id,
            EmailStyle.id != style.id
        ).update({EmailStyle.is_default: False}, synchronize_session=False)
        style.is_default = True
