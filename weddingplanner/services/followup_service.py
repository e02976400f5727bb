"""
RSVP follow-up messages
"""

import html
import logging
from typing import Optional

from sqlalchemy.orm import Session

from weddingplanner.models import Guest, RsvpFollowupLog, RsvpFollowupTemplate, WeddingEvent
from weddingplanner.services.email_service import EmailService
from weddingplanner.services.template_service import TemplateService

logger = logging.getLogger(__name__)

FOLLOWUP_TYPES = {
    "confirmed": "attendance_confirmed",
    "declined": "attendance_declined",
    "pending": "attendance_pending",
    "maybe": "attendance_maybe",
}

DEFAULT_SUBJECTS = {
    "attendance_confirmed": "Thank you for confirming your attendance",
    "attendance_declined": "We will miss you - Response received",
    "attendance_pending": "Your RSVP is pending - Additional information required",
    "attendance_maybe": "Thank you for your initial response",
}

DEFAULT_MESSAGES = {
    "attendance_confirmed": """Dear {{guest_name}},

Thank you for confirming your attendance to our wedding celebration. We're delighted that you'll be joining us on our special day!

We'll be sending you more details about the event schedule, venue information and accommodation options in the coming weeks.

If you have any dietary restrictions or special requirements, please let us know as soon as possible.

Looking forward to celebrating with you!

Warm regards,
{{couple_names}}""",
    "attendance_declined": """Dear {{guest_name}},

Thank you for letting us know that you won't be able to attend our wedding celebration. While we'll miss having you there, we completely understand.

We appreciate your response and will keep you in our thoughts on our special day.

Wishing you all the best,
{{couple_names}}""",
    "attendance_pending": """Dear {{guest_name}},

Thank you for starting your RSVP for our wedding. Your response is still pending completion.

You can complete your RSVP by visiting: {{rsvp_link}}

Looking forward to your response,
{{couple_names}}""",
    "attendance_maybe": """Dear {{guest_name}},

Thank you for your initial response to our wedding invitation.

We'd appreciate it if you could let us know your final decision by {{rsvp_deadline}}.

Best wishes,
{{couple_names}}""",
}

class FollowupService:
    """Pick, render and send the follow-up matching a guest's RSVP status"""

    @staticmethod
    def get_or_create_template(db: Session, event_id: int, template_type: str) -> RsvpFollowupTemplate:
        template = db.query(RsvpFollowupTemplate).filter(
            RsvpFollowupTemplate.event_id == event_id,
            RsvpFollowupTemplate.type == template_type
        ).first()
        if template:
            return template

        template = RsvpFollowupTemplate(
            event_id=event_id,
            type=template_type,
            email_subject=DEFAULT_SUBJECTS[template_type],
            email_template=DEFAULT_MESSAGES[template_type],
            send_immediately=True,
            enabled=True
        )
        db.add(template)
        db.commit()
        db.refresh(template)
        logger.info(f"Created default {template_type} follow-up template for event {event_id}")
        return template

    @staticmethod
    def _log(db: Session, guest: Guest, template: RsvpFollowupTemplate, status: str, error: Optional[str] = None) -> RsvpFollowupLog:
        log = RsvpFollowupLog(
            guest_id=guest.id,
            template_id=template.id,
            channel="email",
            status=status,
            error_message=error
        )
        db.add(log)
        db.commit()
        db.refresh(log)
        return log

    @staticmethod
    def process(
        db: Session,
        event: WeddingEvent,
        guest: Guest,
        rsvp_link: Optional[str] = None
    ) -> Optional[RsvpFollowupLog]:
        """Send the follow-up for the guest's status; returns the log row"""
        template_type = FOLLOWUP_TYPES.get((guest.rsvp_status or "").lower())
        if template_type is None:
            return None

        template = FollowupService.get_or_create_template(db, event.id, template_type)
        if not template.enabled:
            logger.info(f"Follow-up {template_type} disabled for event {event.id}")
            return None

        if not template.send_immediately:
            return FollowupService._log(db, guest, template, "scheduled")

        values = TemplateService.build_values(event, guest, rsvp_link)
        subject = TemplateService.substitute(template.email_subject or DEFAULT_SUBJECTS[template_type], values)
        text = TemplateService.substitute(template.email_template or DEFAULT_MESSAGES[template_type], values)
        body_html = TemplateService.wrap_html(
            "".join(f"<p>{html.escape(part)}</p>" for part in text.split("\n\n")),
            TemplateService.get_default_style(db, event.id),
            title=subject
        )

        result = EmailService.send(
            guest.email,
            guest.full_name,
            subject,
            body_html,
            text,
            from_email=event.email_from,
            from_name=event.couple_names,
            reply_to=event.email_reply_to
        )
        logger.info(f"Follow-up {template_type} for guest {guest.id}: {result.status}")
        return FollowupService._log(db, guest, template, result.status, result.error)
