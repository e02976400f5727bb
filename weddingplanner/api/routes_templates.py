"""
Communication routes - email templates, styles, RSVP follow-ups
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from weddingplanner.core.db import get_db
from weddingplanner.models import EmailStyle, EmailTemplate, RsvpFollowupTemplate, WeddingEvent
from weddingplanner.schemas.communication import (
    EmailStyleCreate, EmailStyleUpdate, EmailTemplateCreate, EmailTemplateUpdate,
    FollowupTemplateCreate, FollowupTemplateUpdate, TemplatePreviewRequest
)
from weddingplanner.services.followup_service import FOLLOWUP_TYPES, FollowupService
from weddingplanner.services.repositories import GuestRepo, TemplateRepo
from weddingplanner.services.rsvp_service import RsvpTokenService
from weddingplanner.services.template_service import TemplateService
from weddingplanner.utils.responses import conflict_response, not_found_error, success_response
from weddingplanner.utils.security import get_event_for_user

router = APIRouter()

TEMPLATE_FIELDS = (
    "id", "event_id", "name", "description", "category", "subject", "body_html",
    "body_text", "is_default", "is_system", "created_at", "last_updated"
)
STYLE_FIELDS = (
    "id", "event_id", "name", "description", "header_logo", "header_background", "body_background",
    "text_color", "link_color", "button_color", "button_text_color", "font_family", "font_size",
    "border_color", "footer_text", "footer_background", "css", "is_default", "created_at", "last_updated"
)
FOLLOWUP_FIELDS = (
    "id", "event_id", "type", "email_subject", "email_template", "send_immediately",
    "scheduled_date", "scheduled_time", "enabled", "last_updated"
)

def as_dict(obj, fields) -> dict:
    return {field: getattr(obj, field) for field in fields}

def clear_default_templates(db: Session, template: EmailTemplate):
    """Only one default template per category"""
    db.query(EmailTemplate).filter(
        EmailTemplate.event_id == template.event_id,
        EmailTemplate.category == template.category,
        EmailTemplate.id != template.id
    ).update({EmailTemplate.is_default: False}, synchronize_session=False)

# Email templates

@router.get("/{event_id}/email-templates")
async def list_templates(
    category: Optional[str] = Query(None),
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    query = db.query(EmailTemplate).filter(EmailTemplate.event_id == event.id)
    if category:
        query = query.filter(EmailTemplate.category == category)
    templates = query.order_by(EmailTemplate.category, EmailTemplate.id).all()
    return success_response(
        message="Email templates retrieved",
        data=[as_dict(t, TEMPLATE_FIELDS) for t in templates]
    )

@router.post("/{event_id}/email-templates")
async def create_template(
    data: EmailTemplateCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    template = EmailTemplate(event_id=event.id, is_system=False, **data.model_dump())
    db.add(template)
    db.flush()
    if template.is_default:
        clear_default_templates(db, template)
    db.commit()
    db.refresh(template)
    return success_response(message="Email template created", data=as_dict(template, TEMPLATE_FIELDS), status_code=201)

@router.get("/{event_id}/email-templates/{template_id}")
async def get_template(
    template_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    template = TemplateRepo.get_template(db, event.id, template_id)
    if not template:
        not_found_error("Email template")
    data = as_dict(template, TEMPLATE_FIELDS)
    data["variables"] = TemplateService.extract_variables(
        " ".join(filter(None, [template.subject, template.body_html, template.body_text]))
    )
    return success_response(message="Email template retrieved", data=data)

@router.patch("/{event_id}/email-templates/{template_id}")
async def update_template(
    template_id: int,
    data: EmailTemplateUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    template = TemplateRepo.get_template(db, event.id, template_id)
    if not template:
        not_found_error("Email template")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(template, field, value)
    if template.is_default:
        clear_default_templates(db, template)
    db.commit()
    db.refresh(template)
    return success_response(message="Email template updated", data=as_dict(template, TEMPLATE_FIELDS))

@router.delete("/{event_id}/email-templates/{template_id}")
async def delete_template(
    template_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    template = TemplateRepo.get_template(db, event.id, template_id)
    if not template:
        not_found_error("Email template")
    if template.is_system:
        return conflict_response("System templates cannot be deleted", "system_template")

    db.delete(template)
    db.commit()
    return success_response(message="Email template deleted")

@router.post("/{event_id}/email-templates/{template_id}/preview")
async def preview_template(
    template_id: int,
    data: TemplatePreviewRequest,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Render a template for a guest, or with sample guest data"""
    template = TemplateRepo.get_template(db, event.id, template_id)
    if not template:
        not_found_error("Email template")

    guest = None
    if data.guest_id is not None:
        guest = GuestRepo.get(db, event.id, data.guest_id)
        if not guest:
            not_found_error("Guest")

    style = None
    if data.style_id is not None:
        style = TemplateRepo.get_style(db, event.id, data.style_id)
        if not style:
            not_found_error("Email style")

    rendered = TemplateService.preview(
        db,
        event,
        template,
        guest=guest,
        style=style,
        custom_variables=data.custom_variables,
        rsvp_link=RsvpTokenService.generate_link(guest) if guest else None
    )
    return success_response(message="Template preview rendered", data=rendered)

# Email styles

@router.get("/{event_id}/email-styles")
async def list_styles(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    styles = db.query(EmailStyle).filter(EmailStyle.event_id == event.id).order_by(EmailStyle.id).all()
    return success_response(message="Email styles retrieved", data=[as_dict(s, STYLE_FIELDS) for s in styles])

@router.post("/{event_id}/email-styles")
async def create_style(
    data: EmailStyleCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    style = EmailStyle(event_id=event.id, **data.model_dump())
    db.add(style)
    db.flush()
    if style.is_default:
        TemplateService.set_default_style(db, style)
    db.commit()
    db.refresh(style)
    return success_response(message="Email style created", data=as_dict(style, STYLE_FIELDS), status_code=201)

@router.patch("/{event_id}/email-styles/{style_id}")
async def update_style(
    style_id: int,
    data: EmailStyleUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    style = TemplateRepo.get_style(db, event.id, style_id)
    if not style:
        not_found_error("Email style")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(style, field, value)
    if style.is_default:
        TemplateService.set_default_style(db, style)
    db.commit()
    db.refresh(style)
    return success_response(message="Email style updated", data=as_dict(style, STYLE_FIELDS))

@router.delete("/{event_id}/email-styles/{style_id}")
async def delete_style(
    style_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    style = TemplateRepo.get_style(db, event.id, style_id)
    if not style:
        not_found_error("Email style")

    db.delete(style)
    db.commit()
    return success_response(message="Email style deleted")

# RSVP follow-up templates

@router.get("/{event_id}/followup-templates")
async def list_followups(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Every follow-up type, creating default text for missing ones"""
    templates = [
        FollowupService.get_or_create_template(db, event.id, template_type)
        for template_type in FOLLOWUP_TYPES.values()
    ]
    return success_response(message="Follow-up templates retrieved", data=[as_dict(t, FOLLOWUP_FIELDS) for t in templates])

@router.post("/{event_id}/followup-templates")
async def create_followup(
    data: FollowupTemplateCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    existing = db.query(RsvpFollowupTemplate).filter(
        RsvpFollowupTemplate.event_id == event.id,
        RsvpFollowupTemplate.type == data.type
    ).first()
    if existing:
        return conflict_response(f"A {data.type} follow-up already exists for this event", "duplicate_followup")

    template = RsvpFollowupTemplate(event_id=event.id, **data.model_dump())
    db.add(template)
    db.commit()
    db.refresh(template)
    return success_response(message="Follow-up template created", data=as_dict(template, FOLLOWUP_FIELDS), status_code=201)

@router.patch("/{event_id}/followup-templates/{template_id}")
async def update_followup(
    template_id: int,
    data: FollowupTemplateUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    template = TemplateRepo.get_followup(db, event.id, template_id)
    if not template:
        not_found_error("Follow-up template")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(template, field, value)
    db.commit()
    db.refresh(template)
    return success_response(message="Follow-up template updated", data=as_dict(template, FOLLOWUP_FIELDS))

@router.delete("/{event_id}/followup-templates/{template_id}")
async def delete_followup(
    template_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    template = TemplateRepo.get_followup(db, event.id, template_id)
    if not template:
        not_found_error("Follow-up template")

    db.delete(template)
    db.commit()
    return success_response(message="Follow-up template deleted")
