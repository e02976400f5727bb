"""
RSVP routes - public two-stage form endpoints and planner link tools
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from weddingplanner.api.ws import websocket_manager
from weddingplanner.core.db import get_db
from weddingplanner.models import Guest, WeddingEvent
from weddingplanner.schemas.rsvp import (
    GenerateLinksRequest, RsvpStage1Request, RsvpStage2Request, SendInvitesRequest
)
from weddingplanner.services.followup_service import FollowupService
from weddingplanner.services.notification_service import NotificationService
from weddingplanner.services.qr_service import QRService
from weddingplanner.services.repositories import GuestRepo, TemplateRepo
from weddingplanner.services.rsvp_service import RsvpService, RsvpTokenService
from weddingplanner.services.template_service import TemplateService
from weddingplanner.utils.responses import conflict_response, error_response, not_found_error, success_response
from weddingplanner.utils.security import enforce_rate_limit, get_event_for_user

# Public, token-authenticated
router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

# Planner tools under /api/events
planner_router = APIRouter()

notifications = NotificationService(websocket_manager)

def selected_guests(db: Session, event: WeddingEvent, guest_ids=None):
    query = db.query(Guest).filter(Guest.event_id == event.id)
    if guest_ids:
        query = query.filter(Guest.id.in_(guest_ids))
    return query.order_by(Guest.id).all()

@router.get("/verify")
async def verify_token(token: str = Query(...), db: Session = Depends(get_db)):
    """Guest, event, ceremonies and visible sections for an RSVP link"""
    payload = RsvpService.verify(db, token)
    if payload is None:
        return error_response(
            message="Invalid or expired RSVP link",
            error_code="invalid_token",
            status_code=400
        )
    return success_response(message="RSVP link verified", data=payload)

@router.post("/stage1")
async def submit_stage1(data: RsvpStage1Request, db: Session = Depends(get_db)):
    """Attendance answer"""
    ok, errors, result = RsvpService.submit_stage1(db, data)
    if not ok:
        return error_response(
            message="RSVP could not be saved",
            error_code="rsvp_rejected",
            details=errors,
            status_code=400
        )

    guest = db.query(Guest).filter(Guest.id == result["guest_id"]).first()
    log = FollowupService.process(db, guest.event, guest, rsvp_link=RsvpTokenService.generate_link(guest))
    result["followup_status"] = log.status if log else None

    await notifications.rsvp_received(guest, stage=1)
    return success_response(message=result.pop("message"), data=result)

@router.post("/stage2")
async def submit_stage2(data: RsvpStage2Request, db: Session = Depends(get_db)):
    """Travel, accommodation, children and meal details"""
    ok, errors, result = RsvpService.submit_stage2(db, data)
    if not ok:
        return error_response(
            message="RSVP details could not be saved",
            error_code="rsvp_rejected",
            details=errors,
            status_code=400
        )

    guest = db.query(Guest).filter(Guest.id == result["guest_id"]).first()
    await notifications.rsvp_received(guest, stage=2)
    if result["room_allocation"]:
        await notifications.rooms_assigned(guest.event_id, assigned=1, unassigned=0)
    return success_response(message="Thank you! Your RSVP is complete.", data=result)

@planner_router.post("/{event_id}/rsvp/links")
async def generate_links(
    data: GenerateLinksRequest,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """RSVP links for all guests or the listed ones"""
    guests = selected_guests(db, event, data.guest_ids)
    links = [
        {
            "guest_id": guest.id,
            "name": guest.full_name,
            "email": guest.email,
            "rsvp_link": RsvpTokenService.generate_link(guest)
        }
        for guest in guests
    ]
    return success_response(message=f"Generated {len(links)} RSVP links", data=links)

@planner_router.get("/{event_id}/guests/{guest_id}/rsvp-qr.png")
async def rsvp_qr_code(
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")

    qr_bytes = QRService.rsvp_qr_png(RsvpTokenService.generate_link(guest))
    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=rsvp_qr_{guest.id}.png"}
    )

@planner_router.post("/{event_id}/rsvp/send-invites")
async def send_invites(
    data: SendInvitesRequest,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Email invitations with personal RSVP links"""
    if data.template_id is not None:
        template = TemplateRepo.get_template(db, event.id, data.template_id)
        if not template:
            not_found_error("Email template")
    else:
        template = TemplateService.get_template_for_category(db, event.id, "invitation")
        if not template:
            return conflict_response("No invitation template exists for this event", "missing_template")

    guests = selected_guests(db, event, data.guest_ids)
    summary = RsvpService.send_invitations(db, event, guests, template)
    return success_response(
        message=f"Invitations processed: {summary['sent']} sent, {summary['failed']} failed, {summary['skipped']} skipped",
        data=summary
    )
