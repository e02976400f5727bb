"""
Guest routes - guest list, Excel import/export, travel records, communication filters
"""

import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from weddingplanner.api.ws import websocket_manager
from weddingplanner.core.config import settings
from weddingplanner.core.db import get_db
from weddingplanner.models import WeddingEvent
from weddingplanner.schemas.guest import GuestCreate, GuestResponse, GuestUpdate, TravelInfoUpdate
from weddingplanner.services.accommodation_service import AccommodationService
from weddingplanner.services.excel_service import ExcelService
from weddingplanner.services.guest_service import GuestService, contact_summary
from weddingplanner.services.notification_service import NotificationService
from weddingplanner.services.repositories import GuestRepo
from weddingplanner.utils.responses import error_response, not_found_error, success_response
from weddingplanner.utils.security import get_event_for_user

logger = logging.getLogger(__name__)

router = APIRouter()

notifications = NotificationService(websocket_manager)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def guest_data(guest) -> dict:
    return GuestResponse.model_validate(guest).model_dump()

def travel_data(travel) -> Optional[dict]:
    if travel is None:
        return None
    return {
        "travel_mode": travel.travel_mode,
        "arrival_date": travel.arrival_date,
        "arrival_time": travel.arrival_time,
        "arrival_location": travel.arrival_location,
        "departure_date": travel.departure_date,
        "departure_time": travel.departure_time,
        "departure_location": travel.departure_location,
        "flight_number": travel.flight_number,
        "airline": travel.airline,
        "needs_transportation": bool(travel.needs_transportation),
        "transportation_type": travel.transportation_type,
    }

@router.get("/{event_id}/guests")
async def search_guests(
    search: Optional[str] = Query(None),
    rsvp_status: Optional[Literal["pending", "confirmed", "declined"]] = Query(None),
    side: Optional[Literal["bride", "groom", "mutual"]] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Search and list guests for an event"""
    query = GuestRepo.search(db, event.id, search=search, rsvp_status=rsvp_status, side=side)

    total = query.count()
    offset = (page - 1) * per_page
    guests = query.offset(offset).limit(per_page).all()

    return success_response(
        message="Guests retrieved successfully",
        data={
            "guests": [guest_data(guest) for guest in guests],
            "pagination": {
                "page": page,
                "per_page": per_page,
                "total": total,
                "pages": (total + per_page - 1) // per_page
            }
        }
    )

@router.post("/{event_id}/guests")
async def create_guest(
    data: GuestCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestService.create(db, event.id, data)
    return success_response(message="Guest created successfully", data=guest_data(guest), status_code=201)

@router.post("/{event_id}/guests/import")
async def import_guests(
    file: UploadFile = File(...),
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Upload an .xlsx guest list; nothing is imported unless every row is valid"""
    if not file.filename or not file.filename.lower().endswith('.xlsx'):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx)",
            error_code="invalid_file",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(
            message=f"File is larger than {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
            error_code="file_too_large",
            status_code=413
        )

    saved_path = ExcelService.save_original_file(file_content, event.id, file.filename)

    success, errors, processed_count = ExcelService.process_excel_upload(
        file_content=file_content,
        event_id=event.id,
        db=db
    )
    if not success:
        return error_response(
            message="Excel file validation failed",
            error_code="validation_failed",
            details=errors,
            status_code=422
        )

    await notifications.guests_imported(event.id, processed_count)

    return success_response(
        message=f"Excel file processed successfully. {processed_count} guests imported.",
        data={
            "processed_count": processed_count,
            "filename": file.filename,
            "stored_as": saved_path
        }
    )

@router.get("/{event_id}/guests/template.xlsx")
async def download_template(event: WeddingEvent = Depends(get_event_for_user)):
    return Response(
        content=ExcelService.create_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=guest_template_{event.id}.xlsx"}
    )

@router.get("/{event_id}/guests/export.xlsx")
async def export_guests(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Export current guest data to Excel"""
    return Response(
        content=ExcelService.export_current_data(event.id, db),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=guest_list_{event.id}.xlsx"}
    )

@router.get("/{event_id}/guests/communication/whatsapp")
async def whatsapp_guests(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guests = GuestService.whatsapp_guests(db, event.id)
    return success_response(
        message="WhatsApp-reachable guests retrieved",
        data={"guests": guests, "total": len(guests)}
    )

@router.get("/{event_id}/guests/communication/side/{side}")
async def guests_by_side(
    side: Literal["bride", "groom", "mutual"],
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guests = GuestService.guests_by_side(db, event.id, side)
    return success_response(
        message=f"Guests on the {side} side retrieved",
        data={"side": side, "guests": guests, "total": len(guests)}
    )

@router.get("/{event_id}/guests/communication/stats")
async def communication_stats(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    return success_response(
        message="Communication statistics retrieved",
        data=GuestService.communication_stats(db, event.id)
    )

@router.get("/{event_id}/guests/{guest_id}")
async def get_guest(
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")

    data = guest_data(guest)
    data["travel_info"] = travel_data(guest.travel_info)
    data["ceremonies"] = [
        {"ceremony_id": row.ceremony_id, "attending": bool(row.attending)}
        for row in guest.ceremonies
    ]
    data["meal_selections"] = [
        {"ceremony_id": row.ceremony_id, "meal_option_id": row.meal_option_id, "notes": row.notes}
        for row in guest.meal_selections
    ]
    return success_response(message="Guest retrieved successfully", data=data)

@router.patch("/{event_id}/guests/{guest_id}")
async def update_guest(
    guest_id: int,
    data: GuestUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")

    guest = GuestService.update(db, guest, data)
    return success_response(message="Guest updated successfully", data=guest_data(guest))

@router.delete("/{event_id}/guests/{guest_id}")
async def delete_guest(
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")

    rooms = [allocation.accommodation for allocation in guest.room_allocations]
    db.delete(guest)
    for room in rooms:
        AccommodationService.sync_allocated_count(db, room)
    db.commit()
    logger.info(f"Deleted guest {guest_id} from event {event.id}")
    return success_response(message="Guest deleted successfully")

@router.get("/{event_id}/guests/{guest_id}/contact")
async def guest_contact(
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Contact details with the effective WhatsApp number"""
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")
    return success_response(message="Guest contact retrieved", data=contact_summary(guest))

@router.get("/{event_id}/guests/{guest_id}/travel")
async def get_travel(
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")
    return success_response(message="Travel info retrieved", data=travel_data(guest.travel_info))

@router.put("/{event_id}/guests/{guest_id}/travel")
async def update_travel(
    guest_id: int,
    data: TravelInfoUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")

    travel = GuestService.update_travel(db, guest, data)
    return success_response(message="Travel info updated", data=travel_data(travel))
