"""
Accommodation routes - hotels, room types, allocations, auto-assignment
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from weddingplanner.api.ws import websocket_manager
from weddingplanner.core.db import get_db
from weddingplanner.models import Accommodation, Hotel, WeddingEvent
from weddingplanner.schemas.accommodation import (
    AccommodationCreate, AccommodationResponse, AccommodationUpdate, AllocationCreate,
    AllocationReassign, AllocationResponse, AllocationUpdate, HotelCreate, HotelResponse,
    HotelUpdate
)
from weddingplanner.services.accommodation_service import AccommodationService
from weddingplanner.services.notification_service import NotificationService
from weddingplanner.services.repositories import AccommodationRepo, GuestRepo
from weddingplanner.utils.responses import conflict_response, not_found_error, success_response
from weddingplanner.utils.security import get_event_for_user

router = APIRouter()

notifications = NotificationService(websocket_manager)

def allocation_data(allocation) -> dict:
    data = AllocationResponse.model_validate(allocation).model_dump()
    data["guest_name"] = allocation.guest.full_name
    data["room_type_name"] = allocation.accommodation.name
    return data

# Hotels

@router.get("/{event_id}/hotels")
async def list_hotels(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    hotels = db.query(Hotel).filter(Hotel.event_id == event.id).order_by(Hotel.id).all()
    return success_response(
        message="Hotels retrieved successfully",
        data=[HotelResponse.model_validate(h).model_dump() for h in hotels]
    )

@router.post("/{event_id}/hotels")
async def create_hotel(
    data: HotelCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    hotel = Hotel(event_id=event.id, **data.model_dump())
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    return success_response(
        message="Hotel created successfully",
        data=HotelResponse.model_validate(hotel).model_dump(),
        status_code=201
    )

@router.patch("/{event_id}/hotels/{hotel_id}")
async def update_hotel(
    hotel_id: int,
    data: HotelUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    hotel = AccommodationRepo.get_hotel(db, event.id, hotel_id)
    if not hotel:
        not_found_error("Hotel")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(hotel, field, value)
    db.commit()
    db.refresh(hotel)
    return success_response(message="Hotel updated successfully", data=HotelResponse.model_validate(hotel).model_dump())

@router.delete("/{event_id}/hotels/{hotel_id}")
async def delete_hotel(
    hotel_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Deleting a hotel removes its room types and their allocations"""
    hotel = AccommodationRepo.get_hotel(db, event.id, hotel_id)
    if not hotel:
        not_found_error("Hotel")

    db.delete(hotel)
    db.commit()
    return success_response(message="Hotel deleted successfully")

# Room types

@router.get("/{event_id}/accommodations")
async def list_room_types(
    hotel_id: Optional[int] = Query(None),
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    query = db.query(Accommodation).filter(Accommodation.event_id == event.id)
    if hotel_id is not None:
        query = query.filter(Accommodation.hotel_id == hotel_id)
    return success_response(
        message="Room types retrieved successfully",
        data=[AccommodationResponse.model_validate(a).model_dump() for a in query.order_by(Accommodation.id).all()]
    )

@router.post("/{event_id}/accommodations")
async def create_room_type(
    data: AccommodationCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    if data.hotel_id is not None and not AccommodationRepo.get_hotel(db, event.id, data.hotel_id):
        not_found_error("Hotel")

    room = Accommodation(event_id=event.id, allocated_rooms=0, **data.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    return success_response(
        message="Room type created successfully",
        data=AccommodationResponse.model_validate(room).model_dump(),
        status_code=201
    )

@router.patch("/{event_id}/accommodations/{accommodation_id}")
async def update_room_type(
    accommodation_id: int,
    data: AccommodationUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    room = AccommodationRepo.get_room_type(db, event.id, accommodation_id)
    if not room:
        not_found_error("Room type")

    changes = data.model_dump(exclude_unset=True)
    if changes.get("hotel_id") is not None and not AccommodationRepo.get_hotel(db, event.id, changes["hotel_id"]):
        not_found_error("Hotel")
    if "total_rooms" in changes:
        error = AccommodationService.check_total_rooms(room, changes["total_rooms"])
        if error:
            return conflict_response(error, "rooms_in_use")

    for field, value in changes.items():
        setattr(room, field, value)
    db.commit()
    db.refresh(room)
    return success_response(
        message="Room type updated successfully",
        data=AccommodationResponse.model_validate(room).model_dump()
    )

@router.delete("/{event_id}/accommodations/{accommodation_id}")
async def delete_room_type(
    accommodation_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    room = AccommodationRepo.get_room_type(db, event.id, accommodation_id)
    if not room:
        not_found_error("Room type")

    db.delete(room)
    db.commit()
    return success_response(message="Room type deleted successfully")

# Allocations

@router.get("/{event_id}/allocations")
async def list_allocations(
    needs_review: Optional[bool] = Query(None),
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    allocations = AccommodationRepo.list_allocations(db, event.id, needs_review=needs_review)
    return success_response(
        message="Allocations retrieved successfully",
        data=[allocation_data(a) for a in allocations]
    )

@router.post("/{event_id}/allocations")
async def create_allocation(
    data: AllocationCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    allocation, error = AccommodationService.create_allocation(
        db,
        event,
        accommodation_id=data.accommodation_id,
        guest_id=data.guest_id,
        room_number=data.room_number,
        check_in_date=data.check_in_date,
        check_out_date=data.check_out_date,
        special_requests=data.special_requests
    )
    if error:
        return conflict_response(error, "allocation_rejected")
    return success_response(message="Room allocated successfully", data=allocation_data(allocation), status_code=201)

@router.patch("/{event_id}/allocations/{allocation_id}")
async def update_allocation(
    allocation_id: int,
    data: AllocationUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    allocation = AccommodationRepo.get_allocation(db, event.id, allocation_id)
    if not allocation:
        not_found_error("Allocation")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(allocation, field, value)
    db.commit()
    db.refresh(allocation)
    return success_response(message="Allocation updated successfully", data=allocation_data(allocation))

@router.post("/{event_id}/allocations/{allocation_id}/reassign")
async def reassign_allocation(
    allocation_id: int,
    data: AllocationReassign,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    allocation = AccommodationRepo.get_allocation(db, event.id, allocation_id)
    if not allocation:
        not_found_error("Allocation")

    allocation, error = AccommodationService.reassign(
        db, event, allocation, data.accommodation_id, room_number=data.room_number
    )
    if error:
        return conflict_response(error, "reassign_rejected")
    return success_response(message="Allocation reassigned successfully", data=allocation_data(allocation))

@router.post("/{event_id}/allocations/{allocation_id}/approve")
async def approve_allocation(
    allocation_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    allocation = AccommodationRepo.get_allocation(db, event.id, allocation_id)
    if not allocation:
        not_found_error("Allocation")

    allocation = AccommodationService.approve(db, allocation)
    return success_response(message="Allocation approved", data=allocation_data(allocation))

@router.delete("/{event_id}/allocations/{allocation_id}")
async def delete_allocation(
    allocation_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    allocation = AccommodationRepo.get_allocation(db, event.id, allocation_id)
    if not allocation:
        not_found_error("Allocation")

    AccommodationService.delete_allocation(db, allocation)
    return success_response(message="Allocation removed successfully")

@router.post("/{event_id}/allocations/auto-assign")
async def auto_assign_event(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Match every eligible guest to a room type; results wait for review"""
    result = AccommodationService.auto_assign_event(db, event)
    await notifications.rooms_assigned(event.id, len(result["assigned"]), len(result["unassigned"]))
    return success_response(
        message=f"Assigned {len(result['assigned'])} guests, {len(result['unassigned'])} without a free room",
        data={
            "assigned": [allocation_data(a) for a in result["assigned"]],
            "unassigned": [{"id": g.id, "name": g.full_name, "party_size": g.party_size} for g in result["unassigned"]],
        }
    )

@router.post("/{event_id}/guests/{guest_id}/auto-assign")
async def auto_assign_guest(
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    guest = GuestRepo.get(db, event.id, guest_id)
    if not guest:
        not_found_error("Guest")

    if not AccommodationService.is_eligible(event, guest):
        return conflict_response("Guest is not eligible for automatic room assignment", "not_eligible")

    allocation = AccommodationService.auto_assign_guest(db, event, guest)
    if allocation is None:
        return conflict_response("No room type has a free room", "no_rooms")

    await notifications.rooms_assigned(event.id, 1, 0)
    return success_response(message="Room assigned for review", data=allocation_data(allocation))

@router.get("/{event_id}/accommodation-report")
async def accommodation_report(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    return success_response(
        message="Accommodation report generated",
        data=AccommodationService.report(db, event)
    )
