"""
Transport routes - group generation, manual groups, flight coordination
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from weddingplanner.api.ws import websocket_manager
from weddingplanner.core.db import get_db
from weddingplanner.models import TransportGroup, WeddingEvent
from weddingplanner.schemas.transport import (
    TransportAllocationCreate, TransportGroupCreate, TransportGroupResponse, TransportGroupUpdate
)
from weddingplanner.services.notification_service import NotificationService
from weddingplanner.services.repositories import TransportRepo
from weddingplanner.services.transport_service import TransportService
from weddingplanner.utils.responses import conflict_response, not_found_error, success_response
from weddingplanner.utils.security import get_event_for_user

router = APIRouter()

notifications = NotificationService(websocket_manager)

def group_data(group: TransportGroup) -> dict:
    data = TransportGroupResponse.model_validate(group).model_dump()
    names = {allocation.id: allocation.guest.full_name for allocation in group.allocations}
    for allocation in data["allocations"]:
        allocation["guest_name"] = names.get(allocation["id"])
    data["passenger_count"] = sum(allocation.guest.party_size for allocation in group.allocations)
    return data

@router.get("/{event_id}/transport/groups")
async def list_groups(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    groups = db.query(TransportGroup).filter(TransportGroup.event_id == event.id).order_by(
        TransportGroup.pickup_date, TransportGroup.pickup_time_slot
    ).all()
    return success_response(message="Transport groups retrieved", data=[group_data(g) for g in groups])

@router.post("/{event_id}/transport/generate")
async def generate_groups(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Rebuild draft groups from guest arrivals"""
    groups = TransportService.generate_groups(db, event)
    await notifications.transport_generated(event.id, len(groups))
    return success_response(
        message=f"Generated {len(groups)} transport groups",
        data=[group_data(g) for g in groups]
    )

@router.get("/{event_id}/transport/check-updates")
async def check_updates(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    return success_response(
        message="Transport groups checked against travel data",
        data=TransportService.check_for_updates(db, event)
    )

@router.get("/{event_id}/transport/flights")
async def flight_coordination(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    flights = TransportService.flight_listing(db, event)
    return success_response(message="Flight details retrieved", data={"guests": flights, "total": len(flights)})

@router.post("/{event_id}/transport/groups")
async def create_group(
    data: TransportGroupCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportGroup(event_id=event.id, status="draft", **data.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    return success_response(message="Transport group created", data=group_data(group), status_code=201)

@router.get("/{event_id}/transport/groups/{group_id}")
async def get_group(
    group_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportRepo.get_group(db, event.id, group_id)
    if not group:
        not_found_error("Transport group")
    return success_response(message="Transport group retrieved", data=group_data(group))

@router.patch("/{event_id}/transport/groups/{group_id}")
async def update_group(
    group_id: int,
    data: TransportGroupUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportRepo.get_group(db, event.id, group_id)
    if not group:
        not_found_error("Transport group")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(group, field, value)
    db.commit()
    db.refresh(group)
    return success_response(message="Transport group updated", data=group_data(group))

@router.delete("/{event_id}/transport/groups/{group_id}")
async def delete_group(
    group_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportRepo.get_group(db, event.id, group_id)
    if not group:
        not_found_error("Transport group")

    db.delete(group)
    db.commit()
    return success_response(message="Transport group deleted")

@router.post("/{event_id}/transport/groups/{group_id}/guests")
async def add_guest_to_group(
    group_id: int,
    data: TransportAllocationCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportRepo.get_group(db, event.id, group_id)
    if not group:
        not_found_error("Transport group")

    allocation, error = TransportService.add_guest(db, event, group, data.guest_id)
    if error:
        return conflict_response(error, "allocation_rejected")
    db.refresh(group)
    return success_response(message="Guest added to transport group", data=group_data(group))

@router.delete("/{event_id}/transport/groups/{group_id}/guests/{guest_id}")
async def remove_guest_from_group(
    group_id: int,
    guest_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportRepo.get_group(db, event.id, group_id)
    if not group:
        not_found_error("Transport group")

    if not TransportService.remove_guest(db, group, guest_id):
        not_found_error("Guest allocation")
    return success_response(message="Guest removed from transport group")

@router.post("/{event_id}/transport/groups/{group_id}/confirm")
async def confirm_group(
    group_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    group = TransportRepo.get_group(db, event.id, group_id)
    if not group:
        not_found_error("Transport group")

    group = TransportService.confirm_group(db, group)
    return success_response(message="Transport group confirmed", data=group_data(group))
