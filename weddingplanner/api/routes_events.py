"""
Event routes - events, ceremonies, meal options, statistics
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from weddingplanner.core.db import get_db
from weddingplanner.models import Ceremony, GuestMealSelection, MealOption, User, WeddingEvent
from weddingplanner.schemas.event import (
    CeremonyCreate, CeremonyResponse, CeremonyUpdate, EventCreate, EventResponse,
    EventUpdate, MealOptionCreate, MealOptionResponse, MealOptionUpdate
)
from weddingplanner.services.event_service import EventService
from weddingplanner.services.repositories import EventRepo
from weddingplanner.utils.responses import error_response, not_found_error, success_response
from weddingplanner.utils.security import get_current_user, get_event_for_user

router = APIRouter()

def event_data(event: WeddingEvent) -> dict:
    return EventResponse.model_validate(event).model_dump()

@router.get("")
async def list_events(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Events visible to the caller"""
    events = EventRepo.list_for_user(db, user)
    return success_response(
        message="Events retrieved successfully",
        data=[event_data(event) for event in events]
    )

@router.post("")
async def create_event(
    data: EventCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    event = EventService.create(db, user, data)
    return success_response(
        message="Event created successfully",
        data=event_data(event),
        status_code=201
    )

@router.get("/{event_id}")
async def get_event(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    """Event details with statistics"""
    data = event_data(event)
    data["statistics"] = EventService.statistics(db, event)
    return success_response(message="Event details retrieved", data=data)

@router.patch("/{event_id}")
async def update_event(
    data: EventUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    updated, error = EventService.update(db, event, data)
    if error:
        return error_response(message=error, error_code="invalid_dates", status_code=422)
    return success_response(message="Event updated successfully", data=event_data(updated))

@router.delete("/{event_id}")
async def delete_event(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    EventService.delete(db, event)
    return success_response(message="Event deleted successfully")

@router.get("/{event_id}/statistics")
async def event_statistics(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    return success_response(
        message="Statistics retrieved successfully",
        data=EventService.statistics(db, event)
    )

# Ceremonies

@router.get("/{event_id}/ceremonies")
async def list_ceremonies(
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    ceremonies = db.query(Ceremony).filter(Ceremony.event_id == event.id).order_by(
        Ceremony.date, Ceremony.start_time
    ).all()
    return success_response(
        message="Ceremonies retrieved successfully",
        data=[CeremonyResponse.model_validate(c).model_dump() for c in ceremonies]
    )

@router.post("/{event_id}/ceremonies")
async def create_ceremony(
    data: CeremonyCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    ceremony = Ceremony(event_id=event.id, **data.model_dump())
    db.add(ceremony)
    db.commit()
    db.refresh(ceremony)
    return success_response(
        message="Ceremony created successfully",
        data=CeremonyResponse.model_validate(ceremony).model_dump(),
        status_code=201
    )

@router.patch("/{event_id}/ceremonies/{ceremony_id}")
async def update_ceremony(
    ceremony_id: int,
    data: CeremonyUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    ceremony = EventRepo.get_ceremony(db, event.id, ceremony_id)
    if not ceremony:
        not_found_error("Ceremony")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(ceremony, field, value)
    db.commit()
    db.refresh(ceremony)
    return success_response(
        message="Ceremony updated successfully",
        data=CeremonyResponse.model_validate(ceremony).model_dump()
    )

@router.delete("/{event_id}/ceremonies/{ceremony_id}")
async def delete_ceremony(
    ceremony_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    ceremony = EventRepo.get_ceremony(db, event.id, ceremony_id)
    if not ceremony:
        not_found_error("Ceremony")

    db.query(GuestMealSelection).filter(GuestMealSelection.ceremony_id == ceremony.id).delete()
    db.delete(ceremony)
    db.commit()
    return success_response(message="Ceremony deleted successfully")

# Meal options

@router.get("/{event_id}/ceremonies/{ceremony_id}/meals")
async def list_meal_options(
    ceremony_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    ceremony = EventRepo.get_ceremony(db, event.id, ceremony_id)
    if not ceremony:
        not_found_error("Ceremony")

    return success_response(
        message="Meal options retrieved successfully",
        data=[MealOptionResponse.model_validate(m).model_dump() for m in ceremony.meal_options]
    )

@router.post("/{event_id}/ceremonies/{ceremony_id}/meals")
async def create_meal_option(
    ceremony_id: int,
    data: MealOptionCreate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    ceremony = EventRepo.get_ceremony(db, event.id, ceremony_id)
    if not ceremony:
        not_found_error("Ceremony")

    option = MealOption(event_id=event.id, ceremony_id=ceremony.id, **data.model_dump())
    db.add(option)
    db.commit()
    db.refresh(option)
    return success_response(
        message="Meal option created successfully",
        data=MealOptionResponse.model_validate(option).model_dump(),
        status_code=201
    )

@router.patch("/{event_id}/ceremonies/{ceremony_id}/meals/{option_id}")
async def update_meal_option(
    ceremony_id: int,
    option_id: int,
    data: MealOptionUpdate,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    option = EventRepo.get_meal_option(db, event.id, ceremony_id, option_id)
    if not option:
        not_found_error("Meal option")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(option, field, value)
    db.commit()
    db.refresh(option)
    return success_response(
        message="Meal option updated successfully",
        data=MealOptionResponse.model_validate(option).model_dump()
    )

@router.delete("/{event_id}/ceremonies/{ceremony_id}/meals/{option_id}")
async def delete_meal_option(
    ceremony_id: int,
    option_id: int,
    event: WeddingEvent = Depends(get_event_for_user),
    db: Session = Depends(get_db)
):
    option = EventRepo.get_meal_option(db, event.id, ceremony_id, option_id)
    if not option:
        not_found_error("Meal option")

    db.query(GuestMealSelection).filter(GuestMealSelection.meal_option_id == option.id).delete()
    db.delete(option)
    db.commit()
    return success_response(message="Meal option deleted successfully")
