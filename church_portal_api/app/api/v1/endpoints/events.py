"""
Event endpoints for API v1.

Anyone may read events.  Creating requires an authenticated user;
updating and deleting require the event's creator or an administrator.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from church_portal_api.app.core.errors import ForbiddenError, NotFoundError, validation_message
from church_portal_api.app.core.security import Principal, get_current_principal
from church_portal_api.app.core.storage import Storage, get_storage
from church_portal_api.app.schemas.common import Message
from church_portal_api.app.schemas.event import Event, EventCreate, EventUpdate
from church_portal_api.app.services.event_service import EventService


router = APIRouter()


@router.get("", response_model=List[Event])
async def list_events(storage: Storage = Depends(get_storage)) -> List[Event]:
    return await EventService.list_all(storage)


@router.get("/upcoming", response_model=List[Event])
async def list_upcoming_events(
    count: int = Query(5, ge=0),
    storage: Storage = Depends(get_storage),
) -> List[Event]:
    """Events that have not started yet, soonest first (default 5)."""
    return await EventService.upcoming(storage, count)


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: int, storage: Storage = Depends(get_storage)) -> Event:
    try:
        return await EventService.get(storage, event_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "",
    response_model=Event,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=validation_message("Invalid event data"),
)
async def create_event(
    event: EventCreate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Event:
    """Create an event.  ``createdBy`` defaults to the current user."""
    return await EventService.create(storage, event, current_user)


@router.patch("/{event_id}", response_model=Event, openapi_extra=validation_message("Invalid event data"))
async def update_event(
    event_id: int,
    updates: EventUpdate,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Event:
    """Partially update an event; unspecified fields remain unchanged."""
    try:
        return await EventService.update(storage, event_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e


@router.delete("/{event_id}", response_model=Message)
async def delete_event(
    event_id: int,
    current_user: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
) -> Message:
    try:
        await EventService.delete(storage, event_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return Message(message="Event deleted")
