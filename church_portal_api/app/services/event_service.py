"""
Business logic for events.

Events are owned through ``created_by``.  Besides the owned-content
operations the service answers the "upcoming events" query used by the
dashboard.
"""

from typing import List, Optional

from ..core.storage import Storage
from ..schemas.event import Event, EventCreate, EventUpdate
from .content_service import OwnedContentService


class EventService(OwnedContentService[Event]):
    """Service for managing events."""

    label = "Event"
    owner_field = "created_by"

    @classmethod
    def _get(cls, storage: Storage, record_id: int) -> Optional[Event]:
        return storage.get_event(record_id)

    @classmethod
    def _create(cls, storage: Storage, data: EventCreate) -> Event:
        return storage.create_event(data)

    @classmethod
    def _update(cls, storage: Storage, record_id: int, data: EventUpdate) -> Optional[Event]:
        return storage.update_event(record_id, data)

    @classmethod
    def _delete(cls, storage: Storage, record_id: int) -> bool:
        return storage.delete_event(record_id)

    @classmethod
    def _list(cls, storage: Storage) -> List[Event]:
        return storage.get_all_events()

    @classmethod
    async def upcoming(cls, storage: Storage, count: int = 5) -> List[Event]:
        """Return at most ``count`` future events, soonest first."""
        return storage.get_upcoming_events(count)
