"""
Icebreaker — Event lookups used around the matching engine.
"""

from __future__ import annotations

import uuid

import structlog

from app.exceptions import EventClosed, NotFound
from app.models import Event, Participant, Round
from app.models.enums import EventStatus
from app.services.ports import EventStore

logger = structlog.get_logger("icebreaker.event_service")


class EventService:
    """Read-only access to events, their participants and rounds."""

    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def validate_code(self, code: str) -> Event:
        """Resolve a join code (case-insensitive) to an open event."""
        normalised = code.strip().upper()
        event = await self.store.find_event_by_code(normalised)
        if event is None:
            logger.info("event_code_unknown", code=normalised)
            raise NotFound("Event not found.", code=normalised)
        if event.status == EventStatus.ENDED.value:
            raise EventClosed("This event has ended.", event_id=str(event.id))
        return event

    async def get_event(self, event_id: uuid.UUID) -> Event:
        event = await self.store.get_event(event_id)
        if event is None:
            raise NotFound("Event not found.", event_id=str(event_id))
        return event

    async def list_participants(self, event_id: uuid.UUID) -> list[Participant]:
        await self.get_event(event_id)
        return list(await self.store.list_participants(event_id))

    async def list_rounds(self, event_id: uuid.UUID) -> list[Round]:
        await self.get_event(event_id)
        return sorted(await self.store.list_rounds(event_id), key=lambda r: r.order)
