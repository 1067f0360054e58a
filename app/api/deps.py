"""
Icebreaker — FastAPI dependencies wiring services to the request session.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.repositories.event_store import SqlAlchemyEventStore
from app.services.event_service import EventService
from app.services.matching_service import MatchingService


def get_event_store(db: AsyncSession = Depends(get_db)) -> SqlAlchemyEventStore:
    return SqlAlchemyEventStore(db)


def get_matching_service(
    store: SqlAlchemyEventStore = Depends(get_event_store),
) -> MatchingService:
    return MatchingService(store=store)


def get_event_service(
    store: SqlAlchemyEventStore = Depends(get_event_store),
) -> EventService:
    return EventService(store=store)
