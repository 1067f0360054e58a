"""
Icebreaker — Events API

Read-only lookups around an event: join-code validation, event details,
participants and hint rounds.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_event_service
from app.schemas.event import (
    EventCodeValidation,
    EventResponse,
    ParticipantResponse,
    RoundResponse,
)
from app.services.event_service import EventService

logger = structlog.get_logger("icebreaker.api.events")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /validate — Resolve a join code
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/validate",
    response_model=EventCodeValidation,
    summary="Validate an event join code",
)
async def validate_event_code(
    code: str = Query(..., min_length=1, description="Event join code"),
    service: EventService = Depends(get_event_service),
) -> EventCodeValidation:
    """Look up an event by its join code.  Ended events are rejected."""
    event = await service.validate_code(code)
    logger.info("event_code_validated", event_id=str(event.id))
    return EventCodeValidation(event_id=event.id, title=event.title, status=event.status)


# ──────────────────────────────────────────────────────────────────────────────
# GET /{event_id} — Event details
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get event by ID",
)
async def get_event(
    event_id: uuid.UUID,
    service: EventService = Depends(get_event_service),
):
    return await service.get_event(event_id)


@router.get(
    "/{event_id}/participants",
    response_model=list[ParticipantResponse],
    summary="List event participants",
)
async def list_participants(
    event_id: uuid.UUID,
    service: EventService = Depends(get_event_service),
):
    return await service.list_participants(event_id)


@router.get(
    "/{event_id}/rounds",
    response_model=list[RoundResponse],
    summary="List hint rounds in order",
)
async def list_rounds(
    event_id: uuid.UUID,
    service: EventService = Depends(get_event_service),
):
    return await service.list_rounds(event_id)
