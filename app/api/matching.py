"""
Icebreaker — Matching API

Endpoints for generating an event's matching, reading it back, looking up a
participant's target and moving their assignment through
pending → found → completed.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_matching_service
from app.schemas.event import HintResponse, ParticipantResponse
from app.schemas.match import (
    AssignmentResponse,
    GenerateMatchingResponse,
    MatchingProgressResponse,
    MatchingResponse,
    MatchResponse,
    MyTargetResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
    TargetResponse,
)
from app.services.matching_service import MatchingService

logger = structlog.get_logger("icebreaker.api.matching")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# POST /{event_id}/matching — Generate (or regenerate) the matching
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/{event_id}/matching",
    response_model=GenerateMatchingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate matches for all event participants",
)
async def generate_matching(
    event_id: uuid.UUID,
    service: MatchingService = Depends(get_matching_service),
) -> GenerateMatchingResponse:
    """Shuffle the event's participants into pairs (plus one trio when the
    count is odd) and assign each member someone to find.

    Any previous matching for the event is replaced.
    """
    result = await service.generate_matching(event_id)
    return GenerateMatchingResponse(
        matches=[MatchResponse.model_validate(m) for m in result.matches],
        assignments=[AssignmentResponse.model_validate(a) for a in result.assignments],
        created_matches=result.created_matches,
        participant_count=result.participant_count,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /{event_id}/matching — Current matching
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{event_id}/matching",
    response_model=MatchingResponse,
    summary="Get the current matches and assignments",
)
async def get_matching(
    event_id: uuid.UUID,
    service: MatchingService = Depends(get_matching_service),
) -> MatchingResponse:
    """Return the event's matching; both lists are empty until it is generated."""
    snapshot = await service.get_matching(event_id)
    return MatchingResponse(
        matches=[MatchResponse.model_validate(m) for m in snapshot.matches],
        assignments=[AssignmentResponse.model_validate(a) for a in snapshot.assignments],
    )


@router.get(
    "/{event_id}/matching/progress",
    response_model=MatchingProgressResponse,
    summary="Assignment status counts for the event",
)
async def get_matching_progress(
    event_id: uuid.UUID,
    service: MatchingService = Depends(get_matching_service),
) -> MatchingProgressResponse:
    progress = await service.get_progress(event_id)
    return MatchingProgressResponse(
        matching_created=progress.matching_created,
        total_participants=progress.total_participants,
        matched_participants=progress.matched_participants,
        total_matches=progress.total_matches,
        total_assignments=progress.total_assignments,
        status_counts=progress.status_counts,
        progress_percent=progress.progress_percent,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /{event_id}/my-target — Who a participant must find
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{event_id}/my-target",
    response_model=MyTargetResponse,
    summary="Get a participant's target and its visible hints",
)
async def get_my_target(
    event_id: uuid.UUID,
    participant_id: uuid.UUID = Query(..., description="Participant looking for their target"),
    service: MatchingService = Depends(get_matching_service),
) -> MyTargetResponse:
    """Only hints whose level is revealed by the active round are returned."""
    info = await service.get_target_for(event_id, participant_id)

    target = TargetResponse(
        **ParticipantResponse.model_validate(info.target).model_dump(),
        visible_hints=[HintResponse.model_validate(h) for h in info.visible_hints],
    )
    return MyTargetResponse(
        participant=ParticipantResponse.model_validate(info.participant),
        assignment=AssignmentResponse.model_validate(info.assignment),
        target=target,
        active_round=info.active_round.name if info.active_round else None,
    )


# ──────────────────────────────────────────────────────────────────────────────
# PUT /{event_id}/match-status — Move an assignment through its states
# ──────────────────────────────────────────────────────────────────────────────

@router.put(
    "/{event_id}/match-status",
    response_model=StatusUpdateResponse,
    summary="Update a participant's assignment status",
)
async def update_match_status(
    event_id: uuid.UUID,
    payload: StatusUpdateRequest,
    service: MatchingService = Depends(get_matching_service),
) -> StatusUpdateResponse:
    """Set the status to ``pending``, ``found`` or ``completed``."""
    log = logger.bind(event_id=str(event_id), participant_id=str(payload.participant_id))
    log.info("update_match_status_request", status=payload.status)

    assignment = await service.update_assignment_status(
        event_id, payload.participant_id, payload.status
    )
    return StatusUpdateResponse(
        success=True,
        assignment=AssignmentResponse.model_validate(assignment),
    )
