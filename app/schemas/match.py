from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional

from app.schemas.event import HintResponse, ParticipantResponse

class MatchResponse(BaseModel):
    id: UUID
    event_id: UUID
    participants: list[UUID]
    type: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class AssignmentResponse(BaseModel):
    id: UUID
    event_id: UUID
    match_id: UUID
    participant_id: UUID
    target_id: UUID
    status: str
    found_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class MatchingResponse(BaseModel):
    matches: list[MatchResponse]
    assignments: list[AssignmentResponse]

class GenerateMatchingResponse(MatchingResponse):
    created_matches: int
    participant_count: int

class MatchingProgressResponse(BaseModel):
    matching_created: bool
    total_participants: int
    matched_participants: int
    total_matches: int
    total_assignments: int
    status_counts: dict[str, int]
    progress_percent: int

class TargetResponse(ParticipantResponse):
    visible_hints: list[HintResponse] = []

class MyTargetResponse(BaseModel):
    participant: ParticipantResponse
    assignment: AssignmentResponse
    target: TargetResponse
    active_round: Optional[str] = None  # round name

class StatusUpdateRequest(BaseModel):
    participant_id: UUID
    status: str  # pending / found / completed

class StatusUpdateResponse(BaseModel):
    success: bool
    assignment: AssignmentResponse
