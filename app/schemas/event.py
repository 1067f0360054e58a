from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Any, Optional

class EventResponse(BaseModel):
    id: UUID
    code: str
    title: str
    status: str
    description: Optional[str] = None
    location: Optional[str] = None
    matching_created: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class EventCodeValidation(BaseModel):
    event_id: UUID
    title: str
    status: str

class RoundResponse(BaseModel):
    id: UUID
    name: str
    visible_levels: list[str]
    is_active: bool
    order: int

    model_config = {"from_attributes": True}

class ParticipantResponse(BaseModel):
    id: UUID
    event_id: UUID
    display_name: str
    lang: str
    profile_emoji: Optional[str] = None
    submitted_levels: Optional[list[str]] = None
    is_matched: bool
    match_id: Optional[UUID] = None

    model_config = {"from_attributes": True}

class HintResponse(BaseModel):
    id: UUID
    level: str
    payload: dict[str, Any]

    model_config = {"from_attributes": True}
