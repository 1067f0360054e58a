"""
Icebreaker — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from app.models.event import Event, Round
from app.models.participant import Hint, Participant
from app.models.match import Match, MatchAssignment

__all__ = [
    "Event",
    "Round",
    "Participant",
    "Hint",
    "Match",
    "MatchAssignment",
]
