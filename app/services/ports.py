"""
Icebreaker — Storage ports consumed by the matching engine.

``MatchingService`` talks to storage only through these protocols.  The
production implementation is ``app.repositories.event_store.SqlAlchemyEventStore``;
tests use an in-memory fake.  Record types are the ORM classes themselves,
which can be instantiated without a session.

Write methods *stage* changes.  Nothing is visible to other readers until
``commit()`` succeeds, and ``rollback()`` discards everything staged since
the last commit.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Protocol, Sequence

from app.models import Event, Hint, Match, MatchAssignment, Participant, Round


class EventStore(Protocol):
    # ── Events ──────────────────────────────────────────────────────────
    async def get_event(self, event_id: uuid.UUID, *, lock: Optional[str] = None) -> Optional[Event]:
        """Fetch an event.

        ``lock`` is ``"update"`` to serialize writers on this event,
        ``"share"`` for a consistent snapshot read, or ``None``.
        """
        ...

    async def find_event_by_code(self, code: str) -> Optional[Event]: ...

    # ── Participants, rounds, hints ─────────────────────────────────────
    async def list_participants(self, event_id: uuid.UUID) -> Sequence[Participant]: ...

    async def get_participant(
        self, event_id: uuid.UUID, participant_id: uuid.UUID
    ) -> Optional[Participant]: ...

    async def list_rounds(self, event_id: uuid.UUID) -> Sequence[Round]: ...

    async def get_active_round(self, event_id: uuid.UUID) -> Optional[Round]: ...

    async def list_hints(self, event_id: uuid.UUID, participant_id: uuid.UUID) -> Sequence[Hint]: ...

    # ── Matching ────────────────────────────────────────────────────────
    async def list_matches(self, event_id: uuid.UUID) -> Sequence[Match]: ...

    async def list_assignments(self, event_id: uuid.UUID) -> Sequence[MatchAssignment]: ...

    async def get_assignment(
        self, event_id: uuid.UUID, participant_id: uuid.UUID
    ) -> Optional[MatchAssignment]: ...

    async def replace_matching(
        self,
        event: Event,
        matches: Sequence[Match],
        assignments: Sequence[MatchAssignment],
        now: datetime,
    ) -> None:
        """Stage removal of every existing match/assignment of ``event``,
        insertion of the new ones and ``matching_created = True``."""
        ...

    async def update_assignment(
        self,
        assignment: MatchAssignment,
        *,
        status: str,
        found_at: Optional[datetime],
        completed_at: Optional[datetime],
        now: datetime,
    ) -> None: ...

    # ── Unit of work ────────────────────────────────────────────────────
    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class ParticipantStatusSink(Protocol):
    """Where the engine records a participant's matched state."""

    async def set_match_state(
        self,
        participant: Participant,
        *,
        is_matched: bool,
        match_id: Optional[uuid.UUID],
        now: datetime,
    ) -> None: ...
