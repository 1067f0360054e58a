"""
Icebreaker — SQLAlchemy implementation of the matching storage ports.

One store wraps one request-scoped ``AsyncSession``.  Writes are added to the
session and only become visible when ``commit()`` ends the transaction, so a
regeneration (bulk delete + bulk insert + event flag) lands as a single unit.

Per-event serialization uses row locks on the ``events`` row:
``SELECT ... FOR UPDATE`` for writers and ``FOR SHARE`` for snapshot readers.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Event, Hint, Match, MatchAssignment, Participant, Round

logger = structlog.get_logger("icebreaker.event_store")


class SqlAlchemyEventStore:
    """``EventStore`` and ``ParticipantStatusSink`` backed by PostgreSQL."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Events ────────────────────────────────────────────────────────────

    async def get_event(self, event_id: uuid.UUID, *, lock: Optional[str] = None) -> Optional[Event]:
        stmt = select(Event).where(Event.id == event_id)
        if lock == "update":
            stmt = stmt.with_for_update()
        elif lock == "share":
            stmt = stmt.with_for_update(read=True)
        elif lock is not None:
            raise ValueError(f"Unknown lock mode {lock!r}")
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_event_by_code(self, code: str) -> Optional[Event]:
        stmt = select(Event).where(Event.code == code).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # ── Participants, rounds, hints ───────────────────────────────────────

    async def list_participants(self, event_id: uuid.UUID) -> Sequence[Participant]:
        stmt = (
            select(Participant)
            .where(Participant.event_id == event_id)
            .order_by(Participant.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_participant(
        self, event_id: uuid.UUID, participant_id: uuid.UUID
    ) -> Optional[Participant]:
        stmt = select(Participant).where(
            Participant.event_id == event_id,
            Participant.id == participant_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_rounds(self, event_id: uuid.UUID) -> Sequence[Round]:
        stmt = select(Round).where(Round.event_id == event_id).order_by(Round.order)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_active_round(self, event_id: uuid.UUID) -> Optional[Round]:
        stmt = (
            select(Round)
            .where(Round.event_id == event_id, Round.is_active.is_(True))
            .order_by(Round.order)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_hints(self, event_id: uuid.UUID, participant_id: uuid.UUID) -> Sequence[Hint]:
        stmt = (
            select(Hint)
            .where(Hint.event_id == event_id, Hint.participant_id == participant_id)
            .order_by(Hint.level)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    # ── Matching ──────────────────────────────────────────────────────────

    async def list_matches(self, event_id: uuid.UUID) -> Sequence[Match]:
        stmt = select(Match).where(Match.event_id == event_id).order_by(Match.created_at, Match.id)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_assignments(self, event_id: uuid.UUID) -> Sequence[MatchAssignment]:
        stmt = (
            select(MatchAssignment)
            .where(MatchAssignment.event_id == event_id)
            .order_by(MatchAssignment.created_at, MatchAssignment.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_assignment(
        self, event_id: uuid.UUID, participant_id: uuid.UUID
    ) -> Optional[MatchAssignment]:
        stmt = select(MatchAssignment).where(
            MatchAssignment.event_id == event_id,
            MatchAssignment.participant_id == participant_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def replace_matching(
        self,
        event: Event,
        matches: Sequence[Match],
        assignments: Sequence[MatchAssignment],
        now: datetime,
    ) -> None:
        # Assignments first: they reference matches.
        await self.session.execute(
            delete(MatchAssignment).where(MatchAssignment.event_id == event.id)
        )
        await self.session.execute(delete(Match).where(Match.event_id == event.id))

        self.session.add_all(matches)
        await self.session.flush()
        self.session.add_all(assignments)

        event.matching_created = True
        event.updated_at = now
        await self.session.flush()

        logger.debug(
            "matching_staged",
            event_id=str(event.id),
            matches=len(matches),
            assignments=len(assignments),
        )

    async def update_assignment(
        self,
        assignment: MatchAssignment,
        *,
        status: str,
        found_at: Optional[datetime],
        completed_at: Optional[datetime],
        now: datetime,
    ) -> None:
        assignment.status = status
        assignment.found_at = found_at
        assignment.completed_at = completed_at
        assignment.updated_at = now
        await self.session.flush()

    async def set_match_state(
        self,
        participant: Participant,
        *,
        is_matched: bool,
        match_id: Optional[uuid.UUID],
        now: datetime,
    ) -> None:
        participant.is_matched = is_matched
        participant.match_id = match_id
        participant.updated_at = now
        await self.session.flush()

    # ── Unit of work ──────────────────────────────────────────────────────

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
