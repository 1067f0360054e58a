"""
Icebreaker — Matching Engine

Partitions an event's participants into mutual-discovery groups and tracks
each member's progress towards finding their target:

  generate_matching        — shuffle, split into pairs (+ one trailing trio when
                             the count is odd), build one find cycle per group,
                             and atomically replace any previous matching
  get_matching             — current matches and assignments (possibly empty)
  get_target_for           — a participant's assignment, their target and the
                             target's hints visible in the active round
  update_assignment_status — pending / found / completed state machine, mirrored
                             onto the participant's matched flag
  get_progress             — per-status counts for the organiser dashboard

Writers take an exclusive lock on the event row and readers a shared one, so
no reader ever observes a half-replaced matching.  All writes of an operation
are committed together; if the commit fails the store is rolled back and
``PersistenceFailure`` is raised, leaving the previous state intact.
"""

from __future__ import annotations

import random
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AsyncIterator, Optional, Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.exceptions import (
    EventClosed,
    InvalidStatus,
    MatchingError,
    NoAssignment,
    NotFound,
    PersistenceFailure,
)
from app.models import Event, Hint, Match, MatchAssignment, Participant, Round
from app.models.enums import AssignmentStatus, EventStatus, MatchType
from app.services.grouping import (
    cycle_edges,
    partition_into_groups,
    shuffle_participants,
    validate_participants,
)
from app.services.hint_service import visible_hints
from app.services.ports import EventStore, ParticipantStatusSink

logger = structlog.get_logger("icebreaker.matching_service")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ──────────────────────────────────────────────────────────────────────────────
# Result types
# ──────────────────────────────────────────────────────────────────────────────

@dataclass
class MatchingSnapshot:
    matches: list[Match] = field(default_factory=list)
    assignments: list[MatchAssignment] = field(default_factory=list)


@dataclass
class GenerationResult(MatchingSnapshot):
    participant_count: int = 0

    @property
    def created_matches(self) -> int:
        return len(self.matches)


@dataclass
class TargetInfo:
    participant: Participant
    assignment: MatchAssignment
    target: Participant
    visible_hints: list[Hint]
    active_round: Optional[Round] = None


@dataclass
class MatchingProgress:
    matching_created: bool
    total_participants: int
    matched_participants: int
    total_matches: int
    total_assignments: int
    status_counts: dict[str, int]

    @property
    def progress_percent(self) -> int:
        """Share of assignments that have moved past ``pending`` (0-100)."""
        if self.total_assignments == 0:
            return 0
        advanced = self.total_assignments - self.status_counts.get(
            AssignmentStatus.PENDING.value, 0
        )
        return round(advanced / self.total_assignments * 100)


# ──────────────────────────────────────────────────────────────────────────────
# Service
# ──────────────────────────────────────────────────────────────────────────────

class MatchingService:
    """Random pair/trio matching engine with find-status tracking.

    Storage is injected so that the service can be exercised against an
    in-memory store in tests and the SQLAlchemy store in production.
    """

    def __init__(
        self,
        store: EventStore,
        status_sink: Optional[ParticipantStatusSink] = None,
        rng: Optional[random.Random] = None,
        min_participants: Optional[int] = None,
    ) -> None:
        """Initialise the engine.

        Parameters
        ----------
        store:
            Event/participant/matching storage.
        status_sink:
            Receives participant matched-state updates.  Defaults to ``store``,
            which keeps those writes in the same transaction.
        rng:
            Random source for shuffling.  Defaults to ``random.Random`` seeded
            with ``MATCHING_SEED`` (unseeded when that is unset).
        min_participants:
            Smallest event that can be matched.  Defaults to ``MIN_PARTICIPANTS``.
        """
        self.store = store
        self.status_sink: ParticipantStatusSink = status_sink or store  # type: ignore[assignment]
        if rng is None:
            rng = random.Random(get_settings().MATCHING_SEED)
        if min_participants is None:
            min_participants = get_settings().MIN_PARTICIPANTS
        self.rng = rng
        self.min_participants = min_participants

    # ── Generation ────────────────────────────────────────────────────────

    def build_matching(
        self,
        event_id: uuid.UUID,
        participant_ids: Sequence[uuid.UUID],
        now: Optional[datetime] = None,
    ) -> tuple[list[Match], list[MatchAssignment]]:
        """Build (but do not persist) a fresh random matching.

        Raises ``InsufficientParticipants`` or ``DuplicateParticipant`` for
        inputs that cannot be partitioned.
        """
        validate_participants(participant_ids, self.min_participants)
        now = now or _utcnow()

        shuffled = shuffle_participants(participant_ids, self.rng)
        matches: list[Match] = []
        assignments: list[MatchAssignment] = []

        for group in partition_into_groups(shuffled):
            match = Match(
                id=uuid.uuid4(),
                event_id=event_id,
                participants=[str(pid) for pid in group],
                type=(MatchType.TRIO if len(group) == 3 else MatchType.PAIR).value,
                created_at=now,
                updated_at=now,
            )
            matches.append(match)

            for finder_id, target_id in cycle_edges(group):
                assignments.append(
                    MatchAssignment(
                        id=uuid.uuid4(),
                        event_id=event_id,
                        match_id=match.id,
                        participant_id=finder_id,
                        target_id=target_id,
                        status=AssignmentStatus.PENDING.value,
                        found_at=None,
                        completed_at=None,
                        created_at=now,
                        updated_at=now,
                    )
                )

        return matches, assignments

    async def generate_matching(self, event_id: uuid.UUID) -> GenerationResult:
        """Create a new matching for every participant of the event.

        Any previous matching is discarded in the same transaction, and the
        event's ``matching_created`` flag is set.
        """
        log = logger.bind(event_id=str(event_id))
        log.info("generate_matching_start")

        async with self._unit_of_work(log, "generate_matching"):
            event = await self._require_event(event_id, lock="update")
            if event.status == EventStatus.ENDED.value:
                raise EventClosed(
                    "This event has ended; matches can no longer be created.",
                    event_id=str(event_id),
                )

            participants = await self.store.list_participants(event_id)
            participant_ids = [p.id for p in participants]

            now = _utcnow()
            matches, assignments = self.build_matching(event_id, participant_ids, now)
            await self.store.replace_matching(event, matches, assignments, now)

        log.info(
            "generate_matching_complete",
            participant_count=len(participant_ids),
            created_matches=len(matches),
            trios=sum(1 for m in matches if m.type == MatchType.TRIO.value),
        )
        return GenerationResult(
            matches=matches,
            assignments=assignments,
            participant_count=len(participant_ids),
        )

    # ── Queries ───────────────────────────────────────────────────────────

    async def get_matching(self, event_id: uuid.UUID) -> MatchingSnapshot:
        await self._require_event(event_id, lock="share")
        matches = await self.store.list_matches(event_id)
        assignments = await self.store.list_assignments(event_id)
        return MatchingSnapshot(matches=list(matches), assignments=list(assignments))

    async def get_target_for(
        self, event_id: uuid.UUID, participant_id: uuid.UUID
    ) -> TargetInfo:
        """Resolve who ``participant_id`` must find and what they may see of them.

        Raises
        ------
        NotFound
            Unknown event or participant, or the target record is gone.
        NoAssignment
            Matching not generated yet, or this participant is not part of it.
        """
        log = logger.bind(event_id=str(event_id), participant_id=str(participant_id))

        await self._require_event(event_id, lock="share")

        participant = await self.store.get_participant(event_id, participant_id)
        if participant is None:
            raise NotFound("Participant not found.", participant_id=str(participant_id))

        assignment = await self.store.get_assignment(event_id, participant_id)
        if assignment is None:
            log.info("target_lookup_no_assignment")
            raise NoAssignment(
                "No assignment found for participant; matches may not be created yet.",
                participant_id=str(participant_id),
            )

        target = await self.store.get_participant(event_id, assignment.target_id)
        if target is None:
            log.warning("target_participant_missing", target_id=str(assignment.target_id))
            raise NotFound(
                "Target participant not found.", target_id=str(assignment.target_id)
            )

        hints = await self.store.list_hints(event_id, target.id)
        active_round = await self.store.get_active_round(event_id)
        shown = visible_hints(hints, active_round)

        log.info("target_lookup_complete", visible_hints=len(shown), total_hints=len(hints))
        return TargetInfo(
            participant=participant,
            assignment=assignment,
            target=target,
            visible_hints=shown,
            active_round=active_round,
        )

    async def get_progress(self, event_id: uuid.UUID) -> MatchingProgress:
        event = await self._require_event(event_id, lock="share")
        participants = await self.store.list_participants(event_id)
        matches = await self.store.list_matches(event_id)
        assignments = await self.store.list_assignments(event_id)

        status_counts = {s.value: 0 for s in AssignmentStatus}
        for assignment in assignments:
            status_counts[assignment.status] = status_counts.get(assignment.status, 0) + 1

        return MatchingProgress(
            matching_created=bool(event.matching_created),
            total_participants=len(participants),
            matched_participants=status_counts[AssignmentStatus.COMPLETED.value],
            total_matches=len(matches),
            total_assignments=len(assignments),
            status_counts=status_counts,
        )

    # ── Status transitions ────────────────────────────────────────────────

    async def update_assignment_status(
        self,
        event_id: uuid.UUID,
        participant_id: uuid.UUID,
        new_status: str,
    ) -> MatchAssignment:
        """Move a participant's assignment to ``new_status``.

        found     — found_at = now, completed_at cleared
        completed — completed_at = now, found_at kept if already set else now
        pending   — both timestamps cleared

        The participant's ``is_matched`` flag follows ``completed``; their
        ``match_id`` is set on completion, cleared on ``pending`` and left
        alone on ``found``.
        """
        try:
            status = AssignmentStatus(new_status)
        except ValueError:
            raise InvalidStatus(
                f"Invalid match status {new_status!r}.",
                allowed=[s.value for s in AssignmentStatus],
            ) from None

        log = logger.bind(
            event_id=str(event_id),
            participant_id=str(participant_id),
            status=status.value,
        )

        async with self._unit_of_work(log, "update_assignment_status"):
            await self._require_event(event_id, lock="update")

            assignment = await self.store.get_assignment(event_id, participant_id)
            if assignment is None:
                raise NotFound("Assignment not found.", participant_id=str(participant_id))

            participant = await self.store.get_participant(event_id, participant_id)
            if participant is None:
                raise NotFound("Participant not found.", participant_id=str(participant_id))

            now = _utcnow()
            if status is AssignmentStatus.FOUND:
                found_at, completed_at = now, None
            elif status is AssignmentStatus.COMPLETED:
                found_at, completed_at = assignment.found_at or now, now
            else:
                found_at, completed_at = None, None

            await self.store.update_assignment(
                assignment,
                status=status.value,
                found_at=found_at,
                completed_at=completed_at,
                now=now,
            )

            if status is AssignmentStatus.COMPLETED:
                match_id = assignment.match_id
            elif status is AssignmentStatus.PENDING:
                match_id = None
            else:
                match_id = participant.match_id

            await self.status_sink.set_match_state(
                participant,
                is_matched=status is AssignmentStatus.COMPLETED,
                match_id=match_id,
                now=now,
            )

        log.info("assignment_status_updated")
        return assignment

    # ── Internal helpers ──────────────────────────────────────────────────

    async def _require_event(self, event_id: uuid.UUID, lock: Optional[str] = None) -> Event:
        event = await self.store.get_event(event_id, lock=lock)
        if event is None:
            raise NotFound("Event not found.", event_id=str(event_id))
        return event

    @asynccontextmanager
    async def _unit_of_work(self, log, operation: str) -> AsyncIterator[None]:
        """Commit everything staged in the block, or roll all of it back."""
        try:
            yield
            await self.store.commit()
        except MatchingError as exc:
            await self.store.rollback()
            log.warning(f"{operation}_rejected", error_code=exc.code, error=exc.message)
            raise
        except SQLAlchemyError as exc:
            await self.store.rollback()
            log.error(f"{operation}_persistence_failed", error=str(exc))
            raise PersistenceFailure(
                "Failed to save changes; please try again.",
                operation=operation,
            ) from exc
