"""
Icebreaker — Matching engine exceptions.

Every error the engine raises derives from ``MatchingError``.  The API layer
maps each subclass to an HTTP status and a stable machine-readable ``code``
(see ``app.main``), so callers can tell "wait for more participants" from
"matches not created yet" from "try again".
"""

from __future__ import annotations

from typing import Any


class MatchingError(Exception):
    """Base class for all matching engine errors."""

    code: str = "MATCHING_ERROR"
    http_status: int = 400

    def __init__(self, message: str, **details: Any) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


class InsufficientParticipants(MatchingError):
    """Fewer than the minimum number of participants to build a matching."""

    code = "INSUFFICIENT_PARTICIPANTS"
    http_status = 400


class DuplicateParticipant(MatchingError):
    """The same participant id appears more than once in a generation input."""

    code = "DUPLICATE_PARTICIPANT"
    http_status = 400


class InvalidStatus(MatchingError):
    code = "INVALID_STATUS"
    http_status = 400


class NotFound(MatchingError):
    """Referenced event, participant or assignment does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class NoAssignment(MatchingError):
    """Matching has not been generated yet, or the participant is not in it.

    Kept distinct from ``NotFound`` so clients can render a waiting state
    instead of a hard error.
    """

    code = "NO_ASSIGNMENT"
    http_status = 404


class EventClosed(MatchingError):
    code = "EVENT_CLOSED"
    http_status = 409


class PersistenceFailure(MatchingError):
    """The atomic commit did not complete; no partial state is visible."""

    code = "PERSISTENCE_FAILURE"
    http_status = 503
