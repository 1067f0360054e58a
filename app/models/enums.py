"""
Icebreaker — string enumerations shared by models, services and schemas.

Columns store the plain ``.value`` strings; the enums exist so call-sites
never spell a status by hand.
"""

from __future__ import annotations

import enum


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    WAITING_FOR_MATCHING = "waiting_for_matching"
    LIVE = "live"
    ENDED = "ended"


class HintLevel(str, enum.Enum):
    H1 = "H1"
    H2 = "H2"
    H3 = "H3"
    H4 = "H4"
    H5 = "H5"
    H6 = "H6"


class HintStatus(str, enum.Enum):
    OK = "ok"
    FLAGGED = "flagged"
    HIDDEN = "hidden"


class MatchType(str, enum.Enum):
    PAIR = "pair"
    TRIO = "trio"


class AssignmentStatus(str, enum.Enum):
    PENDING = "pending"
    FOUND = "found"
    COMPLETED = "completed"
