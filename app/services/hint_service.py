"""
Icebreaker — Round-based hint visibility.

A round names the hint levels every participant may currently see.  With no
active round nothing is visible yet.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.models import Hint, Round


def visible_levels(active_round: Optional[Round]) -> set[str]:
    if active_round is None:
        return set()
    return {str(level) for level in (active_round.visible_levels or [])}


def visible_hints(hints: Iterable[Hint], active_round: Optional[Round]) -> list[Hint]:
    """Filter ``hints`` down to the levels revealed by ``active_round``, keeping order."""
    levels = visible_levels(active_round)
    return [hint for hint in hints if hint.level in levels]
