"""
Icebreaker — Group partitioning and find-cycle construction

Pure functions with no persistence or randomness of their own, so the
combinatorial rules can be tested in isolation from the shuffle:

  shuffle_participants  — unbiased Fisher–Yates permutation (caller's RNG)
  group_boundaries      — slice boundaries for groups of 2, with one trailing
                          trio when the count is odd
  partition_into_groups — applies the boundaries to an ordered sequence
  cycle_edges           — (finder, target) pairs: each member looks for the
                          next one, the last wraps round to the first

Examples for ``group_boundaries``:
  n=2 → [(0, 2)]                      one pair
  n=3 → [(0, 3)]                      one trio
  n=5 → [(0, 2), (2, 5)]              pair + trio
  n=7 → [(0, 2), (2, 4), (4, 7)]      two pairs + trio
"""

from __future__ import annotations

import random
from typing import Hashable, Sequence, TypeVar

from app.exceptions import DuplicateParticipant, InsufficientParticipants

T = TypeVar("T", bound=Hashable)

MIN_GROUP_SIZE = 2


def validate_participants(participant_ids: Sequence[T], minimum: int = MIN_GROUP_SIZE) -> None:
    """Reject inputs that cannot be partitioned into groups of 2 or 3.

    Raises
    ------
    InsufficientParticipants
        Fewer than ``minimum`` ids were supplied.
    DuplicateParticipant
        An id appears more than once; it would otherwise end up in two groups.
    """
    if len(participant_ids) < minimum:
        raise InsufficientParticipants(
            f"At least {minimum} participants are required to create matches.",
            participant_count=len(participant_ids),
            minimum=minimum,
        )

    seen: set[T] = set()
    duplicates: list[str] = []
    for pid in participant_ids:
        if pid in seen:
            duplicates.append(str(pid))
        seen.add(pid)
    if duplicates:
        raise DuplicateParticipant(
            "Participant ids must be unique.",
            duplicates=sorted(set(duplicates)),
        )


def shuffle_participants(participant_ids: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly random permutation of ``participant_ids``.

    The input is copied, never reordered in place.
    """
    shuffled = list(participant_ids)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def group_boundaries(n: int) -> list[tuple[int, int]]:
    """Return ``(start, end)`` slices partitioning ``range(n)`` into 2s and 3s.

    Walks the indices two at a time; when exactly three remain they form a
    single trio instead of a pair plus a singleton.
    """
    if n < MIN_GROUP_SIZE:
        raise InsufficientParticipants(
            f"Cannot group {n} participant(s); at least {MIN_GROUP_SIZE} are required.",
            participant_count=n,
            minimum=MIN_GROUP_SIZE,
        )

    boundaries: list[tuple[int, int]] = []
    i = 0
    while i < n:
        if i == n - 3:
            boundaries.append((i, n))
            break
        boundaries.append((i, i + 2))
        i += 2
    return boundaries


def partition_into_groups(ordered: Sequence[T]) -> list[list[T]]:
    """Split an already-shuffled sequence into consecutive groups of 2 or 3."""
    return [list(ordered[start:end]) for start, end in group_boundaries(len(ordered))]


def cycle_edges(group: Sequence[T]) -> list[tuple[T, T]]:
    """Return the directed find cycle for one group, in group order.

    Member ``k`` targets member ``(k + 1) % len(group)``: a pair yields
    A→B, B→A and a trio yields A→B, B→C, C→A.
    """
    size = len(group)
    if size < MIN_GROUP_SIZE:
        raise ValueError(f"A find cycle needs at least {MIN_GROUP_SIZE} members, got {size}")
    return [(group[k], group[(k + 1) % size]) for k in range(size)]
