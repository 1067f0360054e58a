"""Unit tests for the pure grouping and cycle functions."""
import random
from collections import Counter

import pytest

from app.exceptions import DuplicateParticipant, InsufficientParticipants
from app.services.grouping import (
    cycle_edges,
    group_boundaries,
    partition_into_groups,
    shuffle_participants,
    validate_participants,
)


class TestGroupBoundaries:
    """Pairs throughout, with a single trailing trio for odd counts."""

    @pytest.mark.parametrize(
        "n, expected",
        [
            (2, [(0, 2)]),
            (3, [(0, 3)]),
            (4, [(0, 2), (2, 4)]),
            (5, [(0, 2), (2, 5)]),
            (7, [(0, 2), (2, 4), (4, 7)]),
        ],
    )
    def test_small_sizes(self, n, expected):
        assert group_boundaries(n) == expected

    @pytest.mark.parametrize("n", [0, 1])
    def test_too_few(self, n):
        with pytest.raises(InsufficientParticipants):
            group_boundaries(n)

    @pytest.mark.parametrize("n", range(2, 41))
    def test_partition_completeness_and_trio_count(self, n):
        people = [f"P{i}" for i in range(n)]
        groups = partition_into_groups(people)

        sizes = [len(g) for g in groups]
        assert all(size in (2, 3) for size in sizes)
        flattened = [p for g in groups for p in g]
        assert flattened == people  # grouping keeps the shuffled order
        assert sizes.count(3) == (1 if n % 2 else 0)
        if n % 2:
            assert sizes[-1] == 3


class TestCycleEdges:

    def test_pair_is_mutual(self):
        assert cycle_edges(["A", "B"]) == [("A", "B"), ("B", "A")]

    def test_trio_is_three_cycle(self):
        assert cycle_edges(["A", "B", "C"]) == [("A", "B"), ("B", "C"), ("C", "A")]

    @pytest.mark.parametrize("size", [2, 3, 4, 6])
    def test_single_cycle_covers_group(self, size):
        group = list(range(size))
        edges = cycle_edges(group)
        successor = dict(edges)

        assert len(edges) == size
        assert sorted(successor) == group
        assert sorted(successor.values()) == group
        assert all(a != b for a, b in edges)

        # Walking successors from the first member visits everyone once.
        seen, current = [], group[0]
        for _ in range(size):
            seen.append(current)
            current = successor[current]
        assert current == group[0]
        assert sorted(seen) == group

    def test_singleton_rejected(self):
        with pytest.raises(ValueError):
            cycle_edges(["A"])


class TestWorkedScenario:
    """Seven participants shuffled to [P3, P1, P6, P2, P7, P4, P5]."""

    def test_groups_and_assignments(self):
        shuffled = ["P3", "P1", "P6", "P2", "P7", "P4", "P5"]
        groups = partition_into_groups(shuffled)
        assert groups == [["P3", "P1"], ["P6", "P2"], ["P7", "P4", "P5"]]

        edges = [edge for g in groups for edge in cycle_edges(g)]
        assert edges == [
            ("P3", "P1"), ("P1", "P3"),
            ("P6", "P2"), ("P2", "P6"),
            ("P7", "P4"), ("P4", "P5"), ("P5", "P7"),
        ]


class TestShuffle:

    def test_is_permutation_and_copies(self):
        ids = list(range(25))
        original = list(ids)
        shuffled = shuffle_participants(ids, random.Random(3))
        assert sorted(shuffled) == original
        assert ids == original

    def test_seed_is_reproducible(self):
        ids = list(range(10))
        assert shuffle_participants(ids, random.Random(42)) == shuffle_participants(
            ids, random.Random(42)
        )

    def test_all_orderings_roughly_equally_likely(self):
        rng = random.Random(99)
        counts = Counter(tuple(shuffle_participants("ABC", rng)) for _ in range(6000))
        assert len(counts) == 6
        for count in counts.values():
            assert 800 < count < 1200


class TestValidateParticipants:

    def test_single_participant(self):
        with pytest.raises(InsufficientParticipants) as exc_info:
            validate_participants(["P1"])
        assert exc_info.value.details["participant_count"] == 1

    def test_duplicates_reported(self):
        with pytest.raises(DuplicateParticipant) as exc_info:
            validate_participants(["P1", "P2", "P1", "P3"])
        assert exc_info.value.details["duplicates"] == ["P1"]

    def test_custom_minimum(self):
        with pytest.raises(InsufficientParticipants):
            validate_participants(["P1", "P2", "P3"], minimum=4)
        validate_participants(["P1", "P2", "P3", "P4"], minimum=4)
