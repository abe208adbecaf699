"""Pair selection strategies for pairwise comparisons."""

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

from pairrank.glicko_ranker.errors import InsufficientCandidates

T = TypeVar("T")


class PairingStrategy(Protocol):
    """Protocol for pairing strategies."""

    def select_pair(self, candidates: Sequence[T]) -> tuple[T, T]:
        """Select the next two candidates to compare.

        Args:
            candidates: Items available for comparison

        Returns:
            Two distinct entries of candidates

        Raises:
            InsufficientCandidates: If fewer than two candidates are given
        """
        ...


class RandomPairing:
    """Random pairing strategy - picks two candidates uniformly at random."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def select_pair(self, candidates: Sequence[T]) -> tuple[T, T]:
        """Select two distinct candidates without replacement."""
        if len(candidates) < 2:
            raise InsufficientCandidates(len(candidates))

        # Sample positions so duplicate entries still count as distinct picks
        idx1, idx2 = self.rng.sample(range(len(candidates)), 2)
        return candidates[idx1], candidates[idx2]


def select_pair(
    candidates: Sequence[T],
    strategy: PairingStrategy | None = None,
) -> tuple[T, T]:
    """Select a pair with the given strategy (random if None)."""
    strategy = strategy or RandomPairing()
    return strategy.select_pair(candidates)
