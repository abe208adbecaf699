"""Glicko-2 ranking system for pairwise item comparisons."""

from pairrank.glicko_ranker.errors import (
    InsufficientCandidates,
    InvalidComparison,
    NonConvergence,
    RankingError,
)
from pairrank.glicko_ranker.glicko import update_ratings
from pairrank.glicko_ranker.models import RankerConfig, Rating
from pairrank.glicko_ranker.pairing import PairingStrategy, RandomPairing, select_pair
from pairrank.glicko_ranker.score import normalized_score

__all__ = [
    "InsufficientCandidates",
    "InvalidComparison",
    "NonConvergence",
    "PairingStrategy",
    "RandomPairing",
    "RankerConfig",
    "RankingError",
    "Rating",
    "normalized_score",
    "select_pair",
    "update_ratings",
]
