"""Environment-driven configuration for pairrank."""

from __future__ import annotations

import os

from pairrank.glicko_ranker.models import RankerConfig

LOG_LEVEL = os.environ.get("PAIRRANK_LOG_LEVEL", "INFO")
LOG_JSON = os.environ.get("PAIRRANK_LOG_JSON", "true").lower() == "true"

DB_PATH = os.environ.get("PAIRRANK_DB_PATH", "pairrank.db")

# Optional overrides for the rating system constants
TAU = os.environ.get("PAIRRANK_TAU", "")
SCORE_STEEPNESS = os.environ.get("PAIRRANK_SCORE_STEEPNESS", "")
MAX_SOLVER_ITERATIONS = os.environ.get("PAIRRANK_MAX_SOLVER_ITERATIONS", "")


def load_ranker_config() -> RankerConfig:
    """Build a RankerConfig from the environment, keeping defaults for unset values."""
    overrides: dict[str, float | int] = {}
    if TAU:
        overrides["tau"] = float(TAU)
    if SCORE_STEEPNESS:
        overrides["score_steepness"] = float(SCORE_STEEPNESS)
    if MAX_SOLVER_ITERATIONS:
        overrides["max_iterations"] = int(MAX_SOLVER_ITERATIONS)
    return RankerConfig(**overrides)
