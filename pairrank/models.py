"""Domain models for categories, ranked items and the comparison log."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field

from pairrank.glicko_ranker.models import Rating
from pairrank.glicko_ranker.score import DEFAULT_MIDPOINT, DEFAULT_STEEPNESS, normalized_score


class Category(BaseModel):
    id: str
    name: str
    created_at: datetime


class Item(BaseModel):
    """An item ranked within its category.

    normalized_score uses the score constants of whoever produced the
    item (store or service); see with_score_scale.
    """
    id: str
    category: str                      # Category name
    name: str
    notes: str | None = None
    image_url: str | None = None
    created_at: datetime
    rating: Rating = Field(default_factory=Rating)
    match_count: int = 0               # Comparisons this item took part in

    _score_steepness: float = PrivateAttr(default=DEFAULT_STEEPNESS)
    _score_midpoint: float = PrivateAttr(default=DEFAULT_MIDPOINT)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def normalized_score(self) -> float:
        """0-100 display score derived from the rating."""
        return normalized_score(
            self.rating.rating,
            steepness=self._score_steepness,
            midpoint=self._score_midpoint,
        )

    def with_score_scale(self, steepness: float, midpoint: float) -> "Item":
        """Copy of this item whose normalized_score uses the given constants."""
        item = self.model_copy()
        item._score_steepness = steepness
        item._score_midpoint = midpoint
        return item


class ComparisonEvent(BaseModel):
    """Append-only record of one submitted vote."""
    model_config = ConfigDict(frozen=True)

    id: str
    winner_id: str
    loser_id: str
    created_at: datetime


class ComparisonOutcome(BaseModel):
    """Items as committed after a comparison, with the logged event."""
    winner: Item
    loser: Item
    event: ComparisonEvent
