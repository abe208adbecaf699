"""Unit tests for core domain models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pairrank.glicko_ranker.models import RankerConfig, Rating
from pairrank.models import ComparisonEvent, Item

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


def make_item(rating: Rating | None = None, **overrides) -> Item:
    """Factory to create an Item for testing."""
    fields = {
        "id": "item-1",
        "category": "Coffee",
        "name": "Test Roast",
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    if rating is not None:
        fields["rating"] = rating
    return Item(**fields)


class TestRating:
    """Tests for Rating model."""

    def test_default_values(self):
        rating = Rating()
        assert rating.rating == 1500.0
        assert rating.deviation == 350.0
        assert rating.volatility == 0.06

    @pytest.mark.parametrize("deviation", [0.0, -10.0])
    def test_deviation_must_be_positive(self, deviation):
        with pytest.raises(ValidationError):
            Rating(deviation=deviation)

    @pytest.mark.parametrize("volatility", [0.0, -0.01])
    def test_volatility_must_be_positive(self, volatility):
        with pytest.raises(ValidationError):
            Rating(volatility=volatility)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_rejects_non_finite_rating(self, value):
        with pytest.raises(ValidationError):
            Rating(rating=value)

    def test_is_immutable(self):
        rating = Rating()
        with pytest.raises(ValidationError):
            rating.rating = 1600.0

    def test_value_equality(self):
        assert Rating(rating=1600.0) == Rating(rating=1600.0)


class TestRankerConfig:
    """Tests for RankerConfig model."""

    def test_default_values(self):
        config = RankerConfig()
        assert config.tau == 0.5
        assert config.scale == 173.7178
        assert config.epsilon == 1e-6
        assert config.max_iterations == 100
        assert config.score_steepness == 0.005

    def test_initial_rating(self):
        config = RankerConfig(initial_rating=1200.0, initial_deviation=200.0)
        assert config.initial() == Rating(rating=1200.0, deviation=200.0, volatility=0.06)

    @pytest.mark.parametrize("field", ["tau", "scale", "epsilon", "score_steepness"])
    def test_constants_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            RankerConfig(**{field: 0})

    def test_max_iterations_at_least_one(self):
        with pytest.raises(ValidationError):
            RankerConfig(max_iterations=0)


class TestItem:
    """Tests for Item model."""

    def test_minimal_item(self):
        item = make_item()
        assert item.rating == Rating()
        assert item.match_count == 0
        assert item.notes is None
        assert item.image_url is None

    def test_default_item_scores_fifty(self):
        assert make_item().normalized_score == 50.0

    def test_score_follows_rating(self):
        strong = make_item(Rating(rating=1800.0))
        weak = make_item(Rating(rating=1200.0))
        assert strong.normalized_score > 50.0 > weak.normalized_score

    def test_score_is_serialized(self):
        """Score is exposed as a read-only field in the API representation."""
        data = make_item(Rating(rating=1500.0)).model_dump()
        assert data["normalized_score"] == 50.0
        assert data["rating"] == {"rating": 1500.0, "deviation": 350.0, "volatility": 0.06}

    def test_with_score_scale_changes_score(self):
        item = make_item(Rating(rating=1600.0))
        steep = item.with_score_scale(0.02, 1500.0)

        assert steep.normalized_score > item.normalized_score
        assert steep.model_dump()["normalized_score"] == steep.normalized_score

    def test_with_score_scale_leaves_original_alone(self):
        item = make_item(Rating(rating=1600.0))
        before = item.normalized_score

        item.with_score_scale(0.02, 1500.0)

        assert item.normalized_score == before


class TestComparisonEvent:
    """Tests for ComparisonEvent model."""

    def test_is_immutable(self):
        event = ComparisonEvent(
            id="evt-1",
            winner_id="a",
            loser_id="b",
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        )
        with pytest.raises(ValidationError):
            event.winner_id = "b"

    def test_parses_iso_timestamp(self):
        event = ComparisonEvent(
            id="evt-1",
            winner_id="a",
            loser_id="b",
            created_at="2024-01-01T12:00:00+00:00",
        )
        assert event.created_at == datetime(2024, 1, 1, 12, tzinfo=UTC)
