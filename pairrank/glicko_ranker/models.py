"""Data models for the Glicko-2 ranking system."""

from pydantic import BaseModel, ConfigDict, Field


class Rating(BaseModel):
    """Glicko-2 strength estimate for one item, on the public scale."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    rating: float = 1500.0
    deviation: float = Field(default=350.0, gt=0)  # RD, larger = less certain
    volatility: float = Field(default=0.06, gt=0)


class RankerConfig(BaseModel):
    """Configuration for the Glicko-2 ranking system."""
    model_config = ConfigDict(frozen=True)

    # Default rating for new items
    initial_rating: float = 1500.0
    initial_deviation: float = Field(default=350.0, gt=0)
    initial_volatility: float = Field(default=0.06, gt=0)

    # Glicko-2 system constants
    tau: float = Field(default=0.5, gt=0)  # Constrains volatility change per period
    scale: float = Field(default=173.7178, gt=0)

    # Volatility solver
    epsilon: float = Field(default=1e-6, gt=0)
    max_iterations: int = Field(default=100, ge=1)

    # Display score mapping
    score_steepness: float = Field(default=0.005, gt=0)
    score_midpoint: float = 1500.0

    def initial(self) -> Rating:
        """Rating given to a newly created item."""
        return Rating(
            rating=self.initial_rating,
            deviation=self.initial_deviation,
            volatility=self.initial_volatility,
        )
