"""Event system for decoupling the ranking service from presentation.

The service emits events without knowing who renders them. CLI or API
layers implement EventHandler and pass it to RankingService.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pairrank.models import ComparisonOutcome, Item


class EventHandler(Protocol):
    """Protocol for handlers that observe the ranking service."""

    def on_pair_selected(
        self,
        first: "Item",
        second: "Item",
        **kwargs: Any
    ) -> None:
        """Called when a pair is chosen for the next comparison.

        Args:
            first: First item of the pair
            second: Second item of the pair
            **kwargs: Additional context
        """
        ...

    def on_comparison_recorded(
        self,
        outcome: "ComparisonOutcome",
        **kwargs: Any
    ) -> None:
        """Called after a comparison has been committed.

        Args:
            outcome: Updated items and the logged event
            **kwargs: Additional context
        """
        ...


class NullEventHandler:
    """Event handler that does nothing.

    Used as the default when no event handling is needed.
    """

    def on_pair_selected(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_comparison_recorded(self, *args: Any, **kwargs: Any) -> None:
        pass
