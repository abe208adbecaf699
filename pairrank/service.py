"""Ranking service tying the rating engine to an item store.

This module has no presentation dependencies. It validates votes, runs
the Glicko-2 update inside the store's transaction and hands results to
an optional event handler.
"""

from functools import partial

from structlog.contextvars import bound_contextvars

from pairrank import config as settings
from pairrank.events import EventHandler, NullEventHandler
from pairrank.glicko_ranker.errors import InvalidComparison, NonConvergence
from pairrank.glicko_ranker.glicko import update_ratings
from pairrank.glicko_ranker.models import RankerConfig
from pairrank.glicko_ranker.pairing import PairingStrategy, RandomPairing
from pairrank.glicko_ranker.score import normalized_score
from pairrank.logging import configure_logging, get_logger
from pairrank.models import ComparisonOutcome, Item
from pairrank.store import ItemStore, SqliteItemStore

log = get_logger(__name__)


class RankingService:
    """Records pairwise votes and picks the next pair to compare.

    The rating math is pure; this class owns the boundary with the store
    and makes sure each vote is applied as one atomic unit.
    """

    def __init__(
        self,
        store: ItemStore,
        config: RankerConfig | None = None,
        pairing: PairingStrategy | None = None,
        event_handler: EventHandler | None = None,
    ):
        """Initialize the service.

        Args:
            store: Persistence backend for items and comparison events
            config: Rating system constants (uses defaults if None)
            pairing: Pair selection strategy (random if None)
            event_handler: Optional observer (uses NullEventHandler if None)
        """
        self.store = store
        self.config = config or RankerConfig()
        self.pairing = pairing or RandomPairing()
        self.event_handler = event_handler or NullEventHandler()

    def _scored(self, item: Item) -> Item:
        return item.with_score_scale(self.config.score_steepness, self.config.score_midpoint)

    def record_comparison(self, winner_id: str, loser_id: str) -> ComparisonOutcome:
        """Record that winner_id beat loser_id.

        Returns:
            The committed winner and loser items plus the logged event

        Raises:
            InvalidComparison: If both ids refer to the same item
            ItemNotFound: If either id is unknown
            NonConvergence: If the stored ratings are malformed
        """
        if winner_id == loser_id:
            raise InvalidComparison(f"An item cannot be compared with itself: {winner_id}")

        update = partial(update_ratings, config=self.config)
        # Solver and store log lines inside this block carry both ids
        with bound_contextvars(winner_id=winner_id, loser_id=loser_id):
            try:
                committed = self.store.apply_comparison(winner_id, loser_id, update)
            except NonConvergence:
                log.error("comparison_rating_update_failed")
                raise

            outcome = committed.model_copy(update={
                "winner": self._scored(committed.winner),
                "loser": self._scored(committed.loser),
            })
            log.info(
                "comparison_recorded",
                event_id=outcome.event.id,
                winner_rating=round(outcome.winner.rating.rating, 1),
                loser_rating=round(outcome.loser.rating.rating, 1),
            )

        self.event_handler.on_comparison_recorded(outcome=outcome)
        return outcome

    def next_pair(self, category: str) -> tuple[Item, Item]:
        """Choose the next two items of a category to compare.

        Raises:
            InsufficientCandidates: If the category holds fewer than two items
        """
        candidates = self.standings(category)
        first, second = self.pairing.select_pair(candidates)

        log.debug(
            "pair_selected",
            category=category,
            first_id=first.id,
            second_id=second.id,
            candidates=len(candidates),
        )
        self.event_handler.on_pair_selected(first=first, second=second)
        return first, second

    def standings(self, category: str | None = None) -> list[Item]:
        """Items ordered by rating, best first."""
        return [self._scored(item) for item in self.store.list_items(category)]

    def score(self, item: Item) -> float:
        """Display score of an item under this service's configuration."""
        return normalized_score(
            item.rating.rating,
            steepness=self.config.score_steepness,
            midpoint=self.config.score_midpoint,
        )


def build_service(db_path: str | None = None, event_handler: EventHandler | None = None) -> RankingService:
    """Create a service from environment configuration.

    Configures logging, opens the SQLite store and loads the rating
    constants from the environment.
    """
    configure_logging()
    ranker_config = settings.load_ranker_config()
    store = SqliteItemStore(db_path or settings.DB_PATH, config=ranker_config)
    log.info("service_started", db_path=store.path, tau=ranker_config.tau)
    return RankingService(store, config=ranker_config, event_handler=event_handler)
