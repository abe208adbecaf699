"""Item storage for pairrank.

ItemStore is the narrow contract the ranking service needs. SqliteItemStore
implements it on a single SQLite connection; every comparison is applied as
one read-compute-write transaction so concurrent votes on the same item
cannot lose updates.
"""

import sqlite3
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Protocol

from pairrank.glicko_ranker.errors import RankingError
from pairrank.glicko_ranker.models import RankerConfig, Rating
from pairrank.logging import get_logger
from pairrank.models import Category, ComparisonEvent, ComparisonOutcome, Item

log = get_logger(__name__)

RatingUpdate = Callable[[Rating, Rating], tuple[Rating, Rating]]


class ItemNotFound(RankingError, LookupError):
    """No item exists with the given identifier."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class ItemStore(Protocol):
    """Persistence contract used by the ranking service."""

    def create_item(
        self,
        category: str,
        name: str,
        notes: str | None = None,
        image_url: str | None = None,
    ) -> Item:
        ...

    def get_item(self, item_id: str) -> Item:
        ...

    def list_items(self, category: str | None = None) -> list[Item]:
        ...

    def update_item(
        self,
        item_id: str,
        category: str | None = None,
        name: str | None = None,
        notes: str | None = None,
        image_url: str | None = None,
    ) -> Item:
        """Change the given fields; None leaves a field as it is."""
        ...

    def delete_item(self, item_id: str) -> None:
        ...

    def list_categories(self) -> list[Category]:
        ...

    def apply_comparison(
        self,
        winner_id: str,
        loser_id: str,
        update: RatingUpdate,
    ) -> ComparisonOutcome:
        """Load both ratings, apply update, persist results and log the event.

        All of it happens atomically: on any error nothing is committed.
        """
        ...

    def list_comparisons(self, item_id: str | None = None) -> list[ComparisonEvent]:
        ...


_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS categories (
        id TEXT PRIMARY KEY,
        name TEXT UNIQUE NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS items (
        id TEXT PRIMARY KEY,
        category_id TEXT NOT NULL,
        name TEXT NOT NULL,
        notes TEXT,
        image_url TEXT,
        created_at TEXT NOT NULL,
        rating REAL NOT NULL,
        deviation REAL NOT NULL,
        volatility REAL NOT NULL,
        match_count INTEGER NOT NULL DEFAULT 0,
        FOREIGN KEY (category_id) REFERENCES categories(id)
    )
    """,
    # No foreign keys: the audit log outlives deleted items
    """
    CREATE TABLE IF NOT EXISTS comparisons (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT UNIQUE NOT NULL,
        winner_id TEXT NOT NULL,
        loser_id TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
)

_ITEM_SELECT = """
    SELECT i.id, c.name AS category, i.name, i.notes, i.image_url, i.created_at,
           i.rating, i.deviation, i.volatility, i.match_count
    FROM items i
    JOIN categories c ON i.category_id = c.id
"""


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _row_to_item(row: sqlite3.Row, config: RankerConfig) -> Item:
    return Item(
        id=row["id"],
        category=row["category"],
        name=row["name"],
        notes=row["notes"],
        image_url=row["image_url"],
        created_at=row["created_at"],
        rating=Rating(
            rating=row["rating"],
            deviation=row["deviation"],
            volatility=row["volatility"],
        ),
        match_count=row["match_count"],
    ).with_score_scale(config.score_steepness, config.score_midpoint)


class SqliteItemStore:
    """SQLite-backed ItemStore.

    One connection is shared by all callers. A lock plus BEGIN IMMEDIATE
    serializes writers, so a comparison's read-compute-write cycle never
    interleaves with another one.
    """

    def __init__(self, path: str = ":memory:", config: RankerConfig | None = None):
        """Open (and if needed initialize) the database.

        Args:
            path: SQLite database path, ":memory:" for a private in-memory DB
            config: Supplies the default rating of new items
        """
        self.path = path
        self.config = config or RankerConfig()
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        with self._transaction() as cursor:
            for statement in _SCHEMA:
                cursor.execute(statement)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "SqliteItemStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Run a block in one write transaction, rolling back on any error."""
        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            try:
                yield cursor
            except BaseException:
                cursor.execute("ROLLBACK")
                raise
            else:
                cursor.execute("COMMIT")
            finally:
                cursor.close()

    def _fetch_item(self, cursor: sqlite3.Cursor, item_id: str) -> Item:
        cursor.execute(_ITEM_SELECT + " WHERE i.id = ?", (item_id,))
        row = cursor.fetchone()
        if row is None:
            raise ItemNotFound(item_id)
        return _row_to_item(row, self.config)

    def _get_or_create_category_id(self, cursor: sqlite3.Cursor, name: str) -> str:
        cursor.execute("SELECT id FROM categories WHERE name = ?", (name,))
        row = cursor.fetchone()
        if row is not None:
            return row["id"]

        category_id = str(uuid.uuid4())
        cursor.execute(
            "INSERT INTO categories (id, name, created_at) VALUES (?, ?, ?)",
            (category_id, name, _now()),
        )
        log.info("category_created", category_id=category_id, name=name)
        return category_id

    def create_item(
        self,
        category: str,
        name: str,
        notes: str | None = None,
        image_url: str | None = None,
    ) -> Item:
        """Insert a new item with the default rating."""
        item_id = str(uuid.uuid4())
        initial = self.config.initial()
        with self._transaction() as cursor:
            category_id = self._get_or_create_category_id(cursor, category)
            cursor.execute(
                """
                INSERT INTO items (id, category_id, name, notes, image_url, created_at,
                                   rating, deviation, volatility, match_count)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0)
                """,
                (
                    item_id,
                    category_id,
                    name,
                    notes,
                    image_url,
                    _now(),
                    initial.rating,
                    initial.deviation,
                    initial.volatility,
                ),
            )
            item = self._fetch_item(cursor, item_id)

        log.info("item_created", item_id=item_id, category=category, name=name)
        return item

    def get_item(self, item_id: str) -> Item:
        with self._lock:
            cursor = self._conn.cursor()
            try:
                return self._fetch_item(cursor, item_id)
            finally:
                cursor.close()

    def list_items(self, category: str | None = None) -> list[Item]:
        """List items, highest rating first."""
        sql = _ITEM_SELECT
        params: tuple[str, ...] = ()
        if category is not None:
            sql += " WHERE c.name = ?"
            params = (category,)
        sql += " ORDER BY i.rating DESC, i.created_at ASC, i.rowid ASC"

        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [_row_to_item(row, self.config) for row in rows]

    def update_item(
        self,
        item_id: str,
        category: str | None = None,
        name: str | None = None,
        notes: str | None = None,
        image_url: str | None = None,
    ) -> Item:
        """Edit an item in place. Moving it to an unknown category creates that category.

        The rating and match count are left untouched.
        """
        with self._transaction() as cursor:
            current = self._fetch_item(cursor, item_id)

            changes: dict[str, str] = {}
            if category is not None and category != current.category:
                changes["category_id"] = self._get_or_create_category_id(cursor, category)
            if name is not None:
                changes["name"] = name
            if notes is not None:
                changes["notes"] = notes
            if image_url is not None:
                changes["image_url"] = image_url

            if changes:
                assignments = ", ".join(f"{column} = ?" for column in changes)
                cursor.execute(
                    f"UPDATE items SET {assignments} WHERE id = ?",
                    (*changes.values(), item_id),
                )
            item = self._fetch_item(cursor, item_id)

        log.info("item_updated", item_id=item_id, fields=sorted(changes))
        return item

    def delete_item(self, item_id: str) -> None:
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM items WHERE id = ?", (item_id,))
            if cursor.rowcount == 0:
                raise ItemNotFound(item_id)
        log.info("item_deleted", item_id=item_id)

    def list_categories(self) -> list[Category]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, name, created_at FROM categories ORDER BY name"
            ).fetchall()
        return [Category(**dict(row)) for row in rows]

    def apply_comparison(
        self,
        winner_id: str,
        loser_id: str,
        update: RatingUpdate,
    ) -> ComparisonOutcome:
        """Apply one comparison as a single transaction."""
        with self._transaction() as cursor:
            winner = self._fetch_item(cursor, winner_id)
            loser = self._fetch_item(cursor, loser_id)

            new_winner, new_loser = update(winner.rating, loser.rating)

            for item_id, rating in ((winner_id, new_winner), (loser_id, new_loser)):
                cursor.execute(
                    """
                    UPDATE items
                    SET rating = ?, deviation = ?, volatility = ?, match_count = match_count + 1
                    WHERE id = ?
                    """,
                    (rating.rating, rating.deviation, rating.volatility, item_id),
                )

            event = ComparisonEvent(
                id=str(uuid.uuid4()),
                winner_id=winner_id,
                loser_id=loser_id,
                created_at=datetime.now(UTC),
            )
            cursor.execute(
                "INSERT INTO comparisons (id, winner_id, loser_id, created_at) VALUES (?, ?, ?, ?)",
                (event.id, event.winner_id, event.loser_id, event.created_at.isoformat()),
            )

            outcome = ComparisonOutcome(
                winner=self._fetch_item(cursor, winner_id),
                loser=self._fetch_item(cursor, loser_id),
                event=event,
            )

        return outcome

    def list_comparisons(self, item_id: str | None = None) -> list[ComparisonEvent]:
        """List logged comparisons, oldest first."""
        sql = "SELECT id, winner_id, loser_id, created_at FROM comparisons"
        params: tuple[str, ...] = ()
        if item_id is not None:
            sql += " WHERE winner_id = ? OR loser_id = ?"
            params = (item_id, item_id)
        sql += " ORDER BY seq"

        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [ComparisonEvent(**dict(row)) for row in rows]
