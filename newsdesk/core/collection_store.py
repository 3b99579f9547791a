"""
Ordered, capped and deduplicated article collections on top of a
key-value storage medium.
"""
import asyncio
import enum
import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from newsdesk.core.article import Article
from newsdesk.core.errors import StorageError
from newsdesk.core.storage import KeyValueStorage

# Configure logging
logger = logging.getLogger(__name__)


class Position(enum.Enum):
    APPEND = "append"
    PREPEND = "prepend"


@dataclass(frozen=True)
class CollectionPolicy:
    """
    How ``append_ordered`` inserts into a collection.

    Attributes:
        position: Insert at the end or at the front
        dedup_by_id: Drop existing entries with the same id before inserting
        cap_at: Maximum length; the oldest entries are dropped beyond it
    """
    position: Position = Position.APPEND
    dedup_by_id: bool = False
    cap_at: Optional[int] = None

    def __post_init__(self):
        if self.cap_at is not None and self.cap_at < 1:
            raise ValueError(f"cap_at must be positive, got {self.cap_at}")


class PersistentCollectionStore:
    """
    Named article collections persisted as JSON arrays.

    Every read-modify-write on a key runs under that key's lock, so tasks
    sharing a store see a linear history per collection.
    """
    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self.locks = defaultdict(asyncio.Lock)

    def _read(self, key: str) -> List[Article]:
        try:
            raw = self.storage.get_item(key)
            if raw is None:
                return []
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError(f"expected a JSON array, got {type(entries).__name__}")
            return [Article.from_dict(entry) for entry in entries]
        except (StorageError, ValueError, RecursionError) as e:
            # JSONDecodeError is a ValueError; deep nesting raises RecursionError
            logger.warning(f"Discarding corrupt collection {key!r}: {e}")
            return []

    def _write(self, key: str, items: Iterable[Article]) -> None:
        self.storage.set_item(key, json.dumps([item.to_dict() for item in items]))

    async def load(self, key: str) -> List[Article]:
        """
        Load the collection stored under ``key``.

        Missing or malformed data yields an empty list; this never raises
        for bad content.
        """
        async with self.locks[key]:
            return self._read(key)

    async def save(self, key: str, items: Iterable[Article]) -> None:
        """Replace the collection stored under ``key``."""
        async with self.locks[key]:
            self._write(key, items)

    async def append_ordered(self, key: str, item: Article, policy: CollectionPolicy) -> Article:
        """
        Insert ``item`` into the collection according to ``policy``.

        Args:
            key: Collection name
            item: Article to insert
            policy: Position, dedup and cap rules

        Returns:
            The inserted article
        """
        async with self.locks[key]:
            items = self._read(key)
            if policy.dedup_by_id:
                items = [existing for existing in items if existing.id != item.id]

            if policy.position is Position.PREPEND:
                items.insert(0, item)
            else:
                items.append(item)

            if policy.cap_at is not None and len(items) > policy.cap_at:
                logger.debug(f"Collection {key!r} over cap, dropping {len(items) - policy.cap_at} entries")
                if policy.position is Position.PREPEND:
                    items = items[:policy.cap_at]
                else:
                    items = items[-policy.cap_at:]

            self._write(key, items)
            return item

    async def remove_where(self, key: str, predicate: Callable[[Article], bool]) -> int:
        """
        Remove every entry matching ``predicate``, keeping the order of
        the rest.

        Returns:
            Number of entries removed
        """
        async with self.locks[key]:
            items = self._read(key)
            kept = [item for item in items if not predicate(item)]
            self._write(key, kept)
            return len(items) - len(kept)

    async def clear(self, key: str) -> None:
        """Remove the collection entirely."""
        async with self.locks[key]:
            self.storage.remove_item(key)
