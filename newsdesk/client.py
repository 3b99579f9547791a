"""
News API client: remote news requests plus the locally persisted
saved-articles and reading-history collections.
"""
import asyncio
import dataclasses
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from newsdesk.config import get_config
from newsdesk.core.article import Article
from newsdesk.core.collection_store import CollectionPolicy, PersistentCollectionStore, Position
from newsdesk.core.errors import StorageError
from newsdesk.core.storage import KeyValueStorage, SQLiteStorage
from newsdesk.fetchers.news import FetchParams, NewsFetcher

# Configure logging
logger = logging.getLogger(__name__)

SAVED_ARTICLES_KEY = "savedArticles"
READING_HISTORY_KEY = "readingHistory"
HISTORY_CAP = 100

SELECTED_COUNTRIES_KEY = "selectedCountries"
SELECTED_CATEGORIES_KEY = "selectedCategories"
SELECTED_SOURCES_KEY = "selectedSources"
DEFAULT_COUNTRIES = ["us"]
DEFAULT_CATEGORIES = ["technology"]

SAVED_POLICY = CollectionPolicy(position=Position.APPEND)
HISTORY_POLICY = CollectionPolicy(position=Position.PREPEND, dedup_by_id=True, cap_at=HISTORY_CAP)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class NewsApiClient:
    """
    Entry point for the news UI.

    Args:
        fetcher: Network transport for news requests
        store: Collection store, or a raw storage medium to wrap in one
    """
    def __init__(
        self,
        fetcher: NewsFetcher,
        store: Union[PersistentCollectionStore, KeyValueStorage],
    ):
        self.fetcher = fetcher
        if isinstance(store, KeyValueStorage):
            store = PersistentCollectionStore(store)
        self.store = store

    @classmethod
    def from_config(cls) -> "NewsApiClient":
        """Build a client wired to the configured service and SQLite file."""
        db_path = Path(get_config('storage.directory', 'cache')) / get_config('storage.database', 'newsdesk.db')
        return cls(
            NewsFetcher(),
            SQLiteStorage(db_path),
        )

    async def close(self):
        await self.fetcher.close()

    async def fetch_news(self, params: FetchParams, cancel: Optional[asyncio.Event] = None) -> Dict[str, Any]:
        """
        Fetch ranked articles from the news service.

        The payload is returned as received, ranking annotations included.
        """
        data = await self.fetcher.fetch_news(params, cancel=cancel)
        logger.info(f"Fetched {len(data.get('articles') or [])} articles")
        return data

    # Saved articles

    async def get_saved_articles(self) -> List[Article]:
        return await self.store.load(SAVED_ARTICLES_KEY)

    async def save_article(self, article: Article) -> Article:
        """
        Append ``article`` to the saved articles, stamped with ``saved_at``.

        Returns:
            The stamped copy that was stored
        """
        stamped = dataclasses.replace(article, saved_at=_utc_now())
        await self.store.append_ordered(SAVED_ARTICLES_KEY, stamped, SAVED_POLICY)
        logger.info(f"Saved article {article.id}")
        return stamped

    async def unsave_article(self, article_id: str) -> bool:
        """Remove every saved entry with ``article_id``. Always returns True."""
        article_id = str(article_id)
        removed = await self.store.remove_where(SAVED_ARTICLES_KEY, lambda entry: entry.id == article_id)
        logger.info(f"Unsaved article {article_id} ({removed} removed)")
        return True

    async def is_saved(self, article_id: str) -> bool:
        article_id = str(article_id)
        return any(entry.id == article_id for entry in await self.get_saved_articles())

    async def clear_saved(self) -> None:
        await self.store.clear(SAVED_ARTICLES_KEY)

    # Reading history

    async def get_reading_history(self) -> List[Article]:
        return await self.store.load(READING_HISTORY_KEY)

    async def add_to_history(self, article: Article) -> Article:
        """
        Put ``article`` at the front of the reading history.

        An older entry with the same id is dropped and the history is kept
        within its cap.

        Raises:
            ValueError: If ``article`` is None
        """
        if article is None:
            raise ValueError("Cannot add an empty article to the reading history")
        return await self.store.append_ordered(READING_HISTORY_KEY, article, HISTORY_POLICY)

    async def clear_history(self) -> None:
        await self.store.clear(READING_HISTORY_KEY)

    # Filter preferences

    def _load_list(self, key: str, fallback: List[str]) -> List[str]:
        try:
            raw = self.store.storage.get_item(key)
            if raw is None:
                return list(fallback)
            values = json.loads(raw)
        except (StorageError, ValueError, RecursionError) as e:
            logger.warning(f"Ignoring malformed preference {key!r}: {e}")
            return list(fallback)
        if isinstance(values, list) and values and all(isinstance(v, str) for v in values):
            return values
        return list(fallback)

    def _save_list(self, key: str, values: List[str]) -> None:
        self.store.storage.set_item(key, json.dumps(list(values)))

    def get_selected_countries(self) -> List[str]:
        return self._load_list(SELECTED_COUNTRIES_KEY, DEFAULT_COUNTRIES)

    def set_selected_countries(self, countries: List[str]) -> None:
        self._save_list(SELECTED_COUNTRIES_KEY, countries)

    def get_selected_categories(self) -> List[str]:
        return self._load_list(SELECTED_CATEGORIES_KEY, DEFAULT_CATEGORIES)

    def set_selected_categories(self, categories: List[str]) -> None:
        self._save_list(SELECTED_CATEGORIES_KEY, categories)

    def get_selected_sources(self) -> List[str]:
        return self._load_list(SELECTED_SOURCES_KEY, [])

    def set_selected_sources(self, sources: List[str]) -> None:
        self._save_list(SELECTED_SOURCES_KEY, sources)
