"""
Key-value storage media for persisted collections.
"""
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from newsdesk.core.errors import StorageError


class KeyValueStorage(ABC):
    """
    Durable string-to-string storage that collections are persisted in.
    """
    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None if there is none."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Return all stored keys."""


class MemoryStorage(KeyValueStorage):
    """
    In-process storage, mostly useful for tests.
    """
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class SQLiteStorage(KeyValueStorage):
    """
    Stores values in a single SQLite table, one row per key.
    """
    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self._init_storage_dir()
        self._init_db()

    def _init_storage_dir(self):
        """Initialize the directory holding the database."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and always close it."""
        conn = sqlite3.connect(self.db_path)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        """Initialize the SQLite database."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS collections (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def get_item(self, key: str) -> Optional[str]:
        """
        Raises:
            StorageError: The database file or the stored value is unreadable
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "SELECT value FROM collections WHERE key = ?",
                    (key,)
                )
                result = cursor.fetchone()
                return result[0] if result else None
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {key!r} from {self.db_path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO collections (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (key, value)
            )

    def remove_item(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM collections WHERE key = ?", (key,))

    def keys(self) -> List[str]:
        with self._connect() as conn:
            return [row[0] for row in conn.execute("SELECT key FROM collections ORDER BY key")]
