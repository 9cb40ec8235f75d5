"""SQLite key-value persistence for the Party XP Calculator.

Plays the role the browser's local storage plays for a web page: a flat
mapping of string keys to string values. The saved-calculation list lives
under a single key as a JSON document.

Storage location defaults to ``StorageSettings.database_path``.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, Protocol

from xp_calculator.core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal surface the saved-calculation store needs."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> bool: ...


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite-backed key-value store.

    Each operation opens its own connection, commits on success and rolls
    back on error.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured path.
        """
        if db_path is None:
            self.db_path = self._get_default_path()
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @staticmethod
    def _get_default_path() -> Path:
        """Get default database path from settings."""
        from xp_calculator.core.config import get_settings

        return get_settings().storage.database_path

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Key-Value Operations
    # =========================================================================

    def get_item(self, key: str) -> str | None:
        """Get the value stored under a key.

        Args:
            key: Storage key.

        Returns:
            Stored value, or None if the key is absent.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one.

        Args:
            key: Storage key.
            value: Value to store.
        """
        now = datetime.now(timezone.utc).isoformat()
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
            """, (key, value, now))

        logger.debug("Stored item", key=key, size=len(value))

    def remove_item(self, key: str) -> bool:
        """Delete a key.

        Args:
            key: Storage key.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Removed item", key=key)

        return deleted


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance.

    Returns:
        Database singleton instance.
    """
    global _database_instance

    if _database_instance is None:
        _database_instance = Database()

    return _database_instance


def reset_database() -> None:
    """Drop the global instance so the next call re-reads settings."""
    global _database_instance
    _database_instance = None


__all__ = [
    "KeyValueStore",
    "Database",
    "get_database",
    "reset_database",
]
