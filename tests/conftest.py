"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Party XP Calculator test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and database singleton around each test."""
    from xp_calculator.core.config import clear_settings_cache
    from xp_calculator.storage.database import reset_database

    clear_settings_cache()
    reset_database()
    yield
    clear_settings_cache()
    reset_database()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "XP_CALCULATOR_DEBUG": "true",
        "XP_CALCULATOR_LOG_LEVEL": "DEBUG",
        "XP_CALCULATOR_DATABASE_PATH": str(tmp_path / "env" / "xp.db"),
        "XP_CALCULATOR_STORAGE_KEY": "test-calculations",
    }
    monkeypatch.chdir(tmp_path)
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_party() -> tuple[Any, ...]:
    """A fighter well above the monsters and a weaker cleric.

    Returns:
        Tuple of Character instances.
    """
    from xp_calculator.models import Character

    return (
        Character(id=1, name="Fighter", hit_dice=8),
        Character(id=2, name="Cleric", hit_dice=2),
    )


@pytest.fixture
def sample_monsters() -> tuple[Any, ...]:
    """Four 2-HD gnolls.

    Returns:
        Tuple of MonsterGroup instances.
    """
    from xp_calculator.models import MonsterGroup

    return (MonsterGroup(id=1, name="Gnoll", hit_dice=2, count=4),)


@pytest.fixture
def sample_result(sample_party: tuple[Any, ...], sample_monsters: tuple[Any, ...]) -> Any:
    """Result of the sample party fighting the sample monsters."""
    from xp_calculator.engine import compute_result

    return compute_result(sample_party, sample_monsters)


# =============================================================================
# Storage Fixtures
# =============================================================================


class MemoryStore:
    """Dict-backed key-value store with switchable failures."""

    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False

    def get_item(self, key: str) -> str | None:
        import sqlite3

        if self.fail_reads:
            raise sqlite3.OperationalError("database is locked")
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        import sqlite3

        if self.fail_writes:
            raise sqlite3.OperationalError("attempt to write a readonly database")
        self.items[key] = value

    def remove_item(self, key: str) -> bool:
        return self.items.pop(key, None) is not None


@pytest.fixture
def memory_store() -> MemoryStore:
    """In-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def database(tmp_path: Path) -> Any:
    """SQLite database in a temporary directory."""
    from xp_calculator.storage.database import Database

    return Database(tmp_path / "db" / "xp_calculator.db")


@pytest.fixture
def calculation_store(database: Any) -> Any:
    """Saved-calculation store backed by the temporary database."""
    from xp_calculator.storage.calculations import SavedCalculationStore

    return SavedCalculationStore(database)
