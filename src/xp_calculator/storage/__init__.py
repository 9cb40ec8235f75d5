"""Storage module for saved calculations.

Provides:
- A SQLite key-value store standing in for browser local storage
- A saved-calculation store keeping one JSON list under a single key
"""

from xp_calculator.storage.calculations import (
    SavedCalculationStore,
    get_calculation_store,
    migrate_legacy_record,
)
from xp_calculator.storage.database import (
    Database,
    KeyValueStore,
    get_database,
    reset_database,
)

__all__ = [
    "Database",
    "KeyValueStore",
    "SavedCalculationStore",
    "get_calculation_store",
    "get_database",
    "migrate_legacy_record",
    "reset_database",
]
