"""Saved-calculation persistence.

Saved calculations are kept as one JSON list under a single storage key.
Records are write-once snapshots: they are appended, read back, and
deleted by id, never recomputed.

Listing is forgiving. A missing key, malformed JSON, or an unavailable
store all list as empty, and records that fail validation are skipped.
Appends and deletes are strict: they refuse to write unless the stored
list was read intact, and they operate on the raw JSON list so skipped
records stay in storage untouched.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from xp_calculator.core.constants import DEFAULT_STORAGE_KEY
from xp_calculator.core.exceptions import StorageError
from xp_calculator.core.logging import get_logger
from xp_calculator.engine.xp import validate_inputs
from xp_calculator.models.party import Character, MonsterGroup
from xp_calculator.models.results import CalculationResult, SavedCalculation
from xp_calculator.storage.database import KeyValueStore

logger = get_logger(__name__)

_STORE_ERRORS = (sqlite3.Error, OSError)


# =============================================================================
# Legacy Migration
# =============================================================================


def _renumber_if_needed(entries: list[Any]) -> list[Any]:
    """Assign ids 1..n when existing ids are missing, non-positive, or repeated."""
    ids = [entry.get("id") if isinstance(entry, dict) else None for entry in entries]
    valid = all(isinstance(value, int) and value >= 1 for value in ids)
    if valid and len(set(ids)) == len(ids):
        return entries
    return [
        {**entry, "id": position} if isinstance(entry, dict) else entry
        for position, entry in enumerate(entries, start=1)
    ]


def migrate_legacy_record(raw: dict[str, Any]) -> dict[str, Any]:
    """Upgrade an older saved-calculation shape to the current one.

    Earlier versions of the calculator stored records without names,
    numbered combatants from zero, and sometimes omitted monster counts.

    Args:
        raw: A record as decoded from storage.

    Returns:
        A new dict ready for ``SavedCalculation.model_validate``.
    """
    record = dict(raw)

    if "id" in record and not isinstance(record["id"], str):
        record["id"] = str(record["id"])

    characters = record.get("characters")
    if isinstance(characters, list):
        characters = [
            {"name": None, **entry} if isinstance(entry, dict) else entry
            for entry in characters
        ]
        record["characters"] = _renumber_if_needed(characters)

    monsters = record.get("monsters")
    if isinstance(monsters, list):
        monsters = [
            {"name": None, "count": 1, **entry} if isinstance(entry, dict) else entry
            for entry in monsters
        ]
        record["monsters"] = _renumber_if_needed(monsters)

    return record


# =============================================================================
# Store
# =============================================================================


class SavedCalculationStore:
    """Append, list, and delete saved calculations in a key-value store.

    Attributes:
        storage_key: Key holding the JSON list of records.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self.storage_key = storage_key

    def _load_records(self) -> list[Any]:
        """Read the raw record list, refusing anything that is not a JSON list.

        Raises:
            StorageError: If the store cannot be read or holds something
                other than a JSON list.
        """
        try:
            payload = self._store.get_item(self.storage_key)
        except _STORE_ERRORS as exc:
            raise StorageError(
                "Failed to read saved calculations",
                storage_key=self.storage_key,
                details={"original_error": str(exc)},
            ) from exc

        if payload is None:
            return []

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise StorageError(
                "Saved calculations are not valid JSON",
                storage_key=self.storage_key,
                details={"original_error": str(exc)},
            ) from exc

        if not isinstance(data, list):
            raise StorageError(
                "Saved calculations are not a list",
                storage_key=self.storage_key,
                details={"found": type(data).__name__},
            )
        return data

    def _read_raw(self) -> list[Any]:
        try:
            return self._load_records()
        except StorageError as exc:
            logger.warning("Saved calculations unavailable", error=str(exc))
            return []

    def _write_raw(self, records: list[Any]) -> None:
        try:
            self._store.set_item(self.storage_key, json.dumps(records))
        except _STORE_ERRORS as exc:
            raise StorageError(
                "Failed to write saved calculations",
                storage_key=self.storage_key,
                details={"original_error": str(exc)},
            ) from exc

    def list_calculations(self) -> list[SavedCalculation]:
        """Read all saved calculations in the order they were saved."""
        calculations = []
        for raw in self._read_raw():
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object saved calculation", found=type(raw).__name__)
                continue
            try:
                calculations.append(SavedCalculation.model_validate(migrate_legacy_record(raw)))
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping unreadable saved calculation",
                    calculation_id=raw.get("id"),
                    errors=exc.error_count(),
                )
        return calculations

    def get_calculation(self, calculation_id: str) -> SavedCalculation | None:
        """Find a saved calculation by id."""
        for saved in self.list_calculations():
            if saved.id == calculation_id:
                return saved
        return None

    def save_calculation(
        self,
        characters: Sequence[Character],
        monsters: Sequence[MonsterGroup],
        result: CalculationResult,
        *,
        created_at: datetime | None = None,
    ) -> SavedCalculation:
        """Append a snapshot of a calculation.

        The id is the creation time in epoch milliseconds, bumped forward
        until it does not collide with a stored record.

        Args:
            characters: Party the result was computed for.
            monsters: Monster groups the result was computed for.
            result: The computed result, stored verbatim.
            created_at: Snapshot time. Defaults to now (UTC).

        Returns:
            The stored snapshot.

        Raises:
            ValidationError: If either list is empty.
            StorageError: If the store cannot be read or written.
        """
        validate_inputs(characters, monsters)
        created_at = created_at or datetime.now(timezone.utc)

        records = self._load_records()
        taken = {str(raw.get("id")) for raw in records if isinstance(raw, dict)}
        stamp = int(created_at.timestamp() * 1000)
        while str(stamp) in taken:
            stamp += 1

        saved = SavedCalculation(
            id=str(stamp),
            created_at=created_at,
            characters=tuple(characters),
            monsters=tuple(monsters),
            result=result,
        )
        records.append(saved.model_dump(mode="json", by_alias=True))
        self._write_raw(records)

        logger.info("Saved calculation", calculation_id=saved.id, total_xp=result.total_xp)
        return saved

    def delete_calculation(self, calculation_id: str) -> bool:
        """Delete a saved calculation by id.

        Returns:
            True if deleted, False if not found.

        Raises:
            StorageError: If the store cannot be read or written.
        """
        records = self._load_records()
        kept = [
            raw for raw in records
            if not (isinstance(raw, dict) and str(raw.get("id")) == calculation_id)
        ]
        if len(kept) == len(records):
            return False

        self._write_raw(kept)
        logger.info("Deleted calculation", calculation_id=calculation_id)
        return True


def get_calculation_store() -> SavedCalculationStore:
    """Build a store on the global database with the configured key."""
    from xp_calculator.core.config import get_settings
    from xp_calculator.storage.database import get_database

    return SavedCalculationStore(get_database(), get_settings().storage.storage_key)


__all__ = [
    "SavedCalculationStore",
    "get_calculation_store",
    "migrate_legacy_record",
]
