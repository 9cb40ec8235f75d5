"""Tests for saved-calculation persistence."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from xp_calculator.core.exceptions import StorageError, ValidationError
from xp_calculator.models import CalculationResult, MonsterGroup
from xp_calculator.storage.calculations import SavedCalculationStore, migrate_legacy_record


CREATED = datetime(2025, 3, 4, 12, 30, tzinfo=timezone.utc)

LEGACY_RECORD = {
    "id": "1700000000000",
    "date": "2023-11-14T22:13:20.000Z",
    "characters": [
        {"id": 0, "hitDice": 3, "modifier": 1, "effectiveHitDice": 3.25},
        {"id": 1, "hitDice": 2, "modifier": 0, "effectiveHitDice": 2},
    ],
    "monsters": [
        {"id": 0, "hitDice": 2, "modifier": 0, "count": 3, "effectiveHitDice": 2},
    ],
    "result": {
        "totalPartyHitDice": 5.25,
        "totalMonsterHitDice": 6,
        "totalXp": 600,
        "xpPerCharacter": 300,
        "averagePartyLevel": 2.625,
        "adjustmentFactor": 1,
    },
}


class TestSaveAndList:
    """Tests for appending and reading calculations."""

    def test_empty_store(self, calculation_store: SavedCalculationStore) -> None:
        """Test that nothing saved reads as an empty list."""
        assert calculation_store.list_calculations() == []

    def test_round_trip(
        self,
        calculation_store: SavedCalculationStore,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that a saved snapshot reloads exactly."""
        saved = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED
        )

        (loaded,) = calculation_store.list_calculations()

        assert loaded == saved
        assert loaded.result == sample_result
        assert loaded.created_at == CREATED
        assert loaded.id == str(int(CREATED.timestamp() * 1000))

    def test_not_recomputed_on_load(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that the stored result is returned even if it disagrees with the inputs."""
        store = SavedCalculationStore(memory_store)
        stale = sample_result.model_copy(update={"total_xp": 12345.0})
        store.save_calculation(sample_party, sample_monsters, stale, created_at=CREATED)

        (loaded,) = store.list_calculations()

        assert loaded.result.total_xp == 12345.0

    def test_appends_in_order(
        self,
        calculation_store: SavedCalculationStore,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that records come back in the order they were saved."""
        first = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED
        )
        second = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED + timedelta(minutes=1)
        )

        assert [saved.id for saved in calculation_store.list_calculations()] == [first.id, second.id]

    def test_same_millisecond_ids_unique(
        self,
        calculation_store: SavedCalculationStore,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that two saves at the same instant get distinct ids."""
        first = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED
        )
        second = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED
        )

        assert int(second.id) == int(first.id) + 1

    def test_stored_under_key_as_camel_case_json(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test the raw JSON shape under the storage key."""
        store = SavedCalculationStore(memory_store, storage_key="my-key")
        store.save_calculation(sample_party, sample_monsters, sample_result, created_at=CREATED)

        (record,) = json.loads(memory_store.items["my-key"])

        assert set(record) >= {"id", "date", "characters", "monsters", "result"}
        assert record["characters"][0]["hitDice"] == 8
        assert record["result"]["totalXp"] == 800
        assert record["result"]["characterXp"][1]["remainderXp"] == 300

    def test_rejects_empty_inputs(
        self,
        calculation_store: SavedCalculationStore,
        sample_party,
        sample_result: CalculationResult,
    ) -> None:
        """Test that a snapshot without monsters is refused."""
        with pytest.raises(ValidationError):
            calculation_store.save_calculation(sample_party, [], sample_result)

    def test_get_calculation(
        self,
        calculation_store: SavedCalculationStore,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test lookup by id."""
        saved = calculation_store.save_calculation(sample_party, sample_monsters, sample_result)

        assert calculation_store.get_calculation(saved.id) == saved
        assert calculation_store.get_calculation("missing") is None


class TestDelete:
    """Tests for delete-by-id."""

    def test_delete(
        self,
        calculation_store: SavedCalculationStore,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test deleting one record keeps the others."""
        first = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED
        )
        second = calculation_store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED + timedelta(seconds=5)
        )

        assert calculation_store.delete_calculation(first.id) is True

        assert calculation_store.list_calculations() == [second]

    def test_delete_unknown(self, calculation_store: SavedCalculationStore) -> None:
        """Test deleting an unknown id reports False."""
        assert calculation_store.delete_calculation("nope") is False

    def test_delete_keeps_unreadable_records(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that records skipped on read survive a delete."""
        store = SavedCalculationStore(memory_store)
        saved = store.save_calculation(sample_party, sample_monsters, sample_result, created_at=CREATED)
        records = json.loads(memory_store.items[store.storage_key])
        records.append({"id": "broken", "characters": "??"})
        memory_store.items[store.storage_key] = json.dumps(records)

        store.delete_calculation(saved.id)

        assert json.loads(memory_store.items[store.storage_key]) == [
            {"id": "broken", "characters": "??"}
        ]


class TestReadFallbacks:
    """Tests for forgiving reads."""

    @pytest.mark.parametrize("payload", ["{not json", '{"id": "1"}', "42"])
    def test_bad_payload_reads_empty(self, memory_store, payload: str) -> None:
        """Test that malformed or non-list JSON reads as no calculations."""
        store = SavedCalculationStore(memory_store)
        memory_store.items[store.storage_key] = payload

        assert store.list_calculations() == []

    def test_unavailable_store_reads_empty(self, memory_store) -> None:
        """Test that a read failure reads as no calculations."""
        memory_store.fail_reads = True

        assert SavedCalculationStore(memory_store).list_calculations() == []

    def test_bad_records_skipped(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that one bad record does not hide the others."""
        store = SavedCalculationStore(memory_store)
        saved = store.save_calculation(sample_party, sample_monsters, sample_result, created_at=CREATED)
        records = json.loads(memory_store.items[store.storage_key])
        records[:0] = ["junk", {"id": "x", "date": "yesterday"}]
        memory_store.items[store.storage_key] = json.dumps(records)

        assert store.list_calculations() == [saved]

    def test_write_failure_raises(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that a failed write surfaces as StorageError."""
        memory_store.fail_writes = True
        store = SavedCalculationStore(memory_store)

        with pytest.raises(StorageError) as exc_info:
            store.save_calculation(sample_party, sample_monsters, sample_result)

        assert exc_info.value.details["storage_key"] == store.storage_key


class TestWriteGuards:
    """Tests that saves and deletes never overwrite a list they could not read."""

    def test_save_during_read_failure_keeps_records(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
    ) -> None:
        """Test that a save while the store is unreadable leaves stored records alone."""
        store = SavedCalculationStore(memory_store)
        store.save_calculation(sample_party, sample_monsters, sample_result, created_at=CREATED)
        store.save_calculation(
            sample_party, sample_monsters, sample_result, created_at=CREATED + timedelta(minutes=1)
        )
        memory_store.fail_reads = True

        with pytest.raises(StorageError) as exc_info:
            store.save_calculation(sample_party, sample_monsters, sample_result)

        assert "original_error" in exc_info.value.details
        memory_store.fail_reads = False
        assert len(store.list_calculations()) == 2

        store.save_calculation(sample_party, sample_monsters, sample_result)
        assert len(store.list_calculations()) == 3

    @pytest.mark.parametrize("payload", ['{"truncated": [', '{"id": "1"}'])
    def test_save_over_corrupt_payload_refused(
        self,
        memory_store,
        sample_party,
        sample_monsters,
        sample_result: CalculationResult,
        payload: str,
    ) -> None:
        """Test that a corrupt stored list is not replaced by a new save."""
        store = SavedCalculationStore(memory_store)
        memory_store.items[store.storage_key] = payload

        with pytest.raises(StorageError):
            store.save_calculation(sample_party, sample_monsters, sample_result)

        assert memory_store.items[store.storage_key] == payload

    def test_delete_over_corrupt_payload_refused(self, memory_store) -> None:
        """Test that a delete does not rewrite a corrupt stored list."""
        store = SavedCalculationStore(memory_store)
        memory_store.items[store.storage_key] = "{not json"

        with pytest.raises(StorageError):
            store.delete_calculation("1700000000000")

        assert memory_store.items[store.storage_key] == "{not json"

    def test_delete_during_read_failure_raises(self, memory_store) -> None:
        """Test that a delete while the store is unreadable raises."""
        memory_store.fail_reads = True

        with pytest.raises(StorageError):
            SavedCalculationStore(memory_store).delete_calculation("1700000000000")


class TestLegacyMigration:
    """Tests for upgrading older saved shapes."""

    def test_legacy_record_loads(self, memory_store) -> None:
        """Test a record from the earlier calculator loads after migration."""
        store = SavedCalculationStore(memory_store)
        memory_store.items[store.storage_key] = json.dumps([LEGACY_RECORD])

        (saved,) = store.list_calculations()

        assert [character.id for character in saved.characters] == [1, 2]
        assert all(character.name is None for character in saved.characters)
        assert saved.monsters[0].id == 1
        assert saved.result.total_xp == 600
        assert saved.result.character_xp == ()
        assert saved.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_does_not_mutate_input(self) -> None:
        """Test that migration returns a new dict."""
        raw = json.loads(json.dumps(LEGACY_RECORD))

        migrate_legacy_record(raw)

        assert raw == LEGACY_RECORD

    def test_valid_ids_kept(self) -> None:
        """Test that already valid ids are not renumbered."""
        raw = {
            "id": 1700000000000,
            "characters": [{"id": 4, "hitDice": 1}, {"id": 9, "hitDice": 1}],
            "monsters": [{"id": 2, "hitDice": 1}],
        }

        migrated = migrate_legacy_record(raw)

        assert migrated["id"] == "1700000000000"
        assert [entry["id"] for entry in migrated["characters"]] == [4, 9]
        assert migrated["monsters"][0]["count"] == 1

    def test_duplicate_ids_renumbered(self) -> None:
        """Test that repeated ids are renumbered in list order."""
        raw = {"characters": [{"id": 2}, {"id": 2}], "monsters": []}

        migrated = migrate_legacy_record(raw)

        assert [entry["id"] for entry in migrated["characters"]] == [1, 2]

    def test_saved_monster_count_survives(self) -> None:
        """Test that existing monster counts are not overwritten by the default."""
        raw = {"monsters": [MonsterGroup(id=1, count=7).model_dump(by_alias=True)]}

        assert migrate_legacy_record(raw)["monsters"][0]["count"] == 7
