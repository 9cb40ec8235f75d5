"""Working state of the calculator page.

The page keeps one immutable CalculatorState in Streamlit session state.
Every edit returns a new state rather than mutating lists in place, and
any edit to the inputs drops the now-stale result.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from xp_calculator.core.exceptions import ValidationError
from xp_calculator.engine.xp import compute_result
from xp_calculator.models.party import Character, Combatant, MonsterGroup
from xp_calculator.models.results import CalculationResult, SavedCalculation

RecordT = TypeVar("RecordT", bound=Combatant)


def _next_id(records: tuple[Combatant, ...]) -> int:
    return max((record.id for record in records), default=0) + 1


def _replace(
    records: tuple[RecordT, ...],
    record_id: int,
    changes: dict[str, Any],
    field_name: str,
) -> tuple[RecordT, ...]:
    """Return ``records`` with one entry rebuilt from ``changes``.

    Raises:
        ValidationError: If the id is unknown or a change is out of bounds.
    """
    for index, record in enumerate(records):
        if record.id != record_id:
            continue
        try:
            updated = type(record).model_validate({**record.model_dump(), **changes})
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid value for {field_name}",
                field_name=field_name,
                invalid_value=changes,
                details={"errors": exc.error_count()},
            ) from exc
        if updated == record:
            return records
        return (*records[:index], updated, *records[index + 1:])

    raise ValidationError(f"Unknown id in {field_name}", field_name=field_name, invalid_value=record_id)


def _remove(
    records: tuple[RecordT, ...],
    record_id: int,
    field_name: str,
    noun: str,
) -> tuple[RecordT, ...]:
    if len(records) <= 1:
        raise ValidationError(f"You need at least one {noun}", field_name=field_name)
    kept = tuple(record for record in records if record.id != record_id)
    if len(kept) == len(records):
        raise ValidationError(f"Unknown id in {field_name}", field_name=field_name, invalid_value=record_id)
    return kept


class CalculatorState(BaseModel):
    """Inputs and latest result shown on the calculator page.

    Attributes:
        characters: Party rows, in display order.
        monsters: Monster group rows, in display order.
        result: Result of the last calculation, if still current.
        loaded_id: Id of the saved calculation currently shown, if any.
        revision: Bumped whenever the inputs are replaced wholesale, so
            widget keys derived from it start fresh.
    """

    model_config = ConfigDict(frozen=True)

    characters: tuple[Character, ...]
    monsters: tuple[MonsterGroup, ...]
    result: CalculationResult | None = None
    loaded_id: str | None = None
    revision: int = 0

    @classmethod
    def initial(cls, revision: int = 0) -> CalculatorState:
        """One 1-HD character against one 1-HD monster."""
        return cls(
            characters=(Character(id=1),),
            monsters=(MonsterGroup(id=1),),
            revision=revision,
        )

    def _edited(self, **update: Any) -> CalculatorState:
        return self.model_copy(update={**update, "result": None, "loaded_id": None})

    # -------------------------------------------------------------------------
    # Characters
    # -------------------------------------------------------------------------

    def add_character(self) -> CalculatorState:
        character = Character(id=_next_id(self.characters))
        return self._edited(characters=(*self.characters, character))

    def update_character(self, character_id: int, **changes: Any) -> CalculatorState:
        characters = _replace(self.characters, character_id, changes, "characters")
        if characters is self.characters:
            return self
        return self._edited(characters=characters)

    def remove_character(self, character_id: int) -> CalculatorState:
        return self._edited(
            characters=_remove(self.characters, character_id, "characters", "character"),
        )

    # -------------------------------------------------------------------------
    # Monsters
    # -------------------------------------------------------------------------

    def add_monster(self) -> CalculatorState:
        monster = MonsterGroup(id=_next_id(self.monsters))
        return self._edited(monsters=(*self.monsters, monster))

    def update_monster(self, monster_id: int, **changes: Any) -> CalculatorState:
        monsters = _replace(self.monsters, monster_id, changes, "monsters")
        if monsters is self.monsters:
            return self
        return self._edited(monsters=monsters)

    def remove_monster(self, monster_id: int) -> CalculatorState:
        return self._edited(
            monsters=_remove(self.monsters, monster_id, "monsters", "monster"),
        )

    # -------------------------------------------------------------------------
    # Whole-state transitions
    # -------------------------------------------------------------------------

    def calculate(self) -> CalculatorState:
        """Run the engine on the current inputs.

        Raises:
            ValidationError: If the engine rejects the inputs.
        """
        return self.model_copy(update={"result": compute_result(self.characters, self.monsters)})

    def load(self, saved: SavedCalculation) -> CalculatorState:
        """Replace everything with a saved snapshot, result included."""
        return CalculatorState(
            characters=saved.characters,
            monsters=saved.monsters,
            result=saved.result,
            loaded_id=saved.id,
            revision=self.revision + 1,
        )

    def reset(self) -> CalculatorState:
        return CalculatorState.initial(revision=self.revision + 1)


__all__ = [
    "CalculatorState",
]
