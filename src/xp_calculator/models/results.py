"""Pydantic V2 schemas for calculation output and saved snapshots.

A CalculationResult carries the aggregate totals shown on the results
panel plus the per-character breakdown. SavedCalculation freezes a result
together with the inputs that produced it; it is never recomputed.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from xp_calculator.models.party import RECORD_CONFIG, Character, MonsterGroup


class MonsterContribution(BaseModel):
    """XP one monster group contributes to one character.

    Attributes:
        monster_id: Identity of the monster group.
        monster_name: Display name of the monster group, if any.
        base_xp: Unadjusted share of the group's XP.
        adjustment_factor: Level-adjustment multiplier in (0, 1].
        adjusted_xp: ``floor(base_xp * adjustment_factor)``.
    """

    model_config = RECORD_CONFIG

    monster_id: int
    monster_name: str | None = None
    base_xp: float
    adjustment_factor: float = Field(gt=0, le=1)
    adjusted_xp: int = Field(ge=0)


class CharacterXp(BaseModel):
    """Per-character XP award.

    Attributes:
        character_id: Identity of the character.
        character_name: Display name of the character, if any.
        effective_hit_dice: The character's effective hit dice.
        contributions: One entry per monster group, in input order.
        remainder_xp: Rounding remainder awarded to this character.
        adjusted_xp: Sum of contributions plus the remainder.
    """

    model_config = RECORD_CONFIG

    character_id: int
    character_name: str | None = None
    effective_hit_dice: float
    contributions: tuple[MonsterContribution, ...] = ()
    remainder_xp: int = 0
    adjusted_xp: int = Field(ge=0)


class CalculationResult(BaseModel):
    """Aggregate and per-character XP for one encounter.

    Attributes:
        total_party_hit_dice: Sum of character effective hit dice.
        total_monster_hit_dice: Sum of monster effective hit dice times count.
        total_xp: ``total_monster_hit_dice * 100``.
        xp_per_character: ``total_xp`` divided evenly, unrounded.
        average_party_level: Mean character effective hit dice.
        adjustment_factor: Share of ``total_xp`` earned before the remainder
            is redistributed.
        character_xp: Per-character breakdown, in input order.
    """

    model_config = RECORD_CONFIG

    total_party_hit_dice: float
    total_monster_hit_dice: float
    total_xp: float
    xp_per_character: float
    average_party_level: float
    adjustment_factor: float
    character_xp: tuple[CharacterXp, ...] = ()

    @property
    def distributed_xp(self) -> int:
        """Total XP handed out across the breakdown."""
        return sum(entry.adjusted_xp for entry in self.character_xp)


class SavedCalculation(BaseModel):
    """A write-once snapshot of inputs and result.

    Attributes:
        id: Millisecond timestamp string identifying the snapshot.
        created_at: When the snapshot was saved (``date`` on the wire).
        characters: Party at the time of saving.
        monsters: Monster groups at the time of saving.
        result: Result as it was computed, never recomputed on load.
    """

    model_config = RECORD_CONFIG

    id: str = Field(min_length=1)
    created_at: datetime = Field(alias="date")
    characters: tuple[Character, ...] = Field(min_length=1)
    monsters: tuple[MonsterGroup, ...] = Field(min_length=1)
    result: CalculationResult

    @computed_field(alias="monsterCount")  # type: ignore[prop-decorator]
    @property
    def monster_count(self) -> int:
        """Total number of individual monsters across all groups."""
        return sum(group.count for group in self.monsters)


__all__ = [
    "MonsterContribution",
    "CharacterXp",
    "CalculationResult",
    "SavedCalculation",
]
