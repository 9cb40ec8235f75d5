"""Pydantic V2 schemas for the combatants of an encounter.

Characters and monster groups are immutable value records. Their effective
hit dice are derived on access and serialized alongside the raw inputs, so
a stored record keeps the same shape as the calculator's original JSON:

    {"id": 1, "name": "Thorin", "hitDice": 4, "modifier": 1, "effectiveHitDice": 4.25}
"""

from __future__ import annotations

from typing import Annotated, ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from xp_calculator.core.constants import (
    MAX_HIT_DICE,
    MAX_MODIFIER,
    MAX_MONSTER_COUNT,
    MAX_NAME_LENGTH,
    MIN_HIT_DICE,
    MIN_MODIFIER,
    MIN_MONSTER_COUNT,
    MODIFIER_WEIGHT,
)


RECORD_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)
"""Shared model config: immutable, camelCase on the wire, unknown keys dropped."""


def effective_hit_dice(hit_dice: int, modifier: int) -> float:
    """Convert raw hit dice and modifier into effective hit dice.

    Args:
        hit_dice: Number of hit dice.
        modifier: Hit-dice modifier; each point is a quarter die.

    Returns:
        ``hit_dice + modifier * 0.25``.
    """
    return hit_dice + modifier * MODIFIER_WEIGHT


class Combatant(BaseModel):
    """Fields shared by characters and monster groups.

    Attributes:
        id: Identity, unique within a calculation.
        name: Optional display name.
        hit_dice: Number of hit dice.
        modifier: Hit-dice modifier.
    """

    model_config = RECORD_CONFIG

    default_label: ClassVar[str] = "Combatant"

    id: Annotated[int, Field(ge=1, description="Identity within a calculation")]
    name: str | None = Field(
        default=None,
        max_length=MAX_NAME_LENGTH,
        description="Display name",
    )
    hit_dice: Annotated[int, Field(ge=MIN_HIT_DICE, le=MAX_HIT_DICE, description="Hit dice")] = 1
    modifier: Annotated[int, Field(ge=MIN_MODIFIER, le=MAX_MODIFIER, description="HD modifier")] = 0

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_to_none(cls, value: object) -> object:
        """Treat an empty or whitespace-only name as no name."""
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @computed_field(alias="effectiveHitDice")  # type: ignore[prop-decorator]
    @property
    def effective_hit_dice(self) -> float:
        """Hit dice plus a quarter die per modifier point."""
        return effective_hit_dice(self.hit_dice, self.modifier)

    @property
    def label(self) -> str:
        """Display name, falling back to a numbered default."""
        return self.name or f"{self.default_label} {self.id}"


class Character(Combatant):
    """A party member taking a share of the encounter XP."""

    default_label: ClassVar[str] = "Character"


class MonsterGroup(Combatant):
    """A group of identical monsters defeated in the encounter.

    Attributes:
        count: Number of monsters in the group.
    """

    default_label: ClassVar[str] = "Monster"

    count: Annotated[
        int,
        Field(ge=MIN_MONSTER_COUNT, le=MAX_MONSTER_COUNT, description="Monsters in the group"),
    ] = 1

    @computed_field(alias="totalHitDice")  # type: ignore[prop-decorator]
    @property
    def total_hit_dice(self) -> float:
        """Effective hit dice of the whole group."""
        return self.effective_hit_dice * self.count


__all__ = [
    "RECORD_CONFIG",
    "effective_hit_dice",
    "Combatant",
    "Character",
    "MonsterGroup",
]
