"""XP adjustment arithmetic.

Converts a party and the monster groups it defeated into an XP award.
Every monster hit die is worth a flat 100 XP; each character's share of a
group is scaled down when the character outclasses the monsters, using a
continuous ratio:

    factor = min(1, monster_hd / character_hd)

Per-pair shares are floored to whole XP. The rounding loss is handed to
the character with the lowest effective hit dice (first in input order on
ties), so the awards always add up to the encounter total.

Example:
    >>> from xp_calculator.engine.xp import compute_result
    >>> from xp_calculator.models import Character, MonsterGroup
    >>> result = compute_result(
    ...     [Character(id=1, hit_dice=8), Character(id=2, hit_dice=2)],
    ...     [MonsterGroup(id=1, hit_dice=2, count=4)],
    ... )
    >>> [entry.adjusted_xp for entry in result.character_xp]
    [100, 700]
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from fractions import Fraction
from typing import TypeVar

from xp_calculator.core.constants import BASE_XP_PER_HIT_DIE
from xp_calculator.core.exceptions import CalculationError, ValidationError
from xp_calculator.core.logging import get_logger
from xp_calculator.models.party import Character, Combatant, MonsterGroup, effective_hit_dice
from xp_calculator.models.results import CalculationResult, CharacterXp, MonsterContribution

logger = get_logger(__name__)


LevelT = TypeVar("LevelT", float, Fraction)


def adjustment_factor(character_level: LevelT, monster_level: LevelT) -> LevelT:
    """Calculate the share of XP a character earns from a monster.

    Works on floats for display and on Fractions for exact flooring; the
    result has the same type as the inputs.

    Args:
        character_level: The character's effective hit dice.
        monster_level: The monster's effective hit dice.

    Returns:
        1 when the monster is at least as strong as the character or the
        character level is not positive, otherwise
        ``monster_level / character_level``.
    """
    if character_level <= 0 or monster_level >= character_level:
        return type(character_level)(1)
    return monster_level / character_level


def _check_unique_ids(records: Sequence[Combatant], field_name: str) -> None:
    seen: set[int] = set()
    for record in records:
        if record.id in seen:
            raise ValidationError(
                f"Duplicate id in {field_name}",
                field_name=field_name,
                invalid_value=record.id,
            )
        seen.add(record.id)


def validate_inputs(
    characters: Sequence[Character],
    monster_groups: Sequence[MonsterGroup],
) -> None:
    """Check that a calculation can run.

    Raises:
        ValidationError: If either list is empty or holds duplicate ids.
    """
    if not characters:
        raise ValidationError("At least one character is required", field_name="characters")
    if not monster_groups:
        raise ValidationError(
            "At least one monster group is required",
            field_name="monster_groups",
        )
    _check_unique_ids(characters, "characters")
    _check_unique_ids(monster_groups, "monster_groups")


def compute_result(
    characters: Sequence[Character],
    monster_groups: Sequence[MonsterGroup],
) -> CalculationResult:
    """Compute aggregate and per-character XP for an encounter.

    Args:
        characters: The party, in display order.
        monster_groups: The defeated monster groups, in display order.

    Returns:
        A complete CalculationResult whose per-character awards sum to
        ``total_xp``.

    Raises:
        ValidationError: If either list is empty or holds duplicate ids.
    """
    validate_inputs(characters, monster_groups)

    party_size = len(characters)
    party_hd = [Fraction(character.effective_hit_dice) for character in characters]
    monster_hd = [Fraction(group.effective_hit_dice) for group in monster_groups]

    total_party_hd = sum(party_hd, Fraction(0))
    total_monster_hd = sum(
        (hd * group.count for hd, group in zip(monster_hd, monster_groups)),
        Fraction(0),
    )
    total_xp = total_monster_hd * BASE_XP_PER_HIT_DIE

    shares: list[list[MonsterContribution]] = []
    for character_hd in party_hd:
        contributions = []
        for group, group_hd in zip(monster_groups, monster_hd):
            base_xp = group_hd * group.count * BASE_XP_PER_HIT_DIE / party_size
            factor = adjustment_factor(character_hd, group_hd)
            contributions.append(
                MonsterContribution(
                    monster_id=group.id,
                    monster_name=group.name,
                    base_xp=float(base_xp),
                    adjustment_factor=float(factor),
                    adjusted_xp=math.floor(base_xp * factor),
                )
            )
        shares.append(contributions)

    earned = sum(entry.adjusted_xp for contributions in shares for entry in contributions)
    remainder = total_xp - earned
    if remainder < 0 or remainder.denominator != 1:
        raise CalculationError(
            "XP remainder is not a whole, non-negative amount",
            details={"total_xp": float(total_xp), "earned": earned},
        )

    # min() keeps the first of equal keys
    lowest = min(range(party_size), key=lambda index: party_hd[index])

    character_xp = []
    for index, (character, contributions) in enumerate(zip(characters, shares)):
        bonus = int(remainder) if index == lowest else 0
        character_xp.append(
            CharacterXp(
                character_id=character.id,
                character_name=character.name,
                effective_hit_dice=character.effective_hit_dice,
                contributions=tuple(contributions),
                remainder_xp=bonus,
                adjusted_xp=sum(entry.adjusted_xp for entry in contributions) + bonus,
            )
        )

    result = CalculationResult(
        total_party_hit_dice=float(total_party_hd),
        total_monster_hit_dice=float(total_monster_hd),
        total_xp=float(total_xp),
        xp_per_character=float(total_xp / party_size),
        average_party_level=float(total_party_hd / party_size),
        adjustment_factor=float(Fraction(earned) / total_xp),
        character_xp=tuple(character_xp),
    )

    logger.debug(
        "XP calculated",
        characters=party_size,
        monster_groups=len(monster_groups),
        total_xp=result.total_xp,
        remainder=int(remainder),
    )
    return result


__all__ = [
    "effective_hit_dice",
    "adjustment_factor",
    "validate_inputs",
    "compute_result",
]
