"""Pydantic V2 value records for the Party XP Calculator.

Submodules:
    party: Character and MonsterGroup inputs.
    results: CalculationResult, its breakdown, and SavedCalculation snapshots.
"""

from __future__ import annotations

from xp_calculator.models.party import (
    Character,
    Combatant,
    MonsterGroup,
    effective_hit_dice,
)
from xp_calculator.models.results import (
    CalculationResult,
    CharacterXp,
    MonsterContribution,
    SavedCalculation,
)


__all__ = [
    # Inputs
    "Combatant",
    "Character",
    "MonsterGroup",
    "effective_hit_dice",
    # Outputs
    "CalculationResult",
    "CharacterXp",
    "MonsterContribution",
    "SavedCalculation",
]
