"""Rule constants for the Party XP Calculator.

Hit-dice bounds mirror the limits of the calculator's input form.
"""

from __future__ import annotations

# =============================================================================
# XP Rules
# =============================================================================

BASE_XP_PER_HIT_DIE = 100
"""Experience awarded per effective monster hit die."""

MODIFIER_WEIGHT = 0.25
"""A hit-dice modifier point counts as a quarter of a hit die."""

# =============================================================================
# Input Bounds
# =============================================================================

MIN_HIT_DICE = 1
MAX_HIT_DICE = 20

MIN_MODIFIER = -3
MAX_MODIFIER = 6

MIN_MONSTER_COUNT = 1
MAX_MONSTER_COUNT = 100

MAX_NAME_LENGTH = 100
"""Maximum length of a character or monster display name."""

# =============================================================================
# Storage
# =============================================================================

DEFAULT_STORAGE_KEY = "odnd-xp-calculations"
"""Key under which the saved-calculation list is stored."""


__all__ = [
    "BASE_XP_PER_HIT_DIE",
    "MODIFIER_WEIGHT",
    "MIN_HIT_DICE",
    "MAX_HIT_DICE",
    "MIN_MODIFIER",
    "MAX_MODIFIER",
    "MIN_MONSTER_COUNT",
    "MAX_MONSTER_COUNT",
    "MAX_NAME_LENGTH",
    "DEFAULT_STORAGE_KEY",
]
