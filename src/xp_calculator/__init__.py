"""Party XP Calculator - experience awards for old-school encounters.

Turns a party's hit dice and the monster groups it defeated into an XP
award. Every effective monster hit die is worth 100 XP; a character who
outclasses the monsters earns a reduced share, and the rounding remainder
goes to the lowest-level character so the awards always add up.

Example:
    >>> from xp_calculator import Character, MonsterGroup, compute_result
    >>> result = compute_result(
    ...     [Character(id=1, hit_dice=4)],
    ...     [MonsterGroup(id=1, hit_dice=4)],
    ... )
    >>> result.total_xp
    400.0

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 value records.
    engine: XP adjustment arithmetic.
    storage: SQLite key-value store and saved calculations.
    ui: Streamlit calculator page.
"""

from __future__ import annotations

# Core
from xp_calculator.core.config import Settings, get_settings
from xp_calculator.core.exceptions import ValidationError, XpCalculatorError
from xp_calculator.core.logging import configure_logging, get_logger

# Engine
from xp_calculator.engine.xp import adjustment_factor, compute_result, effective_hit_dice

# Models
from xp_calculator.models import (
    CalculationResult,
    Character,
    CharacterXp,
    MonsterContribution,
    MonsterGroup,
    SavedCalculation,
)

# Storage
from xp_calculator.storage import Database, SavedCalculationStore


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "XpCalculatorError",
    "ValidationError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "adjustment_factor",
    "compute_result",
    "effective_hit_dice",
    # Models
    "Character",
    "MonsterGroup",
    "CalculationResult",
    "CharacterXp",
    "MonsterContribution",
    "SavedCalculation",
    # Storage
    "Database",
    "SavedCalculationStore",
]
