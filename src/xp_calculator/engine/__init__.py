"""XP engine: pure functions turning an encounter into XP awards."""

from __future__ import annotations

from xp_calculator.engine.xp import (
    adjustment_factor,
    compute_result,
    effective_hit_dice,
    validate_inputs,
)


__all__ = [
    "adjustment_factor",
    "compute_result",
    "effective_hit_dice",
    "validate_inputs",
]
