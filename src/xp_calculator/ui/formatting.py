"""Display helpers for the calculator page."""

from __future__ import annotations

from datetime import datetime

from xp_calculator.models.results import SavedCalculation


def format_hit_dice(value: float) -> str:
    """Format effective hit dice with two decimals, e.g. ``4.25``."""
    return f"{value:.2f}"


def format_date(dt: datetime, *, now: datetime | None = None) -> str:
    """Format a saved-calculation timestamp for display.

    Args:
        dt: Timestamp to format.
        now: Reference time. Defaults to the current time in ``dt``'s zone.

    Returns:
        A relative phrase for the last week, otherwise e.g. ``Mar 04, 2025``.
    """
    if now is None:
        now = datetime.now(dt.tzinfo)
    delta = now - dt

    if delta.days == 0:
        if delta.seconds < 3600:
            minutes = delta.seconds // 60
            return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
        hours = delta.seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    elif delta.days == 1:
        return "Yesterday"
    elif 1 < delta.days < 7:
        return f"{delta.days} days ago"
    else:
        return dt.strftime("%b %d, %Y")


def summarize_saved(saved: SavedCalculation) -> str:
    """One-line summary of who fought what, e.g. ``2 characters | 5 monsters``."""
    characters = len(saved.characters)
    monsters = saved.monster_count
    return (
        f"{characters} character{'s' if characters != 1 else ''} | "
        f"{monsters} monster{'s' if monsters != 1 else ''}"
    )


def describe_xp(saved: SavedCalculation) -> str:
    """XP line for a saved calculation, e.g. ``XP: 800 (400 per character)``."""
    result = saved.result
    return f"XP: {result.total_xp:.0f} ({result.xp_per_character:.0f} per character)"


__all__ = [
    "format_hit_dice",
    "format_date",
    "summarize_saved",
    "describe_xp",
]
