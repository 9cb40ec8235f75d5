"""Party XP Calculator - Streamlit page.

Lets the user:
- Enter party members and monster groups (hit dice, modifier, count)
- Calculate the XP award with a per-character breakdown
- Save calculations, then load or delete them later

Run with:
    streamlit run src/xp_calculator/ui/app.py
"""

from __future__ import annotations

import streamlit as st

from xp_calculator.core.config import get_settings
from xp_calculator.core.constants import (
    MAX_HIT_DICE,
    MAX_MODIFIER,
    MAX_MONSTER_COUNT,
    MIN_HIT_DICE,
    MIN_MODIFIER,
    MIN_MONSTER_COUNT,
)
from xp_calculator.core.exceptions import SessionStateError, StorageError, ValidationError
from xp_calculator.core.logging import bind_context, clear_context, configure_logging, get_logger
from xp_calculator.models.party import effective_hit_dice
from xp_calculator.models.results import CalculationResult, SavedCalculation
from xp_calculator.storage.calculations import SavedCalculationStore, get_calculation_store
from xp_calculator.ui.formatting import describe_xp, format_date, format_hit_dice, summarize_saved
from xp_calculator.ui.state import CalculatorState
from xp_calculator.ui.theme import apply_theme, render_footer, render_total_xp

logger = get_logger(__name__)

STATE_KEY = "xp_calculator_state"


# =============================================================================
# Page Configuration
# =============================================================================


settings = get_settings()
configure_logging(level=settings.effective_log_level, json_format=settings.json_logs)

st.set_page_config(
    page_title=settings.ui.page_title,
    page_icon="⚔️",
    layout=settings.ui.layout,
    initial_sidebar_state="collapsed",
)

apply_theme()


# =============================================================================
# Session State
# =============================================================================


def init_session_state() -> None:
    """Initialize session state."""
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = CalculatorState.initial()

    if "show_saved" not in st.session_state:
        st.session_state.show_saved = False

    if "flash" not in st.session_state:
        st.session_state.flash = None


def get_state() -> CalculatorState:
    """Current calculator state.

    Raises:
        SessionStateError: If session state holds something else under the key.
    """
    state = st.session_state[STATE_KEY]
    if not isinstance(state, CalculatorState):
        raise SessionStateError(
            "Calculator state has an unexpected type",
            details={"found": type(state).__name__},
        )
    return state


def set_state(state: CalculatorState) -> None:
    st.session_state[STATE_KEY] = state


def flash(kind: str, message: str) -> None:
    """Queue a message to show after the next rerun."""
    st.session_state.flash = (kind, message)


def render_flash() -> None:
    message = st.session_state.flash
    if message is None:
        return
    kind, text = message
    getattr(st, kind, st.info)(text)
    st.session_state.flash = None


# =============================================================================
# Input Editors
# =============================================================================


def apply_removals(state: CalculatorState, removed: list[int], method: str) -> CalculatorState:
    """Apply row removals collected while drawing an editor.

    The rows were already drawn, so a successful removal stores the new
    state and reruns the page. A refused removal leaves a warning instead.
    """
    remaining = state
    for record_id in removed:
        try:
            remaining = getattr(remaining, method)(record_id)
        except ValidationError as exc:
            st.warning(exc.message)

    if remaining is not state:
        set_state(remaining)
        st.rerun()
    return state


def render_characters(state: CalculatorState) -> CalculatorState:
    """Render the party editor and fold widget values back into the state."""
    header, add = st.columns([4, 1])
    header.subheader("🧙 Characters")
    if add.button("➕ Add", key="add_character", use_container_width=True):
        state = state.add_character()

    removed: list[int] = []
    for character in state.characters:
        prefix = f"char_{state.revision}_{character.id}"
        with st.container(border=True):
            name_col, hd_col, mod_col, remove_col = st.columns([3, 2, 2, 1])
            name = name_col.text_input(
                "Name",
                value=character.name or "",
                placeholder=character.label,
                key=f"{prefix}_name",
            )
            hit_dice = hd_col.number_input(
                "Hit Dice",
                min_value=MIN_HIT_DICE,
                max_value=MAX_HIT_DICE,
                value=character.hit_dice,
                step=1,
                key=f"{prefix}_hd",
            )
            modifier = mod_col.number_input(
                "Modifier",
                min_value=MIN_MODIFIER,
                max_value=MAX_MODIFIER,
                value=character.modifier,
                step=1,
                key=f"{prefix}_mod",
            )
            remove_col.write("")
            if remove_col.button("🗑️", key=f"{prefix}_remove", help="Remove character"):
                removed.append(character.id)
            st.caption(
                f"Effective Hit Dice: {format_hit_dice(effective_hit_dice(int(hit_dice), int(modifier)))}"
            )

        state = state.update_character(
            character.id,
            name=name,
            hit_dice=int(hit_dice),
            modifier=int(modifier),
        )

    return apply_removals(state, removed, "remove_character")


def render_monsters(state: CalculatorState) -> CalculatorState:
    """Render the monster editor and fold widget values back into the state."""
    header, add = st.columns([4, 1])
    header.subheader("👹 Monsters")
    if add.button("➕ Add", key="add_monster", use_container_width=True):
        state = state.add_monster()

    removed: list[int] = []
    for monster in state.monsters:
        prefix = f"mon_{state.revision}_{monster.id}"
        with st.container(border=True):
            name_col, hd_col, mod_col, count_col, remove_col = st.columns([3, 2, 2, 2, 1])
            name = name_col.text_input(
                "Name",
                value=monster.name or "",
                placeholder=monster.label,
                key=f"{prefix}_name",
            )
            hit_dice = hd_col.number_input(
                "Hit Dice",
                min_value=MIN_HIT_DICE,
                max_value=MAX_HIT_DICE,
                value=monster.hit_dice,
                step=1,
                key=f"{prefix}_hd",
            )
            modifier = mod_col.number_input(
                "Modifier",
                min_value=MIN_MODIFIER,
                max_value=MAX_MODIFIER,
                value=monster.modifier,
                step=1,
                key=f"{prefix}_mod",
            )
            count = count_col.number_input(
                "Count",
                min_value=MIN_MONSTER_COUNT,
                max_value=MAX_MONSTER_COUNT,
                value=monster.count,
                step=1,
                key=f"{prefix}_count",
            )
            remove_col.write("")
            if remove_col.button("🗑️", key=f"{prefix}_remove", help="Remove monster"):
                removed.append(monster.id)
            per_monster = effective_hit_dice(int(hit_dice), int(modifier))
            st.caption(
                f"Effective Hit Dice: {format_hit_dice(per_monster)} × {int(count)} = "
                f"{format_hit_dice(per_monster * int(count))}"
            )

        state = state.update_monster(
            monster.id,
            name=name,
            hit_dice=int(hit_dice),
            modifier=int(modifier),
            count=int(count),
        )

    return apply_removals(state, removed, "remove_monster")


# =============================================================================
# Actions & Results
# =============================================================================


def render_actions(state: CalculatorState, store: SavedCalculationStore) -> CalculatorState:
    """Render Calculate / Reset / Save / Saved buttons."""
    calc_col, reset_col, save_col, saved_col = st.columns(4)

    if calc_col.button("🧮 Calculate XP", type="primary", use_container_width=True):
        try:
            state = state.calculate()
        except ValidationError as exc:
            st.error(exc.message)

    if reset_col.button("🔄 Reset", use_container_width=True):
        set_state(state.reset())
        st.rerun()

    if save_col.button("💾 Save", use_container_width=True, disabled=state.result is None):
        try:
            saved = store.save_calculation(state.characters, state.monsters, state.result)
        except (StorageError, ValidationError) as exc:
            st.error(exc.message)
        else:
            state = state.model_copy(update={"loaded_id": saved.id})
            st.success("Calculation saved")

    label = "🙈 Hide Saved" if st.session_state.show_saved else "📂 Show Saved"
    if saved_col.button(label, use_container_width=True):
        st.session_state.show_saved = not st.session_state.show_saved
        set_state(state)
        st.rerun()

    return state


def render_result(result: CalculationResult) -> None:
    """Render totals and, when enabled, the per-character breakdown."""
    st.subheader("📜 Results")

    render_total_xp(result.total_xp, result.xp_per_character)

    party_col, monster_col = st.columns(2)
    with party_col:
        st.markdown("**Party Information**")
        st.caption(f"Total Party Hit Dice: {format_hit_dice(result.total_party_hit_dice)}")
        st.caption(f"Average Party Level: {format_hit_dice(result.average_party_level)}")
    with monster_col:
        st.markdown("**Monster Information**")
        st.caption(f"Total Monster Hit Dice: {format_hit_dice(result.total_monster_hit_dice)}")
        st.caption(f"Level Adjustment Factor: {result.adjustment_factor:.2f}")

    if not settings.ui.show_breakdown or not result.character_xp:
        return

    st.markdown("**Per-Character Awards**")
    rows = []
    for entry in result.character_xp:
        rows.append({
            "Character": entry.character_name or f"Character {entry.character_id}",
            "Effective HD": format_hit_dice(entry.effective_hit_dice),
            "Earned XP": entry.adjusted_xp - entry.remainder_xp,
            "Remainder": entry.remainder_xp,
            "Awarded XP": entry.adjusted_xp,
        })
    st.table(rows)

    with st.expander("Monster contributions"):
        for entry in result.character_xp:
            st.markdown(f"**{entry.character_name or f'Character {entry.character_id}'}**")
            st.table([
                {
                    "Monster": contribution.monster_name or f"Monster {contribution.monster_id}",
                    "Base XP": f"{contribution.base_xp:.2f}",
                    "Factor": f"{contribution.adjustment_factor:.2f}",
                    "Adjusted XP": contribution.adjusted_xp,
                }
                for contribution in entry.contributions
            ])


def render_saved(state: CalculatorState, store: SavedCalculationStore) -> None:
    """Render the saved-calculation list with Load and Delete buttons."""
    st.subheader("💾 Saved Calculations")

    saved_list: list[SavedCalculation] = store.list_calculations()
    if not saved_list:
        st.caption("No saved calculations yet")
        return

    for saved in reversed(saved_list):
        with st.container(border=True):
            info_col, load_col, delete_col = st.columns([4, 1, 1])
            with info_col:
                marker = " ✅" if saved.id == state.loaded_id else ""
                st.markdown(f"**{format_date(saved.created_at)}**{marker}")
                st.caption(summarize_saved(saved))
                st.write(describe_xp(saved))

            if load_col.button("Load", key=f"load_{saved.id}", use_container_width=True):
                set_state(state.load(saved))
                logger.info("Loaded calculation", calculation_id=saved.id)
                flash("success", "Calculation loaded")
                st.rerun()

            if delete_col.button("🗑️", key=f"delete_{saved.id}", use_container_width=True):
                try:
                    store.delete_calculation(saved.id)
                except StorageError as exc:
                    st.error(exc.message)
                else:
                    flash("success", "Calculation deleted")
                    st.rerun()


# =============================================================================
# Main Page
# =============================================================================


def main() -> None:
    """Render the calculator page."""
    init_session_state()
    store = get_calculation_store()

    st.title(f"⚔️ {settings.app_name}")
    st.caption("Calculate experience points based on hit dice and modifiers")

    render_flash()

    state = get_state()
    clear_context()
    if state.loaded_id is not None:
        bind_context(calculation_id=state.loaded_id)
    inputs_col, side_col = st.columns([2, 1])

    with inputs_col:
        state = render_characters(state)
        state = render_monsters(state)
        state = render_actions(state, store)
        if state.result is not None:
            render_result(state.result)

    with side_col:
        if st.session_state.show_saved:
            render_saved(state, store)

    set_state(state)
    render_footer(settings.app_name, settings.app_version)


main()
