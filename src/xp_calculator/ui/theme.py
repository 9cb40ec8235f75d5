"""Party XP Calculator theme.

A compact parchment-on-dark look for the calculator page.
"""

from __future__ import annotations

import streamlit as st


# =============================================================================
# Color Palette
# =============================================================================


class Colors:
    """Calculator color palette."""

    CRIMSON = "#8B2020"
    AMBER = "#C9A227"

    BG_DARK = "#1C1410"
    BG_CARD = "#2A201A"

    TEXT_PRIMARY = "#F5EDE4"
    TEXT_SECONDARY = "#C4B5A5"

    BORDER = "#5C4A3A"

    SUCCESS = "#22C55E"
    WARNING = "#F59E0B"


# =============================================================================
# Main CSS
# =============================================================================


THEME_CSS = f"""
<style>
    :root {{
        --bg-dark: {Colors.BG_DARK};
        --bg-card: {Colors.BG_CARD};
        --text-primary: {Colors.TEXT_PRIMARY};
        --text-secondary: {Colors.TEXT_SECONDARY};
        --crimson: {Colors.CRIMSON};
        --amber: {Colors.AMBER};
        --border: {Colors.BORDER};
    }}

    /* Hide Streamlit chrome */
    #MainMenu {{visibility: hidden;}}
    .stDeployButton {{display: none;}}

    h1 {{
        padding-bottom: 0.5rem;
        border-bottom: 2px solid var(--crimson);
    }}

    .xp-total {{
        text-align: center;
        padding: 1rem;
        border: 1px solid var(--border);
        border-radius: 8px;
        background: var(--bg-card);
        color: var(--text-primary);
    }}

    .xp-total .value {{
        font-size: 2.25rem;
        font-weight: 700;
        color: var(--amber);
    }}

    .xp-footer {{
        text-align: center;
        font-size: 0.85rem;
        color: var(--text-secondary);
        margin-top: 2rem;
    }}
</style>
"""


def apply_theme() -> None:
    """Apply the theme to the Streamlit app."""
    st.markdown(THEME_CSS, unsafe_allow_html=True)


def render_total_xp(total_xp: float, xp_per_character: float) -> None:
    """Render the headline XP box."""
    st.markdown(f"""
    <div class="xp-total">
        <div>Total XP</div>
        <div class="value">{total_xp:,.0f}</div>
        <div>{xp_per_character:,.0f} per character</div>
    </div>
    """, unsafe_allow_html=True)


def render_footer(app_name: str, app_version: str) -> None:
    """Render the rules reminder and version under the page."""
    st.markdown(f"""
    <div class="xp-footer">
        <p>100 XP per effective monster hit die.</p>
        <p>Hit dice modifiers count as 25% of a hit die.</p>
        <p>{app_name} v{app_version}</p>
    </div>
    """, unsafe_allow_html=True)
