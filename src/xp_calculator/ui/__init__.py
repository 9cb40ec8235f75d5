"""UI module for the Party XP Calculator.

Submodules:
    app: The Streamlit calculator page
    state: Immutable working state behind the page
    formatting: Display helpers
    theme: Visual styling

Usage:
    Run the application with:
        streamlit run src/xp_calculator/ui/app.py

    Or from the installed console script:
        xp-calculator
"""

from __future__ import annotations


def run_app() -> None:
    """Run the Streamlit application.

    Note: This launches a subprocess running streamlit.
    """
    import subprocess
    import sys
    from pathlib import Path

    app_path = Path(__file__).parent / "app.py"
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)])


__all__ = [
    "run_app",
]
