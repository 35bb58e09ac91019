"""Main Streamlit application entry point."""

import sys
from pathlib import Path

# Add project root to path for direct execution
_project_root = Path(__file__).parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import streamlit as st

from pitchnote.app.pages import match_report, matches, members, quarter_editor, roster

# Navigation
PAGES = {
    "Match Report": match_report,
    "Quarter Editor": quarter_editor,
    "Matches": matches,
    "Players": roster,
    "Members": members,
}


def main() -> None:
    """Run the main application."""
    st.set_page_config(
        page_title="PitchNote - Match Records",
        page_icon="⚽",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    st.sidebar.title("PitchNote")
    st.sidebar.markdown("*Lineups, ratings and MVPs for your team*")
    st.sidebar.divider()

    page_name = st.sidebar.radio("Navigation", list(PAGES.keys()), label_visibility="collapsed")

    page = PAGES[page_name]
    page.render()


if __name__ == "__main__":
    main()
