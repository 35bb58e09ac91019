"""MVP highlight component."""

from typing import Optional

import streamlit as st

from ...analysis import PlayerStats, format_rating


def render_mvp_card(mvp: Optional[PlayerStats]) -> None:
    """
    Render the match MVP.

    Args:
        mvp: The MVP's statistics, or None when nobody has been rated.
    """
    if mvp is None:
        st.info("No MVP yet: rate players in a quarter to pick one.")
        return

    number = f"#{mvp.player_number} " if mvp.player_number is not None else ""
    st.subheader(f"🏆 MVP: {number}{mvp.player_name}")

    cols = st.columns(3)
    with cols[0]:
        st.metric("Avg rating", format_rating(mvp.average_rating))
    with cols[1]:
        st.metric("Goals", mvp.total_goals)
    with cols[2]:
        st.metric("Assists", mvp.total_assists)
