"""Player statistics table component."""

from typing import Any

import streamlit as st

from ...analysis import PlayerStats, SeasonStats, format_rating


def stats_rows(stats: list[PlayerStats]) -> list[dict[str, Any]]:
    """Table rows for aggregated player statistics, in the given order."""
    return [
        {
            "#": s.player_number if s.player_number is not None else "",
            "Player": s.player_name,
            "Rating": format_rating(s.average_rating if s.is_rated else None),
            "Rated quarters": s.rating_count,
            "Goals": s.total_goals,
            "Assists": s.total_assists,
            "Clean sheets": s.clean_sheets,
        }
        for s in stats
    ]


def render_stats_table(stats: list[PlayerStats]) -> None:
    """
    Render the statistics of every player in a match.

    Args:
        stats: Aggregated statistics, highest rating first.
    """
    if not stats:
        st.info("No player records for this match yet.")
        return

    st.dataframe(stats_rows(stats), hide_index=True, use_container_width=True)


def season_rows(stats: list[SeasonStats]) -> list[dict[str, Any]]:
    """Table rows for season totals, in roster order."""
    return [
        {
            "#": s.player.number if s.player.number is not None else "",
            "Player": s.player.name,
            "Position": s.player.default_position.value,
            "Quarters": s.games,
            "Rating": format_rating(s.average_rating),
            "Goals": s.goals,
            "Assists": s.assists,
            "Clean sheets": s.clean_sheets,
        }
        for s in stats
    ]


def render_season_table(stats: list[SeasonStats]) -> None:
    if not stats:
        st.info("The roster is empty.")
        return

    st.dataframe(season_rows(stats), hide_index=True, use_container_width=True)
