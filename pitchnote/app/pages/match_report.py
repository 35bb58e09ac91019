"""Match report page: score, MVP, player statistics and attendance."""

import logging

import streamlit as st

from ...analysis import (
    attendance,
    calculate_mvp,
    format_date,
    format_rating,
    format_score,
    get_player_stats,
    get_player_stats_from_match,
    match_totals,
)
from ...models import Match, Player, Quarter
from ...services import AuthError, FetchError
from ..components import render_mvp_card, render_stats_table
from ..session import (
    current_match,
    current_permissions,
    current_roster,
    init_session_state,
    is_backend,
    render_data_source,
    require,
)


logger = logging.getLogger(__name__)

RESULT_LABELS = {
    "win": "승",
    "draw": "무",
    "loss": "패",
}


def _attendee_names(match: Match, roster: list[Player]) -> list[str]:
    """Display names of everyone who took part, in first-seen order."""
    by_id = {p.id: p for p in roster}
    return [by_id[pid].display_name if pid in by_id else pid for pid in attendance(match)]


def _render_header(match: Match) -> None:
    st.title(f"vs {match.opponent}")
    details = format_date(match.match_date)
    if match.location:
        details += f" · {match.location}"
    st.caption(details)

    cols = st.columns([1, 3])
    with cols[0]:
        st.metric("Score", format_score(match.home_score, match.away_score))
    with cols[1]:
        st.markdown(f"**{RESULT_LABELS[match.result]}**")
        if match.notes:
            st.write(match.notes)


def _render_quarters(match: Match) -> None:
    st.subheader("Quarters")
    quarters = match.quarters or []
    if not quarters:
        st.info("This match has no quarters yet.")
        return

    cols = st.columns(len(quarters))
    for col, quarter in zip(cols, quarters):
        with col:
            st.metric(
                f"Q{quarter.quarter_number}",
                format_score(quarter.home_score, quarter.away_score),
                delta=f"{len(quarter.records)} players",
                delta_color="off",
            )


def save_quarter_score(match: Match, quarter: Quarter, home: int, away: int) -> bool:
    """
    Store a quarter's score and bring the match score in line with it.

    The match score is always the sum of its quarter scores.

    Returns:
        True if the scores were saved, False if an error was shown instead.
    """
    previous = (quarter.home_score, quarter.away_score)
    quarter.home_score, quarter.away_score = home, away
    home_total, away_total = match_totals(match.quarters)

    if is_backend():
        client = st.session_state.client
        try:
            client.update_quarter_score(quarter.id, home, away)
            client.update_match_score(match.id, home_total, away_total)
        except (AuthError, FetchError) as e:
            quarter.home_score, quarter.away_score = previous
            logger.warning("Saving score of quarter %s failed: %s", quarter.id, e)
            st.error(f"Could not save score: {e}")
            return False

    match.home_score, match.away_score = home_total, away_total
    return True


def _render_score_editor(match: Match) -> None:
    quarters = match.quarters or []
    if not quarters or not current_permissions().can_edit_matches:
        return

    with st.expander("Edit quarter scores", expanded=False):
        for quarter in quarters:
            with st.form(f"score_{quarter.id}"):
                st.markdown(f"**Q{quarter.quarter_number}**")
                cols = st.columns(2)
                with cols[0]:
                    home = st.number_input("Us", 0, 99, quarter.home_score, key=f"home_{quarter.id}")
                with cols[1]:
                    away = st.number_input("Them", 0, 99, quarter.away_score, key=f"away_{quarter.id}")
                submitted = st.form_submit_button("Save score")
            if submitted and require("matches"):
                if save_quarter_score(match, quarter, int(home), int(away)):
                    st.rerun()


def _render_player_detail(match: Match) -> None:
    players = {s.player_id: s.player_name for s in get_player_stats_from_match(match)}
    if not players:
        return

    player_id = st.selectbox("Player detail", list(players), format_func=players.get)
    stats = get_player_stats(match, player_id)
    if stats is None:
        return

    cols = st.columns(4)
    with cols[0]:
        st.metric("Avg rating", format_rating(stats.average_rating if stats.is_rated else None))
    with cols[1]:
        st.metric("Rated quarters", stats.rating_count)
    with cols[2]:
        st.metric("Goals / assists", f"{stats.total_goals} / {stats.total_assists}")
    with cols[3]:
        st.metric("Clean sheets", stats.clean_sheets)


def render() -> None:
    """Render the match report page."""
    init_session_state()
    render_data_source()

    match = current_match()
    if match is None:
        st.title("Match report")
        st.info("No match selected. Create or open one on the Matches page.")
        return

    _render_header(match)
    st.divider()

    render_mvp_card(calculate_mvp(match))
    st.divider()

    _render_quarters(match)
    _render_score_editor(match)
    st.divider()

    st.subheader("Player stats")
    render_stats_table(get_player_stats_from_match(match))
    _render_player_detail(match)

    names = _attendee_names(match, current_roster())
    with st.expander(f"Attendance ({len(names)})", expanded=False):
        for name in names:
            st.write(name)
