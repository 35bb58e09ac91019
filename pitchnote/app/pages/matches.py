"""Matches page: pick, create and delete the team's matches."""

import logging
from datetime import date

import streamlit as st

from ...analysis import format_date, format_score
from ...models import Match
from ...services import AuthError, FetchError, ParseError, create_blank_match
from ..session import (
    current_match,
    current_permissions,
    current_team,
    init_session_state,
    is_backend,
    load_match,
    open_match,
    render_data_source,
    require,
)


logger = logging.getLogger(__name__)


def match_label(match: Match) -> str:
    """Picker label, e.g. "2024년 6월 15일 vs FC Seoul (3 : 1)"."""
    return (
        f"{format_date(match.match_date)} vs {match.opponent} "
        f"({format_score(match.home_score, match.away_score)})"
    )


def _next_sample_id(matches: list[Match]) -> str:
    taken = {m.id for m in matches}
    n = len(matches) + 1
    while f"match-{n}" in taken:
        n += 1
    return f"match-{n}"


def _render_picker(matches: list[Match]) -> None:
    if not matches:
        st.info("The team has no matches yet.")
        return

    current = current_match()
    ids = [m.id for m in matches]
    index = ids.index(current.id) if current is not None and current.id in ids else 0
    by_id = {m.id: m for m in matches}
    picked = st.selectbox(
        "Match",
        ids,
        index=index,
        format_func=lambda match_id: match_label(by_id[match_id]),
    )
    if st.button("Open match") and open_match(by_id[picked]):
        st.rerun()


def create_match(opponent: str, match_date: date, location: str) -> bool:
    """
    Create a match for the current team and make it the current one.

    Returns:
        True if the match was created, False if an error was shown instead.
    """
    team = current_team()
    matches: list[Match] = st.session_state.matches

    if is_backend():
        client = st.session_state.client
        try:
            match = client.create_match(team.id, opponent, match_date, location)
        except (AuthError, FetchError, ParseError) as e:
            logger.warning("Creating match against %s failed: %s", opponent, e)
            st.error(f"Could not create match: {e}")
            return False
        # The backend adds the quarters; load_match refreshes the list too.
        return load_match(match.id, client.access_token or "")

    match = create_blank_match(_next_sample_id(matches), team.id, opponent, match_date, location)
    matches.insert(0, match)
    return open_match(match)


def delete_current_match() -> bool:
    """
    Delete the current match; the next remaining match becomes current.

    Returns:
        True if the match was deleted, False if an error was shown instead.
    """
    match = current_match()
    if match is None:
        return False

    if is_backend():
        try:
            st.session_state.client.delete_match(match.id)
        except (AuthError, FetchError) as e:
            logger.warning("Deleting match %s failed: %s", match.id, e)
            st.error(f"Could not delete match: {e}")
            return False

    remaining = [m for m in st.session_state.matches if m.id != match.id]
    st.session_state.matches = remaining
    if not remaining:
        st.session_state.match = None
        return True
    return open_match(remaining[0])


def _render_new_match() -> None:
    with st.form("new_match", clear_on_submit=True):
        st.markdown("**New match**")
        opponent = st.text_input("Opponent")
        match_date = st.date_input("Date", value=date.today())
        location = st.text_input("Location")
        submitted = st.form_submit_button("Create match")

    if not submitted or not require("matches"):
        return
    if not opponent.strip():
        st.error("Opponent is required.")
        return
    if create_match(opponent, match_date, location):
        st.rerun()


def _render_delete() -> None:
    match = current_match()
    if match is None:
        return

    confirm = st.checkbox(f"Delete the match against {match.opponent}", key="confirm_delete_match")
    if st.button("Delete match", disabled=not confirm) and require("matches"):
        if delete_current_match():
            st.session_state.pop("confirm_delete_match", None)
            st.rerun()


def render() -> None:
    """Render the matches page."""
    init_session_state()
    render_data_source()

    st.title(f"{current_team().name} matches")
    _render_picker(st.session_state.matches)

    if not current_permissions().can_edit_matches:
        return

    st.divider()
    _render_new_match()

    st.divider()
    _render_delete()
