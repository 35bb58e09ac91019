"""Session state shared by the PitchNote pages."""

import logging
from typing import Optional

import streamlit as st

from ..config import load_settings, setup_logging
from ..models import Match, Permissions, Player, Team, TeamMember
from ..services import (
    SAMPLE_USER_ID,
    AuthError,
    FetchError,
    ParseError,
    SupabaseClient,
    create_sample_match,
    create_sample_members,
    create_sample_players,
    create_sample_team,
)


logger = logging.getLogger(__name__)

AREA_LABELS = {
    "players": "edit players",
    "matches": "edit matches",
    "quarters": "edit quarters",
    "members": "manage members",
}


def init_session_state() -> None:
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        settings = load_settings()
        setup_logging(settings.log_level)
        st.session_state.settings = settings
        st.session_state.client = SupabaseClient(settings) if settings.is_configured else None
    if "match" not in st.session_state:
        _use_sample_data()


def _use_sample_data() -> None:
    """Load the sample team; the local user edits it as coach."""
    team = create_sample_team()
    match = create_sample_match()
    st.session_state.team = team
    st.session_state.match = match
    st.session_state.matches = [match]
    st.session_state.roster = create_sample_players()
    st.session_state.members = create_sample_members()
    st.session_state.user_id = SAMPLE_USER_ID
    st.session_state.permissions = Permissions.for_user(team, None, SAMPLE_USER_ID)
    st.session_state.data_source = "sample"


def _clear_pitch_state() -> None:
    """Drop pitch edits and their widgets, which belong to the previous match."""
    prefixes = ("field_", "x_", "y_", "selected_")
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefixes)]:
        del st.session_state[key]


def load_match(match_id: str, access_token: str) -> bool:
    """
    Load a match, its team roster, members and the user's permissions from the backend.

    Returns:
        True if the match was loaded, False if an error was shown instead.
    """
    client: SupabaseClient = st.session_state.client
    try:
        user_id = client.get_user_id(access_token)
        client.access_token = access_token
        match = client.fetch_match(match_id)
        team = client.fetch_team(match.team_id)
        member = client.fetch_member(team.id, user_id)
        roster = client.fetch_players(team.id)
        members = client.fetch_members(team.id)
        matches = client.fetch_matches(team.id)
    except AuthError as e:
        st.error(f"Sign-in required: {e}")
        return False
    except (FetchError, ParseError) as e:
        logger.warning("Could not load match %s: %s", match_id, e)
        st.error(f"Could not load match: {e}")
        return False

    st.session_state.team = team
    st.session_state.match = match
    st.session_state.matches = matches
    st.session_state.roster = roster
    st.session_state.members = members
    st.session_state.user_id = user_id
    st.session_state.permissions = Permissions.for_user(team, member, user_id)
    st.session_state.data_source = "backend"
    _clear_pitch_state()
    return True


def open_match(match: Match) -> bool:
    """
    Make a match the current one.

    Backend matches are reloaded with their quarters; sample matches are
    already complete.
    """
    if is_backend():
        return load_match(match.id, st.session_state.client.access_token or "")
    st.session_state.match = match
    _clear_pitch_state()
    return True


def is_backend() -> bool:
    return st.session_state.data_source == "backend"


def current_match() -> Optional[Match]:
    return st.session_state.match


def current_team() -> Team:
    return st.session_state.team


def current_roster() -> list[Player]:
    return st.session_state.roster


def current_members() -> list[TeamMember]:
    return st.session_state.members


def current_permissions() -> Permissions:
    return st.session_state.permissions


def require(area: str) -> bool:
    """
    Check the user's permission before a write.

    Shows an error and returns False when the edit is not allowed.
    """
    if current_permissions().allows(area):
        return True
    st.error(f"You do not have permission to {AREA_LABELS[area]}.")
    return False


def render_data_source() -> None:
    """Sidebar controls for choosing between sample data and the backend."""
    if st.session_state.client is None:
        st.sidebar.caption("Sample data (no backend configured)")
        return

    with st.sidebar.form("load_match"):
        match_id = st.text_input("Match ID")
        access_token = st.text_input("Access token", type="password")
        submitted = st.form_submit_button("Load match")
    if submitted and match_id:
        if load_match(match_id.strip(), access_token.strip()):
            st.rerun()

    if st.session_state.data_source == "sample":
        st.sidebar.caption("Showing sample data")
