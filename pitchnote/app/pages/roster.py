"""Players page: season statistics and roster editing."""

import logging
from dataclasses import replace
from typing import Optional

import streamlit as st

from ...analysis import position_label, season_stats
from ...models import Player, PositionType, QuarterRecord
from ...services import AuthError, FetchError, ParseError
from ..components import render_season_table
from ..session import (
    current_permissions,
    current_roster,
    current_team,
    init_session_state,
    is_backend,
    render_data_source,
    require,
)


logger = logging.getLogger(__name__)


def team_records() -> list[QuarterRecord]:
    """Quarter records of every roster player across the team's matches."""
    if is_backend():
        try:
            return st.session_state.client.fetch_team_records([p.id for p in current_roster()])
        except (AuthError, FetchError, ParseError) as e:
            logger.warning("Could not load season records: %s", e)
            st.error(f"Could not load season records: {e}")
            return []
    return [
        record
        for match in st.session_state.matches
        for quarter in match.quarters or []
        for record in quarter.records
    ]


def _next_sample_id(roster: list[Player]) -> str:
    taken = {p.id for p in roster}
    n = len(roster) + 1
    while f"player-{n}" in taken:
        n += 1
    return f"player-{n}"


def add_player(name: str, number: Optional[int], position: PositionType) -> bool:
    """
    Add a player to the current team's roster.

    Returns:
        True if the player was added, False if an error was shown instead.
    """
    if not name.strip():
        st.error("Name is required.")
        return False

    roster = current_roster()
    team = current_team()
    try:
        if is_backend():
            player = st.session_state.client.create_player(team.id, name, number, position)
        else:
            player = Player(
                id=_next_sample_id(roster),
                team_id=team.id,
                name=name.strip(),
                number=number,
                default_position=position,
            )
    except ValueError as e:
        st.error(str(e))
        return False
    except (AuthError, FetchError, ParseError) as e:
        logger.warning("Adding player %s failed: %s", name, e)
        st.error(f"Could not add player: {e}")
        return False

    roster.append(player)
    return True


def save_player(player: Player, name: str, number: Optional[int], position: PositionType) -> bool:
    """Store edits to a roster entry; False if an error was shown instead."""
    try:
        updated = replace(player, name=name.strip(), number=number, default_position=position)
    except ValueError as e:
        st.error(str(e))
        return False

    if is_backend():
        try:
            st.session_state.client.update_player(updated)
        except (AuthError, FetchError) as e:
            logger.warning("Updating player %s failed: %s", player.id, e)
            st.error(f"Could not save player: {e}")
            return False

    st.session_state.roster = [updated if p.id == player.id else p for p in current_roster()]
    return True


def remove_player(player: Player) -> bool:
    """Delete a roster entry; False if an error was shown instead."""
    if is_backend():
        try:
            st.session_state.client.delete_player(player.id)
        except (AuthError, FetchError) as e:
            logger.warning("Deleting player %s failed: %s", player.id, e)
            st.error(f"Could not delete player: {e}")
            return False

    st.session_state.roster = [p for p in current_roster() if p.id != player.id]
    return True


def _player_inputs(player: Optional[Player], key: str) -> tuple[str, Optional[int], PositionType]:
    positions = list(PositionType)
    name = st.text_input("Name", player.name if player else "", key=f"name_{key}")
    number = st.number_input(
        "Number",
        min_value=0,
        max_value=99,
        value=player.number if player else None,
        step=1,
        key=f"number_{key}",
    )
    position = st.selectbox(
        "Position",
        positions,
        index=positions.index(player.default_position) if player else positions.index(PositionType.MF),
        format_func=position_label,
        key=f"position_{key}",
    )
    return name, None if number is None else int(number), position


def _render_add() -> None:
    with st.form("new_player", clear_on_submit=True):
        st.markdown("**New player**")
        name, number, position = _player_inputs(None, "new")
        submitted = st.form_submit_button("Add player")
    if submitted and require("players") and add_player(name, number, position):
        st.rerun()


def _render_edit() -> None:
    roster = current_roster()
    if not roster:
        return

    by_id = {p.id: p for p in roster}
    player_id = st.selectbox(
        "Edit player",
        list(by_id),
        format_func=lambda pid: by_id[pid].display_name,
        key="edit_player",
    )
    player = by_id[player_id]

    with st.form(f"player_{player.id}"):
        name, number, position = _player_inputs(player, player.id)
        cols = st.columns(2)
        with cols[0]:
            saved = st.form_submit_button("Save player")
        with cols[1]:
            removed = st.form_submit_button("Delete player")

    if saved and require("players") and save_player(player, name, number, position):
        st.rerun()
    if removed and require("players") and remove_player(player):
        st.session_state.pop("edit_player", None)
        st.rerun()


def render() -> None:
    """Render the players page."""
    init_session_state()
    render_data_source()

    st.title(f"{current_team().name} players")
    st.subheader("Season")
    render_season_table(season_stats(current_roster(), team_records()))

    if not current_permissions().can_edit_players:
        return

    st.divider()
    _render_add()

    st.divider()
    _render_edit()
