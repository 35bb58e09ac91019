"""Quarter editor page for lineups, formations and per-player records."""

import logging
import time
from dataclasses import replace
from typing import Optional

import streamlit as st

from ...analysis import (
    FORMATIONS,
    FieldPlayer,
    add_players_to_field,
    apply_formation,
    available_players,
    build_quarter_records,
    clamp_position,
    format_rating,
    media_path,
    move_player,
    records_from_field,
    remove_player_from_field,
    validate_substitution,
)
from ...models import MAX_RATING, MIN_RATING, Quarter, Substitution
from ...services import AuthError, FetchError, UploadError
from ..components import render_pitch
from ..session import (
    current_match,
    current_permissions,
    init_session_state,
    is_backend,
    render_data_source,
    require,
)


logger = logging.getLogger(__name__)


def _field_key(quarter: Quarter) -> str:
    return f"field_{quarter.id}"


def _get_field(quarter: Quarter) -> list[FieldPlayer]:
    """Get the players on the pitch for a quarter, loading stored records once."""
    key = _field_key(quarter)
    if key not in st.session_state:
        st.session_state[key] = [
            FieldPlayer.from_record(r) for r in quarter.records if r.player is not None
        ]
    return st.session_state[key]


def _set_field(quarter: Quarter, field_players: list[FieldPlayer]) -> None:
    st.session_state[_field_key(quarter)] = field_players


def _reset_position_widgets(quarter: Quarter) -> None:
    """
    Forget the position sliders of a quarter.

    Sliders keep their own value across reruns; after coordinates are set
    elsewhere they must start again from the players' new positions.
    """
    prefixes = (f"x_{quarter.id}_", f"y_{quarter.id}_")
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefixes)]:
        del st.session_state[key]


def _replace_field(quarter: Quarter, field_players: list[FieldPlayer]) -> None:
    """Store a pitch whose coordinates were changed outside the sliders."""
    _set_field(quarter, field_players)
    _reset_position_widgets(quarter)


def _update_player(quarter: Quarter, player_id: str, **changes) -> None:
    field_players = _get_field(quarter)
    _set_field(
        quarter,
        [replace(fp, **changes) if fp.player_id == player_id else fp for fp in field_players],
    )


def _render_add_players(quarter: Quarter, editable: bool) -> None:
    field_players = _get_field(quarter)
    candidates = available_players(st.session_state.roster, field_players)
    if not candidates:
        return

    by_label = {p.display_name: p for p in candidates}
    picked = st.multiselect(
        "Add players",
        list(by_label),
        key=f"pick_{quarter.id}",
        disabled=not editable,
    )
    if st.button("Add to pitch", disabled=not editable or not picked):
        _replace_field(quarter, add_players_to_field(field_players, [by_label[name] for name in picked]))
        st.rerun()


def _render_formation(quarter: Quarter, editable: bool) -> None:
    cols = st.columns([2, 1])
    with cols[0]:
        name = st.selectbox("Formation", list(FORMATIONS), key=f"formation_{quarter.id}")
    with cols[1]:
        if st.button("Apply formation", disabled=not editable):
            result = apply_formation(_get_field(quarter), name)
            if not result.applied:
                st.error(result.errors[0].message)
            else:
                _replace_field(quarter, result.field_players)
                st.rerun()


def _upload_media(quarter: Quarter, fp: FieldPlayer, files: list) -> list[str]:
    """Upload files for a player; failures are reported per file."""
    client = st.session_state.client
    if client is None:
        st.warning("Media upload needs a configured backend.")
        return []

    urls: list[str] = []
    for file in files:
        path = media_path(
            current_match().id,
            quarter.id,
            fp.player_id,
            file.name,
            int(time.time() * 1000),
        )
        try:
            urls.append(client.upload_media(file.getvalue(), path, file.type, client.access_token))
        except (AuthError, UploadError) as e:
            st.error(f"Upload failed: {file.name} - {e}")
    if urls:
        st.success(f"Uploaded {len(urls)} file(s)")
    return urls


def _render_player_editor(quarter: Quarter, fp: FieldPlayer, editable: bool) -> None:
    """Render the record form for one player on the pitch."""
    st.markdown(f"**{fp.player.display_name}** · {fp.position_type.label}")
    key = f"{quarter.id}_{fp.player_id}"

    start_x, start_y = clamp_position(float(fp.x), float(fp.y))
    cols = st.columns(2)
    with cols[0]:
        x = st.slider("Across (x)", 5.0, 95.0, start_x, key=f"x_{key}", disabled=not editable)
    with cols[1]:
        y = st.slider("Down (y)", 5.0, 95.0, start_y, key=f"y_{key}", disabled=not editable)
    if (x, y) != (start_x, start_y):
        _set_field(quarter, move_player(_get_field(quarter), fp.player_id, x, y))

    rated = st.checkbox("Rated", value=fp.rating is not None, key=f"rated_{key}", disabled=not editable)
    rating: Optional[float] = None
    if rated:
        rating = st.number_input(
            "Rating",
            min_value=MIN_RATING,
            max_value=MAX_RATING,
            value=float(fp.rating) if fp.rating is not None else 6.0,
            step=0.5,
            key=f"rating_{key}",
            disabled=not editable,
        )
    st.caption(f"Current rating: {format_rating(rating)}")

    cols = st.columns(2)
    with cols[0]:
        goals = st.number_input("Goals", 0, 20, fp.goals, key=f"goals_{key}", disabled=not editable)
    with cols[1]:
        assists = st.number_input("Assists", 0, 20, fp.assists, key=f"assists_{key}", disabled=not editable)

    clean_sheet = st.checkbox("Clean sheet", fp.clean_sheet, key=f"cs_{key}", disabled=not editable)
    present = st.checkbox("Contributed", fp.contribution > 0, key=f"contrib_{key}", disabled=not editable)
    praise = st.text_area("Praise", fp.praise_text, key=f"praise_{key}", disabled=not editable)
    improvement = st.text_area("To improve", fp.improvement_text, key=f"improve_{key}", disabled=not editable)
    highlight = st.text_area("Highlight", fp.highlight_text, key=f"highlight_{key}", disabled=not editable)

    _update_player(
        quarter,
        fp.player_id,
        rating=rating,
        goals=int(goals),
        assists=int(assists),
        clean_sheet=clean_sheet,
        contribution=1.0 if present else 0.0,
        praise_text=praise,
        improvement_text=improvement,
        highlight_text=highlight,
    )

    for url in fp.media_urls:
        st.image(url, width=160)

    files = st.file_uploader(
        "Photos / videos",
        accept_multiple_files=True,
        key=f"media_{key}",
        disabled=not editable,
    )
    if files and st.button("Upload", key=f"upload_{key}") and require("quarters"):
        urls = _upload_media(quarter, fp, files)
        if urls:
            _update_player(quarter, fp.player_id, media_urls=[*fp.media_urls, *urls])

    if st.button("Remove from pitch", key=f"remove_{key}", disabled=not editable):
        _replace_field(quarter, remove_player_from_field(_get_field(quarter), fp.player_id))
        st.rerun()


def _render_substitutions(quarter: Quarter, editable: bool) -> None:
    st.subheader("Substitutions")
    names = {p.id: p.display_name for p in st.session_state.roster}
    for sub in sorted(quarter.substitutions, key=lambda s: s.minute):
        st.write(
            f"{sub.minute}' {names.get(sub.player_out_id, sub.player_out_id)} "
            f"→ {names.get(sub.player_in_id, sub.player_in_id)}"
        )

    if not editable:
        return

    with st.form(f"sub_{quarter.id}"):
        cols = st.columns(3)
        with cols[0]:
            player_out = st.selectbox("Off", list(names), format_func=names.get)
        with cols[1]:
            player_in = st.selectbox("On", list(names), format_func=names.get)
        with cols[2]:
            minute = st.number_input("Minute", 0, quarter.duration_minutes, 0)
        submitted = st.form_submit_button("Add substitution")

    if not submitted or not require("quarters"):
        return

    result = validate_substitution(quarter, player_out, player_in, int(minute))
    if not result.is_valid:
        st.error(result.errors[0].message)
        return

    client = st.session_state.client
    if is_backend():
        try:
            client.insert_substitution(quarter.id, player_out, player_in, int(minute))
        except (AuthError, FetchError) as e:
            st.error(f"Could not save substitution: {e}")
            return
    quarter.substitutions.append(
        Substitution(
            id=f"{quarter.id}-sub-{len(quarter.substitutions) + 1}",
            quarter_id=quarter.id,
            player_out_id=player_out,
            player_in_id=player_in,
            minute=int(minute),
        )
    )
    st.rerun()


def _save(quarter: Quarter) -> None:
    """Replace the quarter's records with the players on the pitch."""
    if not require("quarters"):
        return
    field_players = _get_field(quarter)
    if is_backend():
        try:
            st.session_state.client.replace_quarter_records(
                quarter.id, build_quarter_records(quarter.id, field_players)
            )
        except (AuthError, FetchError) as e:
            logger.warning("Saving quarter %s failed: %s", quarter.id, e)
            st.error(f"Save failed: {e}")
            return
    quarter.quarter_records = records_from_field(quarter.id, field_players)
    st.success("Saved")


def render() -> None:
    """Render the quarter editor page."""
    init_session_state()
    render_data_source()

    match = current_match()
    editable = current_permissions().can_edit_quarters

    if match is None:
        st.title("Quarter editor")
        st.info("No match selected. Create or open one on the Matches page.")
        return

    quarters = match.quarters or []
    if not quarters:
        st.title("Quarter editor")
        st.info("This match has no quarters yet.")
        return

    number = st.sidebar.selectbox(
        "Quarter",
        [q.quarter_number for q in quarters],
        format_func=lambda n: f"Q{n}",
    )
    quarter = match.get_quarter(number)

    st.title(f"Q{quarter.quarter_number} vs {match.opponent}")
    if not editable:
        st.warning("You can view this quarter but not edit it.")

    cols = st.columns([1.4, 1])
    with cols[0]:
        field_players = _get_field(quarter)
        selected_id = st.session_state.get(f"selected_{quarter.id}")
        render_pitch(field_players, selected_id)
        _render_add_players(quarter, editable)
        _render_formation(quarter, editable)

    with cols[1]:
        field_players = _get_field(quarter)
        if field_players:
            labels = {fp.player_id: fp.player.display_name for fp in field_players}
            selected_id = st.selectbox(
                "Player",
                list(labels),
                format_func=labels.get,
                key=f"selected_{quarter.id}",
            )
            selected = next(fp for fp in field_players if fp.player_id == selected_id)
            _render_player_editor(quarter, selected, editable)

    st.divider()
    _render_substitutions(quarter, editable)

    st.divider()
    if st.button("Save quarter", type="primary", disabled=not editable):
        _save(quarter)
