"""Pitch diagram component showing players at their coordinates."""

from html import escape
from typing import Optional

import streamlit as st

from ...analysis import FieldPlayer, class_names, format_rating


PITCH_STYLE = (
    "position:relative;width:100%;aspect-ratio:3/2;background:#15803d;"
    "border:2px solid #fff;border-radius:8px;overflow:hidden;"
)
MARKER_STYLE = (
    "position:absolute;transform:translate(-50%,-50%);width:40px;height:40px;"
    "border-radius:50%;color:#fff;font-weight:700;font-size:13px;"
    "display:flex;align-items:center;justify-content:center;"
)


def marker_markup(fp: FieldPlayer, selected: bool = False) -> str:
    """HTML for one player marker, positioned by percentage."""
    classes = class_names(
        "marker",
        "state-idle",
        {"state-selected": selected, "rated": fp.rating is not None},
    )
    label = fp.player.number if fp.player.number is not None else fp.player.name[:1]
    border = "3px solid #facc15" if selected else "2px solid #fff"
    title = f"{fp.player.name} ({format_rating(fp.rating)})"
    return (
        f'<div class="{classes}" title="{escape(title)}" '
        f'style="{MARKER_STYLE}left:{fp.x:.1f}%;top:{fp.y:.1f}%;'
        f'background:{fp.position_type.color};border:{border};">'
        f"{escape(str(label))}</div>"
    )


def pitch_markup(field_players: list[FieldPlayer], selected_id: Optional[str] = None) -> str:
    """HTML for the whole pitch with halfway line and all markers."""
    markers = "".join(marker_markup(fp, fp.player_id == selected_id) for fp in field_players)
    halfway = (
        '<div style="position:absolute;left:50%;top:0;bottom:0;'
        'border-left:2px solid rgba(255,255,255,.6);"></div>'
    )
    return f'<div class="pitch" style="{PITCH_STYLE}">{halfway}{markers}</div>'


def render_pitch(field_players: list[FieldPlayer], selected_id: Optional[str] = None) -> None:
    """
    Render the pitch diagram.

    Args:
        field_players: Players on the pitch.
        selected_id: Player to highlight.
    """
    st.markdown(pitch_markup(field_players, selected_id), unsafe_allow_html=True)
    if not field_players:
        st.caption("No players on the pitch yet.")
