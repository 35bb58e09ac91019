"""Reusable UI components for the PitchNote application."""

from .mvp_card import render_mvp_card
from .pitch import marker_markup, pitch_markup, render_pitch
from .stats_table import render_season_table, render_stats_table, season_rows, stats_rows

__all__ = [
    "marker_markup",
    "pitch_markup",
    "render_mvp_card",
    "render_pitch",
    "render_season_table",
    "render_stats_table",
    "season_rows",
    "stats_rows",
]
