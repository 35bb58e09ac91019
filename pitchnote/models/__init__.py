"""Data models for PitchNote."""

from .player import POSITION_COLORS, POSITION_LABELS, Player, PositionType
from .match import (
    DEFAULT_QUARTER_MINUTES,
    MAX_RATING,
    MIN_RATING,
    Match,
    Quarter,
    QuarterRecord,
    Substitution,
)
from .team import EDIT_AREAS, Permissions, Role, Team, TeamMember

__all__ = [
    # Player
    "POSITION_COLORS",
    "POSITION_LABELS",
    "Player",
    "PositionType",
    # Match
    "DEFAULT_QUARTER_MINUTES",
    "MAX_RATING",
    "MIN_RATING",
    "Match",
    "Quarter",
    "QuarterRecord",
    "Substitution",
    # Team
    "EDIT_AREAS",
    "Permissions",
    "Role",
    "Team",
    "TeamMember",
]
