"""Analysis modules for match statistics, MVP selection and pitch layout."""

from .formation import (
    FORMATIONS,
    POSITION_BANDS,
    FieldPlayer,
    FormationResult,
    Placement,
    add_players_to_field,
    apply_formation,
    available_players,
    clamp_position,
    move_player,
    place_new_players,
    remove_player_from_field,
)
from .formatting import class_names, format_date, format_rating, format_score, position_label
from .quarter import (
    attendance,
    build_quarter_records,
    match_totals,
    media_path,
    records_from_field,
    validate_substitution,
)
from .results import EditError, EditResult
from .stats import (
    PlayerStats,
    SeasonStats,
    calculate_mvp,
    get_player_stats,
    get_player_stats_from_match,
    season_stats,
)

__all__ = [
    # Stats
    "PlayerStats",
    "SeasonStats",
    "calculate_mvp",
    "get_player_stats",
    "get_player_stats_from_match",
    "season_stats",
    # Formation
    "FORMATIONS",
    "POSITION_BANDS",
    "FieldPlayer",
    "FormationResult",
    "Placement",
    "add_players_to_field",
    "apply_formation",
    "available_players",
    "clamp_position",
    "move_player",
    "place_new_players",
    "remove_player_from_field",
    # Quarter editing
    "attendance",
    "build_quarter_records",
    "match_totals",
    "media_path",
    "records_from_field",
    "validate_substitution",
    # Results
    "EditError",
    "EditResult",
    # Formatting
    "class_names",
    "format_date",
    "format_rating",
    "format_score",
    "position_label",
]
