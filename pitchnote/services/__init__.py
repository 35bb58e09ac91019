"""Backend access for PitchNote: REST client, row parsing and sample data."""

from .errors import (
    AuthError,
    FetchError,
    NotFoundError,
    ParseError,
    ServiceError,
    UploadError,
)
from .client import MATCH_SELECT, SupabaseClient
from .loader import (
    parse_match,
    parse_member,
    parse_player,
    parse_position,
    parse_quarter,
    parse_record,
    parse_substitution,
    parse_team,
)
from .sample import (
    QUARTERS_PER_MATCH,
    SAMPLE_MATCH_ID,
    SAMPLE_TEAM_ID,
    SAMPLE_USER_ID,
    create_blank_match,
    create_sample_match,
    create_sample_members,
    create_sample_players,
    create_sample_team,
)

__all__ = [
    # Errors
    "AuthError",
    "FetchError",
    "NotFoundError",
    "ParseError",
    "ServiceError",
    "UploadError",
    # Client
    "MATCH_SELECT",
    "SupabaseClient",
    # Loader
    "parse_match",
    "parse_member",
    "parse_player",
    "parse_position",
    "parse_quarter",
    "parse_record",
    "parse_substitution",
    "parse_team",
    # Sample data
    "QUARTERS_PER_MATCH",
    "SAMPLE_MATCH_ID",
    "SAMPLE_TEAM_ID",
    "SAMPLE_USER_ID",
    "create_blank_match",
    "create_sample_match",
    "create_sample_members",
    "create_sample_players",
    "create_sample_team",
]
