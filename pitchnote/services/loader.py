"""Convert JSON rows from the backend into model objects."""

from datetime import date
from typing import Any, Optional

from ..models import (
    DEFAULT_QUARTER_MINUTES,
    Match,
    Player,
    PositionType,
    Quarter,
    QuarterRecord,
    Role,
    Substitution,
    Team,
    TeamMember,
)
from .errors import ParseError


# Aliases seen in older rows and CSV imports.
POSITION_MAP = {
    "gk": PositionType.GK,
    "goalkeeper": PositionType.GK,
    "df": PositionType.DF,
    "defender": PositionType.DF,
    "mf": PositionType.MF,
    "midfielder": PositionType.MF,
    "fw": PositionType.FW,
    "forward": PositionType.FW,
}


def parse_position(position_str: str) -> PositionType:
    """
    Parse a position string to PositionType.

    Raises:
        ParseError: If the position is not recognised.
    """
    normalized = str(position_str).lower().strip()
    if normalized in POSITION_MAP:
        return POSITION_MAP[normalized]
    raise ParseError(f"Unknown position: {position_str}")


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def parse_player(row: dict[str, Any]) -> Player:
    try:
        return Player(
            id=row["id"],
            team_id=row["team_id"],
            name=row["name"],
            number=row.get("number"),
            default_position=parse_position(row.get("default_position", "MF")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ParseError(f"Invalid player row: {e}") from e


def parse_record(row: dict[str, Any]) -> QuarterRecord:
    """
    Parse a quarter record row, including its embedded player when present.

    Numeric columns may arrive as strings and are converted.
    """
    try:
        player_row = row.get("player")
        return QuarterRecord(
            id=row["id"],
            quarter_id=row["quarter_id"],
            player_id=row["player_id"],
            position_type=parse_position(row["position_type"]),
            position_x=float(row.get("position_x", 50)),
            position_y=float(row.get("position_y", 50)),
            rating=_optional_float(row.get("rating")),
            goals=int(row.get("goals") or 0),
            assists=int(row.get("assists") or 0),
            clean_sheet=bool(row.get("clean_sheet")),
            contribution=float(row.get("contribution") or 0),
            praise_text=row.get("praise_text"),
            improvement_text=row.get("improvement_text"),
            highlight_text=row.get("highlight_text"),
            media_urls=row.get("media_urls"),
            player=parse_player(player_row) if player_row else None,
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ParseError(f"Invalid quarter record row: {e}") from e


def parse_substitution(row: dict[str, Any]) -> Substitution:
    try:
        return Substitution(
            id=row["id"],
            quarter_id=row["quarter_id"],
            player_out_id=row["player_out_id"],
            player_in_id=row["player_in_id"],
            minute=int(row.get("minute") or 0),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ParseError(f"Invalid substitution row: {e}") from e


def parse_quarter(row: dict[str, Any]) -> Quarter:
    """
    Parse a quarter row with its nested records and substitutions.

    A missing "quarter_records" key means the records were not selected
    and is kept as None.
    """
    records = row.get("quarter_records")
    try:
        return Quarter(
            id=row["id"],
            match_id=row["match_id"],
            quarter_number=int(row["quarter_number"]),
            duration_minutes=int(row.get("duration_minutes") or DEFAULT_QUARTER_MINUTES),
            home_score=int(row.get("home_score") or 0),
            away_score=int(row.get("away_score") or 0),
            quarter_records=None if records is None else [parse_record(r) for r in records],
            substitutions=[parse_substitution(s) for s in row.get("substitutions") or []],
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ParseError(f"Invalid quarter row: {e}") from e


def parse_match(row: dict[str, Any]) -> Match:
    """
    Parse a match row with its nested quarters.

    Quarters are ordered by quarter number.

    Raises:
        ParseError: If a required field is missing or invalid.
    """
    quarters = row.get("quarters")
    try:
        parsed_quarters = None
        if quarters is not None:
            parsed_quarters = sorted(
                (parse_quarter(q) for q in quarters),
                key=lambda q: q.quarter_number,
            )
        return Match(
            id=row["id"],
            team_id=row["team_id"],
            opponent=row["opponent"],
            match_date=date.fromisoformat(str(row["match_date"])[:10]),
            location=row.get("location"),
            home_score=int(row.get("home_score") or 0),
            away_score=int(row.get("away_score") or 0),
            notes=row.get("notes"),
            quarters=parsed_quarters,
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ParseError(f"Invalid match row: {e}") from e


def parse_member(row: dict[str, Any]) -> TeamMember:
    try:
        return TeamMember(
            id=row["id"],
            team_id=row["team_id"],
            user_id=row["user_id"],
            role=Role(row.get("role", "member")),
            can_edit_players=bool(row.get("can_edit_players")),
            can_edit_matches=bool(row.get("can_edit_matches")),
            can_edit_quarters=bool(row.get("can_edit_quarters")),
        )
    except (KeyError, ValueError) as e:
        raise ParseError(f"Invalid team member row: {e}") from e


def parse_team(row: dict[str, Any]) -> Team:
    try:
        return Team(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row.get("description"),
        )
    except KeyError as e:
        raise ParseError(f"Invalid team row: {e}") from e
