"""Quarter editing: save rows, substitutions, scores, media paths and attendance."""

from typing import Any, Optional

from ..models.match import Match, Quarter, QuarterRecord
from .formation import FieldPlayer
from .results import EditResult


def build_quarter_records(quarter_id: str, field_players: list[FieldPlayer]) -> list[dict[str, Any]]:
    """
    Build the rows that replace a quarter's records on save.

    Saving deletes every existing record of the quarter and inserts these,
    so the rows carry no record ids. Blank notes and empty media lists are
    stored as null.

    Args:
        quarter_id: The quarter being saved.
        field_players: Players on the pitch.

    Returns:
        One row per player, ready for insertion.
    """
    return [
        {
            "quarter_id": quarter_id,
            "player_id": fp.player_id,
            "position_type": fp.position_type.value,
            "position_x": fp.x,
            "position_y": fp.y,
            "rating": fp.rating,
            "goals": fp.goals,
            "assists": fp.assists,
            "clean_sheet": fp.clean_sheet,
            "contribution": fp.contribution,
            "praise_text": fp.praise_text.strip() or None,
            "improvement_text": fp.improvement_text.strip() or None,
            "highlight_text": fp.highlight_text.strip() or None,
            "media_urls": list(fp.media_urls) or None,
        }
        for fp in field_players
    ]


def records_from_field(quarter_id: str, field_players: list[FieldPlayer]) -> list[QuarterRecord]:
    """
    Build in-memory records for a quarter from the edited pitch.

    Used when there is no backend to round-trip through; record ids are
    derived from the quarter and player.
    """
    return [
        QuarterRecord(
            id=fp.record_id or f"{quarter_id}-{fp.player_id}",
            quarter_id=quarter_id,
            player_id=fp.player_id,
            position_type=fp.position_type,
            position_x=fp.x,
            position_y=fp.y,
            rating=fp.rating,
            goals=fp.goals,
            assists=fp.assists,
            clean_sheet=fp.clean_sheet,
            contribution=fp.contribution,
            praise_text=fp.praise_text.strip() or None,
            improvement_text=fp.improvement_text.strip() or None,
            highlight_text=fp.highlight_text.strip() or None,
            media_urls=list(fp.media_urls) or None,
            player=fp.player,
        )
        for fp in field_players
    ]


def _players_on_field_at(quarter: Quarter, minute: int) -> set[str]:
    """Players on the pitch just before the given minute."""
    on_field = set(quarter.player_ids)
    for sub in sorted(quarter.substitutions, key=lambda s: s.minute):
        if sub.minute > minute:
            break
        on_field.discard(sub.player_out_id)
        on_field.add(sub.player_in_id)
    return on_field


def validate_substitution(
    quarter: Quarter,
    player_out_id: str,
    player_in_id: str,
    minute: int,
) -> EditResult:
    """
    Check whether a substitution can be recorded in a quarter.

    Args:
        quarter: The quarter, with records and earlier substitutions loaded.
        player_out_id: Player leaving the pitch.
        player_in_id: Player coming on.
        minute: Minute of the quarter the swap happens at.

    Returns:
        EditResult describing the first problem found.
    """
    if player_out_id == player_in_id:
        return EditResult.fail("SAME_PLAYER", "A player cannot replace themselves")
    if minute < 0:
        return EditResult.fail("NEGATIVE_MINUTE", "Minute cannot be negative")
    if minute > quarter.duration_minutes:
        return EditResult.fail(
            "MINUTE_OUT_OF_RANGE",
            f"Minute {minute} is past the end of the quarter ({quarter.duration_minutes})",
        )

    on_field = _players_on_field_at(quarter, minute)
    if player_out_id not in on_field:
        return EditResult.fail("PLAYER_NOT_ON_FIELD", f"Player {player_out_id} is not on the pitch")
    if player_in_id in on_field:
        return EditResult.fail(
            "PLAYER_ALREADY_ON_FIELD", f"Player {player_in_id} is already on the pitch"
        )
    return EditResult.ok()


def media_path(
    match_id: str,
    quarter_id: str,
    player_id: str,
    filename: str,
    timestamp_ms: int,
) -> str:
    """
    Storage object path for a player's uploaded media.

    The original file extension is kept; files without one get "bin".
    """
    _, dot, ext = filename.rpartition(".")
    extension = ext.lower() if dot and ext else "bin"
    return f"{match_id}/{quarter_id}/{player_id}/{timestamp_ms}.{extension}"


def attendance(match: Match) -> list[str]:
    """Ids of players who took part: recorded in a quarter or subbed on."""
    seen: dict[str, None] = {}
    for quarter in match.quarters or []:
        for record in quarter.records:
            seen.setdefault(record.player_id, None)
        for sub in quarter.substitutions:
            seen.setdefault(sub.player_in_id, None)
    return list(seen)


def match_totals(quarters: Optional[list[Quarter]]) -> tuple[int, int]:
    """Match score as the sum of the quarter scores, (home, away)."""
    quarters = quarters or []
    return (
        sum(q.home_score for q in quarters),
        sum(q.away_score for q in quarters),
    )
