"""Sample team data used when no backend is configured."""

from datetime import date
from typing import Optional

from ..models import (
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


SAMPLE_TEAM_ID = "sample-team"
SAMPLE_MATCH_ID = "sample-match"
SAMPLE_USER_ID = "sample-coach"

# Matches are created with this many empty quarters.
QUARTERS_PER_MATCH = 4


def create_sample_players() -> list[Player]:
    """
    Create a sample roster for development.

    Returns:
        Eight players covering every position.
    """
    roster = [
        ("p-kim", "김민수", 10, PositionType.MF),
        ("p-park", "박지성", 7, PositionType.FW),
        ("p-lee", "이영표", 3, PositionType.DF),
        ("p-choi", "최진철", 4, PositionType.DF),
        ("p-lee-w", "이운재", 1, PositionType.GK),
        ("p-ahn", "안정환", 9, PositionType.FW),
        ("p-song", "송종국", 22, PositionType.DF),
        ("p-yoo", "유상철", 6, PositionType.MF),
    ]
    return [
        Player(
            id=player_id,
            team_id=SAMPLE_TEAM_ID,
            name=name,
            number=number,
            default_position=position,
        )
        for player_id, name, number, position in roster
    ]


def _record(
    quarter_id: str,
    player: Player,
    x: float,
    y: float,
    rating: Optional[float],
    goals: int = 0,
    assists: int = 0,
    clean_sheet: bool = False,
    contribution: float = 0.0,
) -> QuarterRecord:
    return QuarterRecord(
        id=f"{quarter_id}-{player.id}",
        quarter_id=quarter_id,
        player_id=player.id,
        position_type=player.default_position,
        position_x=x,
        position_y=y,
        rating=rating,
        goals=goals,
        assists=assists,
        clean_sheet=clean_sheet,
        contribution=contribution,
        player=player,
    )


def create_sample_match() -> Match:
    """
    Create a sample two-quarter match for development.

    The second quarter includes an unrated player and a substitution.
    """
    players = {p.id: p for p in create_sample_players()}
    q1, q2 = f"{SAMPLE_MATCH_ID}-q1", f"{SAMPLE_MATCH_ID}-q2"

    return Match(
        id=SAMPLE_MATCH_ID,
        team_id=SAMPLE_TEAM_ID,
        opponent="FC Seoul",
        match_date=date(2024, 6, 15),
        location="잠실 운동장",
        home_score=3,
        away_score=1,
        quarters=[
            Quarter(
                id=q1,
                match_id=SAMPLE_MATCH_ID,
                quarter_number=1,
                home_score=2,
                away_score=0,
                quarter_records=[
                    _record(q1, players["p-lee-w"], 8, 50, 7.5, clean_sheet=True, contribution=1),
                    _record(q1, players["p-lee"], 25, 30, 7.0, contribution=1),
                    _record(q1, players["p-choi"], 25, 70, 6.5, contribution=1),
                    _record(q1, players["p-kim"], 50, 50, 8.5, goals=1, assists=1, contribution=1),
                    _record(q1, players["p-park"], 75, 50, 8.0, goals=1, contribution=1),
                ],
            ),
            Quarter(
                id=q2,
                match_id=SAMPLE_MATCH_ID,
                quarter_number=2,
                home_score=1,
                away_score=1,
                quarter_records=[
                    _record(q2, players["p-lee-w"], 8, 50, 6.0, contribution=1),
                    _record(q2, players["p-song"], 25, 30, None),
                    _record(q2, players["p-choi"], 25, 70, 7.0, contribution=1),
                    _record(q2, players["p-kim"], 50, 50, 9.0, assists=1, contribution=1),
                    _record(q2, players["p-ahn"], 75, 50, 7.5, goals=1, contribution=1),
                ],
                substitutions=[
                    Substitution(
                        id=f"{q2}-sub-1",
                        quarter_id=q2,
                        player_out_id="p-choi",
                        player_in_id="p-yoo",
                        minute=15,
                    ),
                ],
            ),
        ],
    )


def create_blank_match(
    match_id: str,
    team_id: str,
    opponent: str,
    match_date: date,
    location: Optional[str] = None,
) -> Match:
    """Create a match with empty quarters, as the backend does for new matches."""
    return Match(
        id=match_id,
        team_id=team_id,
        opponent=opponent.strip(),
        match_date=match_date,
        location=(location or "").strip() or None,
        quarters=[
            Quarter(id=f"{match_id}-q{n}", match_id=match_id, quarter_number=n, quarter_records=[])
            for n in range(1, QUARTERS_PER_MATCH + 1)
        ],
    )


def create_sample_team() -> Team:
    return Team(id=SAMPLE_TEAM_ID, user_id=SAMPLE_USER_ID, name="PitchNote FC")


def create_sample_members() -> list[TeamMember]:
    """The sample coach plus two members with different edit flags."""
    return [
        TeamMember(id="tm-coach", team_id=SAMPLE_TEAM_ID, user_id=SAMPLE_USER_ID, role=Role.COACH),
        TeamMember(
            id="tm-recorder",
            team_id=SAMPLE_TEAM_ID,
            user_id="sample-recorder",
            can_edit_quarters=True,
        ),
        TeamMember(id="tm-player", team_id=SAMPLE_TEAM_ID, user_id="sample-player"),
    ]
