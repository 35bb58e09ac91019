"""Match, quarter and per-quarter player record models."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .player import Player, PositionType


MIN_RATING = 0.0
MAX_RATING = 10.0
DEFAULT_QUARTER_MINUTES = 25


@dataclass
class QuarterRecord:
    """
    One player's participation entry for one quarter.

    Pitch coordinates are percentages: x runs from the team's own goal
    line (0) to the opponent's (100), y from top (0) to bottom (100).
    A rating of None means the player was not rated, which is different
    from a rating of zero.
    """

    id: str
    quarter_id: str
    player_id: str
    position_type: PositionType
    position_x: float = 50.0
    position_y: float = 50.0
    rating: Optional[float] = None
    goals: int = 0
    assists: int = 0
    clean_sheet: bool = False
    contribution: float = 0.0
    praise_text: Optional[str] = None
    improvement_text: Optional[str] = None
    highlight_text: Optional[str] = None
    media_urls: Optional[list[str]] = None
    player: Optional[Player] = None

    def __post_init__(self) -> None:
        """Validate record values."""
        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING:g} and {MAX_RATING:g}")
        for field_name in ("goals", "assists", "contribution"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} cannot be negative")
        for field_name in ("position_x", "position_y"):
            value = getattr(self, field_name)
            if value < 0 or value > 100:
                raise ValueError(f"{field_name} must be between 0 and 100")

    @property
    def is_rated(self) -> bool:
        """Check if the record carries a rating."""
        return self.rating is not None


@dataclass
class Substitution:
    """A player swap within a quarter."""

    id: str
    quarter_id: str
    player_out_id: str
    player_in_id: str
    minute: int = 0

    def __post_init__(self) -> None:
        if self.player_out_id == self.player_in_id:
            raise ValueError("player_out_id and player_in_id must differ")
        if self.minute < 0:
            raise ValueError("minute cannot be negative")


@dataclass
class Quarter:
    """
    One segment of a match.

    Attributes:
        id: Unique identifier for the quarter.
        match_id: Parent match.
        quarter_number: 1-based position within the match.
        duration_minutes: Length of the quarter.
        home_score: Goals scored by the team in this quarter.
        away_score: Goals conceded in this quarter.
        quarter_records: Player records, None when not loaded.
        substitutions: Player swaps made during the quarter.
    """

    id: str
    match_id: str
    quarter_number: int
    duration_minutes: int = DEFAULT_QUARTER_MINUTES
    home_score: int = 0
    away_score: int = 0
    quarter_records: Optional[list[QuarterRecord]] = None
    substitutions: list[Substitution] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate quarter data."""
        if self.quarter_number < 1:
            raise ValueError("quarter_number must be positive")
        if self.duration_minutes < 0:
            raise ValueError("duration_minutes cannot be negative")
        if self.home_score < 0 or self.away_score < 0:
            raise ValueError("quarter scores cannot be negative")

    @property
    def records(self) -> list[QuarterRecord]:
        """Records of the quarter, empty when none were loaded."""
        return self.quarter_records or []

    @property
    def player_ids(self) -> set[str]:
        """Players with a record in this quarter."""
        return {r.player_id for r in self.records}


@dataclass
class Match:
    """
    Represents one fixture.

    Attributes:
        id: Unique identifier for the match.
        team_id: Team the match belongs to.
        opponent: Opponent name.
        match_date: Date of the match.
        location: Where the match was played.
        home_score: Goals scored by the team.
        away_score: Goals scored by the opponent.
        notes: Free-text notes.
        quarters: Nested quarters, None when not loaded.
    """

    id: str
    team_id: str
    opponent: str
    match_date: date
    location: Optional[str] = None
    home_score: int = 0
    away_score: int = 0
    notes: Optional[str] = None
    quarters: Optional[list[Quarter]] = None

    def __post_init__(self) -> None:
        """Validate match data."""
        if self.home_score < 0:
            raise ValueError("home_score cannot be negative")
        if self.away_score < 0:
            raise ValueError("away_score cannot be negative")

    @property
    def result(self) -> str:
        """Outcome from the team's point of view: win, draw or loss."""
        if self.home_score > self.away_score:
            return "win"
        if self.home_score < self.away_score:
            return "loss"
        return "draw"

    def get_quarter(self, quarter_number: int) -> Optional[Quarter]:
        """Get a quarter by its number."""
        return next(
            (q for q in self.quarters or [] if q.quarter_number == quarter_number),
            None,
        )
