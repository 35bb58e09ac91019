"""Player data model for PitchNote."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PositionType(Enum):
    """Position category on the pitch."""

    GK = "GK"
    DF = "DF"
    MF = "MF"
    FW = "FW"

    @property
    def label(self) -> str:
        """Korean display label."""
        return POSITION_LABELS[self]

    @property
    def color(self) -> str:
        """Marker colour used on the pitch diagram."""
        return POSITION_COLORS[self]


POSITION_LABELS = {
    PositionType.GK: "골키퍼",
    PositionType.DF: "수비수",
    PositionType.MF: "미드필더",
    PositionType.FW: "공격수",
}

POSITION_COLORS = {
    PositionType.GK: "#F59E0B",
    PositionType.DF: "#3B82F6",
    PositionType.MF: "#10B981",
    PositionType.FW: "#EF4444",
}


@dataclass
class Player:
    """
    A roster entry.

    Attributes:
        id: Unique identifier for the player.
        team_id: Team the player belongs to.
        name: Display name.
        number: Jersey number, if assigned.
        default_position: Position used when the player is first put on the pitch.
    """

    id: str
    team_id: str
    name: str
    number: Optional[int] = None
    default_position: PositionType = PositionType.MF

    def __post_init__(self) -> None:
        """Validate player data after initialization."""
        if not self.name.strip():
            raise ValueError("name cannot be empty")
        if self.number is not None and self.number < 0:
            raise ValueError("number cannot be negative")

    @property
    def display_name(self) -> str:
        """Name prefixed with the jersey number when there is one."""
        if self.number is None:
            return self.name
        return f"{self.number}. {self.name}"
