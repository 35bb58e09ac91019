"""Pitch layout for the quarter editor: auto-placement, presets and dragging."""

from dataclasses import dataclass, field, replace
from typing import Optional

from ..models.match import QuarterRecord
from ..models.player import Player, PositionType
from .results import EditError


# Coordinates are percentages of the pitch. x=0 is the team's own goal line.
MIN_DRAG_COORD = 5.0
MAX_DRAG_COORD = 95.0
MIN_COORD = 0.0
MAX_COORD = 100.0

# Surplus players beyond a preset's slots step diagonally by this much.
SURPLUS_OFFSET = 5.0


@dataclass(frozen=True)
class PositionBand:
    """Where newly added players of one position start out."""

    x: float
    y_start: float
    y_span: float


POSITION_BANDS: dict[PositionType, PositionBand] = {
    PositionType.GK: PositionBand(x=8.0, y_start=35.0, y_span=30.0),
    PositionType.DF: PositionBand(x=25.0, y_start=20.0, y_span=60.0),
    PositionType.MF: PositionBand(x=50.0, y_start=20.0, y_span=60.0),
    PositionType.FW: PositionBand(x=75.0, y_start=30.0, y_span=40.0),
}

Slot = tuple[float, float]

_BACK_FOUR: list[Slot] = [(25, 15), (25, 38), (25, 62), (25, 85)]
_BACK_THREE: list[Slot] = [(25, 25), (25, 50), (25, 75)]
_MID_FOUR: list[Slot] = [(50, 15), (50, 38), (50, 62), (50, 85)]
_MID_THREE: list[Slot] = [(50, 25), (50, 50), (50, 75)]
_FRONT_TWO: list[Slot] = [(75, 35), (75, 65)]
_FRONT_THREE: list[Slot] = [(75, 20), (78, 50), (75, 80)]
_KEEPER: list[Slot] = [(8, 50)]

FORMATIONS: dict[str, dict[PositionType, list[Slot]]] = {
    "4-4-2": {
        PositionType.GK: _KEEPER,
        PositionType.DF: _BACK_FOUR,
        PositionType.MF: _MID_FOUR,
        PositionType.FW: _FRONT_TWO,
    },
    "4-3-3": {
        PositionType.GK: _KEEPER,
        PositionType.DF: _BACK_FOUR,
        PositionType.MF: _MID_THREE,
        PositionType.FW: _FRONT_THREE,
    },
    "4-2-3-1": {
        PositionType.GK: _KEEPER,
        PositionType.DF: _BACK_FOUR,
        PositionType.MF: [(42, 35), (42, 65), (60, 20), (60, 50), (60, 80)],
        PositionType.FW: [(80, 50)],
    },
    "3-5-2": {
        PositionType.GK: _KEEPER,
        PositionType.DF: _BACK_THREE,
        PositionType.MF: [(50, 10), (45, 30), (50, 50), (45, 70), (50, 90)],
        PositionType.FW: _FRONT_TWO,
    },
    "3-4-3": {
        PositionType.GK: _KEEPER,
        PositionType.DF: _BACK_THREE,
        PositionType.MF: _MID_FOUR,
        PositionType.FW: _FRONT_THREE,
    },
    "5-3-2": {
        PositionType.GK: _KEEPER,
        PositionType.DF: [(25, 10), (22, 30), (20, 50), (22, 70), (25, 90)],
        PositionType.MF: _MID_THREE,
        PositionType.FW: _FRONT_TWO,
    },
}


@dataclass
class FieldPlayer:
    """
    A player placed on the pitch while a quarter is being edited.

    Attributes:
        player: The roster entry.
        position_type: Position played in this quarter.
        x: Horizontal pitch coordinate (0-100).
        y: Vertical pitch coordinate (0-100).
        record_id: Id of the stored record, None for players added in this edit.
    """

    player: Player
    position_type: PositionType
    x: float = 50.0
    y: float = 50.0
    rating: Optional[float] = None
    goals: int = 0
    assists: int = 0
    clean_sheet: bool = False
    contribution: float = 0.0
    praise_text: str = ""
    improvement_text: str = ""
    highlight_text: str = ""
    media_urls: list[str] = field(default_factory=list)
    record_id: Optional[str] = None

    @property
    def player_id(self) -> str:
        return self.player.id

    @classmethod
    def from_record(cls, record: QuarterRecord) -> "FieldPlayer":
        """Rebuild a field player from a stored record with an embedded player."""
        if record.player is None:
            raise ValueError(f"Record {record.id} has no player attached")
        return cls(
            player=record.player,
            position_type=record.position_type,
            x=record.position_x,
            y=record.position_y,
            rating=record.rating,
            goals=record.goals,
            assists=record.assists,
            clean_sheet=record.clean_sheet,
            contribution=record.contribution,
            praise_text=record.praise_text or "",
            improvement_text=record.improvement_text or "",
            highlight_text=record.highlight_text or "",
            media_urls=list(record.media_urls or []),
            record_id=record.id,
        )


@dataclass(frozen=True)
class Placement:
    """Starting point for a newly added player."""

    player: Player
    x: float
    y: float


@dataclass
class FormationResult:
    """
    Result of applying a formation preset.

    Attributes:
        applied: Whether the preset was applied.
        field_players: Updated players, or the unchanged input when refused.
        errors: Why the preset was refused (empty if applied).
    """

    applied: bool
    field_players: list[FieldPlayer]
    errors: list[EditError] = field(default_factory=list)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def place_new_players(players: list[Player]) -> list[Placement]:
    """
    Compute starting coordinates for players being added to the pitch.

    Players are grouped by default position. Each group sits on its own
    vertical line and is spread evenly over the position's band; a group
    of one is centred at y=50.

    Args:
        players: Players to add, in the order they were picked.

    Returns:
        One Placement per player, in input order.
    """
    totals: dict[PositionType, int] = {}
    for player in players:
        totals[player.default_position] = totals.get(player.default_position, 0) + 1

    seen: dict[PositionType, int] = {}
    placements: list[Placement] = []
    for player in players:
        position = player.default_position
        band = POSITION_BANDS[position]
        index = seen.get(position, 0)
        seen[position] = index + 1
        total = totals[position]

        if total == 1:
            y = 50.0
        else:
            y = band.y_start + index * (band.y_span / (total - 1))

        placements.append(Placement(player=player, x=band.x, y=y))

    return placements


def add_players_to_field(
    field_players: list[FieldPlayer],
    players: list[Player],
) -> list[FieldPlayer]:
    """
    Return a new pitch list with the given players auto-placed at the end.

    Players already on the pitch are ignored.
    """
    on_field = {fp.player_id for fp in field_players}
    to_add = [p for p in players if p.id not in on_field]
    added = [
        FieldPlayer(
            player=placement.player,
            position_type=placement.player.default_position,
            x=placement.x,
            y=placement.y,
        )
        for placement in place_new_players(to_add)
    ]
    return [*field_players, *added]


def remove_player_from_field(
    field_players: list[FieldPlayer],
    player_id: str,
) -> list[FieldPlayer]:
    return [fp for fp in field_players if fp.player_id != player_id]


def available_players(roster: list[Player], field_players: list[FieldPlayer]) -> list[Player]:
    """
    Roster players not yet on the pitch, ordered by jersey number.

    Players without a number come last.
    """
    on_field = {fp.player_id for fp in field_players}
    remaining = [p for p in roster if p.id not in on_field]
    return sorted(remaining, key=lambda p: (p.number is None, p.number or 0))


def apply_formation(field_players: list[FieldPlayer], formation_name: str) -> FormationResult:
    """
    Move players onto the slots of a named formation.

    Players keep their position type and are assigned slots in their
    current order within that position. Players beyond the preset's slots
    are stepped diagonally away from the last slot. Positions the preset
    does not list keep their coordinates.

    Args:
        field_players: Players currently on the pitch.
        formation_name: Key of FORMATIONS, e.g. "4-4-2".

    Returns:
        FormationResult. Refused with EMPTY_FIELD when nobody is on the
        pitch, or UNKNOWN_FORMATION for a name not in FORMATIONS.
    """
    if not field_players:
        return FormationResult(
            applied=False,
            field_players=[],
            errors=[EditError(code="EMPTY_FIELD", message="Add players to the pitch first")],
        )

    preset = FORMATIONS.get(formation_name)
    if preset is None:
        return FormationResult(
            applied=False,
            field_players=list(field_players),
            errors=[
                EditError(
                    code="UNKNOWN_FORMATION",
                    message=f"Unknown formation: {formation_name}",
                )
            ],
        )

    seen: dict[PositionType, int] = {}
    updated: list[FieldPlayer] = []
    for fp in field_players:
        slots = preset.get(fp.position_type)
        if not slots:
            updated.append(fp)
            continue

        index = seen.get(fp.position_type, 0)
        seen[fp.position_type] = index + 1

        if index < len(slots):
            x, y = slots[index]
        else:
            extra = index - len(slots) + 1
            last_x, last_y = slots[-1]
            x = _clamp(last_x + extra * SURPLUS_OFFSET, MIN_COORD, MAX_COORD)
            y = _clamp(last_y + extra * SURPLUS_OFFSET, MIN_COORD, MAX_COORD)

        updated.append(replace(fp, x=float(x), y=float(y)))

    return FormationResult(applied=True, field_players=updated)


def clamp_position(x: float, y: float) -> tuple[float, float]:
    """Clamp a dragged position to the playable area of the pitch."""
    return (
        _clamp(x, MIN_DRAG_COORD, MAX_DRAG_COORD),
        _clamp(y, MIN_DRAG_COORD, MAX_DRAG_COORD),
    )


def move_player(
    field_players: list[FieldPlayer],
    player_id: str,
    x: float,
    y: float,
) -> list[FieldPlayer]:
    """Return a new pitch list with one player moved, clamped to [5, 95]."""
    x, y = clamp_position(x, y)
    return [
        replace(fp, x=x, y=y) if fp.player_id == player_id else fp
        for fp in field_players
    ]
