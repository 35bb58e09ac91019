"""Per-player match and season statistics, and MVP selection."""

from dataclasses import dataclass
from typing import Optional

from ..models.match import Match, QuarterRecord
from ..models.player import Player


@dataclass(frozen=True)
class PlayerStats:
    """
    Statistics for one player across all quarters of a match.

    Attributes:
        player_id: The player's unique identifier.
        player_name: Display name at the time of the match.
        player_number: Jersey number, if any.
        total_rating: Sum of all non-null quarter ratings.
        rating_count: Number of quarters with a non-null rating.
        average_rating: total_rating / rating_count, or 0 when unrated.
        total_goals: Goals over all quarters.
        total_assists: Assists over all quarters.
        clean_sheets: Number of quarters flagged as a clean sheet.
        avg_contribution: Contribution sum divided by rating_count. When the
            player has no rating the raw sum is reported.
    """

    player_id: str
    player_name: str
    player_number: Optional[int]
    total_rating: float
    rating_count: int
    average_rating: float
    total_goals: int
    total_assists: int
    clean_sheets: int
    avg_contribution: float

    @property
    def is_rated(self) -> bool:
        return self.rating_count > 0


@dataclass
class _StatsAccumulator:
    """Running totals for one player while folding quarter records."""

    player_id: str
    player_name: str
    player_number: Optional[int]
    total_rating: float = 0.0
    rating_count: int = 0
    total_goals: int = 0
    total_assists: int = 0
    clean_sheets: int = 0
    contribution_sum: float = 0.0


def _accumulate(match: Match) -> dict[str, _StatsAccumulator]:
    """
    Fold every attributable quarter record of a match into per-player totals.

    Records without an embedded player are skipped. The returned mapping
    keeps the order in which players were first seen.
    """
    totals: dict[str, _StatsAccumulator] = {}

    for quarter in match.quarters or []:
        for record in quarter.quarter_records or []:
            if record.player is None:
                continue

            acc = totals.get(record.player_id)
            if acc is None:
                acc = _StatsAccumulator(
                    player_id=record.player_id,
                    player_name=record.player.name,
                    player_number=record.player.number,
                )
                totals[record.player_id] = acc

            if record.rating is not None:
                acc.total_rating += record.rating
                acc.rating_count += 1
            acc.total_goals += record.goals
            acc.total_assists += record.assists
            if record.clean_sheet:
                acc.clean_sheets += 1
            acc.contribution_sum += record.contribution

    return totals


def _finalize(acc: _StatsAccumulator) -> PlayerStats:
    """Derive the immutable statistics row from a player's running totals."""
    average_rating = 0.0
    avg_contribution = acc.contribution_sum

    # Contribution shares the rating denominator.
    if acc.rating_count > 0:
        average_rating = acc.total_rating / acc.rating_count
        avg_contribution = acc.contribution_sum / acc.rating_count

    return PlayerStats(
        player_id=acc.player_id,
        player_name=acc.player_name,
        player_number=acc.player_number,
        total_rating=acc.total_rating,
        rating_count=acc.rating_count,
        average_rating=average_rating,
        total_goals=acc.total_goals,
        total_assists=acc.total_assists,
        clean_sheets=acc.clean_sheets,
        avg_contribution=avg_contribution,
    )


def get_player_stats_from_match(match: Match) -> list[PlayerStats]:
    """
    Aggregate statistics for every player who appears in a match.

    Unrated players are included with an average rating of 0.

    Args:
        match: Match with its quarters and records loaded.

    Returns:
        List of PlayerStats sorted by average rating, highest first.
        Empty if the match has no quarters.
    """
    stats = [_finalize(acc) for acc in _accumulate(match).values()]
    stats.sort(key=lambda s: s.average_rating, reverse=True)
    return stats


def calculate_mvp(match: Match) -> Optional[PlayerStats]:
    """
    Pick the player with the highest average rating.

    Only players with at least one rating are considered. On an exact tie
    the player seen first keeps the title.

    Args:
        match: Match with its quarters and records loaded.

    Returns:
        The MVP's statistics, or None if nobody was rated.
    """
    mvp: Optional[PlayerStats] = None
    highest_average = 0.0

    for acc in _accumulate(match).values():
        if acc.rating_count == 0:
            continue
        stats = _finalize(acc)
        if stats.average_rating > highest_average:
            highest_average = stats.average_rating
            mvp = stats

    return mvp


def get_player_stats(match: Match, player_id: str) -> Optional[PlayerStats]:
    """Get the aggregated statistics of a single player in a match."""
    return next(
        (s for s in get_player_stats_from_match(match) if s.player_id == player_id),
        None,
    )


@dataclass(frozen=True)
class SeasonStats:
    """
    A roster player's totals over every stored quarter record of the team.

    Attributes:
        player: The roster entry.
        games: Number of quarter records, rated or not.
        goals: Goals over all records.
        assists: Assists over all records.
        clean_sheets: Records flagged as a clean sheet.
        average_rating: Mean of the non-null ratings, None when never rated.
    """

    player: Player
    games: int
    goals: int
    assists: int
    clean_sheets: int
    average_rating: Optional[float]


def season_stats(players: list[Player], records: list[QuarterRecord]) -> list[SeasonStats]:
    """
    Summarise every quarter record of each roster player.

    Records of players not on the roster are ignored. Players without
    records get zero totals.

    Args:
        players: The team roster.
        records: Quarter records across all of the team's matches.

    Returns:
        One SeasonStats per player, in roster order.
    """
    by_player: dict[str, list[QuarterRecord]] = {p.id: [] for p in players}
    for record in records:
        if record.player_id in by_player:
            by_player[record.player_id].append(record)

    result = []
    for player in players:
        player_records = by_player[player.id]
        ratings = [r.rating for r in player_records if r.rating is not None]
        result.append(
            SeasonStats(
                player=player,
                games=len(player_records),
                goals=sum(r.goals for r in player_records),
                assists=sum(r.assists for r in player_records),
                clean_sheets=sum(1 for r in player_records if r.clean_sheet),
                average_rating=sum(ratings) / len(ratings) if ratings else None,
            )
        )
    return result
