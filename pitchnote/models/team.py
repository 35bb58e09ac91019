"""Team, membership and edit permission models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(Enum):
    """Member role within a team."""

    COACH = "coach"
    MEMBER = "member"

    @property
    def label(self) -> str:
        return "감독" if self is Role.COACH else "팀원"


@dataclass
class Team:
    """
    A team managed in PitchNote.

    Attributes:
        id: Unique identifier for the team.
        user_id: The owner's user id.
        name: Team name.
        description: Optional free text.
    """

    id: str
    user_id: str
    name: str
    description: Optional[str] = None


@dataclass
class TeamMember:
    """A user's membership in a team with per-area edit flags."""

    id: str
    team_id: str
    user_id: str
    role: Role = Role.MEMBER
    can_edit_players: bool = False
    can_edit_matches: bool = False
    can_edit_quarters: bool = False

    @property
    def is_coach(self) -> bool:
        return self.role == Role.COACH


@dataclass(frozen=True)
class Permissions:
    """
    Effective edit permissions for the current user.

    A coach can edit everything regardless of the stored flags.
    """

    role: Optional[Role] = None
    players: bool = False
    matches: bool = False
    quarters: bool = False

    @classmethod
    def for_member(cls, member: Optional[TeamMember]) -> "Permissions":
        """Build permissions from a membership row (None means not a member)."""
        if member is None:
            return cls()
        return cls(
            role=member.role,
            players=member.can_edit_players,
            matches=member.can_edit_matches,
            quarters=member.can_edit_quarters,
        )

    @classmethod
    def for_team_owner(cls) -> "Permissions":
        """Owners without a membership row are treated as coach."""
        return cls(role=Role.COACH)

    @classmethod
    def for_user(cls, team: Team, member: Optional[TeamMember], user_id: str) -> "Permissions":
        """Resolve permissions for a user; the team owner is always coach."""
        if team.user_id == user_id:
            return cls.for_team_owner()
        return cls.for_member(member)

    @property
    def is_coach(self) -> bool:
        return self.role == Role.COACH

    @property
    def can_edit_players(self) -> bool:
        return self.is_coach or self.players

    @property
    def can_edit_matches(self) -> bool:
        return self.is_coach or self.matches

    @property
    def can_edit_quarters(self) -> bool:
        return self.is_coach or self.quarters

    @property
    def can_manage_members(self) -> bool:
        """Only coaches change other members' flags."""
        return self.is_coach

    def allows(self, area: str) -> bool:
        """
        Check whether the user may write to an edit area.

        Args:
            area: One of EDIT_AREAS.

        Raises:
            ValueError: If the area is unknown.
        """
        checks = {
            "players": self.can_edit_players,
            "matches": self.can_edit_matches,
            "quarters": self.can_edit_quarters,
            "members": self.can_manage_members,
        }
        if area not in checks:
            raise ValueError(f"Unknown edit area: {area}")
        return checks[area]


EDIT_AREAS = ("players", "matches", "quarters", "members")
