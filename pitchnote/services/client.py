"""REST client for the hosted database, auth and storage service."""

import logging
from datetime import date
from typing import Any, Optional

import requests

from ..config import Settings
from ..models import Match, Player, PositionType, QuarterRecord, Team, TeamMember
from .errors import AuthError, FetchError, NotFoundError, UploadError
from .loader import parse_match, parse_member, parse_player, parse_record, parse_team


logger = logging.getLogger(__name__)

# Nested select returning a match with quarters, records and the record's player.
MATCH_SELECT = "*,quarters(*,quarter_records(*,player:players(*)),substitutions(*))"


def _error_message(response: requests.Response) -> str:
    """Extract the provider's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "msg"):
            if body.get(key):
                return str(body[key])
    return response.text or f"HTTP {response.status_code}"


class SupabaseClient:
    """
    Thin client over the PostgREST, auth and storage endpoints.

    Table requests use the anon key unless an access token is given;
    storage uploads use the service role key after the caller's token
    has been verified.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Connection settings.
            session: Optional session to reuse (tests pass a mock).
        """
        if not settings.is_configured:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        self.settings = settings
        self.access_token: Optional[str] = None

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": settings.anon_key,
                "User-Agent": "PitchNote/0.1",
            }
        )

    def _headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        token = self.access_token or self.settings.anon_key
        headers = {"Authorization": f"Bearer {token}"}
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json_body: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        Send a table request.

        Raises:
            AuthError: On 401/403 responses.
            FetchError: On any other failure.
        """
        url = f"{self.settings.rest_url}/{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers(headers),
                timeout=self.settings.request_timeout,
            )
        except requests.exceptions.Timeout:
            raise FetchError(f"Request timed out: {path}")
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request failed: {path} - {e}")

        if response.status_code in (401, 403):
            raise AuthError(_error_message(response))
        if not response.ok:
            raise FetchError(f"HTTP error {response.status_code}: {_error_message(response)}")
        return response

    def _rows(self, response: requests.Response, table: str) -> list[dict[str, Any]]:
        """
        Decode a table response body into rows.

        Raises:
            FetchError: If the body is not a JSON list.
        """
        try:
            rows = response.json()
        except ValueError:
            raise FetchError(f"Invalid JSON response for {table}")
        if not isinstance(rows, list):
            raise FetchError(f"Unexpected response for {table}")
        return rows

    def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        return self._rows(self._request("GET", table, params=params), table)

    def _insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        response = self._request(
            "POST",
            table,
            json_body=row,
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(response, table)
        if not rows:
            raise FetchError(f"Insert into {table} returned no row")
        return rows[0]

    def _update(self, table: str, row_id: str, values: dict[str, Any]) -> None:
        self._request(
            "PATCH",
            table,
            params={"id": f"eq.{row_id}"},
            json_body=values,
            headers={"Prefer": "return=minimal"},
        )

    def _delete(self, table: str, row_id: str) -> None:
        self._request("DELETE", table, params={"id": f"eq.{row_id}"})

    def fetch_match(self, match_id: str) -> Match:
        """
        Fetch a match with its full quarter, record and player graph.

        Raises:
            NotFoundError: If the match does not exist or is not visible.
        """
        rows = self._select("matches", {"select": MATCH_SELECT, "id": f"eq.{match_id}"})
        if not rows:
            raise NotFoundError(f"Match not found: {match_id}")
        return parse_match(rows[0])

    def fetch_matches(self, team_id: str) -> list[Match]:
        """Fetch a team's matches, newest first, without nested quarters."""
        rows = self._select(
            "matches",
            {"select": "*", "team_id": f"eq.{team_id}", "order": "match_date.desc"},
        )
        return [parse_match(row) for row in rows]

    def fetch_players(self, team_id: str) -> list[Player]:
        """Fetch a team's roster ordered by jersey number."""
        rows = self._select(
            "players",
            {"select": "*", "team_id": f"eq.{team_id}", "order": "number"},
        )
        return [parse_player(row) for row in rows]

    def fetch_team(self, team_id: str) -> Team:
        """
        Fetch a team row.

        Raises:
            NotFoundError: If the team does not exist or is not visible.
        """
        rows = self._select("teams", {"select": "*", "id": f"eq.{team_id}"})
        if not rows:
            raise NotFoundError(f"Team not found: {team_id}")
        return parse_team(rows[0])

    def fetch_member(self, team_id: str, user_id: str) -> Optional[TeamMember]:
        """Fetch a user's membership row, None if the user is not a member."""
        rows = self._select(
            "team_members",
            {"select": "*", "team_id": f"eq.{team_id}", "user_id": f"eq.{user_id}"},
        )
        return parse_member(rows[0]) if rows else None

    def replace_quarter_records(self, quarter_id: str, rows: list[dict[str, Any]]) -> None:
        """
        Replace every record of a quarter.

        Existing records are deleted, then the new rows are inserted. The
        store is expected to make the pair appear atomic to readers.
        """
        self._request("DELETE", "quarter_records", params={"quarter_id": f"eq.{quarter_id}"})
        if rows:
            self._request(
                "POST",
                "quarter_records",
                json_body=rows,
                headers={"Prefer": "return=minimal"},
            )
        logger.info("Saved %d records for quarter %s", len(rows), quarter_id)

    def insert_substitution(
        self,
        quarter_id: str,
        player_out_id: str,
        player_in_id: str,
        minute: int,
    ) -> None:
        """Record a substitution for a quarter."""
        self._request(
            "POST",
            "substitutions",
            json_body={
                "quarter_id": quarter_id,
                "player_out_id": player_out_id,
                "player_in_id": player_in_id,
                "minute": minute,
            },
            headers={"Prefer": "return=minimal"},
        )

    def fetch_members(self, team_id: str) -> list[TeamMember]:
        """Fetch every membership row of a team in joining order."""
        rows = self._select(
            "team_members",
            {"select": "*", "team_id": f"eq.{team_id}", "order": "joined_at"},
        )
        return [parse_member(row) for row in rows]

    def fetch_team_records(self, player_ids: list[str]) -> list[QuarterRecord]:
        """
        Fetch every quarter record of the given players across all matches.

        Args:
            player_ids: Roster player ids. No request is made when empty.
        """
        if not player_ids:
            return []
        rows = self._select(
            "quarter_records",
            {"select": "*", "player_id": f"in.({','.join(player_ids)})"},
        )
        return [parse_record(row) for row in rows]

    def update_quarter_score(self, quarter_id: str, home_score: int, away_score: int) -> None:
        self._update("quarters", quarter_id, {"home_score": home_score, "away_score": away_score})

    def update_match_score(self, match_id: str, home_score: int, away_score: int) -> None:
        self._update("matches", match_id, {"home_score": home_score, "away_score": away_score})

    def create_player(
        self,
        team_id: str,
        name: str,
        number: Optional[int],
        position: PositionType,
    ) -> Player:
        """
        Add a player to a team's roster.

        Returns:
            The stored player with its generated id.
        """
        row = self._insert(
            "players",
            {
                "team_id": team_id,
                "name": name.strip(),
                "number": number,
                "default_position": position.value,
            },
        )
        logger.info("Created player %s in team %s", row.get("id"), team_id)
        return parse_player(row)

    def update_player(self, player: Player) -> None:
        """Store a player's name, number and default position."""
        self._update(
            "players",
            player.id,
            {
                "name": player.name.strip(),
                "number": player.number,
                "default_position": player.default_position.value,
            },
        )

    def delete_player(self, player_id: str) -> None:
        self._delete("players", player_id)
        logger.info("Deleted player %s", player_id)

    def create_match(
        self,
        team_id: str,
        opponent: str,
        match_date: date,
        location: Optional[str] = None,
    ) -> Match:
        """
        Create a match for a team.

        The store creates the match's quarters; reload the match with
        fetch_match to get them.

        Returns:
            The stored match without quarters.
        """
        row = self._insert(
            "matches",
            {
                "team_id": team_id,
                "opponent": opponent.strip(),
                "match_date": match_date.isoformat(),
                "location": (location or "").strip() or None,
            },
        )
        logger.info("Created match %s against %s", row.get("id"), opponent)
        return parse_match(row)

    def delete_match(self, match_id: str) -> None:
        self._delete("matches", match_id)
        logger.info("Deleted match %s", match_id)

    def update_member(self, member: TeamMember) -> None:
        """Store a member's role and edit flags."""
        self._update(
            "team_members",
            member.id,
            {
                "role": member.role.value,
                "can_edit_players": member.can_edit_players,
                "can_edit_matches": member.can_edit_matches,
                "can_edit_quarters": member.can_edit_quarters,
            },
        )

    def delete_member(self, member_id: str) -> None:
        self._delete("team_members", member_id)
        logger.info("Removed member %s", member_id)

    def get_user_id(self, access_token: str) -> str:
        """
        Resolve an access token to a user id.

        Raises:
            AuthError: If the token is missing, expired or rejected.
        """
        if not access_token:
            raise AuthError("Authentication required")
        try:
            response = self._session.get(
                f"{self.settings.supabase_url}/auth/v1/user",
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.settings.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Could not verify session: {e}")
        if not response.ok:
            raise AuthError("Authentication required")
        try:
            body = response.json()
        except ValueError:
            raise AuthError("Could not verify session: invalid response")
        user_id = body.get("id") if isinstance(body, dict) else None
        if not user_id:
            raise AuthError("Authentication required")
        return user_id

    def public_url(self, path: str) -> str:
        return f"{self.settings.storage_url}/object/public/{self.settings.media_bucket}/{path}"

    def upload_media(
        self,
        data: Optional[bytes],
        path: Optional[str],
        content_type: str,
        access_token: Optional[str],
    ) -> str:
        """
        Upload a media file for a player record.

        Args:
            data: File contents.
            path: Destination object path inside the media bucket.
            content_type: MIME type of the file.
            access_token: The uploading user's session token.

        Returns:
            Public URL of the stored file.

        Raises:
            AuthError: If the caller is not authenticated.
            UploadError: If data or path is missing, or storage rejects the
                file. Storage errors carry the provider's message unchanged.
        """
        self.get_user_id(access_token or "")

        if not data or not path:
            raise UploadError("File and path are required")

        key = self.settings.service_role_key or self.settings.anon_key
        url = f"{self.settings.storage_url}/object/{self.settings.media_bucket}/{path}"
        try:
            response = self._session.post(
                url,
                data=data,
                headers={
                    "Authorization": f"Bearer {key}",
                    "Content-Type": content_type,
                    "x-upsert": "false",
                },
                timeout=self.settings.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise UploadError(str(e))

        if not response.ok:
            message = _error_message(response)
            logger.warning("Upload of %s failed: %s", path, message)
            raise UploadError(message)

        logger.info("Uploaded %s (%d bytes)", path, len(data))
        return self.public_url(path)
