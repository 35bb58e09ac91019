"""Tests for the services module: row parsing, REST client and sample data."""

import logging
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from pitchnote.analysis import attendance, calculate_mvp
from pitchnote.config import Settings
from pitchnote.models import Player, PositionType, Role, TeamMember
from pitchnote.services import (
    MATCH_SELECT,
    QUARTERS_PER_MATCH,
    SAMPLE_MATCH_ID,
    SAMPLE_TEAM_ID,
    SAMPLE_USER_ID,
    AuthError,
    FetchError,
    NotFoundError,
    ParseError,
    ServiceError,
    SupabaseClient,
    UploadError,
    create_blank_match,
    create_sample_match,
    create_sample_members,
    create_sample_players,
    create_sample_team,
    parse_match,
    parse_member,
    parse_player,
    parse_position,
    parse_quarter,
    parse_record,
    parse_team,
)


PLAYER_ROW = {
    "id": "p1",
    "team_id": "t1",
    "name": "김민수",
    "number": 10,
    "default_position": "MF",
}

RECORD_ROW = {
    "id": "r1",
    "quarter_id": "q1",
    "player_id": "p1",
    "position_type": "MF",
    "position_x": "40.5",
    "position_y": 60,
    "rating": "8.5",
    "goals": 1,
    "assists": None,
    "clean_sheet": False,
    "contribution": 1,
    "praise_text": "Great pass",
    "media_urls": None,
    "player": PLAYER_ROW,
}

MATCH_ROW = {
    "id": "m1",
    "team_id": "t1",
    "opponent": "FC Seoul",
    "match_date": "2024-06-15",
    "location": "잠실 운동장",
    "home_score": 3,
    "away_score": 1,
    "quarters": [
        {
            "id": "q2",
            "match_id": "m1",
            "quarter_number": 2,
            "quarter_records": [],
            "substitutions": [],
        },
        {
            "id": "q1",
            "match_id": "m1",
            "quarter_number": 1,
            "duration_minutes": 20,
            "home_score": 2,
            "quarter_records": [RECORD_ROW],
            "substitutions": [
                {
                    "id": "s1",
                    "quarter_id": "q1",
                    "player_out_id": "p1",
                    "player_in_id": "p2",
                    "minute": 12,
                }
            ],
        },
    ],
}


class TestParsePosition:
    """Tests for parse_position function."""

    def test_codes(self) -> None:
        assert parse_position("GK") == PositionType.GK
        assert parse_position("df") == PositionType.DF
        assert parse_position(" MF ") == PositionType.MF

    def test_long_names(self) -> None:
        assert parse_position("Goalkeeper") == PositionType.GK
        assert parse_position("forward") == PositionType.FW

    def test_unknown_position_raises_error(self) -> None:
        with pytest.raises(ParseError, match="Unknown position"):
            parse_position("Libero")


class TestParseRows:
    """Tests for row parsers."""

    def test_parse_player(self) -> None:
        player = parse_player(PLAYER_ROW)
        assert player.name == "김민수"
        assert player.number == 10
        assert player.default_position == PositionType.MF

    def test_parse_player_missing_field(self) -> None:
        with pytest.raises(ParseError, match="Invalid player row"):
            parse_player({"id": "p1", "team_id": "t1"})

    def test_parse_record_converts_numbers(self) -> None:
        record = parse_record(RECORD_ROW)
        assert record.position_x == 40.5
        assert record.position_y == 60.0
        assert record.rating == 8.5
        assert record.goals == 1
        assert record.assists == 0
        assert record.contribution == 1.0
        assert record.player is not None
        assert record.player.id == "p1"

    def test_parse_record_null_rating(self) -> None:
        record = parse_record({**RECORD_ROW, "rating": None, "player": None})
        assert record.rating is None
        assert record.player is None

    def test_parse_record_invalid_rating(self) -> None:
        with pytest.raises(ParseError):
            parse_record({**RECORD_ROW, "rating": "11"})

    def test_parse_quarter_without_records_key(self) -> None:
        """Records that were not selected stay None."""
        quarter = parse_quarter({"id": "q1", "match_id": "m1", "quarter_number": 1})
        assert quarter.quarter_records is None
        assert quarter.duration_minutes == 25
        assert quarter.substitutions == []

    def test_parse_match_sorts_quarters(self) -> None:
        match = parse_match(MATCH_ROW)
        assert match.match_date == date(2024, 6, 15)
        assert [q.quarter_number for q in match.quarters] == [1, 2]
        first = match.quarters[0]
        assert first.duration_minutes == 20
        assert first.home_score == 2
        assert first.substitutions[0].player_in_id == "p2"
        assert match.quarters[1].quarter_records == []

    def test_parse_match_timestamp_date(self) -> None:
        match = parse_match({**MATCH_ROW, "match_date": "2024-06-15T10:00:00+00:00", "quarters": None})
        assert match.match_date == date(2024, 6, 15)
        assert match.quarters is None

    def test_parse_match_bad_date(self) -> None:
        with pytest.raises(ParseError, match="Invalid match row"):
            parse_match({**MATCH_ROW, "match_date": "soon"})

    def test_parse_member(self) -> None:
        member = parse_member(
            {"id": "tm1", "team_id": "t1", "user_id": "u1", "role": "coach", "can_edit_quarters": True}
        )
        assert member.role == Role.COACH
        assert member.can_edit_quarters is True
        assert member.can_edit_players is False

    def test_parse_member_unknown_role(self) -> None:
        with pytest.raises(ParseError):
            parse_member({"id": "tm1", "team_id": "t1", "user_id": "u1", "role": "owner"})

    def test_parse_team(self) -> None:
        team = parse_team({"id": "t1", "user_id": "u1", "name": "FC PitchNote"})
        assert team.name == "FC PitchNote"
        assert team.description is None

    def test_errors_share_base(self) -> None:
        for error in (AuthError, FetchError, NotFoundError, ParseError, UploadError):
            assert issubclass(error, ServiceError)
        assert issubclass(NotFoundError, FetchError)


def make_response(status: int = 200, body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.text = text
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co/",
        anon_key="anon",
        service_role_key="service",
    )


@pytest.fixture
def session() -> MagicMock:
    mock = MagicMock()
    mock.headers = {}
    return mock


@pytest.fixture
def client(settings: Settings, session: MagicMock) -> SupabaseClient:
    return SupabaseClient(settings, session=session)


class TestSupabaseClient:
    """Tests for SupabaseClient table requests."""

    def test_requires_configuration(self) -> None:
        with pytest.raises(ValueError):
            SupabaseClient(Settings())

    def test_session_headers(self, client: SupabaseClient, session: MagicMock) -> None:
        assert session.headers["apikey"] == "anon"
        assert "PitchNote" in session.headers["User-Agent"]

    def test_fetch_match(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[MATCH_ROW])

        match = client.fetch_match("m1")

        assert match.id == "m1"
        method, url = session.request.call_args.args
        assert method == "GET"
        assert url == "https://example.supabase.co/rest/v1/matches"
        kwargs = session.request.call_args.kwargs
        assert kwargs["params"] == {"select": MATCH_SELECT, "id": "eq.m1"}
        assert kwargs["headers"]["Authorization"] == "Bearer anon"
        assert kwargs["timeout"] == 30.0

    def test_access_token_used_when_set(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[MATCH_ROW])
        client.access_token = "user-token"
        client.fetch_match("m1")
        assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer user-token"

    def test_fetch_match_not_found(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[])
        with pytest.raises(NotFoundError, match="m1"):
            client.fetch_match("m1")

    def test_fetch_players_ordered(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[PLAYER_ROW])
        players = client.fetch_players("t1")
        assert players[0].id == "p1"
        assert session.request.call_args.kwargs["params"]["order"] == "number"

    def test_fetch_matches_newest_first(self, client: SupabaseClient, session: MagicMock) -> None:
        row = {k: v for k, v in MATCH_ROW.items() if k != "quarters"}
        session.request.return_value = make_response(body=[row])
        matches = client.fetch_matches("t1")
        assert matches[0].quarters is None
        assert session.request.call_args.kwargs["params"]["order"] == "match_date.desc"

    def test_fetch_member_missing(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[])
        assert client.fetch_member("t1", "u1") is None

    def test_fetch_team_not_found(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[])
        with pytest.raises(NotFoundError):
            client.fetch_team("t1")

    def test_unauthorized(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(401, body={"message": "JWT expired"})
        with pytest.raises(AuthError, match="JWT expired"):
            client.fetch_match("m1")

    def test_http_error(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(500, text="boom")
        with pytest.raises(FetchError, match="HTTP error 500: boom"):
            client.fetch_match("m1")

    def test_timeout(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.side_effect = requests.exceptions.Timeout()
        with pytest.raises(FetchError, match="timed out"):
            client.fetch_players("t1")

    def test_connection_error(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(FetchError, match="Request failed"):
            client.fetch_players("t1")

    def test_unexpected_body(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body={"not": "a list"})
        with pytest.raises(FetchError, match="Unexpected response"):
            client.fetch_players("t1")

    def test_replace_quarter_records(
        self,
        client: SupabaseClient,
        session: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Existing rows are deleted before the new ones are inserted."""
        session.request.return_value = make_response(201, body=[])
        rows = [{"quarter_id": "q1", "player_id": "p1"}]

        with caplog.at_level(logging.INFO, logger="pitchnote"):
            client.replace_quarter_records("q1", rows)

        calls = session.request.call_args_list
        assert [c.args[0] for c in calls] == ["DELETE", "POST"]
        assert calls[0].kwargs["params"] == {"quarter_id": "eq.q1"}
        assert calls[1].kwargs["json"] == rows
        assert calls[1].kwargs["headers"]["Prefer"] == "return=minimal"
        assert "Saved 1 records for quarter q1" in caplog.text

    def test_replace_with_no_rows_only_deletes(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204, body=[])
        client.replace_quarter_records("q1", [])
        assert [c.args[0] for c in session.request.call_args_list] == ["DELETE"]

    def test_insert_substitution(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(201, body=[])
        client.insert_substitution("q1", "p1", "p2", 12)
        kwargs = session.request.call_args.kwargs
        assert kwargs["json"] == {
            "quarter_id": "q1",
            "player_out_id": "p1",
            "player_in_id": "p2",
            "minute": 12,
        }


class TestUploadMedia:
    """Tests for token checks and storage uploads."""

    def test_get_user_id(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(body={"id": "u1"})
        assert client.get_user_id("token") == "u1"
        assert session.get.call_args.args[0] == "https://example.supabase.co/auth/v1/user"

    def test_get_user_id_without_token(self, client: SupabaseClient, session: MagicMock) -> None:
        with pytest.raises(AuthError, match="Authentication required"):
            client.get_user_id("")
        session.get.assert_not_called()

    def test_get_user_id_rejected(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(401, body={"msg": "bad jwt"})
        with pytest.raises(AuthError):
            client.get_user_id("expired")

    def test_upload_requires_auth(self, client: SupabaseClient, session: MagicMock) -> None:
        """Unauthenticated uploads are refused before touching storage."""
        with pytest.raises(AuthError):
            client.upload_media(b"data", "m1/q1/p1/1.jpg", "image/jpeg", None)
        session.post.assert_not_called()

    def test_upload_requires_file_and_path(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(body={"id": "u1"})
        with pytest.raises(UploadError, match="File and path are required"):
            client.upload_media(b"", "m1/q1/p1/1.jpg", "image/jpeg", "token")
        with pytest.raises(UploadError, match="File and path are required"):
            client.upload_media(b"data", None, "image/jpeg", "token")

    def test_upload_success(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(body={"id": "u1"})
        session.post.return_value = make_response(200, body={"Key": "x"})

        url = client.upload_media(b"data", "m1/q1/p1/1.jpg", "image/jpeg", "token")

        assert url == (
            "https://example.supabase.co/storage/v1/object/public/player-media/m1/q1/p1/1.jpg"
        )
        args, kwargs = session.post.call_args
        assert args[0] == "https://example.supabase.co/storage/v1/object/player-media/m1/q1/p1/1.jpg"
        assert kwargs["data"] == b"data"
        assert kwargs["headers"]["Authorization"] == "Bearer service"
        assert kwargs["headers"]["Content-Type"] == "image/jpeg"
        assert kwargs["headers"]["x-upsert"] == "false"

    def test_upload_storage_error_message_verbatim(
        self, client: SupabaseClient, session: MagicMock
    ) -> None:
        session.get.return_value = make_response(body={"id": "u1"})
        session.post.return_value = make_response(400, body={"message": "The resource already exists"})
        with pytest.raises(UploadError) as exc_info:
            client.upload_media(b"data", "m1/q1/p1/1.jpg", "image/jpeg", "token")
        assert str(exc_info.value) == "The resource already exists"


class TestSampleData:
    """Tests for sample data generation."""

    def test_sample_players(self) -> None:
        players = create_sample_players()
        assert len(players) == 8
        assert len({p.id for p in players}) == 8
        assert {p.default_position for p in players} == set(PositionType)

    def test_sample_match(self) -> None:
        match = create_sample_match()
        assert match.id == SAMPLE_MATCH_ID
        assert match.result == "win"
        assert [q.quarter_number for q in match.quarters] == [1, 2]

    def test_sample_mvp(self) -> None:
        mvp = calculate_mvp(create_sample_match())
        assert mvp is not None
        assert mvp.player_name == "김민수"
        assert mvp.average_rating == 8.75

    def test_sample_attendance_includes_substitute(self) -> None:
        assert "p-yoo" in attendance(create_sample_match())


class TestClientReads:
    """Tests for roster, member and season reads."""

    def test_fetch_members(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(
            body=[{"id": "tm1", "team_id": "t1", "user_id": "u1", "role": "member"}]
        )
        members = client.fetch_members("t1")
        assert members[0].role == Role.MEMBER
        assert session.request.call_args.kwargs["params"] == {
            "select": "*",
            "team_id": "eq.t1",
            "order": "joined_at",
        }

    def test_fetch_team_records(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(body=[{**RECORD_ROW, "player": None}])

        records = client.fetch_team_records(["p1", "p2"])

        assert records[0].rating == 8.5
        assert session.request.call_args.args[1].endswith("/rest/v1/quarter_records")
        assert session.request.call_args.kwargs["params"] == {
            "select": "*",
            "player_id": "in.(p1,p2)",
        }

    def test_fetch_team_records_empty_roster(self, client: SupabaseClient, session: MagicMock) -> None:
        assert client.fetch_team_records([]) == []
        session.request.assert_not_called()

    def test_invalid_json_body(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(200, text="<html>")
        with pytest.raises(FetchError, match="Invalid JSON response for players"):
            client.fetch_players("t1")


class TestClientWrites:
    """Tests for score, roster, match and member writes."""

    def test_update_quarter_score(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)

        client.update_quarter_score("q1", 2, 1)

        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "PATCH"
        assert url == "https://example.supabase.co/rest/v1/quarters"
        assert kwargs["params"] == {"id": "eq.q1"}
        assert kwargs["json"] == {"home_score": 2, "away_score": 1}
        assert kwargs["headers"]["Prefer"] == "return=minimal"

    def test_update_match_score(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)
        client.update_match_score("m1", 3, 1)
        assert session.request.call_args.args[1].endswith("/rest/v1/matches")
        assert session.request.call_args.kwargs["json"] == {"home_score": 3, "away_score": 1}

    def test_create_player(
        self,
        client: SupabaseClient,
        session: MagicMock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        session.request.return_value = make_response(201, body=[PLAYER_ROW])

        with caplog.at_level(logging.INFO, logger="pitchnote"):
            player = client.create_player("t1", " 김민수 ", 10, PositionType.MF)

        assert player.id == "p1"
        assert session.request.call_args.args[0] == "POST"
        kwargs = session.request.call_args.kwargs
        assert kwargs["json"] == {
            "team_id": "t1",
            "name": "김민수",
            "number": 10,
            "default_position": "MF",
        }
        assert kwargs["headers"]["Prefer"] == "return=representation"
        assert "Created player p1" in caplog.text

    def test_insert_without_returned_row(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(201, body=[])
        with pytest.raises(FetchError, match="returned no row"):
            client.create_player("t1", "김민수", None, PositionType.MF)

    def test_update_player(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)
        player = Player(id="p1", team_id="t1", name="김민수", number=None, default_position=PositionType.FW)

        client.update_player(player)

        kwargs = session.request.call_args.kwargs
        assert kwargs["params"] == {"id": "eq.p1"}
        assert kwargs["json"] == {"name": "김민수", "number": None, "default_position": "FW"}

    def test_delete_player(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)
        client.delete_player("p1")
        method, url = session.request.call_args.args
        assert method == "DELETE"
        assert url.endswith("/rest/v1/players")
        assert session.request.call_args.kwargs["params"] == {"id": "eq.p1"}

    def test_create_match(self, client: SupabaseClient, session: MagicMock) -> None:
        row = {k: v for k, v in MATCH_ROW.items() if k != "quarters"}
        session.request.return_value = make_response(201, body=[row])

        match = client.create_match("t1", "FC Seoul", date(2024, 6, 15), "  ")

        assert match.id == "m1"
        assert session.request.call_args.kwargs["json"] == {
            "team_id": "t1",
            "opponent": "FC Seoul",
            "match_date": "2024-06-15",
            "location": None,
        }

    def test_delete_match(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)
        client.delete_match("m1")
        assert session.request.call_args.args == ("DELETE", "https://example.supabase.co/rest/v1/matches")

    def test_update_member(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)
        member = TeamMember(id="tm1", team_id="t1", user_id="u1", can_edit_matches=True)

        client.update_member(member)

        kwargs = session.request.call_args.kwargs
        assert session.request.call_args.args[1].endswith("/rest/v1/team_members")
        assert kwargs["params"] == {"id": "eq.tm1"}
        assert kwargs["json"] == {
            "role": "member",
            "can_edit_players": False,
            "can_edit_matches": True,
            "can_edit_quarters": False,
        }

    def test_delete_member(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(204)
        client.delete_member("tm1")
        assert session.request.call_args.kwargs["params"] == {"id": "eq.tm1"}

    def test_write_rejected(self, client: SupabaseClient, session: MagicMock) -> None:
        session.request.return_value = make_response(403, body={"message": "permission denied"})
        with pytest.raises(AuthError, match="permission denied"):
            client.delete_match("m1")


class TestUserResponses:
    """Tests for malformed session lookups."""

    def test_user_body_not_json(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(200, text="<html>")
        with pytest.raises(AuthError, match="invalid response"):
            client.get_user_id("token")

    def test_user_body_is_list(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(body=[{"id": "u1"}])
        with pytest.raises(AuthError, match="Authentication required"):
            client.get_user_id("token")

    def test_user_body_without_id(self, client: SupabaseClient, session: MagicMock) -> None:
        session.get.return_value = make_response(body={"email": "a@b.c"})
        with pytest.raises(AuthError):
            client.get_user_id("token")


class TestSampleTeam:
    """Tests for the sample team, members and new matches."""

    def test_sample_user_owns_team(self) -> None:
        team = create_sample_team()
        assert team.id == SAMPLE_TEAM_ID
        assert team.user_id == SAMPLE_USER_ID

    def test_sample_members(self) -> None:
        members = create_sample_members()
        assert [m.role for m in members] == [Role.COACH, Role.MEMBER, Role.MEMBER]
        assert members[0].user_id == SAMPLE_USER_ID
        assert members[1].can_edit_quarters is True

    def test_blank_match_has_empty_quarters(self) -> None:
        match = create_blank_match("m9", "t1", " Suwon FC ", date(2024, 7, 1), "")
        assert match.opponent == "Suwon FC"
        assert match.location is None
        assert len(match.quarters) == QUARTERS_PER_MATCH
        assert [q.id for q in match.quarters] == ["m9-q1", "m9-q2", "m9-q3", "m9-q4"]
        assert all(q.records == [] for q in match.quarters)
        assert (match.home_score, match.away_score) == (0, 0)
