"""Tests for the Streamlit app module."""

from pitchnote.analysis import FieldPlayer, get_player_stats_from_match, season_stats
from pitchnote.app.components import marker_markup, pitch_markup, season_rows, stats_rows
from pitchnote.app.pages.match_report import RESULT_LABELS, _attendee_names
from pitchnote.app.pages.matches import match_label
from pitchnote.app.pages.members import member_flags
from pitchnote.models import Player, PositionType, Role, TeamMember
from pitchnote.services import create_sample_match, create_sample_members, create_sample_players


class TestStatsRows:
    """Tests for the statistics table rows."""

    def test_rows_follow_stats_order(self) -> None:
        rows = stats_rows(get_player_stats_from_match(create_sample_match()))
        assert rows[0]["Player"] == "김민수"
        assert rows[0]["#"] == 10
        assert rows[0]["Rating"] == "8.8"
        assert rows[0]["Rated quarters"] == 2

    def test_unrated_player_shows_dash(self) -> None:
        """Players without any rating show a dash, not 0.0."""
        rows = stats_rows(get_player_stats_from_match(create_sample_match()))
        song = next(r for r in rows if r["Player"] == "송종국")
        assert song["Rating"] == "-"
        assert song["Rated quarters"] == 0

    def test_empty(self) -> None:
        assert stats_rows([]) == []


class TestPitchMarkup:
    """Tests for the pitch diagram markup."""

    def test_marker_position_and_label(self) -> None:
        player = Player(id="p1", team_id="t1", name="김민수", number=10)
        fp = FieldPlayer(player=player, position_type=PositionType.FW, x=75, y=30, rating=8.5)
        html = marker_markup(fp)
        assert "left:75.0%" in html
        assert "top:30.0%" in html
        assert ">10</div>" in html
        assert PositionType.FW.color in html
        assert 'class="marker state-idle rated"' in html
        assert 'title="김민수 (8.5)"' in html

    def test_selected_marker(self) -> None:
        player = Player(id="p1", team_id="t1", name="김민수")
        fp = FieldPlayer(player=player, position_type=PositionType.MF)
        html = marker_markup(fp, selected=True)
        assert 'class="marker state-selected"' in html
        assert ">김</div>" in html

    def test_names_are_escaped(self) -> None:
        player = Player(id="p1", team_id="t1", name="<b>Bold</b>")
        html = marker_markup(FieldPlayer(player=player, position_type=PositionType.MF))
        assert "<b>" not in html
        assert "&lt;" in html

    def test_pitch_contains_every_player(self) -> None:
        players = create_sample_players()[:3]
        field = [FieldPlayer(player=p, position_type=p.default_position) for p in players]
        html = pitch_markup(field, selected_id=players[1].id)
        assert html.count('class="marker') == 3
        assert html.count("state-selected") == 1


class TestMatchReport:
    """Tests for match report helpers."""

    def test_attendee_names(self) -> None:
        names = _attendee_names(create_sample_match(), create_sample_players())
        assert names[0] == "1. 이운재"
        assert "6. 유상철" in names
        assert len(names) == 8

    def test_unknown_player_falls_back_to_id(self) -> None:
        names = _attendee_names(create_sample_match(), [])
        assert "p-kim" in names

    def test_result_labels_cover_outcomes(self) -> None:
        assert set(RESULT_LABELS) == {"win", "draw", "loss"}


class TestSeasonRows:
    """Tests for the season table rows."""

    def test_sample_season(self) -> None:
        match = create_sample_match()
        records = [r for q in match.quarters for r in q.records]
        rows = season_rows(season_stats(create_sample_players(), records))

        assert [r["Player"] for r in rows][:2] == ["김민수", "박지성"]
        kim = rows[0]
        assert kim["#"] == 10
        assert kim["Position"] == "MF"
        assert kim["Quarters"] == 2
        assert kim["Rating"] == "8.8"
        assert kim["Assists"] == 2

    def test_unplayed_player_shows_dash(self) -> None:
        player = Player(id="p9", team_id="t1", name="황선홍")
        row = season_rows(season_stats([player], []))[0]
        assert row["#"] == ""
        assert row["Quarters"] == 0
        assert row["Rating"] == "-"


class TestMatchesAndMembers:
    """Tests for the match picker label and member flag summary."""

    def test_match_label(self) -> None:
        assert match_label(create_sample_match()) == "2024년 6월 15일 vs FC Seoul (3 : 1)"

    def test_member_flags(self) -> None:
        coach, recorder, player = create_sample_members()
        assert member_flags(coach) == "All"
        assert member_flags(recorder) == "Quarters"
        assert member_flags(player) == "View only"

    def test_member_flags_listed_in_order(self) -> None:
        member = TeamMember(
            id="tm9", team_id="t1", user_id="u9", role=Role.MEMBER,
            can_edit_players=True, can_edit_quarters=True,
        )
        assert member_flags(member) == "Players, Quarters"
