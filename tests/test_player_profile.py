from __future__ import annotations

from torneostats.config import APISettings
from torneostats.exceptions import APIClientError, APINotFoundError
from torneostats.services import player_profile
from torneostats.services.player_profile import (
    PlayerProfile,
    build_category_lookup,
    fetch_and_process_player_data,
    lineup_goal_totals,
    lineup_sort_key,
    resolve_context_team_name,
    team_name_for_id,
    teams_this_year,
)

SETTINGS = APISettings(current_season_id="2025", previous_season_id="2024", offline_mode=True)

MATCH = {
    "match_id": "m1",
    "team_A_id": "100",
    "team_A_name": "FC Home",
    "team_B_id": "200",
    "team_B_name": "FC Away",
    "club_A_crest": "home.png",
    "club_B_crest": "away.png",
}

TEAMS = [
    {
        "team_id": "100",
        "team_name": "FC Home",
        "primary_category": {"competition_id": "spljp25", "category_name": "Kakkonen"},
    },
    {
        "team_id": "300",
        "team_name": "FC Reserve",
        "primary_category": {"competition_name": "Nelonen 2025", "category_name": "Nelonen"},
    },
    {
        "team_id": "400",
        "team_name": "Old Club",
        "primary_category": {"competition_id": "spljp24", "category_name": "Kolmonen"},
    },
    "garbage",
]


class FakeClient:
    def __init__(self, player=None, error=None):
        self.settings = SETTINGS
        self.player = player
        self.error = error
        self.calls = []

    def get_player(self, player_id):
        self.calls.append(player_id)
        if self.error is not None:
            raise self.error
        return self.player


def test_build_category_lookup_scopes_to_current_season():
    assert build_category_lookup(TEAMS, "2025") == {"100": "Kakkonen", "300": "Nelonen"}
    assert build_category_lookup(None, "2025") == {}


def test_teams_this_year_lists_current_memberships():
    labels = teams_this_year({"teams": TEAMS}, "2025", "FC Home")
    assert labels == ["FC Home (Kakkonen)", "FC Reserve (Nelonen)"]


def test_teams_this_year_fallbacks():
    assert teams_this_year({"club_name": "Club X"}, "2025", "FC Home") == [
        "Club X (exact league for 2025 unknown)"
    ]
    assert teams_this_year({}, "2025", "FC Home") == ["FC Home (current match)"]
    assert teams_this_year({}, "2025", None) == ["No teams known for 2025."]


def test_resolve_context_team_name():
    assert resolve_context_team_name("100", MATCH, {}) == "FC Home"
    assert resolve_context_team_name(200, MATCH, {}) == "FC Away"
    assert resolve_context_team_name("999", MATCH, {"team_name_from_getTeam": "Guest"}) == "Guest"
    assert resolve_context_team_name("999", MATCH, {}) is None


def test_team_name_for_id_prefers_memberships_then_matches():
    player = {
        "teams": TEAMS,
        "matches": [{"team_id": "500", "team_name": "Cup Side"}, {"team_id": "100", "team_name": "Other"}],
    }
    assert team_name_for_id(player, 100) == "FC Home"
    assert team_name_for_id(player, "500") == "Cup Side"
    assert team_name_for_id(player, "999") is None
    assert team_name_for_id(player, None) is None
    assert team_name_for_id({}, "100") is None


def test_own_goal_and_blank_ids_are_skipped():
    client = FakeClient(player={})
    assert fetch_and_process_player_data(client, "oma_maali_A", "100", MATCH) is None
    assert fetch_and_process_player_data(client, "", "100", MATCH) is None
    assert fetch_and_process_player_data(client, None, "100", MATCH) is None
    assert client.calls == []


def test_profile_aggregates_context_team_matches():
    player = {
        "first_name": "Matti",
        "last_name": "Meikäläinen",
        "birthyear": "2001",
        "nationality": "FI",
        "teams": TEAMS,
        "matches": [
            {
                "season_id": "2025",
                "team_id": "100",
                "team_name": "FC Home",
                "team_A_id": "100",
                "team_B_id": "500",
                "team_B_name": "Visitors",
                "fs_A": "3",
                "fs_B": "0",
                "status": "Played",
                "date": "2025-05-01",
                "player_goals": "2",
            },
            {
                "season_id": "2025",
                "team_id": "300",
                "team_name": "FC Reserve",
                "team_A_id": "600",
                "team_B_id": "300",
                "fs_A": "1",
                "fs_B": "1",
                "date": "2025-05-05",
                "player_goals": "1",
            },
        ],
    }
    client = FakeClient(player=player)
    lineup = {"player_id": "42", "team_id": "100", "shirt_number": "9", "captain": "C"}

    profile = fetch_and_process_player_data(client, "42", "100", MATCH, lineup)

    assert client.calls == ["42"]
    assert profile.name == "Matti Meikäläinen"
    assert profile.shirt_number == "9"
    assert profile.birth_year == "2001"
    assert profile.is_captain_in_match
    assert profile.club_crest == "home.png"
    assert profile.bio["nationality"] == "FI"
    assert profile.teams_this_year == "FC Home (Kakkonen)\nFC Reserve (Nelonen)"
    stats = profile.stats
    assert stats.games_played_this_year == 2
    assert stats.goals_for_this_specific_team_in_season == 2
    assert stats.current_context_team_display_key == "FC Home (Kakkonen)"
    assert list(stats.other_teams_detailed_matches) == ["FC Reserve (Nelonen)"]

    data = profile.to_dict()
    assert data["goalsThisYear"] == 3
    assert data["teamIdInMatch"] == "100"


def test_not_found_player_returns_default_profile():
    client = FakeClient(error=APINotFoundError("gone", status_code=404))
    lineup = {"player_name": "Lineup Name", "team_id": "200"}
    profile = fetch_and_process_player_data(client, "7", "200", MATCH, lineup)
    assert profile.name == "Lineup Name"
    assert profile.teams_this_year == "Not found (API)"
    assert profile.club_crest == "away.png"
    assert profile.stats.games_played_this_year == 0


def test_failed_fetch_returns_error_profile(caplog):
    client = FakeClient(error=APIClientError("down"))
    profile = fetch_and_process_player_data(client, "7", "100", MATCH)
    assert profile.name == "Player 7"
    assert profile.teams_this_year == "Error fetching player 7"
    assert "Fetching player 7 failed" in caplog.text


def test_lineup_sort_key_orders_by_side_number_and_name():
    profiles = [
        PlayerProfile("1", "Zed", "N/A", "200"),
        PlayerProfile("2", "Bob", "10", "100"),
        PlayerProfile("3", "Al", "2", "100"),
        PlayerProfile("4", "Guest", "1", None),
        PlayerProfile("5", "Ann", "N/A", "100"),
    ]
    ordered = sorted(profiles, key=lambda p: lineup_sort_key(p, MATCH))
    assert [p.name for p in ordered] == ["Al", "Bob", "Ann", "Zed", "Guest"]


def test_lineup_goal_totals():
    home = PlayerProfile("1", "A", "1", "100")
    home.stats.goals_for_this_specific_team_in_season = 4
    away = PlayerProfile("2", "B", "2", "200")
    away.stats.goals_for_this_specific_team_in_season = 1
    assert lineup_goal_totals([home, away], MATCH) == {"team_A": 4, "team_B": 1}


def test_uses_client_settings_by_default(monkeypatch):
    captured = {}

    def fake_aggregate(matches, current, previous, context, lookup):
        captured.update(current=current, previous=previous, context=context, lookup=lookup)
        return player_profile.SeasonStatistics()

    monkeypatch.setattr(player_profile, "aggregate_season", fake_aggregate)
    client = FakeClient(player={"teams": TEAMS, "matches": []})
    fetch_and_process_player_data(client, "9", "200", MATCH)
    assert captured == {
        "current": "2025",
        "previous": "2024",
        "context": "FC Away",
        "lookup": {"100": "Kakkonen", "300": "Nelonen"},
    }
