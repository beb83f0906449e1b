"""
Tests for the JSON endpoints in torneostats.api.app.
"""
from fastapi.testclient import TestClient

from torneostats.api.app import app
from torneostats.config import APISettings
from torneostats.exceptions import APIClientError, APINotFoundError, APIRateLimitError
from torneostats.models import SeasonStatistics
from torneostats.services import data_fetch
from torneostats.services.player_profile import PlayerProfile


def test_health_reports_seasons(monkeypatch):
    monkeypatch.setattr(
        data_fetch,
        "get_settings",
        lambda: APISettings(current_season_id="2025", previous_season_id="2024", offline_mode=True),
    )
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "current_season_id": "2025",
        "previous_season_id": "2024",
        "offline_mode": True,
    }


def test_player_season_stats_returns_view_keys(monkeypatch):
    called = {}

    def fake_fetch(player_id, team_name, team_id=None):
        called.update(player_id=player_id, team_name=team_name, team_id=team_id)
        return SeasonStatistics(games_played_this_year=4, goals_this_year=2)

    monkeypatch.setattr(data_fetch, "fetch_player_season_stats", fake_fetch)
    client = TestClient(app)
    response = client.get("/players/42/season-stats", params={"team_name": "FC Test"})

    assert response.status_code == 200
    body = response.json()
    assert called == {"player_id": "42", "team_name": "FC Test", "team_id": None}
    assert body["stats"]["gamesPlayedThisYear"] == 4
    assert body["stats"]["goalsThisYear"] == 2
    assert body["stats"]["currentContextTeamDisplayKey"] is None


def test_player_season_stats_passes_team_id(monkeypatch):
    called = {}

    def fake_fetch(player_id, team_name, team_id=None):
        called.update(player_id=player_id, team_name=team_name, team_id=team_id)
        return SeasonStatistics(current_context_team_display_key="FC Test (Ykkönen)")

    monkeypatch.setattr(data_fetch, "fetch_player_season_stats", fake_fetch)
    client = TestClient(app)
    response = client.get("/players/42/season-stats", params={"team_id": "100"})

    assert response.status_code == 200
    body = response.json()
    assert called == {"player_id": "42", "team_name": None, "team_id": "100"}
    assert body["team_id"] == "100"
    assert body["team_name"] is None
    assert body["stats"]["currentContextTeamDisplayKey"] == "FC Test (Ykkönen)"


def test_player_season_stats_maps_errors(monkeypatch):
    client = TestClient(app)
    cases = [
        (APIRateLimitError("slow down"), 429),
        (APINotFoundError("missing", status_code=404), 404),
        (APIClientError("boom", status_code=500), 502),
    ]
    for error, expected in cases:
        def fake_fetch(player_id, team_name, team_id=None, error=error):
            raise error

        monkeypatch.setattr(data_fetch, "fetch_player_season_stats", fake_fetch)
        response = client.get("/players/1/season-stats")
        assert response.status_code == expected
        assert str(error) in response.json()["detail"]


def test_match_players_serialises_profiles(monkeypatch):
    profile = PlayerProfile("10", "Home Striker", "7", "1")
    monkeypatch.setattr(
        data_fetch,
        "fetch_match_player_profiles",
        lambda match_id: {
            "match_id": match_id,
            "team_A_name": "Home",
            "team_B_name": "Away",
            "lineup_goals": {"team_A": 0, "team_B": 0},
            "players": [profile],
        },
    )
    client = TestClient(app)
    response = client.get("/matches/m1/players")

    assert response.status_code == 200
    body = response.json()
    assert body["match_id"] == "m1"
    assert body["players"][0]["name"] == "Home Striker"
    assert body["players"][0]["pastMatchesDetails"] == []
