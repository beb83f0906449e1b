from __future__ import annotations

import importlib.util
import json
from pathlib import Path

from torneostats.exceptions import APIRateLimitError
from torneostats.models import SeasonStatistics
from torneostats.services import data_fetch

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "player_season_stats.py"


def _load_cli():
    spec = importlib.util.spec_from_file_location("player_season_stats", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_cli_prints_player_stats(monkeypatch, capsys):
    cli = _load_cli()
    monkeypatch.setattr(
        data_fetch,
        "fetch_player_season_stats",
        lambda player_id, team_name, team_id=None: SeasonStatistics(games_played_this_year=2),
    )

    assert cli.main(["--player", "42", "--team-name", "FC Test"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["gamesPlayedThisYear"] == 2


def test_cli_returns_error_code_on_api_failure(monkeypatch):
    cli = _load_cli()

    def fail(player_id, team_name, team_id=None):
        raise APIRateLimitError("Rate limit exceeded.")

    monkeypatch.setattr(data_fetch, "fetch_player_season_stats", fail)
    assert cli.main(["--player", "42"]) == 1


def test_cli_forwards_team_id(monkeypatch, capsys):
    cli = _load_cli()
    called = {}

    def fake_fetch(player_id, team_name, team_id=None):
        called.update(player_id=player_id, team_name=team_name, team_id=team_id)
        return SeasonStatistics()

    monkeypatch.setattr(data_fetch, "fetch_player_season_stats", fake_fetch)

    assert cli.main(["--player", "42", "--team-id", "100"]) == 0
    assert called == {"player_id": "42", "team_name": None, "team_id": "100"}
    assert json.loads(capsys.readouterr().out)["gamesPlayedThisYear"] == 0
