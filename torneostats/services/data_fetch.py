"""
Facade helpers for fetching and aggregating player data.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Any, Dict, List, Optional

from ..analytics.season_aggregator import aggregate_season
from ..clients.torneopal import TorneopalClient
from ..config import APISettings
from ..models import SeasonStatistics
from .player_profile import (
    build_category_lookup,
    fetch_and_process_player_data,
    lineup_goal_totals,
    lineup_sort_key,
    team_name_for_id,
)

LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _settings() -> APISettings:
    return APISettings.from_env()


@lru_cache(maxsize=1)
def _torneopal_client() -> TorneopalClient:
    return TorneopalClient(settings=_settings())


def get_settings() -> APISettings:
    return _settings()


def get_torneopal_client() -> TorneopalClient:
    """
    Return a cached Torneopal client instance.
    """
    return _torneopal_client()


def fetch_player_season_stats(
    player_id: Any,
    context_team_name: Optional[str],
    team_id: Any = None,
) -> SeasonStatistics:
    """
    Fetch a player and aggregate their season statistics for one team.

    Without ``context_team_name`` the context team is resolved from
    ``team_id`` using the player's team memberships.
    """
    client = _torneopal_client()
    settings = client.settings
    player = client.get_player(player_id)
    if not context_team_name and team_id is not None:
        context_team_name = team_name_for_id(player, team_id)
        if context_team_name is None:
            LOGGER.warning("Team %s not found for player %s", team_id, player_id)
    lookup = build_category_lookup(player.get("teams"), settings.current_season_id)
    return aggregate_season(
        player.get("matches"),
        settings.current_season_id,
        settings.previous_season_id,
        context_team_name,
        lookup,
    )


def fetch_match_player_profiles(match_id: Any, *, max_workers: int = 8) -> Dict[str, Any]:
    """
    Fetch a match and build a profile for every player in its lineup.

    Players are fetched concurrently; each one is aggregated independently.
    """
    client = _torneopal_client()
    match = client.get_match(match_id)
    lineups = match.get("lineups")
    entries: List[Dict[str, Any]] = [
        entry for entry in (lineups if isinstance(lineups, list) else []) if isinstance(entry, dict)
    ]
    LOGGER.info("Fetching %s lineup players for match %s", len(entries), match_id)

    profiles = []
    if entries:
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(entries)))) as pool:
            futures = [
                pool.submit(
                    fetch_and_process_player_data,
                    client,
                    entry.get("player_id"),
                    entry.get("team_id"),
                    match,
                    entry,
                )
                for entry in entries
            ]
            profiles = [future.result() for future in futures]

    players = sorted(
        (profile for profile in profiles if profile is not None),
        key=lambda profile: lineup_sort_key(profile, match),
    )
    return {
        "match_id": match.get("match_id", match_id),
        "team_A_name": match.get("team_A_name"),
        "team_B_name": match.get("team_B_name"),
        "lineup_goals": lineup_goal_totals(players, match),
        "players": players,
    }
