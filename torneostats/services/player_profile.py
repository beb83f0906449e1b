"""Per-player profile assembly for a match lineup."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..analytics.season_aggregator import aggregate_season
from ..clients.torneopal import TorneopalClient
from ..config import APISettings
from ..exceptions import APIClientError, APINotFoundError
from ..models import SeasonStatistics
from ..parsing import optional_text, parse_int, text_or

LOGGER = logging.getLogger(__name__)

OWN_GOAL_PREFIX = "oma_maali"
UNKNOWN_CATEGORY = "league unknown"
CAPTAIN_FLAGS = {"1", "C"}

BIO_FIELDS = (
    "position_fi",
    "nationality",
    "img_url",
    "height",
    "weight",
    "finland_raised",
    "added",
    "removed",
    "dual_representation",
    "dual_1_representation",
    "dual_2_representation",
    "overage",
    "parallel_representation",
    "exception_representation",
)


@dataclass
class PlayerProfile:
    player_id: str
    name: str
    shirt_number: str
    team_id_in_match: Optional[str]
    club_crest: Optional[str] = None
    birth_year: str = "N/A"
    teams_this_year: str = "Could not be fetched"
    is_captain_in_match: bool = False
    bio: Dict[str, Any] = field(default_factory=lambda: {key: None for key in BIO_FIELDS})
    stats: SeasonStatistics = field(default_factory=SeasonStatistics)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "playerId": self.player_id,
            "name": self.name,
            "shirtNumber": self.shirt_number,
            "teamIdInMatch": self.team_id_in_match,
            "clubCrest": self.club_crest,
            "birthYear": self.birth_year,
            "teamsThisYear": self.teams_this_year,
            "isCaptainInMatch": self.is_captain_in_match,
        }
        data.update(self.bio)
        data.update(self.stats.to_dict())
        return data


def _season_short_code(season_id: str) -> str:
    return season_id[2:] if len(season_id) > 2 else season_id


def _in_season(category: Mapping[str, Any], season_id: str) -> bool:
    competition_id = text_or(category.get("competition_id"))
    competition_name = text_or(category.get("competition_name"))
    if competition_id and _season_short_code(season_id).lower() in competition_id.lower():
        return True
    return bool(competition_name) and season_id in competition_name


def _current_season_teams(teams: Any, season_id: str) -> List[Mapping[str, Any]]:
    if not isinstance(teams, list):
        return []
    selected: List[Mapping[str, Any]] = []
    for entry in teams:
        if not isinstance(entry, Mapping):
            continue
        category = entry.get("primary_category")
        if isinstance(category, Mapping) and _in_season(category, season_id):
            selected.append(entry)
    return selected


def build_category_lookup(teams: Any, current_season_id: Any) -> Dict[str, str]:
    """
    Map team id to league (category) name for the player's current-season teams.

    A team membership counts for the season when its competition id contains
    the two-digit season code or its competition name contains the full year.
    """
    season_id = text_or(current_season_id)
    lookup: Dict[str, str] = {}
    for entry in _current_season_teams(teams, season_id):
        team_id = optional_text(entry.get("team_id"))
        category_name = text_or(entry["primary_category"].get("category_name"))
        if team_id and category_name and team_id not in lookup:
            lookup[team_id] = category_name
    return lookup


def teams_this_year(
    player: Mapping[str, Any], current_season_id: Any, context_team_name: Optional[str]
) -> List[str]:
    season_id = text_or(current_season_id)
    labels = [
        f"{text_or(entry.get('team_name'), 'unknown team')} "
        f"({text_or(entry['primary_category'].get('category_name'), UNKNOWN_CATEGORY)})"
        for entry in _current_season_teams(player.get("teams"), season_id)
    ]
    if labels:
        return labels
    club_name = text_or(player.get("club_name"))
    if club_name:
        return [f"{club_name} (exact league for {season_id} unknown)"]
    if context_team_name:
        return [f"{context_team_name} (current match)"]
    return [f"No teams known for {season_id}."]


def resolve_context_team_name(
    team_id_in_match: Any, match: Mapping[str, Any], lineup_entry: Mapping[str, Any]
) -> Optional[str]:
    team_id = optional_text(team_id_in_match)
    if team_id is not None and team_id == optional_text(match.get("team_A_id")):
        return optional_text(match.get("team_A_name"))
    if team_id is not None and team_id == optional_text(match.get("team_B_id")):
        return optional_text(match.get("team_B_name"))
    return optional_text(lineup_entry.get("team_name_from_getTeam"))


def team_name_for_id(player: Mapping[str, Any], team_id: Any) -> Optional[str]:
    """
    Look up a team's name among the player's memberships, then their matches.
    """
    wanted = optional_text(team_id)
    if wanted is None:
        return None
    for source in ("teams", "matches"):
        entries = player.get(source)
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, Mapping) or optional_text(entry.get("team_id")) != wanted:
                continue
            name = text_or(entry.get("team_name"))
            if name:
                return name
    return None


def _default_profile(
    player_id: str,
    team_id_in_match: Optional[str],
    match: Mapping[str, Any],
    lineup_entry: Mapping[str, Any],
) -> PlayerProfile:
    if team_id_in_match is not None and team_id_in_match == optional_text(match.get("team_A_id")):
        crest = match.get("club_A_crest")
    else:
        crest = match.get("club_B_crest")
    return PlayerProfile(
        player_id=player_id,
        name=text_or(lineup_entry.get("player_name"), f"Player {player_id}"),
        shirt_number=text_or(lineup_entry.get("shirt_number"), "N/A"),
        team_id_in_match=team_id_in_match,
        club_crest=crest,
    )


def fetch_and_process_player_data(
    client: TorneopalClient,
    player_id: Any,
    team_id_in_match: Any,
    match: Mapping[str, Any],
    lineup_entry: Optional[Mapping[str, Any]] = None,
    settings: Optional[APISettings] = None,
) -> Optional[PlayerProfile]:
    """
    Fetch one lineup player and aggregate their season statistics.

    Returns ``None`` for blank ids and own-goal placeholders. Fetch failures
    produce the default profile with an explanatory ``teams_this_year``.
    """
    lineup_entry = lineup_entry or {}
    pid = text_or(player_id)
    if not pid or pid.startswith(OWN_GOAL_PREFIX):
        LOGGER.warning("Skipping lineup entry without a usable player id (%r)", player_id)
        return None

    settings = settings or client.settings
    team_id = optional_text(team_id_in_match)
    profile = _default_profile(pid, team_id, match, lineup_entry)

    try:
        player = client.get_player(pid)
    except APINotFoundError as exc:
        LOGGER.error("Player %s not found: %s", pid, exc)
        profile.teams_this_year = "Not found (API)"
        return profile
    except APIClientError as exc:
        LOGGER.error("Fetching player %s failed: %s", pid, exc)
        profile.teams_this_year = f"Error fetching player {pid}"
        return profile

    context_team_name = resolve_context_team_name(team_id, match, lineup_entry)
    lookup = build_category_lookup(player.get("teams"), settings.current_season_id)
    profile.stats = aggregate_season(
        player.get("matches"),
        settings.current_season_id,
        settings.previous_season_id,
        context_team_name,
        lookup,
    )

    full_name = f"{text_or(player.get('first_name'))} {text_or(player.get('last_name'))}".strip()
    profile.name = text_or(lineup_entry.get("player_name")) or full_name or profile.name
    profile.birth_year = text_or(player.get("birthyear"), "N/A")
    profile.teams_this_year = "\n".join(
        teams_this_year(player, settings.current_season_id, context_team_name)
    )
    profile.is_captain_in_match = text_or(lineup_entry.get("captain")) in CAPTAIN_FLAGS
    profile.bio = {key: player.get(key) for key in BIO_FIELDS}
    return profile


def lineup_sort_key(profile: PlayerProfile, match: Mapping[str, Any]) -> tuple:
    """
    Order by side (home, away, other), then shirt number, then name.
    """
    team_a = optional_text(match.get("team_A_id"))
    team_b = optional_text(match.get("team_B_id"))
    if profile.team_id_in_match is not None and profile.team_id_in_match == team_a:
        side = 1
    elif profile.team_id_in_match is not None and profile.team_id_in_match == team_b:
        side = 2
    else:
        side = 3
    number = parse_int(profile.shirt_number)
    return (side, number is None, number or 0, profile.name or "")


def lineup_goal_totals(profiles: Sequence[PlayerProfile], match: Mapping[str, Any]) -> Dict[str, int]:
    """
    Sum each side's season goals for the team they play for in this match.
    """
    team_a = optional_text(match.get("team_A_id"))
    team_b = optional_text(match.get("team_B_id"))
    totals = {"team_A": 0, "team_B": 0}
    for profile in profiles:
        goals = profile.stats.goals_for_this_specific_team_in_season
        if profile.team_id_in_match is not None and profile.team_id_in_match == team_a:
            totals["team_A"] += goals
        elif profile.team_id_in_match is not None and profile.team_id_in_match == team_b:
            totals["team_B"] += goals
    return totals
