"""
Data structures shared by the classifier, aggregator and services.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .parsing import optional_text

UNKNOWN_TEAM = "unknown team"
UNKNOWN_LEAGUE = "unknown league"
NO_OPPONENT = "N/A"


class MatchResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"
    FIXTURE = "fixture"


class SeasonBucket(str, Enum):
    CURRENT = "current"
    PREVIOUS = "previous"
    IGNORED = "ignored"


@dataclass(frozen=True)
class MatchRecord:
    """
    One entry of a player's ``matches`` list as returned by ``getPlayer``.

    Every field is optional and kept as the raw string sent by the API.
    """

    season_id: Optional[str] = None
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    team_A_id: Optional[str] = None
    team_A_name: Optional[str] = None
    team_B_id: Optional[str] = None
    team_B_name: Optional[str] = None
    fs_A: Optional[str] = None
    fs_B: Optional[str] = None
    winner_id: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    player_goals: Optional[str] = None
    player_warnings: Optional[str] = None
    player_suspensions: Optional[str] = None
    competition_name: Optional[str] = None
    category_name: Optional[str] = None
    group_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "MatchRecord":
        if isinstance(payload, MatchRecord):
            return payload
        if not isinstance(payload, Mapping):
            return cls()
        values = {item.name: optional_text(payload.get(item.name)) for item in fields(cls)}
        return cls(**values)


@dataclass(frozen=True)
class MatchDetail:
    date: Optional[str]
    time: str
    player_team_name: str
    opponent_name: str
    player_team_score: str
    opponent_score: str
    result: MatchResult
    status: Optional[str]
    competition_name: str = ""
    category_name: str = ""
    group_name: str = ""
    league_name: str = UNKNOWN_LEAGUE
    display_key: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "time": self.time,
            "playerTeamNameInPastMatch": self.player_team_name,
            "opponentName": self.opponent_name,
            "playerTeamScore": self.player_team_score,
            "opponentScore": self.opponent_score,
            "resultIndicator": self.result.value,
            "status": self.status,
            "competition_name": self.competition_name,
            "category_name": self.category_name,
            "group_name": self.group_name,
            "leagueName": self.league_name,
            "displayKey": self.display_key,
        }


@dataclass(frozen=True)
class ClassifiedMatch:
    """
    Outcome of classifying a single match record.

    ``detail`` and the disciplinary counters are only populated for the
    current season; previous-season matches carry goals only.
    """

    bucket: SeasonBucket
    detail: Optional[MatchDetail] = None
    player_goals: int = 0
    player_warnings: int = 0
    player_suspensions: int = 0


@dataclass
class SeasonStatistics:
    games_played_this_year: int = 0
    goals_this_year: int = 0
    warnings_this_year: int = 0
    suspensions_this_year: int = 0
    games_played_last_season: int = 0
    goals_scored_last_season: int = 0
    goals_for_this_specific_team_in_season: int = 0
    games_by_team_this_year: Dict[str, int] = field(default_factory=dict)
    goals_by_team_this_year: Dict[str, int] = field(default_factory=dict)
    past_matches_details: List[MatchDetail] = field(default_factory=list)
    other_teams_detailed_matches: Dict[str, List[MatchDetail]] = field(default_factory=dict)
    current_context_team_display_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialise using the camelCase keys the match view reads.
        """
        return {
            "gamesPlayedThisYear": self.games_played_this_year,
            "goalsThisYear": self.goals_this_year,
            "warningsThisYear": self.warnings_this_year,
            "suspensionsThisYear": self.suspensions_this_year,
            "gamesPlayedLastSeason": self.games_played_last_season,
            "goalsScoredLastSeason": self.goals_scored_last_season,
            "goalsForThisSpecificTeamInSeason": self.goals_for_this_specific_team_in_season,
            "gamesByTeamThisYear": dict(self.games_by_team_this_year),
            "goalsByTeamThisYear": dict(self.goals_by_team_this_year),
            "pastMatchesDetails": [detail.to_dict() for detail in self.past_matches_details],
            "otherTeamsDetailedMatches": {
                key: [detail.to_dict() for detail in details]
                for key, details in self.other_teams_detailed_matches.items()
            },
            "currentContextTeamDisplayKey": self.current_context_team_display_key,
        }
