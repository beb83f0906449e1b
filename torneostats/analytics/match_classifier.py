"""
Classify a single match record into a season bucket and resolve its outcome.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..models import (
    NO_OPPONENT,
    UNKNOWN_LEAGUE,
    UNKNOWN_TEAM,
    ClassifiedMatch,
    MatchDetail,
    MatchRecord,
    MatchResult,
    SeasonBucket,
)
from ..parsing import optional_text, parse_int, text_or, to_int

LOGGER = logging.getLogger(__name__)

FIXTURE_STATUS = "Fixture"
NO_WINNER_SENTINELS = frozenset({"", "-", "0"})


@dataclass(frozen=True)
class MatchSide:
    opponent_id: Optional[str]
    opponent_name: str
    player_team_score: str
    opponent_score: str
    resolved: bool = True


def resolve_season_bucket(
    record: MatchRecord, current_season_id: Any, previous_season_id: Any
) -> SeasonBucket:
    season = record.season_id
    if season is None:
        return SeasonBucket.IGNORED
    if season == optional_text(current_season_id):
        return SeasonBucket.CURRENT
    if season == optional_text(previous_season_id):
        return SeasonBucket.PREVIOUS
    return SeasonBucket.IGNORED


def resolve_side(record: MatchRecord, player_team_id: Optional[str]) -> MatchSide:
    """
    Work out which side of the fixture the player's team occupied.
    """
    if player_team_id is not None and player_team_id == record.team_A_id:
        return MatchSide(
            opponent_id=record.team_B_id,
            opponent_name=text_or(record.team_B_name, NO_OPPONENT),
            player_team_score=record.fs_A or "",
            opponent_score=record.fs_B or "",
        )
    if player_team_id is not None and player_team_id == record.team_B_id:
        return MatchSide(
            opponent_id=record.team_A_id,
            opponent_name=text_or(record.team_A_name, NO_OPPONENT),
            player_team_score=record.fs_B or "",
            opponent_score=record.fs_A or "",
        )
    return MatchSide(
        opponent_id=None,
        opponent_name=NO_OPPONENT,
        player_team_score="",
        opponent_score="",
        resolved=False,
    )


def resolve_result(
    status: Optional[str],
    winner_id: Optional[str],
    player_team_id: Optional[str],
    opponent_id: Optional[str],
    player_team_score: Any,
    opponent_score: Any,
) -> MatchResult:
    """
    Resolve the outcome from the player's team perspective.

    Rules are applied in priority order: an unplayed fixture, then an explicit
    winner id, then a comparison of the final scores. Anything left undecided
    is a draw.
    """
    if status == FIXTURE_STATUS:
        return MatchResult.FIXTURE

    if winner_id is not None and winner_id not in NO_WINNER_SENTINELS:
        if winner_id == player_team_id:
            return MatchResult.WIN
        if opponent_id is not None and winner_id == opponent_id:
            return MatchResult.LOSS
        return MatchResult.DRAW

    own = parse_int(player_team_score)
    other = parse_int(opponent_score)
    if own is None or other is None:
        return MatchResult.DRAW
    if own > other:
        return MatchResult.WIN
    if own < other:
        return MatchResult.LOSS
    return MatchResult.DRAW


def resolve_league_name(
    record: MatchRecord, category_lookup: Optional[Mapping[str, str]] = None
) -> str:
    if category_lookup and record.team_id is not None:
        league = category_lookup.get(record.team_id)
        if league:
            return league
    return text_or(record.competition_name) or text_or(record.category_name) or UNKNOWN_LEAGUE


def display_key(team_name: str, league_name: str) -> str:
    return f"{team_name} ({league_name})"


def classify_match(
    record: Any,
    player_team_id: Any = None,
    current_season_id: Any = None,
    previous_season_id: Any = None,
    category_lookup: Optional[Mapping[str, str]] = None,
) -> ClassifiedMatch:
    """
    Classify one match record for the season aggregation.

    ``player_team_id`` defaults to the team id carried by the record itself.
    """
    record = MatchRecord.from_payload(record)
    bucket = resolve_season_bucket(record, current_season_id, previous_season_id)
    if bucket is SeasonBucket.IGNORED:
        return ClassifiedMatch(bucket=bucket)

    goals = to_int(record.player_goals)
    if bucket is SeasonBucket.PREVIOUS:
        return ClassifiedMatch(bucket=bucket, player_goals=goals)

    team_id = optional_text(player_team_id) if player_team_id is not None else record.team_id
    side = resolve_side(record, team_id)
    if not side.resolved:
        LOGGER.warning(
            "Team %s not found on either side of match on %s (%s vs %s)",
            team_id,
            record.date,
            record.team_A_id,
            record.team_B_id,
        )

    team_name = text_or(record.team_name, UNKNOWN_TEAM)
    league_name = resolve_league_name(record, category_lookup)
    detail = MatchDetail(
        date=record.date,
        time=record.time or "",
        player_team_name=team_name,
        opponent_name=side.opponent_name,
        player_team_score=side.player_team_score,
        opponent_score=side.opponent_score,
        result=resolve_result(
            record.status,
            record.winner_id,
            team_id,
            side.opponent_id,
            side.player_team_score,
            side.opponent_score,
        ),
        status=record.status,
        competition_name=record.competition_name or "",
        category_name=record.category_name or "",
        group_name=record.group_name or "",
        league_name=league_name,
        display_key=display_key(team_name, league_name),
    )
    return ClassifiedMatch(
        bucket=bucket,
        detail=detail,
        player_goals=goals,
        player_warnings=to_int(record.player_warnings),
        player_suspensions=to_int(record.player_suspensions),
    )
