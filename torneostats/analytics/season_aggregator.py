"""
Season aggregation over a player's match history.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..models import MatchDetail, SeasonBucket, SeasonStatistics
from ..parsing import parse_match_datetime
from .match_classifier import classify_match

LOGGER = logging.getLogger(__name__)


def _date_sort_key(detail: MatchDetail) -> Tuple[bool, datetime]:
    # Undated entries compare lowest so they end up last when sorted newest first.
    parsed = parse_match_datetime(detail.date, detail.time)
    return (parsed is not None, parsed or datetime.min)


def sort_newest_first(details: Sequence[MatchDetail]) -> List[MatchDetail]:
    """
    Sort match details by date descending, keeping the input order for ties.
    """
    return sorted(details, key=_date_sort_key, reverse=True)


def aggregate_season(
    matches: Any,
    current_season_id: Any,
    previous_season_id: Any,
    context_team_name: Optional[str],
    category_lookup: Optional[Mapping[str, str]] = None,
) -> SeasonStatistics:
    """
    Build season statistics for one player from their raw match list.

    Matches are bucketed by exact season id equality. Current-season matches
    played for ``context_team_name`` go to ``past_matches_details``; the rest
    are filed per display key under ``other_teams_detailed_matches``.
    Malformed records degrade to zero counts instead of raising.
    """
    stats = SeasonStatistics()
    if not isinstance(matches, (list, tuple)):
        if matches is not None:
            LOGGER.warning("Expected a list of matches, got %s", type(matches).__name__)
        return stats

    for match in matches:
        classified = classify_match(
            match,
            current_season_id=current_season_id,
            previous_season_id=previous_season_id,
            category_lookup=category_lookup,
        )

        if classified.bucket is SeasonBucket.PREVIOUS:
            stats.games_played_last_season += 1
            stats.goals_scored_last_season += classified.player_goals
            continue
        if classified.bucket is not SeasonBucket.CURRENT or classified.detail is None:
            continue

        detail = classified.detail
        key = detail.display_key
        goals = classified.player_goals

        stats.games_played_this_year += 1
        stats.games_by_team_this_year[key] = stats.games_by_team_this_year.get(key, 0) + 1
        stats.goals_this_year += goals
        if goals:
            stats.goals_by_team_this_year[key] = stats.goals_by_team_this_year.get(key, 0) + goals
        stats.warnings_this_year += classified.player_warnings
        stats.suspensions_this_year += classified.player_suspensions

        if context_team_name and detail.player_team_name == context_team_name:
            stats.past_matches_details.append(detail)
            stats.goals_for_this_specific_team_in_season += goals
            if stats.current_context_team_display_key is None:
                stats.current_context_team_display_key = key
        else:
            stats.other_teams_detailed_matches.setdefault(key, []).append(detail)

    stats.past_matches_details = sort_newest_first(stats.past_matches_details)
    stats.other_teams_detailed_matches = {
        key: sort_newest_first(details)
        for key, details in stats.other_teams_detailed_matches.items()
    }
    return stats
