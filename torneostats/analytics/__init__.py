"""Season statistics derived from a player's match history."""

from .match_classifier import (
    classify_match,
    display_key,
    resolve_league_name,
    resolve_result,
    resolve_season_bucket,
    resolve_side,
)
from .season_aggregator import aggregate_season, sort_newest_first

__all__ = [
    "aggregate_season",
    "classify_match",
    "display_key",
    "resolve_league_name",
    "resolve_result",
    "resolve_season_bucket",
    "resolve_side",
    "sort_newest_first",
]
