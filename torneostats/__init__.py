"""
Season statistics for Torneopal player match histories.
"""

from .config import APISettings
from .exceptions import APIClientError, APINotFoundError, APIRateLimitError, APIResponseError
from .models import MatchDetail, MatchRecord, MatchResult, SeasonStatistics
from .analytics import aggregate_season, classify_match

__all__ = [
    "APISettings",
    "APIClientError",
    "APINotFoundError",
    "APIRateLimitError",
    "APIResponseError",
    "MatchDetail",
    "MatchRecord",
    "MatchResult",
    "SeasonStatistics",
    "aggregate_season",
    "classify_match",
    "TorneopalClient",
]


def __getattr__(name):
    if name == "TorneopalClient":
        from .clients.torneopal import TorneopalClient

        return TorneopalClient
    raise AttributeError(f"module 'torneostats' has no attribute '{name}'")
