"""
Torneopal (Finnish FA) REST API client.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..config import APISettings
from ..exceptions import APINotFoundError, APIResponseError
from ..http import HTTPClient
from ..models import MatchRecord
from ..rate_limit import RateLimitPolicy

LOGGER = logging.getLogger(__name__)

_OK_STATUSES = {"ok", "OK"}


class TorneopalClient:
    """
    Rate-limited wrappers around the Torneopal endpoints used for player stats.
    """

    def __init__(
        self,
        settings: Optional[APISettings] = None,
        *,
        rate_limiter: Optional[RateLimitPolicy] = None,
    ):
        self.settings = settings or APISettings.from_env()
        self.http = HTTPClient(
            self.settings.base_url,
            headers={"Accept": self.settings.accept_header},
            timeout=self.settings.timeout,
        )
        self.rate_limiter = rate_limiter or RateLimitPolicy(
            calls_per_minute=self.settings.calls_per_minute,
            throttle_delay=self.settings.throttle_delay,
            bypass=self.settings.offline_mode,
        )

    def fetch_api_data(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Call ``endpoint`` and return the decoded body.

        Raises ``APIRateLimitError`` before any network traffic when a limit is
        hit, and ``APIResponseError`` when the body reports a failed call.
        """
        self.rate_limiter.admit(endpoint)
        clean = {key: str(value) for key, value in (params or {}).items() if value is not None}
        LOGGER.debug("GET %s %s", endpoint, clean)
        payload = self.http.request("GET", endpoint, params=clean)
        if not isinstance(payload, dict):
            raise APIResponseError(f"Unexpected response body for {endpoint}.", endpoint=endpoint)
        call = payload.get("call")
        if isinstance(call, dict):
            status = call.get("status")
            if status not in _OK_STATUSES:
                raise APIResponseError(f"API error for {endpoint}: {status}", endpoint=endpoint)
        return payload

    def _fetch_object(self, endpoint: str, key: str, params: Dict[str, Any]) -> Dict[str, Any]:
        payload = self.fetch_api_data(endpoint, params)
        value = payload.get(key)
        if not isinstance(value, dict):
            raise APINotFoundError(
                f"No {key} object in {endpoint} response for {params}.", endpoint=endpoint
            )
        return value

    def get_match(self, match_id: Any) -> Dict[str, Any]:
        """
        Fetch a single match including lineups.
        """
        return self._fetch_object("getMatch", "match", {"match_id": match_id})

    def get_group(
        self, competition_id: Any, category_id: Any, group_id: Any, *, include_matches: bool = True
    ) -> Dict[str, Any]:
        """
        Fetch a group (standings table and optionally its matches).
        """
        if not competition_id or not category_id or not group_id:
            raise APINotFoundError(
                "Competition, category and group ids are required to fetch a group.",
                endpoint="getGroup",
            )
        params = {
            "competition_id": competition_id,
            "category_id": category_id,
            "group_id": group_id,
            "matches": 1 if include_matches else 0,
        }
        return self._fetch_object("getGroup", "group", params)

    def get_team(self, team_id: Any) -> Dict[str, Any]:
        return self._fetch_object("getTeam", "team", {"team_id": team_id})

    def get_team_matches(self, team_id: Any, start_date: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch all matches of a team, by default from the start of the current season.
        """
        if start_date is None:
            start_date = f"{self.settings.current_season_id}-01-01"
        payload = self.fetch_api_data("getMatches", {"team_id": team_id, "start_date": start_date})
        matches = payload.get("matches")
        return matches if isinstance(matches, list) else []

    def get_player(self, player_id: Any) -> Dict[str, Any]:
        return self._fetch_object("getPlayer", "player", {"player_id": player_id})

    def fetch_player_record(self, player_id: Any) -> List[MatchRecord]:
        """
        Fetch a player's match participation history.

        Only the ``matches`` list is returned. Season statistics and lineup
        profiles call ``get_player`` instead because they also need the
        ``teams`` memberships for league names and the bio fields.
        """
        player = self.get_player(player_id)
        matches = player.get("matches")
        if not isinstance(matches, list):
            return []
        return [MatchRecord.from_payload(match) for match in matches]
