"""
FastAPI app exposing player season statistics as JSON.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from torneostats.exceptions import APIClientError, APINotFoundError, APIRateLimitError
from torneostats.services import data_fetch

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Torneostats API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    status: str
    current_season_id: str
    previous_season_id: str
    offline_mode: bool


class MatchPlayersResponse(BaseModel):
    match_id: Any
    team_A_name: Optional[str] = None
    team_B_name: Optional[str] = None
    lineup_goals: Dict[str, int]
    players: List[Dict[str, Any]]


def _http_error(exc: APIClientError) -> HTTPException:
    if isinstance(exc, APIRateLimitError):
        return HTTPException(status_code=429, detail=str(exc))
    if isinstance(exc, APINotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    settings = data_fetch.get_settings()
    return HealthResponse(
        status="ok",
        current_season_id=settings.current_season_id,
        previous_season_id=settings.previous_season_id,
        offline_mode=settings.offline_mode,
    )


@app.get("/players/{player_id}/season-stats")
def player_season_stats(
    player_id: str,
    team_name: Optional[str] = Query(None, description="Context team the detail list is filtered to."),
    team_id: Optional[str] = Query(None, description="Context team id, used when team_name is not given."),
) -> Dict[str, Any]:
    try:
        stats = data_fetch.fetch_player_season_stats(player_id, team_name, team_id=team_id)
    except APIClientError as exc:
        LOGGER.warning("Season stats for player %s unavailable: %s", player_id, exc)
        raise _http_error(exc) from exc
    return {
        "player_id": player_id,
        "team_name": team_name,
        "team_id": team_id,
        "stats": stats.to_dict(),
    }


@app.get("/matches/{match_id}/players", response_model=MatchPlayersResponse)
def match_players(match_id: str) -> MatchPlayersResponse:
    try:
        result = data_fetch.fetch_match_player_profiles(match_id)
    except APIClientError as exc:
        LOGGER.warning("Lineup profiles for match %s unavailable: %s", match_id, exc)
        raise _http_error(exc) from exc
    return MatchPlayersResponse(
        match_id=result["match_id"],
        team_A_name=result["team_A_name"],
        team_B_name=result["team_B_name"],
        lineup_goals=result["lineup_goals"],
        players=[profile.to_dict() for profile in result["players"]],
    )
