"""
Configuration helpers for the Torneopal client and season aggregation.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_ENV_LOADED = False

DEFAULT_CURRENT_SEASON = "2025"
_TRUTHY = {"1", "true", "yes", "on"}


def _ensure_env_loaded() -> None:
    """
    Load environment variables from a .env file if present.
    """
    global _ENV_LOADED  # noqa: PLW0603 - intentional module level state
    if _ENV_LOADED:
        return

    candidates = []
    explicit = os.getenv("TORNEOSTATS_ENV_FILE")
    if explicit:
        candidates.append(Path(explicit))
    cwd_env = Path.cwd() / ".env"
    candidates.append(cwd_env)
    repo_env = Path(__file__).resolve().parents[1] / ".env"
    if repo_env != cwd_env:
        candidates.append(repo_env)

    for path in candidates:
        if not path or not path.exists():
            continue
        try:
            for line in path.read_text().splitlines():
                stripped = line.strip()
                if not stripped or stripped.startswith("#") or "=" not in stripped:
                    continue
                key, value = stripped.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            continue

    _ENV_LOADED = True


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def previous_season_for(season_id: str) -> str:
    try:
        return str(int(season_id) - 1)
    except ValueError:
        return ""


@dataclass(frozen=True)
class APISettings:
    """
    Runtime configuration for the Torneopal API and season boundaries.
    """

    base_url: str = "https://spl.torneopal.net/taso/rest"
    accept_header: str = "json/df8e84j9xtdz269euy3h"
    current_season_id: str = DEFAULT_CURRENT_SEASON
    previous_season_id: str = previous_season_for(DEFAULT_CURRENT_SEASON)
    calls_per_minute: int = 60
    throttle_delay: float = 1.0
    timeout: int = 30
    # Disables rate limiting and the throttle delay for tests and offline runs.
    offline_mode: bool = False

    @classmethod
    def from_env(cls) -> "APISettings":
        """
        Construct settings using environment variables with sensible defaults.
        """
        _ensure_env_loaded()
        current = os.getenv("TORNEOSTATS_CURRENT_SEASON", DEFAULT_CURRENT_SEASON)
        return cls(
            base_url=os.getenv("TORNEOSTATS_BASE_URL", "https://spl.torneopal.net/taso/rest"),
            accept_header=os.getenv("TORNEOSTATS_ACCEPT", "json/df8e84j9xtdz269euy3h"),
            current_season_id=current,
            previous_season_id=os.getenv(
                "TORNEOSTATS_PREVIOUS_SEASON", previous_season_for(current)
            ),
            calls_per_minute=_env_int("TORNEOSTATS_RATE_LIMIT_PER_MINUTE", 60),
            throttle_delay=_env_float("TORNEOSTATS_THROTTLE_DELAY", 1.0),
            timeout=_env_int("TORNEOSTATS_TIMEOUT", 30),
            offline_mode=_env_flag("TORNEOSTATS_OFFLINE"),
        )
