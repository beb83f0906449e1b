"""
Coercion helpers for loosely typed API payloads.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional


def parse_int(value: Any) -> Optional[int]:
    """
    Parse a numeric-as-string value, returning ``None`` when it is not numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (OverflowError, ValueError):
        return None


def to_int(value: Any, default: int = 0) -> int:
    parsed = parse_int(value)
    return default if parsed is None else parsed


def text_or(value: Any, default: str = "") -> str:
    """
    Return ``value`` as text, or ``default`` when it is missing or blank.
    """
    if value is None:
        return default
    text = str(value)
    return text if text.strip() else default


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_match_datetime(date_str: Optional[str], time_str: Optional[str] = None) -> Optional[datetime]:
    """
    Parse ``YYYY-MM-DD`` plus an optional ``HH:MM[:SS]`` kick-off time.
    """
    if not date_str:
        return None
    date_str = str(date_str).strip()
    time_str = str(time_str or "").strip().split(".")[0]
    if time_str:
        combined = f"{date_str} {time_str}"
        for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"):
            try:
                return datetime.strptime(combined, fmt)
            except ValueError:
                continue
    try:
        return datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError:
        return None
