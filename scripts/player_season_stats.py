#!/usr/bin/env python
"""
CLI entrypoint printing season statistics for a player or a match lineup.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from torneostats.exceptions import APIClientError
from torneostats.services import data_fetch


LOGGER = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Aggregate Torneopal player match histories into season statistics.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--player", type=str, help="Player id to aggregate.")
    target.add_argument("--match", type=str, help="Match id whose whole lineup is aggregated.")
    parser.add_argument(
        "--team-name",
        type=str,
        help="Context team name for --player (matches for other teams are listed separately).",
    )
    parser.add_argument(
        "--team-id",
        type=str,
        help="Context team id for --player, used when --team-name is not given.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, str(args.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.player:
            stats = data_fetch.fetch_player_season_stats(
                args.player, args.team_name, team_id=args.team_id
            )
            output = stats.to_dict()
        else:
            result = data_fetch.fetch_match_player_profiles(args.match)
            result["players"] = [profile.to_dict() for profile in result["players"]]
            output = result
    except APIClientError as exc:
        LOGGER.error("Fetching data failed: %s", exc, exc_info=level <= logging.DEBUG)
        return 1

    json.dump(output, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
