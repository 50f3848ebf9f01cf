#!/usr/bin/env python3
"""hltb-lookup - command line entry point.

Usage:
    hltb-lookup "Portal 2" --app-id 620
    hltb-lookup "Dark Souls" --json
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

from hltb_lookup.config import config
from hltb_lookup.core.logging import logger, setup_logging
from hltb_lookup.integrations.hltb_api import HLTBClient
from hltb_lookup.integrations.hltb_models import to_result
from hltb_lookup.version import __app_name__, __version__

__all__ = ["main"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=__app_name__, description="Look up HowLongToBeat completion times")
    parser.add_argument("title", help="Game title to search for")
    parser.add_argument("--app-id", type=int, default=None, help="Steam app id used to confirm ambiguous matches")
    parser.add_argument("--json", action="store_true", help="Print the raw match as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Runs a single lookup and prints the result.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Process exit code: 0 when a match was found, 1 otherwise.
    """
    args = _build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.debug else config.LOG_LEVEL)

    client = HLTBClient()
    match = client.search_best_match(args.title, args.app_id)
    if match is None:
        logger.info("No HLTB entry found for '%s'", args.title)
        print(f"No HowLongToBeat entry found for '{args.title}'")
        return 1

    if args.json:
        print(json.dumps(asdict(match), indent=2, ensure_ascii=False))
        return 0

    result = to_result(match)
    print(f"{result.game_name} (HLTB #{match.game_id})")
    print(f"  Main Story:    {result.main_story:.1f} h")
    print(f"  Main + Extras: {result.main_extras:.1f} h")
    print(f"  Completionist: {result.completionist:.1f} h")
    return 0


if __name__ == "__main__":
    sys.exit(main())
