"""
Command-line runner for a single provider search.

Example:
    python -m care_navigator --provider aetna \
        --specialist "Primary Care Physician" --specialist "Orthopedist" \
        --address "350 5th Ave, New York, NY" --lat 40.7484 --lng -73.9857
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from care_navigator.config import AgentSettings
from care_navigator.core.errors import CareNavigatorError
from care_navigator.graph.engine import run_provider_search
from care_navigator.utils.constants import PROVIDER_URLS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="care_navigator",
        description="Find in-network providers on an insurance directory with an LLM-driven browser.",
    )
    parser.add_argument(
        "--provider",
        required=True,
        help=f"Insurance provider ({', '.join(sorted(PROVIDER_URLS))}) or a directory URL",
    )
    parser.add_argument(
        "--specialist",
        dest="specialists",
        action="append",
        required=True,
        help="Specialist type; repeat in order from most general to most specific",
    )
    parser.add_argument("--address", required=True, help="Free-text address to search near")
    parser.add_argument("--lat", type=float, required=True, help="Latitude")
    parser.add_argument("--lng", type=float, required=True, help="Longitude")
    parser.add_argument("--mcp-url", default=None, help="Playwright MCP server SSE endpoint")
    return parser


def print_progress(message: str) -> None:
    print(f"📡 [{datetime.now().strftime('%H:%M:%S')}] {message}", flush=True)


async def run(args: argparse.Namespace) -> int:
    settings = AgentSettings.from_env()
    if args.mcp_url:
        settings = replace(settings, mcp_server_url=args.mcp_url)

    location = {"lat": args.lat, "lng": args.lng, "address": args.address}
    try:
        result = await run_provider_search(
            args.provider,
            args.specialists,
            location,
            on_progress=print_progress,
            settings=settings,
        )
    except (CareNavigatorError, ValueError) as e:
        print(f"\n❌ Search failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.model_dump(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\n🛑 Search interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
