"""Command-line entrypoint.

Kept small so `main.py` can remain a thin wrapper.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from quorumclock.clock_runner import start_clock
from quorumclock.config import load_time_settings, save_time_settings
from quorumclock.errors import ClockStateError, SettingsError
from quorumclock.orchestrator import get_date_time
from time_api_client import TimeApiClient

LOG = logging.getLogger("quorumclock")

FALLBACK_NOTICE = "[Fallback] Using software clock"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="quorumclock",
        description="Report the current UTC time agreed on by several web time sources.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: from settings, else 5).",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        default=None,
        help="Query the time sources concurrently.",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the effective --timeout/--parallel values in settings.json.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging (DEBUG).",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one reconciliation and print the result."""
    args = parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        settings = load_time_settings().with_overrides(
            timeout=args.timeout, parallel=args.parallel
        )
    except SettingsError as exc:
        raise SystemExit(f"quorumclock: invalid settings: {exc}")

    if args.save:
        save_time_settings(settings)
        LOG.info("Saved timeout=%s parallel=%s", settings.timeout, settings.parallel)

    runner = start_clock()
    client = TimeApiClient(timeout=settings.timeout)
    LOG.info(
        "Querying %s", ", ".join(source.name for source in settings.sources)
    )

    try:
        result = get_date_time(
            runner, client, settings.sources, parallel=settings.parallel
        )
    except ClockStateError as exc:
        LOG.critical("Cannot report time: %s", exc)
        return 2

    if result.from_fallback:
        print(FALLBACK_NOTICE)
    print(f"Final UTC Time: {result.timestamp.format()}")
    return 0
