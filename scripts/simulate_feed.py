#!/usr/bin/env python3
"""Serve a simulated position feed.

Starts the pytraveller simulator: ``GET /sse?query=<n>`` streams a position
that moves diagonally every tick as ``current-value`` events, and
``GET /health`` answers with an empty 200.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from aiohttp import web  # noqa: E402

from pytraveller.simulator import (  # noqa: E402
    DEFAULT_KEEPALIVE_INTERVAL,
    DEFAULT_RETRY_MS,
    DEFAULT_STEP,
    DEFAULT_TICK_INTERVAL,
    create_app,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve a simulated position feed over server-sent events.",
    )
    parser.add_argument("--host", default="localhost", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=8080, help="Port to bind.")
    parser.add_argument(
        "--tick",
        type=float,
        default=DEFAULT_TICK_INTERVAL,
        help="Seconds between position updates.",
    )
    parser.add_argument(
        "--step",
        type=float,
        default=DEFAULT_STEP,
        help="Degrees subtracted from lat and lon on every tick.",
    )
    parser.add_argument(
        "--keepalive",
        type=float,
        default=DEFAULT_KEEPALIVE_INTERVAL,
        help="Seconds of silence before a keepalive comment is sent.",
    )
    parser.add_argument(
        "--retry-ms",
        type=int,
        default=DEFAULT_RETRY_MS,
        help="Reconnection time announced to clients.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    app = create_app(
        step=args.step,
        tick_interval=args.tick,
        keepalive_interval=args.keepalive,
        retry_ms=args.retry_ms,
    )
    web.run_app(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
