#!/usr/bin/env python3
"""Follow a position feed from the command line.

Subscribes with :class:`pytraveller.TravellerViewer`, prints every render
frame (camera and tracked position) and can write the last frame as a
standalone pydeck HTML page.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pytraveller import RenderFrame, TravellerConfig, TravellerViewer  # noqa: E402
from pytraveller._constants import DEFAULT_ENDPOINT_TEMPLATE, DEFAULT_QUERY  # noqa: E402
from pytraveller.render.deck import write_html  # noqa: E402

_LOG = logging.getLogger("follow_feed")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Follow a server-sent position feed and print render frames.",
    )
    parser.add_argument(
        "--endpoint",
        default=DEFAULT_ENDPOINT_TEMPLATE,
        help="Stream URL template containing '{query}'.",
    )
    parser.add_argument("--query", default=DEFAULT_QUERY, help="Feed identifier.")
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Seconds to follow the feed (0 = until Ctrl+C).",
    )
    parser.add_argument(
        "--size-scale",
        type=float,
        default=None,
        help="Size multiplier for the rendered model.",
    )
    parser.add_argument(
        "--jump",
        action="store_true",
        help="Trigger the preset jump once the first frame arrived.",
    )
    parser.add_argument(
        "--html",
        type=Path,
        default=None,
        help="Write the last frame to this HTML file on exit.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_frame(frame: RenderFrame) -> None:
    view = frame.view_state
    if frame.layer is None:
        print(f"[follow] camera=({view.latitude:.5f}, {view.longitude:.5f}) z={view.zoom} tracked=none")
        return
    lon, lat, alt = frame.layer.positions()[0]
    print(
        f"[follow] camera=({view.latitude:.5f}, {view.longitude:.5f}) z={view.zoom} "
        f"tracked=({lat:.5f}, {lon:.5f}, {alt:.1f})"
    )


async def _follow(args: argparse.Namespace) -> RenderFrame:
    overrides = {} if args.size_scale is None else {"size_scale": args.size_scale}
    config = TravellerConfig(endpoint_template=args.endpoint, query=args.query, **overrides)
    first_frame = asyncio.Event()

    def on_frame(frame: RenderFrame) -> None:
        _print_frame(frame)
        first_frame.set()

    def on_error(connection, exc: BaseException) -> None:
        _LOG.info("stream %s reported: %s", connection.connection_id, exc)

    async with TravellerViewer(config, on_frame=on_frame, on_error=on_error) as viewer:
        viewer.subscribe()
        if args.jump:
            await first_frame.wait()
            viewer.jump_to_preset()
        if args.duration > 0:
            await asyncio.sleep(args.duration)
        else:
            await asyncio.Event().wait()
        return viewer.render_frame()


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        frame = asyncio.run(_follow(args))
    except KeyboardInterrupt:
        return 0

    if args.html is not None:
        path = write_html(frame, args.html)
        print(f"[follow] wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
