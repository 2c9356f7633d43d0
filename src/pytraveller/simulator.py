"""Position feed simulator.

An aiohttp.web server that moves a single position a fixed step every tick
and pushes it to every subscriber as a ``current-value`` event. Useful for
demos and end-to-end tests of the viewer.
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import json
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

from aiohttp import web

from pytraveller._constants import CURRENT_VALUE_EVENT, DEFAULT_LATITUDE, DEFAULT_LONGITUDE

_logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.025
DEFAULT_STEP = 0.08
DEFAULT_KEEPALIVE_INTERVAL = 30.0
DEFAULT_RETRY_MS = 15000
DEFAULT_ALTITUDE = 1000.0

_KEEPALIVE = b":keepalive\n"
_SESSION_QUEUE_SIZE = 64
_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def wrap_around(value: float, low: float, high: float) -> float:
    """Jump to the opposite bound once *value* leaves ``[low, high]``."""
    if value < low:
        return high
    if value > high:
        return low
    return value


def format_sse_message(event_type: str, data: Any, *, retry_ms: int = DEFAULT_RETRY_MS) -> str:
    """Frame ``{"data": data}`` as one event-stream message."""
    body = json.dumps({"data": data}, separators=(",", ":"))
    return f"event: {event_type}\nretry: {retry_ms}\ndata: {body}\n\n"


@dataclasses.dataclass
class SimulatedPosition:
    lat: float = DEFAULT_LATITUDE
    lon: float = DEFAULT_LONGITUDE
    alt: float = DEFAULT_ALTITUDE
    timestamp: int = dataclasses.field(default_factory=lambda: int(time.time()))

    def advance(self, step: float) -> None:
        self.lat = wrap_around(self.lat - step, -90.0, 90.0)
        self.lon = wrap_around(self.lon - step, -180.0, 180.0)
        self.timestamp = int(time.time())

    def as_payload(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(eq=False)
class StreamSession:
    """One connected subscriber."""

    value: float
    queue: asyncio.Queue[dict[str, Any] | None] = dataclasses.field(
        default_factory=lambda: asyncio.Queue(maxsize=_SESSION_QUEUE_SIZE)
    )

    def offer(self, payload: dict[str, Any] | None) -> None:
        # Slow subscribers lose their oldest pending position, never the newest.
        if self.queue.full():
            self.queue.get_nowait()
        self.queue.put_nowait(payload)


class PositionBroadcaster:
    """Advances the shared position and fans it out to all sessions."""

    def __init__(
        self,
        position: SimulatedPosition | None = None,
        *,
        step: float = DEFAULT_STEP,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        self.position = position or SimulatedPosition()
        self._step = step
        self._tick_interval = tick_interval
        self._sessions: list[StreamSession] = []

    @property
    def sessions(self) -> list[StreamSession]:
        return list(self._sessions)

    def register(self, value: float) -> StreamSession:
        session = StreamSession(value=value)
        self._sessions.append(session)
        return session

    def unregister(self, session: StreamSession) -> None:
        with contextlib.suppress(ValueError):
            self._sessions.remove(session)

    def tick(self) -> None:
        """Move the position one step and deliver it; idle while nobody listens."""
        if not self._sessions:
            return
        self.position.advance(self._step)
        payload = self.position.as_payload()
        for session in self._sessions:
            session.offer(payload)

    def shutdown(self) -> None:
        for session in self._sessions:
            session.offer(None)

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            self.tick()


@dataclasses.dataclass(frozen=True)
class StreamSettings:
    keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL
    retry_ms: int = DEFAULT_RETRY_MS


BROADCASTER_KEY = web.AppKey("broadcaster", PositionBroadcaster)
SETTINGS_KEY = web.AppKey("stream_settings", StreamSettings)


def _parse_query_value(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        return 0.0


async def handle_health(_request: web.Request) -> web.Response:
    return web.Response(headers=_CORS_HEADERS)


async def handle_sse(request: web.Request) -> web.StreamResponse:
    broadcaster = request.app[BROADCASTER_KEY]
    settings = request.app[SETTINGS_KEY]

    response = web.StreamResponse(headers={"Cache-Control": "no-cache", "Connection": "keep-alive", **_CORS_HEADERS})
    response.content_type = "text/event-stream"
    await response.prepare(request)

    session = broadcaster.register(_parse_query_value(request.query.get("query", "")))
    _logger.info("New stream session query=%s peer=%s", session.value, request.remote)
    try:
        while True:
            try:
                payload = await asyncio.wait_for(session.queue.get(), settings.keepalive_interval)
            except TimeoutError:
                await response.write(_KEEPALIVE)
                continue
            if payload is None:
                break
            message = format_sse_message(CURRENT_VALUE_EVENT, payload, retry_ms=settings.retry_ms)
            await response.write(message.encode("utf-8"))
    except ConnectionResetError:
        _logger.info("Stream session disconnected peer=%s", request.remote)
    finally:
        broadcaster.unregister(session)
    return response


async def _broadcast_ctx(app: web.Application) -> AsyncIterator[None]:
    task = asyncio.create_task(app[BROADCASTER_KEY].run())
    yield
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


async def _close_sessions(app: web.Application) -> None:
    app[BROADCASTER_KEY].shutdown()


def create_app(
    *,
    position: SimulatedPosition | None = None,
    step: float = DEFAULT_STEP,
    tick_interval: float = DEFAULT_TICK_INTERVAL,
    keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL,
    retry_ms: int = DEFAULT_RETRY_MS,
) -> web.Application:
    """Build the simulator application (``/health`` and ``/sse``)."""
    app = web.Application()
    app[BROADCASTER_KEY] = PositionBroadcaster(position, step=step, tick_interval=tick_interval)
    app[SETTINGS_KEY] = StreamSettings(keepalive_interval=keepalive_interval, retry_ms=retry_ms)
    app.router.add_get("/health", handle_health)
    app.router.add_get("/sse", handle_sse)
    app.cleanup_ctx.append(_broadcast_ctx)
    app.on_shutdown.append(_close_sessions)
    return app
