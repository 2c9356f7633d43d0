from __future__ import annotations

import asyncio

import aiohttp
import pytest
from aiohttp.test_utils import TestServer

from pytraveller._sse import decode_text
from pytraveller.config import TravellerConfig
from pytraveller.ingestion.stream import parse_current_value
from pytraveller.render.layer import RenderFrame
from pytraveller.simulator import (
    BROADCASTER_KEY,
    PositionBroadcaster,
    SimulatedPosition,
    create_app,
    format_sse_message,
    wrap_around,
)
from pytraveller.viewer import TravellerViewer


def test_wrap_around() -> None:
    assert wrap_around(10.0, -90.0, 90.0) == 10.0
    assert wrap_around(-90.5, -90.0, 90.0) == 90.0
    assert wrap_around(180.5, -180.0, 180.0) == -180.0


def test_format_sse_message() -> None:
    message = format_sse_message("current-value", {"lat": 1.5, "lon": -2.0}, retry_ms=15000)

    assert message == 'event: current-value\nretry: 15000\ndata: {"data":{"lat":1.5,"lon":-2.0}}\n\n'


def test_formatted_message_decodes_to_sample() -> None:
    position = SimulatedPosition(lat=51.4, lon=-0.4, alt=1000.0, timestamp=1700000000)

    events = decode_text(format_sse_message("current-value", position.as_payload()))

    assert len(events) == 1
    sample = parse_current_value(events[0].data)
    assert (sample.lat, sample.lon, sample.alt) == (51.4, -0.4, 1000.0)
    assert sample.extras == {"timestamp": 1700000000}


def test_position_advances_and_wraps() -> None:
    position = SimulatedPosition(lat=-89.95, lon=10.0, alt=1000.0, timestamp=0)

    position.advance(0.08)

    assert position.lat == 90.0
    assert position.lon == pytest.approx(9.92)
    assert position.alt == 1000.0
    assert position.timestamp > 0


def test_tick_is_idle_without_sessions() -> None:
    broadcaster = PositionBroadcaster(SimulatedPosition(lat=10.0, lon=10.0))

    broadcaster.tick()

    assert broadcaster.position.lat == 10.0
    assert broadcaster.position.lon == 10.0


def test_tick_delivers_one_step_to_every_session() -> None:
    broadcaster = PositionBroadcaster(SimulatedPosition(lat=10.0, lon=10.0), step=1.0)
    first = broadcaster.register(7.0)
    second = broadcaster.register(8.0)

    broadcaster.tick()

    assert first.queue.get_nowait()["lat"] == 9.0
    assert second.queue.get_nowait()["lon"] == 9.0

    broadcaster.unregister(first)
    broadcaster.unregister(first)
    assert broadcaster.sessions == [second]


def test_slow_session_drops_oldest_payload() -> None:
    broadcaster = PositionBroadcaster(SimulatedPosition(lat=10.0, lon=10.0), step=0.01)
    session = broadcaster.register(7.0)

    for _ in range(session.queue.maxsize + 1):
        broadcaster.tick()

    assert session.queue.qsize() == session.queue.maxsize
    assert session.queue.get_nowait()["lat"] == pytest.approx(9.98)


@pytest.mark.asyncio
async def test_health_endpoint() -> None:
    async with TestServer(create_app()) as server, aiohttp.ClientSession() as session:
        async with session.get(server.make_url("/health")) as resp:
            assert resp.status == 200
            assert resp.headers["Access-Control-Allow-Origin"] == "*"


async def _wait_for_sessions(app, count: int) -> None:
    async def poll() -> None:
        while len(app[BROADCASTER_KEY].sessions) != count:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout=5)


@pytest.mark.asyncio
async def test_sse_response_headers() -> None:
    async with TestServer(create_app()) as server, aiohttp.ClientSession() as session:
        async with session.get(server.make_url("/sse"), params={"query": "7"}) as resp:
            assert resp.status == 200
            assert resp.content_type == "text/event-stream"
            assert resp.headers["Cache-Control"] == "no-cache"
            assert resp.headers["Access-Control-Allow-Origin"] == "*"


@pytest.mark.asyncio
async def test_idle_stream_writes_keepalive() -> None:
    app = create_app(tick_interval=60, keepalive_interval=0.05)
    async with TestServer(app) as server, aiohttp.ClientSession() as session:
        async with session.get(server.make_url("/sse")) as resp:
            line = await asyncio.wait_for(resp.content.readline(), timeout=5)

    assert line == b":keepalive\n"


@pytest.mark.asyncio
async def test_non_numeric_query_is_treated_as_zero() -> None:
    app = create_app(tick_interval=60)
    async with TestServer(app) as server, aiohttp.ClientSession() as session:
        async with session.get(server.make_url("/sse"), params={"query": "abc"}):
            await _wait_for_sessions(app, 1)

            assert app[BROADCASTER_KEY].sessions[0].value == 0.0


@pytest.mark.asyncio
async def test_session_unregisters_after_client_disconnects() -> None:
    app = create_app(tick_interval=60, keepalive_interval=0.02)
    async with TestServer(app) as server:
        async with aiohttp.ClientSession() as session:
            async with session.get(server.make_url("/sse"), params={"query": "7"}):
                await _wait_for_sessions(app, 1)

        await _wait_for_sessions(app, 0)


@pytest.mark.asyncio
async def test_viewer_follows_simulated_feed() -> None:
    frames: list[RenderFrame] = []
    async with TestServer(create_app(tick_interval=0.01)) as server:
        config = TravellerConfig(endpoint_template=str(server.make_url("/sse")) + "?query={query}")
        async with TravellerViewer(config, on_frame=frames.append) as viewer:
            viewer.subscribe()

            async def wait_for_frames() -> None:
                while len(frames) < 3:
                    await asyncio.sleep(0.01)

            await asyncio.wait_for(wait_for_frames(), timeout=5)

            first = frames[0]
            assert first.view_state.latitude == pytest.approx(51.397487)
            assert first.view_state.longitude == pytest.approx(-0.421004)
            assert first.view_state.zoom == 12
            assert first.layer is not None
            assert first.layer.positions()[0][2] == 1000.0

            assert viewer.view_state == first.view_state
            assert len(viewer.store.snapshot()) == 1
            latest = viewer.store.latest
            assert viewer.layer is not None
            assert viewer.layer.positions() == [(latest.lon, latest.lat, latest.alt)]
            assert latest.lat < first.view_state.latitude
