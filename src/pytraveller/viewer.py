"""Composition root wiring the stream to the view and the layer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pytraveller._transport import SourceFactory, aiohttp_source_factory
from pytraveller.config import TravellerConfig
from pytraveller.exceptions import TravellerError
from pytraveller.models.layer import LayerDescriptor
from pytraveller.models.position import PositionSample
from pytraveller.models.view_state import ViewState
from pytraveller.render.layer import RenderFrame, build_layer
from pytraveller.state.store import PositionStore
from pytraveller.state.view import ViewStateController
from pytraveller.stream import Connection, ConnectionState, StreamClient

_logger = logging.getLogger(__name__)


class TravellerViewer:
    """Follow a position feed and keep a render frame up to date.

    Every delivered sample replaces the tracked position, centers the
    camera if it is the first fix, and rebuilds the scenegraph layer.
    :meth:`jump_to_preset` moves the camera independently of the stream.

    Usage::

        async with TravellerViewer(config, on_frame=draw) as viewer:
            viewer.subscribe()
            ...
    """

    def __init__(
        self,
        config: TravellerConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        source_factory: SourceFactory | None = None,
        on_frame: Callable[[RenderFrame], None] | None = None,
        on_error: Callable[[Connection, BaseException], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or TravellerConfig()
        self._external_session = session is not None
        self._http_session = session
        self._source_factory = source_factory
        self._on_frame = on_frame
        self._on_error = on_error
        self._logger = logger or _logger
        self._layer_config = self._config.layer_config()
        self._store = PositionStore()
        self._view = self._new_view_controller()
        self._layer: LayerDescriptor | None = None
        self._stream: StreamClient | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TravellerViewer:
        if self._source_factory is None and self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()
        # Let the cancelled stream task unwind before its session goes away.
        await asyncio.sleep(0)
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> TravellerConfig:
        return self._config

    @property
    def store(self) -> PositionStore:
        return self._store

    @property
    def view(self) -> ViewStateController:
        return self._view

    @property
    def view_state(self) -> ViewState:
        return self._view.view_state

    @property
    def layer(self) -> LayerDescriptor | None:
        return self._layer

    @property
    def stream_state(self) -> ConnectionState:
        if self._stream is None:
            return ConnectionState.IDLE
        return self._stream.state

    @property
    def connection(self) -> Connection | None:
        if self._stream is None:
            return None
        return self._stream.connection

    # ------------------------------------------------------------------
    # Stream
    # ------------------------------------------------------------------

    def subscribe(self, query: str | None = None, *, recenter: bool = False) -> Connection:
        """Open (or replace) the stream subscription.

        With ``recenter=True`` a fresh view controller is installed, so the
        next sample centers the camera again.
        """
        stream = self._require_stream()
        if recenter:
            self._view = self._new_view_controller()
        return stream.open(self._config.endpoint_template, query if query is not None else self._config.query)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()

    # ------------------------------------------------------------------
    # UI actions
    # ------------------------------------------------------------------

    def jump_to_preset(self) -> ViewState:
        """Handler for the fixed-destination jump control."""
        lat, lon = self._config.jump_preset
        return self.jump_to(lat, lon)

    def jump_to(self, lat: float, lon: float) -> ViewState:
        view_state = self._view.jump_to(lat, lon)
        self._notify()
        return view_state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_frame(self) -> RenderFrame:
        """The view state and layers for the next render pass."""
        return RenderFrame(
            view_state=self._view.view_state,
            layer=self._layer,
            map_style=self._config.map_style,
            reuse_maps=self._config.reuse_maps,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _new_view_controller(self) -> ViewStateController:
        return ViewStateController(focus_zoom=self._config.focus_zoom)

    def _require_stream(self) -> StreamClient:
        if self._stream is not None:
            return self._stream
        factory = self._source_factory
        if factory is None:
            if self._http_session is None:
                raise TravellerError("Viewer not initialized. Use 'async with TravellerViewer(...) as viewer:'")
            factory = aiohttp_source_factory(
                self._http_session,
                retry_delay=self._config.retry_delay,
                connect_timeout=self._config.connect_timeout,
                logger=self._logger,
            )
        self._stream = StreamClient(
            source_factory=factory,
            on_sample=self._handle_sample,
            on_error=self._on_error,
            logger=self._logger,
        )
        return self._stream

    def _handle_sample(self, sample: PositionSample) -> None:
        self._store.update(sample)
        if self._view.on_sample(sample):
            self._logger.info("Centered on first fix lat=%s lon=%s", sample.lat, sample.lon)
        self._layer = build_layer(self._store.snapshot(), self._layer_config)
        self._notify()

    def _notify(self) -> None:
        if self._on_frame is not None:
            self._on_frame(self.render_frame())
