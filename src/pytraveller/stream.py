"""Single-connection event-stream client.

Owns:
- the one active :class:`Connection` (opening always closes the previous one)
- translating ``current-value`` events into position samples
- suppressing callbacks from connections that are no longer current
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from enum import StrEnum
from urllib.parse import quote

from pytraveller._constants import CURRENT_VALUE_EVENT, DEFAULT_EVENT_TYPE
from pytraveller._sse import SseEvent
from pytraveller._transport import EventSourceHandlers, EventStreamSource, SourceFactory
from pytraveller.exceptions import TravellerPayloadError
from pytraveller.ingestion.stream import parse_current_value
from pytraveller.models.position import PositionSample

_logger = logging.getLogger(__name__)

_connection_ids = itertools.count(1)


class ConnectionState(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    DEGRADED = "degraded"
    CLOSED = "closed"


def build_stream_url(endpoint_template: str, query: str) -> str:
    """Substitute the URL-quoted *query* into the ``{query}`` placeholder."""
    return endpoint_template.format(query=quote(str(query), safe=""))


class Connection:
    """One logical subscription to the stream endpoint.

    Created only by :meth:`StreamClient.open`. Closing is terminal.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.connection_id = next(_connection_ids)
        self._state = ConnectionState.CONNECTING
        self._source: EventStreamSource | None = None

    def __repr__(self) -> str:
        return f"Connection(id={self.connection_id}, state={self._state.value}, url={self.url!r})"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is not ConnectionState.CLOSED

    def _attach(self, source: EventStreamSource) -> None:
        self._source = source

    def _mark(self, state: ConnectionState) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        self._state = state

    def close(self) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        self._state = ConnectionState.CLOSED
        source = self._source
        self._source = None
        if source is not None:
            source.close()


class StreamClient:
    """Subscribe to a position feed and forward parsed samples.

    Errors never tear the connection down: transport errors mark it
    *degraded* until the transport reconnects, and malformed payloads are
    dropped. Both are logged and passed to the optional ``on_error``
    observer.
    """

    def __init__(
        self,
        *,
        source_factory: SourceFactory,
        on_sample: Callable[[PositionSample], None],
        on_error: Callable[[Connection, BaseException], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._source_factory = source_factory
        self._on_sample = on_sample
        self._on_error = on_error
        self._logger = logger or _logger
        self._connection: Connection | None = None

    @property
    def connection(self) -> Connection | None:
        return self._connection

    @property
    def state(self) -> ConnectionState:
        if self._connection is None:
            return ConnectionState.IDLE
        return self._connection.state

    def open(self, endpoint_template: str, query: str) -> Connection:
        """Close any active connection, then subscribe to the templated endpoint."""
        self.close()

        connection = Connection(build_stream_url(endpoint_template, query))
        self._connection = connection
        handlers = EventSourceHandlers(
            on_open=lambda: self._handle_open(connection),
            on_event=lambda event: self._handle_event(connection, event),
            on_error=lambda exc: self._handle_error(connection, exc),
        )
        try:
            source = self._source_factory(connection.url, handlers)
            connection._attach(source)
            self._logger.debug("Opening %r", connection)
            source.start()
        except Exception:
            connection.close()
            raise
        return connection

    def close(self) -> None:
        """Close the active connection, if any."""
        connection = self._connection
        if connection is None or not connection.active:
            return
        self._logger.debug("Closing %r", connection)
        connection.close()

    def _is_current(self, connection: Connection) -> bool:
        return connection is self._connection and connection.active

    def _handle_open(self, connection: Connection) -> None:
        if not self._is_current(connection):
            self._logger.debug("Ignoring open from superseded %r", connection)
            return
        connection._mark(ConnectionState.OPEN)
        self._logger.info("Stream open id=%s url=%s", connection.connection_id, connection.url)

    def _handle_error(self, connection: Connection, exc: BaseException) -> None:
        if not self._is_current(connection):
            self._logger.debug("Ignoring error from superseded %r: %s", connection, exc)
            return
        connection._mark(ConnectionState.DEGRADED)
        self._logger.warning("Stream error id=%s: %s", connection.connection_id, exc)
        self._report(connection, exc)

    def _handle_event(self, connection: Connection, event: SseEvent) -> None:
        if not self._is_current(connection):
            self._logger.debug("Ignoring %r event from superseded %r", event.event, connection)
            return

        if event.event != CURRENT_VALUE_EVENT:
            if event.event == DEFAULT_EVENT_TYPE:
                self._logger.debug("Unnamed message id=%s data=%s", connection.connection_id, event.data)
            else:
                self._logger.debug("Unhandled event %r id=%s", event.event, connection.connection_id)
            return

        try:
            sample = parse_current_value(event.data, event=event.event)
        except TravellerPayloadError as exc:
            self._logger.warning("Dropping %r event id=%s: %s", event.event, connection.connection_id, exc)
            self._report(connection, exc)
            return

        self._logger.debug("Sample lat=%s lon=%s alt=%s", sample.lat, sample.lon, sample.alt)
        self._on_sample(sample)

    def _report(self, connection: Connection, exc: BaseException) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(connection, exc)
        except Exception:
            self._logger.debug("on_error observer failed", exc_info=True)
