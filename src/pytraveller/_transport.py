"""aiohttp event-stream transport with EventSource-style reconnection."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pytraveller._constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_RETRY_DELAY
from pytraveller._sse import SseDecoder, SseEvent
from pytraveller.exceptions import TravellerTransportError

_logger = logging.getLogger(__name__)

_EVENT_STREAM = "text/event-stream"


@dataclass(frozen=True)
class EventSourceHandlers:
    """Callbacks a transport invokes on the event loop."""

    on_open: Callable[[], None]
    on_event: Callable[[SseEvent], None]
    on_error: Callable[[BaseException], None]


class EventStreamSource(Protocol):
    """Structural transport interface used by :class:`~pytraveller.stream.StreamClient`.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`EventSource`) concrete.
    """

    def start(self) -> None: ...

    def close(self) -> None: ...


SourceFactory = Callable[[str, EventSourceHandlers], EventStreamSource]


class EventSource:
    """Long-lived GET on an event-stream endpoint.

    When the stream fails or ends, ``on_error`` fires and the request is
    retried after the reconnection delay (the server's ``retry:`` field
    overrides the configured default). Nothing is dispatched after
    :meth:`close`.
    """

    def __init__(
        self,
        url: str,
        handlers: EventSourceHandlers,
        *,
        http_session: aiohttp.ClientSession,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = url
        self._handlers = handlers
        self._http = http_session
        self._retry_delay = retry_delay
        self._connect_timeout = connect_timeout
        self._logger = logger or _logger
        self._decoder = SseDecoder()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def url(self) -> str:
        return self._url

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def retry_delay(self) -> float:
        return self._retry_delay

    def start(self) -> None:
        """Schedule the stream task on the running loop."""
        if self._closed or self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"event-source {self._url}")

    def close(self) -> None:
        """Stop the stream; idempotent and effective immediately."""
        if self._closed:
            return
        self._closed = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
        self._logger.debug("Event stream closed url=%s", self._url)

    async def aclose(self) -> None:
        """Close and wait for the stream task to unwind."""
        self.close()
        task = self._task
        self._task = None
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def _emit(self, callback: Callable[..., None], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            self._logger.warning("Event stream callback failed url=%s", self._url, exc_info=True)

    async def _run(self) -> None:
        while not self._closed:
            error: TravellerTransportError
            try:
                await self._consume()
            except TravellerTransportError as exc:
                error = exc
            except (aiohttp.ClientError, TimeoutError, ValueError) as exc:
                error = TravellerTransportError(f"Stream request to {self._url} failed: {exc}", endpoint=self._url)
                error.__cause__ = exc
            except Exception as exc:
                self._logger.debug("Unexpected stream failure url=%s", self._url, exc_info=True)
                error = TravellerTransportError(f"Stream request to {self._url} failed: {exc!r}", endpoint=self._url)
                error.__cause__ = exc
            else:
                error = TravellerTransportError("Stream ended by server", endpoint=self._url)

            if self._closed:
                return
            self._emit(self._handlers.on_error, error)
            self._logger.debug("Reconnecting url=%s in %.3fs", self._url, self._retry_delay)
            await asyncio.sleep(self._retry_delay)

    async def _consume(self) -> None:
        headers: dict[str, str] = {
            "accept": _EVENT_STREAM,
            "cache-control": "no-cache",
        }
        if self._decoder.last_event_id:
            headers["last-event-id"] = self._decoder.last_event_id
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self._connect_timeout)

        self._logger.debug("GET %s", self._url)
        async with self._http.get(self._url, headers=headers, timeout=timeout) as resp:
            if resp.status != 200:
                raise TravellerTransportError(
                    f"HTTP {resp.status} from {self._url}",
                    status_code=resp.status,
                    endpoint=self._url,
                )
            content_type = resp.headers.get("Content-Type", "")
            if not content_type.startswith(_EVENT_STREAM):
                raise TravellerTransportError(
                    f"Unexpected content type {content_type!r} from {self._url}",
                    status_code=resp.status,
                    endpoint=self._url,
                )

            self._decoder.reset()
            self._emit(self._handlers.on_open)
            async for raw_line in resp.content:
                if self._closed:
                    return
                event = self._decoder.feed_line(raw_line.decode("utf-8", errors="replace"))
                if self._decoder.retry_ms is not None:
                    self._retry_delay = self._decoder.retry_ms / 1000.0
                if event is not None:
                    self._emit(self._handlers.on_event, event)


def aiohttp_source_factory(
    http_session: aiohttp.ClientSession,
    *,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    logger: logging.Logger | None = None,
) -> SourceFactory:
    """Return a factory producing :class:`EventSource` objects bound to *http_session*."""

    def factory(url: str, handlers: EventSourceHandlers) -> EventSource:
        return EventSource(
            url,
            handlers,
            http_session=http_session,
            retry_delay=retry_delay,
            connect_timeout=connect_timeout,
            logger=logger,
        )

    return factory
