"""Internal ``text/event-stream`` decoding.

Implements the line-oriented event-stream interpretation used by browser
``EventSource``: ``event``/``data``/``id``/``retry`` fields, comment lines
starting with ``:`` and dispatch on a blank line.
"""

from __future__ import annotations

from dataclasses import dataclass

from pytraveller._constants import DEFAULT_EVENT_TYPE

_BOM = "\ufeff"


@dataclass(frozen=True)
class SseEvent:
    """One dispatched server-sent event."""

    event: str
    data: str
    last_event_id: str = ""


def _strip_line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


class SseDecoder:
    """Incremental decoder fed one line at a time.

    ``retry_ms`` holds the last reconnection time announced by the server
    and ``last_event_id`` the id to send back when reconnecting.
    """

    def __init__(self) -> None:
        self._event_type = ""
        self._data: list[str] = []
        self._at_stream_start = True
        self.last_event_id = ""
        self.retry_ms: int | None = None

    def reset(self) -> None:
        """Drop any partially received event; ``last_event_id`` and ``retry_ms`` survive."""
        self._at_stream_start = True
        self._event_type = ""
        self._data = []

    def feed_line(self, line: str) -> SseEvent | None:
        """Consume one line; return an event when the line completes one."""
        line = _strip_line_ending(line)
        if self._at_stream_start:
            self._at_stream_start = False
            if line.startswith(_BOM):
                line = line[1:]
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event_type = value
        elif name == "data":
            self._data.append(value)
        elif name == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif name == "retry":
            if value.isascii() and value.isdigit():
                self.retry_ms = int(value)
        return None

    def _dispatch(self) -> SseEvent | None:
        if not self._data:
            self._event_type = ""
            return None
        event = SseEvent(
            event=self._event_type or DEFAULT_EVENT_TYPE,
            data="\n".join(self._data),
            last_event_id=self.last_event_id,
        )
        self._event_type = ""
        self._data = []
        return event


def decode_text(text: str) -> list[SseEvent]:
    """Decode a complete event-stream document."""
    decoder = SseDecoder()
    events: list[SseEvent] = []
    for line in text.splitlines():
        event = decoder.feed_line(line)
        if event is not None:
            events.append(event)
    return events
