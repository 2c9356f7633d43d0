from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from pytraveller._sse import SseEvent
from pytraveller._transport import EventSourceHandlers
from pytraveller.exceptions import TravellerTransportError


@dataclass
class FakeSource:
    """Test double for the event-stream transport; callbacks fire on demand."""

    index: int
    url: str
    handlers: EventSourceHandlers
    log: list[str]
    started: bool = False
    closed: bool = False

    def start(self) -> None:
        self.started = True
        self.log.append(f"start {self.index}")

    def close(self) -> None:
        self.closed = True
        self.log.append(f"close {self.index}")

    def open(self) -> None:
        self.handlers.on_open()

    def emit(self, data: str, event: str = "current-value") -> None:
        self.handlers.on_event(SseEvent(event=event, data=data))

    def fail(self, exc: BaseException | None = None) -> None:
        self.handlers.on_error(exc or TravellerTransportError("connection reset"))


@dataclass
class FakeSourceFactory:
    sources: list[FakeSource] = field(default_factory=list)
    log: list[str] = field(default_factory=list)

    def __call__(self, url: str, handlers: EventSourceHandlers) -> FakeSource:
        source = FakeSource(index=len(self.sources) + 1, url=url, handlers=handlers, log=self.log)
        self.sources.append(source)
        self.log.append(f"create {source.index}")
        return source

    @property
    def latest(self) -> FakeSource:
        return self.sources[-1]


@pytest.fixture
def source_factory() -> FakeSourceFactory:
    return FakeSourceFactory()
