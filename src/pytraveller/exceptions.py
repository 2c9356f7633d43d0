"""Custom exception hierarchy for pytraveller."""

from __future__ import annotations


class TravellerError(Exception):
    """Base exception for all pytraveller errors."""


class TravellerConfigError(TravellerError):
    """Invalid or inconsistent configuration."""


class TravellerTransportError(TravellerError):
    """Stream-level failure (network, non-200, wrong content type, stream ended)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TravellerPayloadError(TravellerError):
    """An event payload could not be turned into a position sample.

    The offending message is dropped; the stream itself stays up.
    """

    def __init__(self, message: str, *, event: str = "") -> None:
        self.event = event
        super().__init__(message)
