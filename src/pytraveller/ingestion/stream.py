"""Event-stream payload parsing.

Translates the JSON body of a ``current-value`` event into a
:class:`~pytraveller.models.position.PositionSample`.
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pytraveller._constants import CURRENT_VALUE_EVENT
from pytraveller.exceptions import TravellerPayloadError
from pytraveller.models.position import PositionSample

_EXCERPT_LENGTH = 120


class _CurrentValueEnvelope(BaseModel):
    """Minimal Pydantic envelope for ``current-value`` events."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    data: PositionSample = Field(...)


def _excerpt(payload: str) -> str:
    if len(payload) > _EXCERPT_LENGTH:
        return f"{payload[:_EXCERPT_LENGTH]}…"
    return payload


def parse_current_value(payload: str, *, event: str = CURRENT_VALUE_EVENT) -> PositionSample:
    """Parse ``{"data": {"lat": .., "lon": .., "alt"?: ..}}`` into a sample.

    Raises :class:`TravellerPayloadError` when the payload is not JSON, has no
    ``data`` object, or the record lacks a numeric ``lat``/``lon``.
    """
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TravellerPayloadError(f"Invalid JSON in {event!r} event: {_excerpt(payload)!r}", event=event) from exc

    try:
        envelope = _CurrentValueEnvelope.model_validate(decoded)
    except ValidationError as exc:
        raise TravellerPayloadError(
            f"Unexpected {event!r} payload ({exc.error_count()} errors): {_excerpt(payload)!r}",
            event=event,
        ) from exc
    return envelope.data
