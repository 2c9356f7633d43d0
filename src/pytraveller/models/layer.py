"""Scenegraph layer description handed to the renderer."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from pytraveller._constants import (
    ANIMATION_WILDCARD,
    LAYER_ID,
    MODEL_URL,
    SIZE_MAX_PIXELS,
    SIZE_MIN_PIXELS,
    SIZE_SCALE,
)
from pytraveller.ingestion.normalize import float_or_zero, record_field
from pytraveller.models._base import TravellerBaseModel
from pytraveller.models.position import PositionSample

Position = tuple[float, float, float]


def sample_position(record: Any) -> Position:
    """Return ``(lon, lat, alt)`` for *record*, using ``0`` for anything missing."""
    return (
        float_or_zero(record_field(record, "lon")),
        float_or_zero(record_field(record, "lat")),
        float_or_zero(record_field(record, "alt")),
    )


class AnimationProfile(TravellerBaseModel):
    """Playback speed per model part; ``"*"`` applies to every part."""

    speeds: dict[str, float] = Field(default_factory=lambda: {ANIMATION_WILDCARD: 1.0})

    @field_validator("speeds")
    @classmethod
    def _non_negative(cls, value: dict[str, float]) -> dict[str, float]:
        for part, speed in value.items():
            if speed < 0:
                raise ValueError(f"animation speed for {part!r} must be non-negative, got {speed}")
        return value

    def speed_for(self, part: str) -> float:
        if part in self.speeds:
            return self.speeds[part]
        return self.speeds.get(ANIMATION_WILDCARD, 1.0)

    def to_deck(self) -> dict[str, dict[str, float]]:
        """deck.gl ``_animations`` shape, e.g. ``{"*": {"speed": 1.0}}``."""
        return {part: {"speed": speed} for part, speed in self.speeds.items()}


class LayerConfig(TravellerBaseModel):
    """Static inputs of the layer builder."""

    layer_id: str = LAYER_ID
    size_scale: float = Field(default=SIZE_SCALE, gt=0)
    scenegraph: str = MODEL_URL
    animations: AnimationProfile = Field(default_factory=AnimationProfile)
    size_min_pixels: float = SIZE_MIN_PIXELS
    size_max_pixels: float = SIZE_MAX_PIXELS
    pickable: bool = True


class LayerDescriptor(TravellerBaseModel):
    """Declarative description of the scenegraph layer for one render pass.

    Descriptors are rebuilt on every state change and never mutated.
    ``get_position`` is the accessor the renderer applies to each record
    of ``data``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    data: tuple[PositionSample, ...]
    pickable: bool
    size_scale: float
    scenegraph: str
    animations: AnimationProfile
    size_min_pixels: float
    size_max_pixels: float
    get_position: Callable[[Any], Position] = Field(default=sample_position, exclude=True)

    def positions(self) -> list[Position]:
        return [self.get_position(sample) for sample in self.data]
