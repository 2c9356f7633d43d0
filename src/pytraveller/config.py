"""Client configuration for pytraveller."""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping

from pytraveller._constants import (
    ANIMATION_WILDCARD,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_ENDPOINT_TEMPLATE,
    DEFAULT_MAX_ZOOM,
    DEFAULT_MIN_ZOOM,
    DEFAULT_QUERY,
    DEFAULT_RETRY_DELAY,
    FOCUS_ZOOM,
    JUMP_PRESET,
    LAYER_ID,
    MAP_STYLE,
    MODEL_URL,
    SIZE_MAX_PIXELS,
    SIZE_MIN_PIXELS,
    SIZE_SCALE,
)
from pytraveller.exceptions import TravellerConfigError
from pytraveller.models.layer import AnimationProfile, LayerConfig


def _default_animations() -> dict[str, float]:
    return {ANIMATION_WILDCARD: 1.0}


@dataclasses.dataclass(frozen=True)
class TravellerConfig:
    """Viewer configuration.

    Parameters
    ----------
    endpoint_template : str
        Stream URL with a ``{query}`` placeholder, e.g.
        ``"http://localhost:8080/sse?query={query}"``.
    query : str
        Value identifying the tracked feed; substituted into the template.
    size_scale : float
        Size multiplier for the rendered model.
    map_style : str
        Base-map style reference (URL), passed through to the tile renderer.
    reuse_maps : bool
        Ask the tile renderer to reuse map instances across re-renders.
    model_url : str
        glTF/GLB resource drawn at the tracked position.
    animations : Mapping[str, float]
        Model-part identifier (or ``"*"``) to playback-speed multiplier.
        Stored as a read-only copy and left out of the hash.
    size_min_pixels : float
        Lower pixel-size clamp for the model.
    size_max_pixels : float
        Upper pixel-size clamp for the model.
    layer_id : str
        Identifier of the scenegraph layer.
    pickable : bool
        Whether the layer responds to picking.
    focus_zoom : float
        Zoom level used when centering on a position.
    jump_preset : tuple[float, float]
        ``(lat, lon)`` target of the manual jump control.
    retry_delay : float
        Seconds the transport waits before reconnecting, until the server
        sends its own ``retry:`` value.
    connect_timeout : float
        Socket connect timeout for the stream request.
    """

    endpoint_template: str = DEFAULT_ENDPOINT_TEMPLATE
    query: str = DEFAULT_QUERY
    size_scale: float = SIZE_SCALE
    map_style: str = MAP_STYLE
    reuse_maps: bool = True
    model_url: str = MODEL_URL
    animations: Mapping[str, float] = dataclasses.field(default_factory=_default_animations, hash=False)
    size_min_pixels: float = SIZE_MIN_PIXELS
    size_max_pixels: float = SIZE_MAX_PIXELS
    layer_id: str = LAYER_ID
    pickable: bool = True
    focus_zoom: float = FOCUS_ZOOM
    jump_preset: tuple[float, float] = JUMP_PRESET
    retry_delay: float = DEFAULT_RETRY_DELAY
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "animations", types.MappingProxyType(dict(self.animations)))
        if "{query}" not in self.endpoint_template:
            raise TravellerConfigError(f"endpoint_template must contain '{{query}}': {self.endpoint_template!r}")
        if self.size_scale <= 0:
            raise TravellerConfigError(f"size_scale must be positive, got {self.size_scale}")
        if self.size_min_pixels > self.size_max_pixels:
            raise TravellerConfigError(
                f"size_min_pixels ({self.size_min_pixels}) exceeds size_max_pixels ({self.size_max_pixels})"
            )
        if not DEFAULT_MIN_ZOOM <= self.focus_zoom <= DEFAULT_MAX_ZOOM:
            raise TravellerConfigError(
                f"focus_zoom must be between {DEFAULT_MIN_ZOOM} and {DEFAULT_MAX_ZOOM}, got {self.focus_zoom}"
            )
        if any(speed < 0 for speed in self.animations.values()):
            raise TravellerConfigError("animation speeds must be non-negative")
        if self.retry_delay < 0:
            raise TravellerConfigError(f"retry_delay must be non-negative, got {self.retry_delay}")

    def layer_config(self) -> LayerConfig:
        """Scenegraph layer settings derived from this configuration."""
        return LayerConfig(
            layer_id=self.layer_id,
            size_scale=self.size_scale,
            scenegraph=self.model_url,
            animations=AnimationProfile(speeds=dict(self.animations)),
            size_min_pixels=self.size_min_pixels,
            size_max_pixels=self.size_max_pixels,
            pickable=self.pickable,
        )
