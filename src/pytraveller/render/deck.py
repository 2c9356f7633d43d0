"""pydeck adapter for the rendering boundary.

Converts :class:`~pytraveller.render.layer.RenderFrame` objects into
``pydeck.Deck`` instances. deck.gl coordinates are ``[lon, lat, alt]``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pydeck as pdk

from pytraveller.models.layer import LayerDescriptor
from pytraveller.models.view_state import ViewState
from pytraveller.render.layer import RenderFrame

_logger = logging.getLogger(__name__)

_POSITION_COLUMN = "position"


def to_pydeck_view_state(view_state: ViewState) -> pdk.ViewState:
    return pdk.ViewState(
        longitude=view_state.longitude,
        latitude=view_state.latitude,
        zoom=view_state.zoom,
        min_zoom=view_state.min_zoom,
        max_zoom=view_state.max_zoom,
        pitch=view_state.pitch,
        bearing=view_state.bearing,
    )


def _records(descriptor: LayerDescriptor) -> list[dict[str, Any]]:
    # The accessor runs here; deck.gl only reads the precomputed column.
    records: list[dict[str, Any]] = []
    for sample in descriptor.data:
        record = sample.model_dump()
        record[_POSITION_COLUMN] = list(descriptor.get_position(sample))
        records.append(record)
    return records


def to_pydeck_layer(descriptor: LayerDescriptor) -> pdk.Layer:
    return pdk.Layer(
        "ScenegraphLayer",
        data=_records(descriptor),
        id=descriptor.id,
        pickable=descriptor.pickable,
        size_scale=descriptor.size_scale,
        scenegraph=descriptor.scenegraph,
        _animations=descriptor.animations.to_deck(),
        size_min_pixels=descriptor.size_min_pixels,
        size_max_pixels=descriptor.size_max_pixels,
        get_position=_POSITION_COLUMN,
    )


def build_deck(frame: RenderFrame) -> pdk.Deck:
    """Build a deck for *frame*; a frame without a layer renders an empty map."""
    # pydeck has no map-instance reuse switch, so ``frame.reuse_maps`` stays with the caller.
    layers = [to_pydeck_layer(descriptor) for descriptor in frame.layers]
    return pdk.Deck(
        layers=layers,
        initial_view_state=to_pydeck_view_state(frame.view_state),
        map_style=frame.map_style,
    )


def write_html(frame: RenderFrame, path: str | Path) -> Path:
    """Render *frame* to a standalone HTML page at *path*."""
    target = Path(path)
    build_deck(frame).to_html(filename=str(target), open_browser=False, notebook_display=False)
    _logger.debug("Wrote deck snapshot to %s (%d layers)", target, len(frame.layers))
    return target
