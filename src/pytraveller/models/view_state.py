"""Camera view state model."""

from __future__ import annotations

from pydantic import model_validator

from pytraveller._constants import (
    DEFAULT_BEARING,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_MAX_ZOOM,
    DEFAULT_MIN_ZOOM,
    DEFAULT_PITCH,
    DEFAULT_ZOOM,
)
from pytraveller.models._base import TravellerBaseModel


class ViewState(TravellerBaseModel):
    """Where the map camera looks.

    Parameters
    ----------
    longitude : float
        x-coordinate of focus.
    latitude : float
        y-coordinate of focus.
    zoom : float
        Magnification level, within ``[min_zoom, max_zoom]``.
    min_zoom : float
        Least magnified zoom level the user can navigate to.
    max_zoom : float
        Most magnified zoom level the user can navigate to.
    pitch : float
        Up/down angle relative to the map plane.
    bearing : float
        Left/right angle relative to true north.
    """

    longitude: float
    latitude: float
    zoom: float
    min_zoom: float = DEFAULT_MIN_ZOOM
    max_zoom: float = DEFAULT_MAX_ZOOM
    pitch: float = 0.0
    bearing: float = 0.0

    @model_validator(mode="after")
    def _check_zoom_bounds(self) -> ViewState:
        if self.min_zoom > self.max_zoom:
            raise ValueError(f"min_zoom ({self.min_zoom}) exceeds max_zoom ({self.max_zoom})")
        if not self.min_zoom <= self.zoom <= self.max_zoom:
            raise ValueError(f"zoom {self.zoom} outside [{self.min_zoom}, {self.max_zoom}]")
        return self

    def centered(self, lat: float, lon: float, zoom: float) -> ViewState:
        """Copy of this state looking at ``(lat, lon)`` with *zoom*; pitch and bearing are kept."""
        values = self.model_dump()
        values.update(latitude=lat, longitude=lon, zoom=zoom)
        return type(self).model_validate(values)


DEFAULT_VIEW_STATE = ViewState(
    longitude=DEFAULT_LONGITUDE,
    latitude=DEFAULT_LATITUDE,
    zoom=DEFAULT_ZOOM,
    min_zoom=DEFAULT_MIN_ZOOM,
    max_zoom=DEFAULT_MAX_ZOOM,
    pitch=DEFAULT_PITCH,
    bearing=DEFAULT_BEARING,
)
"""Baseline for every derived view state."""
