"""Camera view state and first-fix centering."""

from __future__ import annotations

import logging

from pytraveller._constants import FOCUS_ZOOM
from pytraveller.models.position import PositionSample
from pytraveller.models.view_state import DEFAULT_VIEW_STATE, ViewState

_logger = logging.getLogger(__name__)


class ViewStateController:
    """Owns the current :class:`ViewState`.

    Automatic centering happens at most once per controller: the first
    sample seen while the controller is *armed* moves the camera, every
    later sample leaves it alone so it never fights a user's pan or zoom.
    Re-arming means constructing a new controller.
    """

    def __init__(
        self,
        *,
        default: ViewState = DEFAULT_VIEW_STATE,
        focus_zoom: float = FOCUS_ZOOM,
    ) -> None:
        self._default = default
        self._focus_zoom = focus_zoom
        self._view_state = default
        self._armed = True

    @property
    def view_state(self) -> ViewState:
        return self._view_state

    @property
    def armed(self) -> bool:
        """Whether the next sample will still center the camera."""
        return self._armed

    def _focus(self, lat: float, lon: float) -> ViewState:
        self._view_state = self._default.centered(lat, lon, self._focus_zoom)
        return self._view_state

    def center_on(self, lat: float, lon: float) -> ViewState:
        """Look at ``(lat, lon)`` at the focus zoom, derived from the default view."""
        return self._focus(lat, lon)

    def jump_to(self, lat: float, lon: float) -> ViewState:
        """Move the camera on behalf of the user; unrelated to the stream."""
        _logger.debug("Jump to lat=%s lon=%s", lat, lon)
        return self._focus(lat, lon)

    def on_sample(self, sample: PositionSample) -> bool:
        """Center on *sample* if this is the first fix; return whether the camera moved."""
        if not self._armed:
            return False
        self._armed = False
        _logger.debug("First fix at lat=%s lon=%s, centering", sample.lat, sample.lon)
        self.center_on(sample.lat, sample.lon)
        return True
