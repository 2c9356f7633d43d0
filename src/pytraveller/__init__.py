"""pytraveller - follow a server-sent position feed on a 3D map."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytraveller")
except PackageNotFoundError:
    __version__ = "0+local"

from pytraveller.config import TravellerConfig
from pytraveller.exceptions import (
    TravellerConfigError,
    TravellerError,
    TravellerPayloadError,
    TravellerTransportError,
)
from pytraveller.models import (
    DEFAULT_VIEW_STATE,
    AnimationProfile,
    LayerConfig,
    LayerDescriptor,
    PositionSample,
    ViewState,
    sample_position,
)
from pytraveller.render.layer import RenderFrame, build_layer
from pytraveller.state.store import PositionStore
from pytraveller.state.view import ViewStateController
from pytraveller.stream import Connection, ConnectionState, StreamClient
from pytraveller.viewer import TravellerViewer

__all__ = [
    "__version__",
    "AnimationProfile",
    "Connection",
    "ConnectionState",
    "DEFAULT_VIEW_STATE",
    "LayerConfig",
    "LayerDescriptor",
    "PositionSample",
    "PositionStore",
    "RenderFrame",
    "StreamClient",
    "TravellerConfig",
    "TravellerConfigError",
    "TravellerError",
    "TravellerPayloadError",
    "TravellerTransportError",
    "TravellerViewer",
    "ViewState",
    "ViewStateController",
    "build_layer",
    "sample_position",
]
