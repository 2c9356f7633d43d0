"""Data models exchanged between the stream, the state holders and the renderer."""

from pytraveller.models._base import TravellerBaseModel
from pytraveller.models.layer import (
    AnimationProfile,
    LayerConfig,
    LayerDescriptor,
    Position,
    sample_position,
)
from pytraveller.models.position import PositionSample
from pytraveller.models.view_state import DEFAULT_VIEW_STATE, ViewState

__all__ = [
    "AnimationProfile",
    "DEFAULT_VIEW_STATE",
    "LayerConfig",
    "LayerDescriptor",
    "Position",
    "PositionSample",
    "TravellerBaseModel",
    "ViewState",
    "sample_position",
]
