"""Pure mapping from a position snapshot to a scenegraph layer."""

from __future__ import annotations

from collections.abc import Sequence

from pytraveller._constants import MAP_STYLE
from pytraveller.models._base import TravellerBaseModel
from pytraveller.models.layer import LayerConfig, LayerDescriptor, sample_position
from pytraveller.models.position import PositionSample
from pytraveller.models.view_state import ViewState


def build_layer(snapshot: Sequence[PositionSample], config: LayerConfig) -> LayerDescriptor | None:
    """Describe the scenegraph layer for *snapshot*.

    Returns ``None`` for an empty snapshot, meaning the layer is omitted
    from the render pass entirely.
    """
    if not snapshot:
        return None
    return LayerDescriptor(
        id=config.layer_id,
        data=tuple(snapshot),
        pickable=config.pickable,
        size_scale=config.size_scale,
        scenegraph=config.scenegraph,
        animations=config.animations,
        size_min_pixels=config.size_min_pixels,
        size_max_pixels=config.size_max_pixels,
        get_position=sample_position,
    )


class RenderFrame(TravellerBaseModel):
    """Everything the renderer needs for one pass."""

    view_state: ViewState
    layer: LayerDescriptor | None = None
    map_style: str = MAP_STYLE
    reuse_maps: bool = True

    @property
    def layers(self) -> list[LayerDescriptor]:
        return [self.layer] if self.layer is not None else []
