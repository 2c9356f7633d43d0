from __future__ import annotations

from pytraveller.models.layer import AnimationProfile, LayerConfig, sample_position
from pytraveller.models.position import PositionSample
from pytraveller.models.view_state import DEFAULT_VIEW_STATE
from pytraveller.render.deck import build_deck, to_pydeck_layer, to_pydeck_view_state
from pytraveller.render.layer import RenderFrame, build_layer


def test_empty_snapshot_builds_no_layer() -> None:
    assert build_layer((), LayerConfig()) is None
    assert build_layer([], LayerConfig(size_scale=5)) is None


def test_layer_from_single_sample() -> None:
    sample = PositionSample(lat=51.5, lon=-0.12, alt=1200)
    config = LayerConfig(size_scale=50, animations=AnimationProfile(speeds={"*": 2.0}))

    layer = build_layer((sample,), config)

    assert layer is not None
    assert layer.id == "scenegraph-layer"
    assert layer.data == (sample,)
    assert layer.pickable is True
    assert layer.size_scale == 50
    assert layer.scenegraph.endswith("airplane.glb")
    assert layer.animations.to_deck() == {"*": {"speed": 2.0}}
    assert (layer.size_min_pixels, layer.size_max_pixels) == (0.1, 1.5)
    assert layer.get_position is sample_position
    assert layer.positions() == [(-0.12, 51.5, 1200.0)]


def test_build_is_deterministic_and_leaves_input_alone() -> None:
    snapshot = [PositionSample(lat=1, lon=2)]
    config = LayerConfig()

    first = build_layer(snapshot, config)
    second = build_layer(snapshot, config)

    assert first == second
    assert first is not second
    assert snapshot == [PositionSample(lat=1, lon=2)]


def test_camel_case_descriptor_omits_accessor() -> None:
    layer = build_layer((PositionSample(lat=1, lon=2),), LayerConfig())
    assert layer is not None

    dumped = layer.to_camel_dict()

    assert dumped["sizeScale"] == 125
    assert dumped["sizeMinPixels"] == 0.1
    assert "getPosition" not in dumped


def test_frame_without_layer_has_no_layers() -> None:
    frame = RenderFrame(view_state=DEFAULT_VIEW_STATE)

    assert frame.layers == []


# ------------------------------------------------------------------
# pydeck adapter
# ------------------------------------------------------------------


def test_pydeck_layer_carries_precomputed_positions() -> None:
    layer = build_layer((PositionSample(lat=51.5, lon=-0.12),), LayerConfig())
    assert layer is not None

    deck_layer = to_pydeck_layer(layer)

    assert deck_layer.type == "ScenegraphLayer"
    assert deck_layer.id == "scenegraph-layer"
    assert deck_layer.data[0]["position"] == [-0.12, 51.5, 0.0]
    assert deck_layer.data[0]["lat"] == 51.5


def test_deck_renders_zero_layers_for_empty_frame() -> None:
    deck = build_deck(RenderFrame(view_state=DEFAULT_VIEW_STATE))

    assert len(deck.layers) == 0


def test_deck_uses_frame_view_state() -> None:
    view = DEFAULT_VIEW_STATE.centered(40.7, -74.1, 12)
    layer = build_layer((PositionSample(lat=40.7, lon=-74.1),), LayerConfig())

    deck = build_deck(RenderFrame(view_state=view, layer=layer))

    assert len(deck.layers) == 1
    assert deck.initial_view_state.latitude == 40.7
    assert to_pydeck_view_state(view).zoom == 12
