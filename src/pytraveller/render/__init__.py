"""Render layer.

:mod:`pytraveller.render.layer` builds renderer-agnostic descriptors;
:mod:`pytraveller.render.deck` turns them into pydeck objects.
"""

from pytraveller.render.layer import RenderFrame, build_layer

__all__ = ["RenderFrame", "build_layer"]
