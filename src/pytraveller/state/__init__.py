"""State layer.

Holders for the latest tracked position and the camera view. Both are
mutated only from callbacks running on the event loop.
"""

from pytraveller.state.store import PositionStore
from pytraveller.state.view import ViewStateController

__all__ = ["PositionStore", "ViewStateController"]
