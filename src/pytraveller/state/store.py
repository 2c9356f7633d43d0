"""In-memory store for the currently tracked position.

Most-recent-wins: every update replaces the contents wholesale.
"""

from __future__ import annotations

from pytraveller.models.position import PositionSample


class PositionStore:
    """Single-slot store of tracked entities.

    The snapshot is either empty or holds exactly the last sample passed
    to :meth:`update`. There is no history, merging or deduplication.
    """

    def __init__(self) -> None:
        self._samples: tuple[PositionSample, ...] = ()
        self._version = 0

    def update(self, sample: PositionSample) -> None:
        """Replace the tracked entities with ``(sample,)``."""
        self._samples = (sample,)
        self._version += 1

    def snapshot(self) -> tuple[PositionSample, ...]:
        return self._samples

    @property
    def latest(self) -> PositionSample | None:
        return self._samples[-1] if self._samples else None

    @property
    def version(self) -> int:
        """Number of updates applied so far."""
        return self._version

    def clear(self) -> None:
        self._samples = ()
        self._version += 1
