"""Bounded undo/redo buffer of full raster snapshots."""
import logging
from typing import List

import numpy as np

from modules.canvas import Canvas

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, canvas: Canvas, capacity: int = 50) -> None:
        if capacity <= 0:
            raise ValueError("history capacity must be positive")
        self.canvas = canvas
        self.capacity = capacity
        self._history: List[np.ndarray] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._history)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._history) - 1

    def snapshot(self) -> None:
        """Record the current raster, dropping any redo branch."""
        pixels = self.canvas.snapshot()
        del self._history[self._index + 1:]
        self._history.append(pixels)
        self._index += 1

        if len(self._history) > self.capacity:
            # Evict the oldest; the same snapshot stays current.
            self._history.pop(0)
            self._index -= 1

    def _restore(self, index: int) -> None:
        previous = self._index
        self._index = index
        try:
            self.canvas.restore(self._history[index])
        except Exception:
            self._index = previous
            raise

    def undo(self) -> bool:
        if self._index <= 0:
            return False
        self._restore(self._index - 1)
        logger.info("Undo -> %d/%d", self._index + 1, len(self._history))
        return True

    def redo(self) -> bool:
        if self._index >= len(self._history) - 1:
            return False
        self._restore(self._index + 1)
        logger.info("Redo -> %d/%d", self._index + 1, len(self._history))
        return True

    def clear(self) -> None:
        self._history = []
        self._index = -1
