import threading
from typing import Tuple

import cv2
import numpy as np


class RasterError(ValueError):
    """The raster could not accept the requested pixels or size."""


def _pt(point) -> Tuple[int, int]:
    return int(round(point[0])), int(round(point[1]))


class Canvas:
    """Persistent RGBA drawing surface, fully transparent when empty."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise RasterError(f"invalid canvas size {width}x{height}")
        self.width = width
        self.height = height
        self._canvas = np.zeros((height, width, 4), dtype=np.uint8)
        self.lock = threading.RLock()
        self.version = 0
        self.dirty = False

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _touch(self) -> None:
        self.version += 1
        self.dirty = True

    def mark_clean(self) -> None:
        self.dirty = False

    def draw_line(self, pt1, pt2, color, thickness: int) -> None:
        r, g, b = color
        with self.lock:
            # Thick cv2 lines are drawn with round caps, which also gives round joins
            # between consecutive segments.
            cv2.line(
                self._canvas, _pt(pt1), _pt(pt2), (int(r), int(g), int(b), 255),
                int(thickness), lineType=cv2.LINE_AA,
            )
            self._touch()

    def erase_line(self, pt1, pt2, thickness: int) -> None:
        """Clear a round-capped segment to transparent, whatever is underneath."""
        with self.lock:
            mask = np.zeros((self.height, self.width), dtype=np.uint8)
            cv2.line(mask, _pt(pt1), _pt(pt2), 255, int(thickness), lineType=cv2.LINE_8)
            self._canvas[mask > 0] = 0
            self._touch()

    def clear(self) -> None:
        with self.lock:
            self._canvas[:] = 0
            self._touch()

    def snapshot(self) -> np.ndarray:
        with self.lock:
            return self._canvas.copy()

    def restore(self, pixels: np.ndarray) -> None:
        with self.lock:
            if pixels.shape != self._canvas.shape or pixels.dtype != self._canvas.dtype:
                raise RasterError(
                    f"snapshot {pixels.shape}/{pixels.dtype} does not match "
                    f"canvas {self._canvas.shape}/{self._canvas.dtype}"
                )
            self._canvas[:] = pixels
            self._touch()

    def resize(self, width: int, height: int) -> None:
        """Change the surface size, scaling the current drawing to fit."""
        if width <= 0 or height <= 0:
            raise RasterError(f"invalid canvas size {width}x{height}")
        with self.lock:
            if (width, height) == self.size:
                return
            self._canvas = cv2.resize(
                self._canvas, (width, height), interpolation=cv2.INTER_LINEAR
            )
            self.width = width
            self.height = height
            self._touch()

    def get_canvas(self) -> np.ndarray:
        return self._canvas
