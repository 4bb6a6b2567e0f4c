"""
Raster shape detection.

binarize -> 4-connected components (breadth-first flood fill) -> descriptors
-> classification. The perimeter is the bounding-box perimeter, not a traced
contour length; the thresholds below are tuned against that approximation, so
changing it shifts every classification.
"""
import logging
import math
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from core.paint_config import PaintConfig
from modules.canvas import RasterError

logger = logging.getLogger(__name__)

CIRCLE = "Circle"
SQUARE = "Square"
RECTANGLE = "Rectangle"
TRIANGLE = "Triangle"
UNKNOWN = "Unknown"

CIRCULARITY_CIRCLE = 0.8
CIRCULARITY_TRIANGLE = 0.5
SQUARE_TOLERANCE = 0.15
RECTANGLE_ASPECT_RANGE = (0.5, 2.0)

BoundingBox = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ShapeRecord:
    name: str
    bounding_box: BoundingBox  # x, y, width, height
    confidence: float


@dataclass
class Component:
    points: np.ndarray  # (N, 2) of x, y
    area: int
    bounding_box: BoundingBox
    perimeter: int
    truncated: bool = False

    @classmethod
    def from_flat_indices(cls, indices: np.ndarray, width: int, truncated: bool = False) -> "Component":
        xs = indices % width
        ys = indices // width
        x0, x1 = int(xs.min()), int(xs.max())
        y0, y1 = int(ys.min()), int(ys.max())
        # Pixel extents are inclusive: a single pixel is 1x1.
        bw = x1 - x0 + 1
        bh = y1 - y0 + 1
        return cls(
            points=np.stack([xs, ys], axis=1),
            area=int(indices.size),
            bounding_box=(x0, y0, bw, bh),
            perimeter=2 * (bw + bh),
            truncated=truncated,
        )


def circularity(area: float, perimeter: float) -> float:
    if perimeter <= 0:
        return 0.0
    return 4 * math.pi * area / (perimeter * perimeter)


class ShapeDetector:
    def __init__(
        self,
        area_min: int = 2000,
        threshold: int = 50,
        min_points: int = 11,
        max_points: int = 10000,
    ) -> None:
        self.area_min = area_min
        self.threshold = threshold
        self.min_points = min_points
        self.max_points = max_points

    @classmethod
    def from_config(cls, config: PaintConfig) -> "ShapeDetector":
        return cls(
            area_min=config.shape_area_min,
            threshold=config.binarization_threshold,
            min_points=config.min_component_points,
            max_points=config.max_component_points,
        )

    def binarize(self, pixels: np.ndarray) -> np.ndarray:
        """White where the RGB average exceeds the threshold, black elsewhere, always opaque."""
        if pixels.ndim != 3 or pixels.shape[2] < 3:
            raise RasterError(f"expected an RGB(A) image, got shape {pixels.shape}")
        avg = pixels[..., :3].astype(np.uint16).sum(axis=2) / 3.0
        value = np.where(avg > self.threshold, 255, 0).astype(np.uint8)
        binary = np.empty(pixels.shape[:2] + (4,), dtype=np.uint8)
        binary[..., :3] = value[..., None]
        binary[..., 3] = 255
        return binary

    def find_components(self, binary: np.ndarray) -> List[Component]:
        h, w = binary.shape[:2]
        foreground = bytearray((binary[..., 0] > 128).astype(np.uint8).tobytes())
        visited = bytearray(h * w)
        # Each collected pixel enqueues at most four neighbours.
        queue = [0] * (4 * self.max_points + 1)

        components: List[Component] = []
        seeds = np.flatnonzero(binary[..., 0].ravel() > 128)
        for seed in seeds.tolist():
            if visited[seed]:
                continue
            component = self._flood_fill(seed, foreground, visited, queue, w, h)
            if component.area >= self.min_points:
                components.append(component)
        return components

    def _flood_fill(
        self,
        seed: int,
        foreground: bytearray,
        visited: bytearray,
        queue: List[int],
        w: int,
        h: int,
    ) -> Component:
        cap = self.max_points
        collected: List[int] = []
        head, tail = 0, 1
        queue[0] = seed
        visited[seed] = 1

        while head < tail and len(collected) < cap:
            idx = queue[head]
            head += 1
            collected.append(idx)

            x = idx % w
            y = idx // w
            # right, left, down, up
            if x + 1 < w:
                n = idx + 1
                if foreground[n] and not visited[n]:
                    visited[n] = 1
                    queue[tail] = n
                    tail += 1
            if x > 0:
                n = idx - 1
                if foreground[n] and not visited[n]:
                    visited[n] = 1
                    queue[tail] = n
                    tail += 1
            if y + 1 < h:
                n = idx + w
                if foreground[n] and not visited[n]:
                    visited[n] = 1
                    queue[tail] = n
                    tail += 1
            if y > 0:
                n = idx - w
                if foreground[n] and not visited[n]:
                    visited[n] = 1
                    queue[tail] = n
                    tail += 1

        truncated = head < tail
        if truncated:
            # Queued but never collected: leave them for a later seed.
            for i in range(head, tail):
                visited[queue[i]] = 0

        return Component.from_flat_indices(
            np.asarray(collected, dtype=np.int64), w, truncated=truncated
        )

    def classify(self, component: Component) -> ShapeRecord:
        _, _, bw, bh = component.bounding_box
        score = circularity(component.area, component.perimeter)
        aspect_ratio = bw / bh if bh else float("inf")

        if score > CIRCULARITY_CIRCLE:
            name = CIRCLE
        elif abs(aspect_ratio - 1) < SQUARE_TOLERANCE:
            name = SQUARE
        elif RECTANGLE_ASPECT_RANGE[0] < aspect_ratio < RECTANGLE_ASPECT_RANGE[1]:
            name = RECTANGLE
        elif score < CIRCULARITY_TRIANGLE:
            name = TRIANGLE
        else:
            name = UNKNOWN
        return ShapeRecord(name=name, bounding_box=component.bounding_box, confidence=score)

    def detect(self, pixels: np.ndarray) -> List[ShapeRecord]:
        start = time.perf_counter()
        components = self.find_components(self.binarize(pixels))
        shapes = [
            self.classify(c) for c in components if c.area > self.area_min
        ]
        logger.debug(
            "Shape cycle: %d components, %d shapes %s in %.1f ms",
            len(components),
            len(shapes),
            [s.name for s in shapes],
            (time.perf_counter() - start) * 1000,
        )
        return shapes


def describe(shapes: List[ShapeRecord]) -> Optional[str]:
    if not shapes:
        return None
    return ", ".join(s.name for s in shapes)
