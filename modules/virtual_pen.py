"""
Stroke renderer.

Joins consecutive fingertip positions with round-capped segments. The first
position after a reset only anchors the pen, so a stroke never starts with a
jump from wherever the last one ended.
"""
import logging
from enum import Enum
from typing import Optional

from core.landmarks import Point
from modules.brush_manager import BrushManager
from modules.canvas import Canvas

logger = logging.getLogger(__name__)


class StrokeKind(Enum):
    DRAW = "draw"
    ERASE = "erase"


class VirtualPen:
    def __init__(self, canvas: Canvas, brush_manager: BrushManager) -> None:
        self.canvas = canvas
        self.brush_manager = brush_manager
        self.previous_point: Optional[Point] = None
        self.segments_drawn = 0

    def reset(self) -> None:
        """Lift the pen; the next stroke() call anchors instead of drawing."""
        self.previous_point = None

    @property
    def is_anchored(self) -> bool:
        return self.previous_point is not None

    def stroke(self, target: Point, kind: StrokeKind = StrokeKind.DRAW) -> bool:
        """Extend the stroke to target. Returns True if a segment was rendered."""
        if self.previous_point is None:
            self.previous_point = target
            logger.debug("Pen anchored at (%.1f, %.1f)", target[0], target[1])
            return False

        if kind is StrokeKind.ERASE:
            self.canvas.erase_line(
                self.previous_point, target, self.brush_manager.eraser_width
            )
        else:
            self.canvas.draw_line(
                self.previous_point,
                target,
                self.brush_manager.color,
                self.brush_manager.brush_width,
            )

        self.previous_point = target
        self.segments_drawn += 1
        return True
