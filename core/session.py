"""
Per-run paint session.

Owns the raster, brush, pen, history, gesture state and shape detection, and
advances them one frame at a time. Everything mutable lives on the session;
nothing is shared through module globals.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from core.async_detector import AsyncShapeDetector
from core.coordinate_mapper import CoordinateMapper
from core.gesture_recognizer import (
    FingerStateClassifier,
    FingerVector,
    GestureDecision,
    GestureMode,
    GestureStateMachine,
)
from core.landmarks import HandObservation, Point
from core.paint_config import PaintConfig, PaletteEntry
from modules.brush_manager import BrushManager, ColorPalette
from modules.canvas import Canvas, RasterError
from modules.history import HistoryManager
from modules.shape_recognizer import ShapeDetector, ShapeRecord
from modules.virtual_pen import StrokeKind, VirtualPen
from utils.fps import FpsCounter

logger = logging.getLogger(__name__)


@dataclass
class FrameReport:
    mode: GestureMode
    label: str
    fingers: Optional[FingerVector] = None
    target: Optional[Point] = None
    confidence: Optional[float] = None
    shapes: List[ShapeRecord] = field(default_factory=list)
    fps: float = 0.0


class PaintSession:
    def __init__(
        self,
        config: PaintConfig,
        canvas_size: Optional[Tuple[int, int]] = None,
        async_detection: Optional[bool] = None,
    ) -> None:
        self.config = config
        width, height = canvas_size or config.canvas_size

        self.canvas = Canvas(width, height)
        self.palette = ColorPalette(config.palette, config.palette_reference_size)
        self.brush = BrushManager(config, self.palette)
        self.pen = VirtualPen(self.canvas, self.brush)
        self.history = HistoryManager(self.canvas, config.history_capacity)
        self.mapper = CoordinateMapper((width, height))
        self.fingers = FingerStateClassifier(
            margin=config.finger_up_margin,
            confirm_frames=config.finger_confirm_frames,
        )
        self.gestures = GestureStateMachine(self.palette)

        if async_detection is None:
            async_detection = config.async_shape_detection
        self.detector = AsyncShapeDetector(
            ShapeDetector.from_config(config),
            interval_ms=config.detection_interval_ms,
            async_mode=async_detection,
        )
        self.fps = FpsCounter()

    # ------------------------------------------------------------------ #
    # lifecycle
    def start(self) -> None:
        self.detector.start()
        logger.info(
            "Paint session started: canvas %dx%d, color %s",
            self.canvas.width, self.canvas.height, self.brush.color_name,
        )

    def close(self) -> None:
        self.detector.stop()

    def __enter__(self) -> "PaintSession":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    @property
    def mode(self) -> GestureMode:
        return self.gestures.mode

    @property
    def shapes(self) -> List[ShapeRecord]:
        return self.detector.get_result()

    def process_frame(
        self,
        observation: Optional[HandObservation],
        video_size: Tuple[int, int],
        now: Optional[float] = None,
    ) -> FrameReport:
        self.mapper.video_size = video_size
        fingers = None

        if observation is None:
            self.fingers.reset()
            self.pen.reset()
            decision = self.gestures.no_hand()
        else:
            points = self.mapper.map(observation, self.canvas.size)
            fingers = self.fingers.classify(points)
            decision = self.gestures.update(fingers, points, self.canvas.size)
            self._apply(decision)

        self.detector.maybe_submit(self.canvas, now)

        return FrameReport(
            mode=decision.mode,
            label=self._label(decision),
            fingers=fingers,
            target=decision.target,
            confidence=observation.confidence if observation is not None else None,
            shapes=self.shapes,
            fps=self.fps.tick(now),
        )

    def _apply(self, decision: GestureDecision) -> None:
        if decision.mode is GestureMode.DRAWING:
            self.pen.stroke(decision.target, StrokeKind.DRAW)
            return
        if decision.mode is GestureMode.ERASING:
            self.pen.stroke(decision.target, StrokeKind.ERASE)
            return

        self.pen.reset()
        if decision.mode is GestureMode.CLEAR:
            self.clear()
        elif decision.mode is GestureMode.COLOR_SELECT and decision.palette_entry is not None:
            self.brush.select_color(decision.palette_entry)

    def _label(self, decision: GestureDecision) -> str:
        if decision.mode is GestureMode.DRAWING:
            return "Drawing Mode"
        if decision.mode is GestureMode.ERASING:
            return "Eraser Mode"
        if decision.mode is GestureMode.CLEAR:
            return "Canvas Cleared"
        if decision.mode is GestureMode.COLOR_SELECT:
            return f"Color: {self.brush.color_name}"
        return "Idle"

    # ------------------------------------------------------------------ #
    # commands, also bound to keys in main.py
    def clear(self) -> None:
        with self.canvas.lock:
            self.canvas.clear()
            self.history.snapshot()
        logger.debug("Canvas cleared (history %d)", len(self.history))

    def undo(self) -> bool:
        try:
            with self.canvas.lock:
                return self.history.undo()
        except RasterError as exc:
            logger.warning("Undo skipped: %s", exc)
            return False

    def redo(self) -> bool:
        try:
            with self.canvas.lock:
                return self.history.redo()
        except RasterError as exc:
            logger.warning("Redo skipped: %s", exc)
            return False

    def resize(self, width: int, height: int) -> None:
        self.canvas.resize(width, height)
        self.pen.reset()

    def select_color(self, name: str) -> PaletteEntry:
        return self.brush.select_color(name)

    def set_brush_width(self, width: int) -> int:
        return self.brush.set_brush_width(width)

    def set_eraser_width(self, width: int) -> int:
        return self.brush.set_eraser_width(width)

    def snapshot_pixels(self) -> np.ndarray:
        """Copy of the raster for exporters."""
        return self.canvas.snapshot()
