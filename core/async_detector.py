# -*- coding: utf-8 -*-
"""
Throttled shape detection.

The detector scans every pixel of the canvas at least twice, which is far too
slow to run inside the per-frame draw path. Here it runs on a cadence, on a
private copy of the raster:

1. Producer/consumer: the frame loop submits snapshots, a daemon thread
   classifies them.
2. Latest wins: a snapshot still waiting when a newer one arrives is dropped,
   so results are never more than one cycle stale.
"""

import logging
import threading
import time
from typing import List, Optional

import numpy as np

from modules.canvas import Canvas
from modules.shape_recognizer import ShapeDetector, ShapeRecord

logger = logging.getLogger(__name__)


class AsyncShapeDetector:
    """
    Runs a ShapeDetector every ``interval_ms`` against canvas snapshots.

    With ``async_mode=False`` the cycle runs inline inside maybe_submit(),
    which keeps tests and debugging deterministic.

    Attributes:
        detector (ShapeDetector): the underlying synchronous detector.
        interval (float): minimum seconds between two submitted cycles.
        cycles (int): number of completed cycles, failed ones included.
    """

    detector: ShapeDetector
    interval: float
    async_mode: bool
    cycles: int
    _running: bool
    _thread: Optional[threading.Thread]
    _frame_lock: threading.Lock
    _pending: Optional[np.ndarray]
    _frame_ready: threading.Event
    _result_lock: threading.Lock
    _latest_result: List[ShapeRecord]
    _last_submit: Optional[float]
    _last_version: Optional[int]

    def __init__(
        self,
        detector: ShapeDetector,
        interval_ms: int = 100,
        async_mode: bool = True,
    ) -> None:
        self.detector = detector
        self.interval = interval_ms / 1000.0
        self.async_mode = async_mode
        self.cycles = 0

        # Worker control
        self._running = False
        self._thread = None

        # Pending snapshot (capacity 1, newest only)
        self._frame_lock = threading.Lock()
        self._pending = None
        self._frame_ready = threading.Event()

        # Result buffer
        self._result_lock = threading.Lock()
        self._latest_result = []
        self._cycle_done = threading.Condition(self._result_lock)

        self._last_submit = None
        self._last_version = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the worker thread (async mode only)."""
        if not self.async_mode or self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._detection_loop, name="shape-detector", daemon=True
        )
        self._thread.start()
        logger.info("Shape detector worker started (every %.0f ms)", self.interval * 1000)

    def stop(self) -> None:
        self._running = False
        self._frame_ready.set()  # wake the worker so it sees the flag
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
            logger.info("Shape detector worker stopped")

    def maybe_submit(self, canvas: Canvas, now: Optional[float] = None) -> bool:
        """Queue a detection cycle if the cadence allows and the canvas changed.

        Returns True when a snapshot was taken.
        """
        if now is None:
            now = time.monotonic()
        if self._last_submit is not None and now - self._last_submit < self.interval:
            return False
        if canvas.version == self._last_version:
            return False

        with canvas.lock:
            pixels = canvas.snapshot()
            self._last_version = canvas.version
            canvas.mark_clean()
        self._last_submit = now

        if self.async_mode and self._running:
            with self._frame_lock:
                self._pending = pixels
            self._frame_ready.set()
        else:
            self._run_cycle(pixels)
        return True

    def get_result(self) -> List[ShapeRecord]:
        """Latest completed shape list; empty before the first cycle."""
        with self._result_lock:
            return list(self._latest_result)

    def wait_for_cycles(self, count: int, timeout: float = 1.0) -> bool:
        """Block until at least ``count`` cycles have completed."""
        with self._cycle_done:
            return self._cycle_done.wait_for(lambda: self.cycles >= count, timeout=timeout)

    def _run_cycle(self, pixels: np.ndarray) -> None:
        try:
            shapes: Optional[List[ShapeRecord]] = self.detector.detect(pixels)
        except Exception:
            logger.exception("Shape detection cycle failed; keeping previous result")
            shapes = None

        with self._cycle_done:
            if shapes is not None:
                self._latest_result = shapes
            self.cycles += 1
            self._cycle_done.notify_all()

    def _detection_loop(self) -> None:
        while self._running:
            # timeout lets the thread notice stop() even without new snapshots
            self._frame_ready.wait(timeout=0.1)
            if not self._running:
                break

            pixels: Optional[np.ndarray] = None
            with self._frame_lock:
                if self._pending is not None:
                    pixels = self._pending
                    self._pending = None
                    self._frame_ready.clear()

            if pixels is None:
                continue
            self._run_cycle(pixels)
