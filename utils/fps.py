import time
from typing import Optional


class FpsCounter:
    """Frames per second, refreshed once per elapsed second."""

    def __init__(self) -> None:
        self.fps = 0.0
        self._frames = 0
        self._last: Optional[float] = None

    def tick(self, now: Optional[float] = None) -> float:
        if now is None:
            now = time.monotonic()
        if self._last is None:
            self._last = now

        self._frames += 1
        elapsed = now - self._last
        if elapsed >= 1.0:
            self.fps = self._frames / elapsed
            self._frames = 0
            self._last = now
        return self.fps
