from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from core.landmarks import (
    FINGER_JOINTS,
    FINGER_TIPS,
    INDEX_TIP,
    THUMB_IP,
    THUMB_TIP,
    Point,
)
from core.paint_config import PaletteEntry
from modules.brush_manager import ColorPalette

FingerVector = Tuple[bool, bool, bool, bool, bool]

INDEX_ONLY: FingerVector = (False, True, False, False, False)
THUMB_ONLY: FingerVector = (True, False, False, False, False)
ALL_UP: FingerVector = (True, True, True, True, True)


class GestureMode(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    ERASING = "eraser"
    COLOR_SELECT = "color-select"
    CLEAR = "clear"


def fingers_up(points: Sequence[Point], margin: float = 20) -> FingerVector:
    """Extended/not-extended for thumb..pinky from canvas-space landmarks."""
    # The canvas is mirrored, so an open thumb sits left of its joint.
    thumb = points[THUMB_TIP][0] < points[THUMB_IP][0]
    others = tuple(
        points[tip][1] < points[joint][1] - margin
        for tip, joint in zip(FINGER_TIPS[1:], FINGER_JOINTS[1:])
    )
    return (thumb,) + others


class FingerStateClassifier:
    def __init__(self, margin: float = 20, confirm_frames: int = 1) -> None:
        self.margin = margin
        self.confirm_frames = confirm_frames
        self._state: Optional[List[bool]] = None
        self._disagree = [0] * 5

    def reset(self) -> None:
        self._state = None
        self._disagree = [0] * 5

    def classify(self, points: Sequence[Point]) -> FingerVector:
        raw = fingers_up(points, self.margin)
        if self.confirm_frames <= 1:
            return raw

        if self._state is None:
            self._state = list(raw)
            return raw

        # A finger only flips after confirm_frames consecutive disagreeing frames.
        for i, up in enumerate(raw):
            if up == self._state[i]:
                self._disagree[i] = 0
                continue
            self._disagree[i] += 1
            if self._disagree[i] >= self.confirm_frames:
                self._state[i] = up
                self._disagree[i] = 0
        return tuple(self._state)


@dataclass(frozen=True)
class GestureDecision:
    mode: GestureMode
    target: Optional[Point] = None
    palette_entry: Optional[PaletteEntry] = None


class GestureStateMachine:
    """Maps a finger vector (and the previous mode) to this frame's mode.

    Rules are checked in a fixed priority order; the first match wins:
    index only (palette tap or draw), all five (clear), thumb only (erase),
    anything else (idle, except that color-select sticks).
    """

    def __init__(self, palette: ColorPalette) -> None:
        self.palette = palette
        self.mode = GestureMode.IDLE

    def _decide(self, decision: GestureDecision) -> GestureDecision:
        self.mode = decision.mode
        return decision

    def no_hand(self) -> GestureDecision:
        return self._decide(GestureDecision(GestureMode.IDLE))

    def update(
        self,
        fingers: Sequence[bool],
        points: Sequence[Point],
        canvas_size: Tuple[int, int],
    ) -> GestureDecision:
        fingers = tuple(bool(f) for f in fingers)

        if fingers == INDEX_ONLY:
            index_tip = points[INDEX_TIP]
            entry = self.palette.hit_test(index_tip, canvas_size)
            if entry is not None:
                return self._decide(
                    GestureDecision(GestureMode.COLOR_SELECT, palette_entry=entry)
                )
            return self._decide(GestureDecision(GestureMode.DRAWING, target=index_tip))

        if fingers == ALL_UP:
            return self._decide(GestureDecision(GestureMode.CLEAR))

        if fingers == THUMB_ONLY:
            return self._decide(
                GestureDecision(GestureMode.ERASING, target=points[THUMB_TIP])
            )

        if self.mode is GestureMode.COLOR_SELECT:
            return self._decide(GestureDecision(GestureMode.COLOR_SELECT))
        return self._decide(GestureDecision(GestureMode.IDLE))
