from typing import List, Optional, Sequence, Tuple

import pytest

from core.landmarks import (
    FINGER_JOINTS,
    FINGER_TIPS,
    INDEX_PIP,
    INDEX_TIP,
    NUM_LANDMARKS,
    THUMB_IP,
    THUMB_TIP,
    HandObservation,
)
from core.paint_config import load_config

CANVAS_SIZE = (1280, 720)
VIDEO_SIZE = (640, 480)

# Canvas-space layout of a synthetic hand
WRIST_POS = (640.0, 650.0)
JOINT_Y = 450.0
TIP_UP_Y = 350.0
TIP_DOWN_Y = 500.0
THUMB_JOINT_X = 560.0


def build_hand_points(
    fingers: Sequence[int],
    index_tip: Optional[Tuple[float, float]] = None,
    thumb_tip: Optional[Tuple[float, float]] = None,
) -> List[Tuple[float, float]]:
    """21 canvas-space points whose finger vector is ``fingers``."""
    points = [WRIST_POS] * NUM_LANDMARKS

    x_thumb_tip = THUMB_JOINT_X - 60 if fingers[0] else THUMB_JOINT_X + 60
    points[THUMB_IP] = (THUMB_JOINT_X, 520.0)
    points[THUMB_TIP] = (x_thumb_tip, 520.0)
    if thumb_tip is not None:
        points[THUMB_TIP] = thumb_tip
        points[THUMB_IP] = (thumb_tip[0] + 40, thumb_tip[1])

    for i, (tip, joint) in enumerate(zip(FINGER_TIPS[1:], FINGER_JOINTS[1:]), start=1):
        x = 600.0 + 40 * i
        points[joint] = (x, JOINT_Y)
        points[tip] = (x, TIP_UP_Y if fingers[i] else TIP_DOWN_Y)

    if index_tip is not None:
        points[INDEX_TIP] = index_tip
        points[INDEX_PIP] = (index_tip[0], index_tip[1] + 60)
    return points


def to_observation(
    points: Sequence[Tuple[float, float]],
    video_size: Tuple[int, int] = VIDEO_SIZE,
    canvas_size: Tuple[int, int] = CANVAS_SIZE,
    confidence: float = 0.9,
) -> HandObservation:
    """Invert the mirrored mapping so the session sees ``points`` on its canvas."""
    vw, vh = video_size
    cw, ch = canvas_size
    landmarks = tuple(((1 - x / cw) * vw, y / ch * vh) for x, y in points)
    return HandObservation(landmarks=landmarks, confidence=confidence)


@pytest.fixture
def paint_config():
    return load_config()


@pytest.fixture
def hand_points():
    return build_hand_points


@pytest.fixture
def observation():
    def make(fingers, index_tip=None, thumb_tip=None, canvas_size=CANVAS_SIZE):
        points = build_hand_points(fingers, index_tip=index_tip, thumb_tip=thumb_tip)
        return to_observation(points, canvas_size=canvas_size)

    return make
