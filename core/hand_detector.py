import logging
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np

try:
    import mediapipe as mp
    from mediapipe.tasks import python as mp_tasks
    from mediapipe.tasks.python import vision
except ImportError as exc:  # pragma: no cover - dependency provided by requirements
    raise ImportError("mediapipe is required for hand detection") from exc

from core.landmarks import HAND_CONNECTIONS, INDEX_TIP, THUMB_TIP, HandObservation, Point

logger = logging.getLogger(__name__)


class HandDetector:
    """MediaPipe hand landmarker returning at most one HandObservation per frame."""

    def __init__(
        self,
        model_path: str = "hand_landmarker.task",
        detection_confidence: float = 0.5,
        tracking_confidence: float = 0.5,
    ) -> None:
        if not Path(model_path).is_file():
            raise FileNotFoundError(
                f"hand landmarker model not found: {model_path} "
                "(download hand_landmarker.task from the MediaPipe model page)"
            )
        options = vision.HandLandmarkerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=model_path),
            running_mode=vision.RunningMode.IMAGE,
            num_hands=1,
            min_hand_detection_confidence=detection_confidence,
            min_hand_presence_confidence=detection_confidence,
            min_tracking_confidence=tracking_confidence,
        )
        self._landmarker = vision.HandLandmarker.create_from_options(options)
        logger.info("MediaPipe HandLandmarker initialized from %s", model_path)

    def close(self) -> None:
        self._landmarker.close()

    def detect(self, frame_bgr: np.ndarray) -> Optional[HandObservation]:
        """Detect a hand in an unmirrored BGR frame; landmarks are in frame pixels."""
        image_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image_rgb)
        results = self._landmarker.detect(mp_image)
        if not results.hand_landmarks:
            return None

        h, w = frame_bgr.shape[:2]
        landmarks = tuple((lm.x * w, lm.y * h) for lm in results.hand_landmarks[0])
        label, score = "RIGHT", 1.0
        if results.handedness:
            category = results.handedness[0][0]
            label = category.category_name.upper()
            score = float(min(max(category.score, 0.0), 1.0))
        try:
            return HandObservation(landmarks=landmarks, confidence=score, handedness=label)
        except ValueError as exc:
            logger.warning("Dropping malformed hand observation: %s", exc)
            return None


def draw_hand(frame_bgr: np.ndarray, points: Sequence[Point]) -> None:
    """Draw the hand skeleton using canvas-space points."""
    pts = [(int(x), int(y)) for x, y in points]
    for start_idx, end_idx in HAND_CONNECTIONS:
        cv2.line(frame_bgr, pts[start_idx], pts[end_idx], (198, 184, 50), 2, lineType=cv2.LINE_AA)
    for idx, pt in enumerate(pts):
        color = (0, 0, 255) if idx in (THUMB_TIP, INDEX_TIP) else (198, 184, 50)
        cv2.circle(frame_bgr, pt, 4, color, -1, lineType=cv2.LINE_AA)
