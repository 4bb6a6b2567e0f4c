from typing import List, Tuple

from core.landmarks import HandObservation, Point


def to_canvas_point(
    point: Point,
    video_size: Tuple[int, int],
    canvas_size: Tuple[int, int],
) -> Point:
    """Project a video-space landmark onto the canvas, mirrored horizontally."""
    video_w, video_h = video_size
    canvas_w, canvas_h = canvas_size
    if video_w <= 0 or video_h <= 0:
        raise ValueError(f"invalid video size {video_size!r}")

    x, y = point
    return (1 - x / video_w) * canvas_w, (y / video_h) * canvas_h


class CoordinateMapper:
    def __init__(self, video_size: Tuple[int, int]) -> None:
        self.video_size = video_size

    def map(
        self,
        observation: HandObservation,
        canvas_size: Tuple[int, int],
    ) -> List[Point]:
        """Map all 21 landmarks; canvas size is read per call so resizes apply at once."""
        return [
            to_canvas_point(lm, self.video_size, canvas_size)
            for lm in observation.landmarks
        ]
