import logging
import time
from pathlib import Path

import cv2
import numpy as np
cv2.setUseOptimized(True)

import config
from core.hand_detector import HandDetector, draw_hand
from core.paint_config import ConfigurationError, load_config
from core.session import FrameReport, PaintSession
from modules.shape_recognizer import describe

logger = logging.getLogger(__name__)


def overlay_canvas(frame: np.ndarray, canvas_rgba: np.ndarray) -> np.ndarray:
    """Alpha-composite the RGBA drawing onto a BGR frame of the same size."""
    bgra = cv2.cvtColor(canvas_rgba, cv2.COLOR_RGBA2BGRA)
    alpha = bgra[..., 3:4].astype(np.float32) / 255.0
    out = frame.astype(np.float32) * (1.0 - alpha) + bgra[..., :3].astype(np.float32) * alpha
    return out.astype(np.uint8)


def draw_palette(frame: np.ndarray, session: PaintSession) -> None:
    overlay = frame.copy()
    size = session.canvas.size
    for entry in session.palette:
        x1, y1, x2, y2 = (int(v) for v in session.palette.scaled_region(entry, size))
        r, g, b = entry.rgb
        cv2.rectangle(overlay, (x1, y1), (x2, y2), (b, g, r), -1)
        thickness = 4 if entry.name == session.brush.color_name else 2
        cv2.rectangle(frame, (x1, y1), (x2, y2), (255, 255, 255), thickness)
    cv2.addWeighted(overlay, 0.5, frame, 0.5, 0, frame)


def draw_status(frame: np.ndarray, session: PaintSession, report: FrameReport) -> None:
    confidence = "-" if report.confidence is None else f"{report.confidence * 100:.0f}%"
    lines = [
        f"Mode: {report.label} | FPS: {report.fps:.1f} | Hand: {confidence}",
        session.brush.get_status_text(),
        f"History: {len(session.history)}",
    ]
    shapes = describe(report.shapes)
    if shapes:
        lines.append(f"Shapes: {shapes}")
    h = frame.shape[0]
    for i, line in enumerate(lines):
        y = h - 20 - (len(lines) - 1 - i) * 28
        cv2.putText(frame, line, (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)


def export_canvas(session: PaintSession, counter: int) -> Path:
    out_path = Path(getattr(config, "CAPTURE_DIR", "captures")) / f"canvas_{counter}.png"
    out_path.parent.mkdir(exist_ok=True)
    pixels = cv2.cvtColor(session.snapshot_pixels(), cv2.COLOR_RGBA2BGRA)
    cv2.imwrite(str(out_path), pixels)
    return out_path


def handle_key(key: int, session: PaintSession, save_counter: int) -> int:
    if key == ord("c"):
        session.clear()
        logger.info("Canvas cleared")
    elif key == ord("z"):
        session.undo()
    elif key in (ord("y"), ord("Z")):
        session.redo()
    elif key == ord("s"):
        out_path = export_canvas(session, save_counter)
        logger.info("Saved canvas to %s", out_path)
        save_counter += 1
    elif key == ord("["):
        session.brush.prev_color()
    elif key == ord("]"):
        session.brush.next_color()
    elif key in (ord("-"), ord("_")):
        logger.info("Brush width: %d", session.set_brush_width(session.brush.brush_width - 2))
    elif key in (ord("="), ord("+")):
        logger.info("Brush width: %d", session.set_brush_width(session.brush.brush_width + 2))
    elif key == ord(","):
        logger.info("Eraser width: %d", session.set_eraser_width(session.brush.eraser_width - 5))
    elif key == ord("."):
        logger.info("Eraser width: %d", session.set_eraser_width(session.brush.eraser_width + 5))
    return save_counter


def main() -> None:
    logging.basicConfig(
        level=getattr(config, "LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        paint_config = load_config(config)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return

    cap = cv2.VideoCapture(config.CAMERA_ID)
    if not cap.isOpened():
        logger.error("Cannot open camera %s (check CAMERA_ID in config.py)", config.CAMERA_ID)
        return
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, config.CAMERA_WIDTH)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, config.CAMERA_HEIGHT)

    cv2.namedWindow(config.WINDOW_NAME, cv2.WINDOW_NORMAL | cv2.WINDOW_KEEPRATIO)
    cv2.resizeWindow(config.WINDOW_NAME, paint_config.canvas_width, paint_config.canvas_height)

    detector = HandDetector(
        model_path=getattr(config, "HAND_MODEL_PATH", "hand_landmarker.task"),
        detection_confidence=getattr(config, "DETECTION_CONFIDENCE", 0.5),
        tracking_confidence=getattr(config, "TRACKING_CONFIDENCE", 0.5),
    )
    session = PaintSession(paint_config)
    session.start()
    save_counter = 0

    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                logger.warning("Camera frame unavailable, stopping")
                break

            h, w = frame.shape[:2]
            observation = detector.detect(frame)
            report = session.process_frame(observation, (w, h), now=time.monotonic())

            view = cv2.resize(cv2.flip(frame, 1), session.canvas.size)
            view = overlay_canvas(view, session.canvas.get_canvas())
            draw_palette(view, session)
            if observation is not None:
                draw_hand(view, session.mapper.map(observation, session.canvas.size))
            draw_status(view, session, report)

            cv2.imshow(config.WINDOW_NAME, view)
            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            save_counter = handle_key(key, session, save_counter)
    finally:
        session.close()
        detector.close()
        cap.release()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
