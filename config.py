CAMERA_ID = 0
CAMERA_WIDTH = 1280
CAMERA_HEIGHT = 720

# Drawing surface, resized at runtime if the embedder asks for it
CANVAS_WIDTH = 1280
CANVAS_HEIGHT = 720

# Brush / eraser (px)
BRUSH_WIDTH = 10
BRUSH_WIDTH_MIN = 2
BRUSH_WIDTH_MAX = 50
ERASER_WIDTH = 40

# Color palette, regions are (x1, y1, x2, y2) in PALETTE_REFERENCE_SIZE space.
# Regions must not overlap, load_config() rejects overlapping boxes.
PALETTE_REFERENCE_SIZE = (1280, 720)
PALETTE = [
    ("Red", (255, 0, 0), (50, 50, 150, 150)),
    ("Green", (0, 255, 0), (200, 50, 300, 150)),
    ("Blue", (0, 0, 255), (350, 50, 450, 150)),
    ("Yellow", (255, 255, 0), (500, 50, 600, 150)),
]
DEFAULT_COLOR = "Red"

# Gesture thresholds
FINGER_UP_MARGIN = 20       # tip must be this many px above its joint
FINGER_CONFIRM_FRAMES = 1   # 1 = no debounce, classify every frame on its own

# Shape detection
SHAPE_AREA_MIN = 2000
BINARIZATION_THRESHOLD = 50
MIN_COMPONENT_POINTS = 11
MAX_COMPONENT_POINTS = 10000
DETECTION_INTERVAL_MS = 100
ASYNC_SHAPE_DETECTION = True

# Undo / redo
HISTORY_CAPACITY = 50

# Hand landmarker (MediaPipe Tasks model asset)
HAND_MODEL_PATH = "hand_landmarker.task"
DETECTION_CONFIDENCE = 0.5
TRACKING_CONFIDENCE = 0.5

# UI
WINDOW_NAME = "Gesture Paint"
CAPTURE_DIR = "captures"
LOG_LEVEL = "INFO"
