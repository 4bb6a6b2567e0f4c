"""Typed, validated view of the flat ``config`` module."""

from dataclasses import dataclass
from itertools import combinations
from typing import Any, Optional, Sequence, Tuple

RGB = Tuple[int, int, int]
Region = Tuple[float, float, float, float]


class ConfigurationError(ValueError):
    """Raised at startup when the configuration cannot be used."""


@dataclass(frozen=True)
class PaletteEntry:
    name: str
    rgb: RGB
    region: Region  # (x1, y1, x2, y2) in the palette reference space


@dataclass(frozen=True)
class PaintConfig:
    canvas_width: int = 1280
    canvas_height: int = 720
    brush_width: int = 10
    brush_width_min: int = 2
    brush_width_max: int = 50
    eraser_width: int = 40
    palette: Tuple[PaletteEntry, ...] = ()
    palette_reference_size: Tuple[int, int] = (1280, 720)
    default_color: str = "Red"
    finger_up_margin: float = 20
    finger_confirm_frames: int = 1
    shape_area_min: int = 2000
    binarization_threshold: int = 50
    min_component_points: int = 11
    max_component_points: int = 10000
    detection_interval_ms: int = 100
    async_shape_detection: bool = True
    history_capacity: int = 50

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return self.canvas_width, self.canvas_height

    @property
    def current_color(self) -> RGB:
        for entry in self.palette:
            if entry.name.lower() == self.default_color.lower():
                return entry.rgb
        raise ConfigurationError(f"unknown default color {self.default_color!r}")


def _regions_overlap(a: Region, b: Region) -> bool:
    # Hit testing uses exclusive bounds, so boxes sharing an edge never compete.
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return ax1 < bx2 and bx1 < ax2 and ay1 < by2 and by1 < ay2


def validate_palette(entries: Sequence[PaletteEntry]) -> None:
    if not entries:
        raise ConfigurationError("palette must define at least one color")

    seen = set()
    for entry in entries:
        key = entry.name.lower()
        if key in seen:
            raise ConfigurationError(f"duplicate palette color {entry.name!r}")
        seen.add(key)

        if len(entry.rgb) != 3 or not all(
            isinstance(c, int) and 0 <= c <= 255 for c in entry.rgb
        ):
            raise ConfigurationError(f"palette color {entry.name!r} has invalid rgb {entry.rgb!r}")

        if len(entry.region) != 4:
            raise ConfigurationError(f"palette region for {entry.name!r} must be (x1, y1, x2, y2)")
        x1, y1, x2, y2 = entry.region
        if x1 >= x2 or y1 >= y2:
            raise ConfigurationError(f"palette region for {entry.name!r} is empty: {entry.region!r}")

    for a, b in combinations(entries, 2):
        if _regions_overlap(a.region, b.region):
            raise ConfigurationError(
                f"palette regions {a.name!r} and {b.name!r} overlap"
            )


def validate_config(cfg: PaintConfig) -> None:
    positive = {
        "canvas_width": cfg.canvas_width,
        "canvas_height": cfg.canvas_height,
        "brush_width_min": cfg.brush_width_min,
        "eraser_width": cfg.eraser_width,
        "max_component_points": cfg.max_component_points,
        "detection_interval_ms": cfg.detection_interval_ms,
        "history_capacity": cfg.history_capacity,
    }
    for name, value in positive.items():
        if value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value!r}")

    if cfg.brush_width_min > cfg.brush_width_max:
        raise ConfigurationError("brush_width_min is larger than brush_width_max")
    if not cfg.brush_width_min <= cfg.brush_width <= cfg.brush_width_max:
        raise ConfigurationError(
            f"brush_width {cfg.brush_width} outside [{cfg.brush_width_min}, {cfg.brush_width_max}]"
        )
    if not 0 <= cfg.binarization_threshold <= 255:
        raise ConfigurationError("binarization_threshold must be within 0-255")
    if cfg.finger_confirm_frames < 1:
        raise ConfigurationError("finger_confirm_frames must be at least 1")
    if cfg.finger_up_margin < 0:
        raise ConfigurationError("finger_up_margin must not be negative")
    if cfg.shape_area_min < 0:
        raise ConfigurationError("shape_area_min must not be negative")
    if cfg.min_component_points > cfg.max_component_points:
        raise ConfigurationError("min_component_points is larger than max_component_points")
    ref_w, ref_h = cfg.palette_reference_size
    if ref_w <= 0 or ref_h <= 0:
        raise ConfigurationError("palette_reference_size must be positive")

    validate_palette(cfg.palette)
    cfg.current_color  # raises for an unknown default color


def load_config(source: Optional[Any] = None, **overrides: Any) -> PaintConfig:
    """Build a validated PaintConfig from a config module (or any object).

    Upper-case attributes missing on ``source`` fall back to the dataclass
    defaults, the same way main.py reads optional tunables with getattr.
    Keyword overrides use the lower-case field names.
    """
    if source is None:
        import config as source

    defaults = PaintConfig()
    palette_raw = getattr(source, "PALETTE", None) or []
    try:
        palette = tuple(
            PaletteEntry(
                name=str(name),
                rgb=tuple(rgb),
                region=tuple(float(v) for v in region),
            )
            for name, rgb, region in palette_raw
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"malformed PALETTE entry: {exc}") from exc

    values = {
        "canvas_width": getattr(source, "CANVAS_WIDTH", defaults.canvas_width),
        "canvas_height": getattr(source, "CANVAS_HEIGHT", defaults.canvas_height),
        "brush_width": getattr(source, "BRUSH_WIDTH", defaults.brush_width),
        "brush_width_min": getattr(source, "BRUSH_WIDTH_MIN", defaults.brush_width_min),
        "brush_width_max": getattr(source, "BRUSH_WIDTH_MAX", defaults.brush_width_max),
        "eraser_width": getattr(source, "ERASER_WIDTH", defaults.eraser_width),
        "palette": palette,
        "palette_reference_size": tuple(
            getattr(source, "PALETTE_REFERENCE_SIZE", defaults.palette_reference_size)
        ),
        "default_color": getattr(source, "DEFAULT_COLOR", defaults.default_color),
        "finger_up_margin": getattr(source, "FINGER_UP_MARGIN", defaults.finger_up_margin),
        "finger_confirm_frames": getattr(
            source, "FINGER_CONFIRM_FRAMES", defaults.finger_confirm_frames
        ),
        "shape_area_min": getattr(source, "SHAPE_AREA_MIN", defaults.shape_area_min),
        "binarization_threshold": getattr(
            source, "BINARIZATION_THRESHOLD", defaults.binarization_threshold
        ),
        "min_component_points": getattr(
            source, "MIN_COMPONENT_POINTS", defaults.min_component_points
        ),
        "max_component_points": getattr(
            source, "MAX_COMPONENT_POINTS", defaults.max_component_points
        ),
        "detection_interval_ms": getattr(
            source, "DETECTION_INTERVAL_MS", defaults.detection_interval_ms
        ),
        "async_shape_detection": getattr(
            source, "ASYNC_SHAPE_DETECTION", defaults.async_shape_detection
        ),
        "history_capacity": getattr(source, "HISTORY_CAPACITY", defaults.history_capacity),
    }
    values.update(overrides)

    cfg = PaintConfig(**values)
    validate_config(cfg)
    return cfg
