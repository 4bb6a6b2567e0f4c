"""
Brush state and color palette.

The palette boxes are defined once in a reference resolution and scaled to
whatever size the canvas currently has, so a tap lands on the same color at
any window size.
"""
import logging
from typing import Optional, Sequence, Tuple, Union

from core.landmarks import Point
from core.paint_config import PaintConfig, PaletteEntry, validate_palette

logger = logging.getLogger(__name__)


class ColorPalette:
    def __init__(
        self,
        entries: Sequence[PaletteEntry],
        reference_size: Tuple[int, int] = (1280, 720),
    ) -> None:
        validate_palette(entries)
        self.entries: Tuple[PaletteEntry, ...] = tuple(entries)
        self.reference_size = reference_size

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def index_of(self, entry: PaletteEntry) -> int:
        return self.entries.index(entry)

    def get(self, name: str) -> PaletteEntry:
        for entry in self.entries:
            if entry.name.lower() == name.lower():
                return entry
        raise KeyError(name)

    def scaled_region(
        self, entry: PaletteEntry, canvas_size: Tuple[int, int]
    ) -> Tuple[float, float, float, float]:
        ref_w, ref_h = self.reference_size
        scale_x = canvas_size[0] / ref_w
        scale_y = canvas_size[1] / ref_h
        x1, y1, x2, y2 = entry.region
        return x1 * scale_x, y1 * scale_y, x2 * scale_x, y2 * scale_y

    def hit_test(
        self, point: Point, canvas_size: Tuple[int, int]
    ) -> Optional[PaletteEntry]:
        """Return the first entry whose scaled box strictly contains point."""
        x, y = point
        for entry in self.entries:
            x1, y1, x2, y2 = self.scaled_region(entry, canvas_size)
            if x1 < x < x2 and y1 < y < y2:
                return entry
        return None


class BrushManager:
    """Current color and stroke widths for the pen and eraser."""

    def __init__(self, config: PaintConfig, palette: Optional[ColorPalette] = None) -> None:
        self.palette = palette or ColorPalette(config.palette, config.palette_reference_size)
        self.width_min = config.brush_width_min
        self.width_max = config.brush_width_max
        self._entry = self.palette.get(config.default_color)
        self._brush_width = self._clamp(config.brush_width)
        self._eraser_width = self._clamp(config.eraser_width)

    def _clamp(self, width: int) -> int:
        return int(min(max(width, self.width_min), self.width_max))

    @property
    def color(self) -> Tuple[int, int, int]:
        return self._entry.rgb

    @property
    def color_name(self) -> str:
        return self._entry.name

    @property
    def brush_width(self) -> int:
        return self._brush_width

    @property
    def eraser_width(self) -> int:
        return self._eraser_width

    def select_color(self, color: Union[str, PaletteEntry]) -> PaletteEntry:
        entry = self.palette.get(color) if isinstance(color, str) else color
        if entry != self._entry:
            logger.info("Color changed to %s", entry.name)
        self._entry = entry
        return entry

    def next_color(self) -> PaletteEntry:
        idx = (self.palette.index_of(self._entry) + 1) % len(self.palette)
        return self.select_color(self.palette.entries[idx])

    def prev_color(self) -> PaletteEntry:
        idx = (self.palette.index_of(self._entry) - 1) % len(self.palette)
        return self.select_color(self.palette.entries[idx])

    def set_brush_width(self, width: int) -> int:
        self._brush_width = self._clamp(width)
        return self._brush_width

    def set_eraser_width(self, width: int) -> int:
        self._eraser_width = self._clamp(width)
        return self._eraser_width

    def get_status_text(self) -> str:
        return f"Brush: {self.color_name} | Size: {self.brush_width} | Eraser: {self.eraser_width}"
