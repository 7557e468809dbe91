"""
Freehand mask canvas.

Holds the uploaded image at its native resolution and lets the user paint
semi-transparent red strokes over it. Strokes are drawn on a transparent
overlay and composited into the surface when the pointer is released, so a
single stroke never darkens where it crosses itself.

Coordinates arriving from the browser are in display (CSS) pixels; they are
mapped to surface pixels by the ratio between the surface's intrinsic size and
its displayed size on each axis.
"""

import logging
import math
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from app_config.constants import CanvasConfig
from clearview_core.payload import ImagePayload

logger = logging.getLogger("clearview.canvas")

Point = Tuple[float, float]
Size = Tuple[int, int]


class CanvasState(Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    DRAWING = "drawing"
    IDLE_WITH_STROKES = "idle_with_strokes"


def has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)


def path_to_points(path: Sequence[Sequence]) -> List[Point]:
    """
    Flatten fabric.js path commands into a polyline.

    streamlit-drawable-canvas returns freedraw strokes as commands such as
    ``["M", x, y]``, ``["Q", cx, cy, x, y]`` and ``["L", x, y]``. Every
    coordinate pair is kept in order; for quadratic segments the control point
    is the sampled pointer position, so keeping it follows the user's hand.
    """
    points = []
    for command in path:
        if not command or str(command[0]).upper() == "Z":
            continue
        coords = [float(v) for v in command[1:]]
        for i in range(0, len(coords) - 1, 2):
            points.append((coords[i], coords[i + 1]))
    return points


class MaskCanvas:
    """Drawable surface backed by Pillow."""

    def __init__(self, stroke_rgba=CanvasConfig.STROKE_RGBA):
        self.stroke_rgba = tuple(stroke_rgba)
        self.state = CanvasState.UNLOADED
        self.stroke_count = 0
        self._base: Optional[Image.Image] = None
        self._surface: Optional[Image.Image] = None
        self._points: List[Point] = []

    # --- Loading ---

    def load(self, payload: ImagePayload):
        """Decode the payload and paint it as the base layer at native size."""
        img = payload.to_image()
        self._base = img.convert("RGBA" if has_alpha(img) else "RGB")
        self._surface = self._base.convert("RGBA")
        self._points = []
        self.stroke_count = 0
        self.state = CanvasState.LOADED
        logger.debug("Canvas loaded at %dx%d (%s)", self._base.width, self._base.height, self._base.mode)

    @property
    def is_loaded(self) -> bool:
        return self.state != CanvasState.UNLOADED

    @property
    def size(self) -> Optional[Size]:
        return self._base.size if self._base is not None else None

    @property
    def has_strokes(self) -> bool:
        return self.stroke_count > 0

    @property
    def brush_width(self) -> int:
        """Brush width in surface pixels, proportional to the surface width."""
        self._require_loaded()
        width = max(CanvasConfig.MIN_BRUSH_WIDTH, self._base.width / CanvasConfig.BRUSH_WIDTH_DIVISOR)
        return int(round(width))

    def display_brush_width(self, display_size: Size) -> float:
        """Brush width as it should appear on a surface shown at display_size."""
        return self.brush_width * display_size[0] / self._base.width

    def _require_loaded(self):
        if self._base is None:
            raise RuntimeError("Canvas has no image loaded")

    # --- Coordinates ---

    def to_surface_coords(self, x: float, y: float, display_size: Optional[Size] = None) -> Point:
        """Map a display-space point to surface pixels."""
        self._require_loaded()
        if display_size is None:
            return float(x), float(y)
        display_w, display_h = display_size
        if display_w <= 0 or display_h <= 0:
            raise ValueError(f"Display size must be positive, got {display_size}")
        width, height = self._base.size
        return x * width / display_w, y * height / display_h

    # --- Strokes ---

    def begin_stroke(self, x: float, y: float, display_size: Optional[Size] = None):
        self._require_loaded()
        if self.state == CanvasState.DRAWING:
            self.end_stroke()
        self._points = [self.to_surface_coords(x, y, display_size)]
        self.state = CanvasState.DRAWING

    def extend_stroke(self, x: float, y: float, display_size: Optional[Size] = None) -> bool:
        """Add a point to the active stroke. Ignored while the pointer is up."""
        if self.state != CanvasState.DRAWING:
            return False
        self._points.append(self.to_surface_coords(x, y, display_size))
        return True

    def end_stroke(self):
        if self.state != CanvasState.DRAWING:
            return
        if len(self._points) >= 2:
            self._composite_stroke(self._points)
            self.stroke_count += 1
        self._points = []
        self.state = CanvasState.IDLE_WITH_STROKES if self.stroke_count else CanvasState.LOADED

    def draw_path(self, points: Iterable[Point], display_size: Optional[Size] = None):
        """Draw one complete stroke (pointer down, moves, pointer up)."""
        points = list(points)
        if not points:
            return
        self.begin_stroke(*points[0], display_size=display_size)
        for x, y in points[1:]:
            self.extend_stroke(x, y, display_size=display_size)
        self.end_stroke()

    def apply_canvas_json(self, json_data: Optional[dict], display_size: Size) -> int:
        """
        Bake the freedraw paths of a streamlit-drawable-canvas result into the
        surface. Returns the number of strokes applied.
        """
        applied = 0
        for obj in (json_data or {}).get("objects", []):
            if obj.get("type") != "path":
                continue
            points = path_to_points(obj.get("path") or [])
            if len(points) < 2:
                continue
            self.draw_path(points, display_size)
            applied += 1
        return applied

    def _composite_stroke(self, points: List[Point]):
        # Overlay covers only the stroke's bounding box; the surface is kept in RGBA
        width = self.brush_width
        r = width / 2
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        left = max(0, int(math.floor(min(xs) - r)) - 1)
        top = max(0, int(math.floor(min(ys) - r)) - 1)
        right = min(self._surface.width, int(math.ceil(max(xs) + r)) + 1)
        bottom = min(self._surface.height, int(math.ceil(max(ys) + r)) + 1)
        if right <= left or bottom <= top:
            return

        layer = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        shifted = [(x - left, y - top) for x, y in points]
        draw.line(shifted, fill=self.stroke_rgba, width=width, joint="curve")
        # round caps
        for x, y in (shifted[0], shifted[-1]):
            draw.ellipse([x - r, y - r, x + r, y + r], fill=self.stroke_rgba)

        self._surface.alpha_composite(layer, dest=(left, top))

    # --- Export / Clear ---

    def export_image(self) -> ImagePayload:
        """Serialize the composited surface (base image plus strokes) as PNG."""
        self._require_loaded()
        surface = self._surface if self._base.mode == "RGBA" else self._surface.convert(self._base.mode)
        return ImagePayload.from_image(surface, format="PNG")

    def clear(self):
        """Drop every stroke and restore the originally loaded image."""
        self._require_loaded()
        self._surface = self._base.convert("RGBA")
        self._points = []
        self.stroke_count = 0
        self.state = CanvasState.LOADED
