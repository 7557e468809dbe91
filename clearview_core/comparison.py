"""
Before/after comparison model.

The divider position is a percentage of the container width. Both images are
brought into the same pixel frame before they are layered, otherwise the
clipped "before" layer would not line up with the "after" layer underneath.
"""

from typing import Tuple

from PIL import Image

from app_config.constants import UIConfig


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


class SliderState:
    """
    Divider position for the before/after view.

    The browser-side drag is handled by streamlit-image-comparison; the drag
    methods here model the same contract (pointer projected into the
    container, clamped to [0, 100]) and `move_to` backs the fine-position
    slider under the comparison.
    """

    def __init__(self, position: float = UIConfig.SLIDER_START_POSITION):
        self.position = clamp_percent(position)
        self.dragging = False

    def begin_drag(self):
        self.dragging = True

    def end_drag(self):
        self.dragging = False

    def drag_to(self, pointer_x: float, container_left: float, container_width: float) -> float:
        """
        Project a pointer's horizontal position into the container as a
        percentage. Only applies while dragging; pointers outside the container
        pin the divider to the nearest edge.
        """
        if self.dragging and container_width > 0:
            x = max(0.0, min(pointer_x - container_left, container_width))
            self.position = clamp_percent(x / container_width * 100)
        return self.position

    def move_to(self, percent: float) -> float:
        self.position = clamp_percent(percent)
        return self.position


def align_to_frame(before: Image.Image, after: Image.Image) -> Tuple[Image.Image, Image.Image]:
    """Resize `before` to the pixel size of `after` so both share one frame."""
    if before.size != after.size:
        before = before.resize(after.size, Image.LANCZOS)
    if before.mode != after.mode:
        before = before.convert("RGB")
        after = after.convert("RGB")
    return before, after
