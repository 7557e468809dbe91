"""
Unit tests for clearview_core/mask_canvas.py.

Tests cover loading at native resolution, display-to-surface coordinate
mapping, stroke compositing, export fidelity and clearing.
"""

import numpy as np
import pytest
from PIL import Image, ImageDraw

from app_config.constants import CanvasConfig
from clearview_core.mask_canvas import CanvasState, MaskCanvas, path_to_points
from clearview_core.payload import ImagePayload


def pixels(payload):
    return np.array(payload.to_image())


@pytest.fixture
def canvas(sample_payload):
    c = MaskCanvas()
    c.load(sample_payload)
    return c


class TestLoad:
    """Test canvas loading."""

    def test_starts_unloaded(self):
        c = MaskCanvas()
        assert c.state == CanvasState.UNLOADED
        assert not c.is_loaded
        with pytest.raises(RuntimeError):
            c.export_image()

    def test_native_size(self, canvas, sample_image):
        assert canvas.state == CanvasState.LOADED
        assert canvas.size == sample_image.size

    def test_brush_width_has_floor(self, canvas):
        # 120px wide: 120 / 30 = 4, so the minimum applies
        assert canvas.brush_width == CanvasConfig.MIN_BRUSH_WIDTH

    def test_brush_width_scales(self):
        c = MaskCanvas()
        c.load(ImagePayload.from_image(Image.new("RGB", (900, 600), "white")))
        assert c.brush_width == 30
        assert c.display_brush_width((450, 300)) == pytest.approx(15)


class TestCoordinates:
    """Test display-to-surface mapping."""

    def test_identity_without_display_size(self, canvas):
        assert canvas.to_surface_coords(10, 20) == (10.0, 20.0)

    def test_scaled_display(self, canvas):
        # surface is 120x90, shown at 60x45
        assert canvas.to_surface_coords(30, 15, (60, 45)) == (60.0, 30.0)

    def test_upscaled_display(self, canvas):
        assert canvas.to_surface_coords(240, 180, (240, 180)) == (120.0, 90.0)
        assert canvas.to_surface_coords(120, 90, (240, 180)) == (60.0, 45.0)

    def test_invalid_display_size(self, canvas):
        with pytest.raises(ValueError):
            canvas.to_surface_coords(1, 1, (0, 45))

    def test_stroke_lands_at_scaled_location(self, canvas):
        canvas.draw_path([(10, 10), (12, 10)], display_size=(60, 45))
        result = canvas.export_image().to_image()
        # display (11, 10) maps to surface (22, 20)
        r, g, b = result.getpixel((22, 20))
        assert r > 150 and b < 150
        # the unscaled location is untouched
        assert result.getpixel((11, 10)) == (0, 0, 255)


class TestStrokes:
    """Test stroke state machine and compositing."""

    def test_state_transitions(self, canvas):
        canvas.begin_stroke(5, 5)
        assert canvas.state == CanvasState.DRAWING
        canvas.extend_stroke(40, 40)
        canvas.end_stroke()
        assert canvas.state == CanvasState.IDLE_WITH_STROKES
        assert canvas.stroke_count == 1

        canvas.begin_stroke(50, 50)
        assert canvas.state == CanvasState.DRAWING
        canvas.extend_stroke(60, 60)
        canvas.end_stroke()
        assert canvas.state == CanvasState.IDLE_WITH_STROKES
        assert canvas.stroke_count == 2

    def test_move_without_pointer_down_is_ignored(self, canvas):
        assert canvas.extend_stroke(10, 10) is False
        canvas.end_stroke()
        assert canvas.state == CanvasState.LOADED
        assert not canvas.has_strokes

    def test_single_point_stroke_draws_nothing(self, canvas, sample_payload):
        canvas.begin_stroke(30, 30)
        canvas.end_stroke()
        assert canvas.state == CanvasState.LOADED
        np.testing.assert_array_equal(pixels(canvas.export_image()), pixels(sample_payload))

    def test_stroke_is_semi_transparent_red(self, canvas):
        canvas.draw_path([(10, 45), (50, 45)])
        r, g, b = canvas.export_image().to_image().getpixel((30, 45))
        # 80% red over pure blue
        assert r == pytest.approx(204, abs=2)
        assert g == 0
        assert b == pytest.approx(51, abs=2)

    def test_self_crossing_stroke_does_not_darken(self, canvas):
        canvas.draw_path([(10, 45), (50, 45), (30, 30), (30, 60)])
        img = canvas.export_image().to_image()
        assert img.getpixel((30, 45)) == img.getpixel((15, 45))

    def test_export_keeps_native_size(self, canvas, sample_image):
        canvas.draw_path([(0, 0), (119, 89)])
        exported = canvas.export_image()
        assert exported.mime_type == "image/png"
        assert exported.to_image().size == sample_image.size

    def test_stroke_matches_full_frame_composite(self, canvas, sample_image):
        points = [(20, 20), (60, 50), (100, 30)]
        canvas.draw_path(points)

        width = canvas.brush_width
        r = width / 2
        layer = Image.new("RGBA", sample_image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        draw.line(points, fill=CanvasConfig.STROKE_RGBA, width=width, joint="curve")
        for x, y in (points[0], points[-1]):
            draw.ellipse([x - r, y - r, x + r, y + r], fill=CanvasConfig.STROKE_RGBA)
        expected = Image.alpha_composite(sample_image.convert("RGBA"), layer).convert("RGB")

        np.testing.assert_array_equal(pixels(canvas.export_image()), np.array(expected))

    def test_stroke_leaves_far_pixels_untouched(self, canvas, sample_image):
        canvas.draw_path([(10, 10), (20, 10)])
        result = canvas.export_image().to_image()
        assert result.getpixel((110, 80)) == sample_image.getpixel((110, 80))

    def test_stroke_running_off_the_edge(self, canvas):
        canvas.draw_path([(-30, 45), (5, 45)])
        canvas.draw_path([(500, 500), (600, 600)])
        assert canvas.stroke_count == 2
        r, _, _ = canvas.export_image().to_image().getpixel((1, 45))
        assert r > 150


class TestExportAndClear:
    """Test export fidelity and clear."""

    def test_export_without_strokes_matches_original(self, canvas, sample_payload):
        np.testing.assert_array_equal(pixels(canvas.export_image()), pixels(sample_payload))

    def test_export_without_strokes_matches_jpeg_original(self, sample_jpeg_payload):
        c = MaskCanvas()
        c.load(sample_jpeg_payload)
        np.testing.assert_array_equal(pixels(c.export_image()), pixels(sample_jpeg_payload))

    def test_alpha_is_preserved(self):
        src = Image.new("RGBA", (40, 40), (10, 20, 30, 0))
        payload = ImagePayload.from_image(src)
        c = MaskCanvas()
        c.load(payload)
        np.testing.assert_array_equal(pixels(c.export_image()), np.array(src))

    def test_clear_after_strokes_matches_fresh_canvas(self, canvas, sample_payload):
        for i in range(5):
            canvas.draw_path([(5 + i * 10, 5), (5 + i * 10, 80)])
        assert canvas.stroke_count == 5

        canvas.clear()
        fresh = MaskCanvas()
        fresh.load(sample_payload)

        assert canvas.state == CanvasState.LOADED
        assert not canvas.has_strokes
        np.testing.assert_array_equal(pixels(canvas.export_image()), pixels(fresh.export_image()))

    def test_draw_then_clear_matches_pre_stroke_export(self, canvas):
        before = canvas.export_image()
        canvas.draw_path([(20, 20), (100, 70)])
        assert canvas.export_image() != before
        canvas.clear()
        assert canvas.export_image().data_url == before.data_url


class TestCanvasJson:
    """Test baking streamlit-drawable-canvas results."""

    def test_path_to_points(self):
        path = [["M", 1, 2], ["Q", 3, 4, 5, 6], ["L", 7, 8], ["z"]]
        assert path_to_points(path) == [(1, 2), (3, 4), (5, 6), (7, 8)]

    def test_apply_freedraw_objects(self, canvas):
        json_data = {
            "version": "4.4.0",
            "objects": [
                {"type": "path", "path": [["M", 5, 22], ["Q", 10, 22, 15, 22], ["L", 25, 22]]},
                {"type": "rect", "left": 0, "top": 0, "width": 10, "height": 10},
                {"type": "path", "path": [["M", 40, 5]]},
            ],
        }
        applied = canvas.apply_canvas_json(json_data, (60, 45))
        assert applied == 1
        assert canvas.stroke_count == 1
        r, _, _ = canvas.export_image().to_image().getpixel((30, 44))
        assert r > 150

    def test_apply_empty_json(self, canvas):
        assert canvas.apply_canvas_json(None, (60, 45)) == 0
        assert canvas.apply_canvas_json({"objects": []}, (60, 45)) == 0
        assert canvas.state == CanvasState.LOADED
