"""
Canvas wrapper module - Handles background image conversion for streamlit-drawable-canvas.

streamlit-drawable-canvas cannot take a data URL as its background, and its own
PIL conversion relies on a Streamlit internal that has moved between releases.
This wrapper injects the background through the fabric.js initial drawing
instead, using a display-sized preview of the payload.
"""

from streamlit_drawable_canvas import st_canvas as raw_st_canvas
from app_config.constants import CanvasConfig
from ..encoding import payload_to_preview_url


def st_canvas(*args, background_payload=None, **kwargs):
    """
    Wrapper for streamlit_drawable_canvas with an ImagePayload background.

    Args:
        *args: Positional arguments passed to st_canvas
        background_payload: ImagePayload shown underneath the strokes
        **kwargs: Keyword arguments passed to st_canvas, including:
            - width / height: Display size of the canvas in pixels
            - stroke_width / stroke_color: Brush settings
            - drawing_mode: 'freedraw' for the mask brush
            - key: Widget key; change it to wipe all strokes

    Returns:
        Canvas result object with json_data and image_data
    """
    kwargs["background_color"] = "rgba(0,0,0,0)"

    if background_payload is not None:
        width, height = kwargs.get("width"), kwargs.get("height")
        url = payload_to_preview_url(background_payload, width, height)

        if not kwargs.get("initial_drawing"):
            kwargs["initial_drawing"] = {"version": CanvasConfig.FABRIC_VERSION, "objects": []}

        kwargs["initial_drawing"]["background"] = "rgba(0,0,0,0)"
        kwargs["initial_drawing"]["backgroundImage"] = {
            "type": "image",
            "version": CanvasConfig.FABRIC_VERSION,
            "originX": "left",
            "originY": "top",
            "left": 0,
            "top": 0,
            "width": width,
            "height": height,
            "scaleX": 1,
            "scaleY": 1,
            "visible": True,
            "src": url
        }

    return raw_st_canvas(*args, **kwargs)
