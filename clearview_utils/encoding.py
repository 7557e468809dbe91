import streamlit as st
from io import BytesIO
import base64
from PIL import Image
from app_config.constants import PerformanceConfig
from clearview_core.payload import ImagePayload

@st.cache_data(show_spinner=False, max_entries=PerformanceConfig.IMAGE_ENCODING_CACHE_SIZE)
def _cached_preview_url(data_url, width, height):
    """Internal cached encoder keyed on the payload text and target size."""
    img = ImagePayload(data_url).to_image()
    if img.mode != "RGB":
        img = img.convert("RGB")

    # PERFORMANCE: downscale to the on-screen size before shipping to the browser
    if width and height and (width, height) != img.size:
        img = img.resize((width, height), Image.LANCZOS)

    buf = BytesIO()
    img.save(buf, format="JPEG", quality=PerformanceConfig.BACKGROUND_IMAGE_QUALITY)
    return f"data:image/jpeg;base64,{base64.b64encode(buf.getvalue()).decode()}"

def payload_to_preview_url(payload, width=0, height=0):
    """Data URL of a display-sized JPEG preview of an image payload."""
    return _cached_preview_url(payload.data_url, width, height)

def fit_display_size(image_size, max_width, max_height):
    """Largest size that fits inside max_width x max_height, keeping aspect ratio."""
    w, h = image_size
    scale = min(max_width / w, max_height / h, 1.0)
    return max(1, int(round(w * scale))), max(1, int(round(h * scale)))
