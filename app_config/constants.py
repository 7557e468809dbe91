"""
Configuration constants for ClearView AI.
All tunable parameters and magic numbers are defined here with explanations.
"""


class UploadConfig:
    """Configuration for file intake."""

    # --- Size Limits ---
    # Hard ceiling for uploaded files (10 MiB)
    MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

    # --- Accepted Types ---
    # MIME types offered by the uploader; anything else is rejected up front
    ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg", "image/jpg", "image/webp")

    # Extensions passed to st.file_uploader
    ACCEPTED_EXTENSIONS = ("png", "jpg", "jpeg", "webp")


class CanvasConfig:
    """Configuration for the freehand mask canvas."""

    # --- Brush ---
    # Semi-transparent red highlight (rgba(255, 0, 0, 0.8))
    STROKE_RGBA = (255, 0, 0, 204)
    STROKE_CSS = "rgba(255, 0, 0, 0.8)"

    # Brush width = max(MIN_BRUSH_WIDTH, surface width / BRUSH_WIDTH_DIVISOR)
    # Keeps marks legible on both thumbnails and full-resolution photos
    MIN_BRUSH_WIDTH = 10
    BRUSH_WIDTH_DIVISOR = 30

    # --- Display ---
    # Maximum on-screen width of the drawing surface (pixels)
    DISPLAY_WIDTH = 700

    # Maximum on-screen height; tall images are scaled down to fit
    DISPLAY_MAX_HEIGHT = 600

    # Fabric.js version tag expected by streamlit-drawable-canvas
    FABRIC_VERSION = "4.4.0"


class GeminiConfig:
    """Configuration for the generative image endpoint."""

    # --- Model ---
    # Image-capable Gemini model used for every edit
    DEFAULT_MODEL = "gemini-2.5-flash-image"

    # Request timeout in milliseconds (HttpOptions expects ms)
    DEFAULT_TIMEOUT_MS = 300_000

    # --- Response ---
    # Encoding prefix applied to returned inline image bytes
    RESULT_MIME_TYPE = "image/png"

    # --- Environment Variables ---
    API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
    MODEL_ENV_VAR = "GEMINI_IMAGE_MODEL"
    TIMEOUT_ENV_VAR = "GEMINI_TIMEOUT_MS"


class UIConfig:
    """Configuration for user interface behavior."""

    # --- Branding ---
    APP_TITLE = "ClearView AI"
    APP_SUBTITLE = "Smart watermark & object removal"
    PAGE_ICON = "✨"

    # --- Download ---
    DOWNLOAD_FILENAME = "clearview-result.png"

    # --- Comparison Slider ---
    # Initial divider position (percent of container width)
    SLIDER_START_POSITION = 50

    # Width of the comparison component (pixels)
    COMPARISON_WIDTH = 700

    # --- Messages ---
    # Shown for every remote failure; the cause only goes to the log
    GENERIC_ERROR_MESSAGE = (
        "Something went wrong while processing the image. "
        "Please try again later or use a different image."
    )
    INSTRUCTION_PLACEHOLDER = (
        "e.g. remove the red logo in the top-right corner, "
        "or remove the date stamp in the middle..."
    )


class PerformanceConfig:
    """Configuration for performance optimization."""

    # --- Encoding ---
    # JPEG quality for canvas background previews (1-100)
    BACKGROUND_IMAGE_QUALITY = 85

    # Maximum cache entries for preview encoding
    IMAGE_ENCODING_CACHE_SIZE = 10

    # --- Background Worker ---
    # Seconds between reruns while an edit is in flight
    POLL_INTERVAL_SECONDS = 0.5

    # Single worker: only one edit request may be in flight
    MAX_WORKERS = 1
