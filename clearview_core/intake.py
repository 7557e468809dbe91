# Upload validation and decoding

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app_config.constants import UploadConfig
from clearview_core.errors import ImageDecodeError
from clearview_core.payload import ImagePayload

logger = logging.getLogger("clearview.intake")


def validate_upload(name: str, mime_type: Optional[str], size: int,
                    max_size_bytes: int = UploadConfig.MAX_FILE_SIZE_BYTES,
                    accepted_types: Tuple[str, ...] = UploadConfig.ACCEPTED_MIME_TYPES) -> Tuple[bool, Optional[str]]:
    """
    Validate an upload before it is read.

    Args:
        name: Original file name (only used in messages)
        mime_type: Declared MIME type of the file
        size: File size in bytes
        max_size_bytes: Size ceiling
        accepted_types: Accepted image MIME types

    Returns:
        tuple: (is_valid, error_message)

    Example:
        >>> validate_upload("cat.png", "image/png", 2048)
        (True, None)
        >>> validate_upload("notes.txt", "text/plain", 12)
        (False, 'Please upload an image file (notes.txt is text/plain)')
    """
    mime_type = (mime_type or "").lower()

    if not mime_type.startswith("image/"):
        return False, f"Please upload an image file ({name} is {mime_type or 'of unknown type'})"

    if mime_type not in accepted_types:
        allowed = ", ".join(t.split("/", 1)[1].upper() for t in accepted_types)
        return False, f"Unsupported image type {mime_type}. Supported: {allowed}"

    if size > max_size_bytes:
        size_mb = size / (1024 * 1024)
        max_mb = max_size_bytes / (1024 * 1024)
        return False, f"Image too large ({size_mb:.1f}MB). Maximum: {max_mb:.0f}MB"

    return True, None


def decode_upload(data: bytes, mime_type: str) -> ImagePayload:
    """
    Turn raw upload bytes into an image payload.

    The pixels are fully decoded here so truncated files are rejected at
    intake rather than when the canvas or preview first reads them.

    Raises:
        ImageDecodeError: If Pillow cannot decode the bytes as an image
    """
    if not data:
        raise ImageDecodeError("Uploaded file is empty")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"File could not be read as an image: {e}")
    return ImagePayload.from_bytes(data, mime_type.lower())


def read_upload(uploaded_file) -> ImagePayload:
    """Read a Streamlit UploadedFile (or any object with getvalue() and type)."""
    data = uploaded_file.getvalue()
    payload = decode_upload(data, uploaded_file.type)
    logger.info("Decoded upload %s (%s, %d bytes)", uploaded_file.name, payload.mime_type, len(data))
    return payload
