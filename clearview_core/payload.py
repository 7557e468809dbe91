"""
Image payloads: encoded pictures tagged with their MIME type.

A payload is stored as a data URL (``data:<mime>;base64,<body>``), the same
self-describing form the uploader, the mask canvas export and the Gemini
response all produce.
"""

import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from clearview_core.errors import ImageDecodeError

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<body>.*)$", re.DOTALL)


def strip_data_url_prefix(data_url: str) -> str:
    """Return the raw base64 body of a data URL (everything after the comma)."""
    if "," not in data_url:
        raise ImageDecodeError("Data URL has no encoding prefix")
    return data_url.split(",", 1)[1]


@dataclass(frozen=True)
class ImagePayload:
    data_url: str

    def __post_init__(self):
        if not DATA_URL_PATTERN.match(self.data_url):
            raise ImageDecodeError("Not a base64 data URL")

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ImagePayload":
        encoded = base64.b64encode(data).decode("ascii")
        return cls(f"data:{mime_type};base64,{encoded}")

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str) -> "ImagePayload":
        return cls(f"data:{mime_type};base64,{encoded}")

    @classmethod
    def from_image(cls, image: Image.Image, format: str = "PNG") -> "ImagePayload":
        """Encode a Pillow image. Only lossless PNG is used by the canvas export."""
        buf = io.BytesIO()
        image.save(buf, format=format)
        mime_type = Image.MIME.get(format.upper(), f"image/{format.lower()}")
        return cls.from_bytes(buf.getvalue(), mime_type)

    @property
    def mime_type(self) -> str:
        return DATA_URL_PATTERN.match(self.data_url).group("mime")

    @property
    def base64_data(self) -> str:
        return strip_data_url_prefix(self.data_url)

    def to_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.base64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(f"Invalid base64 image body: {e}")

    def to_image(self) -> Image.Image:
        """Decode into a fully loaded Pillow image."""
        try:
            img = Image.open(io.BytesIO(self.to_bytes()))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageDecodeError(f"Payload is not a readable image: {e}")
        return img

    def __repr__(self):
        return f"ImagePayload(mime_type={self.mime_type!r}, length={len(self.base64_data)})"
