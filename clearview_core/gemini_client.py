"""
Gemini image-edit client.

Wraps a constructed ``genai.Client`` so the caller decides how (and with which
credential) it is built. One call per edit: the image bytes and the prompt go
out together, and the first inline image in the first candidate comes back.
"""

import base64
import logging
import time
from dataclasses import dataclass

from google import genai
from google.genai import types

from app_config.constants import GeminiConfig
from clearview_core.errors import NoImageReturnedError
from clearview_core.payload import ImagePayload
from clearview_core.prompts import EditMode, build_prompt

logger = logging.getLogger("clearview.gemini")


@dataclass(frozen=True)
class EditRequest:
    payload: ImagePayload
    mime_type: str
    mode: EditMode

    @property
    def prompt(self) -> str:
        return build_prompt(self.mode)


def build_contents(request: EditRequest):
    """Inline image part followed by the prompt text."""
    image_part = types.Part.from_bytes(data=request.payload.to_bytes(), mime_type=request.mime_type)
    return [image_part, request.prompt]


def extract_image(response) -> ImagePayload:
    """
    Return the first inline image of the first candidate as a PNG payload.

    Raises:
        NoImageReturnedError: If no part carries image bytes
    """
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                data = inline.data
                if isinstance(data, (bytes, bytearray)):
                    data = base64.b64encode(data).decode("ascii")
                return ImagePayload.from_base64(data, GeminiConfig.RESULT_MIME_TYPE)
    raise NoImageReturnedError("No image data returned from Gemini.")


class GeminiImageEditor:
    """Sends edit requests to a Gemini image model."""

    def __init__(self, client: genai.Client, model: str = GeminiConfig.DEFAULT_MODEL):
        self.client = client
        self.model = model

    def edit_image(self, request: EditRequest) -> ImagePayload:
        """
        Run one edit. Transport and API errors propagate unchanged; there is
        no retry and no caching.
        """
        mode_name = type(request.mode).__name__
        logger.info("Sending %s request to %s (%s)", mode_name, self.model, request.mime_type)
        start = time.time()
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=build_contents(request),
            )
            result = extract_image(response)
        except Exception as e:
            logger.error(f"Gemini API error after {time.time() - start:.1f}s: {e}")
            raise
        logger.info("Gemini returned an image in %.1fs", time.time() - start)
        return result
