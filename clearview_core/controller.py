"""
Top-level editor state machine.

One controller lives in each browser session and is the only holder of
cross-cutting state: the original upload, the processed result and the
processing status (idle -> processing -> success / error).

Every upload, reset and submission bumps ``generation``. A result handed back
with an older generation belongs to a request the user has already walked
away from and is dropped.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app_config.constants import UIConfig
from clearview_core.gemini_client import EditRequest
from clearview_core.mask_canvas import MaskCanvas
from clearview_core.payload import ImagePayload
from clearview_core.prompts import EditMode, EraserEdit

logger = logging.getLogger("clearview.controller")


class ProcessingStatus(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class EditorController:
    original: Optional[ImagePayload] = None
    mime_type: Optional[str] = None
    file_name: Optional[str] = None
    processed: Optional[ImagePayload] = None
    status: ProcessingStatus = ProcessingStatus.IDLE
    error_message: Optional[str] = None
    generation: int = 0

    @property
    def has_image(self) -> bool:
        return self.original is not None

    @property
    def is_processing(self) -> bool:
        return self.status == ProcessingStatus.PROCESSING

    @property
    def can_submit(self) -> bool:
        return self.has_image and self.status in (ProcessingStatus.IDLE, ProcessingStatus.ERROR)

    def load_image(self, payload: ImagePayload, mime_type: str, file_name: Optional[str] = None):
        """Replace the workspace image. Any in-flight result becomes stale."""
        self.original = payload
        self.mime_type = mime_type
        self.file_name = file_name
        self.processed = None
        self.status = ProcessingStatus.IDLE
        self.error_message = None
        self.generation += 1
        logger.info("Loaded %s (%s), generation %d", file_name or "image", mime_type, self.generation)

    def reset(self):
        """Return to the empty workspace."""
        self.original = None
        self.mime_type = None
        self.file_name = None
        self.processed = None
        self.status = ProcessingStatus.IDLE
        self.error_message = None
        self.generation += 1

    def edit_again(self):
        """Leave the success view and go back to editing the same image."""
        if self.status != ProcessingStatus.SUCCESS:
            return
        self.processed = None
        self.status = ProcessingStatus.IDLE

    def build_request(self, mode: EditMode, canvas: Optional[MaskCanvas] = None) -> EditRequest:
        """
        Build the request for the current image. Eraser mode sends the canvas
        export (PNG with the strokes baked in); general mode sends the upload.
        """
        if not self.has_image:
            raise RuntimeError("No image loaded")
        if isinstance(mode, EraserEdit) and canvas is not None and canvas.is_loaded:
            exported = canvas.export_image()
            return EditRequest(payload=exported, mime_type=exported.mime_type, mode=mode)
        return EditRequest(payload=self.original, mime_type=self.mime_type, mode=mode)

    def begin_processing(self) -> int:
        """Enter PROCESSING and return the generation tag for this request."""
        if not self.can_submit:
            raise RuntimeError(f"Cannot submit while {self.status.value}")
        self.processed = None
        self.error_message = None
        self.status = ProcessingStatus.PROCESSING
        self.generation += 1
        return self.generation

    def _is_current(self, generation: int) -> bool:
        if generation != self.generation or self.status != ProcessingStatus.PROCESSING:
            logger.warning(
                "Dropping stale result for generation %d (current %d, %s)",
                generation, self.generation, self.status.value,
            )
            return False
        return True

    def complete(self, generation: int, payload: ImagePayload) -> bool:
        if not self._is_current(generation):
            return False
        self.processed = payload
        self.status = ProcessingStatus.SUCCESS
        logger.info("Edit %d succeeded", generation)
        return True

    def fail(self, generation: int, error: BaseException) -> bool:
        if not self._is_current(generation):
            return False
        logger.error(f"Edit {generation} failed: {error}", exc_info=error)
        self.processed = None
        self.status = ProcessingStatus.ERROR
        self.error_message = UIConfig.GENERIC_ERROR_MESSAGE
        return True

    def run_edit(self, editor, request: EditRequest) -> bool:
        """Submit and wait. Returns True when a processed image is available."""
        generation = self.begin_processing()
        try:
            result = editor.edit_image(request)
        except Exception as e:
            self.fail(generation, e)
            return False
        return self.complete(generation, result)
