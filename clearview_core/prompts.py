"""
Edit modes and prompt construction.

The two modes form a closed set: ``GeneralEdit`` carries an optional free-text
instruction, ``EraserEdit`` relies on the red strokes painted on the canvas.
"""

from dataclasses import dataclass
from typing import Union

BASE_PROMPT = "You are an expert image editor."

ERASER_PROMPT = (
    "The user has marked specific areas of this image with RED strokes/scribbles. "
    "Your task is to act as a 'Magic Eraser'. Remove the red markings AND the objects "
    "or defects underneath them. Inpaint the removed areas to match the surrounding "
    "background seamlessly, ensuring high consistency and natural lighting. "
    "Do NOT leave any red marks."
)

DEFAULT_GENERAL_PROMPT = (
    f"{BASE_PROMPT} Remove all watermarks, text overlays, logos, and copyright stamps "
    "from this image. Reconstruct the background where the watermarks were removed "
    "to look natural."
)

INSTRUCTION_TEMPLATE = (
    BASE_PROMPT + " Follow this instruction strictly: {instruction}. If the instruction "
    "implies removing something, fill the background naturally. If it implies style "
    "transfer (like filters), apply it while keeping the main subject intact."
)


@dataclass(frozen=True)
class GeneralEdit:
    instruction: str = ""

    @property
    def has_instruction(self) -> bool:
        return bool(self.instruction and self.instruction.strip())


@dataclass(frozen=True)
class EraserEdit:
    pass


EditMode = Union[GeneralEdit, EraserEdit]

MODE_LABELS = {
    "general": "🪄 Watermark / instruction",
    "eraser": "🖌️ Magic eraser",
}


def mode_from_tag(tag: str, instruction: str = "") -> EditMode:
    """Build an edit mode from its tag ('general' or 'eraser')."""
    if tag == "eraser":
        return EraserEdit()
    if tag == "general":
        return GeneralEdit(instruction)
    raise ValueError(f"Unknown edit mode: {tag!r}")


def build_prompt(mode: EditMode) -> str:
    """Return the prompt text sent alongside the image."""
    if isinstance(mode, EraserEdit):
        return ERASER_PROMPT
    if isinstance(mode, GeneralEdit):
        if not mode.has_instruction:
            return DEFAULT_GENERAL_PROMPT
        return INSTRUCTION_TEMPLATE.format(instruction=mode.instruction.strip())
    raise TypeError(f"Unsupported edit mode: {type(mode).__name__}")
