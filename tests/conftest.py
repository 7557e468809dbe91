"""
Pytest configuration and shared fixtures for ClearView AI tests.

This module provides shared fixtures and configuration for all test modules.
"""

import io

import pytest
from google.genai import types
from PIL import Image

from clearview_core.payload import ImagePayload


def png_bytes(image):
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def make_response(*parts):
    """Gemini response with a single candidate holding the given parts."""
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def image_part(data, mime_type="image/png"):
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


def text_part(text):
    return types.Part(text=text)


@pytest.fixture
def red_dot_png():
    """
    A 2x2 red PNG.

    Returns:
        bytes: Encoded PNG
    """
    return png_bytes(Image.new("RGB", (2, 2), (255, 0, 0)))


@pytest.fixture
def red_dot_payload(red_dot_png):
    return ImagePayload.from_bytes(red_dot_png, "image/png")


@pytest.fixture
def sample_image():
    """
    Create a simple test image (RGB).

    Returns:
        PIL.Image.Image: 120x90 image, blue left half and green right half
    """
    img = Image.new("RGB", (120, 90), (0, 0, 255))
    img.paste((0, 200, 0), (60, 0, 120, 90))
    return img


@pytest.fixture
def sample_payload(sample_image):
    return ImagePayload.from_image(sample_image, format="PNG")


@pytest.fixture
def sample_jpeg_payload(sample_image):
    buf = io.BytesIO()
    sample_image.save(buf, format="JPEG", quality=90)
    return ImagePayload.from_bytes(buf.getvalue(), "image/jpeg")


@pytest.fixture
def result_png():
    """Bytes the mocked endpoint returns as its edited image."""
    return png_bytes(Image.new("RGB", (2, 2), (255, 255, 255)))


@pytest.fixture
def mock_genai_client(mocker, result_png):
    """
    Mock genai.Client whose generate_content returns one inline PNG part.

    Args:
        mocker: pytest-mock mocker fixture

    Returns:
        Mock client; adjust client.models.generate_content per test
    """
    client = mocker.Mock()
    client.models.generate_content.return_value = make_response(
        text_part("Here is the edited image."),
        image_part(result_png),
    )
    return client


class FakeUpload:
    """Stand-in for Streamlit's UploadedFile."""

    def __init__(self, data, name="photo.png", type="image/png", size=None):
        self._data = data
        self.name = name
        self.type = type
        self.size = len(data) if size is None else size
        self.file_id = f"{name}-{self.size}"

    def getvalue(self):
        return self._data


@pytest.fixture
def fake_upload():
    return FakeUpload


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
