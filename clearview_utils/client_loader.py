import streamlit as st
from google import genai
from google.genai import types
from app_config.settings import Settings, load_settings
from clearview_core.gemini_client import GeminiImageEditor
from .logger import logger

@st.cache_resource
def get_genai_client(api_key, timeout_ms):
    """Build the Gemini client once per process and share it across sessions."""
    logger.info(f"Creating Gemini client (timeout {timeout_ms}ms)")
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=timeout_ms),
    )

@st.cache_resource
def get_settings():
    """
    Load settings once per process.
    ConfigurationError propagates so the page can report it before any request.
    """
    return load_settings()

def get_image_editor(settings: Settings = None) -> GeminiImageEditor:
    """
    Get the image editor.
    The HTTP client is cached globally via @st.cache_resource; the editor
    itself is a thin per-call wrapper holding the model name.
    """
    if settings is None:
        settings = get_settings()
    client = get_genai_client(settings.api_key, settings.timeout_ms)
    return GeminiImageEditor(client, model=settings.model)
