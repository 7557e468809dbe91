import streamlit as st
from clearview_core.controller import EditorController
from clearview_core.mask_canvas import MaskCanvas
from clearview_core.comparison import SliderState
from clearview_core.intake import validate_upload, read_upload
from clearview_core.errors import ImageDecodeError
from .async_processor import discard_edit_task
from .logger import logger, log_exceptions

def initialize_session_state():
    """Initialize all session state variables."""
    defaults = {
        "controller": EditorController,   # single state machine per session
        "mask_canvas": MaskCanvas,
        "slider": SliderState,
        "edit_mode": lambda: "general",
        "instruction": lambda: "",
        "upload_error": lambda: None,
        "canvas_id": lambda: 0,           # bump to wipe the drawable canvas
        "uploader_id": lambda: 0,         # bump to reset the file uploader
        "loaded_file_key": lambda: None,
    }
    for key, factory in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = factory()

@log_exceptions
def handle_upload(uploaded_file):
    """
    Validate, decode and load an uploaded file.
    Rejections are stored in upload_error and never reach the controller.
    Returns True when a new image was loaded.
    """
    file_key = getattr(uploaded_file, "file_id", f"{uploaded_file.name}_{uploaded_file.size}")
    if st.session_state.get("loaded_file_key") == file_key:
        return False
    st.session_state["loaded_file_key"] = file_key

    valid, message = validate_upload(uploaded_file.name, uploaded_file.type, uploaded_file.size)
    if not valid:
        logger.info(f"Rejected upload {uploaded_file.name}: {message}")
        st.session_state["upload_error"] = message
        return False

    try:
        payload = read_upload(uploaded_file)
    except ImageDecodeError as e:
        logger.warning(f"Could not decode {uploaded_file.name}: {e}")
        st.session_state["upload_error"] = "This file could not be read as an image. Please choose another file."
        return False

    discard_edit_task()
    st.session_state["upload_error"] = None
    st.session_state["controller"].load_image(payload, payload.mime_type, uploaded_file.name)
    st.session_state["mask_canvas"].load(payload)
    st.session_state.pop("slider_widget", None)
    st.session_state["slider"] = SliderState()
    st.session_state["canvas_id"] += 1
    return True

def cb_reset_workspace():
    """Clear the image and start over. An in-flight request is left to finish unseen."""
    discard_edit_task()
    st.session_state["controller"].reset()
    st.session_state["mask_canvas"] = MaskCanvas()
    st.session_state["slider"] = SliderState()
    st.session_state["instruction"] = ""
    st.session_state.pop("slider_widget", None)
    st.session_state["upload_error"] = None
    st.session_state["loaded_file_key"] = None
    st.session_state["canvas_id"] += 1
    st.session_state["uploader_id"] += 1

def cb_clear_strokes():
    """Wipe every brush stroke; the canvas shows the original image again."""
    canvas = st.session_state["mask_canvas"]
    if canvas.is_loaded:
        canvas.clear()
    st.session_state["canvas_id"] += 1

def cb_edit_again():
    st.session_state["controller"].edit_again()
    st.session_state["slider"] = SliderState()
    st.session_state.pop("slider_widget", None)

def cb_move_slider():
    st.session_state["slider"].move_to(st.session_state.get("slider_widget", 50))
