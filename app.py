import time
import streamlit as st

from app_config.constants import UIConfig, PerformanceConfig

# 🎯 CRITICAL: Must be the VERY FIRST Streamlit command
st.set_page_config(
    page_title=UIConfig.APP_TITLE,
    page_icon=UIConfig.PAGE_ICON,
    layout="wide",
    initial_sidebar_state="collapsed"
)

# --- UTILITIES IMPORT ---
from clearview_core.errors import ConfigurationError
from clearview_utils.logger import logger, setup_logging
from clearview_utils.client_loader import get_settings, get_image_editor
from clearview_utils.state_manager import initialize_session_state
from clearview_utils.async_processor import check_edit_task, apply_task_result
from clearview_utils.ui_components import (
    setup_styles, render_header, render_intro, render_features, render_uploader,
    render_workspace, render_footer
)

# --- 1️⃣ SESSION INITIALIZATION (VERY TOP)
initialize_session_state()


def collect_finished_task(controller):
    """
    Hand a finished background edit to the controller.
    Returns True while a request is still in flight.
    """
    outcome = check_edit_task()
    if outcome == "running":
        return True
    if outcome is not None:
        generation, result = outcome
        apply_task_result(controller, generation, result)
    elif controller.is_processing:
        # Session lost track of its worker (e.g. server restart); fail instead of spinning forever
        controller.fail(controller.generation, RuntimeError("edit task missing from session"))
    return False


def main():
    setup_styles()

    # --- 2️⃣ CONFIGURATION (before any request can be attempted) ---
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        render_header()
        st.error(f"⚙️ Configuration error: {e}")
        st.info("Add GEMINI_API_KEY to the environment or a .env file, then reload the page.")
        st.stop()

    setup_logging(level=settings.log_level)
    render_header(settings.model)

    controller = st.session_state["controller"]

    # --- 3️⃣ COLLECT BACKGROUND RESULT ---
    still_running = collect_finished_task(controller)

    # --- 4️⃣ RENDER ---
    if not controller.has_image:
        render_intro()
        render_uploader()
        render_features()
    else:
        render_workspace(controller, lambda: get_image_editor(settings))

    render_footer()

    # --- 5️⃣ POLL WHILE THE REQUEST IS IN FLIGHT ---
    if still_running:
        time.sleep(PerformanceConfig.POLL_INTERVAL_SECONDS)
        st.rerun()


if __name__ == "__main__":
    main()
