import streamlit as st
from concurrent.futures import ThreadPoolExecutor
import time
import uuid
from app_config.constants import PerformanceConfig
from .logger import logger, log_exceptions, log_performance

# Global executor
# One worker: at most one edit request is ever in flight
executor = ThreadPoolExecutor(max_workers=PerformanceConfig.MAX_WORKERS)

TASK_KEY = "edit_task"

@log_performance
def run_edit_task(editor, request):
    """
    Runs one Gemini edit in the worker thread.
    Returns: {"status": "success", "payload": ImagePayload}
          or {"status": "error", "error": Exception, "message": str}
    """
    try:
        payload = editor.edit_image(request)
        return {"status": "success", "payload": payload}
    except Exception as e:
        logger.error(f"ASYNC WORKER: edit failed: {e}", exc_info=True)
        return {"status": "error", "error": e, "message": str(e)}

@log_exceptions
def submit_edit_task(editor, request, generation, state=None):
    """Submits an edit to the executor and records it in session state."""
    if state is None:
        state = st.session_state
    future = executor.submit(run_edit_task, editor, request)

    state[TASK_KEY] = {
        "id": str(uuid.uuid4()),
        "future": future,
        "generation": generation,
        "start_time": time.time()
    }
    logger.info(f"Submitted edit task for generation {generation}")
    return state[TASK_KEY]

def check_edit_task(state=None):
    """
    Checks the status of the running edit task.
    Returns:
       None if no task
       "running" if running
       (generation, result_dict) if completed
    """
    if state is None:
        state = st.session_state
    task = state.get(TASK_KEY)
    if not task:
        return None

    future = task["future"]

    if future.done():
        # Task completed!
        del state[TASK_KEY]
        try:
            result = future.result()
        except Exception as e:
            result = {"status": "error", "error": e, "message": str(e)}
        return task["generation"], result
    else:
        return "running"

def apply_task_result(controller, generation, result):
    """Hands a finished task's result to the controller (stale ones are dropped there)."""
    if result.get("status") == "success":
        return controller.complete(generation, result["payload"])
    error = result.get("error") or RuntimeError(result.get("message", "edit failed"))
    return controller.fail(generation, error)

def discard_edit_task(state=None):
    """Forget the in-flight task. The request itself cannot be cancelled."""
    if state is None:
        state = st.session_state
    if state.pop(TASK_KEY, None) is not None:
        logger.info("Discarded interest in in-flight edit task")
