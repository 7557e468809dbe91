"""
Tests for clearview_utils/async_processor.py background edit tasks.

Session state is replaced with a plain dict; the worker pool is the real
single-thread executor.
"""

import pytest

from clearview_core.controller import EditorController, ProcessingStatus
from clearview_core.gemini_client import GeminiImageEditor
from clearview_core.prompts import GeneralEdit
from clearview_utils.async_processor import (
    TASK_KEY,
    apply_task_result,
    check_edit_task,
    discard_edit_task,
    run_edit_task,
    submit_edit_task,
)
from tests.conftest import make_response, text_part


def wait_for(state):
    state[TASK_KEY]["future"].result(timeout=5)
    return check_edit_task(state)


@pytest.fixture
def controller(red_dot_payload):
    c = EditorController()
    c.load_image(red_dot_payload, "image/png")
    return c


class TestRunEditTask:
    """Worker wrapper never raises."""

    def test_success(self, mock_genai_client, red_dot_payload, controller):
        result = run_edit_task(GeminiImageEditor(mock_genai_client), controller.build_request(GeneralEdit()))
        assert result["status"] == "success"
        assert result["payload"].mime_type == "image/png"

    def test_error(self, mocker, controller):
        editor = mocker.Mock()
        editor.edit_image.side_effect = ConnectionError("offline")
        result = run_edit_task(editor, controller.build_request(GeneralEdit()))
        assert result["status"] == "error"
        assert isinstance(result["error"], ConnectionError)


class TestTaskLifecycle:
    """Submit, poll and hand results back to the controller."""

    def test_no_task(self):
        assert check_edit_task({}) is None

    def test_success_flow(self, mock_genai_client, controller):
        state = {}
        request = controller.build_request(GeneralEdit())
        generation = controller.begin_processing()
        submit_edit_task(GeminiImageEditor(mock_genai_client), request, generation, state=state)
        assert state[TASK_KEY]["generation"] == generation

        finished_generation, result = wait_for(state)
        assert TASK_KEY not in state
        assert apply_task_result(controller, finished_generation, result) is True
        assert controller.status == ProcessingStatus.SUCCESS

    def test_error_flow(self, mock_genai_client, controller):
        mock_genai_client.models.generate_content.return_value = make_response(text_part("nope"))
        state = {}
        request = controller.build_request(GeneralEdit())
        generation = controller.begin_processing()
        submit_edit_task(GeminiImageEditor(mock_genai_client), request, generation, state=state)

        finished_generation, result = wait_for(state)
        apply_task_result(controller, finished_generation, result)
        assert controller.status == ProcessingStatus.ERROR
        assert controller.processed is None

    def test_stale_result_after_reset(self, mock_genai_client, controller):
        state = {}
        request = controller.build_request(GeneralEdit())
        generation = controller.begin_processing()
        submit_edit_task(GeminiImageEditor(mock_genai_client), request, generation, state=state)

        finished_generation, result = wait_for(state)
        controller.reset()
        assert apply_task_result(controller, finished_generation, result) is False
        assert controller.processed is None
        assert controller.status == ProcessingStatus.IDLE

    def test_running(self, mocker):
        future = mocker.Mock()
        future.done.return_value = False
        state = {TASK_KEY: {"future": future, "generation": 3}}
        assert check_edit_task(state) == "running"
        assert TASK_KEY in state

    def test_discard(self, mocker):
        state = {TASK_KEY: {"future": mocker.Mock(), "generation": 1}}
        discard_edit_task(state)
        assert TASK_KEY not in state
        discard_edit_task(state)
