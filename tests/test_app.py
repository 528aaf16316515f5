from pathlib import Path

from streamlit.testing.v1 import AppTest

from mockprep.models import ErrorCategory

APP = str(Path(__file__).resolve().parents[1] / "app" / "app.py")


def _app():
    return AppTest.from_file(APP, default_timeout=30)


def test_queued_save_disables_sidebar_inputs():
    at = _app()
    at.session_state["route"] = "/generate"
    at.session_state["pending_save"] = ""
    at.run()

    assert not at.exception
    assert all(ti.disabled for ti in at.sidebar.text_input)
    add_new = [b for b in at.sidebar.button if b.label == "+ Add New"]
    assert add_new and add_new[0].disabled


def test_idle_sidebar_is_enabled():
    at = _app()
    at.session_state["route"] = "/generate"
    at.run()

    assert not at.exception
    assert not any(ti.disabled for ti in at.sidebar.text_input)


def test_queued_save_runs_once_and_is_cleared():
    at = _app()
    at.session_state["route"] = "/generate/new"
    at.session_state["pending_save"] = ""
    at.run()

    assert not at.exception
    assert at.session_state["pending_save"] is None
    controller = at.session_state["controller"]
    assert controller.last_error == ErrorCategory.MISSING_FIELDS

    at.run()
    assert at.session_state["controller"] is controller
    assert at.session_state["pending_save"] is None


def test_padded_api_key_does_not_rebuild_controller():
    at = _app()
    at.session_state["route"] = "/generate"
    at.session_state["api_key"] = "sk-test   "
    at.run()
    first = at.session_state["controller"]

    at.run()
    assert not at.exception
    assert at.session_state["controller"] is first
    assert first.generator.api_key == "sk-test"
