"""
UI layer
Purpose: Streamlit-only glue. Renders the interview list, the create/edit page
and the question walkthrough, collects user inputs, and delegates all work to
the controller. Keeps UI concerns (layout/state widgets) separate from
business logic so logic can be unit tested without Streamlit.
"""

import uuid
from typing import Optional

import streamlit as st

from mockprep.config import get_settings
from mockprep.controller import (
    CREATE_PATH,
    LIST_PATH,
    InterviewPipelineController,
    parse_route,
    record_path,
    start_path,
)
from mockprep.models import FormInput, InterviewRecord, PipelineState
from mockprep.persistence.document_store import InMemoryDocumentStore
from mockprep.persistence.records import InterviewRepository
from mockprep.persistence.sqlite_store import SQLiteDocumentStore
from mockprep.services.llm_openai import OpenAILLMClient
from mockprep.utils.logger import setup_logger

SETTINGS = get_settings()
setup_logger(level=SETTINGS.log_level, fmt=SETTINGS.log_format)

# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title="Mock Interview Builder",
    page_icon="🎯",
    layout="centered",
    initial_sidebar_state="expanded",
)

# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("controller", None)
st_session.setdefault("api_key", SETTINGS.openai_api_key)
st_session.setdefault("user_id", f"guest-{uuid.uuid4().hex[:8]}")
st_session.setdefault("route", st.query_params.get("path", LIST_PATH))
st_session.setdefault("notices", [])
st_session.setdefault("pending_save", None)
st_session.setdefault("form_loaded_for", None)
st_session.setdefault("start_index", 0)


# ---------------------------
# Collaborators
# ---------------------------
@st.cache_resource
def get_store():
    """One store for every session of this server process."""
    if SETTINGS.db_path:
        return SQLiteDocumentStore(SETTINGS.db_path)
    return InMemoryDocumentStore()


class SessionAuth:
    def current_user_id(self) -> Optional[str]:
        return (st_session.get("user_id") or "").strip() or None


class SessionNavigator:
    def go_to(self, path: str) -> None:
        st_session.route = path
        st.query_params["path"] = path


class SessionNotifier:
    """Queues notices so they survive the rerun that follows a save."""

    def success(self, title: str, message: str) -> None:
        st_session.notices.append(("success", title, message))

    def error(self, title: str, message: str) -> None:
        st_session.notices.append(("error", title, message))


def build_controller(api_key: str) -> InterviewPipelineController:
    llm = OpenAILLMClient(api_key=api_key, settings=SETTINGS.llm_settings())
    return InterviewPipelineController(
        generator=llm,
        repository=InterviewRepository(get_store()),
        auth=SessionAuth(),
        navigator=SessionNavigator(),
        notifier=SessionNotifier(),
    )


def get_controller() -> InterviewPipelineController:
    """Return the controller, rebuilding it when the API key changes."""
    controller = st_session.get("controller")
    api_key = st_session.api_key.strip()
    if controller is None or controller.generator.api_key != api_key:
        if controller is not None and controller.busy:
            return controller
        controller = build_controller(api_key)
        st_session.controller = controller
    return controller


def go(path: str) -> None:
    SessionNavigator().go_to(path)
    st.rerun()


def flush_notices() -> None:
    for kind, title, message in st_session.notices:
        if kind == "success":
            st.toast(f"**{title}**: {message}", icon="✅")
        else:
            st.toast(f"**{title}**: {message}", icon="⚠️")
    st_session.notices = []


# ---------------------------
# Sidebar
# ---------------------------
controller = get_controller()
# a queued save counts as in flight from the run that starts it
busy = controller.busy or st_session.pending_save is not None

with st.sidebar:
    st.markdown("# Settings")
    st_session.api_key = st.text_input(
        "OpenAI API key",
        value=st_session.api_key,
        type="password",
        help="Defaults to OPENAI_API_KEY. It stays in your session only.",
        disabled=busy,
    )
    st_session.user_id = st.text_input(
        "User id", value=st_session.user_id, disabled=busy
    )
    st.caption(f"Model: {SETTINGS.model}")
    if controller.tokens_in or controller.tokens_out:
        st.caption(
            f"Tokens in/out: {controller.tokens_in} / {controller.tokens_out}"
            f" ({controller.model_used or SETTINGS.model})"
        )
    st.divider()

    st.markdown("## Mock Interviews")
    if st.button("+ Add New", disabled=busy, use_container_width=True):
        st_session.form_loaded_for = None
        go(CREATE_PATH)
    owner = SessionAuth().current_user_id()
    records = controller.repository.list_for_owner(owner) if owner else []
    for rec in records:
        label = rec.form.position or rec.id
        if st.button(label, key=f"open-{rec.id}", disabled=busy):
            go(record_path(rec.id))

controller = get_controller()
flush_notices()


# ---------------------------
# Pages
# ---------------------------
def render_questions(record: InterviewRecord) -> None:
    st.subheader("Generated questions")
    for i, qa in enumerate(record.questions, start=1):
        with st.expander(f"Question {i}: {qa.question or '(empty)'}"):
            st.write(qa.answer or "—")


def render_list() -> None:
    st.title("Mock Interviews")
    if not records:
        st.info("No interviews yet. Use “+ Add New” to create one.")
        return
    for rec in records:
        with st.container(border=True):
            st.markdown(f"**{rec.form.position}** · {rec.form.experience} yrs")
            if rec.form.tech_stack:
                st.caption(rec.form.tech_stack)
            c1, c2 = st.columns(2)
            if c1.button("Edit", key=f"edit-{rec.id}"):
                go(record_path(rec.id))
            if c2.button("Start", key=f"start-{rec.id}"):
                go(start_path(rec.id))


def render_form(interview_id: Optional[str]) -> None:
    record = controller.repository.load(interview_id) if interview_id else None

    if st_session.form_loaded_for != (interview_id or "new"):
        form = controller.load_form(interview_id)
        st_session.f_name = form.name
        st_session.f_position = form.position
        st_session.f_experience = (
            "" if form.experience is None else str(form.experience)
        )
        st_session.f_description = form.description
        st_session.f_tech_stack = form.tech_stack
        st_session.form_loaded_for = interview_id or "new"

    crumb = record.form.position if record else "Create Interview"
    head_l, head_r = st.columns([4, 1])
    head_l.caption(f"Mock Interviews / {crumb}")
    if interview_id and head_r.button("Start ✨", disabled=busy):
        go(start_path(interview_id))

    st.header("Edit Interview" if interview_id else "Create New Interview")
    st.text_input("Your Name *", key="f_name", disabled=busy)
    st.text_input("Job Position *", key="f_position", disabled=busy)
    st.text_input("Years of Experience *", key="f_experience", disabled=busy)
    st.text_area("Job Description", key="f_description", disabled=busy, height=120)
    st.text_input(
        "Tech Stack (Optional)",
        key="f_tech_stack",
        placeholder="e.g., React, TypeScript, Node.js",
        disabled=busy,
    )

    label = "Update Interview" if interview_id else "Create Interview"
    if busy:
        label = "Generating Questions..."
    if st.button(label, type="primary", disabled=busy):
        st_session.pending_save = interview_id or ""
        st.rerun()

    st.info(
        "Questions will be automatically generated when you create or update "
        "the interview."
    )

    if st_session.pending_save is not None:
        # cleared before saving so an interrupted run never replays the save
        target = st_session.pending_save or None
        st_session.pending_save = None
        form = FormInput(
            name=st_session.f_name,
            position=st_session.f_position,
            experience=st_session.f_experience,
            description=st_session.f_description,
            tech_stack=st_session.f_tech_stack,
        )
        with st.spinner("Generating Questions..."):
            outcome = controller.save(form, target)
        if outcome.state == PipelineState.SUCCEEDED:
            st_session.form_loaded_for = None
        st.rerun()

    if record and record.questions:
        render_questions(record)


def render_start(interview_id: str) -> None:
    record = controller.repository.load(interview_id)
    if record is None or not record.questions:
        st.warning("This interview has no questions yet.")
        if st.button("Back"):
            go(LIST_PATH)
        return

    st.caption(f"Mock Interviews / {record.form.position} / Start")
    total = len(record.questions)
    idx = min(st_session.start_index, total - 1)
    qa = record.questions[idx]
    st.subheader(f"Question {idx + 1} of {total}")
    st.markdown(qa.question)
    with st.expander("Show model answer"):
        st.write(qa.answer)

    c1, c2, c3 = st.columns(3)
    if c1.button("Previous", disabled=idx == 0):
        st_session.start_index = idx - 1
        st.rerun()
    if c2.button("Next", disabled=idx >= total - 1):
        st_session.start_index = idx + 1
        st.rerun()
    if c3.button("Back to interview"):
        st_session.start_index = 0
        go(record_path(interview_id))


page, interview_id = parse_route(st_session.route)
if page not in ("create", "edit"):
    # widget-bound form keys are dropped once the form is not rendered
    st_session.form_loaded_for = None
if page == "create":
    render_form(None)
elif page == "edit":
    render_form(interview_id)
elif page == "start":
    render_start(interview_id)
else:
    render_list()
