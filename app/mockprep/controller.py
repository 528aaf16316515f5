"""
Purpose: The single orchestration point for the create/edit page.
Owns the pipeline state and decides where to go after a successful save.
Prevents the UI from knowing how prompts/LLM/store work.

Key responsibilities:
- Validate the form before anything leaves the process.
- Build the prompt (prompts.DefaultPromptFactory).
- Call the generation client (GenerationClient interface).
- Sanitize the reply into question/answer pairs (utils.llm_json).
- Upsert the record (persistence.records).
- Classify any failure and notify the user exactly once.
- Expose `busy` so the UI can disable inputs; reject overlapping saves.

State machine:
Idle -> Validating -> Generating -> Saving -> Succeeded
any stage -> Failed(category)

Testing: Pure unit tests with fakes: fake GenerationClient, in-memory store,
fake auth/navigator/notifier. Verify transitions and call counts.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional, Sequence

from .errors import ParseError
from .interfaces import AuthProvider, GenerationClient, Navigator, Notifier
from .models import (
    BUSY_STATES,
    ErrorCategory,
    FormInput,
    GeneratedQuestion,
    PipelineState,
    SaveOutcome,
)
from .persistence.records import InterviewRepository
from .prompts import QUESTION_COUNT, DefaultPromptFactory
from .services.classifier import describe
from .services.validation import DefaultValidator
from .utils.llm_json import parse_questions

logger = logging.getLogger(__name__)


def record_path(record_id: str) -> str:
    return f"/generate/{record_id}"


def start_path(record_id: str) -> str:
    return f"/generate/interview/{record_id}/start"


LIST_PATH = "/generate"
CREATE_PATH = "/generate/new"


def parse_route(path: Optional[str]) -> tuple[str, Optional[str]]:
    """
    Path -> (page, record id). Pages: "list", "create", "edit", "start".
    Unknown paths fall back to the list.
    """
    parts = [p for p in (path or "").strip().split("/") if p]
    if parts[:1] != ["generate"]:
        return "list", None
    rest = parts[1:]
    if not rest:
        return "list", None
    if rest == ["new"]:
        return "create", None
    if len(rest) == 1:
        return "edit", rest[0]
    if len(rest) == 3 and rest[0] == "interview" and rest[2] == "start":
        return "start", rest[1]
    return "list", None


def check_questions(
    questions: Sequence[GeneratedQuestion], expected: int = QUESTION_COUNT
) -> None:
    """Reject replies that parsed but are clearly not a question set."""
    if not questions or len(questions) > 2 * expected:
        raise ParseError(
            ParseError.BAD_COUNT, detail=f"got {len(questions)}, asked for {expected}"
        )
    for i, q in enumerate(questions):
        if not q.question.strip() and not q.answer.strip():
            raise ParseError(ParseError.BAD_SHAPE, detail=f"entry {i} is empty")


class InterviewPipelineController:
    def __init__(
        self,
        generator: GenerationClient,
        repository: InterviewRepository,
        auth: AuthProvider,
        navigator: Navigator,
        notifier: Notifier,
    ):
        self.generator: GenerationClient = generator
        self.repository = repository
        self.auth: AuthProvider = auth
        self.navigator: Navigator = navigator
        self.notifier: Notifier = notifier
        self.prompts = DefaultPromptFactory()
        self.validator = DefaultValidator()

        self.state: PipelineState = PipelineState.IDLE
        self.last_error: Optional[ErrorCategory] = None
        self._lock = threading.Lock()

        self.tokens_in: int = 0
        self.tokens_out: int = 0
        self.model_used: Optional[str] = None

    @property
    def busy(self) -> bool:
        """True while generating or saving; the UI disables the form."""
        return self.state in BUSY_STATES

    def load_form(self, interview_id: Optional[str]) -> FormInput:
        """Form values for the edit page; empty form in create mode."""
        if not interview_id:
            return FormInput()
        record = self.repository.load(interview_id)
        return record.form if record else FormInput()

    def save(
        self, form: FormInput, interview_id: Optional[str] = None
    ) -> SaveOutcome:
        """
        One validate -> generate -> sanitize -> upsert cycle.
        A call made while another cycle is in flight is rejected untouched.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Save ignored: a save is already in progress")
            return SaveOutcome(state=self.state, accepted=False)

        try:
            return self._run(form, interview_id)
        finally:
            self._lock.release()

    def _run(self, form: FormInput, interview_id: Optional[str]) -> SaveOutcome:
        self.last_error = None
        try:
            self.state = PipelineState.VALIDATING
            self.validator.validate(form)

            self.state = PipelineState.GENERATING
            questions = self._generate(form)

            self.state = PipelineState.SAVING
            record_id = self.repository.upsert(
                form,
                questions,
                self.auth.current_user_id(),
                interview_id=interview_id,
            )
        except Exception as e:
            return self._fail(e)

        self.state = PipelineState.SUCCEEDED
        message = (
            "Interview updated successfully!"
            if interview_id
            else "Interview created successfully!"
        )
        self.notifier.success("Success", message)
        self.navigator.go_to(record_path(record_id))
        return SaveOutcome(
            state=self.state, record_id=record_id, message=message
        )

    def _generate(self, form: FormInput) -> list[GeneratedQuestion]:
        prompt = self.prompts.build_question_prompt(form)
        text, meta = self.generator.send(prompt)

        self.tokens_in += int(meta.get("tokens_in", 0))
        self.tokens_out += int(meta.get("tokens_out", 0))
        self.model_used = meta.get("model") or self.model_used

        questions = parse_questions(text)
        check_questions(questions)
        return questions

    def _fail(self, error: Exception) -> SaveOutcome:
        category, message = describe(error)
        logger.info("Pipeline failed during %s -> %s", self.state.value, category.value)
        self.state = PipelineState.FAILED
        self.last_error = category
        self.notifier.error("Error", message)
        return SaveOutcome(state=self.state, category=category, message=message)
