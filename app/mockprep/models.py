"""
Canonical data shapes, shared truth for typing/validation between layers.

Typical contents:
- FormInput (what the user typed on the create/edit page).
- GeneratedQuestion (one question/answer pair from the model).
- InterviewRecord (the persisted entity, as read back from the store).
- LLMSettings (model, temperature, max_tokens).
- PipelineState / ErrorCategory (enumerations observed by the UI).

Testing: Trivial; mostly types. Conversion helpers are covered via the
persistence tests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class PipelineState(str, Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    GENERATING = "Generating"
    SAVING = "Saving"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ErrorCategory(str, Enum):
    MISSING_FIELDS = "MissingFields"
    CONFIGURATION = "Configuration"
    QUOTA = "Quota"
    NETWORK = "Network"
    PARSE_ERROR = "ParseError"
    PERSISTENCE = "PersistenceFailure"
    UNKNOWN = "Unknown"


BUSY_STATES = frozenset(
    {PipelineState.VALIDATING, PipelineState.GENERATING, PipelineState.SAVING}
)


@dataclass(frozen=True)
class FormInput:
    """
    Ephemeral editing-session input. `experience` is years of experience,
    kept as typed (str or int); the validator decides if it is usable.
    """

    name: str = ""
    position: str = ""
    experience: Union[str, int, None] = ""
    description: str = ""
    tech_stack: str = ""

    def to_fields(self) -> dict[str, Any]:
        """Store-boundary field names."""
        return {
            "name": self.name,
            "position": self.position,
            "experience": self.experience,
            "description": self.description,
            "techStack": self.tech_stack,
        }

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> "FormInput":
        return cls(
            name=data.get("name") or "",
            position=data.get("position") or "",
            experience="" if data.get("experience") is None else data["experience"],
            description=data.get("description") or "",
            tech_stack=data.get("techStack") or "",
        )


@dataclass(frozen=True)
class GeneratedQuestion:
    question: str
    answer: str

    def to_dict(self) -> dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class InterviewRecord:
    id: str
    owner_id: str
    form: FormInput
    questions: list[GeneratedQuestion] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "InterviewRecord":
        questions = [
            GeneratedQuestion(
                question=str(q.get("question") or ""),
                answer=str(q.get("answer") or ""),
            )
            for q in (doc.get("questions") or [])
            if isinstance(q, dict)
        ]
        return cls(
            id=doc["id"],
            owner_id=doc.get("userId") or "",
            form=FormInput.from_fields(doc),
            questions=questions,
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )


@dataclass
class LLMSettings:
    model: str
    temperature: float = 0.7
    top_p: float = 1.0
    max_tokens: int = 2000


@dataclass(frozen=True)
class SaveOutcome:
    """Result of one save request, as observed by the UI."""

    state: PipelineState
    record_id: Optional[str] = None
    category: Optional[ErrorCategory] = None
    message: str = ""
    accepted: bool = True
