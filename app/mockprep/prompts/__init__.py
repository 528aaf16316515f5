"""Facade over the prompt modules."""

from __future__ import annotations

from ..models import FormInput
from ..services.validation import DefaultValidator
from . import questions as _questions
from .questions import QUESTION_COUNT, tech_stack_signal


class DefaultPromptFactory:
    def __init__(self) -> None:
        self._validator = DefaultValidator()

    def build_question_prompt(
        self, form: FormInput, *, count: int = QUESTION_COUNT
    ) -> str:
        """Same form in, byte-identical prompt out."""
        clean = self._validator.sanitize_for_prompt
        description = clean(form.description)
        # stack fallback uses the full description; only its own line is clipped
        stack = tech_stack_signal(clean(form.tech_stack), description)
        return _questions.build_question_prompt(
            position=clean(form.position),
            description=self._validator.clip_description(description),
            experience=clean(str(form.experience)),
            tech_stack=stack,
            count=count,
        )


__all__ = ["DefaultPromptFactory", "QUESTION_COUNT"]
