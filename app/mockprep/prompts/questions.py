"""Question-set generation prompt."""

from __future__ import annotations
from textwrap import dedent

QUESTION_COUNT = 5


def tech_stack_signal(tech_stack: str, description: str) -> str:
    """Tech stack, else the description, else "general"."""
    return (tech_stack or "").strip() or (description or "").strip() or "general"


def build_question_prompt(
    *,
    position: str,
    description: str,
    experience,
    tech_stack: str,
    count: int = QUESTION_COUNT,
) -> str:
    stack = tech_stack_signal(tech_stack, description)
    return dedent(
        f"""\
        You are an experienced technical interviewer writing interview questions.
        Generate a JSON array containing exactly {count} technical interview questions
        along with detailed answers, based on the job information below.

        Job Information:
        - Job Position: {position}
        - Job Description: {description}
        - Years of Experience Required: {experience}
        - Tech Stack: {stack}

        The questions should assess skills in {stack} development and best practices,
        problem-solving, and experience handling complex requirements.

        Output format:
        [
          {{"question": "<question text>", "answer": "<answer text>"}}
        ]

        Return exactly {count} objects with keys "question" and "answer".
        Return only the JSON array. No surrounding prose, no labels,
        no code fences.
        """
    )
