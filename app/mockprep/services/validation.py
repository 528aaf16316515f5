"""
Purpose: Pre-flight checks on the create/edit form.
Content: early, predictable failures; nothing here talks to the network.
"""

from __future__ import annotations

from ..errors import MissingFieldsError
from ..models import FormInput

REQUIRED_FIELDS = ("name", "position", "experience")
MAX_DESCRIPTION_CHARS = 10000


def parse_experience(value) -> int | None:
    """Years of experience as a non-negative int, or None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    text = str(value).strip()
    if not text:
        return None
    try:
        years = int(text)
    except ValueError:
        try:
            as_float = float(text)
        except ValueError:
            return None
        if not as_float.is_integer():
            return None
        years = int(as_float)
    return years if years >= 0 else None


def missing_fields(form: FormInput) -> list[str]:
    """Names of required fields that are absent or unusable, in form order."""
    missing = []
    if not (form.name or "").strip():
        missing.append("name")
    if not (form.position or "").strip():
        missing.append("position")
    if parse_experience(form.experience) is None:
        missing.append("experience")
    return missing


class DefaultValidator:
    def validate(self, form: FormInput) -> None:
        missing = missing_fields(form)
        if missing:
            raise MissingFieldsError(missing)

    def sanitize_for_prompt(self, text: str) -> str:
        return (text or "").replace("\x00", "").strip()

    def clip_description(self, text: str) -> str:
        if len(text) > MAX_DESCRIPTION_CHARS:
            text = text[:MAX_DESCRIPTION_CHARS]
        return text
