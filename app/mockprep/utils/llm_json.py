"""Utilities for extracting the question array from LLM responses.

Known limitation: the array is taken greedily from the first "[" to the last
"]". Prose around the payload that itself contains brackets will widen the
span and usually surface as a malformed-JSON ParseError.
"""

from __future__ import annotations
import json
import re
from typing import Any

from ..errors import ParseError
from ..models import GeneratedQuestion

_FENCE_OR_TAG = re.compile(
    r"```|(?<![A-Za-z0-9_])json(?![A-Za-z0-9_])", re.IGNORECASE
)
_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


def strip_wrapping(text: str) -> str:
    """Trim, then drop code-fence markers and bare "json" tags anywhere."""
    return _FENCE_OR_TAG.sub("", (text or "").strip())


def extract_array(text: str) -> list[Any]:
    """
    Parse the bracketed span of an LLM response as a JSON array.
    Raises ParseError("no array found") or ParseError("malformed JSON").
    """
    cleaned = strip_wrapping(text)
    m = _JSON_ARRAY.search(cleaned)
    if not m:
        raise ParseError(ParseError.NO_ARRAY)
    try:
        data = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(ParseError.MALFORMED, detail=str(e)) from e
    return data


def _field(entry: Any, key: str) -> str:
    if not isinstance(entry, dict):
        return ""
    value = entry.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_questions(text: str) -> list[GeneratedQuestion]:
    """
    Raw model text -> ordered question/answer pairs.
    Missing keys become empty strings; no entry is dropped.
    """
    return [
        GeneratedQuestion(question=_field(e, "question"), answer=_field(e, "answer"))
        for e in extract_array(text)
    ]
