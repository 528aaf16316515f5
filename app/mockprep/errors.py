"""
Tagged failures raised by each pipeline stage. The category lives on the
exception class, so classification never depends on message text.
"""

from __future__ import annotations
from typing import Iterable, Optional

from .models import ErrorCategory


class PipelineError(Exception):
    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, *, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class MissingFieldsError(PipelineError):
    category = ErrorCategory.MISSING_FIELDS

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class ConfigurationError(PipelineError):
    category = ErrorCategory.CONFIGURATION


class QuotaError(PipelineError):
    category = ErrorCategory.QUOTA


class NetworkError(PipelineError):
    category = ErrorCategory.NETWORK


class GenerationError(PipelineError):
    """Anything the generation service did that has no better category."""

    category = ErrorCategory.UNKNOWN


class ParseError(PipelineError):
    category = ErrorCategory.PARSE_ERROR

    NO_ARRAY = "no array found"
    MALFORMED = "malformed JSON"
    BAD_SHAPE = "unexpected shape"
    BAD_COUNT = "unexpected question count"

    def __init__(self, reason: str, *, detail: Optional[str] = None):
        self.reason = reason
        msg = reason if not detail else f"{reason}: {detail}"
        super().__init__(msg, detail=detail)


class PersistenceError(PipelineError):
    category = ErrorCategory.PERSISTENCE
