"""
Purpose: Map any failure from the pipeline to one user-facing category and a
fixed message. Raw diagnostics are logged here, never shown as the message.
"""

from __future__ import annotations
import logging

from ..errors import PipelineError
from ..models import ErrorCategory

logger = logging.getLogger(__name__)

MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.MISSING_FIELDS: "Please fill all required fields.",
    ErrorCategory.CONFIGURATION: (
        "The OpenAI API key is missing or invalid. "
        "Set OPENAI_API_KEY or enter a key in the sidebar."
    ),
    ErrorCategory.QUOTA: (
        "API quota exceeded. Please check your OpenAI usage limits "
        "and try again later."
    ),
    ErrorCategory.NETWORK: (
        "Network error. Please check your internet connection and try again."
    ),
    ErrorCategory.PARSE_ERROR: (
        "Failed to parse AI response. Please try again to regenerate "
        "the questions."
    ),
    ErrorCategory.PERSISTENCE: (
        "Could not save the interview. Please try again."
    ),
    ErrorCategory.UNKNOWN: (
        "Failed to generate questions. Please try again later."
    ),
}


def classify(error: BaseException) -> ErrorCategory:
    """Total over the closed enum: untagged exceptions are UNKNOWN."""
    if isinstance(error, PipelineError):
        return error.category
    return ErrorCategory.UNKNOWN


def message_for(category: ErrorCategory) -> str:
    return MESSAGES[category]


def describe(error: BaseException) -> tuple[ErrorCategory, str]:
    """Classify, log the diagnostic, and return (category, user message)."""
    category = classify(error)
    detail = getattr(error, "detail", None) or str(error)
    if category == ErrorCategory.MISSING_FIELDS:
        logger.info("Save rejected (%s): %s", category.value, detail)
    elif category == ErrorCategory.UNKNOWN and not isinstance(error, PipelineError):
        logger.error(
            "Unexpected failure (%s): %s",
            type(error).__name__,
            detail,
            exc_info=error,
        )
    else:
        logger.warning("Save failed (%s): %s", category.value, detail)
    return category, message_for(category)
