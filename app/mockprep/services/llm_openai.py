"""
Purpose: Thin client wrapper around OpenAI.
One place for auth, model options, response/usage normalization, and for
translating SDK exceptions into the pipeline's failure categories.

The client is a transport boundary only: it returns the raw reply text and
never interprets it. There is no retry loop; a failed call surfaces once.

Testing: Inject a fake SDK client; assert it maps usage and errors correctly.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from ..errors import ConfigurationError, GenerationError, NetworkError, QuotaError
from ..models import LLMSettings

logger = logging.getLogger(__name__)


class OpenAILLMClient:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        settings: Optional[LLMSettings] = None,
        client: Any = None,
    ):
        self.api_key = (api_key or "").strip()
        self.settings = settings or LLMSettings(model="gpt-4o-mini")
        self._client = client

    @property
    def client(self):
        """The SDK client, built on first use so a missing key never dials out."""
        if not self.api_key:
            raise ConfigurationError("Missing OPENAI_API_KEY")
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
    ) -> tuple[str, dict]:
        client = self.client
        try:
            cc = client.chat.completions.create(
                model=settings.model,
                messages=messages,
                temperature=settings.temperature,
                top_p=settings.top_p,
                max_tokens=settings.max_tokens,
            )
        except openai.OpenAIError as e:
            raise _translate(e) from e

        choices = getattr(cc, "choices", None) or []
        if not choices or choices[0].message is None:
            raise GenerationError("Invalid response from OpenAI")
        text = choices[0].message.content
        if not text or not text.strip():
            raise GenerationError("Empty response from OpenAI")

        usage = getattr(cc, "usage", None)
        tokens_in = getattr(usage, "prompt_tokens", 0) if usage else 0
        tokens_out = getattr(usage, "completion_tokens", 0) if usage else 0
        return text, {
            "model": getattr(cc, "model", settings.model),
            "tokens_in": tokens_in or 0,
            "tokens_out": tokens_out or 0,
        }

    def send(self, prompt: str) -> tuple[str, dict]:
        """Single-turn generation with the client's default settings."""
        return self.chat([{"role": "user", "content": prompt}], self.settings)


def _translate(error: Exception) -> Exception:
    """SDK exception -> tagged pipeline failure."""
    detail = str(error)
    if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ConfigurationError("Invalid OpenAI API key", detail=detail)
    if isinstance(error, openai.RateLimitError):
        return QuotaError("OpenAI quota or rate limit exceeded", detail=detail)
    if isinstance(error, openai.APIConnectionError):
        return NetworkError("Could not reach OpenAI", detail=detail)
    logger.debug("Unmapped OpenAI error %s", type(error).__name__)
    return GenerationError("OpenAI request failed", detail=detail)
