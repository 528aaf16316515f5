from types import SimpleNamespace

import httpx
import openai
import pytest

from mockprep.errors import (
    ConfigurationError,
    GenerationError,
    NetworkError,
    QuotaError,
)
from mockprep.models import LLMSettings
from mockprep.services import llm_openai
from mockprep.services.llm_openai import OpenAILLMClient

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls, status):
    return cls("boom", response=httpx.Response(status, request=REQUEST), body=None)


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _sdk(result=None, error=None):
    completions = FakeCompletions(result, error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _completion(text, model="gpt-4o-mini"):
    return SimpleNamespace(
        model=model,
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=34),
    )


def test_missing_key_fails_before_any_network(monkeypatch):
    def _no_client(*args, **kwargs):
        raise AssertionError("SDK client must not be constructed")

    monkeypatch.setattr(llm_openai, "OpenAI", _no_client)
    client = OpenAILLMClient(api_key="  ")
    with pytest.raises(ConfigurationError):
        client.send("prompt")


def test_missing_key_with_injected_sdk_still_not_called():
    sdk, completions = _sdk(_completion("[]"))
    client = OpenAILLMClient(api_key=None, client=sdk)
    with pytest.raises(ConfigurationError):
        client.send("prompt")
    assert completions.calls == []


def test_send_returns_text_and_usage():
    sdk, completions = _sdk(_completion('[{"question":"Q","answer":"A"}]'))
    client = OpenAILLMClient(
        api_key="sk-test",
        settings=LLMSettings(model="gpt-4o-mini", temperature=0.2, max_tokens=900),
        client=sdk,
    )
    text, meta = client.send("hello")

    assert text == '[{"question":"Q","answer":"A"}]'
    assert meta == {"model": "gpt-4o-mini", "tokens_in": 12, "tokens_out": 34}
    call = completions.calls[0]
    assert call["messages"] == [{"role": "user", "content": "hello"}]
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 900


@pytest.mark.parametrize(
    "error, expected",
    [
        (_status_error(openai.AuthenticationError, 401), ConfigurationError),
        (_status_error(openai.PermissionDeniedError, 403), ConfigurationError),
        (_status_error(openai.RateLimitError, 429), QuotaError),
        (openai.APIConnectionError(request=REQUEST), NetworkError),
        (openai.APITimeoutError(request=REQUEST), NetworkError),
        (_status_error(openai.InternalServerError, 500), GenerationError),
        (_status_error(openai.BadRequestError, 400), GenerationError),
    ],
)
def test_sdk_errors_are_translated(error, expected):
    sdk, _ = _sdk(error=error)
    client = OpenAILLMClient(api_key="sk-test", client=sdk)
    with pytest.raises(expected) as exc:
        client.send("prompt")
    assert exc.value.__cause__ is error


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_reply_is_unknown(text):
    sdk, _ = _sdk(_completion(text))
    client = OpenAILLMClient(api_key="sk-test", client=sdk)
    with pytest.raises(GenerationError):
        client.send("prompt")


def test_reply_without_choices_is_unknown():
    sdk, _ = _sdk(SimpleNamespace(model="m", choices=[], usage=None))
    client = OpenAILLMClient(api_key="sk-test", client=sdk)
    with pytest.raises(GenerationError):
        client.send("prompt")
