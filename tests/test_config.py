import json
import logging

import pytest
from pydantic import ValidationError

from mockprep.config import DEFAULT_MODEL, Settings
from mockprep.utils.logger import StructuredFormatter, setup_logger

ENV_VARS = (
    "OPENAI_API_KEY",
    "MOCKPREP_MODEL",
    "MOCKPREP_TEMPERATURE",
    "MOCKPREP_MAX_TOKENS",
    "MOCKPREP_DB_PATH",
    "MOCKPREP_LOG_LEVEL",
    "MOCKPREP_LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_from_empty_env(clean_env):
    s = Settings(_env_file=None)
    assert s.openai_api_key == ""
    assert s.model == DEFAULT_MODEL
    assert s.db_path == ""
    assert s.log_format == "text"
    assert s.llm_settings().max_tokens == 2000


def test_env_values(clean_env):
    clean_env.setenv("OPENAI_API_KEY", " sk-abc ")
    clean_env.setenv("MOCKPREP_MODEL", "gpt-4o")
    clean_env.setenv("MOCKPREP_TEMPERATURE", "0.2")
    clean_env.setenv("MOCKPREP_MAX_TOKENS", "1500")
    clean_env.setenv("MOCKPREP_LOG_LEVEL", "debug")
    clean_env.setenv("MOCKPREP_LOG_FORMAT", "JSON")

    s = Settings(_env_file=None)
    assert s.openai_api_key == "sk-abc"
    assert s.llm_settings().model == "gpt-4o"
    assert s.temperature == 0.2
    assert s.max_tokens == 1500
    assert s.log_level == "DEBUG"
    assert s.log_format == "json"


def test_empty_values_use_defaults(clean_env):
    clean_env.setenv("MOCKPREP_TEMPERATURE", "")
    assert Settings(_env_file=None).temperature == 0.7


@pytest.mark.parametrize(
    "name, value",
    [
        ("MOCKPREP_TEMPERATURE", "warm"),
        ("MOCKPREP_TEMPERATURE", "5"),
        ("MOCKPREP_MAX_TOKENS", "lots"),
        ("MOCKPREP_MAX_TOKENS", "0"),
        ("MOCKPREP_LOG_FORMAT", "xml"),
    ],
)
def test_invalid_values_raise(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_setup_logger_is_idempotent():
    logger = setup_logger("mockprep-test-idempotent")
    again = setup_logger("mockprep-test-idempotent")
    assert logger is again
    assert len(logger.handlers) == 1


def test_structured_formatter_emits_json():
    record = logging.LogRecord(
        "mockprep.controller", logging.WARNING, __file__, 10, "save failed", (), None
    )
    record.category = "Quota"
    entry = json.loads(StructuredFormatter().format(record))
    assert entry["message"] == "save failed"
    assert entry["category"] == "Quota"
    assert entry["level"] == "WARNING"
    assert "source" in entry
