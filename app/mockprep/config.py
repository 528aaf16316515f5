"""
Purpose: Environment-driven settings. Read once at startup; the UI may
override the API key for its own session.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import LLMSettings

DEFAULT_MODEL = "gpt-4o-mini"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MOCKPREP_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # API key keeps the SDK's conventional name, no prefix
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
    )
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)

    # empty means in-memory store
    db_path: str = ""
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    @field_validator("openai_api_key", "model", "db_path")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    def llm_settings(self) -> LLMSettings:
        return LLMSettings(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
