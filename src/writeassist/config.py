"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `WRITEASSIST_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_PROXY_URL = "http://localhost:8000/openai/proxy"

_BASE_URL_RE = re.compile(r"^https?://\S+$")


class AISettings(BaseModel):
    """Per-user model settings.

    The values are owned by whatever store persists them; the core only reads them.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    base_url: str | None = None
    model: str = DEFAULT_MODEL
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1)

    include_document_context: bool = True
    use_default_temperature: bool = True
    temperature_improve: float = Field(default=0.7, ge=0.0, le=2.0)
    temperature_fix: float = Field(default=0.3, ge=0.0, le=2.0)
    temperature_change_tone: float = Field(default=0.7, ge=0.0, le=2.0)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not _BASE_URL_RE.match(value):
            raise ValueError("That doesn't look like a valid URL")
        return value

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class Settings(BaseSettings):
    """WriteAssist settings.

    All fields are environment-configurable. Prefix is `WRITEASSIST_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="WRITEASSIST_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # LLM
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default=DEFAULT_MODEL)
    openai_max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1)
    include_document_context: bool = Field(default=True)
    use_default_temperature: bool = Field(default=True)
    temperature_improve: float = Field(default=0.7, ge=0.0, le=2.0)
    temperature_fix: float = Field(default=0.3, ge=0.0, le=2.0)
    temperature_change_tone: float = Field(default=0.7, ge=0.0, le=2.0)

    # Proxy
    # Where model clients reach the `/openai/proxy` endpoint of this service.
    proxy_url: str = Field(default=DEFAULT_PROXY_URL)
    upstream_timeout_s: float = Field(default=120.0, ge=1.0, le=600.0)
    session_tokens: list[str] = Field(default_factory=list)

    def ai_settings(self) -> AISettings:
        """Project the OpenAI fields into an :class:`AISettings` value."""

        return AISettings(
            api_key=self.openai_api_key,
            base_url=self.openai_base_url,
            model=self.openai_model,
            max_tokens=self.openai_max_tokens,
            include_document_context=self.include_document_context,
            use_default_temperature=self.use_default_temperature,
            temperature_improve=self.temperature_improve,
            temperature_fix=self.temperature_fix,
            temperature_change_tone=self.temperature_change_tone,
        )


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("WRITEASSIST_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
