"""Application configuration loaded from environment variables."""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:102.0) Gecko/20100101 Firefox/102.0"


class AppSettings(BaseSettings):
    """Centralized runtime configuration for the API, the core pipelines and the relay."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_title: str = "Link Summarizer API"

    user_agent: str = DEFAULT_USER_AGENT

    chat_model: str = "gpt-3.5-turbo"
    openai_base_url: str | None = Field(default=None)
    whisper_model: str = "fal-ai/whisper"
    reply_language: str = "Traditional Chinese (繁體中文)"

    cache_backend: Literal["memory", "sqlite"] = "sqlite"
    # Audio paths never expire in the cache, so the artifacts share its persistent root.
    cache_path: str = "storage/cache.sqlite3"
    storage_dir: str = "storage/temp"

    tool_timeout_seconds: float = 10.0
    cache_ttl_seconds: int = 3600
    context_char_limit: int = 5000
    max_audio_duration: str = "00:15:00"
    audio_format_id: str = "140"
    audio_bitrate: str = "64k"

    line_reply_url: str = "https://api.line.me/v2/bot/message/reply"
    summarizer_endpoint: str | None = Field(default=None)

    openai_api_key: str | None = Field(default=None)
    openrouter_api_key: str | None = Field(default=None)
    fal_key: str | None = Field(default=None)
    line_channel_secret: str | None = Field(default=None)
    line_channel_access_token: str | None = Field(default=None)

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl_seconds)

    @property
    def has_chat_model(self) -> bool:
        return bool(self.openai_api_key or self.openrouter_api_key)

    @property
    def has_transcriber(self) -> bool:
        return bool(self.fal_key)

    @property
    def has_line(self) -> bool:
        return bool(self.line_channel_secret and self.line_channel_access_token)

    def to_public_config(self) -> dict[str, str | int | float | bool]:
        """Return safe config values for API responses and diagnostics."""
        return {
            "api_title": self.api_title,
            "chat_model": self.chat_model,
            "whisper_model": self.whisper_model,
            "cache_backend": self.cache_backend,
            "tool_timeout_seconds": self.tool_timeout_seconds,
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "context_char_limit": self.context_char_limit,
            "max_audio_duration": self.max_audio_duration,
            "chat_model_configured": self.has_chat_model,
            "transcriber_configured": self.has_transcriber,
            "line_configured": self.has_line,
        }


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    optional_key_fields = (
        "openai_api_key",
        "openrouter_api_key",
        "openai_base_url",
        "fal_key",
        "line_channel_secret",
        "line_channel_access_token",
        "summarizer_endpoint",
    )
    for field_name in optional_key_fields:
        current_value = getattr(settings, field_name)
        setattr(settings, field_name, _clean_optional(current_value))

    return settings
