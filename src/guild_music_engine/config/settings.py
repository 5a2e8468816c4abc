"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import AudioConstants, DatabaseURLSchemes, LimitConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.validators import validate_discord_snowflake


class DatabaseSettings(BaseModel):
    """Playlist database configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/music.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(DatabaseURLSchemes.SQLITE) and v != DatabaseURLSchemes.MEMORY:
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("guild_ids", "guilds")
    )
    sync_on_startup: bool = False

    @field_validator("guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        # JSON arrays in env vars arrive as lists
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v


class AudioSettings(BaseModel):
    """Audio playback and resolution configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    default_volume: int = Field(default=LimitConstants.DEFAULT_VOLUME, ge=0, le=100)
    history_depth: int = Field(default=LimitConstants.DEFAULT_HISTORY_DEPTH, ge=1, le=100)
    stream_open_retries: int = Field(default=1, ge=0, le=5)
    stream_retry_backoff_seconds: float = Field(default=0.5, ge=0.0, le=10.0)
    ffmpeg_before_options: str = AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT
    ffmpeg_options: str = AudioConstants.FFMPEG_OPTIONS_DEFAULT
    ytdlp_format: str = AudioConstants.YTDLP_FORMAT_DEFAULT
    playlist_extract_limit: int = Field(
        default=LimitConstants.PLAYLIST_EXTRACT_LIMIT,
        ge=1,
        le=500,
        validation_alias=AliasChoices("playlist_extract_limit", "playlist_limit"),
    )


class EngineSettings(BaseModel):
    """Guild controller lifetime configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    idle_timeout_seconds: float = Field(default=300.0, gt=0)
    idle_sweep_interval_seconds: float = Field(default=60.0, gt=0)


class SearchSettings(BaseModel):
    """Autocomplete and search configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    min_query_length: int = Field(default=LimitConstants.AUTOCOMPLETE_MIN_QUERY, ge=1)
    autocomplete_limit: int = Field(default=LimitConstants.AUTOCOMPLETE_LIMIT, ge=1, le=25)
    autocomplete_timeout_seconds: float = Field(default=2.5, gt=0, le=3.0)
    playlist_choice_limit: int = Field(default=LimitConstants.PLAYLIST_CHOICE_LIMIT, ge=1, le=25)


class RateLimitRule(BaseModel):
    """``limit`` calls per ``window_seconds`` sliding window."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    limit: int = Field(default=5, ge=1)
    window_seconds: float = Field(default=10.0, gt=0)


class RateLimitSettings(BaseModel):
    """Per-action rate limits, keyed by user."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    search: RateLimitRule = Field(default_factory=lambda: RateLimitRule(limit=5, window_seconds=5.0))
    play: RateLimitRule = Field(default_factory=lambda: RateLimitRule(limit=5, window_seconds=10.0))
    control: RateLimitRule = Field(default_factory=lambda: RateLimitRule(limit=10, window_seconds=10.0))
    playlist: RateLimitRule = Field(default_factory=lambda: RateLimitRule(limit=5, window_seconds=15.0))


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__GUILD_IDS, etc. (nested with ``__``)
    - AUDIO__DEFAULT_VOLUME, ENGINE__IDLE_TIMEOUT_SECONDS, ...
    - RATE_LIMITS__SEARCH__LIMIT, RATE_LIMITS__SEARCH__WINDOW_SECONDS, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    rate_limits: RateLimitSettings = Field(default_factory=RateLimitSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
