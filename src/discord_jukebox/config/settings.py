"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, NonNegativeFloat, VolumeFloat


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    idle_timeout_seconds: NonNegativeFloat = Field(
        default=300.0,
        validation_alias=AliasChoices("idle_timeout_seconds", "idle_timeout_sec", "idle_timeout"),
    )
    default_volume: VolumeFloat = 0.5
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: str = "bestaudio/best"


class ProviderSettings(BaseModel):
    """Track provider configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_provider: str = Field(
        default="spotify",
        validation_alias=AliasChoices("default_provider", "default"),
    )
    spotify_client_id: str = Field(
        default="", validation_alias=AliasChoices("spotify_client_id", "client_id")
    )
    spotify_client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("spotify_client_secret", "client_secret"),
    )
    spotify_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)

    @field_validator("default_provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower()


class SoundSettings(BaseModel):
    """Soundboard clips: name -> audio URL."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sounds: dict[str, str] = Field(default_factory=dict)

    @field_validator("sounds")
    @classmethod
    def validate_urls(cls, v: dict[str, str]) -> dict[str, str]:
        for name, url in v.items():
            if not url.startswith(("http://", "https://")):
                raise ValueError(ErrorMessages.INVALID_SOUND_URL.format(name=name))
        return {name.strip().lower(): url for name, url in v.items()}


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL, STRICT_INVARIANTS (top-level)
    - DISCORD__TOKEN, DISCORD__PREFIX (nested with ``__``)
    - AUDIO__IDLE_TIMEOUT_SEC, AUDIO__DEFAULT_VOLUME, ...
    - PROVIDERS__DEFAULT_PROVIDER, PROVIDERS__SPOTIFY_CLIENT_ID, ...
    - SOUNDS__SOUNDS (JSON object)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    strict_invariants: bool = False

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    sounds: SoundSettings = Field(default_factory=SoundSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper

    @property
    def enforce_invariants(self) -> bool:
        """Invariant violations raise only in development with strict checking on."""
        return self.strict_invariants and self.environment == "development"

    @classmethod
    def from_env(cls) -> Settings:
        """Create settings from environment variables."""
        return cls()


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
