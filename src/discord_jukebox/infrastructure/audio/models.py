"""Pydantic models for yt-dlp data and configuration.

These are infrastructure-specific models for parsing external yt-dlp output
and configuring the options handed to ``YoutubeDL``.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_jukebox.domain.shared.types import NonEmptyStr, NonNegativeInt, PositiveInt

DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
YOUTUBE_WATCH_URL: Final[str] = "https://www.youtube.com/watch?v={video_id}"


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None
    vcodec: NonEmptyStr | None = None
    abr: float | None = None

    @property
    def is_audio_only(self) -> bool:
        return self.acodec not in (None, "none") and self.vcodec in (None, "none")


class YtDlpEntry(BaseModel):
    """Trimmed yt-dlp info dict for a video or a flat playlist entry.

    Extra fields from yt-dlp are silently ignored. Before-validators coerce
    garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    title: NonEmptyStr | None = None
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    duration: NonNegativeInt | None = None
    url: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("id", "title", "uploader", "channel", "url", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        if v is None:
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @property
    def watch_url(self) -> str | None:
        return YOUTUBE_WATCH_URL.format(video_id=self.id) if self.id else None

    def best_audio_url(self) -> str | None:
        """Direct URL chosen by yt-dlp, else the best audio-only format."""
        if self.url:
            return self.url

        audio = [f for f in self.formats if f.url and f.is_audio_only]
        if audio:
            return max(audio, key=lambda f: f.abr or 0.0).url

        for fmt in reversed(self.formats):
            if fmt.url:
                return fmt.url
        return None


class YtDlpResult(BaseModel):
    """Top-level yt-dlp output: a single entry or a playlist of entries."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    type: str | None = Field(default=None, alias="_type")
    title: str | None = None
    entries: list[YtDlpEntry] = Field(default_factory=list)

    @field_validator("entries", mode="before")
    @classmethod
    def _drop_empty_entries(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [e for e in v if isinstance(e, dict)]

    @property
    def is_playlist(self) -> bool:
        return self.type == "playlist"


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
