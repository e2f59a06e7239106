"""Value objects for the music domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from discord_jukebox.domain.shared.exceptions import TransportError


class ProviderName(str, Enum):
    YOUTUBE = "youtube"
    SPOTIFY = "spotify"
    SOUND = "sound"


class CollectionType(str, Enum):
    """What a provider lookup resolved to."""

    TRACK = "track"
    PLAYLIST = "playlist"
    ALBUM = "album"
    SEARCH = "search"

    @property
    def is_collection(self) -> bool:
        return self in (CollectionType.PLAYLIST, CollectionType.ALBUM)


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"


class TerminalReason(str, Enum):
    FINISHED = "finished"
    ERRORED = "errored"


@dataclass(frozen=True)
class StreamHandle:
    """Identity of one started audio stream."""

    stream_id: int
    url: str


@dataclass(frozen=True)
class TerminalEvent:
    """Emitted exactly once when a started stream stops for any reason."""

    stream_id: int
    reason: TerminalReason
    error: TransportError | None = None

    @property
    def is_error(self) -> bool:
        return self.reason is TerminalReason.ERRORED

    @classmethod
    def finished(cls, stream_id: int) -> TerminalEvent:
        return cls(stream_id=stream_id, reason=TerminalReason.FINISHED)

    @classmethod
    def errored(cls, stream_id: int, error: TransportError) -> TerminalEvent:
        return cls(stream_id=stream_id, reason=TerminalReason.ERRORED, error=error)


@dataclass(frozen=True)
class VoiceEndpoint:
    """A voice channel the bot can join."""

    guild_id: int
    channel_id: int

    def __post_init__(self) -> None:
        if self.guild_id <= 0:
            raise ValueError("Guild ID must be positive")
        if self.channel_id <= 0:
            raise ValueError("Channel ID must be positive")
