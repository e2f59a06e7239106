"""Domain entities for the music bounded context."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from discord_jukebox.domain.music.value_objects import (
    PlaybackState,
    ProviderName,
    StreamHandle,
    VoiceEndpoint,
)
from discord_jukebox.domain.shared.exceptions import InvariantViolationError
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.timers import IdleTimer
from discord_jukebox.domain.shared.types import DurationMs, NonEmptyStr, TrackTitleStr

if TYPE_CHECKING:
    from ...application.interfaces.audio_transport import PlayerHandle
    from ...application.interfaces.session_transport import SessionHandle

NotifySink = Callable[[str], Awaitable[Any]]

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


class TrackLocator(BaseModel):
    """Where the audio for a track can be found: a page URL, a search query, or both."""

    model_config = ConfigDict(frozen=True, strict=True)

    url: NonEmptyStr | None = None
    search_query: NonEmptyStr | None = None
    is_direct: bool = False

    @model_validator(mode="after")
    def _require_target(self) -> TrackLocator:
        if self.url is None and self.search_query is None:
            raise ValueError(ErrorMessages.EMPTY_LOCATOR)
        if self.is_direct and self.url is None:
            raise ValueError(ErrorMessages.DIRECT_LOCATOR_WITHOUT_URL)
        return self

    @property
    def target(self) -> str:
        """The URL when known, otherwise the search query."""
        return self.url or self.search_query or ""


class Track(BaseModel):
    """Immutable descriptor of one playable item."""

    model_config = ConfigDict(frozen=True, strict=True)

    provider: ProviderName
    locator: TrackLocator
    title: TrackTitleStr = UNKNOWN_TITLE
    artist: NonEmptyStr = UNKNOWN_ARTIST
    album: NonEmptyStr = UNKNOWN_ALBUM
    duration_ms: DurationMs = Field(default=0)

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN_TITLE
        if isinstance(v, str):
            return v[:500]
        return v

    @field_validator("artist", mode="before")
    @classmethod
    def _default_artist(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN_ARTIST
        return v

    @field_validator("album", mode="before")
    @classmethod
    def _default_album(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN_ALBUM
        return v


@dataclass(frozen=True, eq=False)
class QueueItem:
    """A queued track plus the channel that asked for it."""

    track: Track
    notify: NotifySink


@dataclass(eq=False)
class SessionState:
    """Playback state for one guild.

    Invariants:
    - ``is_playing`` holds exactly when ``current`` is set.
    - ``queue`` never holds the item that is playing.
    - ``connection`` and ``player`` are both set or both None.
    """

    guild_id: int
    queue: deque[QueueItem] = field(default_factory=deque)
    is_playing: bool = False
    current: QueueItem | None = None
    connection: SessionHandle | None = None
    player: PlayerHandle | None = None
    stream: StreamHandle | None = None
    endpoint: VoiceEndpoint | None = None
    skip_pending: bool = False
    generation: int = 0
    idle_timer: IdleTimer = field(init=False)
    transport_lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)

    def __post_init__(self) -> None:
        self.idle_timer = IdleTimer(name=f"idle-{self.guild_id}")

    @property
    def now_playing(self) -> Track | None:
        return self.current.track if self.current is not None else None

    @property
    def state(self) -> PlaybackState:
        return PlaybackState.PLAYING if self.is_playing else PlaybackState.IDLE

    @property
    def is_active(self) -> bool:
        return self.is_playing or bool(self.queue)

    @property
    def has_transport(self) -> bool:
        return self.connection is not None and self.player is not None

    # ── Queue ──────────────────────────────────────────────────────

    def enqueue(self, items: Iterable[QueueItem], *, play_next: bool = False) -> int:
        batch = list(items)
        if play_next:
            self.queue.extendleft(reversed(batch))
        else:
            self.queue.extend(batch)
        return len(batch)

    def dequeue(self) -> QueueItem | None:
        return self.queue.popleft() if self.queue else None

    def clear_queue(self) -> int:
        count = len(self.queue)
        self.queue.clear()
        return count

    def snapshot_queue(self) -> list[Track]:
        return [item.track for item in self.queue]

    # ── Playback ───────────────────────────────────────────────────

    def begin_playback(self, item: QueueItem) -> int:
        """Mark ``item`` as playing and return the new playback generation."""
        self.is_playing = True
        self.current = item
        self.stream = None
        self.skip_pending = False
        self.generation += 1
        return self.generation

    def bind_stream(self, stream: StreamHandle) -> None:
        self.stream = stream

    def end_playback(self) -> None:
        self.is_playing = False
        self.current = None
        self.stream = None
        self.skip_pending = False

    # ── Transport ──────────────────────────────────────────────────

    def attach_transport(self, connection: SessionHandle, player: PlayerHandle) -> None:
        self.connection = connection
        self.player = player

    def detach_transport(self) -> SessionHandle | None:
        connection = self.connection
        self.connection = None
        self.player = None
        return connection

    def check_invariants(self) -> None:
        if self.is_playing != (self.current is not None):
            raise InvariantViolationError(
                self.guild_id,
                f"is_playing={self.is_playing} but now_playing={self.now_playing!r}",
            )
        if (self.connection is None) != (self.player is None):
            raise InvariantViolationError(
                self.guild_id, "connection and player must be set together"
            )
        if self.current is not None and any(item is self.current for item in self.queue):
            raise InvariantViolationError(self.guild_id, "playing item is still queued")
