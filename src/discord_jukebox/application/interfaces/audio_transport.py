"""Port interface for streaming audio into an open voice connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from discord_jukebox.application.interfaces.session_transport import SessionHandle
from discord_jukebox.domain.music.value_objects import StreamHandle, TerminalEvent

TerminalCallback = Callable[[TerminalEvent], Awaitable[None]]


class PlayerHandle(ABC):
    """Plays one stream at a time on a single voice connection."""

    @abstractmethod
    async def start(self, stream_url: str) -> StreamHandle:
        """Begin streaming ``stream_url``.

        Every stream that starts produces exactly one terminal event through
        the callback given to ``AudioTransport.attach``. A start that raises
        produces none.

        Raises:
            StreamStartError: If the stream could not begin.
        """
        ...

    @abstractmethod
    def stop(self, *, force: bool = False) -> bool:
        """Stop the current stream, which then reports a finished terminal event.

        Returns True if something was playing.
        """
        ...


class AudioTransport(ABC):
    """Creates players bound to voice connections."""

    @abstractmethod
    def attach(self, session: SessionHandle, on_terminal: TerminalCallback) -> PlayerHandle:
        """Create a player for ``session`` that reports stream ends to ``on_terminal``."""
        ...
