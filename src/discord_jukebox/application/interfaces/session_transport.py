"""Port interface for joining and leaving a voice channel."""

from __future__ import annotations

from abc import ABC, abstractmethod

from discord_jukebox.domain.music.value_objects import VoiceEndpoint


class SessionHandle(ABC):
    """An open voice connection."""

    @abstractmethod
    def is_open(self) -> bool:
        """Whether the connection is still usable."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Leave the voice channel. Closing twice is a no-op."""
        ...


class SessionTransport(ABC):
    """Interface for opening voice connections."""

    @abstractmethod
    async def open(self, endpoint: VoiceEndpoint) -> SessionHandle:
        """Join (or move to) the endpoint's channel.

        Raises:
            TransportError: If the channel cannot be joined.
        """
        ...
