"""Port interface for turning a track locator into a playable audio URL."""

from __future__ import annotations

from abc import ABC, abstractmethod

from discord_jukebox.domain.music.entities import TrackLocator


class StreamResolver(ABC):
    @abstractmethod
    async def resolve(self, locator: TrackLocator) -> str:
        """Return a direct audio URL for ``locator``.

        Raises:
            StreamStartError: If no audio could be found.
        """
        ...
