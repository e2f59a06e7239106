"""Port interface for media providers (YouTube, Spotify, ...)."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.music.value_objects import CollectionType


class ProviderResult(BaseModel):
    """Tracks found by a provider lookup."""

    model_config = ConfigDict(frozen=True)

    tracks: list[Track] = Field(default_factory=list)
    collection: CollectionType = CollectionType.TRACK
    title: str | None = None


class TrackProvider(ABC):
    """Interface for looking up tracks from user input."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. ``"youtube"``."""
        ...

    @property
    @abstractmethod
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        """URL patterns that route input to this provider."""
        ...

    def matches(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in self.patterns)

    @abstractmethod
    async def resolve(self, query: str) -> ProviderResult:
        """Look up a URL or free-text query.

        Raises:
            ProviderError: If the lookup fails. Finding nothing returns an
                empty result.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
