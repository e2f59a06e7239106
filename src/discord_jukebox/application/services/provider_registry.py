"""Routes user input to the track provider that can resolve it."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.music.value_objects import CollectionType
from ...domain.shared.exceptions import ProviderError, UnknownProviderError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..interfaces.track_provider import TrackProvider

logger = logging.getLogger(__name__)


class ResolvedInput(BaseModel):
    """Tracks for one user request, tagged with the provider that found them."""

    model_config = ConfigDict(frozen=True)

    provider: str
    tracks: list[Track]
    collection: CollectionType
    title: str | None = None

    @property
    def is_collection(self) -> bool:
        return self.collection.is_collection


class ProviderRegistry:
    """Name-keyed set of providers with URL auto-detection.

    Input that matches no provider's URL patterns goes to the default
    provider.
    """

    def __init__(self, providers: Iterable[TrackProvider], default_provider: str) -> None:
        self._providers: dict[str, TrackProvider] = {}
        for provider in providers:
            self._providers[provider.name.lower()] = provider

        default = default_provider.lower()
        if default not in self._providers:
            raise UnknownProviderError(default, self.names)
        self._default = default

    @property
    def names(self) -> list[str]:
        return list(self._providers)

    @property
    def default_provider(self) -> str:
        return self._default

    def get(self, name: str) -> TrackProvider:
        provider = self._providers.get(name.lower())
        if provider is None:
            raise UnknownProviderError(name, self.names)
        return provider

    def detect(self, query: str) -> str:
        for name, provider in self._providers.items():
            if provider.matches(query):
                return name
        return self._default

    async def resolve(self, query: str, provider: str | None = None) -> ResolvedInput:
        """Look up ``query`` with ``provider``, or the auto-detected one.

        Raises:
            UnknownProviderError: If ``provider`` is not registered.
            ProviderError: If the lookup itself fails. Finding nothing is not an
                error; the result simply has no tracks.
        """
        query = query.strip()
        if not query:
            raise ProviderError(ErrorMessages.EMPTY_QUERY)

        name = provider.lower() if provider else self.detect(query)
        selected = self.get(name)
        logger.info(LogTemplates.PROVIDER_RESOLVING, query, name)

        result = await selected.resolve(query)
        logger.info(LogTemplates.PROVIDER_RESOLVED, len(result.tracks), query, name)
        return ResolvedInput(
            provider=name,
            tracks=result.tracks,
            collection=result.collection,
            title=result.title,
        )

    async def aclose(self) -> None:
        for provider in self._providers.values():
            await provider.aclose()
