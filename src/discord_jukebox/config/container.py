"""Dependency Injection Container

Builds the application's object graph lazily: the session registry, the
Discord transports, providers, the playback driver and the queue API.
Components are created on first access and cached for the container's life.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.audio_transport import AudioTransport
    from ..application.interfaces.session_transport import SessionTransport
    from ..application.interfaces.stream_resolver import StreamResolver
    from ..application.services.playback_service import PlaybackDriver
    from ..application.services.provider_registry import ProviderRegistry
    from ..application.services.queue_service import QueueService
    from ..application.services.sound_library import SoundLibrary
    from ..domain.music.registry import SessionRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Any component can be injected up front (tests pass fakes for the
    transports); whatever is left unset is built from settings on first use.
    """

    settings: Settings
    _bot: Bot | None = None

    _session_registry: SessionRegistry | None = None
    _session_transport: SessionTransport | None = None
    _audio_transport: AudioTransport | None = None
    _stream_resolver: StreamResolver | None = None
    _provider_registry: ProviderRegistry | None = None
    _sound_library: SoundLibrary | None = None
    _playback_driver: PlaybackDriver | None = None
    _queue_service: QueueService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Domain ===

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..domain.music.registry import SessionRegistry

            self._session_registry = SessionRegistry()
        return self._session_registry

    # === Infrastructure adapters ===

    @property
    def session_transport(self) -> SessionTransport:
        """Get the voice connection transport."""
        if self._session_transport is None:
            from ..infrastructure.discord.adapters.voice_session import DiscordSessionTransport

            self._session_transport = DiscordSessionTransport(self.bot)
        return self._session_transport

    @property
    def audio_transport(self) -> AudioTransport:
        """Get the FFmpeg audio transport."""
        if self._audio_transport is None:
            from ..infrastructure.discord.adapters.audio_player import DiscordAudioTransport

            self._audio_transport = DiscordAudioTransport(self.bot, settings=self.settings.audio)
        return self._audio_transport

    @property
    def stream_resolver(self) -> StreamResolver:
        if self._stream_resolver is None:
            from ..infrastructure.audio.ytdlp_stream_resolver import YtDlpStreamResolver

            self._stream_resolver = YtDlpStreamResolver(self.settings.audio.ytdlp_format)
        return self._stream_resolver

    @property
    def provider_registry(self) -> ProviderRegistry:
        """Get the provider registry with YouTube and Spotify registered."""
        if self._provider_registry is None:
            from ..application.services.provider_registry import ProviderRegistry
            from ..infrastructure.audio.spotify_provider import SpotifyProvider
            from ..infrastructure.audio.youtube_provider import YouTubeProvider

            providers = self.settings.providers
            self._provider_registry = ProviderRegistry(
                [
                    SpotifyProvider(
                        client_id=providers.spotify_client_id,
                        client_secret=providers.spotify_client_secret.get_secret_value(),
                        timeout=providers.spotify_timeout_s,
                    ),
                    YouTubeProvider(),
                ],
                default_provider=providers.default_provider,
            )
        return self._provider_registry

    # === Application services ===

    @property
    def sound_library(self) -> SoundLibrary:
        if self._sound_library is None:
            from ..application.services.sound_library import SoundLibrary

            self._sound_library = SoundLibrary(self.settings.sounds.sounds)
        return self._sound_library

    @property
    def playback_driver(self) -> PlaybackDriver:
        """Get the per-guild playback driver."""
        if self._playback_driver is None:
            from ..application.services.playback_service import PlaybackDriver

            self._playback_driver = PlaybackDriver(
                registry=self.session_registry,
                session_transport=self.session_transport,
                audio_transport=self.audio_transport,
                stream_resolver=self.stream_resolver,
                idle_timeout_seconds=self.settings.audio.idle_timeout_seconds,
                strict_invariants=self.settings.enforce_invariants,
            )
        return self._playback_driver

    @property
    def queue_service(self) -> QueueService:
        """Get the public queue API."""
        if self._queue_service is None:
            from ..application.services.queue_service import QueueService

            self._queue_service = QueueService(
                registry=self.session_registry,
                playback_driver=self.playback_driver,
            )
        return self._queue_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the eager parts of the graph so misconfiguration fails at startup."""
        registry = self.provider_registry
        logger.info(
            LogTemplates.CONTAINER_PROVIDERS_READY,
            ", ".join(registry.names),
            registry.default_provider,
        )
        logger.info(LogTemplates.CONTAINER_SOUNDS_LOADED, len(self.sound_library))

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._playback_driver is not None:
            try:
                await self._playback_driver.shutdown()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_DRIVER_SHUTDOWN_FAILED, exc)

        if self._provider_registry is not None:
            await self._provider_registry.aclose()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
