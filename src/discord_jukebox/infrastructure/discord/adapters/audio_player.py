"""FFmpeg playback on a Discord voice connection as AudioTransport / PlayerHandle."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Iterator

import discord

from discord_jukebox.application.interfaces.audio_transport import (
    AudioTransport,
    PlayerHandle,
    TerminalCallback,
)
from discord_jukebox.application.interfaces.session_transport import SessionHandle
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.value_objects import StreamHandle, TerminalEvent
from discord_jukebox.domain.shared.exceptions import StreamStartError, TransportError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.discord.adapters.voice_session import DiscordVoiceSession

logger = logging.getLogger(__name__)


class DiscordPlayer(PlayerHandle):
    """Streams one URL at a time through FFmpeg into a VoiceClient.

    discord.py calls the ``after`` hook on its audio thread; the terminal
    event is handed back to the event loop with ``run_coroutine_threadsafe``.
    """

    def __init__(
        self,
        session: DiscordVoiceSession,
        on_terminal: TerminalCallback,
        *,
        loop: asyncio.AbstractEventLoop,
        settings: AudioSettings,
        stream_ids: Iterator[int],
    ) -> None:
        self._session = session
        self._on_terminal = on_terminal
        self._loop = loop
        self._settings = settings
        self._stream_ids = stream_ids

    def _build_source(self, stream_url: str) -> discord.AudioSource:
        source = discord.FFmpegPCMAudio(
            stream_url,
            before_options=self._settings.ffmpeg_options.get("before_options", ""),
            options=self._settings.ffmpeg_options.get("options", ""),
        )
        return discord.PCMVolumeTransformer(source, volume=self._settings.default_volume)

    async def start(self, stream_url: str) -> StreamHandle:
        vc = self._session.voice_client
        if not vc.is_connected():
            raise StreamStartError(ErrorMessages.VOICE_NOT_CONNECTED)

        stream = StreamHandle(stream_id=next(self._stream_ids), url=stream_url)

        def after_callback(error: Exception | None = None) -> None:
            if error:
                event = TerminalEvent.errored(stream.stream_id, TransportError(str(error)))
            else:
                event = TerminalEvent.finished(stream.stream_id)
            asyncio.run_coroutine_threadsafe(self._dispatch(event), self._loop)

        try:
            vc.play(self._build_source(stream_url), after=after_callback)
        except discord.ClientException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise StreamStartError(ErrorMessages.PLAYBACK_START_FAILED.format(error=exc)) from exc

        logger.debug(LogTemplates.STREAM_STARTED, stream.stream_id, self._session.guild_id)
        return stream

    def stop(self, *, force: bool = False) -> bool:
        vc = self._session.voice_client
        if vc.is_playing() or vc.is_paused():
            vc.stop()
            logger.debug(LogTemplates.STREAM_STOPPED, self._session.guild_id, force)
            return True
        return False

    async def _dispatch(self, event: TerminalEvent) -> None:
        logger.debug(
            LogTemplates.STREAM_ENDED, event.stream_id, self._session.guild_id, event.reason.value
        )
        try:
            await self._on_terminal(event)
        except Exception:
            logger.exception(LogTemplates.TERMINAL_CALLBACK_FAILED, self._session.guild_id)


class DiscordAudioTransport(AudioTransport):
    def __init__(self, bot: discord.Client, settings: AudioSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        # Stream ids are unique across every player this transport creates.
        self._stream_ids = itertools.count(1)

    def attach(self, session: SessionHandle, on_terminal: TerminalCallback) -> DiscordPlayer:
        if not isinstance(session, DiscordVoiceSession):
            raise TransportError(
                ErrorMessages.UNSUPPORTED_SESSION.format(kind=type(session).__name__)
            )

        return DiscordPlayer(
            session,
            on_terminal,
            loop=self._bot.loop,
            settings=self._settings,
            stream_ids=self._stream_ids,
        )
