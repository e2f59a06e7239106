"""Playback driver - runs each guild's Idle/Playing state machine."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from ...domain.music.entities import QueueItem, SessionState
from ...domain.music.formatting import format_now_playing
from ...domain.music.value_objects import TerminalEvent, VoiceEndpoint
from ...domain.shared.exceptions import (
    InvariantViolationError,
    StreamStartError,
    TransportError,
)
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.registry import SessionRegistry
    from ..interfaces.audio_transport import AudioTransport, PlayerHandle
    from ..interfaces.session_transport import SessionHandle, SessionTransport
    from ..interfaces.stream_resolver import StreamResolver

logger = logging.getLogger(__name__)


class PlaybackDriver:
    """Starts queued tracks, reacts to stream ends and tears down idle sessions.

    All state changes happen on the event loop. ``advance`` flips ``is_playing``
    before its first ``await``, so two concurrent calls can never both start a
    stream for the same guild.
    """

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        session_transport: SessionTransport,
        audio_transport: AudioTransport,
        stream_resolver: StreamResolver,
        idle_timeout_seconds: float = 300.0,
        strict_invariants: bool = False,
    ) -> None:
        self._registry = registry
        self._session_transport = session_transport
        self._audio_transport = audio_transport
        self._stream_resolver = stream_resolver
        self._idle_timeout = idle_timeout_seconds
        self._strict = strict_invariants

    @property
    def idle_timeout_seconds(self) -> float:
        return self._idle_timeout

    # ── State machine ──────────────────────────────────────────────

    async def advance(self, guild_id: int) -> None:
        """Start the next queued track, or arm the idle timer when there is none.

        A track that fails to start is reported to its origin channel and the
        next one is tried.
        """
        state = self._registry.get(guild_id)
        if state is None:
            logger.debug(LogTemplates.SESSION_NOT_FOUND, guild_id)
            return

        while True:
            await self._verify(state)

            if state.is_playing:
                logger.debug(LogTemplates.PLAYBACK_ALREADY_PLAYING, guild_id)
                return

            item = state.dequeue()
            if item is None:
                self._arm_idle_timer(state)
                return

            state.idle_timer.cancel()
            generation = state.begin_playback(item)
            logger.info(LogTemplates.PLAYBACK_STARTING, item.track.title, guild_id)

            try:
                await self._start_stream(state, generation, item.track)
            except (StreamStartError, TransportError) as exc:
                reason = exc.message
                logger.warning(
                    LogTemplates.PLAYBACK_START_FAILED, item.track.title, guild_id, reason
                )
            except Exception as exc:
                reason = str(exc) or type(exc).__name__
                logger.exception(
                    LogTemplates.PLAYBACK_START_UNEXPECTED, item.track.title, guild_id
                )
            else:
                if self._is_current(state, generation):
                    await self._notify(item, format_now_playing(item.track))
                else:
                    self._arm_if_idle(state)
                return

            if not self._is_current(state, generation):
                # Session was left while the stream was starting.
                self._arm_if_idle(state)
                return

            state.end_playback()
            await self._notify(
                item, DiscordUIMessages.SKIPPING_TRACK.format(title=item.track.title, reason=reason)
            )

    async def _start_stream(self, state: SessionState, generation: int, track: Track) -> None:
        player = await self._ensure_transport(state)
        stream_url = await self._stream_resolver.resolve(track.locator)

        if not self._is_current(state, generation):
            return

        stream = await player.start(stream_url)

        if not self._is_current(state, generation):
            player.stop(force=True)
            return

        state.bind_stream(stream)
        logger.info(
            LogTemplates.PLAYBACK_STARTED, track.title, state.guild_id, stream.stream_id
        )

        if state.skip_pending:
            state.skip_pending = False
            logger.info(LogTemplates.PLAYBACK_DEFERRED_SKIP, track.title, state.guild_id)
            player.stop(force=True)

    async def _on_terminal(self, guild_id: int, event: TerminalEvent) -> None:
        state = self._registry.get(guild_id)
        if state is None or state.stream is None or state.stream.stream_id != event.stream_id:
            logger.debug(LogTemplates.TERMINAL_EVENT_STALE, event.stream_id, guild_id)
            return

        title = state.now_playing.title if state.now_playing else "<unknown>"
        if event.is_error:
            logger.warning(LogTemplates.PLAYBACK_STREAM_ERROR, title, guild_id, event.error)
        else:
            logger.info(LogTemplates.PLAYBACK_FINISHED, title, guild_id)

        state.end_playback()
        await self.advance(guild_id)

    @staticmethod
    def _is_current(state: SessionState, generation: int) -> bool:
        return state.is_playing and state.generation == generation

    # ── Commands ───────────────────────────────────────────────────

    def skip(self, guild_id: int) -> bool:
        """Stop the current stream; its terminal event advances the queue."""
        state = self._registry.get(guild_id)
        if state is None or not state.is_playing:
            return False

        title = state.now_playing.title if state.now_playing else "<unknown>"
        if state.stream is None or state.player is None:
            state.skip_pending = True
            logger.info(LogTemplates.PLAYBACK_SKIP_DEFERRED, title, guild_id)
            return True

        logger.info(LogTemplates.PLAYBACK_SKIPPING, title, guild_id)
        state.player.stop(force=True)
        return True

    async def join(self, guild_id: int, endpoint: VoiceEndpoint) -> bool:
        """Connect to ``endpoint`` without starting playback.

        Returns True when a new connection was opened, False when one was
        already up.

        Raises:
            TransportError: If the channel cannot be joined.
        """
        state = self._registry.get_or_create(guild_id)
        state.endpoint = endpoint

        already_open = state.connection is not None and state.connection.is_open()
        await self._ensure_transport(state)

        if not state.is_playing:
            self._arm_idle_timer(state)
        return not already_open

    async def leave(self, guild_id: int) -> bool:
        """Stop playback and close the voice connection. The queue is kept.

        A connection still being opened for a starting track counts as joined:
        the start is abandoned and the connection is closed once it is up.
        """
        state = self._registry.get(guild_id)
        if state is None or (state.connection is None and not state.is_playing):
            return False

        state.idle_timer.cancel()
        player = state.player
        state.end_playback()
        if player is not None:
            player.stop(force=True)

        # Waits out an open in progress.
        async with state.transport_lock:
            connection = state.detach_transport()
            state.idle_timer.cancel()
            if connection is not None:
                await self._close(guild_id, connection)

        logger.info(LogTemplates.SESSION_LEFT, guild_id)
        return True

    async def shutdown(self) -> None:
        for state in self._registry.sessions():
            state.idle_timer.cancel()
            if state.connection is not None:
                await self.leave(state.guild_id)

    # ── Transport ──────────────────────────────────────────────────

    async def _ensure_transport(self, state: SessionState) -> PlayerHandle:
        async with state.transport_lock:
            if state.connection is not None and state.player is not None:
                if state.connection.is_open():
                    return state.player
                logger.info(LogTemplates.TRANSPORT_STALE, state.guild_id)
                state.detach_transport()

            if state.endpoint is None:
                raise TransportError(ErrorMessages.NO_VOICE_ENDPOINT)

            connection = await self._session_transport.open(state.endpoint)
            player = self._audio_transport.attach(
                connection, partial(self._on_terminal, state.guild_id)
            )
            state.attach_transport(connection, player)
            logger.info(
                LogTemplates.TRANSPORT_OPENED, state.endpoint.channel_id, state.guild_id
            )
            return player

    async def _close(self, guild_id: int, connection: SessionHandle) -> None:
        try:
            await connection.close()
        except TransportError as exc:
            logger.warning(LogTemplates.TRANSPORT_CLOSE_FAILED, guild_id, exc.message)
        else:
            logger.info(LogTemplates.TRANSPORT_CLOSED, guild_id)

    # ── Idle teardown ──────────────────────────────────────────────

    def _arm_idle_timer(self, state: SessionState) -> None:
        if state.connection is None or state.idle_timer.is_armed:
            return

        state.idle_timer.arm(self._idle_timeout, partial(self._on_idle_timeout, state.guild_id))
        logger.debug(LogTemplates.IDLE_TIMER_ARMED, state.guild_id, self._idle_timeout)

    def _arm_if_idle(self, state: SessionState) -> None:
        if not state.is_playing:
            self._arm_idle_timer(state)

    async def _on_idle_timeout(self, guild_id: int) -> None:
        state = self._registry.get(guild_id)
        if state is None:
            return

        async with state.transport_lock:
            if state.is_playing or state.connection is None:
                logger.debug(LogTemplates.IDLE_TIMER_NOOP, guild_id)
                return

            connection = state.detach_transport()
            logger.info(LogTemplates.IDLE_TEARDOWN, guild_id, self._idle_timeout)
            if connection is not None and connection.is_open():
                await self._close(guild_id, connection)

    # ── Helpers ────────────────────────────────────────────────────

    async def _verify(self, state: SessionState) -> None:
        try:
            state.check_invariants()
        except InvariantViolationError as exc:
            if self._strict:
                raise
            logger.error(LogTemplates.INVARIANT_HEALED, state.guild_id, exc.detail)
            if state.player is not None:
                state.player.stop(force=True)
            state.end_playback()
            if state.connection is None or state.player is None:
                connection = state.detach_transport()
                if connection is not None and connection.is_open():
                    await self._close(state.guild_id, connection)

    async def _notify(self, item: QueueItem, message: str) -> None:
        try:
            await item.notify(message)
        except Exception:
            logger.exception(LogTemplates.NOTIFY_FAILED, item.track.title)
