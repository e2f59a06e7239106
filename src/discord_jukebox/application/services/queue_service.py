"""Queue Application Service - the public queue API used by the command layer."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ...domain.music.entities import QueueItem, Track
from ...domain.shared.exceptions import NotInSessionError
from ...domain.shared.messages import LogTemplates
from .queue_models import ClearResult, EnqueueResult, OriginContext, SkipResult

if TYPE_CHECKING:
    from ...domain.music.registry import SessionRegistry
    from .playback_service import PlaybackDriver

logger = logging.getLogger(__name__)


class QueueService:
    """Mutates per-guild queues and hands control to the playback driver.

    Reads on a guild that never enqueued anything return empty results and do
    not create a session.
    """

    def __init__(self, *, registry: SessionRegistry, playback_driver: PlaybackDriver) -> None:
        self._registry = registry
        self._driver = playback_driver

    async def enqueue(
        self,
        guild_id: int,
        tracks: Sequence[Track],
        origin: OriginContext,
        *,
        play_next: bool = False,
    ) -> EnqueueResult:
        """Add ``tracks`` to the guild's queue and start playback if idle.

        With ``play_next`` the batch goes to the front of the queue, keeping
        its own order. It never interrupts the current track.

        Raises:
            NotInSessionError: If the caller has no voice channel. The queue
                is left untouched.
        """
        if origin.endpoint is None:
            raise NotInSessionError()

        state = self._registry.get_or_create(guild_id)
        was_already_active = state.is_active
        state.endpoint = origin.endpoint

        added = state.enqueue(
            (QueueItem(track=track, notify=origin.notify) for track in tracks),
            play_next=play_next,
        )
        logger.info(LogTemplates.QUEUE_ENQUEUED, added, guild_id, play_next, len(state.queue))

        if not state.is_playing:
            await self._driver.advance(guild_id)

        return EnqueueResult(added_count=added, was_already_active=was_already_active)

    def clear(self, guild_id: int) -> ClearResult:
        """Drop every queued track. The current track keeps playing."""
        state = self._registry.get(guild_id)
        if state is None:
            return ClearResult(cleared_count=0)

        cleared = state.clear_queue()
        logger.info(LogTemplates.QUEUE_CLEARED, cleared, guild_id)
        return ClearResult(cleared_count=cleared)

    def skip(self, guild_id: int) -> SkipResult:
        return SkipResult(skipped=self._driver.skip(guild_id))

    def peek_queue(self, guild_id: int) -> list[Track]:
        state = self._registry.get(guild_id)
        return state.snapshot_queue() if state is not None else []

    def peek_now_playing(self, guild_id: int) -> Track | None:
        state = self._registry.get(guild_id)
        return state.now_playing if state is not None else None
