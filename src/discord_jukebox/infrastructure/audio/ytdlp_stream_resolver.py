"""StreamResolver that asks yt-dlp for a direct audio URL."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, cast

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from discord_jukebox.application.interfaces.stream_resolver import StreamResolver
from discord_jukebox.domain.music.entities import TrackLocator
from discord_jukebox.domain.shared.exceptions import StreamStartError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.models import YtDlpEntry, YtDlpOpts
from discord_jukebox.infrastructure.audio.youtube_provider import SEARCH_PREFIX

logger = logging.getLogger(__name__)


class YtDlpStreamResolver(StreamResolver):
    """Page URLs are extracted directly; bare search queries go through YouTube search.

    Direct locators (soundboard clips) are already playable and skip yt-dlp.
    """

    def __init__(self, ytdlp_format: str = "bestaudio/best") -> None:
        self._opts = YtDlpOpts(format=ytdlp_format, noplaylist=True)

    def _extract_sync(self, target: str) -> dict[str, Any] | None:
        with YoutubeDL(params=cast(Any, self._opts.model_dump())) as ydl:
            data = ydl.extract_info(target, download=False)
        return dict(data) if isinstance(data, dict) else None

    async def resolve(self, locator: TrackLocator) -> str:
        if locator.is_direct and locator.url:
            return locator.url

        target = locator.url or f"{SEARCH_PREFIX}{locator.search_query}"
        try:
            data = await asyncio.to_thread(self._extract_sync, target)
        except DownloadError as exc:
            logger.warning(LogTemplates.YTDLP_EXTRACT_FAILED, target, exc)
            raise StreamStartError(ErrorMessages.YTDLP_ERROR.format(error=exc)) from exc

        if data is None:
            raise StreamStartError(ErrorMessages.YTDLP_EMPTY_RESULT)

        entries = data.get("entries")
        if isinstance(entries, list):
            first = next((e for e in entries if isinstance(e, dict)), None)
            if first is None:
                raise StreamStartError(
                    ErrorMessages.NO_SEARCH_RESULTS.format(query=locator.target)
                )
            data = first

        entry = YtDlpEntry.model_validate(data)
        stream_url = entry.best_audio_url()
        if not stream_url:
            raise StreamStartError(ErrorMessages.NO_STREAM_URL.format(target=locator.target))

        logger.debug(LogTemplates.YTDLP_STREAM_RESOLVED, locator.target)
        return stream_url
