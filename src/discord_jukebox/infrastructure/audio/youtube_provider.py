"""TrackProvider for YouTube videos, shorts and playlists via yt-dlp."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Final, cast

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from discord_jukebox.application.interfaces.track_provider import ProviderResult, TrackProvider
from discord_jukebox.domain.music.entities import Track, TrackLocator
from discord_jukebox.domain.music.value_objects import CollectionType, ProviderName
from discord_jukebox.domain.shared.exceptions import ProviderError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.models import YtDlpEntry, YtDlpOpts, YtDlpResult

logger = logging.getLogger(__name__)

YOUTUBE_ALBUM: Final[str] = "YouTube"
SEARCH_PREFIX: Final[str] = "ytsearch1:"

YOUTUBE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"youtu\.be/"),
    re.compile(r"youtube\.com/(watch|playlist|shorts)"),
)
URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://", re.IGNORECASE)


class YouTubeProvider(TrackProvider):
    """Flat-extracts YouTube metadata; audio URLs are resolved later at play time."""

    def __init__(self, opts: YtDlpOpts | None = None) -> None:
        self._opts = opts or YtDlpOpts(noplaylist=False, extract_flat="in_playlist")

    @property
    def name(self) -> str:
        return ProviderName.YOUTUBE.value

    @property
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        return YOUTUBE_PATTERNS

    def _extract_sync(self, target: str) -> dict[str, Any]:
        with YoutubeDL(params=cast(Any, self._opts.model_dump())) as ydl:
            data = ydl.extract_info(target, download=False)
        if not isinstance(data, dict):
            raise ProviderError(ErrorMessages.YTDLP_EMPTY_RESULT, provider=self.name)
        return dict(data)

    async def resolve(self, query: str) -> ProviderResult:
        is_search = not URL_PATTERN.match(query)
        target = f"{SEARCH_PREFIX}{query}" if is_search else query

        try:
            data = await asyncio.to_thread(self._extract_sync, target)
        except DownloadError as exc:
            logger.warning(LogTemplates.YTDLP_EXTRACT_FAILED, target, exc)
            raise ProviderError(
                ErrorMessages.YTDLP_ERROR.format(error=exc), provider=self.name
            ) from exc

        result = YtDlpResult.model_validate(data)
        if result.is_playlist:
            tracks = [self._to_track(entry) for entry in result.entries if entry.id]
            collection = CollectionType.SEARCH if is_search else CollectionType.PLAYLIST
            return ProviderResult(tracks=tracks, collection=collection, title=result.title)

        entry = YtDlpEntry.model_validate(data)
        if entry.id is None:
            return ProviderResult(tracks=[], collection=CollectionType.TRACK)
        return ProviderResult(tracks=[self._to_track(entry)], collection=CollectionType.TRACK)

    @staticmethod
    def _to_track(entry: YtDlpEntry) -> Track:
        return Track(
            provider=ProviderName.YOUTUBE,
            locator=TrackLocator(url=entry.watch_url, search_query=entry.title),
            title=entry.title,
            artist=entry.uploader or entry.channel,
            album=YOUTUBE_ALBUM,
            duration_ms=(entry.duration or 0) * 1000,
        )
