"""TrackProvider backed by the Spotify Web API (client-credentials flow).

Spotify has no audio we can stream, so each track carries a search query
(``"<name> <artist>"``) that the stream resolver turns into YouTube audio.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Callable
from typing import Any, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from discord_jukebox.application.interfaces.track_provider import ProviderResult, TrackProvider
from discord_jukebox.domain.music.entities import Track, TrackLocator
from discord_jukebox.domain.music.value_objects import CollectionType, ProviderName
from discord_jukebox.domain.shared.exceptions import ProviderError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

TOKEN_URL: Final[str] = "https://accounts.spotify.com/api/token"
API_BASE_URL: Final[str] = "https://api.spotify.com/v1"
TOKEN_EXPIRY_MARGIN_S: Final[int] = 60
PLAYLIST_LIMIT: Final[int] = 50
PLAYLIST_FIELDS: Final[str] = "items(track(name,artists,duration_ms,album(name)))"

SPOTIFY_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"open\.spotify\.com"),
    re.compile(r"^spotify:(track|album|playlist):"),
)
URI_PATTERN: Final[re.Pattern[str]] = re.compile(r"^spotify:(track|album|playlist):([a-zA-Z0-9]+)$")
URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"open\.spotify\.com/(?:intl-[a-zA-Z-]+/)?(track|album|playlist)/([a-zA-Z0-9]+)"
)


# ── Pydantic models for Spotify payloads ───────────────────────────────


class _SpotifyModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SpotifyToken(_SpotifyModel):
    access_token: str
    expires_in: int = 3600


class SpotifyArtist(_SpotifyModel):
    name: str | None = None


class SpotifyAlbumRef(_SpotifyModel):
    name: str | None = None


class SpotifyTrack(_SpotifyModel):
    name: str | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list)
    duration_ms: int = 0
    album: SpotifyAlbumRef | None = None

    @property
    def primary_artist(self) -> str | None:
        return self.artists[0].name if self.artists else None


class SpotifyPlaylistItem(_SpotifyModel):
    track: SpotifyTrack | None = None


class SpotifyPlaylistPage(_SpotifyModel):
    items: list[SpotifyPlaylistItem] = Field(default_factory=list)


class SpotifyTrackPage(_SpotifyModel):
    items: list[SpotifyTrack] = Field(default_factory=list)


class SpotifyAlbum(_SpotifyModel):
    name: str | None = None
    tracks: SpotifyTrackPage = Field(default_factory=SpotifyTrackPage)


class SpotifySearch(_SpotifyModel):
    tracks: SpotifyTrackPage = Field(default_factory=SpotifyTrackPage)


def parse_spotify_input(query: str) -> tuple[str, str] | None:
    """Return ``(kind, id)`` for a Spotify URI or open.spotify.com URL."""
    match = URI_PATTERN.match(query.strip()) or URL_PATTERN.search(query)
    if match is None:
        return None
    return match.group(1), match.group(2)


class SpotifyProvider(TrackProvider):
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._clock = clock
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return ProviderName.SPOTIFY.value

    @property
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        return SPOTIFY_PATTERNS

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── HTTP ───────────────────────────────────────────────────────

    async def _access_token(self) -> str:
        async with self._token_lock:
            if self._token and self._clock() < self._token_expires_at:
                return self._token

            if not self.is_configured:
                raise ProviderError(ErrorMessages.SPOTIFY_NOT_CONFIGURED, provider=self.name)

            try:
                response = await self._client.post(
                    TOKEN_URL,
                    data={"grant_type": "client_credentials"},
                    auth=(self._client_id, self._client_secret),
                )
                response.raise_for_status()
                token = SpotifyToken.model_validate(response.json())
            except (httpx.HTTPError, ValueError) as exc:
                logger.error(LogTemplates.SPOTIFY_TOKEN_FAILED, exc)
                raise ProviderError(
                    ErrorMessages.SPOTIFY_TOKEN_FAILED.format(error=exc), provider=self.name
                ) from exc

            self._token = token.access_token
            self._token_expires_at = self._clock() + token.expires_in - TOKEN_EXPIRY_MARGIN_S
            logger.debug(LogTemplates.SPOTIFY_TOKEN_REFRESHED, token.expires_in)
            return self._token

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """GET an API path; None when Spotify says the resource does not exist."""
        token = await self._access_token()
        try:
            response = await self._client.get(
                f"{API_BASE_URL}{path}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            logger.error(LogTemplates.SPOTIFY_REQUEST_FAILED, path, exc)
            raise ProviderError(
                ErrorMessages.SPOTIFY_REQUEST_FAILED.format(error=exc), provider=self.name
            ) from exc

        if response.status_code in (400, 404):
            logger.info(LogTemplates.SPOTIFY_NOT_FOUND, path, response.status_code)
            return None
        if response.is_error:
            logger.error(LogTemplates.SPOTIFY_REQUEST_FAILED, path, response.status_code)
            raise ProviderError(
                ErrorMessages.SPOTIFY_REQUEST_FAILED.format(error=f"HTTP {response.status_code}"),
                provider=self.name,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(ErrorMessages.SPOTIFY_BAD_RESPONSE, provider=self.name) from exc

    # ── Lookups ────────────────────────────────────────────────────

    async def resolve(self, query: str) -> ProviderResult:
        parsed = parse_spotify_input(query)
        try:
            if parsed is not None:
                kind, item_id = parsed
                if kind == "track":
                    return await self._get_track(item_id)
                if kind == "playlist":
                    return await self._get_playlist(item_id)
                return await self._get_album(item_id)
            return await self._search(query)
        except ValidationError as exc:
            raise ProviderError(ErrorMessages.SPOTIFY_BAD_RESPONSE, provider=self.name) from exc

    async def _get_track(self, track_id: str) -> ProviderResult:
        data = await self._get(f"/tracks/{track_id}")
        tracks = [self._to_track(SpotifyTrack.model_validate(data))] if data else []
        return ProviderResult(tracks=tracks, collection=CollectionType.TRACK)

    async def _get_playlist(self, playlist_id: str) -> ProviderResult:
        data = await self._get(
            f"/playlists/{playlist_id}/tracks",
            params={"fields": PLAYLIST_FIELDS, "limit": PLAYLIST_LIMIT},
        )
        if not data:
            return ProviderResult(tracks=[], collection=CollectionType.PLAYLIST)

        page = SpotifyPlaylistPage.model_validate(data)
        tracks = [self._to_track(item.track) for item in page.items if item.track is not None]
        return ProviderResult(tracks=tracks, collection=CollectionType.PLAYLIST)

    async def _get_album(self, album_id: str) -> ProviderResult:
        data = await self._get(f"/albums/{album_id}")
        if not data:
            return ProviderResult(tracks=[], collection=CollectionType.ALBUM)

        album = SpotifyAlbum.model_validate(data)
        tracks = [self._to_track(item, album_name=album.name) for item in album.tracks.items]
        return ProviderResult(tracks=tracks, collection=CollectionType.ALBUM, title=album.name)

    async def _search(self, query: str) -> ProviderResult:
        data = await self._get("/search", params={"q": query, "type": "track", "limit": 1})
        search = SpotifySearch.model_validate(data or {})
        tracks = [self._to_track(item) for item in search.tracks.items[:1]]
        return ProviderResult(tracks=tracks, collection=CollectionType.SEARCH)

    @staticmethod
    def _to_track(item: SpotifyTrack, album_name: str | None = None) -> Track:
        artist = item.primary_artist or "Unknown Artist"
        title = item.name or "Unknown Title"
        return Track(
            provider=ProviderName.SPOTIFY,
            locator=TrackLocator(search_query=f"{title} {artist}"),
            title=title,
            artist=artist,
            album=album_name or (item.album.name if item.album else None),
            duration_ms=max(item.duration_ms, 0),
        )
