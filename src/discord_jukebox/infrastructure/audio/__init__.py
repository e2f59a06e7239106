"""Audio infrastructure - track providers and the yt-dlp stream resolver."""

from discord_jukebox.infrastructure.audio.spotify_provider import SpotifyProvider
from discord_jukebox.infrastructure.audio.youtube_provider import YouTubeProvider
from discord_jukebox.infrastructure.audio.ytdlp_stream_resolver import YtDlpStreamResolver

__all__ = [
    "SpotifyProvider",
    "YouTubeProvider",
    "YtDlpStreamResolver",
]
