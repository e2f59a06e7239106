"""Plain-text rendering of tracks for chat messages."""

from __future__ import annotations

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.messages import DiscordUIMessages


def format_duration(ms: int | None) -> str:
    """Render milliseconds as ``m:ss``; minutes are not rolled over into hours."""
    total_seconds = max(int(ms or 0), 0) // 1000
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_track_line(track: Track) -> str:
    return (
        f"**{track.title}** — {track.artist}\n"
        f"💿 {track.album} • ⏱️ {format_duration(track.duration_ms)}"
    )


def format_now_playing(track: Track) -> str:
    return f"{DiscordUIMessages.NOW_PLAYING_HEADER}\n{format_track_line(track)}"
