"""discord-jukebox: a per-guild Discord music queue with YouTube, Spotify and soundboard playback."""

__version__ = "0.1.0"
