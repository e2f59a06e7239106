"""
Domain Layer

Pure playback model: tracks, per-guild session state, the session registry and
the idle timer. Nothing in here talks to Discord, yt-dlp or the network.
"""
