"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Audio lookup (yt-dlp, Spotify Web API)
- Discord (bot, cogs, voice and audio adapters)
"""
