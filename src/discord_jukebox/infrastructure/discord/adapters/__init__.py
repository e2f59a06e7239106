"""Discord implementations of the voice session and audio transport ports."""

from discord_jukebox.infrastructure.discord.adapters.audio_player import (
    DiscordAudioTransport,
    DiscordPlayer,
)
from discord_jukebox.infrastructure.discord.adapters.voice_session import (
    DiscordSessionTransport,
    DiscordVoiceSession,
)

__all__ = [
    "DiscordAudioTransport",
    "DiscordPlayer",
    "DiscordSessionTransport",
    "DiscordVoiceSession",
]
