"""Port interfaces implemented by the infrastructure layer."""

from discord_jukebox.application.interfaces.audio_transport import (
    AudioTransport,
    PlayerHandle,
    TerminalCallback,
)
from discord_jukebox.application.interfaces.session_transport import (
    SessionHandle,
    SessionTransport,
)
from discord_jukebox.application.interfaces.stream_resolver import StreamResolver
from discord_jukebox.application.interfaces.track_provider import ProviderResult, TrackProvider

__all__ = [
    "AudioTransport",
    "PlayerHandle",
    "ProviderResult",
    "SessionHandle",
    "SessionTransport",
    "StreamResolver",
    "TerminalCallback",
    "TrackProvider",
]
