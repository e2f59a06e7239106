"""Discord UI views and components."""

from __future__ import annotations

from discord_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from discord_jukebox.infrastructure.discord.views.queue_view import QueuePaginationView
from discord_jukebox.infrastructure.discord.views.soundboard_view import SoundboardView

__all__ = [
    "BaseInteractiveView",
    "QueuePaginationView",
    "SoundboardView",
]
