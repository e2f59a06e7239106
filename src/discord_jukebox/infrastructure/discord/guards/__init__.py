"""Voice channel guard functions for Discord cogs."""

from discord_jukebox.infrastructure.discord.guards.voice_guards import (
    endpoint_for_member,
    ensure_guild,
    resolve_endpoint,
)

__all__ = [
    "endpoint_for_member",
    "ensure_guild",
    "resolve_endpoint",
]
