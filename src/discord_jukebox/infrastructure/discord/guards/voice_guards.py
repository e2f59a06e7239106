"""Reusable guard functions for prefix commands and component callbacks.

These are free functions that accept explicit Discord objects rather than
relying on a specific cog instance, making them usable from any cog or view.
"""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands

from discord_jukebox.domain.music.value_objects import VoiceEndpoint
from discord_jukebox.domain.shared.messages import DiscordUIMessages


def endpoint_for_member(member: Any) -> VoiceEndpoint | None:
    """The voice channel ``member`` is sitting in, if any."""
    if not isinstance(member, discord.Member):
        return None

    voice = member.voice
    channel = voice.channel if voice is not None else None
    if channel is None:
        return None

    return VoiceEndpoint(guild_id=member.guild.id, channel_id=channel.id)


def resolve_endpoint(ctx: commands.Context) -> VoiceEndpoint | None:
    return endpoint_for_member(ctx.author)


async def ensure_guild(ctx: commands.Context) -> bool:
    """Reply and return False when the command was sent outside a server."""
    if ctx.guild is None:
        await ctx.reply(DiscordUIMessages.STATE_SERVER_ONLY)
        return False
    return True
