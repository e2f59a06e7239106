"""Tests for the voice guard helpers used by the music cog and soundboard view."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
from conftest import CHANNEL_ID, GUILD_ID

from discord_jukebox.domain.music.value_objects import VoiceEndpoint
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.guards.voice_guards import (
    endpoint_for_member,
    ensure_guild,
    resolve_endpoint,
)


def _make_member(*, in_voice: bool = True) -> MagicMock:
    member = MagicMock(spec=discord.Member)
    member.guild = MagicMock(id=GUILD_ID)
    if in_voice:
        member.voice = MagicMock()
        member.voice.channel = MagicMock(id=CHANNEL_ID)
    else:
        member.voice = None
    return member


class TestEndpointForMember:
    def test_member_in_voice(self):
        assert endpoint_for_member(_make_member()) == VoiceEndpoint(
            guild_id=GUILD_ID, channel_id=CHANNEL_ID
        )

    def test_member_not_in_voice(self):
        assert endpoint_for_member(_make_member(in_voice=False)) is None

    def test_voice_state_without_channel(self):
        member = _make_member()
        member.voice.channel = None

        assert endpoint_for_member(member) is None

    def test_plain_user(self):
        """Users outside a guild have no voice state at all."""
        assert endpoint_for_member(MagicMock(spec=discord.User)) is None

    def test_resolve_endpoint_uses_author(self):
        ctx = MagicMock()
        ctx.author = _make_member()

        assert resolve_endpoint(ctx) == VoiceEndpoint(guild_id=GUILD_ID, channel_id=CHANNEL_ID)


class TestEnsureGuild:
    async def test_in_guild(self):
        ctx = MagicMock()
        ctx.reply = AsyncMock()

        assert await ensure_guild(ctx) is True
        ctx.reply.assert_not_awaited()

    async def test_direct_message(self):
        ctx = MagicMock()
        ctx.guild = None
        ctx.reply = AsyncMock()

        assert await ensure_guild(ctx) is False
        ctx.reply.assert_awaited_once_with(DiscordUIMessages.STATE_SERVER_ONLY)
