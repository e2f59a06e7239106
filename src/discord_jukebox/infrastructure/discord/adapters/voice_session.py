"""Discord voice connections as SessionTransport / SessionHandle."""

from __future__ import annotations

import asyncio
import logging

import discord

from discord_jukebox.application.interfaces.session_transport import (
    SessionHandle,
    SessionTransport,
)
from discord_jukebox.domain.music.value_objects import VoiceEndpoint
from discord_jukebox.domain.shared.exceptions import TransportError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0


class DiscordVoiceSession(SessionHandle):
    def __init__(self, voice_client: discord.VoiceClient) -> None:
        self._voice_client = voice_client
        self._closed = False

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    @property
    def guild_id(self) -> int:
        return self._voice_client.guild.id

    def is_open(self) -> bool:
        return not self._closed and self._voice_client.is_connected()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        try:
            await self._voice_client.disconnect(force=True)
        except discord.DiscordException as exc:
            raise TransportError(ErrorMessages.VOICE_DISCONNECT_FAILED.format(error=exc)) from exc
        logger.info(LogTemplates.VOICE_DISCONNECTED, self.guild_id)


class DiscordSessionTransport(SessionTransport):
    """Joins voice channels, reusing or moving an existing guild connection."""

    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    def _get_channel(
        self, endpoint: VoiceEndpoint
    ) -> tuple[discord.Guild, discord.VoiceChannel | discord.StageChannel]:
        guild = self._bot.get_guild(endpoint.guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, endpoint.guild_id)
            raise TransportError(ErrorMessages.GUILD_NOT_FOUND.format(guild_id=endpoint.guild_id))

        channel = guild.get_channel(endpoint.channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, endpoint.channel_id)
            raise TransportError(
                ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=endpoint.channel_id)
            )
        return guild, channel

    async def open(self, endpoint: VoiceEndpoint) -> DiscordVoiceSession:
        guild, channel = self._get_channel(endpoint)

        existing = guild.voice_client
        if isinstance(existing, discord.VoiceClient) and not existing.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild.id)
            try:
                await existing.disconnect(force=True)
            except discord.DiscordException as exc:
                logger.debug(LogTemplates.VOICE_STALE_CLEANUP_FAILED, guild.id, exc)
            existing = None

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                if isinstance(existing, discord.VoiceClient):
                    if existing.channel is None or existing.channel.id != channel.id:
                        await existing.move_to(channel)
                        logger.info(LogTemplates.VOICE_MOVED, channel.name)
                    voice_client = existing
                else:
                    voice_client = await channel.connect(self_deaf=True)
                    logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, endpoint.channel_id)
            raise TransportError(ErrorMessages.VOICE_CONNECT_TIMEOUT) from exc
        except discord.Forbidden as exc:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, endpoint.channel_id)
            raise TransportError(ErrorMessages.VOICE_NO_PERMISSION) from exc
        except discord.DiscordException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise TransportError(ErrorMessages.VOICE_CONNECT_FAILED.format(error=exc)) from exc

        return DiscordVoiceSession(voice_client)
