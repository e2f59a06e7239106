"""Main Discord bot class integrating the DI container and cog lifecycle."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.domain.shared.exceptions import DomainError
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = ("discord_jukebox.infrastructure.discord.cogs.music_cog",)


class MusicBot(commands.Bot):
    def __init__(
        self,
        container: Container,
        settings: Settings,
        **kwargs,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.voice_states = True
        intents.guilds = True

        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=intents,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        container.set_bot(self)

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        try:
            await self.container.initialize()
            logger.info(LogTemplates.BOT_CONTAINER_INITIALIZED)
        except Exception as e:
            logger.exception(LogTemplates.BOT_CONTAINER_INIT_FAILED, e)
            raise

        await self._load_cogs()
        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> None:
        for cog in COGS:
            try:
                await self.load_extension(cog)
                logger.info(LogTemplates.BOT_COG_LOADED, cog)
            except commands.ExtensionError as e:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, cog, e)
                raise

    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        if isinstance(error, commands.CommandNotFound):
            return

        original = getattr(error, "original", error)
        if isinstance(error, commands.UserInputError):
            message = DiscordUIMessages.ERROR_GENERIC.format(error=error)
        elif isinstance(original, DomainError):
            message = DiscordUIMessages.ERROR_GENERIC.format(error=original.message)
        else:
            logger.error(
                LogTemplates.BOT_COMMAND_ERROR,
                getattr(ctx.command, "name", "<unknown>"),
                original,
                exc_info=original,
            )
            message = DiscordUIMessages.ERROR_UNEXPECTED

        try:
            await ctx.reply(message)
        except discord.HTTPException:
            logger.warning(LogTemplates.BOT_ERROR_MESSAGE_SEND_FAILED)

    async def on_ready(self) -> None:
        logger.info(
            LogTemplates.BOT_READY,
            self.user,  # type: ignore
            self.user.id,  # type: ignore
        )
        logger.info(LogTemplates.BOT_CONNECTED_GUILDS, len(self.guilds))

        activity = discord.Activity(
            type=discord.ActivityType.listening,
            name=f"{self.settings.discord.command_prefix}play",
        )
        await self.change_presence(activity=activity)

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        try:
            await self.container.shutdown()
            logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN)
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)

        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        async def runner():
            async with self:
                loop = asyncio.get_running_loop()

                async def _graceful_close() -> None:
                    try:
                        await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
                    except TimeoutError:
                        logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(sig, lambda: asyncio.create_task(_graceful_close()))
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> MusicBot:
    return MusicBot(container=container, settings=settings)
