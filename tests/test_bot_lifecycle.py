"""
Unit Tests for Bot Lifecycle

Tests for src/discord_jukebox/infrastructure/discord/bot.py:
- Intents, prefix and container wiring at construction
- setup_hook (container initialization, cog loading, failures)
- on_command_error replies for user, domain and unexpected errors
- on_ready presence
- close (container shutdown before the gateway closes)
"""

from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest
from discord.ext import commands

from discord_jukebox.domain.shared.exceptions import ProviderError
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.bot import COGS, MusicBot, create_bot


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.discord.command_prefix = "!"
    return settings


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return MusicBot(container=mock_container, settings=mock_settings)


@pytest.fixture
def ctx():
    ctx = MagicMock()
    ctx.command.name = "play"
    ctx.reply = AsyncMock()
    return ctx


# =============================================================================
# Initialization
# =============================================================================


class TestBotInitialization:
    """Tests for MusicBot initialization."""

    async def test_init_sets_intents(self, bot):
        assert bot.intents.message_content is True
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True

    async def test_init_sets_command_prefix(self, mock_container, mock_settings):
        mock_settings.discord.command_prefix = "?"
        bot = MusicBot(container=mock_container, settings=mock_settings)

        assert bot.command_prefix == "?"

    async def test_init_calls_set_bot_on_container(self, bot, mock_container, mock_settings):
        mock_container.set_bot.assert_called_once_with(bot)
        assert bot.container is mock_container
        assert bot.settings is mock_settings

    async def test_create_bot(self, mock_container, mock_settings):
        bot = create_bot(mock_container, mock_settings)

        assert isinstance(bot, MusicBot)
        assert bot.container is mock_container


# =============================================================================
# Setup Hook
# =============================================================================


class TestSetupHook:
    """Tests for MusicBot.setup_hook."""

    async def test_setup_hook_initializes_container_and_loads_cogs(self, bot, mock_container):
        with patch.object(bot, "load_extension", new_callable=AsyncMock) as load:
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()
        assert [c.args[0] for c in load.await_args_list] == list(COGS)

    async def test_container_failure_aborts_setup(self, bot, mock_container):
        mock_container.initialize.side_effect = RuntimeError("bad config")

        with patch.object(bot, "load_extension", new_callable=AsyncMock) as load:
            with pytest.raises(RuntimeError, match="bad config"):
                await bot.setup_hook()

        load.assert_not_awaited()

    async def test_cog_failure_is_raised(self, bot):
        error = commands.ExtensionFailed("music_cog", RuntimeError("boom"))
        with patch.object(bot, "load_extension", new_callable=AsyncMock, side_effect=error):
            with pytest.raises(commands.ExtensionError):
                await bot.setup_hook()


# =============================================================================
# Command errors
# =============================================================================


class TestOnCommandError:
    """Tests for MusicBot.on_command_error."""

    async def test_unknown_command_is_ignored(self, bot, ctx):
        await bot.on_command_error(ctx, commands.CommandNotFound("nope"))

        ctx.reply.assert_not_awaited()

    async def test_user_input_error(self, bot, ctx):
        await bot.on_command_error(ctx, commands.BadArgument("page must be a number"))

        ctx.reply.assert_awaited_once_with("❌ Error: page must be a number")

    async def test_domain_error_is_unwrapped(self, bot, ctx):
        error = commands.CommandInvokeError(ProviderError("Spotify is down"))

        await bot.on_command_error(ctx, error)

        ctx.reply.assert_awaited_once_with("❌ Error: Spotify is down")

    async def test_unexpected_error_is_logged(self, bot, ctx, caplog):
        error = commands.CommandInvokeError(KeyError("boom"))

        await bot.on_command_error(ctx, error)

        ctx.reply.assert_awaited_once_with(DiscordUIMessages.ERROR_UNEXPECTED)
        assert "play" in caplog.text

    async def test_reply_failure_is_swallowed(self, bot, ctx):
        ctx.reply.side_effect = discord.HTTPException(
            MagicMock(status=500, reason="Server Error"), "down"
        )

        await bot.on_command_error(ctx, commands.BadArgument("x"))


# =============================================================================
# Ready / Close
# =============================================================================


class TestReadyAndClose:
    """Tests for on_ready and close."""

    async def test_on_ready_sets_listening_presence(self, bot):
        user = MagicMock(id=1)
        with (
            patch.object(MusicBot, "user", new_callable=PropertyMock, return_value=user),
            patch.object(MusicBot, "guilds", new_callable=PropertyMock, return_value=[]),
            patch.object(bot, "change_presence", new_callable=AsyncMock) as presence,
        ):
            await bot.on_ready()

        activity = presence.await_args.kwargs["activity"]
        assert activity.type is discord.ActivityType.listening
        assert activity.name == "!play"

    async def test_close_shuts_down_container(self, bot, mock_container):
        with patch.object(commands.Bot, "close", new_callable=AsyncMock) as parent_close:
            await bot.close()

        mock_container.shutdown.assert_awaited_once()
        parent_close.assert_awaited_once()

    async def test_close_survives_container_errors(self, bot, mock_container):
        mock_container.shutdown.side_effect = RuntimeError("stuck")

        with patch.object(commands.Bot, "close", new_callable=AsyncMock) as parent_close:
            await bot.close()

        parent_close.assert_awaited_once()
