"""
Unit Tests for the Discord voice adapters

Tests for:
- DiscordSessionTransport (connect, move, stale cleanup, error mapping)
- DiscordVoiceSession (idempotent close)
- DiscordAudioTransport / DiscordPlayer (FFmpeg sources, terminal events)

discord.py objects are replaced with spec'd mocks.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest
from conftest import CHANNEL_ID, GUILD_ID, FakeSessionHandle, wait_until

from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.value_objects import TerminalEvent, TerminalReason, VoiceEndpoint
from discord_jukebox.domain.shared.exceptions import StreamStartError, TransportError
from discord_jukebox.infrastructure.discord.adapters.audio_player import DiscordAudioTransport
from discord_jukebox.infrastructure.discord.adapters.voice_session import (
    DiscordSessionTransport,
    DiscordVoiceSession,
)

# =============================================================================
# Fixtures
# =============================================================================


def make_voice_client(*, connected: bool = True, channel_id: int = CHANNEL_ID) -> MagicMock:
    vc = MagicMock(spec=discord.VoiceClient)
    vc.guild = MagicMock(id=GUILD_ID)
    vc.channel = MagicMock(id=channel_id)
    vc.is_connected.return_value = connected
    vc.is_playing.return_value = False
    vc.is_paused.return_value = False
    vc.disconnect = AsyncMock()
    vc.move_to = AsyncMock()
    return vc


def forbidden() -> discord.Forbidden:
    return discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions")


@pytest.fixture
def voice_client():
    return make_voice_client()


@pytest.fixture
def channel(voice_client):
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = CHANNEL_ID
    channel.name = "General"
    channel.connect = AsyncMock(return_value=voice_client)
    return channel


@pytest.fixture
def guild(channel):
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Guild"
    guild.voice_client = None
    guild.get_channel.return_value = channel
    return guild


@pytest.fixture
def bot(guild):
    bot = MagicMock()
    bot.get_guild.return_value = guild
    return bot


@pytest.fixture
def endpoint():
    return VoiceEndpoint(guild_id=GUILD_ID, channel_id=CHANNEL_ID)


# =============================================================================
# Session transport
# =============================================================================


class TestDiscordSessionTransport:
    """Unit tests for DiscordSessionTransport.open."""

    async def test_connects_self_deafened(self, bot, channel, voice_client, endpoint):
        """Should join the channel deafened and wrap the voice client."""
        session = await DiscordSessionTransport(bot).open(endpoint)

        channel.connect.assert_awaited_once_with(self_deaf=True)
        assert isinstance(session, DiscordVoiceSession)
        assert session.voice_client is voice_client
        assert session.guild_id == GUILD_ID
        assert session.is_open() is True

    async def test_reuses_connection_in_same_channel(self, bot, guild, channel, endpoint):
        existing = make_voice_client()
        guild.voice_client = existing

        session = await DiscordSessionTransport(bot).open(endpoint)

        assert session.voice_client is existing
        existing.move_to.assert_not_awaited()
        channel.connect.assert_not_awaited()

    async def test_moves_connection_from_other_channel(self, bot, guild, channel, endpoint):
        existing = make_voice_client(channel_id=999)
        guild.voice_client = existing

        session = await DiscordSessionTransport(bot).open(endpoint)

        existing.move_to.assert_awaited_once_with(channel)
        assert session.voice_client is existing
        channel.connect.assert_not_awaited()

    async def test_stale_connection_is_dropped(self, bot, guild, channel, voice_client, endpoint):
        """Should disconnect a dead voice client and connect afresh."""
        stale = make_voice_client(connected=False)
        stale.disconnect.side_effect = discord.ClientException("not connected")
        guild.voice_client = stale

        session = await DiscordSessionTransport(bot).open(endpoint)

        stale.disconnect.assert_awaited_once_with(force=True)
        channel.connect.assert_awaited_once()
        assert session.voice_client is voice_client

    async def test_unknown_guild(self, bot, endpoint):
        bot.get_guild.return_value = None

        with pytest.raises(TransportError, match=str(GUILD_ID)):
            await DiscordSessionTransport(bot).open(endpoint)

    async def test_channel_is_not_voice(self, bot, guild, endpoint):
        guild.get_channel.return_value = MagicMock(spec=discord.TextChannel)

        with pytest.raises(TransportError, match=str(CHANNEL_ID)):
            await DiscordSessionTransport(bot).open(endpoint)

    async def test_stage_channel_accepted(self, bot, guild, voice_client, endpoint):
        stage = MagicMock(spec=discord.StageChannel)
        stage.id = CHANNEL_ID
        stage.name = "Stage"
        stage.connect = AsyncMock(return_value=voice_client)
        guild.get_channel.return_value = stage

        session = await DiscordSessionTransport(bot).open(endpoint)

        assert session.voice_client is voice_client

    @pytest.mark.parametrize(
        "error, message",
        [
            (TimeoutError(), "Timed out"),
            (forbidden(), "permission"),
            (discord.ClientException("Already connected"), "Already connected"),
        ],
    )
    async def test_connect_errors_map_to_transport_error(
        self, bot, channel, endpoint, error, message
    ):
        channel.connect.side_effect = error

        with pytest.raises(TransportError, match=message):
            await DiscordSessionTransport(bot).open(endpoint)


# =============================================================================
# Voice session
# =============================================================================


class TestDiscordVoiceSession:
    """Unit tests for DiscordVoiceSession."""

    async def test_close_disconnects_once(self, voice_client):
        session = DiscordVoiceSession(voice_client)

        await session.close()
        await session.close()

        voice_client.disconnect.assert_awaited_once_with(force=True)
        assert session.is_open() is False

    def test_is_open_follows_voice_client(self, voice_client):
        session = DiscordVoiceSession(voice_client)
        voice_client.is_connected.return_value = False

        assert session.is_open() is False

    async def test_disconnect_failure(self, voice_client):
        voice_client.disconnect.side_effect = discord.ClientException("gateway gone")

        with pytest.raises(TransportError, match="gateway gone"):
            await DiscordVoiceSession(voice_client).close()


# =============================================================================
# Audio transport
# =============================================================================


class TestDiscordPlayer:
    """Unit tests for DiscordAudioTransport and DiscordPlayer."""

    @pytest.fixture
    def events(self):
        return []

    @pytest.fixture
    def on_terminal(self, events):
        async def record(event: TerminalEvent) -> None:
            events.append(event)

        return record

    @pytest.fixture
    async def transport(self):
        loop_bot = MagicMock()
        loop_bot.loop = asyncio.get_running_loop()
        return DiscordAudioTransport(loop_bot, AudioSettings(default_volume=0.8))

    @pytest.fixture
    def sources(self):
        with (
            patch.object(discord, "FFmpegPCMAudio") as ffmpeg,
            patch.object(discord, "PCMVolumeTransformer") as volume,
        ):
            yield ffmpeg, volume

    async def test_attach_rejects_foreign_sessions(self, transport, on_terminal):
        handle = FakeSessionHandle(VoiceEndpoint(guild_id=GUILD_ID, channel_id=CHANNEL_ID))

        with pytest.raises(TransportError, match="FakeSessionHandle"):
            transport.attach(handle, on_terminal)

    async def test_start_builds_ffmpeg_source(self, transport, voice_client, on_terminal, sources):
        """Should play through FFmpeg wrapped in a volume transformer."""
        ffmpeg, volume = sources
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)

        stream = await player.start("https://audio/a")

        assert stream.url == "https://audio/a"
        ffmpeg.assert_called_once_with(
            "https://audio/a",
            before_options="-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            options="-vn",
        )
        volume.assert_called_once_with(ffmpeg.return_value, volume=0.8)
        assert voice_client.play.call_args.args[0] is volume.return_value

    async def test_stream_ids_unique_across_players(
        self, transport, voice_client, on_terminal, sources
    ):
        first = transport.attach(DiscordVoiceSession(voice_client), on_terminal)
        second = transport.attach(DiscordVoiceSession(make_voice_client()), on_terminal)

        ids = [
            (await first.start("https://audio/a")).stream_id,
            (await second.start("https://audio/b")).stream_id,
            (await first.start("https://audio/c")).stream_id,
        ]

        assert len(set(ids)) == 3

    async def test_finished_stream_reports_event(
        self, transport, voice_client, on_terminal, events, sources
    ):
        """Should hop from the audio thread back onto the loop."""
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)
        stream = await player.start("https://audio/a")
        after = voice_client.play.call_args.kwargs["after"]

        await asyncio.to_thread(after, None)
        await wait_until(lambda: events)

        [event] = events
        assert event.stream_id == stream.stream_id
        assert event.reason is TerminalReason.FINISHED

    async def test_errored_stream_reports_event(
        self, transport, voice_client, on_terminal, events, sources
    ):
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)
        stream = await player.start("https://audio/a")
        after = voice_client.play.call_args.kwargs["after"]

        await asyncio.to_thread(after, RuntimeError("ffmpeg exited"))
        await wait_until(lambda: events)

        [event] = events
        assert event.stream_id == stream.stream_id
        assert event.is_error is True
        assert "ffmpeg exited" in str(event.error)

    async def test_start_requires_connection(self, transport, voice_client, on_terminal, sources):
        voice_client.is_connected.return_value = False
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)

        with pytest.raises(StreamStartError):
            await player.start("https://audio/a")
        voice_client.play.assert_not_called()

    async def test_client_exception_fails_start(
        self, transport, voice_client, on_terminal, sources
    ):
        voice_client.play.side_effect = discord.ClientException("Already playing audio.")
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)

        with pytest.raises(StreamStartError, match="Already playing audio"):
            await player.start("https://audio/a")

    async def test_stop(self, transport, voice_client, on_terminal):
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)

        assert player.stop() is False
        voice_client.stop.assert_not_called()

        voice_client.is_playing.return_value = True
        assert player.stop(force=True) is True
        voice_client.stop.assert_called_once()

    async def test_callback_errors_are_logged(self, transport, voice_client, caplog):
        """Should not let a failing callback escape the dispatch task."""
        on_terminal = AsyncMock(side_effect=RuntimeError("boom"))
        player = transport.attach(DiscordVoiceSession(voice_client), on_terminal)

        await player._dispatch(TerminalEvent.finished(1))

        on_terminal.assert_awaited_once()
        assert "Terminal event handler failed" in caplog.text
