"""Prefix-command cog: play, queue, skip, clear, join, leave, check, sound, sounds."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord.ext import commands

from discord_jukebox.application.services.queue_models import OriginContext
from discord_jukebox.domain.shared.exceptions import (
    NotInSessionError,
    ProviderError,
    TransportError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_jukebox.infrastructure.discord.guards.voice_guards import (
    ensure_guild,
    resolve_endpoint,
)
from discord_jukebox.infrastructure.discord.views.queue_view import QueuePaginationView
from discord_jukebox.infrastructure.discord.views.soundboard_view import SoundboardView
from discord_jukebox.utils.reply import (
    QUEUE_PAGE_SIZE,
    format_clear_reply,
    format_enqueue_reply,
    format_queue_page,
    format_skip_reply,
    format_sounds_page,
    page_count,
)

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)

NEXT_FLAG = "--next"
PROVIDER_FLAG = "--provider"


class PlayArgumentError(ValueError):
    """The ``play`` arguments could not be parsed; the message is user-facing."""


@dataclass(frozen=True)
class PlayRequest:
    query: str
    play_next: bool = False
    provider: str | None = None


def parse_play_arguments(args: Sequence[str], available: Sequence[str]) -> PlayRequest:
    """Split ``[--next] [--provider <name>] <query...>`` into a PlayRequest.

    Flags may appear anywhere in the argument list.
    """
    remaining = list(args)

    play_next = NEXT_FLAG in remaining
    if play_next:
        remaining.remove(NEXT_FLAG)

    provider: str | None = None
    if PROVIDER_FLAG in remaining:
        index = remaining.index(PROVIDER_FLAG)
        if index + 1 >= len(remaining):
            raise PlayArgumentError(
                DiscordUIMessages.PLAY_PROVIDER_NAME_REQUIRED.format(
                    flag=PROVIDER_FLAG, available=", ".join(available)
                )
            )
        provider = remaining[index + 1].lower()
        del remaining[index : index + 2]

    query = " ".join(remaining).strip()
    if not query:
        raise PlayArgumentError(DiscordUIMessages.PLAY_QUERY_REQUIRED)

    return PlayRequest(query=query, play_next=play_next, provider=provider)


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def _origin(self, ctx: commands.Context) -> OriginContext:
        return OriginContext(endpoint=resolve_endpoint(ctx), notify=ctx.channel.send)

    # ── play ───────────────────────────────────────────────────────

    @commands.command(
        name="play",
        help="Play a track. Usage: play [--next] [--provider <name>] <url|query>",
    )
    async def play(self, ctx: commands.Context, *args: str) -> None:
        if not await ensure_guild(ctx):
            return

        registry = self.container.provider_registry
        if not args:
            await ctx.reply(
                DiscordUIMessages.PLAY_USAGE.format(
                    prefix=ctx.prefix or "",
                    next_flag=NEXT_FLAG,
                    provider_flag=PROVIDER_FLAG,
                    available=", ".join(registry.names),
                    default=registry.default_provider,
                )
            )
            return

        try:
            request = parse_play_arguments(args, registry.names)
        except PlayArgumentError as exc:
            await ctx.reply(str(exc))
            return

        origin = self._origin(ctx)
        if origin.endpoint is None:
            await ctx.reply(NotInSessionError().message)
            return

        where = (
            DiscordUIMessages.LOOKUP_ON.format(provider=request.provider)
            if request.provider
            else ""
        )
        loading = await ctx.reply(
            DiscordUIMessages.LOOKING_UP.format(where=where, query=request.query)
        )

        try:
            resolved = await registry.resolve(request.query, request.provider)
        except ProviderError as exc:
            logger.warning(LogTemplates.PLAY_LOOKUP_FAILED, request.query, exc.message)
            await loading.edit(content=DiscordUIMessages.ERROR_GENERIC.format(error=exc.message))
            return

        if not resolved.tracks:
            await loading.edit(content=DiscordUIMessages.NO_RESULTS)
            return

        assert ctx.guild is not None
        try:
            result = await self.container.queue_service.enqueue(
                ctx.guild.id, resolved.tracks, origin, play_next=request.play_next
            )
        except NotInSessionError as exc:
            await loading.edit(content=exc.message)
            return

        await loading.edit(
            content=format_enqueue_reply(resolved, result, play_next=request.play_next)
        )

    # ── queue ──────────────────────────────────────────────────────

    @commands.command(name="queue", help="Show the playback queue.")
    async def queue(self, ctx: commands.Context, page: int = 1) -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        queue_service = self.container.queue_service
        now_playing = queue_service.peek_now_playing(ctx.guild.id)
        tracks = queue_service.peek_queue(ctx.guild.id)

        if now_playing is None and not tracks:
            await ctx.reply(DiscordUIMessages.NOTHING_PLAYING_EMPTY_QUEUE)
            return

        index = max(page, 1) - 1
        if page_count(len(tracks), QUEUE_PAGE_SIZE) <= 1:
            await ctx.reply(format_queue_page(now_playing, tracks, index))
            return

        view = QueuePaginationView(
            queue_service=queue_service,
            guild_id=ctx.guild.id,
            owner_id=ctx.author.id,
            page=index,
        )
        message = await ctx.reply(view.render(), view=view)
        view.set_message(message)

    # ── skip / clear ───────────────────────────────────────────────

    @commands.command(name="skip", help="Skip the currently playing track.")
    async def skip(self, ctx: commands.Context) -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        queue_service = self.container.queue_service
        result = queue_service.skip(ctx.guild.id)
        if not result.skipped:
            await ctx.reply(DiscordUIMessages.NOTHING_PLAYING)
            return

        await ctx.reply(format_skip_reply(len(queue_service.peek_queue(ctx.guild.id))))

    @commands.command(name="clear", help="Clear the queue (the current track keeps playing).")
    async def clear(self, ctx: commands.Context) -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        result = self.container.queue_service.clear(ctx.guild.id)
        await ctx.reply(format_clear_reply(result.cleared_count))

    # ── voice ──────────────────────────────────────────────────────

    @commands.command(name="join", help="Join your voice channel.")
    async def join(self, ctx: commands.Context) -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        endpoint = resolve_endpoint(ctx)
        if endpoint is None:
            await ctx.reply(NotInSessionError().message)
            return

        try:
            await self.container.playback_driver.join(ctx.guild.id, endpoint)
        except TransportError as exc:
            await ctx.reply(DiscordUIMessages.ERROR_GENERIC.format(error=exc.message))
            return

        await ctx.reply(DiscordUIMessages.JOINED)

    @commands.command(name="leave", help="Leave the voice channel.")
    async def leave(self, ctx: commands.Context) -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        if resolve_endpoint(ctx) is None:
            await ctx.reply(NotInSessionError().message)
            return

        if await self.container.playback_driver.leave(ctx.guild.id):
            await ctx.reply(DiscordUIMessages.LEFT)
        else:
            await ctx.reply(DiscordUIMessages.NOT_IN_VOICE)

    @commands.command(name="check", help="Check if the bot is responsive.")
    async def check(self, ctx: commands.Context) -> None:
        await ctx.reply(DiscordUIMessages.ALIVE)

    # ── sounds ─────────────────────────────────────────────────────

    @commands.command(name="sound", help="Play a soundboard clip next.")
    async def sound(self, ctx: commands.Context, name: str = "") -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        origin = self._origin(ctx)
        if origin.endpoint is None:
            await ctx.reply(NotInSessionError().message)
            return

        track = self.container.sound_library.get(name) if name else None
        if track is None:
            await ctx.reply(DiscordUIMessages.SOUND_NOT_FOUND)
            return

        await self.container.queue_service.enqueue(ctx.guild.id, [track], origin, play_next=True)
        logger.info(LogTemplates.SOUND_QUEUED, track.title, ctx.guild.id)
        await ctx.reply(DiscordUIMessages.SOUND_PLAYING.format(name=track.title))

    @commands.command(name="sounds", help="List the soundboard clips.")
    async def sounds(self, ctx: commands.Context) -> None:
        if not await ensure_guild(ctx):
            return
        assert ctx.guild is not None

        library = self.container.sound_library
        if len(library) == 0:
            await ctx.reply(format_sounds_page([], 0))
            return

        view = SoundboardView(
            library=library,
            queue_service=self.container.queue_service,
            guild_id=ctx.guild.id,
            owner_id=ctx.author.id,
        )
        message = await ctx.reply(view.render(), view=view)
        view.set_message(message)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError("Container not found on bot instance")

    await bot.add_cog(MusicCog(bot, container))
