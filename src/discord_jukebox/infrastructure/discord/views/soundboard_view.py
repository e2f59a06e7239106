"""Soundboard buttons for the ``sounds`` command."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.services.queue_models import OriginContext
from discord_jukebox.domain.shared.exceptions import NotInSessionError
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_jukebox.infrastructure.discord.guards.voice_guards import endpoint_for_member
from discord_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from discord_jukebox.utils.reply import SOUNDS_PAGE_SIZE, format_sounds_page, page_count

if TYPE_CHECKING:
    from ....application.services.queue_service import QueueService
    from ....application.services.sound_library import SoundLibrary

logger = logging.getLogger(__name__)


class SoundButton(discord.ui.Button["SoundboardView"]):
    def __init__(self, name: str) -> None:
        super().__init__(label=name, style=discord.ButtonStyle.primary, row=0)
        self.sound_name = name

    async def callback(self, interaction: discord.Interaction) -> None:
        assert self.view is not None
        await self.view.play_sound(interaction, self.sound_name)


class NavButton(discord.ui.Button["SoundboardView"]):
    def __init__(self, label: str, delta: int) -> None:
        super().__init__(label=label, style=discord.ButtonStyle.secondary, row=1)
        self.delta = delta

    async def callback(self, interaction: discord.Interaction) -> None:
        assert self.view is not None
        await self.view.turn_page(interaction, self.delta)


class SoundboardView(BaseInteractiveView):
    """One button per clip on the current page, plus previous / next."""

    def __init__(
        self,
        *,
        library: SoundLibrary,
        queue_service: QueueService,
        guild_id: int,
        owner_id: int,
        timeout: float | None = 60.0,
    ) -> None:
        super().__init__(owner_id=owner_id, timeout=timeout)
        self._library = library
        self._queue_service = queue_service
        self._guild_id = guild_id
        self._names = library.names
        self._build_items()

    @property
    def total_pages(self) -> int:
        return page_count(len(self._names), SOUNDS_PAGE_SIZE)

    def render(self) -> str:
        return format_sounds_page(self._names, self.page)

    def _sync_nav_buttons(self) -> None:
        self._build_items()

    def _build_items(self) -> None:
        self.clear_items()
        start = self.page * SOUNDS_PAGE_SIZE
        for name in self._names[start : start + SOUNDS_PAGE_SIZE]:
            self.add_item(SoundButton(name))

        previous = NavButton("Previous", -1)
        previous.disabled = self.page <= 0
        following = NavButton("Next", 1)
        following.disabled = self.page >= self.total_pages - 1
        self.add_item(previous)
        self.add_item(following)

    async def play_sound(self, interaction: discord.Interaction, name: str) -> None:
        track = self._library.get(name)
        if track is None:
            await interaction.response.send_message(
                DiscordUIMessages.SOUND_NOT_FOUND, ephemeral=True
            )
            return

        channel = interaction.channel
        origin = OriginContext(
            endpoint=endpoint_for_member(interaction.user),
            notify=channel.send if channel is not None else _discard,
        )

        await interaction.response.defer(ephemeral=True, thinking=True)
        try:
            await self._queue_service.enqueue(self._guild_id, [track], origin, play_next=True)
        except NotInSessionError as exc:
            await interaction.followup.send(exc.message, ephemeral=True)
            return

        logger.info(LogTemplates.SOUND_QUEUED, name, self._guild_id)
        await interaction.followup.send(
            DiscordUIMessages.SOUND_PLAYING.format(name=name), ephemeral=True
        )


async def _discard(message: str) -> None:
    return None
