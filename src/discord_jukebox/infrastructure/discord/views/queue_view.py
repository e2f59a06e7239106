"""Previous / next buttons for the ``queue`` command."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from discord_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from discord_jukebox.utils.reply import QUEUE_PAGE_SIZE, format_queue_page, page_count

if TYPE_CHECKING:
    from ....application.services.queue_service import QueueService


class QueuePaginationView(BaseInteractiveView):
    """Pages through the live queue; every render reads the current state."""

    def __init__(
        self,
        *,
        queue_service: QueueService,
        guild_id: int,
        owner_id: int,
        page: int = 0,
        timeout: float | None = 60.0,
    ) -> None:
        super().__init__(owner_id=owner_id, timeout=timeout)
        self._queue_service = queue_service
        self._guild_id = guild_id
        self.page = page
        self._sync_nav_buttons()

    @property
    def total_pages(self) -> int:
        return page_count(len(self._queue_service.peek_queue(self._guild_id)), QUEUE_PAGE_SIZE)

    def render(self) -> str:
        self.page = min(self.page, self.total_pages - 1)
        return format_queue_page(
            self._queue_service.peek_now_playing(self._guild_id),
            self._queue_service.peek_queue(self._guild_id),
            self.page,
        )

    def _sync_nav_buttons(self) -> None:
        self.previous_page.disabled = self.page <= 0
        self.next_page.disabled = self.page >= self.total_pages - 1

    @discord.ui.button(emoji="◀️", style=discord.ButtonStyle.secondary)
    async def previous_page(
        self, interaction: discord.Interaction, button: discord.ui.Button
    ) -> None:
        await self.turn_page(interaction, -1)

    @discord.ui.button(emoji="▶️", style=discord.ButtonStyle.secondary)
    async def next_page(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await self.turn_page(interaction, 1)
