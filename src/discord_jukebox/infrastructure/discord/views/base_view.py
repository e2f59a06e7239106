"""Base class for paginated views owned by a single user."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """Tracks its message, answers only its owner and disables itself on timeout."""

    def __init__(self, *, owner_id: int, timeout: float | None = 60.0) -> None:
        super().__init__(timeout=timeout)
        self.owner_id = owner_id
        self.page = 0
        self._message: discord.Message | None = None

    @property
    def total_pages(self) -> int:
        return 1

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    def render(self) -> str:
        raise NotImplementedError

    def _disable_buttons(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button):
                item.disabled = True

    def _sync_nav_buttons(self) -> None:
        """Hook for subclasses to enable/disable navigation after a page change."""

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id == self.owner_id:
            return True
        await interaction.response.send_message(
            DiscordUIMessages.VIEW_OWNER_ONLY, ephemeral=True
        )
        return False

    async def turn_page(self, interaction: discord.Interaction, delta: int) -> None:
        self.page = max(0, min(self.page + delta, self.total_pages - 1))
        self._sync_nav_buttons()
        await interaction.response.edit_message(content=self.render(), view=self)

    async def on_timeout(self) -> None:
        self._disable_buttons()
        if self._message is None:
            return
        try:
            await self._message.edit(view=self)
        except discord.HTTPException as exc:
            logger.debug(LogTemplates.VIEW_DISABLE_FAILED, exc)
