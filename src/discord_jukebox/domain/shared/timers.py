"""Cancellable deferred action backed by an asyncio task."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

TimerAction = Callable[[], Awaitable[None]]


class IdleTimer:
    """A single-slot timer: at most one pending action at a time.

    Arming replaces whatever was armed before. The pending action is cleared
    from the slot before it runs, so ``is_armed`` is False inside the action
    and the action may re-arm the timer.
    """

    def __init__(self, name: str = "idle") -> None:
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def is_armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self, delay: float, action: TimerAction) -> None:
        self.cancel()
        self._task = asyncio.create_task(self._run(delay, action), name=f"{self._name}-timer")

    def cancel(self) -> bool:
        """Cancel the pending action. Returns True if one was pending."""
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        # Called from inside the action: the slot is already clear, don't cancel ourselves.
        if task is asyncio.current_task():
            return False
        task.cancel()
        return True

    async def _run(self, delay: float, action: TimerAction) -> None:
        await asyncio.sleep(delay)

        if self._task is asyncio.current_task():
            self._task = None

        try:
            await action()
        except Exception:
            logger.exception(LogTemplates.TIMER_ACTION_FAILED, self._name)
