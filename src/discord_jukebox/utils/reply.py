"""Utility functions for formatting Discord messages."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from discord_jukebox.domain.music.formatting import format_duration, format_track_line
from discord_jukebox.domain.music.value_objects import CollectionType
from discord_jukebox.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from discord_jukebox.application.services.provider_registry import ResolvedInput
    from discord_jukebox.application.services.queue_models import EnqueueResult
    from discord_jukebox.domain.music.entities import Track

QUEUE_PAGE_SIZE = 10
SOUNDS_PAGE_SIZE = 5


def truncate(text: str, max_length: int = 50) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def plural(count: int, word: str = "track") -> str:
    return f"{word}{'' if count == 1 else 's'}"


def page_count(total: int, per_page: int) -> int:
    return max(1, math.ceil(total / per_page))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a zero-based page index into ``[0, total_pages)``."""
    return max(0, min(page, total_pages - 1))


def format_queue_page(
    now_playing: Track | None,
    queue: Sequence[Track],
    page: int,
    per_page: int = QUEUE_PAGE_SIZE,
) -> str:
    """Render the now-playing block plus one zero-based page of the queue."""
    lines: list[str] = []

    if now_playing is not None:
        lines.append(DiscordUIMessages.NOW_PLAYING_HEADER)
        lines.extend(format_track_line(now_playing).split("\n"))
        lines.append("")

    if not queue:
        lines.append(DiscordUIMessages.QUEUE_EMPTY_LINE)
        return "\n".join(lines)

    total_pages = page_count(len(queue), per_page)
    page = clamp_page(page, total_pages)
    lines.append(DiscordUIMessages.QUEUE_PAGE_HEADER.format(page=page + 1, total_pages=total_pages))

    start = page * per_page
    for position, track in enumerate(queue[start : start + per_page], start=start + 1):
        lines.append(
            f"`{position:>2}.` **{track.title}** — {track.artist} · "
            f"{format_duration(track.duration_ms)}"
        )

    if len(queue) > per_page:
        lines.append("")
        lines.append(f"_{len(queue)} {plural(len(queue))} total_")

    return "\n".join(lines)


def format_enqueue_reply(resolved: ResolvedInput, result: EnqueueResult, *, play_next: bool) -> str:
    """Confirmation shown after ``!play`` queued something."""
    provider = resolved.provider
    count = result.added_count

    if count == 1:
        line = format_track_line(resolved.tracks[0])
        if not result.was_already_active:
            return DiscordUIMessages.STARTING_PLAYBACK.format(provider=provider, line=line)
        label = DiscordUIMessages.LABEL_PLAYING_NEXT if play_next else DiscordUIMessages.LABEL_ADDED
        return f"{label} (via {provider})\n{line}"

    collection = "Playlist" if resolved.collection is not CollectionType.ALBUM else "Album"
    if not result.was_already_active:
        return DiscordUIMessages.STARTING_COLLECTION.format(
            collection=collection, count=count, provider=provider
        )
    if play_next:
        return DiscordUIMessages.QUEUED_COLLECTION_NEXT.format(
            count=count, collection=collection, provider=provider
        )
    return DiscordUIMessages.QUEUED_COLLECTION.format(
        count=count, collection=collection, provider=provider
    )


def format_skip_reply(remaining: int) -> str:
    if remaining > 0:
        return DiscordUIMessages.SKIPPED_REMAINING.format(
            remaining=remaining, tracks=plural(remaining)
        )
    return DiscordUIMessages.SKIPPED_QUEUE_EMPTY


def format_clear_reply(cleared: int) -> str:
    if cleared == 0:
        return DiscordUIMessages.QUEUE_ALREADY_EMPTY
    return DiscordUIMessages.QUEUE_CLEARED.format(cleared=cleared, tracks=plural(cleared))


def format_sounds_page(names: Sequence[str], page: int, per_page: int = SOUNDS_PAGE_SIZE) -> str:
    if not names:
        return DiscordUIMessages.SOUNDS_EMPTY

    total_pages = page_count(len(names), per_page)
    page = clamp_page(page, total_pages)
    start = page * per_page
    lines = [DiscordUIMessages.SOUNDS_HEADER.format(page=page + 1, total_pages=total_pages)]
    lines.extend(f"• `{name}`" for name in names[start : start + per_page])
    return "\n".join(lines)
