"""DTOs for the queue application service."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from ...domain.music.entities import NotifySink
from ...domain.music.value_objects import VoiceEndpoint
from ...domain.shared.types import NonNegativeInt


@dataclass(frozen=True)
class OriginContext:
    """Who asked: the caller's voice channel (if any) and where to post notices."""

    endpoint: VoiceEndpoint | None
    notify: NotifySink


class EnqueueResult(BaseModel):
    added_count: NonNegativeInt
    was_already_active: bool


class ClearResult(BaseModel):
    cleared_count: NonNegativeInt


class SkipResult(BaseModel):
    skipped: bool
