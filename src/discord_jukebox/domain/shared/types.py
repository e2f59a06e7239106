"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from discord_jukebox.domain.shared.types import DurationMs, NonEmptyStr

    class MyModel(BaseModel):
        duration_ms: DurationMs
        name: NonEmptyStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

VolumeFloat = Annotated[float, Field(ge=0.0, le=2.0)]
"""Audio volume multiplier in [0.0, 2.0]."""

DurationMs = Annotated[int, Field(ge=0)]
"""Track duration in milliseconds; 0 means unknown."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

CommandPrefixStr = Annotated[str, Field(min_length=1, max_length=5)]
"""Bot command prefix: 1-5 characters."""
