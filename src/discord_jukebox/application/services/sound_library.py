"""Static soundboard: short clips addressed by name."""

from __future__ import annotations

from collections.abc import Mapping

from ...domain.music.entities import Track, TrackLocator
from ...domain.music.value_objects import ProviderName

SOUND_ARTIST = "Soundboard"
SOUND_ALBUM = "Sounds"


class SoundLibrary:
    def __init__(self, sounds: Mapping[str, str]) -> None:
        self._sounds = {name.lower(): url for name, url in sounds.items()}

    @property
    def names(self) -> list[str]:
        return sorted(self._sounds)

    def __len__(self) -> int:
        return len(self._sounds)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._sounds

    def get(self, name: str) -> Track | None:
        """Build a playable track for the clip called ``name`` (case-insensitive)."""
        key = name.strip().lower()
        url = self._sounds.get(key)
        if url is None:
            return None

        return Track(
            provider=ProviderName.SOUND,
            locator=TrackLocator(url=url, is_direct=True),
            title=key,
            artist=SOUND_ARTIST,
            album=SOUND_ALBUM,
        )
