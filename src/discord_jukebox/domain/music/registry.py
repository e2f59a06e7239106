"""In-memory map of guild id to session state."""

from __future__ import annotations

from discord_jukebox.domain.music.entities import SessionState


class SessionRegistry:
    """Owns every guild's SessionState for the life of the process.

    Sessions are created lazily and never removed; their transports open and
    close independently of the registry entry.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, SessionState] = {}

    def get_or_create(self, guild_id: int) -> SessionState:
        state = self._sessions.get(guild_id)
        if state is None:
            state = self._sessions.setdefault(guild_id, SessionState(guild_id=guild_id))
        return state

    def get(self, guild_id: int) -> SessionState | None:
        return self._sessions.get(guild_id)

    def sessions(self) -> list[SessionState]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions
