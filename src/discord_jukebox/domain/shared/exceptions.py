"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotInSessionError(DomainError):
    """Raised when the caller has no voice channel the bot could join."""

    def __init__(self, message: str = "You need to be in a voice channel!") -> None:
        super().__init__(message, code="NOT_IN_SESSION")


class StreamStartError(DomainError):
    """Raised when a track's audio stream could not begin."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STREAM_START_FAILED")


class TransportError(DomainError):
    """Raised for voice transport failures (cannot connect, stream died mid-play)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")


class ProviderError(DomainError):
    """Raised when a track provider cannot look up the requested media."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message, code="PROVIDER_ERROR")
        self.provider = provider


class UnknownProviderError(ProviderError):
    """Raised when a provider is requested by a name nobody registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        msg = f'Provider "{name}" is not supported. Available: {", ".join(available)}'
        super().__init__(msg, provider=name)
        self.code = "UNKNOWN_PROVIDER"
        self.available = available


class InvariantViolationError(DomainError):
    """Raised when session state breaks one of its own invariants."""

    def __init__(self, guild_id: int, detail: str) -> None:
        super().__init__(
            f"Session {guild_id} violates invariant: {detail}", code="INVARIANT_VIOLATION"
        )
        self.guild_id = guild_id
        self.detail = detail
