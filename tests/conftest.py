import asyncio
import itertools

import pytest

from discord_jukebox.application.interfaces.audio_transport import (
    AudioTransport,
    PlayerHandle,
    TerminalCallback,
)
from discord_jukebox.application.interfaces.session_transport import (
    SessionHandle,
    SessionTransport,
)
from discord_jukebox.application.interfaces.stream_resolver import StreamResolver
from discord_jukebox.application.services.playback_service import PlaybackDriver
from discord_jukebox.application.services.queue_models import OriginContext
from discord_jukebox.application.services.queue_service import QueueService
from discord_jukebox.domain.music.entities import Track, TrackLocator
from discord_jukebox.domain.music.registry import SessionRegistry
from discord_jukebox.domain.music.value_objects import (
    ProviderName,
    StreamHandle,
    TerminalEvent,
    VoiceEndpoint,
)
from discord_jukebox.domain.shared.exceptions import StreamStartError, TransportError

GUILD_ID = 111
CHANNEL_ID = 222
IDLE_TIMEOUT = 0.05


# ============================================================================
# Fake transports
# ============================================================================


class FakeSessionHandle(SessionHandle):
    def __init__(self, endpoint: VoiceEndpoint) -> None:
        self.endpoint = endpoint
        self.open = True
        self.close_calls = 0

    def is_open(self) -> bool:
        return self.open

    async def close(self) -> None:
        self.close_calls += 1
        self.open = False


class FakeSessionTransport(SessionTransport):
    """Opens FakeSessionHandles; set ``error`` to make the next opens fail.

    Set ``gate`` to hold every open until the event is set.
    """

    def __init__(self) -> None:
        self.handles: list[FakeSessionHandle] = []
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.opening = 0

    async def open(self, endpoint: VoiceEndpoint) -> FakeSessionHandle:
        self.opening += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        handle = FakeSessionHandle(endpoint)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> FakeSessionHandle:
        return self.handles[-1]


class FakePlayer(PlayerHandle):
    """Records started streams; ``stop`` reports the finished event on a later loop turn."""

    def __init__(self, transport: "FakeAudioTransport", on_terminal: TerminalCallback) -> None:
        self._transport = transport
        self.on_terminal = on_terminal
        self.current: StreamHandle | None = None
        self.started: list[str] = []
        self.stop_calls = 0

    async def start(self, stream_url: str) -> StreamHandle:
        if stream_url in self._transport.failing_urls:
            raise StreamStartError(f"cannot play {stream_url}")
        stream = StreamHandle(stream_id=next(self._transport.stream_ids), url=stream_url)
        self.current = stream
        self.started.append(stream_url)
        self._transport.stream_started(stream)
        return stream

    def stop(self, *, force: bool = False) -> bool:
        self.stop_calls += 1
        stream = self._end()
        if stream is None:
            return False
        task = asyncio.get_running_loop().create_task(
            self.on_terminal(TerminalEvent.finished(stream.stream_id))
        )
        self._transport.pending.append(task)
        return True

    async def finish(self) -> None:
        """The current stream reaches its natural end."""
        stream = self._end()
        assert stream is not None, "nothing is playing"
        await self.on_terminal(TerminalEvent.finished(stream.stream_id))

    async def fail(self, message: str = "connection reset") -> None:
        """The current stream dies mid-play."""
        stream = self._end()
        assert stream is not None, "nothing is playing"
        await self.on_terminal(TerminalEvent.errored(stream.stream_id, TransportError(message)))

    def _end(self) -> StreamHandle | None:
        stream, self.current = self.current, None
        if stream is not None:
            self._transport.stream_ended(stream)
        return stream


class FakeAudioTransport(AudioTransport):
    """Creates FakePlayers and tracks how many streams run at once."""

    def __init__(self) -> None:
        self.players: list[FakePlayer] = []
        self.stream_ids = itertools.count(1)
        self.failing_urls: set[str] = set()
        self.pending: list[asyncio.Task[None]] = []
        self.active: set[int] = set()
        self.peak_active = 0

    def attach(self, session: SessionHandle, on_terminal: TerminalCallback) -> FakePlayer:
        player = FakePlayer(self, on_terminal)
        self.players.append(player)
        return player

    @property
    def player(self) -> FakePlayer:
        return self.players[-1]

    def stream_started(self, stream: StreamHandle) -> None:
        self.active.add(stream.stream_id)
        self.peak_active = max(self.peak_active, len(self.active))

    def stream_ended(self, stream: StreamHandle) -> None:
        self.active.discard(stream.stream_id)

    async def drain(self) -> None:
        """Deliver every terminal event that ``stop`` scheduled."""
        while self.pending:
            tasks, self.pending = self.pending, []
            await asyncio.gather(*tasks)


class FakeStreamResolver(StreamResolver):
    """Maps a locator to ``stream://<target>``; targets can be made to fail or block."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}

    def hold(self, target: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[target] = gate
        return gate

    async def resolve(self, locator: TrackLocator) -> str:
        target = locator.target
        self.calls.append(target)
        gate = self.gates.get(target)
        if gate is not None:
            await gate.wait()
        error = self.failures.get(target)
        if error is not None:
            raise error
        return f"stream://{target}"


class Notifications:
    """Notify sink that records every message."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def __call__(self, message: str) -> None:
        self.messages.append(message)

    def containing(self, text: str) -> list[str]:
        return [m for m in self.messages if text in m]


async def wait_until(predicate, *, turns: int = 100) -> None:
    """Yield to the loop until ``predicate()`` holds."""
    for _ in range(turns):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


def track_url(title: str) -> str:
    return f"https://www.youtube.com/watch?v={title}"


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for YouTube tracks addressed by title."""

    def _make(title: str = "Song", *, artist: str = "Artist", duration_ms: int = 180_000) -> Track:
        return Track(
            provider=ProviderName.YOUTUBE,
            locator=TrackLocator(url=track_url(title)),
            title=title,
            artist=artist,
            album="Album",
            duration_ms=duration_ms,
        )

    return _make


@pytest.fixture
def endpoint() -> VoiceEndpoint:
    return VoiceEndpoint(guild_id=GUILD_ID, channel_id=CHANNEL_ID)


@pytest.fixture
def notifications() -> Notifications:
    return Notifications()


@pytest.fixture
def origin(endpoint, notifications) -> OriginContext:
    return OriginContext(endpoint=endpoint, notify=notifications)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def session_transport() -> FakeSessionTransport:
    return FakeSessionTransport()


@pytest.fixture
def audio_transport() -> FakeAudioTransport:
    return FakeAudioTransport()


@pytest.fixture
def stream_resolver() -> FakeStreamResolver:
    return FakeStreamResolver()


@pytest.fixture
def driver(registry, session_transport, audio_transport, stream_resolver) -> PlaybackDriver:
    return PlaybackDriver(
        registry=registry,
        session_transport=session_transport,
        audio_transport=audio_transport,
        stream_resolver=stream_resolver,
        idle_timeout_seconds=IDLE_TIMEOUT,
    )


@pytest.fixture
def queue_service(registry, driver) -> QueueService:
    return QueueService(registry=registry, playback_driver=driver)
