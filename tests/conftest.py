"""Shared fixtures for Pommai tests."""

import httpx
import pytest

from pommai.engine import CommandEngine
from pommai.events.event_bus import EventBus
from pommai.resolver.matcher import TriggerMatcher
from pommai.resolver.registry import TriggerRegistry
from pommai.session.errors import RecognizerBusyError
from pommai.session.recognizer import Recognizer
from pommai.session.types import RestartPolicy


class FakeRecognizer(Recognizer):
    """Scripted recognizer: tests drive its events by hand.

    ``start()`` raises :class:`RecognizerBusyError` while a recognition is
    running, like the browser recognizer it stands in for.
    """

    def __init__(self, *, init_error: Exception | None = None) -> None:
        super().__init__()
        self.init_error = init_error
        self.start_error: Exception | None = None
        self.running = False
        self.init_calls = 0
        self.start_calls = 0
        self.stop_calls = 0
        self.closed = False

    async def init(self) -> None:
        self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error

    def start(self) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            error, self.start_error = self.start_error, None
            raise error
        if self.running:
            raise RecognizerBusyError("already running")
        self.running = True

    def stop(self) -> None:
        self.stop_calls += 1
        self.running = False

    async def close(self) -> None:
        self.closed = True

    # Test drivers -----------------------------------------------------

    def say(self, text: str, is_final: bool = True) -> None:
        self.emit_result(text, is_final)

    def fail(self, kind: str) -> None:
        self.emit_error(kind)

    def finish(self) -> None:
        self.running = False
        self.emit_end()


COMMANDS = {
    "walk": ["நட", "நடை"],
    "run": ["ஓடு", "ஓட்டம்"],
    "sit": ["உட்கார்", "உட்காரு"],
    "dance": ["நடனம்", "டான்ஸ்"],
}

LETTERS = [
    {"letter": "அ", "name": "அகரம்", "sound": "a", "kind": "vowel"},
    {"letter": "ஆ", "name": "ஆகாரம்", "sound": "aa", "kind": "vowel"},
    {"letter": "க்", "name": "ககரம்", "sound": "k", "kind": "consonant"},
    {"letter": "ம்", "name": "மகரம்", "sound": "m", "kind": "consonant"},
]

WORDS = [
    {
        "word": "பூனை",
        "transliteration": "poonai",
        "english": "cat",
        "pronunciation": "poo-nai",
        "category": "animals",
    },
    {
        "word": "மரம்",
        "transliteration": "maram",
        "english": "tree",
        "pronunciation": "ma-ram",
        "category": "nature",
    },
]

FAST_POLICY = RestartPolicy(end=0.01, aborted=0.01, no_speech=0.01, error=0.01, start_retry=0.01)


@pytest.fixture
def registry() -> TriggerRegistry:
    return TriggerRegistry.from_tables(COMMANDS, LETTERS, WORDS)


@pytest.fixture
def matcher(registry: TriggerRegistry) -> TriggerMatcher:
    return TriggerMatcher(registry)


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def failing_recognizer() -> FakeRecognizer:
    """A recognizer whose init() reports denied permission."""
    from pommai.session.errors import InitializationError

    return FakeRecognizer(init_error=InitializationError("permission denied"))


@pytest.fixture
def fast_policy() -> RestartPolicy:
    return FAST_POLICY


@pytest.fixture
def event_bus() -> EventBus:
    """Return a fresh EventBus instance with a small queue for testing."""
    return EventBus(maxsize=16)


@pytest.fixture
def engine(recognizer: FakeRecognizer, registry: TriggerRegistry, event_bus: EventBus):
    """A CommandEngine on the fake recognizer with fast restarts and debounce."""
    return CommandEngine(
        recognizer, registry, event_bus, policy=FAST_POLICY, debounce=0.01
    )


@pytest.fixture
def app(engine: CommandEngine):
    """Return the FastAPI app wired to the test engine, without auto-listen."""
    from pommai.server.app import create_app

    return create_app(engine, auto_listen=False)


@pytest.fixture
async def async_client(app):
    """Return an httpx AsyncClient configured with the test FastAPI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client
