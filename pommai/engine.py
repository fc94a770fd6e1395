"""Command engine: turns a listening session into resolved commands.

Wires the :class:`RecognitionSessionController` to the normalizer and
:class:`TriggerMatcher`.  Final transcripts are resolved after a short
debounce (a newer final result replaces a pending one); every transcript,
resolution and surfaced session error goes to the registered callback and
to the event bus.
"""

import asyncio
import logging
from typing import Callable

from pommai.config import RESOLVE_DEBOUNCE
from pommai.events.event_bus import EventBus
from pommai.events.types import ResolvedEvent, SessionErrorEvent, TranscriptEvent
from pommai.resolver.matcher import TriggerMatcher
from pommai.resolver.registry import TriggerRegistry
from pommai.resolver.types import MatchResult
from pommai.session.controller import RecognitionSessionController
from pommai.session.errors import RecognitionError
from pommai.session.recognizer import Recognizer
from pommai.session.types import RestartPolicy, SessionSnapshot

logger = logging.getLogger(__name__)

TranscriptCallback = Callable[[str, bool], None]
ResolvedCallback = Callable[[MatchResult], None]
SessionErrorCallback = Callable[[RecognitionError], None]


class CommandEngine:
    """Presentation-facing facade over the session and the matcher."""

    def __init__(
        self,
        recognizer: Recognizer,
        registry: TriggerRegistry,
        event_bus: EventBus | None = None,
        *,
        policy: RestartPolicy | None = None,
        debounce: float = RESOLVE_DEBOUNCE,
    ) -> None:
        self._registry = registry
        self._matcher = TriggerMatcher(registry)
        self._event_bus: EventBus = event_bus if event_bus is not None else EventBus()
        self._debounce = debounce

        self._controller = RecognitionSessionController(recognizer, policy=policy)
        self._controller.on_result(self._handle_transcript)
        self._controller.on_error(self._handle_session_error)

        self._pending_resolve: asyncio.TimerHandle | None = None
        self._transcript_callback: TranscriptCallback | None = None
        self._resolved_callback: ResolvedCallback | None = None
        self._session_error_callback: SessionErrorCallback | None = None
        self._last_result: MatchResult | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Initialize the recognizer (first call only) and begin listening.

        Raises ``InitializationError`` when the recognizer is unavailable.
        """
        await self._controller.init()
        self._controller.start()
        logger.info("Command engine listening (%d triggers)", len(self._registry))

    def stop(self) -> None:
        """Stop listening and drop any transcript waiting to be resolved."""
        self._cancel_pending_resolve()
        self._controller.stop()

    async def close(self) -> None:
        self._cancel_pending_resolve()
        await self._controller.close()

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def on_transcript(self, callback: TranscriptCallback) -> None:
        if not callable(callback):
            raise TypeError("on_transcript callback must be callable")
        self._transcript_callback = callback

    def on_resolved(self, callback: ResolvedCallback) -> None:
        if not callable(callback):
            raise TypeError("on_resolved callback must be callable")
        self._resolved_callback = callback

    def on_session_error(self, callback: SessionErrorCallback) -> None:
        if not callable(callback):
            raise TypeError("on_session_error callback must be callable")
        self._session_error_callback = callback

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def registry(self) -> TriggerRegistry:
        return self._registry

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def matcher(self) -> TriggerMatcher:
        return self._matcher

    @property
    def controller(self) -> RecognitionSessionController:
        return self._controller

    @property
    def last_result(self) -> MatchResult | None:
        """The most recent successful match, i.e. what is on display."""
        return self._last_result

    def snapshot(self) -> SessionSnapshot:
        return self._controller.snapshot()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_text(self, text: str) -> MatchResult:
        """Resolve *text* immediately and publish the result."""
        result = self._matcher.resolve_text(text)
        self._publish_resolution(text, result)
        return result

    def _handle_transcript(self, text: str, is_final: bool) -> None:
        self._invoke(self._transcript_callback, text, is_final)
        self._publish(TranscriptEvent(text=text, is_final=is_final))

        if not is_final:
            return
        self._cancel_pending_resolve()
        loop = asyncio.get_running_loop()
        self._pending_resolve = loop.call_later(self._debounce, self._resolve_pending, text)

    def _resolve_pending(self, text: str) -> None:
        self._pending_resolve = None
        if not self._controller.desired_listening:
            return
        self.resolve_text(text)

    def _publish_resolution(self, text: str, result: MatchResult) -> None:
        if result.found:
            self._last_result = result
            logger.info(
                "Resolved %r -> %s %s (%s tier)",
                text,
                result.category.value,
                result.matched_trigger,
                result.tier.value,
            )
        else:
            logger.info("No match for %r", text)
        self._invoke(self._resolved_callback, result)
        self._publish(ResolvedEvent(transcript=text, result=result))

    def _handle_session_error(self, error: RecognitionError) -> None:
        self._invoke(self._session_error_callback, error)
        self._publish(SessionErrorEvent(kind=error.kind, message=error.message))

    def _cancel_pending_resolve(self) -> None:
        if self._pending_resolve is not None:
            self._pending_resolve.cancel()
            self._pending_resolve = None

    def _publish(self, event) -> None:
        self._event_bus.publish(event)

    @staticmethod
    def _invoke(callback: Callable | None, *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.warning("Engine callback raised", exc_info=True)
