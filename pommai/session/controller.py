"""Keeps a single-shot recognizer listening until the caller says stop.

The recognizer ends after every utterance, silence timeout or error.  The
controller restarts it after a delay chosen by what happened:

    end          -> policy.end        (0.1s, continuous listening)
    aborted      -> policy.aborted    (0.5s)
    no-speech    -> policy.no_speech  (1.0s)
    other error  -> policy.error      (2.0s, error also reported to caller)
    start failed -> policy.start_retry (1.0s)

Only one restart is ever pending.  After ``stop()`` nothing is scheduled
and late recognizer events are dropped without reaching the caller, also
when ``start()`` follows before the stopped recognition has ended.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from pommai.session.errors import (
    InitializationError,
    RecognitionError,
    RecognizerBusyError,
    TransientRecognitionError,
)
from pommai.session.recognizer import Recognizer
from pommai.session.types import ErrorKind, RestartPolicy, SessionSnapshot, SessionStatus

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, bool], None]
ErrorCallback = Callable[[RecognitionError], None]

_TRANSIENT_KINDS = {ErrorKind.NO_SPEECH.value, ErrorKind.ABORTED.value}


def classify_error(kind: str) -> RecognitionError:
    """Wrap a recognizer error kind in the matching exception type."""
    if kind in _TRANSIENT_KINDS:
        return TransientRecognitionError(kind)
    return RecognitionError(kind)


class RecognitionSessionController:
    """State machine wrapping a :class:`Recognizer`.

    ``desired_listening`` is the caller's intent; ``status`` is what the
    recognizer is doing about it.  While intent is true and the recognizer
    is not running, a restart is always pending.
    """

    def __init__(
        self, recognizer: Recognizer, *, policy: RestartPolicy | None = None
    ) -> None:
        self._recognizer = recognizer
        self._policy = policy or RestartPolicy()

        self._status: SessionStatus = SessionStatus.IDLE
        self._desired_listening: bool = False
        self._restart_handle: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._initialized: bool = False
        # Set by stop() while a recognition may still be winding down; its
        # late events belong to the old session even if start() follows.
        self._draining: bool = False

        self._result_callback: ResultCallback | None = None
        self._error_callback: ErrorCallback | None = None

    # ------------------------------------------------------------------
    # Caller API
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Acquire the recognizer and bind its hooks.

        Raises :class:`InitializationError` if the recognizer is unavailable.
        Calling it again after success is a no-op.
        """
        if self._initialized:
            return

        self._loop = asyncio.get_running_loop()
        try:
            await self._recognizer.init()
        except InitializationError:
            logger.error("Recognizer initialization failed", exc_info=True)
            raise
        except Exception as exc:
            logger.error("Recognizer initialization failed", exc_info=True)
            raise InitializationError(str(exc) or type(exc).__name__) from exc

        self._recognizer.bind(self._handle_result, self._handle_error, self._handle_end)
        self._initialized = True
        logger.info("Recognition session initialized")

    def start(self) -> None:
        """Declare listening intent and start the recognizer if needed."""
        if not self._initialized:
            raise InitializationError("Recognition session not initialized")

        if self._desired_listening and self._status in (
            SessionStatus.STARTING,
            SessionStatus.LISTENING,
            SessionStatus.RESTARTING,
        ):
            logger.debug("start() ignored, session already %s", self._status.value)
            return

        self._desired_listening = True
        logger.info("Starting continuous recognition")
        self._attempt_start()

    def stop(self) -> None:
        """Withdraw listening intent.  Suppresses all further restarts."""
        self._desired_listening = False
        self._cancel_restart()
        if self._status in (SessionStatus.STARTING, SessionStatus.LISTENING):
            self._draining = True
        self._status = SessionStatus.STOPPED
        logger.info("Stopping recognition")

        if not self._initialized:
            return
        try:
            self._recognizer.stop()
        except Exception:
            logger.warning("Recognizer stop failed", exc_info=True)

    async def close(self) -> None:
        """Stop and release the recognizer."""
        self.stop()
        if self._initialized:
            await self._recognizer.close()
            self._initialized = False

    def on_result(self, callback: ResultCallback) -> None:
        """Set the callback receiving ``(text, is_final)``."""
        if not callable(callback):
            raise TypeError("on_result callback must be callable")
        self._result_callback = callback

    def on_error(self, callback: ErrorCallback) -> None:
        """Set the callback receiving non-transient :class:`RecognitionError`."""
        if not callable(callback):
            raise TypeError("on_error callback must be callable")
        self._error_callback = callback

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def desired_listening(self) -> bool:
        return self._desired_listening

    @property
    def restart_pending(self) -> bool:
        return self._restart_handle is not None

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def policy(self) -> RestartPolicy:
        return self._policy

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            status=self._status,
            desired_listening=self._desired_listening,
            restart_pending=self.restart_pending,
            initialized=self._initialized,
        )

    # ------------------------------------------------------------------
    # Recognizer hooks
    # ------------------------------------------------------------------

    def _handle_result(self, text: str, is_final: bool) -> None:
        if self._draining:
            logger.debug("Dropping result from previous session: %r", text)
            return
        if not self._desired_listening:
            logger.debug("Dropping result received while stopped: %r", text)
            return
        self._invoke(self._result_callback, text, is_final)

    def _handle_error(self, kind: str) -> None:
        if self._draining:
            logger.debug("Dropping %s error from previous session", kind)
            return
        if not self._desired_listening:
            logger.debug("Dropping %s error received while stopped", kind)
            return

        error = classify_error(kind)
        if isinstance(error, TransientRecognitionError):
            if kind == ErrorKind.NO_SPEECH.value:
                delay = self._policy.no_speech
            else:
                delay = self._policy.aborted
            logger.debug("Transient recognizer error: %s", kind)
        else:
            logger.warning("Recognizer error: %s", kind)
            self._invoke(self._error_callback, error)
            delay = self._policy.error

        # The error callback may have called stop().
        if self._desired_listening:
            self._schedule_restart(delay, kind)

    def _handle_end(self) -> None:
        self._draining = False
        if not self._desired_listening:
            logger.debug("Recognizer ended after stop, not restarting")
            return
        self._schedule_restart(self._policy.end, "end")

    # ------------------------------------------------------------------
    # Restart scheduling
    # ------------------------------------------------------------------

    def _attempt_start(self) -> None:
        self._cancel_restart()
        self._status = SessionStatus.STARTING
        draining, self._draining = self._draining, False
        try:
            self._recognizer.start()
        except RecognizerBusyError:
            # Still the stopped recognition; keep ignoring it until it ends.
            self._draining = draining
            logger.debug("Recognizer already running, treating start as success")
        except Exception:
            logger.warning(
                "Recognizer failed to start, retrying in %.1fs",
                self._policy.start_retry,
                exc_info=True,
            )
            self._schedule_restart(self._policy.start_retry, "start failed")
            return

        # start() may have delivered end/error synchronously.
        if self._status == SessionStatus.STARTING:
            self._status = SessionStatus.LISTENING

    def _schedule_restart(self, delay: float, reason: str) -> None:
        self._cancel_restart()
        self._status = SessionStatus.RESTARTING
        loop = self._loop or asyncio.get_running_loop()
        self._restart_handle = loop.call_later(delay, self._restart)
        logger.debug("Restart scheduled in %.2fs (%s)", delay, reason)

    def _cancel_restart(self) -> None:
        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

    def _restart(self) -> None:
        self._restart_handle = None
        if not self._desired_listening:
            return
        self._attempt_start()

    @staticmethod
    def _invoke(callback: Callable | None, *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.warning("Session callback raised", exc_info=True)
