"""The recognizer capability the session controller wraps.

A recognizer is single-shot: each ``start()`` produces at most one
utterance, followed by ``end`` (and possibly an ``error`` first).  Hooks
are called on the event loop that owns the controller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

ResultHook = Callable[[str, bool], None]
ErrorHook = Callable[[str], None]
EndHook = Callable[[], None]


def _ignore_result(text: str, is_final: bool) -> None:
    pass


def _ignore_error(kind: str) -> None:
    pass


def _ignore_end() -> None:
    pass


class Recognizer(ABC):
    """Base class for speech recognizers.

    Subclasses implement :meth:`init`, :meth:`start` and :meth:`stop` and
    report through :meth:`emit_result`, :meth:`emit_error` and
    :meth:`emit_end`.
    """

    def __init__(self) -> None:
        self._on_result: ResultHook = _ignore_result
        self._on_error: ErrorHook = _ignore_error
        self._on_end: EndHook = _ignore_end

    def bind(self, on_result: ResultHook, on_error: ErrorHook, on_end: EndHook) -> None:
        """Register the three event hooks, replacing any previous ones."""
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    @abstractmethod
    async def init(self) -> None:
        """Acquire the capability.  Raise ``InitializationError`` on failure."""

    @abstractmethod
    def start(self) -> None:
        """Begin one recognition.

        Raise ``RecognizerBusyError`` when one is already running.
        """

    @abstractmethod
    def stop(self) -> None:
        """Ask the running recognition to stop.  May finish asynchronously."""

    async def close(self) -> None:
        """Release resources acquired by :meth:`init`."""

    def emit_result(self, text: str, is_final: bool) -> None:
        self._on_result(text, is_final)

    def emit_error(self, kind: str) -> None:
        self._on_error(kind)

    def emit_end(self) -> None:
        self._on_end()
