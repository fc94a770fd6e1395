"""Exceptions raised by recognizers and the session controller."""


class InitializationError(RuntimeError):
    """The recognizer capability is unavailable or permission was denied.

    Fatal for the session: callers surface it and do not retry.
    """


class RecognizerBusyError(RuntimeError):
    """Raised by ``Recognizer.start()`` when a recognition is already running."""


class RecognitionError(Exception):
    """A recognizer-reported fault identified by its error *kind*."""

    def __init__(self, kind: str, message: str = "") -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"{kind}: {message}" if message else kind)


class TransientRecognitionError(RecognitionError):
    """Silence or an external abort.  Recovered by restarting, never surfaced."""
