"""Recognition session: recognizer capability and the restart controller."""

from pommai.session.controller import RecognitionSessionController, classify_error
from pommai.session.errors import (
    InitializationError,
    RecognitionError,
    RecognizerBusyError,
    TransientRecognitionError,
)
from pommai.session.recognizer import Recognizer
from pommai.session.types import ErrorKind, RestartPolicy, SessionSnapshot, SessionStatus

__all__ = [
    "ErrorKind",
    "InitializationError",
    "RecognitionError",
    "RecognitionSessionController",
    "Recognizer",
    "RecognizerBusyError",
    "RestartPolicy",
    "SessionSnapshot",
    "SessionStatus",
    "TransientRecognitionError",
    "classify_error",
]
