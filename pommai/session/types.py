"""Pydantic models and enums for the recognition session."""

from enum import Enum

from pydantic import BaseModel, Field

from pommai.config import (
    RESTART_DELAY_ABORTED,
    RESTART_DELAY_END,
    RESTART_DELAY_ERROR,
    RESTART_DELAY_NO_SPEECH,
    START_RETRY_DELAY,
)


class SessionStatus(str, Enum):
    """Lifecycle state of a recognition session."""

    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    RESTARTING = "restarting"
    STOPPED = "stopped"


class ErrorKind(str, Enum):
    """Recognizer error kinds the controller treats specially."""

    NO_SPEECH = "no-speech"
    ABORTED = "aborted"
    NETWORK = "network"
    AUDIO_CAPTURE = "audio-capture"


class RestartPolicy(BaseModel):
    """Delays (seconds) before the recognizer is restarted."""

    end: float = Field(default=RESTART_DELAY_END, ge=0)
    aborted: float = Field(default=RESTART_DELAY_ABORTED, ge=0)
    no_speech: float = Field(default=RESTART_DELAY_NO_SPEECH, ge=0)
    error: float = Field(default=RESTART_DELAY_ERROR, ge=0)
    start_retry: float = Field(default=START_RETRY_DELAY, ge=0)


class SessionSnapshot(BaseModel):
    """Read-only view of the controller state."""

    status: SessionStatus
    desired_listening: bool
    restart_pending: bool
    initialized: bool
