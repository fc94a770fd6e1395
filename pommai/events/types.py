"""Pydantic models for events published by the command engine."""

import time
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from pommai.resolver.types import MatchResult


class EventType(str, Enum):
    """Types of events flowing to the presentation layer."""

    TRANSCRIPT = "transcript"
    RESOLVED = "resolved"
    SESSION_ERROR = "session_error"


class _BaseEvent(BaseModel):
    timestamp: float = Field(default_factory=time.time)
    event_id: str = Field(default_factory=lambda: str(uuid4()))


class TranscriptEvent(_BaseEvent):
    """Raw recognizer output, interim or final."""

    type: Literal[EventType.TRANSCRIPT] = EventType.TRANSCRIPT
    text: str
    is_final: bool


class ResolvedEvent(_BaseEvent):
    """A transcript after normalization and matching.

    ``result.found`` is False for transcripts that matched nothing; the
    presentation layer keeps its current display in that case.
    """

    type: Literal[EventType.RESOLVED] = EventType.RESOLVED
    transcript: str
    result: MatchResult


class SessionErrorEvent(_BaseEvent):
    """A recognizer fault surfaced for visibility; listening continues."""

    type: Literal[EventType.SESSION_ERROR] = EventType.SESSION_ERROR
    kind: str
    message: str = ""
