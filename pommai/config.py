"""Configuration constants and helpers for Pommai."""

import os
from pathlib import Path

DEFAULT_PORT: int = 7866


def get_port() -> int:
    """Return the server port from POMMAI_PORT env var, or DEFAULT_PORT."""
    raw = os.environ.get("POMMAI_PORT")
    if raw is not None:
        try:
            return int(raw)
        except ValueError:
            return DEFAULT_PORT
    return DEFAULT_PORT


def get_vocab_path() -> Path | None:
    """Return the vocabulary JSON path from POMMAI_VOCAB_PATH, if set."""
    raw = os.environ.get("POMMAI_VOCAB_PATH", "")
    return Path(raw).expanduser() if raw else None


VOCAB_PATH: Path | None = get_vocab_path()

# Start listening as soon as the server comes up.
AUTO_LISTEN: bool = os.environ.get("POMMAI_AUTO_LISTEN", "1").lower() not in (
    "0",
    "false",
    "no",
)


# --- Restart policy (seconds) ---

RESTART_DELAY_END: float = float(os.environ.get("POMMAI_RESTART_DELAY_END", "0.1"))
RESTART_DELAY_ABORTED: float = float(
    os.environ.get("POMMAI_RESTART_DELAY_ABORTED", "0.5")
)
RESTART_DELAY_NO_SPEECH: float = float(
    os.environ.get("POMMAI_RESTART_DELAY_NO_SPEECH", "1.0")
)
RESTART_DELAY_ERROR: float = float(
    os.environ.get("POMMAI_RESTART_DELAY_ERROR", "2.0")
)
START_RETRY_DELAY: float = float(os.environ.get("POMMAI_START_RETRY_DELAY", "1.0"))


# --- Matching ---

MIN_PARTIAL_LETTER_LENGTH: int = 1
MIN_PARTIAL_COMMAND_LENGTH: int = 4  # shorter command fragments misfire

# Multi-word triggers matched as a run of tokens in the exact tier.
MATCH_PHRASES: bool = os.environ.get("POMMAI_MATCH_PHRASES", "").lower() in (
    "1",
    "true",
    "yes",
)

# Longest first: "ஆகாரம்" -> "ஆ", "ககரம்" -> "க".
LETTER_NAME_SUFFIXES: tuple[str, ...] = ("காரம்", "கரம்")

# Wait this long after the last final transcript before resolving it.
RESOLVE_DEBOUNCE: float = float(os.environ.get("POMMAI_RESOLVE_DEBOUNCE", "0.5"))


# --- Whisper STT configuration ---

STT_API_KEY: str = os.environ.get("POMMAI_STT_API_KEY", "")
STT_BASE_URL: str = os.environ.get("POMMAI_STT_BASE_URL", "https://api.openai.com")
STT_MODEL: str = os.environ.get("POMMAI_STT_MODEL", "whisper-1")
STT_LANGUAGE: str = os.environ.get("POMMAI_STT_LANGUAGE", "ta")
STT_TIMEOUT: float = float(os.environ.get("POMMAI_STT_TIMEOUT", "10.0"))
STT_HEALTH_CHECK_INTERVAL: float = float(
    os.environ.get("POMMAI_STT_HEALTH_CHECK_INTERVAL", "60.0")
)


# --- Microphone capture ---

AUDIO_SAMPLE_RATE: int = int(os.environ.get("POMMAI_AUDIO_SAMPLE_RATE", "16000"))
STT_LISTEN_TIMEOUT: float = float(os.environ.get("POMMAI_STT_LISTEN_TIMEOUT", "8.0"))
STT_MAX_RECORD_DURATION: float = float(
    os.environ.get("POMMAI_STT_MAX_RECORD_DURATION", "10.0")
)
STT_SILENCE_DURATION: float = float(
    os.environ.get("POMMAI_STT_SILENCE_DURATION", "1.0")
)
STT_SILENCE_THRESHOLD: float = float(
    os.environ.get("POMMAI_STT_SILENCE_THRESHOLD", "0.01")
)
