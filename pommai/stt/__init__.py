"""Speech-to-text recognizer: microphone capture plus Whisper transcription."""

from pommai.stt.microphone import MicrophoneCapture
from pommai.stt.stt_client import STTClient
from pommai.stt.whisper_recognizer import WhisperRecognizer

__all__ = [
    "MicrophoneCapture",
    "STTClient",
    "WhisperRecognizer",
]
