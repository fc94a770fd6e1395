"""Microphone capture of one utterance with energy-based voice activity detection."""

import asyncio
import logging
import threading

import numpy as np
import sounddevice as sd

from pommai.config import (
    AUDIO_SAMPLE_RATE,
    STT_LISTEN_TIMEOUT,
    STT_MAX_RECORD_DURATION,
    STT_SILENCE_DURATION,
    STT_SILENCE_THRESHOLD,
)

logger = logging.getLogger(__name__)

_CHUNK_DURATION = 0.1  # seconds per read


class MicrophoneCapture:
    """Captures a single utterance from the default input device.

    Probes for a device at start and reports unavailability instead of
    raising.  :meth:`cancel` interrupts a capture in progress from any
    thread; the capture then returns whatever it recorded so far, or None.
    """

    def __init__(self) -> None:
        self._available: bool = False
        self._listening: bool = False
        self._cancel_event = threading.Event()

    async def start(self) -> None:
        """Probe for an input device."""
        try:
            sd.query_devices(kind="input")
            self._available = True
            logger.info("Microphone input device detected, capture enabled")
        except Exception:
            self._available = False
            logger.warning("No microphone input device, capture disabled")

    async def stop(self) -> None:
        self.cancel()
        self._listening = False
        self._available = False

    def cancel(self) -> None:
        """Interrupt the capture in progress, if any."""
        self._cancel_event.set()

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def is_listening(self) -> bool:
        return self._listening

    async def capture_until_silence(
        self,
        *,
        max_duration: float | None = None,
        silence_threshold: float | None = None,
        silence_duration: float | None = None,
        sample_rate: int | None = None,
        listen_timeout: float | None = None,
    ) -> bytes | None:
        """Record until trailing silence, max duration or cancellation.

        Returns PCM 16-bit mono bytes, or None when the microphone is
        unavailable, nothing was said within *listen_timeout*, the capture
        was cancelled before speech, or the stream failed.
        """
        if not self._available:
            return None

        self._cancel_event.clear()
        self._listening = True
        try:
            return await asyncio.to_thread(
                self._capture_sync,
                max_duration or STT_MAX_RECORD_DURATION,
                silence_threshold or STT_SILENCE_THRESHOLD,
                silence_duration or STT_SILENCE_DURATION,
                sample_rate or AUDIO_SAMPLE_RATE,
                listen_timeout or STT_LISTEN_TIMEOUT,
            )
        except Exception:
            logger.warning("Microphone capture failed", exc_info=True)
            return None
        finally:
            self._listening = False

    def _capture_sync(
        self,
        max_duration: float,
        silence_threshold: float,
        silence_duration: float,
        sample_rate: int,
        listen_timeout: float,
    ) -> bytes | None:
        """Blocking capture, run in a worker thread.

        Waits up to *listen_timeout* for the RMS level to cross
        *silence_threshold*, then records until it stays below the
        threshold for *silence_duration*.
        """
        frames: list[np.ndarray] = []
        chunk_samples = int(sample_rate * _CHUNK_DURATION)
        waited = 0.0
        recorded = 0.0
        quiet = 0.0

        try:
            with sd.InputStream(
                samplerate=sample_rate,
                channels=1,
                dtype="int16",
                blocksize=chunk_samples,
            ) as stream:
                while waited < listen_timeout:
                    if self._cancel_event.is_set():
                        return None
                    data, _ = stream.read(chunk_samples)
                    waited += _CHUNK_DURATION
                    if self._compute_rms(data) > silence_threshold:
                        frames.append(data.copy())
                        recorded += _CHUNK_DURATION
                        break

                if not frames:
                    return None

                while recorded < max_duration and not self._cancel_event.is_set():
                    data, _ = stream.read(chunk_samples)
                    frames.append(data.copy())
                    recorded += _CHUNK_DURATION

                    if self._compute_rms(data) < silence_threshold:
                        quiet += _CHUNK_DURATION
                        if quiet >= silence_duration:
                            break
                    else:
                        quiet = 0.0

        except Exception:
            logger.warning("Microphone stream error", exc_info=True)

        if not frames:
            return None
        return np.concatenate(frames).tobytes()

    @staticmethod
    def _compute_rms(data: np.ndarray) -> float:
        """RMS amplitude of int16 audio, normalized to 0.0-1.0."""
        samples = data.astype(np.float32) / 32768.0
        return float(np.sqrt(np.mean(samples**2)))
