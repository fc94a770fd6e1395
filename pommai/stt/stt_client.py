"""Whisper transcription client with health checking and graceful degradation.

Wraps captured PCM in a WAV container and posts it to an OpenAI-compatible
``/v1/audio/transcriptions`` endpoint with the configured language hint.
Every failure is logged and turned into ``None``.
"""

import io
import logging
import time
import wave

import httpx

from pommai.config import (
    AUDIO_SAMPLE_RATE,
    STT_API_KEY,
    STT_BASE_URL,
    STT_HEALTH_CHECK_INTERVAL,
    STT_LANGUAGE,
    STT_MODEL,
    STT_TIMEOUT,
)

logger = logging.getLogger(__name__)

_TRANSCRIPTIONS_PATH = "/v1/audio/transcriptions"
_MODELS_PATH = "/v1/models"
_UPLOAD_NAME = "utterance.wav"


class STTClient:
    """Posts single utterances to Whisper and returns the recognized text.

    ``language`` is sent with every request; Whisper otherwise guesses the
    language per clip and short Tamil words often come back in English.
    """

    def __init__(self, *, language: str = STT_LANGUAGE) -> None:
        self._language = language
        self._available: bool = False
        self._last_health_check: float = 0.0
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        if not STT_API_KEY:
            self._mark(False, "no API key in POMMAI_STT_API_KEY")
            return

        self._client = httpx.AsyncClient(
            base_url=STT_BASE_URL,
            headers={"Authorization": f"Bearer {STT_API_KEY}"},
            timeout=STT_TIMEOUT,
        )
        await self._check_health()

    async def stop(self) -> None:
        client, self._client = self._client, None
        self._available = False
        if client is not None:
            await client.aclose()

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def language(self) -> str:
        return self._language

    async def transcribe(self, audio_bytes: bytes) -> str | None:
        """Transcribe one PCM int16 mono utterance.

        Returns the stripped transcript, or ``None`` when the service is
        down, the request fails or Whisper heard nothing.
        """
        if not self._available and self._health_due():
            await self._check_health()
        if self._client is None or not self._available:
            return None

        upload = (_UPLOAD_NAME, self._wrap_wav(audio_bytes), "audio/wav")
        try:
            response = await self._client.post(
                _TRANSCRIPTIONS_PATH,
                data=self._form_fields(),
                files={"file": upload},
            )
            response.raise_for_status()
            text = self._extract_text(response)
        except Exception:
            logger.warning("Whisper request failed", exc_info=True)
            return None

        if text:
            logger.debug("Whisper heard %r", text)
        return text or None

    def _form_fields(self) -> dict[str, str]:
        return {"model": STT_MODEL, "language": self._language}

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        return str(response.json().get("text") or "").strip()

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def _health_due(self) -> bool:
        return time.monotonic() - self._last_health_check >= STT_HEALTH_CHECK_INTERVAL

    async def _check_health(self) -> None:
        """GET the model list; any 200 means the key is accepted."""
        self._last_health_check = time.monotonic()
        if self._client is None:
            self._mark(False, "client not started")
            return

        try:
            response = await self._client.get(_MODELS_PATH)
        except (httpx.ConnectError, httpx.TimeoutException, OSError) as exc:
            self._mark(False, f"{STT_BASE_URL} unreachable ({exc})")
            return

        if response.status_code == 200:
            self._mark(True, f"{STT_BASE_URL} model {STT_MODEL}")
        else:
            self._mark(False, f"{STT_BASE_URL} answered {response.status_code}")

    def _mark(self, available: bool, detail: str) -> None:
        self._available = available
        if available:
            logger.info("Whisper transcription ready: %s", detail)
        else:
            logger.warning("Whisper transcription unavailable: %s", detail)

    @staticmethod
    def _wrap_wav(pcm_bytes: bytes, sample_rate: int = AUDIO_SAMPLE_RATE) -> io.BytesIO:
        """Mono 16-bit WAV container around raw PCM."""
        buf = io.BytesIO()
        with wave.open(buf, "wb") as writer:
            writer.setparams((1, 2, sample_rate, 0, "NONE", "not compressed"))
            writer.writeframes(pcm_bytes)
        buf.seek(0)
        return buf
