"""Single-shot recognizer built on the microphone and the Whisper API.

Each ``start()`` runs one capture -> transcribe cycle in a task and then
reports, in order:

* speech transcribed      -> result(text, final=True), end()
* nothing said            -> error("no-speech"), end()
* transcription failed    -> error("network"), end()
* stopped mid-capture     -> error("aborted"), end()
"""

import asyncio
import logging

from pommai.session.errors import InitializationError, RecognizerBusyError
from pommai.session.recognizer import Recognizer
from pommai.session.types import ErrorKind
from pommai.stt.microphone import MicrophoneCapture
from pommai.stt.stt_client import STTClient

logger = logging.getLogger(__name__)


class WhisperRecognizer(Recognizer):
    """:class:`Recognizer` backed by :class:`MicrophoneCapture` and :class:`STTClient`."""

    def __init__(
        self,
        microphone: MicrophoneCapture | None = None,
        stt_client: STTClient | None = None,
    ) -> None:
        super().__init__()
        self._microphone = microphone or MicrophoneCapture()
        self._stt_client = stt_client or STTClient()
        self._task: asyncio.Task | None = None
        self._stop_requested: bool = False

    async def init(self) -> None:
        await self._microphone.start()
        if not self._microphone.is_available:
            raise InitializationError("No microphone input device available")

        await self._stt_client.start()
        if not self._stt_client.is_available:
            await self._microphone.stop()
            raise InitializationError("Whisper transcription service unavailable")

    def start(self) -> None:
        if self.is_running:
            raise RecognizerBusyError("Recognition already running")
        self._stop_requested = False
        self._task = asyncio.get_running_loop().create_task(self._recognize_once())

    def stop(self) -> None:
        if not self.is_running:
            return
        self._stop_requested = True
        # The task finishes on its own once the capture thread sees the flag.
        self._microphone.cancel()

    async def close(self) -> None:
        self.stop()
        if self._task is not None:
            try:
                await asyncio.wait_for(self._task, timeout=2.0)
            except (asyncio.TimeoutError, asyncio.CancelledError):
                self._task.cancel()
            self._task = None
        await self._stt_client.stop()
        await self._microphone.stop()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _recognize_once(self) -> None:
        try:
            audio = await self._microphone.capture_until_silence()
            if self._stop_requested:
                self.emit_error(ErrorKind.ABORTED.value)
                return
            if audio is None:
                self.emit_error(ErrorKind.NO_SPEECH.value)
                return

            transcript = await self._stt_client.transcribe(audio)
            if self._stop_requested:
                self.emit_error(ErrorKind.ABORTED.value)
                return
            if transcript is None:
                self.emit_error(ErrorKind.NETWORK.value)
                return

            logger.info("Heard: %s", transcript)
            self.emit_result(transcript, True)
        except asyncio.CancelledError:
            logger.debug("Recognition task cancelled")
            raise
        except Exception:
            logger.warning("Recognition cycle failed", exc_info=True)
            self.emit_error(ErrorKind.AUDIO_CAPTURE.value)
        finally:
            # Hooks run before the task is marked done, so a restart issued
            # from end() must not see this task as still running.
            self._task = None
            self.emit_end()
