"""Record / stop-and-transcribe orchestration with event-based results."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from errors import (
    CAPTURE_ERROR,
    EMPTY_TRANSCRIPT,
    ERROR_MESSAGES,
    TRANSPORT_ERROR,
    TranscriptionError,
)
from interfaces import Recorder, TranscriptUploader
from models import AudioSamples, SessionState, TranscriptEvent, TranscriptKind
from transcript_parser import parse_transcript
from wav import encode_wav

logger = logging.getLogger(__name__)

TranscriptCallback = Callable[[str], None]
ErrorCallback = Callable[[str, str], None]


class TranscriptionClient:
    """Two-state client: IDLE -> RECORDING -> IDLE.

    ``stop_and_transcribe`` hands the encoded audio to a background thread and
    returns immediately.  Each call produces at most one event: a transcript
    for every transcript listener, or ``(code, message)`` for every error
    listener.  Listeners run on the submission thread unless the failure
    happened while stopping the capture, in which case they run on the caller.
    """

    def __init__(
        self,
        recorder: Recorder,
        uploader: TranscriptUploader,
        device: Optional[str] = None,
        sample_rate: int = 16000,
        max_record_seconds: int = 15,
        log_requests: bool = False,
    ) -> None:
        self._recorder = recorder
        self._uploader = uploader
        self._device = device or None
        self._sample_rate = sample_rate
        self._max_record_seconds = max_record_seconds
        self._log_level = logging.INFO if log_requests else logging.DEBUG

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._transcript_listeners: list[TranscriptCallback] = []
        self._error_listeners: list[ErrorCallback] = []
        self._inflight: set[threading.Thread] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state == SessionState.RECORDING

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_transcript_listener(self, callback: TranscriptCallback) -> None:
        with self._lock:
            self._transcript_listeners.append(callback)

    def remove_transcript_listener(self, callback: TranscriptCallback) -> None:
        with self._lock:
            if callback in self._transcript_listeners:
                self._transcript_listeners.remove(callback)

    def add_error_listener(self, callback: ErrorCallback) -> None:
        with self._lock:
            self._error_listeners.append(callback)

    def remove_error_listener(self, callback: ErrorCallback) -> None:
        with self._lock:
            if callback in self._error_listeners:
                self._error_listeners.remove(callback)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start_recording(self) -> None:
        with self._lock:
            if self._state != SessionState.IDLE:
                return
            try:
                self._recorder.start(self._device, self._max_record_seconds, self._sample_rate)
            except Exception as exc:
                failure = self._error_event(exc, CAPTURE_ERROR)
            else:
                self._state = SessionState.RECORDING
                return
        self._dispatch(failure)

    def stop_and_transcribe(self) -> Optional[threading.Thread]:
        """Stop capture and submit in the background; returns the submission thread."""
        with self._lock:
            if self._state != SessionState.RECORDING:
                return None
            self._state = SessionState.IDLE
            try:
                audio = self._recorder.stop()
            except Exception as exc:
                failure = self._error_event(exc, CAPTURE_ERROR)
            else:
                failure = None

        if failure is not None:
            self._dispatch(failure)
            return None
        return self._submit_async(audio)

    def close(self, timeout_s: float = 1.0) -> None:
        """Wait briefly for in-flight submissions, then release the uploader."""
        with self._lock:
            pending = list(self._inflight)
        for thread in pending:
            thread.join(timeout=timeout_s)
        self._uploader.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _submit_async(self, audio: AudioSamples) -> threading.Thread:
        wav_bytes = encode_wav(audio)
        thread = threading.Thread(
            target=self._submit,
            args=(wav_bytes,),
            name="transcription-submit",
            daemon=True,
        )
        with self._lock:
            self._inflight.add(thread)
        thread.start()
        return thread

    def _submit(self, wav_bytes: bytes) -> None:
        try:
            self._dispatch(self._transcribe(wav_bytes))
        finally:
            with self._lock:
                self._inflight.discard(threading.current_thread())

    def _transcribe(self, wav_bytes: bytes) -> TranscriptEvent:
        try:
            body = self._uploader.upload(wav_bytes)
        except Exception as exc:
            return self._error_event(exc, TRANSPORT_ERROR)

        text = parse_transcript(body)
        logger.log(self._log_level, "Parsed transcript: [%s]", text)
        if not text:
            return TranscriptEvent(
                kind=TranscriptKind.ERROR.value,
                code=EMPTY_TRANSCRIPT,
                message=ERROR_MESSAGES[EMPTY_TRANSCRIPT],
            )
        return TranscriptEvent(kind=TranscriptKind.FINAL.value, text=text)

    def _error_event(self, exc: Exception, default_code: str) -> TranscriptEvent:
        code = exc.code if isinstance(exc, TranscriptionError) else default_code
        message = str(exc) or ERROR_MESSAGES.get(code, "")
        logger.warning("%s: %s", code, message)
        return TranscriptEvent(kind=TranscriptKind.ERROR.value, code=code, message=message)

    def _dispatch(self, event: TranscriptEvent) -> None:
        with self._lock:
            on_transcript = list(self._transcript_listeners)
            on_error = list(self._error_listeners)

        if event.kind == TranscriptKind.FINAL.value:
            for callback in on_transcript:
                self._invoke(callback, event.text)
        else:
            for callback in on_error:
                self._invoke(callback, event.code, event.message)

    @staticmethod
    def _invoke(callback: Callable[..., None], *args: str) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("Transcript listener failed")
