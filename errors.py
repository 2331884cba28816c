"""Shared error codes, user-facing messages and core exceptions."""

from __future__ import annotations

CAPTURE_ERROR = "CAPTURE_ERROR"
TRANSPORT_ERROR = "TRANSPORT_ERROR"
EMPTY_TRANSCRIPT = "EMPTY_TRANSCRIPT"

ERROR_MESSAGES = {
    CAPTURE_ERROR: "No microphone samples captured.",
    TRANSPORT_ERROR: "Transcription request failed.",
    EMPTY_TRANSCRIPT: "Empty transcript response.",
}


class TranscriptionError(RuntimeError):
    """Base for failures that are reported as error events."""

    code = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES.get(self.code, ""))


class CaptureError(TranscriptionError):
    code = CAPTURE_ERROR


class TransportError(TranscriptionError):
    code = TRANSPORT_ERROR
