"""Record-button controller that renders transcripts into a view."""

from __future__ import annotations

import logging
from typing import Optional

from interfaces import TranscriptView
from transcription_client import TranscriptionClient

logger = logging.getLogger(__name__)


class VoiceUIController:
    def __init__(
        self,
        client: TranscriptionClient,
        view: Optional[TranscriptView] = None,
        start_label: str = "Record",
        stop_label: str = "Stop",
        clear_on_start: bool = True,
        append_final_with_newline: bool = True,
    ) -> None:
        self._client = client
        self._view = view
        self.start_label = start_label
        self.stop_label = stop_label
        self.clear_on_start = clear_on_start
        self.append_final_with_newline = append_final_with_newline
        self._final_buffer = ""
        self._attached = False

    @property
    def transcript(self) -> str:
        return self._final_buffer

    def attach(self) -> None:
        if self._attached:
            return
        self._client.add_transcript_listener(self.on_transcript)
        self._client.add_error_listener(self.on_error)
        self._attached = True
        self._set_button_label(self.start_label)

    def detach(self) -> None:
        if not self._attached:
            return
        self._client.remove_transcript_listener(self.on_transcript)
        self._client.remove_error_listener(self.on_error)
        self._attached = False

    def toggle_recording(self) -> None:
        if not self._client.is_recording:
            if self.clear_on_start:
                self._final_buffer = ""
                self._set_text("")
            self._client.start_recording()
            if self._client.is_recording:
                self._set_button_label(self.stop_label)
        else:
            self._client.stop_and_transcribe()
            self._set_button_label(self.start_label)

    def on_transcript(self, text: str) -> None:
        logger.debug("Transcript received: [%s]", text)
        if self.append_final_with_newline and self._final_buffer:
            self._final_buffer += "\n"
        self._final_buffer += text
        self._set_text(self._final_buffer)
        self._set_button_label(self.start_label)

    def on_error(self, code: str, message: str) -> None:
        self._set_text(f"[Error] {message}")
        self._set_button_label(self.start_label)

    def _set_text(self, text: str) -> None:
        if self._view is not None:
            self._view.set_text(text)

    def _set_button_label(self, label: str) -> None:
        if self._view is not None:
            self._view.set_button_label(label)
