"""Protocol interfaces used by TranscriptionClient and the UI layer."""

from __future__ import annotations

from typing import Optional, Protocol

from models import AudioSamples


class Recorder(Protocol):
    def start(
        self,
        device: Optional[str],
        max_duration_s: int,
        sample_rate: int,
    ) -> None: ...

    def stop(self) -> AudioSamples: ...


class TranscriptUploader(Protocol):
    def upload(self, wav_bytes: bytes) -> str: ...

    def close(self) -> None: ...


class TranscriptView(Protocol):
    def set_text(self, text: str) -> None: ...

    def set_button_label(self, label: str) -> None: ...

