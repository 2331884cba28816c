"""Core data models for the transcription pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class SessionState(str, Enum):
    IDLE = "IDLE"
    RECORDING = "RECORDING"


class TranscriptKind(str, Enum):
    FINAL = "final"
    ERROR = "error"


@dataclass(frozen=True)
class AudioSamples:
    """Interleaved float samples in [-1.0, 1.0] read back from a capture session."""

    samples: np.ndarray
    channels: int = 1
    sample_rate: int = 16000


@dataclass(frozen=True)
class WavHeader:
    riff_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


@dataclass
class TranscriptEvent:
    kind: str
    text: str = ""
    code: str = ""
    message: str = ""
