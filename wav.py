"""Mono PCM16 WAV encoding for captured float samples."""

from __future__ import annotations

import io
import struct
import wave

import numpy as np

from models import AudioSamples, WavHeader

HEADER_SIZE = 44
PCM16_SCALE = 32767.0
_HEADER_FORMAT = "<4sI4s4sIHHIIHH4sI"


def downmix_to_mono(samples: np.ndarray, channels: int) -> np.ndarray:
    """Average interleaved frames across channels; mono input passes through."""
    data = np.asarray(samples, dtype=np.float32).ravel()
    if channels <= 1:
        return data
    frames = len(data) // channels
    return data[: frames * channels].reshape(frames, channels).mean(axis=1, dtype=np.float32)


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Scale by 32767 and saturate to the int16 range (no wrap-around)."""
    scaled = np.nan_to_num(np.asarray(samples, dtype=np.float64)) * PCM16_SCALE
    info = np.iinfo(np.int16)
    return np.clip(scaled, info.min, info.max).astype("<i2")


def encode_wav(audio: AudioSamples) -> bytes:
    mono = downmix_to_mono(audio.samples, audio.channels)
    pcm = float_to_pcm16(mono)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(audio.sample_rate)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def parse_wav_header(data: bytes) -> WavHeader:
    """Read back the fixed 44-byte header written by ``encode_wav``."""
    if len(data) < HEADER_SIZE:
        raise ValueError(f"WAV data too short: {len(data)} bytes")
    (
        riff,
        riff_size,
        wave_tag,
        fmt_tag,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_size,
    ) = struct.unpack(_HEADER_FORMAT, data[:HEADER_SIZE])
    if riff != b"RIFF" or wave_tag != b"WAVE" or fmt_tag != b"fmt " or data_tag != b"data":
        raise ValueError("not a canonical PCM WAV header")
    if fmt_size != 16:
        raise ValueError(f"unexpected fmt chunk size: {fmt_size}")
    return WavHeader(
        riff_size=riff_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )
