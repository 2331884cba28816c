"""Bounded microphone capture session."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import numpy as np

from errors import CaptureError
from models import AudioSamples

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger(__name__)


def resolve_device(device: Optional[str]) -> int | str | None:
    """Map a configured device name to what sounddevice expects."""
    if device is None:
        return None
    name = device.strip()
    if not name or name == "default":
        return None
    if name.isdigit():
        return int(name)
    return name


class SoundDeviceRecorder:
    """Records into a preallocated, non-looping buffer until stopped or full."""

    def __init__(self, channels: int = 1) -> None:
        self.channels = channels
        self.sample_rate = 16000
        self.overflowed = False
        self._stream: Any = None
        self._buffer: Optional[np.ndarray] = None
        self._position = 0
        self._lock = threading.Lock()

    def start(
        self,
        device: Optional[str] = None,
        max_duration_s: int = 15,
        sample_rate: int = 16000,
    ) -> None:
        with self._lock:
            if self._stream is not None:
                return
            if sd is None:
                raise CaptureError("sounddevice is not installed")
            frames = int(max_duration_s * sample_rate)
            if frames <= 0:
                raise CaptureError("Recording length must be positive")

            self.sample_rate = sample_rate
            self.overflowed = False
            self._position = 0
            self._buffer = np.zeros((frames, self.channels), dtype=np.float32)

            stream = None
            try:
                stream = sd.InputStream(
                    device=resolve_device(device),
                    samplerate=sample_rate,
                    channels=self.channels,
                    dtype="float32",
                    callback=self._on_audio,
                )
                stream.start()
            except Exception as exc:
                if stream is not None:
                    stream.close()
                self._buffer = None
                raise CaptureError(f"Could not open microphone: {exc}") from exc

            self._stream = stream
            logger.info(
                "Recording started: device=%s, %dHz, %dch, max %ss",
                device or "default",
                sample_rate,
                self.channels,
                max_duration_s,
            )

    def stop(self) -> AudioSamples:
        """Release the device and return exactly the samples captured so far."""
        with self._lock:
            stream, self._stream = self._stream, None
            if stream is not None:
                self._close_stream(stream)
            buffer, self._buffer = self._buffer, None
            position, self._position = self._position, 0

        if stream is None or buffer is None:
            raise CaptureError("No audio recorded.")
        if position <= 0:
            raise CaptureError("No microphone samples captured.")

        logger.info("Recording stopped: %d frames captured", position)
        return AudioSamples(
            samples=buffer[:position].reshape(-1).copy(),
            channels=buffer.shape[1],
            sample_rate=self.sample_rate,
        )

    def is_running(self) -> bool:
        return self._stream is not None

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.warning("Input stream status: %s", status)
        buffer = self._buffer
        if buffer is None:
            return
        remaining = len(buffer) - self._position
        if remaining <= 0:
            if not self.overflowed:
                self.overflowed = True
                logger.warning("Recording buffer full, dropping further audio")
            return
        chunk = np.asarray(indata, dtype=np.float32).reshape(-1, buffer.shape[1])[:remaining]
        buffer[self._position : self._position + len(chunk)] = chunk
        self._position += len(chunk)

    @staticmethod
    def _close_stream(stream: Any) -> None:
        try:
            stream.stop()
        except Exception as exc:
            logger.warning("Failed to stop input stream: %s", exc)
        finally:
            stream.close()

    @staticmethod
    def list_input_devices() -> list[dict]:
        """List available audio input devices."""
        if sd is None:
            return []
        devices = []
        for i, device in enumerate(sd.query_devices()):
            if device["max_input_channels"] > 0:
                devices.append({
                    "id": i,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "sample_rate": device["default_samplerate"],
                })
        return devices
