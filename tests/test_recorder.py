"""Tests for SoundDeviceRecorder."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from errors import CAPTURE_ERROR, CaptureError
from models import AudioSamples
from recorder import SoundDeviceRecorder, resolve_device


# ---------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------

def _block(values, channels: int = 1) -> np.ndarray:
    """Audio block shaped like a sounddevice callback ``indata``."""
    return np.asarray(values, dtype=np.float32).reshape(-1, channels)


def _feed(recorder: SoundDeviceRecorder, block: np.ndarray) -> None:
    recorder._on_audio(block, frames=len(block), time_info=None, status=None)


# ---------------------------------------------------------------
# Device resolution
# ---------------------------------------------------------------

@pytest.mark.parametrize(
    "name, expected",
    [
        (None, None),
        ("", None),
        ("  ", None),
        ("default", None),
        ("3", 3),
        ("USB Microphone", "USB Microphone"),
    ],
)
def test_resolve_device(name, expected) -> None:  # noqa: ANN001
    assert resolve_device(name) == expected


# ---------------------------------------------------------------
# Start
# ---------------------------------------------------------------

@patch("recorder.sd")
def test_start_opens_stream_for_requested_device(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    recorder.start("USB Microphone", max_duration_s=2, sample_rate=8000)

    kwargs = mock_sd.InputStream.call_args.kwargs
    assert kwargs["device"] == "USB Microphone"
    assert kwargs["samplerate"] == 8000
    assert kwargs["channels"] == 1
    assert kwargs["dtype"] == "float32"
    mock_stream.start.assert_called_once()
    assert recorder.is_running() is True


@patch("recorder.sd")
def test_start_is_idempotent(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    recorder.start(None, 1, 16000)
    _feed(recorder, _block([0.1, 0.2]))
    recorder.start(None, 1, 16000)  # second call should be no-op

    assert mock_sd.InputStream.call_count == 1
    assert np.allclose(recorder.stop().samples, [0.1, 0.2])


@patch("recorder.sd")
def test_start_failure_raises_capture_error(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.side_effect = Exception("Error querying device -1")

    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError, match="Error querying device") as info:
        recorder.start(None, 1, 16000)

    assert info.value.code == CAPTURE_ERROR
    assert recorder.is_running() is False


@patch("recorder.sd")
def test_stream_start_failure_closes_stream(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_stream.start.side_effect = Exception("permission denied")
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError):
        recorder.start(None, 1, 16000)

    mock_stream.close.assert_called_once()
    assert recorder.is_running() is False


@patch("recorder.sd")
def test_non_positive_length_is_rejected(mock_sd: MagicMock) -> None:
    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError):
        recorder.start(None, 0, 16000)
    mock_sd.InputStream.assert_not_called()


def test_start_raises_without_sounddevice(monkeypatch) -> None:  # noqa: ANN001
    import recorder as rec_mod
    monkeypatch.setattr(rec_mod, "sd", None)

    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError, match="sounddevice is not installed"):
        recorder.start(None, 1, 16000)


# ---------------------------------------------------------------
# Stop / read-back
# ---------------------------------------------------------------

@patch("recorder.sd")
def test_stop_returns_only_captured_samples(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    recorder.start(None, max_duration_s=10, sample_rate=16000)
    _feed(recorder, _block([0.1, 0.2, 0.3]))
    _feed(recorder, _block([-0.5]))
    audio = recorder.stop()

    assert isinstance(audio, AudioSamples)
    assert np.allclose(audio.samples, [0.1, 0.2, 0.3, -0.5])
    assert audio.channels == 1
    assert audio.sample_rate == 16000
    mock_stream.stop.assert_called_once()
    mock_stream.close.assert_called_once()
    assert recorder.is_running() is False


@patch("recorder.sd")
def test_stereo_samples_stay_interleaved(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder(channels=2)
    recorder.start(None, 1, 100)
    _feed(recorder, _block([1.0, -1.0, 0.5, 0.5], channels=2))
    audio = recorder.stop()

    assert mock_sd.InputStream.call_args.kwargs["channels"] == 2
    assert audio.channels == 2
    assert len(audio.samples) // audio.channels == 2
    assert audio.samples.tolist() == [1.0, -1.0, 0.5, 0.5]


@patch("recorder.sd")
def test_stop_without_samples_raises_but_releases_device(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    recorder.start(None, 1, 16000)
    with pytest.raises(CaptureError, match="No microphone samples captured"):
        recorder.stop()

    mock_stream.stop.assert_called_once()
    mock_stream.close.assert_called_once()
    assert recorder.is_running() is False


@patch("recorder.sd")
def test_stop_closes_stream_even_if_stop_fails(mock_sd: MagicMock) -> None:
    mock_stream = MagicMock()
    mock_stream.stop.side_effect = Exception("device unplugged")
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    recorder.start(None, 1, 16000)
    _feed(recorder, _block([0.25]))
    audio = recorder.stop()

    mock_stream.close.assert_called_once()
    assert audio.samples.tolist() == [0.25]


def test_stop_without_start_raises() -> None:
    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError, match="No audio recorded"):
        recorder.stop()


# ---------------------------------------------------------------
# Bounded buffer
# ---------------------------------------------------------------

@patch("recorder.sd")
def test_buffer_does_not_grow_past_max_duration(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    recorder.start(None, max_duration_s=1, sample_rate=4)
    _feed(recorder, _block([0.1, 0.2, 0.3]))
    _feed(recorder, _block([0.4, 0.5, 0.6]))
    assert recorder.overflowed is False
    _feed(recorder, _block([0.7]))
    assert recorder.overflowed is True

    audio = recorder.stop()
    assert np.allclose(audio.samples, [0.1, 0.2, 0.3, 0.4])


@patch("recorder.sd")
def test_callback_after_stop_is_noop(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    recorder.start(None, 1, 16000)
    _feed(recorder, _block([0.1]))
    recorder.stop()

    _feed(recorder, _block([0.2]))
    with pytest.raises(CaptureError, match="No audio recorded"):
        recorder.stop()


@patch("recorder.sd")
def test_new_session_starts_with_empty_buffer(mock_sd: MagicMock) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    recorder.start(None, 1, 16000)
    _feed(recorder, _block([0.1, 0.2]))
    first = recorder.stop()

    recorder.start(None, 1, 16000)
    _feed(recorder, _block([0.9]))
    second = recorder.stop()

    assert len(first.samples) == 2
    assert np.allclose(second.samples, [0.9])
    assert np.allclose(first.samples, [0.1, 0.2])


# ---------------------------------------------------------------
# Device listing
# ---------------------------------------------------------------

@patch("recorder.sd")
def test_list_input_devices_filters_outputs(mock_sd: MagicMock) -> None:
    mock_sd.query_devices.return_value = [
        {"name": "Speakers", "max_input_channels": 0, "default_samplerate": 48000.0},
        {"name": "Mic", "max_input_channels": 2, "default_samplerate": 44100.0},
    ]

    devices = SoundDeviceRecorder.list_input_devices()

    assert devices == [{"id": 1, "name": "Mic", "channels": 2, "sample_rate": 44100.0}]
