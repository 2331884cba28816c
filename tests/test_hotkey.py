"""Tests for GlobalHotkeyAdapter."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from hotkey import GlobalHotkeyAdapter


class _Key:
    def __init__(self, name: str) -> None:
        self._name = name

    def __str__(self) -> str:
        return self._name


def _start(adapter: GlobalHotkeyAdapter, mock_keyboard: MagicMock) -> tuple[list, object, object]:
    toggles: list[int] = []
    adapter.start(on_toggle=lambda: toggles.append(1))
    kwargs = mock_keyboard.Listener.call_args.kwargs
    return toggles, kwargs["on_press"], kwargs["on_release"]


@patch("hotkey.keyboard")
def test_press_toggles_once_until_release(mock_keyboard: MagicMock) -> None:
    adapter = GlobalHotkeyAdapter("Key.f9")
    toggles, on_press, on_release = _start(adapter, mock_keyboard)

    on_press(_Key("Key.f9"))
    on_press(_Key("Key.f9"))  # auto-repeat
    assert len(toggles) == 1

    on_release(_Key("Key.f9"))
    on_press(_Key("Key.f9"))
    assert len(toggles) == 2


@patch("hotkey.keyboard")
def test_other_keys_are_ignored(mock_keyboard: MagicMock) -> None:
    adapter = GlobalHotkeyAdapter("Key.f9")
    toggles, on_press, _ = _start(adapter, mock_keyboard)

    on_press(_Key("Key.f8"))

    assert toggles == []


@patch("hotkey.keyboard")
def test_character_hotkey_matches(mock_keyboard: MagicMock) -> None:
    adapter = GlobalHotkeyAdapter("r")
    toggles, on_press, _ = _start(adapter, mock_keyboard)

    key = MagicMock()
    key.__str__.return_value = "'r'"
    key.char = "r"
    on_press(key)

    assert toggles == [1]


@patch("hotkey.keyboard")
def test_stop_stops_listener(mock_keyboard: MagicMock) -> None:
    adapter = GlobalHotkeyAdapter()
    _start(adapter, mock_keyboard)

    adapter.stop()
    adapter.stop()

    mock_keyboard.Listener.return_value.stop.assert_called_once()


def test_start_raises_without_pynput(monkeypatch) -> None:  # noqa: ANN001
    import hotkey as hotkey_mod
    monkeypatch.setattr(hotkey_mod, "keyboard", None)

    with pytest.raises(RuntimeError, match="pynput is not installed"):
        GlobalHotkeyAdapter().start(on_toggle=lambda: None)
