"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

URL_ENV_VAR = "VOICE_TRANSCRIBER_URL"

DEFAULTS = {
    "endpoint_url": "",
    "microphone_device": "",
    "sample_rate_hz": 16000,
    "max_record_seconds": 15,
    "request_timeout_s": 300.0,
    "log_requests": False,
    "hotkey": "Key.f9",
    "log_level": "INFO",
}


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "voice_transcriber" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_endpoint_url(self) -> str:
        url = str(self._get("endpoint_url")).strip()
        return url or os.getenv(URL_ENV_VAR, "").strip()

    def set_endpoint_url(self, url: str) -> None:
        self._set("endpoint_url", url.strip())

    def get_microphone_device(self) -> str:
        return str(self._get("microphone_device"))

    def set_microphone_device(self, device: str) -> None:
        self._set("microphone_device", device)

    def get_sample_rate_hz(self) -> int:
        return self._get_int("sample_rate_hz")

    def get_max_record_seconds(self) -> int:
        return self._get_int("max_record_seconds")

    def get_request_timeout_s(self) -> float:
        try:
            return float(self._get("request_timeout_s"))
        except (TypeError, ValueError):
            return float(DEFAULTS["request_timeout_s"])

    def get_log_requests(self) -> bool:
        return bool(self._get("log_requests"))

    def get_hotkey(self) -> str:
        return str(self._get("hotkey"))

    def set_hotkey(self, hotkey: str) -> None:
        self._set("hotkey", hotkey)

    def get_log_level(self) -> str:
        return str(self._get("log_level")).upper()

    def _get(self, key: str) -> object:
        return self._read_all().get(key, DEFAULTS[key])

    def _get_int(self, key: str) -> int:
        default = int(DEFAULTS[key])  # type: ignore[call-overload]
        try:
            value = int(self._get(key))  # type: ignore[call-overload]
        except (TypeError, ValueError):
            logger.warning("Invalid %s in %s, using default", key, self._path)
            return default
        return value if value > 0 else default

    def _set(self, key: str, value: object) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Unreadable config at %s, using defaults", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
