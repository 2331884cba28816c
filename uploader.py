"""HTTP submission of encoded audio to the transcription endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from errors import TransportError

logger = logging.getLogger(__name__)

FORM_FIELD = "audio"
UPLOAD_FILENAME = "recording.wav"
UPLOAD_CONTENT_TYPE = "audio/wav"
DEFAULT_TIMEOUT_S = 300.0


class HttpTranscriptUploader:
    def __init__(
        self,
        url: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        log_requests: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._url = url
        self._log_level = logging.INFO if log_requests else logging.DEBUG
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_s),
            follow_redirects=True,
            transport=transport,
        )

    def upload(self, wav_bytes: bytes) -> str:
        """POST the WAV as multipart form data and return the raw response text."""
        if not self._url:
            raise TransportError("HTTP error: no endpoint URL configured")

        logger.log(self._log_level, "POST %s (%d bytes)", self._url, len(wav_bytes))
        files = {FORM_FIELD: (UPLOAD_FILENAME, wav_bytes, UPLOAD_CONTENT_TYPE)}
        try:
            response = self._client.post(self._url, files=files)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportError(f"HTTP error: {status} {exc.response.reason_phrase}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"HTTP error: {exc}") from exc

        body = response.text or ""
        logger.log(self._log_level, "Response: %s", body)
        return body

    def close(self) -> None:
        self._client.close()
