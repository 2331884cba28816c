"""Tolerant transcript extraction from an untrusted response body.

Each strategy is a pure ``(body) -> Optional[str]`` function.  They are tried
in order on the cleaned body and the first non-empty candidate wins; the
candidate is then unescaped and trimmed.  A strategy that cannot parse its
input returns ``None`` instead of raising.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

Strategy = Callable[[str], Optional[str]]

TRANSCRIPT_FIELD = "transcript"
_INVISIBLE_CHARS = "\ufeff\u200b"
_KEY_PATTERN = re.compile(re.escape(f'"{TRANSCRIPT_FIELD}"'), re.IGNORECASE)
_ESCAPES = (("\\n", "\n"), ("\\r", "\r"), ('\\"', '"'))


def clean_body(body: str) -> str:
    """Drop surrounding whitespace and BOM / zero-width characters."""
    return body.strip().strip(_INVISIBLE_CHARS).strip()


def _load_object_slice(body: str) -> object:
    start = body.find("{")
    end = body.rfind("}")
    candidate = body[start : end + 1] if start >= 0 and end > start else body
    return json.loads(candidate)


def extract_strict(body: str) -> Optional[str]:
    """Parse the outermost ``{...}`` slice (or the whole body) as JSON."""
    try:
        payload = _load_object_slice(body)
    except (ValueError, RecursionError) as exc:
        logger.debug("Strict transcript parse failed: %s", exc)
        return None
    if not isinstance(payload, dict):
        return None
    value = payload.get(TRANSCRIPT_FIELD)
    if isinstance(value, str) and value:
        return value
    return None


def _is_escaped(text: str, index: int) -> bool:
    # Odd run of backslashes escapes the quote; an escaped backslash before it does not.
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def extract_by_scan(body: str) -> Optional[str]:
    """Find ``"transcript"`` case-insensitively and read the next quoted string."""
    match = _KEY_PATTERN.search(body)
    if match is None:
        return None
    colon = body.find(":", match.end())
    if colon < 0:
        return None
    opening = body.find('"', colon)
    if opening < 0:
        return None
    closing = body.find('"', opening + 1)
    while closing >= 0 and _is_escaped(body, closing):
        closing = body.find('"', closing + 1)
    if closing < 0:
        return None
    return body[opening + 1 : closing] or None


def extract_whole_body(body: str) -> Optional[str]:
    """Use the body itself, minus one layer of quotes.

    Bodies that are well-formed JSON objects or arrays are skipped: they were
    structured responses without a usable transcript, not plain text.
    """
    try:
        if isinstance(json.loads(body), (dict, list)):
            return None
    except (ValueError, RecursionError):
        pass
    text = body.strip().removeprefix('"').removesuffix('"')
    return text or None


STRATEGIES: tuple[Strategy, ...] = (extract_strict, extract_by_scan, extract_whole_body)


def unescape(text: str) -> str:
    for escaped, literal in _ESCAPES:
        text = text.replace(escaped, literal)
    return text.strip()


def parse_transcript(body: str, strategies: Sequence[Strategy] = STRATEGIES) -> str:
    """Return the transcript found in ``body``, or ``""`` if nothing usable."""
    cleaned = clean_body(body or "")
    for strategy in strategies:
        candidate = strategy(cleaned)
        if candidate:
            logger.debug("Transcript extracted by %s", strategy.__name__)
            return unescape(candidate)
    return ""
