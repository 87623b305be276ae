"""Best-effort decoding of JSON-like payload text.

Strategies run in a fixed order and the first success wins:
permissive JavaScript object literal, strict JSON, then both again on text
with trailing commas and comments removed.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable

import chompjs  # type: ignore[import-untyped]

from core.hydration.models import StructuredValue

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_LINE_COMMENT_RE = re.compile(r"//.*?$", re.MULTILINE)
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)

_Strategy = Callable[[str], StructuredValue]


def decode_value(text: str | None) -> StructuredValue:
    """Decode ``text`` into a structured value, or return ``None`` on failure."""

    if text is None:
        return None

    stripped = text.strip()
    if not stripped:
        return None

    for strategy in (_decode_js_object, _decode_json):
        found, value = _attempt(strategy, stripped)
        if found:
            return value

    cleaned = clean_js_object(stripped)
    for strategy in (_decode_js_object, _decode_json):
        found, value = _attempt(strategy, cleaned)
        if found:
            return value

    return None


def clean_js_object(text: str) -> str:
    """Drop trailing commas and JavaScript comments that strict JSON rejects."""

    cleaned = _TRAILING_COMMA_RE.sub(r"\1", text)
    cleaned = _LINE_COMMENT_RE.sub("", cleaned)
    cleaned = _BLOCK_COMMENT_RE.sub("", cleaned)
    return cleaned.strip()


def _attempt(strategy: _Strategy, text: str) -> tuple[bool, StructuredValue]:
    try:
        return True, strategy(text)
    except Exception:  # noqa: BLE001
        return False, None


def _decode_js_object(text: str) -> StructuredValue:
    return chompjs.parse_js_object(text)


def _decode_json(text: str) -> StructuredValue:
    return json.loads(text)
