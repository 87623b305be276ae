"""Push-call scanner: finds ``PREFIX([id, payload])`` calls in raw documents.

Each match becomes a ``RawOccurrence``. A call whose arguments cannot be
handled becomes an ``ErrorOccurrence`` and scanning continues.
"""

from __future__ import annotations

import json
import logging
import re

from core.hydration.decoder import decode_value
from core.hydration.delimiters import find_top_level_comma
from core.hydration.models import ChunkId, ErrorOccurrence, Occurrence, RawOccurrence
from core.utils.errors import ScanFault
from core.utils.log_events import log_event

logger = logging.getLogger("hydration.scanner")

_QUOTE_CHARS = ('"', "'")


def scan(document: str, pattern: re.Pattern[str]) -> list[Occurrence]:
    """Return every push-call occurrence in document order.

    Args:
        document: Full document text.
        pattern: Compiled push-call regex whose first group captures the
            call arguments between ``[`` and ``]``.

    Returns:
        Raw and error occurrences sorted by match start offset.
    """

    occurrences: list[Occurrence] = []
    error_count = 0

    for match in pattern.finditer(document):
        arg_text = match.group(1)
        position = match.start()
        try:
            chunk_id, raw_payload = decode_call(arg_text)
        except ScanFault as exc:
            cause = exc.__cause__ or exc
            error_message = f"{type(cause).__name__}: {cause}"
            log_event(logger, logging.WARNING, "scan_fault", position=position, error=error_message)
            occurrences.append(
                ErrorOccurrence(
                    raw_content=exc.raw_content,
                    position=position,
                    error_message=error_message,
                )
            )
            error_count += 1
            continue

        occurrences.append(
            RawOccurrence(chunk_id=chunk_id, raw_payload=raw_payload, position=position)
        )

    occurrences.sort(key=lambda occurrence: occurrence.position)
    log_event(
        logger,
        logging.DEBUG,
        "scan_done",
        occurrences=len(occurrences),
        errors=error_count,
    )
    return occurrences


def decode_call(arg_text: str) -> tuple[ChunkId, str]:
    """Split one call's argument text into its chunk id and raw payload.

    Strategies, first success wins:
    - decode ``[arg_text]`` as an array of at least two elements;
    - split at the first top-level comma and decode each side;
    - keep the whole text as payload under the ``unknown`` id.

    Raises:
        ScanFault: on an unexpected internal error in any strategy.
    """

    try:
        return _decode_call(arg_text)
    except Exception as exc:  # noqa: BLE001
        raise ScanFault("Failed to decode push call arguments", raw_content=arg_text) from exc


def _decode_call(arg_text: str) -> tuple[ChunkId, str]:
    content = arg_text.strip()

    parsed = decode_value(f"[{content}]")
    if isinstance(parsed, list) and len(parsed) >= 2:
        return ChunkId.from_value(parsed[0]), _payload_text(parsed[1])

    comma_index = find_top_level_comma(content)
    if comma_index != -1:
        id_text = content[:comma_index].strip()
        payload_text = content[comma_index + 1 :].strip()
        return _decode_identifier(id_text), _unquote_payload(payload_text)

    return ChunkId.UNKNOWN, content


def _decode_identifier(id_text: str) -> ChunkId:
    value = decode_value(id_text)
    if value is not None:
        return ChunkId.from_value(value)
    return ChunkId.textual(_strip_quotes(id_text))


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] in _QUOTE_CHARS and text[-1] == text[0]:
        return text[1:-1]
    return text


def _unquote_payload(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return text


def _payload_text(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
