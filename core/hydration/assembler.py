"""Chunk assembly: group occurrences by id and mine their joined payloads."""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.hydration.decoder import decode_value
from core.hydration.delimiters import extract_balanced
from core.hydration.models import (
    ChunkId,
    DecodedChunk,
    ErrorOccurrence,
    ExtractedItem,
    Occurrence,
    RawOccurrence,
)

_COLON_FRAMED_RE = re.compile(r"([^:]*):(\{.*)")
_STRUCTURE_START_RE = re.compile(r"[{\[]")

DEFAULT_MIN_CANDIDATE_LENGTH = 11


@dataclass(frozen=True)
class _Captured:
    raw: str
    item: ExtractedItem


def assemble_chunks(
    occurrences: list[Occurrence],
    *,
    min_candidate_length: int = DEFAULT_MIN_CANDIDATE_LENGTH,
) -> list[DecodedChunk]:
    """Group occurrences by chunk id and decode each group.

    Groups keep first-appearance order. Every error occurrence becomes its own
    chunk at the place it first appeared.
    """

    ordered = sorted(occurrences, key=lambda occurrence: occurrence.position)
    groups: dict[ChunkId, list[RawOccurrence]] = {}
    slots: list[ChunkId | ErrorOccurrence] = []

    for occurrence in ordered:
        if isinstance(occurrence, ErrorOccurrence):
            slots.append(occurrence)
            continue
        group = groups.get(occurrence.chunk_id)
        if group is None:
            group = []
            groups[occurrence.chunk_id] = group
            slots.append(occurrence.chunk_id)
        group.append(occurrence)

    chunks: list[DecodedChunk] = []
    for slot in slots:
        if isinstance(slot, ErrorOccurrence):
            chunks.append(_error_chunk(slot))
            continue
        group = groups[slot]
        combined = "".join(occurrence.raw_payload for occurrence in group)
        chunks.append(
            DecodedChunk(
                chunk_id=slot,
                extracted_items=extract_items(
                    combined, min_candidate_length=min_candidate_length
                ),
                occurrence_count=len(group),
                positions=[occurrence.position for occurrence in group],
            )
        )
    return chunks


def extract_items(
    text: str,
    *,
    min_candidate_length: int = DEFAULT_MIN_CANDIDATE_LENGTH,
) -> list[ExtractedItem]:
    """Extract every decodable structure from concatenated payload text.

    Passes, in order:
    1. ``identifier:{...}`` framing, keeping the identifier.
    2. Standalone ``{...}``/``[...]`` regions not inside an earlier capture.
    3. The whole text, only when nothing was found before.
    """

    if not text or not text.strip():
        return []

    captured: list[_Captured] = []
    seen_raw: set[str] = set()

    for match in _COLON_FRAMED_RE.finditer(text):
        raw = extract_balanced(text, match.start(2))
        if raw is None or raw in seen_raw:
            continue
        data = decode_value(raw)
        if data is None:
            continue
        item = ExtractedItem(
            kind="colon_separated",
            data=data,
            identifier=match.group(1).strip(),
        )
        captured.append(_Captured(raw=raw, item=item))
        seen_raw.add(raw)

    for match in _STRUCTURE_START_RE.finditer(text):
        start = match.start()
        raw = extract_balanced(text, start)
        if raw is None or len(raw) < min_candidate_length:
            continue
        if any(raw in previous.raw for previous in captured):
            continue
        data = decode_value(raw)
        if data is None:
            continue
        item = ExtractedItem(kind="standalone_json", data=data, start_position=start)
        captured.append(_Captured(raw=raw, item=item))

    if not captured:
        data = decode_value(text)
        if data is not None:
            captured.append(_Captured(raw=text, item=ExtractedItem(kind="whole_text", data=data)))

    return [entry.item for entry in captured]


def _error_chunk(occurrence: ErrorOccurrence) -> DecodedChunk:
    return DecodedChunk(
        chunk_id=ChunkId.ERROR,
        extracted_items=[],
        occurrence_count=1,
        positions=[occurrence.position],
        raw_content=occurrence.raw_content,
        error=occurrence.error_message,
    )
