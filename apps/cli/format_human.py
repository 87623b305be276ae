"""Human-readable parse summary rendering for CLI output."""

from __future__ import annotations

from collections import Counter

from core.hydration.models import DecodedChunk

_PREVIEW_CHARS = 60


def render_parse_summary(chunks: list[DecodedChunk]) -> str:
    """Render one-screen human-readable summary of decoded chunks."""

    error_chunks = [chunk for chunk in chunks if chunk.chunk_id.is_error]
    item_total = sum(len(chunk.extracted_items) for chunk in chunks)

    lines: list[str] = []
    lines.append("parse_summary:")
    lines.append(f"chunks={len(chunks)} items={item_total} errors={len(error_chunks)}")

    if not chunks:
        lines.append("no hydration push calls found")
        return "\n".join(lines)

    for chunk in chunks:
        if chunk.chunk_id.is_error:
            continue
        kinds: Counter[str] = Counter(item.kind for item in chunk.extracted_items)
        kinds_text = ", ".join(f"{kind}={kinds[kind]}" for kind in sorted(kinds)) or "none"
        lines.append(
            f"chunk {chunk.chunk_id}: occurrences={chunk.occurrence_count} items: {kinds_text}"
        )

    for chunk in error_chunks:
        position = chunk.positions[0] if chunk.positions else "?"
        lines.append(
            f"error at {position}: {chunk.error} raw={_preview(chunk.raw_content or '')}"
        )

    return "\n".join(lines)


def _preview(text: str) -> str:
    flattened = " ".join(text.split())
    if len(flattened) <= _PREVIEW_CHARS:
        return flattened
    return flattened[: _PREVIEW_CHARS - 3] + "..."
