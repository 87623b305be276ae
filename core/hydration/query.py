"""Key statistics and key-pattern search over decoded chunks.

Both walks use an explicit stack and visit nodes in the same pre-order a
recursive walk would, so output order is deterministic.
"""

from __future__ import annotations

from collections import Counter

from core.hydration.models import DecodedChunk, KeyMatch, StructuredValue

DEFAULT_MAX_DEPTH = 3
DEFAULT_INTERNAL_PREFIX = "_"


def collect_keys(
    chunks: list[DecodedChunk],
    max_depth: int = DEFAULT_MAX_DEPTH,
    *,
    internal_prefix: str = DEFAULT_INTERNAL_PREFIX,
) -> dict[str, int]:
    """Count object keys in all extracted items, most frequent first.

    Objects nested deeper than ``max_depth`` are not inspected. Keys starting
    with ``internal_prefix`` are skipped along with their values.
    """

    counter: Counter[str] = Counter()

    for chunk in chunks:
        for item in chunk.extracted_items:
            if item.data is None:
                continue
            # (key, value, depth at which value is inspected)
            stack: list[tuple[str | None, StructuredValue, int]] = [(None, item.data, 0)]
            while stack:
                key, value, depth = stack.pop()
                if key is not None:
                    counter[key] += 1
                if depth > max_depth:
                    continue
                if isinstance(value, dict):
                    entries = [
                        (str(child_key), child, depth + 1)
                        for child_key, child in value.items()
                        if not str(child_key).startswith(internal_prefix)
                    ]
                    stack.extend(reversed(entries))
                elif isinstance(value, list):
                    stack.extend((None, child, depth + 1) for child in reversed(value))

    return dict(counter.most_common())


def find_by_pattern(chunks: list[DecodedChunk], pattern: str) -> list[KeyMatch]:
    """Find keys containing ``pattern`` (case-insensitive) with their paths.

    Paths start at ``chunk_<id>``; object keys add ``.key`` and list items add
    ``[index]``.
    """

    needle = pattern.lower()
    results: list[KeyMatch] = []

    for chunk in chunks:
        for item in chunk.extracted_items:
            if item.data is None:
                continue
            stack: list[tuple[str | None, StructuredValue, str]] = [
                (None, item.data, f"chunk_{chunk.chunk_id}")
            ]
            while stack:
                key, value, path = stack.pop()
                if key is not None and needle in key.lower():
                    results.append(KeyMatch(path=path, key=key, value=value))
                if isinstance(value, dict):
                    entries = [
                        (str(child_key), child, f"{path}.{child_key}")
                        for child_key, child in value.items()
                    ]
                    stack.extend(reversed(entries))
                elif isinstance(value, list):
                    stack.extend(
                        (None, child, f"{path}[{index}]")
                        for index, child in reversed(list(enumerate(value)))
                    )

    return results
