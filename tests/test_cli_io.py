from __future__ import annotations

import json
from pathlib import Path

import pytest

from apps.cli import io as cli_io
from apps.cli.io import (
    build_output_paths,
    existing_output_files,
    read_document,
    write_chunks_atomic,
)
from core.hydration.models import ChunkId, DecodedChunk, ExtractedItem


def _chunks() -> list[DecodedChunk]:
    return [
        DecodedChunk(
            chunk_id=ChunkId.numeric(1),
            extracted_items=[
                ExtractedItem(kind="colon_separated", data={"a": 1}, identifier="key"),
                ExtractedItem(kind="standalone_json", data=[1, 2], start_position=9),
            ],
            occurrence_count=2,
            positions=[4, 80],
        ),
        DecodedChunk(
            chunk_id=ChunkId.ERROR,
            occurrence_count=1,
            positions=[120],
            raw_content="1,bad",
            error="ValueError: bad",
        ),
    ]


def test_write_chunks_atomic_writes_json(tmp_path: Path) -> None:
    paths = build_output_paths(tmp_path / "nested")

    write_chunks_atomic(paths, _chunks())

    payload = json.loads(paths.chunks.read_text(encoding="utf-8"))
    assert payload["chunks"][0] == {
        "chunk_id": 1,
        "extracted_data": [
            {"type": "colon_separated", "data": {"a": 1}, "identifier": "key"},
            {"type": "standalone_json", "data": [1, 2], "start_position": 9},
        ],
        "chunk_count": 2,
        "_positions": [4, 80],
    }
    assert payload["chunks"][1] == {
        "chunk_id": "error",
        "extracted_data": [],
        "chunk_count": 1,
        "_positions": [120],
        "raw_content": "1,bad",
        "_error": "ValueError: bad",
    }
    assert list(paths.chunks.parent.glob("out.chunks.json.*.tmp")) == []


def test_write_chunks_atomic_cleans_tmp_on_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    paths = build_output_paths(tmp_path)

    def broken_dump(*_: object, **__: object) -> None:
        raise RuntimeError("dump failed")

    monkeypatch.setattr(cli_io.json, "dump", broken_dump)

    with pytest.raises(RuntimeError, match="dump failed"):
        write_chunks_atomic(paths, _chunks())

    assert not paths.chunks.exists()
    assert list(tmp_path.glob("out.chunks.json.*.tmp")) == []


def test_existing_output_files(tmp_path: Path) -> None:
    paths = build_output_paths(tmp_path)
    assert existing_output_files(paths) == []

    paths.chunks.write_text("{}", encoding="utf-8")

    assert existing_output_files(paths) == [paths.chunks]


def test_read_document_replaces_invalid_bytes(tmp_path: Path) -> None:
    path = tmp_path / "page.html"
    path.write_bytes(b"<p>caf\xc3\xa9 \xff</p>")

    assert read_document(path) == "<p>café �</p>"
