"""CLI I/O helpers for document reading and atomic output writing."""

from __future__ import annotations

import json
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.hydration.models import DecodedChunk


@dataclass(frozen=True)
class OutputPaths:
    """Fixed output artifact paths for a single parse run."""

    chunks: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    """Build fixed output file paths under out_dir."""

    return OutputPaths(chunks=out_dir / "out.chunks.json")


def existing_output_files(paths: OutputPaths) -> list[Path]:
    """Return existing output files among fixed artifact paths."""

    return [path for path in (paths.chunks,) if path.exists()]


def read_document(path: Path) -> str:
    """Read an HTML document, replacing undecodable bytes."""

    return path.read_bytes().decode("utf-8", errors="replace")


def chunks_payload(chunks: list[DecodedChunk]) -> dict[str, Any]:
    """Build the JSON document written for one parse run."""

    return {"chunks": [chunk.to_dict() for chunk in chunks]}


def write_chunks_atomic(paths: OutputPaths, chunks: list[DecodedChunk]) -> None:
    """Write decoded chunks atomically using a temporary file + replace."""

    paths.chunks.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(paths.chunks, chunks_payload(chunks))


def _atomic_write_json(path: Path, payload: dict[str, Any]) -> None:
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        prefix=f"{path.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            json.dump(payload, tmp, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        except Exception:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise

    tmp_path.replace(path)
