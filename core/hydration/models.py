"""Data models for hydration payload scanning and chunk assembly."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, TypeAlias, Union

StructuredValue: TypeAlias = Union[
    None,
    bool,
    int,
    float,
    str,
    list["StructuredValue"],
    dict[str, "StructuredValue"],
]

ChunkIdKind = Literal["numeric", "textual", "unknown", "error"]
ItemKind = Literal["colon_separated", "standalone_json", "whole_text"]


@dataclass(frozen=True)
class ChunkId:
    """Grouping key shared by all push calls of one logical chunk."""

    kind: ChunkIdKind
    value: int | str

    UNKNOWN: ClassVar[ChunkId]
    ERROR: ClassVar[ChunkId]

    @classmethod
    def numeric(cls, value: int) -> ChunkId:
        return cls(kind="numeric", value=value)

    @classmethod
    def textual(cls, value: str) -> ChunkId:
        return cls(kind="textual", value=value)

    @classmethod
    def from_value(cls, value: StructuredValue) -> ChunkId:
        """Map a decoded identifier literal onto a chunk id."""

        if isinstance(value, int) and not isinstance(value, bool):
            return cls.numeric(value)
        if isinstance(value, str):
            return cls.textual(value)
        return cls.textual(json.dumps(value, ensure_ascii=False, sort_keys=True))

    @property
    def is_error(self) -> bool:
        return self.kind == "error"

    def __str__(self) -> str:
        return str(self.value)


ChunkId.UNKNOWN = ChunkId(kind="unknown", value="unknown")
ChunkId.ERROR = ChunkId(kind="error", value="error")


@dataclass(frozen=True)
class RawOccurrence:
    """One decoded push call before reassembly."""

    chunk_id: ChunkId
    raw_payload: str
    position: int


@dataclass(frozen=True)
class ErrorOccurrence:
    """A push call whose arguments could not be separated."""

    raw_content: str
    position: int
    error_message: str
    chunk_id: ChunkId = ChunkId.ERROR


Occurrence = Union[RawOccurrence, ErrorOccurrence]


@dataclass(frozen=True)
class ExtractedItem:
    """A structured value decoded from a chunk's concatenated payload."""

    kind: ItemKind
    data: StructuredValue
    identifier: str | None = None
    start_position: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.kind, "data": self.data}
        if self.identifier is not None:
            payload["identifier"] = self.identifier
        if self.start_position is not None:
            payload["start_position"] = self.start_position
        return payload


@dataclass(frozen=True)
class DecodedChunk:
    """Per-identifier parse result returned to callers."""

    chunk_id: ChunkId
    extracted_items: list[ExtractedItem] = field(default_factory=list)
    occurrence_count: int = 0
    positions: list[int] = field(default_factory=list)
    raw_content: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chunk_id": self.chunk_id.value,
            "extracted_data": [item.to_dict() for item in self.extracted_items],
            "chunk_count": self.occurrence_count,
            "_positions": list(self.positions),
        }
        if self.chunk_id.is_error:
            payload["raw_content"] = self.raw_content
            payload["_error"] = self.error
        return payload


@dataclass(frozen=True)
class KeyMatch:
    """Key found by a pattern search over decoded chunk data."""

    path: str
    key: str
    value: StructuredValue

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "key": self.key, "value": self.value}
