"""Hydration parse pipeline: scan push calls, then assemble chunks."""

from __future__ import annotations

import logging

from core.hydration.assembler import assemble_chunks
from core.hydration.config import ParserConfig, default_config
from core.hydration.models import ChunkId, DecodedChunk, KeyMatch
from core.hydration.query import collect_keys, find_by_pattern
from core.hydration.scanner import decode_call, scan
from core.utils.log_events import log_event

logger = logging.getLogger("hydration.pipeline")


class HydrationParser:
    """Extracts server-rendered hydration data from raw HTML text."""

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or default_config()
        self.script_pattern = self.config.script_pattern()

    def parse(self, document: str) -> list[DecodedChunk]:
        """Parse every push call in ``document`` into per-id decoded chunks."""

        if not isinstance(document, str):
            raise TypeError(f"document must be str, not {type(document).__name__}")

        occurrences = scan(document, self.script_pattern)
        chunks = assemble_chunks(
            occurrences,
            min_candidate_length=self.config.min_candidate_length,
        )
        log_event(
            logger,
            logging.DEBUG,
            "parse_done",
            chunks=len(chunks),
            items=sum(len(chunk.extracted_items) for chunk in chunks),
            errors=sum(1 for chunk in chunks if chunk.chunk_id.is_error),
            document_chars=len(document),
        )
        return chunks

    def parse_single_chunk(self, arg_text: str) -> tuple[ChunkId, str]:
        return decode_call(arg_text)

    def collect_keys(
        self, chunks: list[DecodedChunk], max_depth: int | None = None
    ) -> dict[str, int]:
        depth = self.config.max_key_depth if max_depth is None else max_depth
        return collect_keys(chunks, depth, internal_prefix=self.config.internal_key_prefix)

    def find_by_pattern(self, chunks: list[DecodedChunk], pattern: str) -> list[KeyMatch]:
        return find_by_pattern(chunks, pattern)


def parse(document: str, config: ParserConfig | None = None) -> list[DecodedChunk]:
    """Parse ``document`` with the given or default configuration."""

    return HydrationParser(config).parse(document)
