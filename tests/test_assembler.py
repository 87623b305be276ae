from __future__ import annotations

from core.hydration.assembler import assemble_chunks, extract_items
from core.hydration.models import ChunkId, ErrorOccurrence, RawOccurrence


def _raw(chunk_id: int | str, payload: str, position: int) -> RawOccurrence:
    if isinstance(chunk_id, int):
        key = ChunkId.numeric(chunk_id)
    else:
        key = ChunkId.textual(chunk_id)
    return RawOccurrence(chunk_id=key, raw_payload=payload, position=position)


def test_extract_standalone_object() -> None:
    items = extract_items('{"name": "Laptop", "price": 10}')

    assert len(items) == 1
    assert items[0].kind == "standalone_json"
    assert items[0].data == {"name": "Laptop", "price": 10}
    assert items[0].start_position == 0
    assert items[0].identifier is None


def test_extract_colon_separated_keeps_identifier() -> None:
    items = extract_items('api_key:{"response": "success"}')

    assert len(items) == 1
    assert items[0].kind == "colon_separated"
    assert items[0].identifier == "api_key"
    assert items[0].data == {"response": "success"}


def test_extract_colon_separated_lines() -> None:
    text = '1:{"a": 1}\n2:{"bb": [1, 2, 3]}\n'

    items = extract_items(text)

    assert [(item.kind, item.identifier, item.data) for item in items] == [
        ("colon_separated", "1", {"a": 1}),
        ("colon_separated", "2", {"bb": [1, 2, 3]}),
    ]


def test_extract_skips_regions_inside_earlier_captures() -> None:
    items = extract_items('{"outer": {"inner": [1, 2, 3, 4]}}')

    kinds = [item.kind for item in items]
    assert "standalone_json" in kinds
    standalone = [item for item in items if item.kind == "standalone_json"]
    assert standalone == [items[-1]]
    assert standalone[0].data == {"outer": {"inner": [1, 2, 3, 4]}}
    assert standalone[0].start_position == 0


def test_extract_multiple_standalone_structures_with_noise() -> None:
    text = 'prefix {"first": 1} junk [10, 20, 30, 40] {} [1]'

    items = extract_items(text)

    assert [(item.data, item.start_position) for item in items] == [
        ({"first": 1}, 7),
        ([10, 20, 30, 40], text.index("[10")),
    ]


def test_extract_keeps_identical_standalone_regions_once() -> None:
    items = extract_items('{"a": "xxxxxx"} {"a": "xxxxxx"}')

    assert [(item.kind, item.data, item.start_position) for item in items] == [
        ("standalone_json", {"a": "xxxxxx"}, 0),
    ]


def test_extract_keeps_distinct_regions_with_equal_values() -> None:
    text = '{"a": "xxxxxx"} {"a":  "xxxxxx"}'

    items = extract_items(text)

    assert [(item.data, item.start_position) for item in items] == [
        ({"a": "xxxxxx"}, 0),
        ({"a": "xxxxxx"}, text.index("{", 1)),
    ]


def test_extract_keeps_repeated_colon_lines_once() -> None:
    items = extract_items('k:{"a": 1}\nk:{"a": 1}\n')

    assert [(item.kind, item.identifier, item.data) for item in items] == [
        ("colon_separated", "k", {"a": 1}),
    ]


def test_extract_honors_min_candidate_length() -> None:
    text = '{"a": 1} {"b": 2}'

    strict_items = extract_items(text, min_candidate_length=20)
    assert all(item.kind == "whole_text" for item in strict_items)
    assert [item.data for item in extract_items(text, min_candidate_length=8)] == [
        {"a": 1},
        {"b": 2},
    ]


def test_extract_whole_text_fallback_for_scalar_payload() -> None:
    items = extract_items('"just a string"')

    assert len(items) == 1
    assert items[0].kind == "whole_text"
    assert items[0].data == "just a string"


def test_extract_empty_text_yields_nothing() -> None:
    assert extract_items("") == []
    assert extract_items("   ") == []


def test_extract_skips_unterminated_structures() -> None:
    items = extract_items('{"incomplete": [1, 2, 3')

    assert all(item.kind == "whole_text" for item in items)


def test_assemble_concatenates_payloads_in_position_order() -> None:
    occurrences = [
        _raw(1, '"y"]}', 50),
        _raw(1, '{"a": ["x",', 10),
    ]

    chunks = assemble_chunks(occurrences)

    assert len(chunks) == 1
    chunk = chunks[0]
    assert chunk.chunk_id == ChunkId.numeric(1)
    assert chunk.occurrence_count == 2
    assert chunk.positions == [10, 50]
    assert chunk.extracted_items[0].data == {"a": ["x", "y"]}


def test_assemble_keeps_first_appearance_order_and_distinct_id_types() -> None:
    occurrences = [
        _raw(2, '{"two": "value"}', 0),
        _raw("1", '{"text": "value"}', 20),
        _raw(1, '{"one": "value"}', 40),
        _raw(2, "", 60),
    ]

    chunks = assemble_chunks(occurrences)

    assert [chunk.chunk_id for chunk in chunks] == [
        ChunkId.numeric(2),
        ChunkId.textual("1"),
        ChunkId.numeric(1),
    ]
    assert chunks[0].occurrence_count == 2
    assert chunks[0].positions == [0, 60]


def test_assemble_keeps_each_error_occurrence_separate() -> None:
    occurrences = [
        _raw(1, '{"valid": "first"}', 0),
        ErrorOccurrence(raw_content="bad one", position=30, error_message="ValueError: x"),
        ErrorOccurrence(raw_content="bad two", position=60, error_message="ValueError: y"),
        _raw(1, "", 90),
    ]

    chunks = assemble_chunks(occurrences)

    assert [chunk.chunk_id for chunk in chunks] == [
        ChunkId.numeric(1),
        ChunkId.ERROR,
        ChunkId.ERROR,
    ]
    first_error, second_error = chunks[1], chunks[2]
    assert first_error.raw_content == "bad one"
    assert first_error.error == "ValueError: x"
    assert first_error.positions == [30]
    assert first_error.occurrence_count == 1
    assert first_error.extracted_items == []
    assert second_error.raw_content == "bad two"
    assert chunks[0].positions == [0, 90]


def test_assemble_empty_input() -> None:
    assert assemble_chunks([]) == []
