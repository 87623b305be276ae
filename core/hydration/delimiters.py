"""Quote-aware delimiter scanning for push-call arguments and payload text.

Two small lexers live here:

- ``find_top_level_comma`` splits ``<identifier>, <payload>`` call arguments.
- ``extract_balanced`` cuts one complete ``{...}`` or ``[...]`` region out of
  payload text that may continue with unrelated content.
"""

from __future__ import annotations

_QUOTE_CHARS = frozenset({'"', "'"})
_PAIRS = {"{": "}", "[": "]"}


def find_top_level_comma(text: str) -> int:
    """Return the offset of the first comma outside quotes and nesting, or -1.

    Single and double quotes both open a quoted context which only the same
    quote character closes. A backslash escapes the following character
    anywhere in the text.
    """

    quote_char: str | None = None
    escape_next = False
    paren_depth = 0
    bracket_depth = 0
    brace_depth = 0

    for index, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char in _QUOTE_CHARS:
            if quote_char is None:
                quote_char = char
            elif char == quote_char:
                quote_char = None
            continue

        if quote_char is not None:
            continue

        if char == "(":
            paren_depth += 1
        elif char == ")":
            paren_depth -= 1
        elif char == "[":
            bracket_depth += 1
        elif char == "]":
            bracket_depth -= 1
        elif char == "{":
            brace_depth += 1
        elif char == "}":
            brace_depth -= 1
        elif char == "," and paren_depth == 0 and bracket_depth == 0 and brace_depth == 0:
            return index

    return -1


def extract_balanced(text: str, start: int = 0) -> str | None:
    """Return the shortest balanced object/array starting at ``start``.

    Leading whitespace is skipped and the returned region begins at the
    opening character. Only double quotes delimit strings here. ``None`` is
    returned when the first non-space character does not open a structure or
    when the structure is never closed.
    """

    length = len(text)
    begin = start
    while begin < length and text[begin].isspace():
        begin += 1

    if begin >= length:
        return None

    open_char = text[begin]
    close_char = _PAIRS.get(open_char)
    if close_char is None:
        return None

    depth = 0
    in_string = False
    escape_next = False

    for index in range(begin, length):
        char = text[index]

        if escape_next:
            escape_next = False
            continue

        if char == "\\" and in_string:
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[begin : index + 1]

    return None
