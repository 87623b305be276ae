"""Custom exceptions for core logic."""

from __future__ import annotations


class ScanFault(Exception):
    """Raised when one push call's arguments hit an unexpected internal fault."""

    def __init__(self, message: str, *, raw_content: str) -> None:
        super().__init__(message)
        self.raw_content = raw_content
