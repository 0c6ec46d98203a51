"""Exception hierarchy for tagtree.

The parse API never lets these escape: a failure is reported through a
``ParseResult`` whose ``error`` attribute holds the exception instance. Callers
that prefer exceptions can use ``ParseResult.unwrap()``.
"""

from typing import List, Optional

from tagtree.shared.result import ScanPosition


class TagTreeError(Exception):
    """Base exception for all tagtree failures."""


class ParseError(TagTreeError):
    """Malformed markup that the scanner cannot turn into a tree."""

    def __init__(self, message: str, position: Optional[ScanPosition] = None) -> None:
        self.reason = message
        self.position = position
        if position is not None:
            message = f"{message} (at {position})"
        super().__init__(message)


class ResourceError(TagTreeError):
    """The input buffer could not be obtained (missing file, short read, decoding)."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigValidationError(TagTreeError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []
