"""Markup scanning and tree building."""

from .scanner import WHITESPACE, MarkupScanner, ScanReport

__all__ = [
    "WHITESPACE",
    "MarkupScanner",
    "ScanReport",
]
