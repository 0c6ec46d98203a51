"""Public API for tagtree: parse functions, the configured parser and adapters."""

from .parser import TagTreeParser, parse_file, parse_text
from .adapters import (
    ConversionResult,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    list_adapters,
)

__all__ = [
    "TagTreeParser",
    "parse_file",
    "parse_text",
    "ConversionResult",
    "LxmlAdapter",
    "PandasAdapter",
    "get_adapter",
    "list_adapters",
]
