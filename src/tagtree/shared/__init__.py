"""Shared utilities for tagtree.

This module provides the configuration objects, diagnostic types, exceptions
and logging helpers used across the scanner, tree and API layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    ScanPosition,
)
from .errors import (
    ConfigValidationError,
    ParseError,
    ResourceError,
    TagTreeError,
)
from .config import (
    ParserConfig,
    ReaderConfig,
    ScannerConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "ScanPosition",
    "ConfigValidationError",
    "ParseError",
    "ResourceError",
    "TagTreeError",
    "ParserConfig",
    "ReaderConfig",
    "ScannerConfig",
    "CorrelationLogger",
    "get_logger",
]
