"""Public parse API.

``parse_text`` and ``parse_file`` never raise for bad input: every failure
(unreadable file, undecodable bytes, malformed markup) comes back as a
``ParseResult`` with ``success`` False, no tree, and a CRITICAL diagnostic.
``TagTreeParser`` wraps the same operations around a reusable configuration.
"""

import os
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

import psutil

from tagtree.scanning import MarkupScanner
from tagtree.shared import (
    DiagnosticSeverity,
    ParseError,
    ParserConfig,
    ReaderConfig,
    ResourceError,
    TagTreeError,
    get_logger,
)
from tagtree.tree import ParseResult

TextInput = Union[str, bytes, bytearray]
PathInput = Union[str, "os.PathLike[str]"]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def _resident_memory() -> int:
    return psutil.Process(os.getpid()).memory_info().rss


def _preview(source: TextInput) -> str:
    if isinstance(source, (bytes, bytearray)):
        source = bytes(source[:PREVIEW_LENGTH]).decode("utf-8", errors="replace")
    elif not isinstance(source, str):
        return f"<{type(source).__name__}>"
    if len(source) > PREVIEW_LENGTH:
        return source[:PREVIEW_LENGTH] + "..."
    return source


def _decode(source: TextInput, reader: ReaderConfig) -> str:
    """Turn caller input into the text buffer the scanner works on."""
    if isinstance(source, str):
        if reader.max_input_size is not None and len(source) > reader.max_input_size:
            raise ResourceError(
                f"Input of {len(source)} characters exceeds limit of "
                f"{reader.max_input_size}"
            )
        return source
    if isinstance(source, (bytes, bytearray)):
        if reader.max_input_size is not None and len(source) > reader.max_input_size:
            raise ResourceError(
                f"Input of {len(source)} bytes exceeds limit of {reader.max_input_size}"
            )
        try:
            return bytes(source).decode(reader.encoding)
        except UnicodeDecodeError as e:
            raise ResourceError(f"Input is not valid {reader.encoding}: {e}") from e
    raise TypeError(
        f"Expected str or bytes input, got {type(source).__name__}"
    )


def _read_file(path_obj: Path, reader: ReaderConfig) -> bytes:
    """Read a whole file, failing on a short read or an oversized file."""
    if not path_obj.exists():
        raise ResourceError(f"File not found: {path_obj}", path=str(path_obj))
    if not path_obj.is_file():
        raise ResourceError(f"Path is not a file: {path_obj}", path=str(path_obj))

    try:
        with path_obj.open("rb") as handle:
            expected = os.fstat(handle.fileno()).st_size
            if reader.max_input_size is not None and expected > reader.max_input_size:
                raise ResourceError(
                    f"File of {expected} bytes exceeds limit of {reader.max_input_size}",
                    path=str(path_obj),
                )
            buffer = handle.read()
    except PermissionError as e:
        raise ResourceError(
            f"Permission denied accessing file: {path_obj}", path=str(path_obj)
        ) from e
    except OSError as e:
        raise ResourceError(
            f"Could not read file {path_obj}: {e}", path=str(path_obj)
        ) from e

    if len(buffer) != expected:
        raise ResourceError(
            f"Short read from {path_obj}: expected {expected} bytes, got {len(buffer)}",
            path=str(path_obj),
        )
    return buffer


def _build(
    text: str,
    config: ParserConfig,
    correlation_id: Optional[str],
    start_time: float,
    memory_before: int,
) -> ParseResult:
    report = MarkupScanner(config.scanner, correlation_id).scan(text)

    result = ParseResult(root=report.root, correlation_id=correlation_id)
    result.diagnostics.extend(report.diagnostics)
    result.performance.characters_processed = report.characters_scanned
    result.performance.nodes_created = report.node_count
    result.performance.attributes_created = report.attribute_count
    result.performance.memory_used_bytes = max(0, _resident_memory() - memory_before)
    result.performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    return result


def _create_error_result(
    error: TagTreeError,
    correlation_id: Optional[str],
    processing_time: float,
    source: Optional[str] = None,
) -> ParseResult:
    """Create a failed result carrying ``error``."""
    result = ParseResult(
        root=None,
        success=False,
        error=error,
        source=source,
        correlation_id=correlation_id,
    )
    result.performance.processing_time_ms = processing_time

    position = getattr(error, "position", None)
    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        str(error),
        "api_parser",
        position=position.to_dict() if position is not None else None,
        details={"error_type": type(error).__name__},
    )
    return result


def parse_text(
    source: TextInput,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse markup held in memory.

    Args:
        source: Markup as text, or bytes in the configured encoding
        config: Parser configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult holding the tree, or the error that prevented one

    Examples:
        >>> result = parse_text('<a><b>hi</b><c x="1"/></a>')
        >>> result.root.find_tag('b').text
        'hi'
        >>> parse_text('<a attr="unterminated').success
        False
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    start_time = time.time()
    memory_before = _resident_memory()
    logger = get_logger(__name__, correlation_id, "parse_text")

    logger.info(
        "Starting text parse operation",
        extra={
            "content_length": len(source),
            "preview": _preview(source),
        }
    )

    try:
        text = _decode(source, config.reader)
        result = _build(text, config, correlation_id, start_time, memory_before)
    except (ParseError, ResourceError) as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.warning("Text parse failed", extra={"error": str(e)})
        return _create_error_result(e, correlation_id, processing_time)
    except MemoryError:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.error("Out of memory while parsing text")
        return _create_error_result(
            ResourceError("Out of memory while parsing"), correlation_id, processing_time
        )

    logger.info(
        "Text parse completed",
        extra={
            "element_count": result.performance.nodes_created,
            "warning_count": len(result.diagnostics),
            "processing_time_ms": result.performance.processing_time_ms,
        }
    )
    return result


def parse_file(
    file_path: PathInput,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Read a whole file into memory and parse it.

    The file handle is closed and the raw buffer dropped before this function
    returns, whether parsing succeeds or not.

    Examples:
        >>> result = parse_file('missing.xml')
        >>> result.success
        False
        >>> 'not found' in result.diagnostics[0].message.lower()
        True
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    start_time = time.time()
    memory_before = _resident_memory()
    logger = get_logger(__name__, correlation_id, "parse_file")

    path_obj = Path(file_path)
    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": config.reader.encoding}
    )

    try:
        buffer = _read_file(path_obj, config.reader)
        try:
            text = _decode(buffer, config.reader)
        finally:
            del buffer
        result = _build(text, config, correlation_id, start_time, memory_before)
    except (ParseError, ResourceError) as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.warning(
            "File parse failed",
            extra={"file_path": str(path_obj), "error": str(e)}
        )
        return _create_error_result(e, correlation_id, processing_time, str(path_obj))
    except MemoryError:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.error("Out of memory while parsing file", extra={"file_path": str(path_obj)})
        return _create_error_result(
            ResourceError("Out of memory while parsing", path=str(path_obj)),
            correlation_id,
            processing_time,
            str(path_obj),
        )

    result.source = str(path_obj)
    logger.info(
        "File parse completed",
        extra={
            "file_path": str(path_obj),
            "element_count": result.performance.nodes_created,
            "processing_time_ms": result.performance.processing_time_ms,
        }
    )
    return result


class TagTreeParser:
    """Configured, reusable parser.

    Holds a configuration and usage counters; each call still builds an
    independent tree.

    Examples:
        >>> parser = TagTreeParser(ParserConfig.strict())
        >>> parser.parse('<a></b>').success
        False
        >>> parser.statistics['total_parses']
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "tagtree_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info(
            "TagTreeParser initialized",
            extra={"config_name": self.config.name}
        )

    def _record(self, result: ParseResult) -> ParseResult:
        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1
        return result

    def parse(self, source: TextInput) -> ParseResult:
        """Parse in-memory markup with this parser's configuration."""
        return self._record(parse_text(source, self.config, self.correlation_id))

    def parse_file(self, file_path: PathInput) -> ParseResult:
        """Parse a file with this parser's configuration."""
        return self._record(parse_file(file_path, self.config, self.correlation_id))

    def reconfigure(self, config: ParserConfig) -> None:
        """Use ``config`` for subsequent parses."""
        self.config = config
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")
