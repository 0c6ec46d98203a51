"""Tests for the public parse API."""

import os
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from tagtree import attr, child_at, destroy, find_by_path, find_tag
from tagtree.api import TagTreeParser, parse_file, parse_text
from tagtree.shared import (
    DiagnosticSeverity,
    ParseError,
    ParserConfig,
    ResourceError,
)

LIBRARY = """<?xml version="1.0"?>
<!-- a small catalogue -->
<library>
    <book id="1" category="fiction">
        <title>The Great Gatsby</title>
        <author>F. Scott Fitzgerald</author>
        <year>1925</year>
    </book>
    <book id="2" category="science">
        <title>A Brief History of Time</title>
        <author>Stephen Hawking</author>
        <year>1988</year>
    </book>
</library>
"""


class TestParseText:
    """Test parsing markup held in memory."""

    def test_library_document(self) -> None:
        """Test a realistic document end to end with every lookup."""
        result = parse_text(LIBRARY)

        assert result.success
        assert result.error is None
        root = result.root
        assert root.find_by_path("library/book/title").text == "The Great Gatsby"
        second = root.child_at(0).child_at(1)
        assert second.attr("id") == "2"
        assert second.find_tag("author").text == "Stephen Hawking"
        assert root.find_tag("yea", exact=False).text == "1925"
        assert result.element_count == 9
        assert result.attribute_count == 4
        assert result.performance.nodes_created == 9
        assert result.performance.characters_processed == len(LIBRARY)

    def test_documented_properties(self) -> None:
        """Test the documented lookup, trimming and failure behavior end to end."""
        result = parse_text('<a><b>hi</b><c x="1"/></a>')
        root = result.root

        assert find_tag(root, "b", True).text == "hi"
        assert attr(find_tag(root, "c", True), "x") == "1"
        assert find_by_path(root, "a/c", True) is find_tag(root, "c", True)

        assert parse_text("<a/>").root.to_dict() == parse_text("<a></a>").root.to_dict()

        prologue = parse_text('<?xml version="1.0"?><!--c--><a/>').root
        assert [child.tag for child in prologue.children] == ["a"]
        assert child_at(prologue, 1) is None

        assert parse_text("<a>  hi   there  </a>").root.child_at(0).text == "hi   there"

        failed = parse_text('<a attr="unterminated')
        assert not failed.success
        assert failed.root is None
        assert isinstance(failed.error, ParseError)

        assert destroy(None) == 0
        assert destroy(result) == 4
        assert destroy(result) == 0

    def test_bytes_input_is_decoded(self) -> None:
        """Test bytes are decoded with the configured encoding."""
        result = parse_text("<a>café</a>".encode("utf-8"))

        assert result.root.child_at(0).text == "café"

    def test_latin1_encoding(self) -> None:
        """Test a non-default encoding from configuration."""
        config = ParserConfig().override(reader__encoding="latin-1")

        result = parse_text("<a>café</a>".encode("latin-1"), config)

        assert result.root.child_at(0).text == "café"

    def test_invalid_bytes_fail(self) -> None:
        """Test undecodable bytes produce a failed result instead of raising."""
        result = parse_text(b"<a>\xff\xfe</a>")

        assert not result.success
        assert result.root is None
        assert isinstance(result.error, ResourceError)
        assert "not valid utf-8" in str(result.error)

    def test_malformed_markup_fails_without_partial_tree(self) -> None:
        """Test a scan error yields no tree and one CRITICAL diagnostic."""
        result = parse_text('<a><b x="1></b></a>')

        assert not result.success
        assert result.root is None
        assert isinstance(result.error, ParseError)
        critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        assert len(critical) == 1
        assert critical[0].component == "api_parser"
        assert critical[0].details == {"error_type": "ParseError"}
        assert critical[0].position["line"] == 1
        assert result.has_errors()

    def test_unwrap_raises_parse_error(self) -> None:
        """Test unwrap turns a failed result back into an exception."""
        with pytest.raises(ParseError, match="Missing tag name"):
            parse_text("<>").unwrap()

    def test_warnings_are_carried_into_result(self) -> None:
        """Test scanner warnings reach the result in permissive mode."""
        result = parse_text("<a><b></a>")

        assert result.success
        assert result.has_warnings()
        assert not result.has_errors()

    def test_strict_config_fails_on_mismatch(self) -> None:
        """Test the strict preset turns a mismatch into a failure."""
        result = parse_text("<a><b></a>", ParserConfig.strict())

        assert not result.success
        assert "does not match" in str(result.error)

    def test_max_input_size(self) -> None:
        """Test input longer than the configured limit is rejected."""
        config = ParserConfig().override(reader__max_input_size=4)

        assert parse_text("<a/>", config).success
        result = parse_text("<ab/>", config)
        assert not result.success
        assert "exceeds limit of 4" in str(result.error)

    def test_correlation_id_is_propagated(self) -> None:
        """Test the correlation ID reaches the result and its diagnostics."""
        result = parse_text("<a>", correlation_id="req-1")

        assert result.correlation_id == "req-1"
        assert result.diagnostics[0].correlation_id == "req-1"

    def test_correlation_id_from_config(self) -> None:
        """Test the configured correlation ID is used when none is passed."""
        result = parse_text("<a/>", ParserConfig(correlation_id="cfg-1"))

        assert result.correlation_id == "cfg-1"

    def test_non_text_input_is_rejected(self) -> None:
        """Test input that is neither text nor bytes raises TypeError."""
        with pytest.raises(TypeError, match="Expected str or bytes"):
            parse_text(["<a/>"])  # type: ignore[arg-type]

    def test_performance_metrics(self) -> None:
        """Test timing and memory figures are filled in."""
        result = parse_text(LIBRARY)

        assert result.processing_time_ms >= 0.0
        assert result.performance.memory_used_bytes >= 0


class TestParseFile:
    """Test parsing files."""

    def test_parse_file(self) -> None:
        """Test a file is read whole and parsed."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "library.xml"
            path.write_text(LIBRARY, encoding="utf-8")

            result = parse_file(path)

        assert result.success
        assert result.source == str(path)
        assert result.root.find_tag("title").text == "The Great Gatsby"
        assert destroy(result) == 10

    def test_missing_file(self) -> None:
        """Test a missing file gives a failed result naming the path."""
        result = parse_file("/nonexistent/library.xml")

        assert not result.success
        assert isinstance(result.error, ResourceError)
        assert result.error.path == "/nonexistent/library.xml"
        assert "File not found" in result.diagnostics[0].message
        assert result.source == "/nonexistent/library.xml"

    def test_directory_is_rejected(self) -> None:
        """Test a directory path is not read."""
        with tempfile.TemporaryDirectory() as temp_dir:
            result = parse_file(temp_dir)

        assert not result.success
        assert "Path is not a file" in str(result.error)

    def test_short_read_fails(self) -> None:
        """Test fewer bytes than the file size reports is a failure."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "doc.xml"
            path.write_text("<a/>", encoding="utf-8")

            with patch(
                "tagtree.api.parser.os.fstat",
                return_value=SimpleNamespace(st_size=999),
            ):
                result = parse_file(path)

        assert not result.success
        assert "Short read" in str(result.error)
        assert "expected 999 bytes, got 4" in str(result.error)

    def test_file_size_limit(self) -> None:
        """Test files larger than the limit are rejected before reading."""
        config = ParserConfig().override(reader__max_input_size=3)
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "doc.xml"
            path.write_text("<a/>", encoding="utf-8")

            result = parse_file(path, config)

        assert not result.success
        assert "exceeds limit of 3" in str(result.error)

    def test_malformed_file(self) -> None:
        """Test a scan error in a file keeps the source on the result."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "bad.xml"
            path.write_bytes(b"<a x=1/>")

            result = parse_file(os.fspath(path))

        assert not result.success
        assert result.source == str(path)
        assert isinstance(result.error, ParseError)


class TestTagTreeParser:
    """Test the configured parser class."""

    def test_statistics(self) -> None:
        """Test parse counts and success rate are tracked."""
        parser = TagTreeParser()

        parser.parse("<a/>")
        parser.parse("<a")
        stats = parser.statistics

        assert stats["total_parses"] == 2
        assert stats["successful_parses"] == 1
        assert stats["success_rate"] == 0.5
        assert stats["average_processing_time_ms"] >= 0.0

    def test_reset_statistics(self) -> None:
        """Test counters return to zero."""
        parser = TagTreeParser()
        parser.parse("<a/>")

        parser.reset_statistics()

        assert parser.statistics["total_parses"] == 0
        assert parser.statistics["success_rate"] == 0.0

    def test_reconfigure(self) -> None:
        """Test a new configuration applies to later parses."""
        parser = TagTreeParser()
        assert parser.parse("<a></b>").success

        parser.reconfigure(ParserConfig.strict())

        assert not parser.parse("<a></b>").success

    def test_correlation_id(self) -> None:
        """Test the parser's correlation ID is attached to each result."""
        parser = TagTreeParser(correlation_id="batch-7")

        assert parser.parse("<a/>").correlation_id == "batch-7"
        assert parser.statistics["correlation_id"] == "batch-7"

    def test_parse_file_counts(self) -> None:
        """Test file parses are included in statistics."""
        parser = TagTreeParser()

        parser.parse_file("/nonexistent.xml")

        assert parser.statistics["total_parses"] == 1
        assert parser.statistics["successful_parses"] == 0
