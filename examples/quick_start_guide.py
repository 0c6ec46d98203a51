#!/usr/bin/env python3
"""
Quick Start Guide for tagtree.

Walks through parsing a small library catalogue, looking nodes up by
position, tag name, path and attribute, handling malformed input, and
releasing the tree afterwards.
"""

import tempfile
from pathlib import Path

import tagtree

CATALOGUE = """<?xml version="1.0" encoding="utf-8"?>
<!-- Library catalogue -->
<library name="City Library">
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


def parsing_and_lookups():
    """Parse a document and query it four ways."""
    print("=" * 60)
    print("Parsing and lookups")
    print("=" * 60)

    result = tagtree.parse_text(CATALOGUE)
    print(f"Success: {result.success}")
    print(f"Elements: {result.element_count}, attributes: {result.attribute_count}")
    print(f"Time: {result.processing_time_ms:.2f}ms")

    root = result.root
    library = tagtree.child_at(root, 0)
    print(f"\nFirst top-level element: <{library.tag}> "
          f"name={tagtree.attr(library, 'name')!r}")

    for index in range(len(library.children)):
        book = tagtree.child_at(library, index)
        title = tagtree.find_tag(book, "title")
        print(f"  book {tagtree.attr(book, 'id')}: {title.text} "
              f"({tagtree.find_tag(book, 'year').text})")

    print(f"\nchild_at(library, 2) -> {tagtree.child_at(library, 2)}")
    print(f"find_by_path('library/book/author') -> "
          f"{tagtree.find_by_path(root, 'library/book/author').text}")
    print(f"find_tag('auth', exact=False) -> "
          f"{tagtree.find_tag(root, 'auth', exact=False).text}")

    released = tagtree.destroy(result)
    print(f"\nReleased {released} nodes")


def malformed_input():
    """Show how failures and tolerated irregularities are reported."""
    print("\n" + "=" * 60)
    print("Malformed input")
    print("=" * 60)

    documents = {
        "unterminated attribute": '<a attr="unterminated',
        "unquoted value": "<a>\n  <b x=1/>\n</a>",
        "mismatched end tag": "<a><b>text</c></a>",
        "unclosed element": "<a><b>text</b>",
    }

    for label, markup in documents.items():
        result = tagtree.parse_text(markup)
        print(f"\n{label}:")
        print(f"  Success: {result.success}")
        if result.error is not None:
            print(f"  Error: {result.error}")
        for diagnostic in result.diagnostics:
            print(f"  {diagnostic.severity.name}: {diagnostic.message}")
        tagtree.destroy(result)

    print("\nStrict end tags turn warnings into failures:")
    strict = tagtree.parse_text("<a><b>text</c></a>", tagtree.ParserConfig.strict())
    print(f"  Success: {strict.success}, error: {strict.error}")


def files_and_reuse():
    """Parse files with a reusable parser."""
    print("\n" + "=" * 60)
    print("Files and parser reuse")
    print("=" * 60)

    parser = tagtree.TagTreeParser(correlation_id="quick-start")
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "catalogue.xml"
        path.write_text(CATALOGUE, encoding="utf-8")

        for candidate in (path, Path(temp_dir) / "missing.xml"):
            result = parser.parse_file(candidate)
            status = "OK" if result.success else f"FAIL ({result.error})"
            print(f"  {candidate.name}: {status}")
            tagtree.destroy(result)

    stats = parser.statistics
    print(f"\nParses: {stats['total_parses']}, "
          f"success rate: {stats['success_rate']:.0%}, "
          f"average time: {stats['average_processing_time_ms']:.2f}ms")


def main():
    parsing_and_lookups()
    malformed_input()
    files_and_reuse()


if __name__ == "__main__":
    main()
