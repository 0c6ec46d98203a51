"""tagtree.

Single-pass scanner that turns XML-like markup into a tree of tagged nodes,
with single-match lookups by position, tag name, path and attribute key.

Typical use:
- ``parse_text()`` / ``parse_file()`` to obtain a ``ParseResult``
- ``child_at()``, ``find_tag()``, ``find_by_path()``, ``attr()`` to query it
- ``destroy()`` to release the tree when done
"""

__version__ = "0.1.0"
__author__ = "tagtree team"

from .api import TagTreeParser, parse_file, parse_text
from .shared.config import ParserConfig, ReaderConfig, ScannerConfig
from .shared.errors import ParseError, ResourceError, TagTreeError
from .tree import (
    ROOT_TAG,
    Attribute,
    Node,
    ParseResult,
    attr,
    child_at,
    destroy,
    find_by_path,
    find_tag,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Parsing
    "parse_text",
    "parse_file",
    "TagTreeParser",

    # Tree and lookups
    "ROOT_TAG",
    "Attribute",
    "Node",
    "ParseResult",
    "attr",
    "child_at",
    "destroy",
    "find_by_path",
    "find_tag",

    # Configuration and errors
    "ParserConfig",
    "ReaderConfig",
    "ScannerConfig",
    "ParseError",
    "ResourceError",
    "TagTreeError",
]
