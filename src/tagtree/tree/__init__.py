"""Tree model, lookups and teardown for parsed markup.

Key Components:
    Node: Element (or synthetic document root) with text, attributes and children
    Attribute: Key/value pair owned by a node
    GrowableSequence: Append-only storage for children and attributes
    ParseResult: Tree or error produced by a parse
    child_at, find_tag, find_by_path, attr: Single-match lookups
    destroy: Whole-tree teardown
"""

from .sequence import GrowableSequence
from .node import ROOT_TAG, Attribute, Node
from .query import attr, child_at, find_by_path, find_tag
from .result import ParseResult
from .teardown import destroy

__all__ = [
    "ROOT_TAG",
    "Attribute",
    "GrowableSequence",
    "Node",
    "ParseResult",
    "attr",
    "child_at",
    "destroy",
    "find_by_path",
    "find_tag",
]
