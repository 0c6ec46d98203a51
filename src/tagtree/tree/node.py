"""Node and attribute model for parsed markup trees.

A tree is owned top-down: each ``Node`` owns its text, its attributes and its
child subtrees. The ``parent`` link is a weak reference kept for navigation
only, so a tree never forms a reference cycle and is released as a unit.
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from tagtree.shared.config import DEFAULT_ROOT_TAG
from tagtree.tree import query
from tagtree.tree.sequence import GrowableSequence

ROOT_TAG = DEFAULT_ROOT_TAG


@dataclass(frozen=True)
class Attribute:
    """Tag attribute, e.g. ``key="value"`` in ``<tag key="value">``."""

    key: str
    value: str


@dataclass(eq=False)
class Node:
    """One element of a parsed document, or the synthetic document root.

    Attributes:
        tag: Element name (the root carries ``ROOT_TAG`` unless configured otherwise)
        text: Trimmed inner text; None unless the element had a text run and
            no element children
        attributes: Attributes in document order, duplicate keys allowed
        children: Child elements in document order

    Only the root keeps a tree alive. A node held on its own after the root
    (or the ``ParseResult`` owning it) is dropped loses its parent: ``parent``
    becomes None and ``depth`` and ``path`` are then measured from that node.
    """

    tag: str
    text: Optional[str] = None
    attributes: GrowableSequence[Attribute] = field(
        default_factory=GrowableSequence, repr=False
    )
    children: GrowableSequence["Node"] = field(
        default_factory=GrowableSequence, repr=False
    )
    _parent: Optional["weakref.ReferenceType[Node]"] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("Node tag cannot be empty")

    @property
    def parent(self) -> Optional["Node"]:
        """Enclosing node, or None for the root.

        Also None once the tree holding this node has been released.
        """
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_root(self) -> bool:
        return self._parent is None

    def new_child(self, tag: str) -> "Node":
        """Create a node named ``tag`` as the last child of this node."""
        child = Node(tag=tag)
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def add_attribute(self, key: str, value: str) -> Attribute:
        attribute = Attribute(key, value)
        self.attributes.append(attribute)
        return attribute

    @property
    def depth(self) -> int:
        """Distance from the root (root = 0)."""
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = current.parent
        return depth

    @property
    def path(self) -> str:
        """Slash-separated tag path from the top-level element to this node.

        The result can be fed back to ``find_by_path`` on the root, which
        resolves it to this node when no earlier sibling shares a tag on the way.
        """
        tags: List[str] = []
        current: Optional[Node] = self
        while current is not None and not current.is_root:
            tags.append(current.tag)
            current = current.parent
        return "/".join(reversed(tags))

    def iter(self) -> Iterator["Node"]:
        """Yield this node and all descendants in document (pre-order) order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children)))

    def child_at(self, index: int) -> Optional["Node"]:
        return query.child_at(self, index)

    def find_tag(self, name: str, exact: bool = True) -> Optional["Node"]:
        return query.find_tag(self, name, exact)

    def find_by_path(self, path: str, exact: bool = True) -> Optional["Node"]:
        return query.find_by_path(self, path, exact)

    def attr(self, key: str) -> Optional[str]:
        return query.attr(self, key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to nested dictionaries (for inspection and tests)."""
        result: Dict[str, Any] = {"tag": self.tag}
        if self.text is not None:
            result["text"] = self.text
        if len(self.attributes):
            result["attributes"] = [[a.key, a.value] for a in self.attributes]
        if len(self.children):
            result["children"] = [child.to_dict() for child in self.children]
        return result
