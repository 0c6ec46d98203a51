"""Read-only lookups over a parsed tree.

Every lookup returns at most one match and reports a miss as None.
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from tagtree.tree.node import Node

PATH_SEPARATOR = "/"


def _matches(tag: str, name: str, exact: bool) -> bool:
    if exact:
        return tag == name
    return name in tag


def child_at(node: Optional["Node"], index: int) -> Optional["Node"]:
    """Return the ``index``-th child of ``node``, or None if out of range."""
    if node is None:
        return None
    return node.children.at(index)


def find_tag(node: Optional["Node"], name: str, exact: bool = True) -> Optional["Node"]:
    """Find the first node whose tag matches ``name`` in pre-order.

    The search starts at ``node`` itself. With ``exact`` False a tag matches
    when it contains ``name`` as a substring.
    """
    if node is None or name is None:
        return None
    stack: List["Node"] = [node]
    while stack:
        current = stack.pop()
        if _matches(current.tag, name, exact):
            return current
        stack.extend(reversed(list(current.children)))
    return None


def find_by_path(
    root: Optional["Node"], path: str, exact: bool = True
) -> Optional["Node"]:
    """Descend from ``root`` along a path such as ``"library/book/title"``.

    At each level only the first direct child matching the segment is
    followed; there is no backtracking to later siblings. Empty segments are
    skipped, so an empty path resolves to ``root``.
    """
    if root is None or path is None:
        return None
    current = root
    for segment in path.split(PATH_SEPARATOR):
        if not segment:
            continue
        match = None
        for child in current.children:
            if _matches(child.tag, segment, exact):
                match = child
                break
        if match is None:
            return None
        current = match
    return current


def attr(node: Optional["Node"], key: str) -> Optional[str]:
    """Return the value of the first attribute named ``key``."""
    if node is None or key is None:
        return None
    for attribute in node.attributes:
        if attribute.key == key:
            return attribute.value
    return None
