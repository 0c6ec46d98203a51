"""Whole-tree teardown."""

from typing import List, Tuple, Union

from tagtree.tree.node import Node
from tagtree.tree.result import ParseResult


def destroy(tree: Union[Node, ParseResult, None]) -> int:
    """Release a tree bottom-up and return the number of nodes torn down.

    Accepts a root node, a ``ParseResult`` (whose tree is detached first) or
    None. Children are always emptied before the sequence that held them, and
    the parent link is cleared but never followed. Tags are kept, so an
    emptied root is still a valid ``Node``. Calling it again on the
    same root only visits the now childless root.
    """
    if isinstance(tree, ParseResult):
        tree = tree.release_root()
    if tree is None:
        return 0

    released = 0
    stack: List[Tuple[Node, bool]] = [(tree, False)]
    while stack:
        node, children_done = stack.pop()
        if not children_done:
            node.text = None
            node.attributes.release()
            stack.append((node, True))
            stack.extend((child, False) for child in node.children)
            continue
        node.children.release()
        node._parent = None
        released += 1
    return released
