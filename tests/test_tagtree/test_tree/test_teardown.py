"""Tests for whole-tree teardown."""

from tagtree.tree import ROOT_TAG, Node, ParseResult, destroy


def _chain(depth: int) -> Node:
    root = Node(tag=ROOT_TAG)
    node = root
    for level in range(depth):
        node = node.new_child(f"n{level}")
    return root


class TestDestroy:
    """Test bottom-up release of a tree."""

    def test_none_is_a_no_op(self) -> None:
        """Test destroying nothing releases nothing."""
        assert destroy(None) == 0

    def test_counts_every_node_including_root(self) -> None:
        """Test the return value counts the root and all descendants."""
        root = Node(tag=ROOT_TAG)
        a = root.new_child("a")
        a.new_child("b")
        a.new_child("c")
        root.new_child("d")

        assert destroy(root) == 5

    def test_releases_text_attributes_and_links(self) -> None:
        """Test every node is emptied and detached from its parent."""
        root = Node(tag=ROOT_TAG)
        child = root.new_child("a")
        child.text = "hello"
        child.add_attribute("k", "v")

        destroy(root)

        assert child.text is None
        assert len(child.attributes) == 0
        assert child.parent is None
        assert len(root.children) == 0
        assert root.children.capacity == 1
        assert child.tag == "a"
        assert root.tag == ROOT_TAG

    def test_second_destroy_only_visits_root(self) -> None:
        """Test a destroyed root has no children left to tear down."""
        root = _chain(3)

        assert destroy(root) == 4
        assert destroy(root) == 1

    def test_deep_tree_does_not_recurse(self) -> None:
        """Test teardown of a very deep chain completes without recursion limits."""
        assert destroy(_chain(10000)) == 10001

    def test_destroy_parse_result_detaches_root(self) -> None:
        """Test destroying a result releases its tree and clears result.root."""
        root = _chain(2)
        result = ParseResult(root=root)

        assert destroy(result) == 3
        assert result.root is None
        assert destroy(result) == 0

    def test_destroy_failed_result(self) -> None:
        """Test destroying a result without a tree is a no-op."""
        assert destroy(ParseResult(success=False)) == 0
