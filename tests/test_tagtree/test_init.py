"""Test module for tagtree package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    import tagtree

    assert tagtree is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    import tagtree

    assert isinstance(tagtree.__version__, str)
    assert tagtree.__version__ == "0.1.0"


def test_package_exports_core_operations() -> None:
    """Test that the parse, query and teardown operations are exported."""
    import tagtree

    for name in (
        "parse_text",
        "parse_file",
        "child_at",
        "find_tag",
        "find_by_path",
        "attr",
        "destroy",
    ):
        assert name in tagtree.__all__
        assert callable(getattr(tagtree, name))


def test_top_level_round_trip() -> None:
    """Test the documented parse-query-destroy flow through the package namespace."""
    import tagtree

    result = tagtree.parse_text('<a><b>hi</b></a>')
    assert tagtree.find_tag(result.root, "b").text == "hi"
    assert tagtree.destroy(result) == 3
