"""Tests for the tree data model."""

import pytest

from mindtree.model import (
    Node,
    Tree,
    build_tree,
    sample_tree,
    single_node_tree,
    validate_tree,
)


def _make_tree():
    return build_tree("root", {
        "root": ("Root", ["A", "B"]),
        "A": ("A", ["A1", "A2"]),
        "B": ("B", []),
        "A1": ("A1", []),
        "A2": ("A2", []),
    })


def test_build_tree_derives_parents_and_depths():
    tree = _make_tree()
    assert tree.root.parent_id is None
    assert tree.nodes["A1"].parent_id == "A"
    assert tree.nodes["A1"].depth == 2
    assert tree.nodes["B"].depth == 1
    assert validate_tree(tree) == []


def test_sample_tree_is_consistent():
    tree = sample_tree()
    assert tree.root_id == "root"
    assert tree.root.children == ("child-1", "child-2", "child-3")
    assert validate_tree(tree) == []


def test_single_node_tree():
    tree = single_node_tree("Hello")
    assert len(tree) == 1
    assert tree.root.text == "Hello"
    assert validate_tree(tree) == []


def test_snapshot_is_read_only():
    tree = _make_tree()
    with pytest.raises(TypeError):
        tree.nodes["X"] = Node(id="X")
    with pytest.raises(AttributeError):
        tree.root.text = "changed"


def test_with_nodes_leaves_original_untouched():
    tree = _make_tree()
    updated = tree.with_nodes({"B": tree.nodes["B"].evolve(text="Bee")}, removed=("A2",))
    assert tree.nodes["B"].text == "B"
    assert "A2" in tree
    assert updated.nodes["B"].text == "Bee"
    assert "A2" not in updated


def test_evolve_coerces_children_to_tuple():
    node = Node(id="x").evolve(children=["a", "b"])
    assert node.children == ("a", "b")


def test_equality_is_by_value():
    assert _make_tree() == _make_tree()
    assert hash(_make_tree()) == hash(_make_tree())
    other = _make_tree().with_nodes({"B": Node(id="B", text="other", parent_id="root", depth=1)})
    assert other != _make_tree()


def test_ancestors_nearest_first():
    tree = _make_tree()
    assert list(tree.ancestors("A1")) == ["A", "root"]
    assert list(tree.ancestors("root")) == []


def test_is_descendant():
    tree = _make_tree()
    assert tree.is_descendant("A1", "A")
    assert tree.is_descendant("A1", "root")
    assert not tree.is_descendant("A", "A1")
    assert not tree.is_descendant("B", "A")
    assert not tree.is_descendant("A", "A")


def test_ancestor_walk_terminates_on_cycle():
    """A corrupted snapshot with a parent cycle must not hang the walk."""
    tree = Tree(root_id="r", nodes={
        "r": Node(id="r", children=()),
        "x": Node(id="x", parent_id="y", children=("y",), depth=1),
        "y": Node(id="y", parent_id="x", children=("x",), depth=2),
    })
    assert list(tree.ancestors("x")) == ["y"]
    assert not tree.is_descendant("x", "r")


def test_walk_is_preorder_in_display_order():
    tree = _make_tree()
    assert [n.id for n in tree.walk()] == ["root", "A", "A1", "A2", "B"]
    assert tree.subtree_ids("A") == ["A", "A1", "A2"]


def test_walk_expanded_only_skips_collapsed_children():
    tree = _make_tree()
    tree = tree.with_nodes({"A": tree.nodes["A"].evolve(is_expanded=False)})
    assert [n.id for n in tree.walk(expanded_only=True)] == ["root", "A", "B"]


def test_validate_reports_problems():
    tree = Tree(root_id="r", nodes={
        "r": Node(id="r", children=("a", "ghost")),
        "a": Node(id="a", parent_id="b", depth=1),
        "b": Node(id="b", parent_id=None, depth=0),
    })
    problems = validate_tree(tree)
    assert any("exactly one root" in p for p in problems)
    assert any("missing child 'ghost'" in p for p in problems)
    assert any("'a' is listed under 'r'" in p for p in problems)


def test_validate_reports_wrong_depth():
    tree = _make_tree()
    tree = tree.with_nodes({"A1": tree.nodes["A1"].evolve(depth=5)})
    assert validate_tree(tree) == ["'A1' has depth 5, expected 2"]
