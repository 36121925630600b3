"""Tests for drag-and-drop retargeting."""

import pytest

from mindtree.dragdrop import DragDropResolver, DragState, classify_drop, find_drop_target
from mindtree.layout import compute_layout
from mindtree.measure import Size
from mindtree.model import build_tree
from mindtree.settings import LayoutSettings
from mindtree.store import DropPosition


def _fixed(text, constraints):
    return Size(100.0, 40.0)


def _make_tree():
    # Positions with the fixed measurer:
    # root (0, 0), A (160, -30), A1 (320, -60), A2 (320, 0), B (160, 60)
    return build_tree("root", {
        "root": ("Root", ["A", "B"]),
        "A": ("A", ["A1", "A2"]),
        "B": ("B", []),
        "A1": ("A1", []),
        "A2": ("A2", []),
    })


def _make_resolver(**kwargs):
    drops = []
    resolver = DragDropResolver(on_drop=lambda *args: drops.append(args) or "moved", **kwargs)
    return resolver, drops


def test_classify_drop_bands():
    layout = compute_layout(_make_tree(), _fixed)
    a = layout["A"]  # spans y -50 .. -10
    assert classify_drop(a, -48) is DropPosition.BEFORE
    assert classify_drop(a, -39) is DropPosition.BEFORE
    assert classify_drop(a, -30) is DropPosition.INSIDE
    assert classify_drop(a, -21) is DropPosition.AFTER
    assert classify_drop(a, -12) is DropPosition.AFTER


def test_classify_drop_clamps_outside_box():
    layout = compute_layout(_make_tree(), _fixed)
    a = layout["A"]
    assert classify_drop(a, -500) is DropPosition.BEFORE
    assert classify_drop(a, 500) is DropPosition.AFTER


def test_root_only_accepts_children():
    layout = compute_layout(_make_tree(), _fixed)
    for y in (-19, 0, 19):
        assert classify_drop(layout.root, y) is DropPosition.INSIDE


def test_custom_ratios():
    layout = compute_layout(_make_tree(), _fixed)
    settings = LayoutSettings(drop_before_ratio=0.5, drop_after_ratio=0.5)
    assert classify_drop(layout["A"], -31, settings) is DropPosition.BEFORE
    assert classify_drop(layout["A"], -29, settings) is DropPosition.AFTER


def test_find_target_skips_dragged_subtree():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)
    assert find_drop_target(layout, tree, "A", 320, -60) is None
    assert find_drop_target(layout, tree, "A", 160, -30) is None
    assert find_drop_target(layout, tree, "B", 320, -60).id == "A1"


def test_find_target_first_in_depth_first_order_wins():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)
    # With a huge padding root and A both contain the point
    assert find_drop_target(layout, tree, "B", 100, 0, padding=100).id == "root"
    # A and B both reach y=15 with this padding; A comes first
    assert find_drop_target(layout, tree, "A1", 160, 15, padding=30).id == "A"


def test_hidden_nodes_are_not_targets():
    tree = _make_tree()
    tree = tree.with_nodes({"A": tree.nodes["A"].evolve(is_expanded=False)})
    layout = compute_layout(tree, _fixed)
    for node in layout.visible_nodes():
        assert node.id != "A1"
    assert find_drop_target(layout, tree, "B", 320, -60) is None


def test_state_machine():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)
    resolver, drops = _make_resolver()
    assert resolver.state is DragState.IDLE
    assert resolver.update(160, -30, tree, layout) is None

    assert resolver.begin("B", tree)
    assert resolver.state is DragState.DRAGGING
    assert not resolver.begin("A", tree)
    assert resolver.drag_id == "B"

    assert resolver.update(160, -30, tree, layout) is DropPosition.INSIDE
    assert resolver.target_id == "A"
    assert resolver.release() == "moved"
    assert drops == [("B", "A", DropPosition.INSIDE)]
    assert resolver.state is DragState.IDLE
    assert resolver.target_id is None


def test_begin_unknown_node_is_ignored():
    resolver, _ = _make_resolver()
    assert not resolver.begin("ghost", _make_tree())
    assert resolver.state is DragState.IDLE


def test_moving_off_target_cancels_pending_drop():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)
    resolver, drops = _make_resolver()
    resolver.begin("B", tree)
    resolver.update(320, 0, tree, layout)
    assert resolver.target_id == "A2"
    resolver.update(1000, 1000, tree, layout)
    assert resolver.target_id is None
    assert resolver.position is None
    assert resolver.release() is None
    assert drops == []
    assert resolver.state is DragState.IDLE


def test_last_sample_wins():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)
    resolver, drops = _make_resolver()
    resolver.begin("B", tree)
    resolver.update(320, 0, tree, layout)
    resolver.update(320, -78, tree, layout)
    resolver.release()
    assert drops == [("B", "A1", DropPosition.BEFORE)]


def test_hit_padding_extends_boxes():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)
    resolver, _ = _make_resolver(settings=LayoutSettings(hit_padding=8))
    resolver.begin("B", tree)
    assert resolver.update(160, -55, tree, layout) is DropPosition.BEFORE
    assert resolver.target_id == "A"

    tight, _ = _make_resolver(settings=LayoutSettings(hit_padding=0))
    tight.begin("B", tree)
    assert tight.update(160, -55, tree, layout) is None


def test_screen_to_world_is_applied():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)

    def screen_to_world(x, y):
        return (x - 100) / 2, (y - 50) / 2

    resolver, drops = _make_resolver(screen_to_world=screen_to_world)
    resolver.begin("B", tree)
    resolver.update(420, -10, tree, layout)  # world (160, -30)
    resolver.release()
    assert drops == [("B", "A", DropPosition.INSIDE)]


def test_release_returns_to_idle_when_callback_fails():
    tree = _make_tree()
    layout = compute_layout(tree, _fixed)

    def boom(*args):
        raise RuntimeError("boom")

    resolver = DragDropResolver(on_drop=boom)
    resolver.begin("B", tree)
    resolver.update(160, -30, tree, layout)
    with pytest.raises(RuntimeError):
        resolver.release()
    assert resolver.state is DragState.IDLE
