"""Copy-on-write mutations on tree snapshots.

Every operation takes a `Tree` and returns a `MutationResult`. The input
snapshot is never modified; a rejected operation hands back the very same
snapshot with `changed` set to False and the reason filled in. Rejections
are never raised to the caller.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Callable

from mindtree.model import Tree, Node, DEFAULT_NODE_TEXT, new_node_id


logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


class DropPosition(Enum):
    """Where a moved node lands relative to its target."""
    BEFORE = "before"
    AFTER = "after"
    INSIDE = "inside"


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a tree mutation.

    Attributes
    ----------
    tree
        The resulting snapshot; the input snapshot when nothing changed.
    changed
        Whether the mutation was applied.
    node_id
        The node created or affected, when there is one.
    reason
        Why a rejected mutation did nothing.
    """
    tree: Tree
    changed: bool
    node_id: Optional[str] = None
    reason: str = ""


def _noop(tree: Tree, op: str, reason: str, node_id: Optional[str] = None) -> MutationResult:
    logger.debug("Edit noop: %s %s node=%s", op, reason, node_id)
    return MutationResult(tree=tree, changed=False, node_id=node_id, reason=reason)


def _ok(tree: Tree, op: str, node_id: Optional[str]) -> MutationResult:
    logger.debug("Edit OK: %s node=%s", op, node_id)
    return MutationResult(tree=tree, changed=True, node_id=node_id)


def _redepth(nodes: Dict[str, Node], node_id: str, depth: int):
    """Rewrite depths for a subtree in a working copy of the node map."""
    stack = [(node_id, depth)]
    while stack:
        current_id, current_depth = stack.pop()
        node = nodes[current_id]
        if node.depth != current_depth:
            nodes[current_id] = node.evolve(depth=current_depth)
        for child_id in node.children:
            if child_id in nodes:
                stack.append((child_id, current_depth + 1))


# ==================== Creation ====================

def add_child(tree: Tree, parent_id: str, text: str = DEFAULT_NODE_TEXT,
              id_factory: IdFactory = new_node_id) -> MutationResult:
    """Append a new child to parent_id and expand the parent."""
    parent = tree.get(parent_id)
    if parent is None:
        return _noop(tree, "add_child", "parent_not_found", parent_id)

    node_id = id_factory()
    if node_id in tree:
        return _noop(tree, "add_child", "duplicate_id", node_id)

    new_node = Node(id=node_id, text=text, parent_id=parent.id, depth=parent.depth + 1)
    updated_parent = parent.evolve(children=parent.children + (node_id,), is_expanded=True)
    return _ok(tree.with_nodes({node_id: new_node, parent.id: updated_parent}), "add_child", node_id)


def add_sibling(tree: Tree, ref_id: str, text: str = DEFAULT_NODE_TEXT,
                id_factory: IdFactory = new_node_id) -> MutationResult:
    """Insert a new node right after ref_id under the same parent."""
    ref = tree.get(ref_id)
    if ref is None:
        return _noop(tree, "add_sibling", "node_not_found", ref_id)
    # Can't create sibling of root
    if ref.parent_id is None:
        return _noop(tree, "add_sibling", "root_has_no_siblings", ref_id)
    parent = tree.get(ref.parent_id)
    if parent is None or ref_id not in parent.children:
        return _noop(tree, "add_sibling", "detached_node", ref_id)

    node_id = id_factory()
    if node_id in tree:
        return _noop(tree, "add_sibling", "duplicate_id", node_id)

    children = list(parent.children)
    children.insert(children.index(ref_id) + 1, node_id)
    new_node = Node(id=node_id, text=text, parent_id=parent.id, depth=parent.depth + 1)
    return _ok(
        tree.with_nodes({node_id: new_node, parent.id: parent.evolve(children=children)}),
        "add_sibling",
        node_id,
    )


# ==================== Content ====================

def update_text(tree: Tree, node_id: str, text: str) -> MutationResult:
    """Replace a node's text."""
    node = tree.get(node_id)
    if node is None:
        return _noop(tree, "update_text", "node_not_found", node_id)
    return _ok(tree.with_nodes({node_id: node.evolve(text=text)}), "update_text", node_id)


def toggle_collapse(tree: Tree, node_id: str) -> MutationResult:
    """Flip a node's expanded flag."""
    node = tree.get(node_id)
    if node is None:
        return _noop(tree, "toggle_collapse", "node_not_found", node_id)
    return _ok(
        tree.with_nodes({node_id: node.evolve(is_expanded=not node.is_expanded)}),
        "toggle_collapse",
        node_id,
    )


# ==================== Structure ====================

def delete_node(tree: Tree, node_id: str) -> MutationResult:
    """Remove a node and its whole subtree.

    The result's node_id is the former parent, which takes the selection.
    """
    node = tree.get(node_id)
    if node is None:
        return _noop(tree, "delete_node", "node_not_found", node_id)
    # Can't delete root
    if node.parent_id is None:
        return _noop(tree, "delete_node", "cannot_delete_root", node_id)

    updates: Dict[str, Node] = {}
    parent = tree.get(node.parent_id)
    if parent is not None:
        updates[parent.id] = parent.evolve(children=[c for c in parent.children if c != node_id])

    removed = tuple(tree.subtree_ids(node_id))
    result = tree.with_nodes(updates, removed=removed)
    logger.debug("Edit: delete_node removed %d entries", len(removed))
    return _ok(result, "delete_node", node.parent_id)


def move_node(tree: Tree, drag_id: str, target_id: str, position) -> MutationResult:
    """Reparent or reorder drag_id relative to target_id.

    position is a DropPosition or its string value. Moves that would put a
    node inside its own subtree, move the root, or give the root a sibling
    are rejected.
    """
    position = DropPosition(position)

    if drag_id == target_id:
        return _noop(tree, "move_node", "target_is_self", drag_id)
    drag = tree.get(drag_id)
    target = tree.get(target_id)
    if drag is None or target is None:
        return _noop(tree, "move_node", "node_not_found", drag_id)
    if drag.parent_id is None:
        return _noop(tree, "move_node", "cannot_move_root", drag_id)
    if tree.is_descendant(target_id, drag_id):
        return _noop(tree, "move_node", "target_in_own_subtree", drag_id)
    if position is not DropPosition.INSIDE and target.parent_id is None:
        return _noop(tree, "move_node", "root_has_no_siblings", drag_id)

    nodes: Dict[str, Node] = dict(tree.nodes)

    old_parent = nodes.get(drag.parent_id)
    if old_parent is not None:
        nodes[old_parent.id] = old_parent.evolve(
            children=[c for c in old_parent.children if c != drag_id]
        )

    if position is DropPosition.INSIDE:
        target = nodes[target_id]
        nodes[target_id] = target.evolve(children=target.children + (drag_id,), is_expanded=True)
        new_parent_id = target_id
    else:
        new_parent_id = target.parent_id
        new_parent = nodes.get(new_parent_id)
        if new_parent is None or target_id not in new_parent.children:
            return _noop(tree, "move_node", "detached_target", drag_id)
        children = list(new_parent.children)
        index = children.index(target_id)
        if position is DropPosition.AFTER:
            index += 1
        children.insert(index, drag_id)
        nodes[new_parent_id] = new_parent.evolve(children=children)

    nodes[drag_id] = drag.evolve(parent_id=new_parent_id)
    _redepth(nodes, drag_id, nodes[new_parent_id].depth + 1)
    logger.info("Edit OK: move_node %s %s %s", drag_id, position.value, target_id)
    return MutationResult(tree=Tree(root_id=tree.root_id, nodes=nodes), changed=True, node_id=drag_id)


# ==================== Clipboard ====================

def paste_subtree(tree: Tree, source: Tree, source_id: str, parent_id: str,
                  id_factory: IdFactory = new_node_id) -> MutationResult:
    """Graft a copy of source's subtree at source_id under parent_id.

    Every copied node gets a fresh id; the copy's root is appended to the
    parent's children and the parent is expanded.
    """
    parent = tree.get(parent_id)
    if parent is None:
        return _noop(tree, "paste_subtree", "parent_not_found", parent_id)
    if source.get(source_id) is None:
        return _noop(tree, "paste_subtree", "source_not_found", source_id)

    id_map: Dict[str, str] = {}
    for src in source.walk(source_id):
        new_id = id_factory()
        if new_id in tree or new_id in id_map.values():
            return _noop(tree, "paste_subtree", "duplicate_id", new_id)
        id_map[src.id] = new_id

    updates: Dict[str, Node] = {}
    for src in source.walk(source_id):
        is_top = src.id == source_id
        updates[id_map[src.id]] = Node(
            id=id_map[src.id],
            text=src.text,
            parent_id=parent_id if is_top else id_map[src.parent_id],
            children=tuple(id_map[c] for c in src.children if c in id_map),
            is_expanded=src.is_expanded,
            depth=0,
        )
    updates[parent_id] = parent.evolve(children=parent.children + (id_map[source_id],), is_expanded=True)

    nodes = dict(tree.nodes)
    nodes.update(updates)
    _redepth(nodes, id_map[source_id], parent.depth + 1)
    return _ok(Tree(root_id=tree.root_id, nodes=nodes), "paste_subtree", id_map[source_id])
