"""Tree data model for mindtree.

Snapshots are immutable: a `Tree` and its `Node` values are frozen, and the
id mapping is exposed read-only. Every change builds a new snapshot.
"""

import uuid
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Optional, List, Dict, Tuple, Mapping, Iterator


DEFAULT_NODE_TEXT = "New Idea"


def new_node_id() -> str:
    """Generate a fresh, unique node id."""
    return f"node-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Node:
    """A single text unit in the tree."""
    id: str
    text: str = DEFAULT_NODE_TEXT
    parent_id: Optional[str] = None
    children: Tuple[str, ...] = ()
    is_expanded: bool = True
    depth: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def evolve(self, **changes) -> "Node":
        """Return a copy with the given fields replaced."""
        if "children" in changes:
            changes["children"] = tuple(changes["children"])
        return replace(self, **changes)


@dataclass(frozen=True)
class Tree:
    """Represents a whole mind map at one point in time."""
    root_id: str
    nodes: Mapping[str, Node] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mapping so snapshots held by history can't drift
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return self.root_id == other.root_id and dict(self.nodes) == dict(other.nodes)

    def __hash__(self) -> int:
        return hash((self.root_id, frozenset(self.nodes.items())))

    @property
    def root(self) -> Node:
        return self.nodes[self.root_id]

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def with_nodes(self, updates: Mapping[str, Node], removed: Tuple[str, ...] = ()) -> "Tree":
        """Build a new snapshot with some nodes replaced, added or removed."""
        nodes: Dict[str, Node] = dict(self.nodes)
        nodes.update(updates)
        for node_id in removed:
            nodes.pop(node_id, None)
        return Tree(root_id=self.root_id, nodes=nodes)

    def ancestors(self, node_id: str) -> Iterator[str]:
        """Yield the ids on the parent chain of node_id, nearest first.

        Stops early if the chain revisits an id, so a corrupted snapshot
        can't make the walk spin forever.
        """
        seen = {node_id}
        current = self.get(node_id)
        while current is not None and current.parent_id is not None:
            parent_id = current.parent_id
            if parent_id in seen:
                return
            seen.add(parent_id)
            yield parent_id
            current = self.get(parent_id)

    def is_descendant(self, node_id: str, potential_ancestor_id: str) -> bool:
        """Check if node_id lies in the subtree below potential_ancestor_id."""
        return any(a == potential_ancestor_id for a in self.ancestors(node_id))

    def walk(self, node_id: Optional[str] = None, expanded_only: bool = False) -> Iterator[Node]:
        """Depth-first pre-order walk, children in display order."""
        start = self.get(node_id if node_id is not None else self.root_id)
        if start is None:
            return
        stack: List[Node] = [start]
        seen = set()
        while stack:
            node = stack.pop()
            if node.id in seen:
                continue
            seen.add(node.id)
            yield node
            if expanded_only and not node.is_expanded:
                continue
            for child_id in reversed(node.children):
                child = self.nodes.get(child_id)
                if child is not None:
                    stack.append(child)

    def subtree_ids(self, node_id: str) -> List[str]:
        """Ids of node_id and all of its descendants, pre-order."""
        return [n.id for n in self.walk(node_id)]


def build_tree(root_id: str, outline: Mapping[str, Tuple[str, List[str]]]) -> Tree:
    """Build a consistent tree from {id: (text, [child ids])}.

    Parent ids and depths are derived from the children lists.
    """
    nodes: Dict[str, Node] = {}

    def add(node_id: str, parent_id: Optional[str], depth: int):
        text, children = outline[node_id]
        nodes[node_id] = Node(
            id=node_id,
            text=text,
            parent_id=parent_id,
            children=tuple(children),
            depth=depth,
        )
        for child_id in children:
            add(child_id, node_id, depth + 1)

    add(root_id, None, 0)
    return Tree(root_id=root_id, nodes=nodes)


def sample_tree() -> Tree:
    """The starter map shown to a new user."""
    return build_tree("root", {
        "root": ("Central Topic", ["child-1", "child-2", "child-3"]),
        "child-1": ("Strategy", ["sub-1", "sub-2"]),
        "child-2": ("Design", []),
        "child-3": ("Development", ["sub-3"]),
        "sub-1": ("Market Analysis", []),
        "sub-2": ("Goals 2024", []),
        "sub-3": ("React Stack", []),
    })


def single_node_tree(text: str = "Central Topic", root_id: str = "root") -> Tree:
    """A map holding only its root."""
    return Tree(root_id=root_id, nodes={root_id: Node(id=root_id, text=text)})


def validate_tree(tree: Tree) -> List[str]:
    """Return a description of every invariant violation in tree.

    An empty list means the snapshot is consistent.
    """
    problems: List[str] = []

    roots = [n.id for n in tree.nodes.values() if n.parent_id is None]
    if len(roots) != 1:
        problems.append(f"expected exactly one root, found {sorted(roots)}")
    if tree.root_id not in tree.nodes:
        problems.append(f"root id {tree.root_id!r} missing from nodes")
    elif tree.root.parent_id is not None:
        problems.append(f"root {tree.root_id!r} has a parent")

    for node in tree.nodes.values():
        if node.parent_id is not None and node.parent_id not in tree.nodes:
            problems.append(f"{node.id!r} points at missing parent {node.parent_id!r}")
        if len(set(node.children)) != len(node.children):
            problems.append(f"{node.id!r} lists a child twice")
        for child_id in node.children:
            child = tree.get(child_id)
            if child is None:
                problems.append(f"{node.id!r} lists missing child {child_id!r}")
            elif child.parent_id != node.id:
                problems.append(f"{child_id!r} is listed under {node.id!r} but has parent {child.parent_id!r}")

    for node in tree.nodes.values():
        chain = [node.id]
        current = node
        while current.parent_id is not None:
            if current.parent_id in chain:
                problems.append(f"cycle through {node.id!r}")
                break
            chain.append(current.parent_id)
            current = tree.get(current.parent_id)
            if current is None:
                break
        else:
            if node.depth != len(chain) - 1:
                problems.append(f"{node.id!r} has depth {node.depth}, expected {len(chain) - 1}")

    return problems
