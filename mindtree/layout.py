"""Horizontal tree layout.

`compute_layout` is a pure function of the tree snapshot, the draft overlay
and the measurer: the root sits at (0, 0), children fan out to the right,
and every subtree reserves enough vertical room that sibling subtrees never
overlap. Coordinates are node centres.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, List, Dict, Tuple, Mapping, Iterator

from mindtree.measure import MeasureConstraints, TextMeasurer, CharWidthMeasurer
from mindtree.model import Tree
from mindtree.settings import LayoutSettings


@dataclass(frozen=True)
class LayoutNode:
    """A node with its calculated position and dimensions.

    Size and position stay None for nodes hidden under a collapsed
    ancestor.
    """
    id: str
    text: str
    parent_id: Optional[str]
    children: Tuple[str, ...]
    is_expanded: bool
    depth: int
    width: Optional[float] = None
    height: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    subtree_extent: Optional[float] = None

    @property
    def visible(self) -> bool:
        return self.x is not None and self.y is not None

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    def contains_point(self, px: float, py: float, padding: float = 0.0) -> bool:
        """Check if a point is inside this node's box grown by padding."""
        if not self.visible:
            return False
        half_w = self.width / 2 + padding
        half_h = self.height / 2 + padding
        return (self.x - half_w <= px <= self.x + half_w and
                self.y - half_h <= py <= self.y + half_h)


class Layout:
    """Resolved node map produced by `compute_layout`."""

    def __init__(self, root_id: str, nodes: Dict[str, LayoutNode], order: List[str]):
        self.root_id = root_id
        self.nodes = MappingProxyType(nodes)
        self._order = order

    def __getitem__(self, node_id: str) -> LayoutNode:
        return self.nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: Optional[str]) -> Optional[LayoutNode]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    @property
    def root(self) -> LayoutNode:
        return self.nodes[self.root_id]

    def visible_nodes(self) -> List[LayoutNode]:
        """Positioned nodes, depth-first pre-order from the root."""
        return [self.nodes[node_id] for node_id in self._order]

    def positions(self) -> Dict[str, Tuple[float, float, float, float]]:
        """Map each visible id to (x, y, width, height)."""
        return {n.id: (n.x, n.y, n.width, n.height) for n in self.visible_nodes()}

    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Bounding box (min_x, min_y, max_x, max_y) of all visible boxes."""
        visible = self.visible_nodes()
        if not visible:
            return None
        return (
            min(n.x - n.width / 2 for n in visible),
            min(n.y - n.height / 2 for n in visible),
            max(n.x + n.width / 2 for n in visible),
            max(n.y + n.height / 2 for n in visible),
        )


def compute_layout(tree: Tree,
                   measurer: Optional[TextMeasurer] = None,
                   drafts: Optional[Mapping[str, str]] = None,
                   settings: Optional[LayoutSettings] = None) -> Layout:
    """Calculate sizes and positions for every visible node.

    Both passes walk the tree with explicit stacks, so deep chains lay out
    without recursion.
    """
    measurer = measurer or CharWidthMeasurer()
    settings = settings or LayoutSettings()
    drafts = drafts or {}
    constraints = MeasureConstraints(
        max_width=settings.max_width,
        min_width=settings.min_width,
        min_height=settings.min_height,
    )

    texts = {node_id: drafts.get(node_id, node.text) for node_id, node in tree.nodes.items()}
    depths: Dict[str, int] = {}
    sizes: Dict[str, Tuple[float, float]] = {}
    extents: Dict[str, float] = {}
    centres: Dict[str, Tuple[float, float]] = {}
    shown: Dict[str, List[str]] = {}
    order: List[str] = []

    if tree.root_id in tree.nodes:
        # Pass 1a: sizes, pre-order
        stack: List[Tuple[str, Optional[str], int]] = [(tree.root_id, None, 0)]
        while stack:
            node_id, parent_id, depth = stack.pop()
            if node_id in depths:
                continue
            depths[node_id] = depth
            shown[node_id] = []
            if parent_id is not None:
                shown[parent_id].append(node_id)
            order.append(node_id)

            size = measurer(texts[node_id], constraints)
            sizes[node_id] = (
                max(settings.min_width, min(settings.max_width, size.width)),
                max(settings.min_height, size.height),
            )
            node = tree.nodes[node_id]
            if node.is_expanded:
                for child_id in reversed(node.children):
                    if child_id in tree.nodes:
                        stack.append((child_id, node_id, depth + 1))

        # Pass 1b: subtree extents, children before parents
        for node_id in reversed(order):
            children = shown[node_id]
            height = sizes[node_id][1]
            if not children:
                extents[node_id] = height
                continue
            total = sum(extents[c] for c in children)
            total += (len(children) - 1) * settings.vertical_spacing
            extents[node_id] = max(height, total)

        # Pass 2: coordinates, parents before children
        centres[tree.root_id] = (0.0, 0.0)
        for node_id in order:
            x, y = centres[node_id]
            width = sizes[node_id][0]
            cursor = y - extents[node_id] / 2
            for child_id in shown[node_id]:
                child_x = x + width / 2 + settings.horizontal_gap + sizes[child_id][0] / 2
                centres[child_id] = (child_x, cursor + extents[child_id] / 2)
                cursor += extents[child_id] + settings.vertical_spacing

    nodes: Dict[str, LayoutNode] = {}
    for node_id, node in tree.nodes.items():
        width, height = sizes.get(node_id, (None, None))
        x, y = centres.get(node_id, (None, None))
        nodes[node_id] = LayoutNode(
            id=node_id,
            text=texts[node_id],
            parent_id=node.parent_id,
            children=node.children,
            is_expanded=node.is_expanded,
            depth=depths.get(node_id, node.depth),
            width=width,
            height=height,
            x=x,
            y=y,
            subtree_extent=extents.get(node_id),
        )

    return Layout(tree.root_id, nodes, order)
