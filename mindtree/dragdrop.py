"""Drag-and-drop retargeting.

While a node is dragged, every pointer sample picks a drop target and an
insertion mode; releasing the pointer applies at most one move.
"""

import logging
from enum import Enum
from typing import Optional, Callable, Tuple, Any

from mindtree.layout import Layout, LayoutNode
from mindtree.model import Tree
from mindtree.settings import LayoutSettings
from mindtree.store import DropPosition


logger = logging.getLogger(__name__)

ScreenToWorld = Callable[[float, float], Tuple[float, float]]
MoveCallback = Callable[[str, str, DropPosition], Any]


def identity_transform(x: float, y: float) -> Tuple[float, float]:
    return x, y


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def classify_drop(target: LayoutNode, pointer_y: float,
                  settings: Optional[LayoutSettings] = None) -> DropPosition:
    """Decide where a drop on target lands from the pointer's height.

    The top band inserts before the target, the bottom band after it and
    the middle makes the dragged node a child. The root only takes
    children.
    """
    settings = settings or LayoutSettings()
    if target.parent_id is None:
        return DropPosition.INSIDE

    ratio = (pointer_y - target.top) / target.height if target.height else 0.5
    ratio = max(0.0, min(1.0, ratio))
    if ratio < settings.drop_before_ratio:
        return DropPosition.BEFORE
    if ratio > settings.drop_after_ratio:
        return DropPosition.AFTER
    return DropPosition.INSIDE


def find_drop_target(layout: Layout, tree: Tree, drag_id: str, wx: float, wy: float,
                     padding: float = 0.0) -> Optional[LayoutNode]:
    """First visible node, in depth-first order, whose padded box holds the point.

    The dragged node and its own subtree are never candidates.
    """
    for rendered in layout.visible_nodes():
        if rendered.id == drag_id or tree.is_descendant(rendered.id, drag_id):
            continue
        if rendered.contains_point(wx, wy, padding):
            return rendered
    return None


class DragDropResolver:
    """Idle -> Dragging(drag_id) -> Idle."""

    def __init__(self, on_drop: MoveCallback,
                 screen_to_world: ScreenToWorld = identity_transform,
                 settings: Optional[LayoutSettings] = None):
        self.on_drop = on_drop
        self.screen_to_world = screen_to_world
        self.settings = settings or LayoutSettings()

        self.drag_id: Optional[str] = None
        self.target_id: Optional[str] = None
        self.position: Optional[DropPosition] = None

    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self.drag_id is not None else DragState.IDLE

    @property
    def is_dragging(self) -> bool:
        return self.drag_id is not None

    def begin(self, drag_id: str, tree: Tree) -> bool:
        """Start dragging drag_id; ignored unless idle and the node exists."""
        if self.is_dragging or drag_id not in tree:
            return False
        self.drag_id = drag_id
        self.target_id = None
        self.position = None
        logger.debug("Drag begin: %s", drag_id)
        return True

    def update(self, screen_x: float, screen_y: float, tree: Tree, layout: Layout) -> Optional[DropPosition]:
        """Retarget from a pointer sample; returns the pending drop position."""
        if not self.is_dragging:
            return None

        wx, wy = self.screen_to_world(screen_x, screen_y)
        target = find_drop_target(layout, tree, self.drag_id, wx, wy, self.settings.hit_padding)
        if target is None:
            self.target_id = None
            self.position = None
            return None

        self.target_id = target.id
        self.position = classify_drop(target, wy, self.settings)
        return self.position

    def release(self) -> Any:
        """Apply the pending drop, if any, and return to idle.

        Returns whatever the move callback returned, or None when there was
        nothing to drop.
        """
        result = None
        try:
            if self.is_dragging and self.target_id is not None and self.position is not None:
                logger.debug("Drop: %s %s %s", self.drag_id, self.position.value, self.target_id)
                result = self.on_drop(self.drag_id, self.target_id, self.position)
        finally:
            self.drag_id = None
            self.target_id = None
            self.position = None
        return result
