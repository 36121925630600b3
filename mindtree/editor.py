"""Editing session for a single mind map.

`MindMapEditor` owns the history, the transient UI state (selection, edit
mode, draft text, drag preview) and the current layout. Every committed
change goes through the tree store and lands in history as exactly one
snapshot; transient state never does.
"""

import logging
from types import MappingProxyType
from typing import Optional, Dict, Callable, Mapping, Tuple, Any

from mindtree import store
from mindtree.dragdrop import DragDropResolver, ScreenToWorld, identity_transform
from mindtree.layout import Layout, LayoutNode, compute_layout
from mindtree.measure import TextMeasurer, CharWidthMeasurer
from mindtree.model import Tree, new_node_id, sample_tree
from mindtree.settings import LayoutSettings, EditorSettings
from mindtree.store import DropPosition, MutationResult
from mindtree.undo import HistoryManager


logger = logging.getLogger(__name__)


class MindMapEditor:
    """Mutation and query surface for one document."""

    def __init__(self, tree: Optional[Tree] = None,
                 measurer: Optional[TextMeasurer] = None,
                 layout_settings: Optional[LayoutSettings] = None,
                 settings: Optional[EditorSettings] = None,
                 screen_to_world: ScreenToWorld = identity_transform,
                 id_factory: Callable[[], str] = new_node_id):
        self.settings = settings or EditorSettings()
        self.layout_settings = layout_settings or LayoutSettings()
        self.measurer = measurer or CharWidthMeasurer()
        self.id_factory = id_factory

        self.history = HistoryManager(
            tree if tree is not None else sample_tree(),
            max_undo=self.settings.max_undo,
            max_redo=self.settings.max_redo,
        )

        # Transient state, never historied
        self.selected_id: Optional[str] = None
        self.editing_id: Optional[str] = None
        self._drafts: Dict[str, str] = {}
        self._clipboard: Optional[Tuple[Tree, str]] = None

        self.dragdrop = DragDropResolver(
            on_drop=self.move_node,
            screen_to_world=screen_to_world,
            settings=self.layout_settings,
        )

        # Callbacks
        self.on_node_selected: Optional[Callable[[Optional[str]], None]] = None
        self.on_structure_changed: Optional[Callable[[], None]] = None

        self._layout: Layout = self._compute_layout()

    # ==================== Queries ====================

    @property
    def tree(self) -> Tree:
        return self.history.present

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def drafts(self) -> Mapping[str, str]:
        return MappingProxyType(self._drafts)

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def selected_node(self) -> Optional[LayoutNode]:
        return self._layout.get(self.selected_id)

    def _compute_layout(self) -> Layout:
        return compute_layout(self.tree, self.measurer, self._drafts, self.layout_settings)

    def _refresh_layout(self):
        self._layout = self._compute_layout()

    # ==================== Committing ====================

    def _commit(self, result: MutationResult, description: str) -> MutationResult:
        """Push a successful mutation and relayout; no-ops leave everything alone."""
        if not result.changed:
            return result
        self.history.push(result.tree, description)
        self._reconcile_transient_state()
        self._refresh_layout()
        logger.info("Edit OK: %s", description)
        if self.on_structure_changed:
            self.on_structure_changed()
        return result

    def _reconcile_transient_state(self):
        """Drop selection, edit mode and drafts that point at vanished nodes."""
        tree = self.tree
        for node_id in [d for d in self._drafts if d not in tree]:
            del self._drafts[node_id]
        if self.editing_id is not None and self.editing_id not in tree:
            self.editing_id = None
        if self.selected_id is not None and self.selected_id not in tree:
            self.select(None)

    # ==================== Mutations ====================

    def add_child(self, parent_id: str) -> MutationResult:
        """Create a child, select it and start editing it."""
        self.end_edit()
        result = self._commit(
            store.add_child(self.tree, parent_id, self.settings.placeholder_text, self.id_factory),
            "Create child node",
        )
        if result.changed:
            self.begin_edit(result.node_id)
        return result

    def add_sibling(self, ref_id: str) -> MutationResult:
        """Create a sibling after ref_id, select it and start editing it."""
        self.end_edit()
        result = self._commit(
            store.add_sibling(self.tree, ref_id, self.settings.placeholder_text, self.id_factory),
            "Create sibling node",
        )
        if result.changed:
            self.begin_edit(result.node_id)
        return result

    def update_text(self, node_id: str, text: str) -> MutationResult:
        return self._commit(store.update_text(self.tree, node_id, text), "Edit node text")

    def toggle_collapse(self, node_id: str) -> MutationResult:
        return self._commit(store.toggle_collapse(self.tree, node_id), "Toggle collapse")

    def delete_node(self, node_id: str) -> MutationResult:
        """Delete a node; its parent takes the selection."""
        result = self._commit(store.delete_node(self.tree, node_id), "Delete node")
        if result.changed:
            self.select(result.node_id)
        return result

    def move_node(self, drag_id: str, target_id: str, position) -> MutationResult:
        return self._commit(store.move_node(self.tree, drag_id, target_id, position), "Move node")

    # ==================== Undo/Redo ====================

    def undo(self) -> bool:
        """Undo the last committed edit."""
        if self.history.undo() is None:
            return False
        self._after_history_step()
        return True

    def redo(self) -> bool:
        """Redo the last undone edit."""
        if self.history.redo() is None:
            return False
        self._after_history_step()
        return True

    def _after_history_step(self):
        self._reconcile_transient_state()
        self._refresh_layout()
        if self.on_structure_changed:
            self.on_structure_changed()

    # ==================== Selection & editing ====================

    def select(self, node_id: Optional[str]):
        """Select a node, or clear the selection with None."""
        if node_id is not None and node_id not in self.tree:
            return
        self.selected_id = node_id
        if self.on_node_selected:
            self.on_node_selected(node_id)

    def begin_edit(self, node_id: str) -> bool:
        """Enter edit mode on node_id, committing any other edit first."""
        if node_id not in self.tree:
            return False
        if self.editing_id is not None and self.editing_id != node_id:
            self.end_edit()
        self.select(node_id)
        self.editing_id = node_id
        return True

    def update_draft(self, node_id: str, text: Optional[str]):
        """Set or, with None, clear the in-progress text for a node."""
        if text is None:
            self._drafts.pop(node_id, None)
        elif node_id in self.tree:
            self._drafts[node_id] = text
        else:
            return
        self._refresh_layout()

    def end_edit(self) -> Optional[MutationResult]:
        """Leave edit mode, committing the draft as a single text edit.

        Called on blur, Enter and Escape alike. Unchanged text commits
        nothing.
        """
        node_id = self.editing_id
        if node_id is None:
            return None
        self.editing_id = None

        draft = self._drafts.pop(node_id, None)
        node = self.tree.get(node_id)
        if draft is None or node is None or draft == node.text:
            self._refresh_layout()
            return None
        return self.update_text(node_id, draft)

    def cancel_edit(self):
        """Leave edit mode and throw the draft away."""
        if self.editing_id is None:
            return
        self._drafts.pop(self.editing_id, None)
        self.editing_id = None
        self._refresh_layout()

    # ==================== Drag & drop ====================

    def begin_drag(self, node_id: str) -> bool:
        # A node being edited can't be dragged
        if node_id == self.editing_id:
            return False
        return self.dragdrop.begin(node_id, self.tree)

    def drag_to(self, screen_x: float, screen_y: float) -> Optional[DropPosition]:
        return self.dragdrop.update(screen_x, screen_y, self.tree, self._layout)

    def end_drag(self) -> Optional[MutationResult]:
        return self.dragdrop.release()

    # ==================== Navigation ====================

    def _visible_siblings(self, rendered: LayoutNode):
        parent = self._layout.get(rendered.parent_id)
        if parent is None:
            return [rendered.id]
        return [c for c in parent.children if c in self._layout and self._layout[c].visible]

    def _select_if_visible(self, node_id: Optional[str]) -> Optional[str]:
        rendered = self._layout.get(node_id)
        if rendered is not None and rendered.visible:
            self.select(node_id)
        return self.selected_id

    def navigate_up(self) -> Optional[str]:
        """Select the previous sibling."""
        current = self.selected_node
        if current is None:
            return self._select_if_visible(self.tree.root_id)
        siblings = self._visible_siblings(current)
        idx = siblings.index(current.id) if current.id in siblings else -1
        if idx > 0:
            return self._select_if_visible(siblings[idx - 1])
        return self.selected_id

    def navigate_down(self) -> Optional[str]:
        """Select the next sibling; from the root, its first child."""
        current = self.selected_node
        if current is None:
            return self._select_if_visible(self.tree.root_id)
        if current.parent_id is None:
            if current.is_expanded and current.children:
                return self._select_if_visible(current.children[0])
            return self.selected_id
        siblings = self._visible_siblings(current)
        idx = siblings.index(current.id) if current.id in siblings else -1
        if 0 <= idx < len(siblings) - 1:
            return self._select_if_visible(siblings[idx + 1])
        return self.selected_id

    def navigate_left(self) -> Optional[str]:
        """Select the parent."""
        current = self.selected_node
        if current is None or current.parent_id is None:
            return self.selected_id
        return self._select_if_visible(current.parent_id)

    def navigate_right(self) -> Optional[str]:
        """Select the middle child of an expanded node."""
        current = self.selected_node
        if current is None or not current.is_expanded or not current.children:
            return self.selected_id
        return self._select_if_visible(current.children[len(current.children) // 2])

    # ==================== Copy/Paste ====================

    def copy_node(self, node_id: Optional[str] = None) -> bool:
        """Copy a node and its subtree to the clipboard."""
        node_id = node_id if node_id is not None else self.selected_id
        if node_id is None or node_id not in self.tree:
            return False
        self._clipboard = (self.tree, node_id)
        return True

    def paste_node(self, parent_id: Optional[str] = None) -> Optional[MutationResult]:
        """Paste the clipboard subtree as a child of parent_id or the selection."""
        parent_id = parent_id if parent_id is not None else self.selected_id
        if self._clipboard is None or parent_id is None:
            return None
        self.end_edit()
        source, source_id = self._clipboard
        result = self._commit(
            store.paste_subtree(self.tree, source, source_id, parent_id, self.id_factory),
            "Paste node",
        )
        if result.changed:
            self.select(result.node_id)
        return result

    @property
    def has_clipboard(self) -> bool:
        return self._clipboard is not None

    def describe(self) -> Dict[str, Any]:
        """Summary of session state for status bars and logs."""
        return {
            "nodes": len(self.tree),
            "visible": len(self._layout.visible_nodes()),
            "selected": self.selected_id,
            "editing": self.editing_id,
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
            "undo": self.history.undo_description,
            "redo": self.history.redo_description,
        }
