"""Undo/Redo system for mindtree.

History is kept as whole-tree snapshots: undoing swaps the present snapshot
for the previous one instead of replaying inverse actions.
"""

import logging
from typing import Optional, List, Callable
from dataclasses import dataclass

from mindtree.model import Tree


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """A snapshot together with the edit that produced it."""
    tree: Tree
    description: str = ""


class HistoryManager:
    """Linear undo/redo over tree snapshots.

    `past` is ordered oldest first; `future` holds the next redo first.
    """

    def __init__(self, initial: Tree, max_undo: Optional[int] = 100, max_redo: Optional[int] = 100):
        self.max_undo = max_undo
        self.max_redo = max_redo
        self._past: List[HistoryEntry] = []
        self._present = HistoryEntry(initial, "Open map")
        self._future: List[HistoryEntry] = []

        # Callbacks
        self.on_state_changed: Optional[Callable[[], None]] = None

    @property
    def present(self) -> Tree:
        return self._present.tree

    @property
    def past(self) -> List[Tree]:
        return [entry.tree for entry in self._past]

    @property
    def future(self) -> List[Tree]:
        return [entry.tree for entry in self._future]

    @property
    def can_undo(self) -> bool:
        """Check if undo is available."""
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        """Check if redo is available."""
        return len(self._future) > 0

    @property
    def undo_description(self) -> str:
        """Get description of the edit the next undo reverts."""
        if self._past:
            return self._present.description
        return ""

    @property
    def redo_description(self) -> str:
        """Get description of the edit the next redo reapplies."""
        if self._future:
            return self._future[0].description
        return ""

    def push(self, tree: Tree, description: str = ""):
        """Make tree the present snapshot and discard any redo branch."""
        self._past.append(self._present)
        self._present = HistoryEntry(tree, description)
        self._future.clear()  # Clear redo on new edit

        # Trim history if needed
        if self.max_undo is not None:
            while len(self._past) > self.max_undo:
                self._past.pop(0)

        logger.debug("History push: %s (past=%d)", description, len(self._past))
        self._notify_changed()

    def undo(self) -> Optional[Tree]:
        """Step back one snapshot; returns the new present, or None."""
        if not self._past:
            return None

        self._future.insert(0, self._present)
        self._present = self._past.pop()
        if self.max_redo is not None:
            while len(self._future) > self.max_redo:
                self._future.pop()

        logger.debug("History undo (past=%d future=%d)", len(self._past), len(self._future))
        self._notify_changed()
        return self._present.tree

    def redo(self) -> Optional[Tree]:
        """Step forward one snapshot; returns the new present, or None."""
        if not self._future:
            return None

        self._past.append(self._present)
        self._present = self._future.pop(0)
        if self.max_undo is not None:
            while len(self._past) > self.max_undo:
                self._past.pop(0)

        logger.debug("History redo (past=%d future=%d)", len(self._past), len(self._future))
        self._notify_changed()
        return self._present.tree

    def clear(self):
        """Clear all history, keeping the present snapshot."""
        self._past.clear()
        self._future.clear()
        self._notify_changed()

    def _notify_changed(self):
        """Notify that undo/redo state changed."""
        if self.on_state_changed:
            self.on_state_changed()
