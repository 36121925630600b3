"""mindtree: tree model, undo history, layout and drag-and-drop for mind maps."""

__version__ = "1.0.0"

from mindtree.model import Node, Tree, build_tree, sample_tree, single_node_tree, validate_tree
from mindtree.store import DropPosition, MutationResult
from mindtree.undo import HistoryManager
from mindtree.layout import Layout, LayoutNode, compute_layout
from mindtree.measure import CharWidthMeasurer, MeasureConstraints, Size
from mindtree.dragdrop import DragDropResolver
from mindtree.settings import LayoutSettings, EditorSettings
from mindtree.editor import MindMapEditor

__all__ = [
    "__version__",
    "Node",
    "Tree",
    "build_tree",
    "sample_tree",
    "single_node_tree",
    "validate_tree",
    "DropPosition",
    "MutationResult",
    "HistoryManager",
    "Layout",
    "LayoutNode",
    "compute_layout",
    "CharWidthMeasurer",
    "MeasureConstraints",
    "Size",
    "DragDropResolver",
    "LayoutSettings",
    "EditorSettings",
    "MindMapEditor",
]
