"""
Docking - panel/window/widget tree and tab drag resolution.

Provides:
- DockTree: Immutable-snapshot tree operations and prune
- DragDockResolver: Tab drag sessions mapped onto tree operations
- WidgetRegistry: Widget metadata lookup with missing-widget placeholder
- visible_layout: Hidden-widget filter over the tree
"""
from .model import WindowNode, PanelNode, DragAddress, HoverBorder
from .state import PanelState, WindowState
from .tree import DockTree, InvalidAddressError
from .registry import WidgetRef, WidgetRegistry
from .visibility import VisiblePanel, VisibleWindow, visible_layout
from .actions import ActionGroup, window_actions
from .drag import (
    TAB_DRAG_TYPE,
    DockAction,
    DockActionKind,
    DragDockResolver,
    DragStart,
    DropResult,
    apply_action,
    available_borders,
    plan_drop,
)

__all__ = [
    "WindowNode",
    "PanelNode",
    "DragAddress",
    "HoverBorder",
    "PanelState",
    "WindowState",
    "DockTree",
    "InvalidAddressError",
    "WidgetRef",
    "WidgetRegistry",
    "VisiblePanel",
    "VisibleWindow",
    "visible_layout",
    "ActionGroup",
    "window_actions",
    "TAB_DRAG_TYPE",
    "DockAction",
    "DockActionKind",
    "DragDockResolver",
    "DragStart",
    "DropResult",
    "apply_action",
    "available_borders",
    "plan_drop",
]
