"""
Dockspace - Docking Workspace Engine

Resizable panels of tabbed windows: cascading divider resize and
drag-and-drop tab docking over an immutable-snapshot tree.
"""
from dockspace.core import ConfigManager, DockspaceConfig, PanelDefaults, WorkspaceSettings, Signal, setup_logging
from dockspace.layout import SizedItem, ResizeMode, Direction, resolve, distribute, ResizeEngine, DragSessionError
from dockspace.docking import (
    DockTree,
    InvalidAddressError,
    PanelNode,
    WindowNode,
    DragAddress,
    HoverBorder,
    WidgetRef,
    WidgetRegistry,
    DragDockResolver,
    DragStart,
    DropResult,
)
from dockspace.workspace import Workspace, GestureKind

__version__ = "0.1.0"

__all__ = [
    # Core
    "ConfigManager",
    "DockspaceConfig",
    "PanelDefaults",
    "WorkspaceSettings",
    "Signal",
    "setup_logging",

    # Layout
    "SizedItem",
    "ResizeMode",
    "Direction",
    "resolve",
    "distribute",
    "ResizeEngine",
    "DragSessionError",

    # Docking
    "DockTree",
    "InvalidAddressError",
    "PanelNode",
    "WindowNode",
    "DragAddress",
    "HoverBorder",
    "WidgetRef",
    "WidgetRegistry",
    "DragDockResolver",
    "DragStart",
    "DropResult",

    # Controller
    "Workspace",
    "GestureKind",
]
