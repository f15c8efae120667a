"""
Workspace - gesture controller over a dock tree.

Holds the caller's current tree, the widget registry, the hidden map and
the one transient gesture that may be active: a panel resize, a window
resize or a tab drag. Every committed change produces a new DockTree that
is announced through ``on_update``; the caller keeps it and may feed a
different tree back through ``workspace.tree``.

Addresses passed in are tree addresses, not positions in the visible
layout; see dockspace.docking.visibility for the mapping.

Usage:
    ws = Workspace.from_state(saved_panels, registry=registry)
    ws.on_update.connect(store.save_layout)

    ws.start_panel_resize(0, measured_sizes=[300, 420])
    ws.pointer_move(352, 10)
    ws.pointer_up()

    ws.drag_start(DragStart("dockable-tab", DragAddress(0, 0, 1)))
    ws.hover_border([1, None])
    ws.drag_end(DropResult("dockable-tab", DragAddress(0, 0, 1)))
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from .core.config import ConfigManager, DockspaceConfig
from .core.events import Signal
from .core.logging import setup_logging
from .docking.actions import ActionGroup, window_actions
from .docking.drag import DragDockResolver, DragStart, DropResult, available_borders
from .docking.model import HoverBorder
from .docking.registry import WidgetRef, WidgetRegistry
from .docking.tree import DockTree
from .docking.visibility import VisiblePanel, visible_layout, visible_windows
from .layout.resize import DragSessionError, ResizeEngine
from .layout.sizing import Direction, SizedItem


class GestureKind(Enum):
    NONE = "none"
    PANEL_RESIZE = "panel_resize"
    WINDOW_RESIZE = "window_resize"
    TAB_DRAG = "tab_drag"


class Workspace:
    """
    Signals:
        on_update(tree): A change was committed
        on_resize(items): Live layout while a divider is dragged
        on_active(widget_id): A widget was selected or focused
        on_drag_start_forwarded(start): Start event of a foreign drag type
        on_drag_end_forwarded(result): End event of a foreign drag type

    ``config`` may be a plain DockspaceConfig or a ConfigManager; with a
    manager the workspace follows its on_changed updates.
    """

    def __init__(
        self,
        tree: Optional[DockTree] = None,
        registry: Optional[WidgetRegistry] = None,
        hidden: Optional[Mapping[str, bool]] = None,
        config: Union[DockspaceConfig, ConfigManager, None] = None,
    ):
        self.config_manager: Optional[ConfigManager] = None
        if isinstance(config, ConfigManager):
            self.config_manager = config
            config = config.data
        self.config = config or DockspaceConfig()
        self.registry = registry or WidgetRegistry()
        self.hidden: Dict[str, bool] = dict(hidden or {})

        if tree is None:
            # No layout given: one panel with every registered widget
            tree = DockTree.from_widgets(
                self.registry.ids(), self.config.workspace, self.config.window
            )
        self._tree = self._sync_min_sizes(tree)

        self._gesture = GestureKind.NONE
        self._resizer: Optional[ResizeEngine] = None
        self._resize_panel: Optional[int] = None
        self._resize_indices: List[int] = []
        self._owns_logging = False

        self.dock = DragDockResolver(self.config.workspace.tab_drag_type)

        self.on_update = Signal("WorkspaceUpdate")
        self.on_resize = Signal("WorkspaceResize")
        self.on_active = Signal("WorkspaceActive")
        self.on_drag_start_forwarded = Signal("DragStartForwarded")
        self.on_drag_end_forwarded = Signal("DragEndForwarded")
        self.dock.on_forward_start.connect(self.on_drag_start_forwarded.emit)
        self.dock.on_forward_end.connect(self.on_drag_end_forwarded.emit)

        if self.config_manager is not None:
            self.config_manager.on_changed.connect(self._on_config_changed)

    @classmethod
    def from_state(
        cls,
        data: List[Dict[str, Any]],
        registry: Optional[WidgetRegistry] = None,
        hidden: Optional[Mapping[str, bool]] = None,
        config: Union[DockspaceConfig, ConfigManager, None] = None,
    ) -> "Workspace":
        settings = config.data if isinstance(config, ConfigManager) else (config or DockspaceConfig())
        tree = DockTree.from_state(data, settings.panel, settings.window)
        return cls(tree, registry, hidden, config)

    @classmethod
    def from_config_file(
        cls,
        filepath: str,
        data: Optional[List[Dict[str, Any]]] = None,
        registry: Optional[WidgetRegistry] = None,
        hidden: Optional[Mapping[str, bool]] = None,
        with_logging: bool = False,
    ) -> "Workspace":
        """
        Build a workspace bound to a settings file.

        With ``with_logging`` the loguru sinks are configured from the
        ``general`` section and reconfigured when it changes.
        """
        manager = ConfigManager(filepath)
        if with_logging:
            setup_logging(manager.data.general)
        if data is None:
            workspace = cls(None, registry, hidden, manager)
        else:
            workspace = cls.from_state(data, registry, hidden, manager)
        workspace._owns_logging = with_logging
        logger.info(f"Workspace loaded with settings from {filepath}")
        return workspace

    def _on_config_changed(self, section: str, key: str, value: Any) -> None:
        self.config = self.config_manager.data
        if section == "workspace" and key == "tab_drag_type":
            self.dock.tab_drag_type = value
        elif section == "workspace" and key == "tab_bar_height":
            self._commit(self._sync_min_sizes(self._tree))
        elif section == "general" and self._owns_logging:
            setup_logging(self.config.general)

    # === State ===

    @property
    def tree(self) -> DockTree:
        return self._tree

    @tree.setter
    def tree(self, tree: DockTree) -> None:
        if self._gesture != GestureKind.NONE:
            raise DragSessionError(
                f"Cannot replace the tree: {self._gesture.value} in progress"
            )
        self._tree = self._sync_min_sizes(tree)

    @property
    def gesture(self) -> GestureKind:
        return self._gesture

    def widget(self, widget_id: str) -> WidgetRef:
        return self.registry.get(widget_id)

    def layout(self) -> List[VisiblePanel]:
        return visible_layout(self._tree, self.hidden, self.registry)

    def set_hidden(self, widget_id: str, hidden: bool = True) -> None:
        self.hidden[widget_id] = hidden

    def _commit(self, tree: DockTree) -> DockTree:
        if tree is self._tree:
            return tree
        self._tree = self._sync_min_sizes(tree)
        logger.info(f"Workspace updated: {len(self._tree)} panels")
        self.on_update.emit(self._tree)
        return self._tree

    def _sync_min_sizes(self, tree: DockTree) -> DockTree:
        """Fit every window's minimum size to its selected widget."""
        for p, panel in enumerate(tree.panels):
            for w, window in enumerate(panel.windows):
                widget_id = window.selected_widget
                if widget_id is not None:
                    tree = tree.sync_window_min_size(p, w, self.window_min_size(widget_id))
        return tree

    def _begin(self, kind: GestureKind) -> None:
        if self._gesture != GestureKind.NONE:
            raise DragSessionError(
                f"Cannot start {kind.value}: {self._gesture.value} in progress"
            )
        self._gesture = kind

    # === Resizing ===

    def start_panel_resize(
        self,
        divider_index: int,
        measured_sizes: Optional[Sequence[float]] = None,
        origin: Tuple[float, float] = (0, 0),
    ) -> None:
        """
        Start dragging the divider after the ``divider_index``-th visible panel.

        ``measured_sizes`` are the rendered sizes of the visible panels; they
        replace the stored sizes as the drag baseline.
        """
        indices = [panel.index for panel in self.layout()]
        items = self._tree.panel_items(indices)
        self._start_resize(
            GestureKind.PANEL_RESIZE, Direction.ROW, None, indices, items,
            divider_index, measured_sizes, origin,
        )

    def start_window_resize(
        self,
        panel: int,
        divider_index: int,
        measured_sizes: Optional[Sequence[float]] = None,
        origin: Tuple[float, float] = (0, 0),
    ) -> None:
        """Start dragging a divider between the visible windows of ``panel``."""
        windows = visible_windows(self._tree.panel(panel), self.hidden, self.registry)
        indices = [window.index for window in windows]
        items = self._tree.window_items(panel, indices)
        self._start_resize(
            GestureKind.WINDOW_RESIZE, Direction.COLUMN, panel, indices, items,
            divider_index, measured_sizes, origin,
        )

    def _start_resize(
        self,
        kind: GestureKind,
        direction: Direction,
        panel: Optional[int],
        indices: List[int],
        items: List[SizedItem],
        divider_index: int,
        measured_sizes: Optional[Sequence[float]],
        origin: Tuple[float, float],
    ) -> None:
        if measured_sizes is not None:
            if len(measured_sizes) != len(items):
                raise ValueError(
                    f"Got {len(measured_sizes)} measured sizes for {len(items)} items"
                )
            items = [item.with_size(size) for item, size in zip(items, measured_sizes)]

        self._begin(kind)
        engine = ResizeEngine(direction, self.config.workspace.spacing, origin)
        engine.on_resize.connect(self.on_resize.emit)
        try:
            engine.start_drag(divider_index, items)
        except ValueError:
            self._gesture = GestureKind.NONE
            raise

        self._resizer = engine
        self._resize_panel = panel
        self._resize_indices = indices

    def pointer_move(self, x: float, y: float) -> Optional[List[SizedItem]]:
        """Live layout for the active resize; None when not resizing."""
        if self._resizer is None:
            return None
        return self._resizer.on_pointer_move(x, y)

    def pointer_up(self) -> Optional[DockTree]:
        """Commit the active resize; None when not resizing."""
        if self._resizer is None:
            return None
        items = self._resizer.end_drag()
        kind, panel, indices = self._gesture, self._resize_panel, self._resize_indices
        self._clear_resize()

        if kind == GestureKind.PANEL_RESIZE:
            tree = self._tree.apply_panel_sizes(items, indices)
        else:
            tree = self._tree.apply_window_sizes(panel, items, indices)
        return self._commit(tree)

    def cancel_resize(self) -> None:
        if self._resizer is None:
            return
        self._resizer.cancel()
        self._clear_resize()

    def _clear_resize(self) -> None:
        self._resizer = None
        self._resize_panel = None
        self._resize_indices = []
        self._gesture = GestureKind.NONE

    # === Tabs ===

    def select_tab(self, panel: int, window: int, tab: int) -> DockTree:
        """Select a tab and report it active; the commit fits the window to it."""
        tree = self._tree.select_tab(panel, window, tab)
        widget_id = tree.window(panel, window).widgets[tab]
        self._commit(tree)
        self.on_active.emit(widget_id)
        return self._tree

    def activate(self, panel: int, window: int) -> Optional[str]:
        """Report the selected widget of a window as active (focus, no change)."""
        widget_id = self._tree.window(panel, window).selected_widget
        if widget_id is not None:
            self.on_active.emit(widget_id)
        return widget_id

    def sort_tab(self, panel: int, window: int, start: int, end: int) -> DockTree:
        return self._commit(self._tree.sort_tab(panel, window, start, end))

    def close_tab(self, panel: int, window: int, tab: int) -> DockTree:
        return self._commit(self._tree.close_tab(panel, window, tab).prune())

    def close_window(self, panel: int, window: int) -> DockTree:
        return self._commit(self._tree.close_window(panel, window).prune())

    def window_min_size(self, widget_id: str) -> float:
        return self.widget(widget_id).min_height + self.config.workspace.tab_bar_height

    def context_actions(self, panel: int, window: int) -> List[ActionGroup]:
        """Action groups for the selected widget of a window."""
        node = self._tree.window(panel, window)
        if node.is_empty:
            return []
        widget = self.widget(node.selected_widget)
        selected = min(node.selected, len(node.widgets) - 1)
        return window_actions(
            widget,
            close_tab=lambda: self.close_tab(panel, window, selected),
            close_window=lambda: self.close_window(panel, window),
        )

    # === Tab drag ===

    def drag_start(self, start: DragStart) -> bool:
        """
        Route a drag start event; returns False when it was forwarded.

        Raises:
            DragSessionError: Any gesture is already active
        """
        if not self.dock.owns(start.type):
            return self.dock.start(start)
        self._begin(GestureKind.TAB_DRAG)
        return self.dock.start(start)

    def hover_border(self, border) -> None:
        self.dock.hover(border)

    @property
    def current_border(self) -> Optional[HoverBorder]:
        return self.dock.hover_border

    def drop_borders(self) -> List[HoverBorder]:
        """Borders to offer while a tab is dragged; empty otherwise."""
        if self._gesture != GestureKind.TAB_DRAG:
            return []
        return available_borders(self._tree, self.hidden, self.registry)

    def drag_end(self, result: DropResult) -> Optional[DockTree]:
        """
        Route a drag end event.

        Returns the current tree after a tab drop (unchanged when the drop
        had no target), or None for forwarded or stray events.
        """
        if not self.dock.owns(result.type):
            return self.dock.drop(result, self._tree)
        if self._gesture != GestureKind.TAB_DRAG:
            return None
        try:
            tree = self.dock.drop(result, self._tree)
        finally:
            self._gesture = GestureKind.NONE
        if tree is None:
            # Session already cancelled on the resolver
            return None
        return self._commit(tree)

    def cancel_drag(self) -> None:
        if self._gesture == GestureKind.TAB_DRAG:
            self.dock.cancel()
            self._gesture = GestureKind.NONE
