"""
Dock tree - panels of windows of widget ids.

Every operation takes the current tree and returns a new one; the receiver
is never modified. Structural operations can leave empty windows or panels
behind so that drag coordinates stay valid while a gesture is resolved;
call prune() before treating the result as settled.

Indices are positional. Anything out of range raises InvalidAddressError
instead of being clamped.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from loguru import logger

from ..core.config import PanelDefaults, WorkspaceSettings
from ..layout.sizing import SizedItem
from .model import DragAddress, PanelNode, WindowNode
from .state import PanelState, WindowState, dump_state, parse_state


class InvalidAddressError(IndexError):
    """A panel, window or tab index does not exist in the tree."""
    pass


@dataclass
class DockTree:
    panels: List[PanelNode] = field(default_factory=list)

    # === Construction ===

    @classmethod
    def from_state(
        cls,
        data: List[Dict[str, Any]],
        panel_defaults: Optional[PanelDefaults] = None,
        window_defaults: Optional[PanelDefaults] = None,
    ) -> "DockTree":
        """Build from the exchange shape, filling gaps from the templates."""
        panel_defaults = panel_defaults or PanelDefaults()
        window_defaults = window_defaults or PanelDefaults()
        states = parse_state(data)
        return cls([state.to_node(panel_defaults, window_defaults) for state in states])

    @classmethod
    def from_widgets(
        cls,
        widget_ids: Sequence[str],
        settings: Optional[WorkspaceSettings] = None,
        window_defaults: Optional[PanelDefaults] = None,
    ) -> "DockTree":
        """One panel holding one window with every widget, first one selected."""
        template = (settings or WorkspaceSettings()).synthesized_panel
        window = WindowState(widgets=list(widget_ids)).to_node(window_defaults or PanelDefaults())
        panel = PanelNode(
            windows=[window],
            size=template.size,
            min_size=template.min_size,
            max_size=template.max_size,
            resize=template.resize,
        )
        return cls([panel])

    def to_state(self) -> List[Dict[str, Any]]:
        return dump_state([PanelState.from_node(panel) for panel in self.panels])

    def copy(self) -> "DockTree":
        return DockTree(copy.deepcopy(self.panels))

    # === Queries ===

    def __len__(self) -> int:
        return len(self.panels)

    def __iter__(self) -> Iterator[PanelNode]:
        return iter(self.panels)

    @property
    def is_empty(self) -> bool:
        return not self.panels

    def panel(self, panel: int) -> PanelNode:
        self._check_panel(panel)
        return self.panels[panel]

    def window(self, panel: int, window: int) -> WindowNode:
        self._check_window(panel, window)
        return self.panels[panel].windows[window]

    def widget_at(self, address: DragAddress) -> str:
        self._check_tab(*address)
        return self.panels[address.panel].windows[address.window].widgets[address.tab]

    def find_widget(self, widget_id: str) -> Optional[DragAddress]:
        for p, panel in enumerate(self.panels):
            for w, window in enumerate(panel.windows):
                if widget_id in window.widgets:
                    return DragAddress(p, w, window.widgets.index(widget_id))
        return None

    def widget_ids(self) -> List[str]:
        return [
            widget
            for panel in self.panels
            for window in panel.windows
            for widget in window.widgets
        ]

    def panel_items(self, indices: Optional[Sequence[int]] = None) -> List[SizedItem]:
        indices = range(len(self.panels)) if indices is None else indices
        return [self.panel(i).sized_item() for i in indices]

    def window_items(self, panel: int, indices: Optional[Sequence[int]] = None) -> List[SizedItem]:
        windows = self.panel(panel).windows
        indices = range(len(windows)) if indices is None else indices
        return [self.window(panel, i).sized_item() for i in indices]

    # === Structural operations ===

    def move_widget(self, source: DragAddress, destination: DragAddress) -> "DockTree":
        """
        Move the tab at ``source`` to ``destination`` and select it there.

        The vacated window selects its first tab. Moving a tab onto its own
        position returns the tree unchanged.
        """
        source = DragAddress(*source)
        destination = DragAddress(*destination)
        self._check_tab(*source)
        self._check_window(destination.panel, destination.window)
        if source == destination:
            return self

        tree = self.copy()
        from_window = tree.panels[source.panel].windows[source.window]
        to_window = tree.panels[destination.panel].windows[destination.window]

        widget_id = from_window.widgets.pop(source.tab)
        from_window.selected = 0
        _check_insert(destination.tab, len(to_window.widgets), "tab")
        to_window.widgets.insert(destination.tab, widget_id)
        to_window.selected = destination.tab

        logger.debug(f"Moved widget '{widget_id}' {tuple(source)} -> {tuple(destination)}")
        return tree

    def insert_window(
        self,
        panel: int,
        window: int,
        widget_id: str,
        source: Optional[DragAddress] = None,
    ) -> "DockTree":
        """
        Insert a new window holding only ``widget_id`` at ``window`` in ``panel``.

        The widget is first removed from ``source`` (or from wherever it is
        found). Insertion indices refer to the tree before that removal.
        """
        self._check_panel(panel)
        _check_insert(window, len(self.panels[panel].windows), "window")

        tree = self.copy()
        tree._take(widget_id, source)
        tree.panels[panel].windows.insert(
            window, WindowNode(selected=0, widgets=[widget_id])
        )
        logger.debug(f"Inserted window for '{widget_id}' at panel {panel}, window {window}")
        return tree

    def insert_panel(
        self,
        panel: int,
        widget_id: str,
        source: Optional[DragAddress] = None,
    ) -> "DockTree":
        """
        Insert a new panel at ``panel`` with one window holding ``widget_id``.

        The new panel starts with the sizing of the panel the widget came from.
        """
        _check_insert(panel, len(self.panels), "panel")

        tree = self.copy()
        origin = tree._take(widget_id, source)
        template = tree.panels[origin.panel] if origin else PanelNode()
        new_panel = PanelNode(
            windows=[WindowNode(selected=0, widgets=[widget_id])],
            size=template.size,
            min_size=template.min_size,
            max_size=template.max_size,
            resize=template.resize,
        )
        tree.panels.insert(panel, new_panel)
        logger.debug(f"Inserted panel for '{widget_id}' at {panel}")
        return tree

    def close_tab(self, panel: int, window: int, tab: int) -> "DockTree":
        self._check_tab(panel, window, tab)
        tree = self.copy()
        target = tree.panels[panel].windows[window]
        widget_id = target.widgets.pop(tab)
        target.clamp_selection()
        logger.debug(f"Closed tab '{widget_id}' at {(panel, window, tab)}")
        return tree

    def close_window(self, panel: int, window: int) -> "DockTree":
        """Close every tab of a window at once."""
        self._check_window(panel, window)
        tree = self.copy()
        target = tree.panels[panel].windows[window]
        target.widgets = []
        target.selected = 0
        logger.debug(f"Closed window {(panel, window)}")
        return tree

    def prune(self) -> "DockTree":
        """Drop empty windows, then empty panels, and clamp selections."""
        tree = self.copy()
        for panel in tree.panels:
            panel.windows = [window for window in panel.windows if not window.is_empty]
            for window in panel.windows:
                window.clamp_selection()
        tree.panels = [panel for panel in tree.panels if not panel.is_empty]
        return tree

    # === Tab state ===

    def select_tab(self, panel: int, window: int, tab: int) -> "DockTree":
        self._check_tab(panel, window, tab)
        tree = self.copy()
        tree.panels[panel].windows[window].selected = tab
        return tree

    def sort_tab(self, panel: int, window: int, start: int, end: int) -> "DockTree":
        """Reorder a tab inside its window; the selected index is kept as is."""
        self._check_tab(panel, window, start)
        self._check_tab(panel, window, end)
        if start == end:
            return self
        tree = self.copy()
        widgets = tree.panels[panel].windows[window].widgets
        widgets.insert(end, widgets.pop(start))
        return tree

    def sync_window_min_size(self, panel: int, window: int, min_size: float) -> "DockTree":
        """Set a window's minimum size, growing it if it is now too small."""
        target = self.window(panel, window)
        if target.min_size == min_size:
            return self
        tree = self.copy()
        target = tree.panels[panel].windows[window]
        target.min_size = min_size
        if target.size < min_size:
            target.size = min_size
        return tree

    # === Size merge-back ===

    def apply_panel_sizes(
        self, items: Sequence[SizedItem], indices: Optional[Sequence[int]] = None
    ) -> "DockTree":
        """Copy sizes from a resize result onto the panels at ``indices``."""
        indices = list(range(len(items))) if indices is None else list(indices)
        _check_lengths(items, indices)
        for i in indices:
            self._check_panel(i)
        tree = self.copy()
        for i, item in zip(indices, items):
            tree.panels[i].size = item.size
        return tree

    def apply_window_sizes(
        self, panel: int, items: Sequence[SizedItem], indices: Optional[Sequence[int]] = None
    ) -> "DockTree":
        """Copy sizes from a resize result onto the windows of one panel."""
        indices = list(range(len(items))) if indices is None else list(indices)
        _check_lengths(items, indices)
        for i in indices:
            self._check_window(panel, i)
        tree = self.copy()
        for i, item in zip(indices, items):
            tree.panels[panel].windows[i].size = item.size
        return tree

    # === Internals ===

    def _take(self, widget_id: str, source: Optional[DragAddress]) -> Optional[DragAddress]:
        """Remove a widget in place (on a private copy); returns where it was."""
        if source is not None:
            source = DragAddress(*source)
            found = self.widget_at(source)
            if found != widget_id:
                raise InvalidAddressError(
                    f"Tab {tuple(source)} holds '{found}', not '{widget_id}'"
                )
        else:
            source = self.find_widget(widget_id)
            if source is None:
                return None
        window = self.panels[source.panel].windows[source.window]
        window.widgets.pop(source.tab)
        window.clamp_selection()
        return source

    def _check_panel(self, panel: int) -> None:
        if not 0 <= panel < len(self.panels):
            raise InvalidAddressError(
                f"Panel {panel} out of range (tree has {len(self.panels)} panels)"
            )

    def _check_window(self, panel: int, window: int) -> None:
        self._check_panel(panel)
        count = len(self.panels[panel].windows)
        if not 0 <= window < count:
            raise InvalidAddressError(
                f"Window {window} out of range (panel {panel} has {count} windows)"
            )

    def _check_tab(self, panel: int, window: int, tab: int) -> None:
        self._check_window(panel, window)
        count = len(self.panels[panel].windows[window].widgets)
        if not 0 <= tab < count:
            raise InvalidAddressError(
                f"Tab {tab} out of range (window {(panel, window)} has {count} tabs)"
            )


def _check_insert(index: int, length: int, label: str) -> None:
    if not 0 <= index <= length:
        raise InvalidAddressError(f"Insert {label} index {index} out of range 0..{length}")


def _check_lengths(items: Sequence[SizedItem], indices: Sequence[int]) -> None:
    if len(items) != len(indices):
        raise ValueError(f"Got {len(items)} sizes for {len(indices)} targets")
