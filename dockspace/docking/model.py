"""
Dock tree nodes and drag coordinates.

Panels hold windows, windows hold widget ids. Nodes are plain mutable
dataclasses; DockTree copies them before every change so snapshots handed
to callers are never aliased.
"""
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from ..layout.sizing import ResizeMode, SizedItem


@dataclass
class WindowNode:
    """
    Tab strip holding widget ids, one of which is selected.

    Attributes:
        selected: Index into widgets of the visible tab
        widgets: Ordered widget ids
        size/min_size/max_size: Extent inside the owning panel's column
    """
    selected: int = 0
    widgets: List[str] = field(default_factory=list)
    size: float = 256
    min_size: float = 48
    max_size: float = 0

    @property
    def is_empty(self) -> bool:
        return not self.widgets

    @property
    def selected_widget(self) -> Optional[str]:
        if not self.widgets:
            return None
        return self.widgets[min(self.selected, len(self.widgets) - 1)]

    def clamp_selection(self) -> None:
        self.selected = max(0, min(self.selected, len(self.widgets) - 1))

    def sized_item(self) -> SizedItem:
        return SizedItem(self.size, self.min_size, self.max_size, stretch=not self.max_size)


@dataclass
class PanelNode:
    """Top level resizable region; a column of windows."""
    windows: List[WindowNode] = field(default_factory=list)
    size: float = 256
    min_size: float = 48
    max_size: float = 0
    resize: ResizeMode = ResizeMode.STRETCH

    @property
    def is_empty(self) -> bool:
        return not self.windows

    def sized_item(self) -> SizedItem:
        return SizedItem(
            self.size,
            self.min_size,
            self.max_size,
            stretch=self.resize == ResizeMode.STRETCH,
        )


class DragAddress(NamedTuple):
    """Position of a tab: panel, window inside it, tab inside the window."""
    panel: int
    window: int
    tab: int

    @classmethod
    def parse(cls, droppable_id: str, index: int) -> "DragAddress":
        """Build from a "panel,window" container id and a tab index."""
        panel, window = droppable_id.split(",")
        return cls(int(panel), int(window), index)

    @property
    def window_id(self) -> str:
        return f"{self.panel},{self.window}"


class HoverBorder(NamedTuple):
    """
    Insertion point highlighted while a tab is dragged.

    ``window`` is None for a border between panels (new panel at ``panel``),
    otherwise the border between windows of that panel (new window at
    ``window``).
    """
    panel: int
    window: Optional[int] = None

    @property
    def is_panel_border(self) -> bool:
        return self.window is None

    @classmethod
    def coerce(cls, value) -> Optional["HoverBorder"]:
        """Accept None, a HoverBorder or a [panel, window] pair."""
        if value is None:
            return None
        if isinstance(value, HoverBorder):
            return value
        panel, window = value
        if panel is None:
            return None
        return cls(panel, window)

