"""
Visibility filter.

Hidden widgets stay in the tree; they are only left out of layout. A window
with no visible widget, and a panel with no visible window, are skipped the
same way. Results keep tree indices so positions in the visible layout can
be mapped back to tree addresses.
"""
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .model import PanelNode, WindowNode
from .registry import WidgetRegistry
from .tree import DockTree

HiddenMap = Mapping[str, bool]


@dataclass(frozen=True)
class VisibleWindow:
    index: int
    widgets: List[str]
    selected: int

    @property
    def selected_widget(self) -> str:
        return self.widgets[self.selected]


@dataclass(frozen=True)
class VisiblePanel:
    index: int
    windows: List[VisibleWindow]

    @property
    def window_indices(self) -> List[int]:
        return [window.index for window in self.windows]


def is_hidden(widget_id: str, hidden: Optional[HiddenMap], registry: Optional[WidgetRegistry] = None) -> bool:
    if hidden and hidden.get(widget_id):
        return True
    if registry is not None and widget_id in registry:
        return registry.get(widget_id).hidden
    return False


def visible_widgets(
    window: WindowNode, hidden: Optional[HiddenMap], registry: Optional[WidgetRegistry] = None
) -> List[str]:
    return [widget for widget in window.widgets if not is_hidden(widget, hidden, registry)]


def visible_windows(
    panel: PanelNode, hidden: Optional[HiddenMap], registry: Optional[WidgetRegistry] = None
) -> List[VisibleWindow]:
    result = []
    for index, window in enumerate(panel.windows):
        widgets = visible_widgets(window, hidden, registry)
        if widgets:
            selected = min(window.selected, len(widgets) - 1)
            result.append(VisibleWindow(index, widgets, max(selected, 0)))
    return result


def visible_layout(
    tree: DockTree, hidden: Optional[HiddenMap] = None, registry: Optional[WidgetRegistry] = None
) -> List[VisiblePanel]:
    """Panels and windows that take part in layout, in tree order."""
    result = []
    for index, panel in enumerate(tree.panels):
        windows = visible_windows(panel, hidden, registry)
        if windows:
            result.append(VisiblePanel(index, windows))
    return result


def visible_panel_indices(
    tree: DockTree, hidden: Optional[HiddenMap] = None, registry: Optional[WidgetRegistry] = None
) -> List[int]:
    return [panel.index for panel in visible_layout(tree, hidden, registry)]
