"""
Tab drag-and-drop resolution.

Turns a finished tab drag (source address, optional tab-bar destination,
hovered border) into one DockTree operation, then settles the tree.
Gestures of any other type are handed back to the host untouched.

Decision order:
    not a tab drag          -> FORWARD
    hover border on window  -> SPLIT_WINDOW (new window at border)
    hover border on panel   -> SPLIT_PANEL (new panel at border)
    tab-bar destination     -> REORDER (same window) / MOVE_TO_WINDOW
    nothing                 -> NONE, tree unchanged

A hovered border wins over a tab-bar destination.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from loguru import logger

from ..core.events import Signal
from ..layout.resize import DragSessionError
from .model import DragAddress, HoverBorder
from .registry import WidgetRegistry
from .tree import DockTree
from .visibility import HiddenMap, visible_layout

TAB_DRAG_TYPE = "dockable-tab"


class DockActionKind(str, Enum):
    REORDER = "reorder"
    MOVE_TO_WINDOW = "move_to_window"
    SPLIT_WINDOW = "split_window"
    SPLIT_PANEL = "split_panel"
    FORWARD = "forward"
    NONE = "none"


@dataclass(frozen=True)
class DragStart:
    """Drag library start event."""
    type: str
    source: Optional[DragAddress] = None


@dataclass(frozen=True)
class DropResult:
    """Drag library end event."""
    type: str
    source: Optional[DragAddress] = None
    destination: Optional[DragAddress] = None


@dataclass(frozen=True)
class DockAction:
    kind: DockActionKind
    source: Optional[DragAddress] = None
    destination: Optional[DragAddress] = None
    border: Optional[HoverBorder] = None

    @property
    def mutates(self) -> bool:
        return self.kind not in (DockActionKind.FORWARD, DockActionKind.NONE)


def plan_drop(
    result: DropResult,
    hover_border: Optional[HoverBorder] = None,
    tab_drag_type: str = TAB_DRAG_TYPE,
) -> DockAction:
    """Pick the tree operation for a finished drag without running it."""
    if result.type != tab_drag_type:
        return DockAction(DockActionKind.FORWARD)

    border = HoverBorder.coerce(hover_border)
    source = DragAddress(*result.source) if result.source is not None else None

    if source is None:
        return DockAction(DockActionKind.NONE)

    if border is not None:
        kind = DockActionKind.SPLIT_PANEL if border.is_panel_border else DockActionKind.SPLIT_WINDOW
        return DockAction(kind, source=source, border=border)

    if result.destination is not None:
        destination = DragAddress(*result.destination)
        same_window = (source.panel, source.window) == (destination.panel, destination.window)
        kind = DockActionKind.REORDER if same_window else DockActionKind.MOVE_TO_WINDOW
        return DockAction(kind, source=source, destination=destination)

    return DockAction(DockActionKind.NONE, source=source)


def apply_action(tree: DockTree, action: DockAction) -> DockTree:
    """
    Run a planned action and prune the result.

    FORWARD and NONE return ``tree`` itself.
    """
    if not action.mutates:
        return tree

    if action.kind in (DockActionKind.REORDER, DockActionKind.MOVE_TO_WINDOW):
        updated = tree.move_widget(action.source, action.destination)
    else:
        widget_id = tree.widget_at(action.source)
        if action.kind == DockActionKind.SPLIT_WINDOW:
            updated = tree.insert_window(
                action.border.panel, action.border.window, widget_id, source=action.source
            )
        else:
            updated = tree.insert_panel(action.border.panel, widget_id, source=action.source)

    logger.info(f"Dock action {action.kind.value}: {tuple(action.source)}")
    return updated.prune()


def available_borders(
    tree: DockTree,
    hidden: Optional[HiddenMap] = None,
    registry: Optional[WidgetRegistry] = None,
) -> List[HoverBorder]:
    """
    Every border a dragged tab can be dropped on.

    One border before each visible panel plus one after the last; inside
    each panel one border above each visible window plus one below the
    last. Borders carry tree indices, so hidden containers are skipped
    without shifting the insertion points.
    """
    borders: List[HoverBorder] = []
    layout = visible_layout(tree, hidden, registry)
    for panel in layout:
        borders.append(HoverBorder(panel.index, None))
        for window in panel.windows:
            borders.append(HoverBorder(panel.index, window.index))
        borders.append(HoverBorder(panel.index, panel.windows[-1].index + 1))
    borders.append(HoverBorder(layout[-1].index + 1 if layout else 0, None))
    return borders


class DragDockResolver:
    """
    Tab drag session: start, hover updates, drop.

    Signals:
        on_forward_start(start): Start event of another drag type
        on_forward_end(result): End event of another drag type
    """

    def __init__(self, tab_drag_type: str = TAB_DRAG_TYPE):
        self.tab_drag_type = tab_drag_type
        self._dragging = False
        self._source: Optional[DragAddress] = None
        self._hover_border: Optional[HoverBorder] = None

        self.on_forward_start = Signal("DragStartForwarded")
        self.on_forward_end = Signal("DragEndForwarded")

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    @property
    def hover_border(self) -> Optional[HoverBorder]:
        return self._hover_border

    @property
    def source(self) -> Optional[DragAddress]:
        return self._source

    def owns(self, event_type: str) -> bool:
        return event_type == self.tab_drag_type

    def start(self, start: DragStart) -> bool:
        """
        Begin a tab drag; returns False when the event was forwarded.

        Raises:
            DragSessionError: A tab drag is already in progress
        """
        if not self.owns(start.type):
            self.on_forward_start.emit(start)
            return False
        if self._dragging:
            raise DragSessionError("Tab drag already in progress")
        self._dragging = True
        self._source = DragAddress(*start.source) if start.source is not None else None
        self._hover_border = None
        logger.info(f"Tab drag started from {self._source}")
        return True

    def hover(self, border) -> None:
        """Record the border under the pointer; None clears it."""
        if not self._dragging:
            return
        self._hover_border = HoverBorder.coerce(border)

    def drop(self, result: DropResult, tree: DockTree) -> Optional[DockTree]:
        """
        Finish the drag against ``tree``.

        Returns the settled tree (``tree`` itself when nothing changed), or
        None when the event was forwarded or no drag was active.
        """
        if not self.owns(result.type):
            self.on_forward_end.emit(result)
            return None
        if not self._dragging:
            logger.debug("Tab drop without an active drag ignored")
            return None

        action = plan_drop(result, self._hover_border, self.tab_drag_type)
        self.cancel()
        return apply_action(tree, action)

    def cancel(self) -> None:
        self._dragging = False
        self._source = None
        self._hover_border = None
