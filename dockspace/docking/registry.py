"""
Widget registry - read-only lookup of widget metadata by id.

The dock tree only stores ids; titles, minimum heights and context actions
live here. Unknown ids resolve to a placeholder so a stale layout still
renders.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set, TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:  # pragma: no cover
    from .actions import ActionGroup

MISSING_TITLE = "Missing Widget"


@dataclass(frozen=True)
class WidgetRef:
    """
    Metadata for one widget.

    Attributes:
        id: Key used in the dock tree
        title: Tab label; falls back to id
        min_height: Content height below which the window may not shrink
        actions: Callable(ref) returning extra context action groups
        closeable: Tab shows a close box
        hidden: Widget is kept out of layout without being closed
        missing: Placeholder standing in for an unregistered id
    """
    id: str
    title: Optional[str] = None
    min_height: float = 0
    actions: Optional[Callable[["WidgetRef"], List["ActionGroup"]]] = None
    closeable: bool = False
    hidden: bool = False
    missing: bool = False

    @property
    def label(self) -> str:
        return self.title or self.id

    @classmethod
    def placeholder(cls, widget_id: str) -> "WidgetRef":
        return cls(id=widget_id, title=MISSING_TITLE, missing=True)


class WidgetRegistry:
    """
    Maps widget ids to WidgetRef entries.

    Usage:
        registry = WidgetRegistry([WidgetRef("log", "Log", min_height=120)])
        registry.get("log").min_height    # 120
        registry.get("gone").missing      # True, warned once
    """

    def __init__(self, widgets: Iterable[WidgetRef] = ()):
        self._widgets: Dict[str, WidgetRef] = {}
        self._warned: Set[str] = set()
        for widget in widgets:
            self.register(widget)

    def register(self, widget: WidgetRef) -> None:
        if widget.id in self._widgets:
            raise ValueError(f"Duplicate widget id: {widget.id}")
        self._widgets[widget.id] = widget
        self._warned.discard(widget.id)
        logger.debug(f"Registered widget: {widget.id}")

    def unregister(self, widget_id: str) -> None:
        self._widgets.pop(widget_id, None)

    def __contains__(self, widget_id: str) -> bool:
        return widget_id in self._widgets

    def __len__(self) -> int:
        return len(self._widgets)

    def ids(self) -> List[str]:
        return list(self._widgets.keys())

    def get(self, widget_id: str) -> WidgetRef:
        """Look up a widget, substituting a placeholder for unknown ids."""
        widget = self._widgets.get(widget_id)
        if widget is not None:
            return widget
        if widget_id not in self._warned:
            self._warned.add(widget_id)
            logger.warning(f"Widget {widget_id} not found, using placeholder")
        return WidgetRef.placeholder(widget_id)
