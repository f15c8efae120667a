"""
Context actions for a window's selected widget.

Only the data is built here; showing a menu is the host's job.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List

from .registry import WidgetRef

CLOSE_TAB = "Close Tab"
CLOSE_TAB_GROUP = "Close Tab Group"


@dataclass
class ActionGroup:
    """Named callables shown together, separated from other groups."""
    actions: Dict[str, Callable[[], None]] = field(default_factory=dict)

    def labels(self) -> List[str]:
        return list(self.actions.keys())

    def trigger(self, label: str) -> None:
        if label not in self.actions:
            raise KeyError(f"Unknown action: {label}")
        self.actions[label]()


def window_actions(
    widget: WidgetRef,
    close_tab: Callable[[], None],
    close_window: Callable[[], None],
    include_default: bool = True,
) -> List[ActionGroup]:
    """
    Widget-supplied groups first, then the default close group.
    """
    groups: List[ActionGroup] = []
    if widget.actions is not None:
        groups.extend(widget.actions(widget))
    if include_default:
        groups.append(ActionGroup({CLOSE_TAB: close_tab, CLOSE_TAB_GROUP: close_window}))
    return groups
