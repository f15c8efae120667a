"""
Exchange shape for dock trees.

This is the JSON-friendly form callers hand in as initial state and get
back from on_update:

    [{"size": 300, "minSize": 48, "resizeMode": "stretch",
      "windows": [{"selected": 0, "widgets": ["a", "b"]}]}]

Numeric fields are optional; gaps are filled from a PanelDefaults template.
"""
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..core.config import PanelDefaults
from ..layout.sizing import ResizeMode
from .model import PanelNode, WindowNode


class WindowState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected: int = 0
    widgets: List[str] = Field(default_factory=list)
    size: Optional[float] = None
    min_size: Optional[float] = Field(default=None, alias="minSize")
    max_size: Optional[float] = Field(default=None, alias="maxSize")

    def to_node(self, defaults: PanelDefaults) -> WindowNode:
        return WindowNode(
            selected=self.selected,
            widgets=list(self.widgets),
            size=defaults.size if self.size is None else self.size,
            min_size=defaults.min_size if self.min_size is None else self.min_size,
            max_size=defaults.max_size if self.max_size is None else self.max_size,
        )

    @classmethod
    def from_node(cls, node: WindowNode) -> "WindowState":
        return cls(
            selected=node.selected,
            widgets=list(node.widgets),
            size=node.size,
            min_size=node.min_size,
            max_size=node.max_size,
        )


class PanelState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: Optional[float] = None
    min_size: Optional[float] = Field(default=None, alias="minSize")
    max_size: Optional[float] = Field(default=None, alias="maxSize")
    resize: Optional[ResizeMode] = Field(
        default=None,
        validation_alias=AliasChoices("resizeMode", "resize"),
        serialization_alias="resizeMode",
    )
    windows: List[WindowState] = Field(default_factory=list)

    def to_node(self, panel_defaults: PanelDefaults, window_defaults: PanelDefaults) -> PanelNode:
        return PanelNode(
            windows=[window.to_node(window_defaults) for window in self.windows],
            size=panel_defaults.size if self.size is None else self.size,
            min_size=panel_defaults.min_size if self.min_size is None else self.min_size,
            max_size=panel_defaults.max_size if self.max_size is None else self.max_size,
            resize=panel_defaults.resize if self.resize is None else self.resize,
        )

    @classmethod
    def from_node(cls, node: PanelNode) -> "PanelState":
        return cls(
            size=node.size,
            min_size=node.min_size,
            max_size=node.max_size,
            resize=node.resize,
            windows=[WindowState.from_node(window) for window in node.windows],
        )


def parse_state(data: List[Dict[str, Any]]) -> List[PanelState]:
    """Validate raw exchange data; raises pydantic.ValidationError on bad input."""
    return [PanelState.model_validate(panel) for panel in data]


def dump_state(panels: List[PanelState]) -> List[Dict[str, Any]]:
    return [panel.model_dump(mode="json", by_alias=True, exclude_none=True) for panel in panels]
