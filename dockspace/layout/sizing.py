"""
Sized items shared by panel rows and window columns.
"""
from dataclasses import dataclass, replace
from enum import Enum


class ResizeMode(str, Enum):
    """How a panel behaves when its group has spare room."""
    FIXED = "fixed"
    DYNAMIC = "dynamic"
    STRETCH = "stretch"


class Direction(str, Enum):
    """Axis of a panel group. ROW lays items left to right."""
    ROW = "row"
    COLUMN = "column"


@dataclass(frozen=True, slots=True)
class SizedItem:
    """
    One resizable slot along a group's axis.

    Attributes:
        size: Current extent along the axis
        min_size: Lower bound
        max_size: Upper bound, 0 means unbounded
        stretch: Takes a share of spare room when laid out
    """
    size: float
    min_size: float = 0
    max_size: float = 0
    stretch: bool = False

    @property
    def bounded(self) -> bool:
        return self.max_size != 0

    def with_size(self, size: float) -> "SizedItem":
        return replace(self, size=size)
