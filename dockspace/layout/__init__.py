"""
Layout - Size resolution for panel and window groups.

Provides:
- SizedItem / ResizeMode / Direction: sizing primitives
- resolve: Cascading divider resize
- distribute: Flex-style layout of stretch items
- ResizeEngine: Live divider drag sessions
"""
from .sizing import SizedItem, ResizeMode, Direction
from .resolver import resolve, distribute
from .resize import ResizeEngine, ResizeState, ResizeSession, DragSessionError

__all__ = [
    "SizedItem",
    "ResizeMode",
    "Direction",
    "resolve",
    "distribute",
    "ResizeEngine",
    "ResizeState",
    "ResizeSession",
    "DragSessionError",
]
