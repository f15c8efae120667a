"""
Divider drag sessions.

Idle -> Dragging(divider, baseline) on start_drag, back to Idle on
end_drag or cancel. Every pointer move recomputes the layout from the
baseline captured at start, so a move never builds on the previous frame.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from ..core.events import Signal
from .resolver import resolve
from .sizing import Direction, SizedItem


class DragSessionError(RuntimeError):
    """Raised when a gesture starts while another one is still active."""
    pass


class ResizeState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class ResizeSession:
    divider_index: int
    baseline: Tuple[SizedItem, ...]


class ResizeEngine:
    """
    Live resize bookkeeping for one panel group.

    Signals:
        on_resize_start(items): Baseline captured
        on_resize(items): Live, uncommitted layout after each move
        on_resize_end(items): Committed layout

    Usage:
        engine = ResizeEngine(Direction.ROW, spacing=2)
        engine.start_drag(0, measured_items)
        engine.on_pointer_move(310, 40)
        committed = engine.end_drag()
    """

    def __init__(
        self,
        direction: Direction = Direction.ROW,
        spacing: float = 2,
        origin: Tuple[float, float] = (0, 0),
    ):
        self.direction = direction
        self.spacing = spacing
        self.origin = origin
        self._session: Optional[ResizeSession] = None
        self._live: Optional[List[SizedItem]] = None

        self.on_resize_start = Signal("ResizeStart")
        self.on_resize = Signal("Resize")
        self.on_resize_end = Signal("ResizeEnd")

    @property
    def state(self) -> ResizeState:
        return ResizeState.DRAGGING if self._session else ResizeState.IDLE

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[ResizeSession]:
        return self._session

    @property
    def live_items(self) -> Optional[List[SizedItem]]:
        return list(self._live) if self._live is not None else None

    def start_drag(self, divider_index: int, measured: Sequence[SizedItem]) -> None:
        """
        Begin dragging a divider.

        Args:
            divider_index: Divider between measured[i] and measured[i + 1]
            measured: Sizes as currently rendered; taken as ground truth

        Raises:
            DragSessionError: A drag is already in progress
            ValueError: divider_index does not name a divider
        """
        if self._session is not None:
            raise DragSessionError(
                f"Resize already in progress on divider {self._session.divider_index}"
            )
        if not 0 <= divider_index < len(measured) - 1:
            raise ValueError(
                f"Divider index {divider_index} out of range for {len(measured)} items"
            )

        self._session = ResizeSession(divider_index, tuple(measured))
        self._live = list(measured)
        logger.info(f"Resize started on divider {divider_index} ({self.direction.value})")
        self.on_resize_start.emit(list(measured))

    def divider_position(self) -> float:
        """Resting position of the active divider's centre, relative to origin."""
        if self._session is None:
            raise DragSessionError("No resize in progress")
        index = self._session.divider_index
        position = index * self.spacing + self.spacing / 2
        for item in self._session.baseline[: index + 1]:
            position += item.size
        return position

    def delta_for(self, x: float, y: float) -> float:
        """Pointer offset from the divider's resting position along the axis."""
        coordinate = x - self.origin[0] if self.direction == Direction.ROW else y - self.origin[1]
        return coordinate - self.divider_position()

    def on_pointer_move(self, x: float, y: float) -> Optional[List[SizedItem]]:
        """Recompute the live layout; returns None when no drag is active."""
        if self._session is None:
            return None
        delta = self.delta_for(x, y)
        self._live = resolve(self._session.baseline, self._session.divider_index, delta)
        self.on_resize.emit(list(self._live))
        return list(self._live)

    def end_drag(self) -> Optional[List[SizedItem]]:
        """Commit the last live layout; returns None when no drag is active."""
        if self._session is None:
            return None
        committed = list(self._live) if self._live is not None else list(self._session.baseline)
        logger.info(f"Resize ended on divider {self._session.divider_index}")
        self._session = None
        self._live = None
        self.on_resize_end.emit(list(committed))
        return committed

    def cancel(self) -> Optional[List[SizedItem]]:
        """Abandon the drag and return the untouched baseline."""
        if self._session is None:
            return None
        baseline = list(self._session.baseline)
        logger.info(f"Resize cancelled on divider {self._session.divider_index}")
        self._session = None
        self._live = None
        return baseline
