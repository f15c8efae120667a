"""
Cascading size resolution for a row or column of sized items.

A divider move is applied directly to its two neighbours first; any bound
that move violates is then pushed outward, one divider at a time, until a
neighbour absorbs it. When the push runs off the end of the sequence the
divider that made the request gives the space back instead.

The resolver is axis-agnostic and never raises for min/max violations.
"""
from typing import List, Sequence

from loguru import logger

from .sizing import SizedItem

_EPSILON = 1e-9


def resolve(items: Sequence[SizedItem], divider_index: int, delta: float) -> List[SizedItem]:
    """
    Move the divider after ``items[divider_index]`` by ``delta``.

    Args:
        items: Current items, left/top first
        divider_index: Divider between items[divider_index] and items[divider_index + 1]
        delta: Signed adjustment; positive grows the item before the divider

    Returns:
        New list of items; the input sequence is left untouched.

    Raises:
        ValueError: Fewer than two items or divider_index out of range
    """
    if len(items) < 2:
        raise ValueError(f"Cannot resize a sequence of {len(items)} item(s)")
    if not 0 <= divider_index < len(items) - 1:
        raise ValueError(
            f"Divider index {divider_index} out of range 0..{len(items) - 2}"
        )

    cascade = _Cascade(items)
    cascade.resize(divider_index, delta)
    return [item.with_size(size) for item, size in zip(items, cascade.sizes)]


class _Cascade:
    """Working state for one resolve() call."""

    def __init__(self, items: Sequence[SizedItem]):
        self.items = items
        self.sizes = [item.size for item in items]
        # Feasible bounds settle in far fewer steps than this
        self.budget = 8 * len(items)
        self.steps = 0

    @property
    def exhausted(self) -> bool:
        return self.steps >= self.budget

    def resize(self, divider: int, delta: float) -> None:
        self.sizes[divider] += delta
        self.sizes[divider + 1] -= delta
        self.steps += 1

        if self.exhausted:
            if self.steps == self.budget:
                logger.warning(
                    f"Resize cascade stopped after {self.steps} steps; constraints are infeasible"
                )
            return

        self._resolve_side(divider, -1)
        self._resolve_side(divider, 1)

    def _resolve_side(self, divider: int, direction: int) -> None:
        index = divider if direction < 0 else divider + 1
        item = self.items[index]

        if self.sizes[index] < item.min_size - _EPSILON:
            self._delegate(divider, direction, item.min_size - self.sizes[index])

        if item.max_size and self.sizes[index] > item.max_size + _EPSILON:
            self._delegate(divider, direction, item.max_size - self.sizes[index])

    def _delegate(self, divider: int, direction: int, overflow: float) -> None:
        next_divider = divider + direction
        if 0 <= next_divider <= len(self.sizes) - 2:
            logger.trace(f"Cascade {overflow} from divider {divider} to {next_divider}")
            self.resize(next_divider, overflow * direction)
        else:
            # Sequence edge: the requesting divider takes the correction back
            self.resize(divider, -overflow * direction)


def distribute(items: Sequence[SizedItem], available: float, spacing: float = 0) -> List[SizedItem]:
    """
    Lay items out in ``available`` space the way a flex row would.

    Sizes are first clamped into their bounds. Spare room is shared equally
    between stretch items without a max size; missing room is taken from
    every item in proportion to its size, freezing items at their minimum
    and re-sharing the rest. Overflow that cannot be absorbed is kept.
    """
    if not items:
        return []

    sizes = [_clamp(item, item.size) for item in items]
    room = available - spacing * (len(items) - 1)
    free = room - sum(sizes)

    if free > _EPSILON:
        growers = [i for i, item in enumerate(items) if item.stretch and not item.bounded]
        if growers:
            share = free / len(growers)
            for i in growers:
                sizes[i] += share
    elif free < -_EPSILON:
        active = [i for i in range(len(items)) if sizes[i] > items[i].min_size]
        for _ in range(len(items)):
            deficit = sum(sizes) - room
            weight = sum(sizes[i] for i in active)
            if deficit <= _EPSILON or weight <= 0:
                break
            frozen = []
            scale = deficit / weight
            for i in active:
                target = sizes[i] - sizes[i] * scale
                if target <= items[i].min_size:
                    sizes[i] = items[i].min_size
                    frozen.append(i)
                else:
                    sizes[i] = target
            if not frozen:
                break
            active = [i for i in active if i not in frozen]

    return [item.with_size(size) for item, size in zip(items, sizes)]


def _clamp(item: SizedItem, size: float) -> float:
    if item.max_size:
        size = min(size, item.max_size)
    return max(size, item.min_size)
