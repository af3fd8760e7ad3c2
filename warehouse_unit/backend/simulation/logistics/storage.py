"""
Storage Ledger

Capacity-bounded LIFO stock with derived grid placement.

CRITICAL RULES:
- Count never exceeds max_capacity; store() on a full ledger raises
  CapacityExceeded and leaves the count unchanged
- Grid cursor is DERIVED from count, never tracked incrementally
- Placement metadata is informational only (presentation layer)
"""

import logging
from typing import List, Tuple

from .base import EventSource, ParamValidator
from .errors import CapacityExceeded, StorageEmpty
from .items import Item
from ..flow.events import LogisticsEventType

logger = logging.getLogger("StorageLedger")

Vector3 = Tuple[float, float, float]


def grid_slot(index: int, per_line_amount: int) -> Tuple[int, int, int]:
    """
    Map a storage index to its (x, z, layer) grid cell.

    X fills first, wrapping at per_line_amount into Z; a full
    per_line_amount x per_line_amount square starts a new layer.
    """
    x = index % per_line_amount
    z = (index // per_line_amount) % per_line_amount
    layer = index // (per_line_amount * per_line_amount)
    return x, z, layer


def position_for(index: int, per_line_amount: int, base: Vector3, extent: Vector3) -> Vector3:
    """World position of the item stored at index (extent = width, height, depth)."""
    x, z, layer = grid_slot(index, per_line_amount)
    width, height, depth = extent
    return (
        base[0] + x * width,
        base[1] + layer * height,
        base[2] + z * depth,
    )


class StorageLedger(EventSource):
    """
    Warehouse stock.

    Single writer at a time: store()/take() are serialized by the
    simulation tick loop (and by the engine lock for external commands).
    """

    device_id = "warehouse"

    def __init__(self, max_capacity: int = 512, per_line_amount: int = 8,
                 base_position: Vector3 = (0.0, 0.0, 0.0)):
        self._max_capacity = ParamValidator.validate_non_negative(max_capacity, "Max capacity")
        self.per_line_amount = ParamValidator.validate_positive(per_line_amount, "Per line amount")
        self.base_position = base_position
        self._items: List[Item] = []

    # ========== Read-Only State ==========

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @property
    def has_space(self) -> bool:
        return self.count < self._max_capacity

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def grid_cursor(self) -> Tuple[int, int, int]:
        """(x, z, layer) of the next free slot."""
        return grid_slot(self.count, self.per_line_amount)

    def next_position(self, extent: Vector3 = (1.0, 1.0, 1.0)) -> Vector3:
        """World position where the next stored item will be placed."""
        return position_for(self.count, self.per_line_amount, self.base_position, extent)

    def placements(self) -> List[Vector3]:
        """Positions of all stored items, bottom of the stack first."""
        return [
            position_for(i, self.per_line_amount, self.base_position, item.extent)
            for i, item in enumerate(self._items)
        ]

    # ========== Mutations ==========

    def set_max_capacity(self, max_capacity: int) -> None:
        """
        Runtime capacity edit.

        Lowering below the current count keeps existing stock; further
        stores are rejected until the count drops below the new bound.
        """
        ParamValidator.validate_non_negative(max_capacity, "Max capacity")
        if max_capacity < self.count:
            logger.warning(f"Capacity lowered to {max_capacity} below current stock {self.count}")
        else:
            logger.info(f"Capacity set to {max_capacity}")
        self._max_capacity = max_capacity

    def store(self, item: Item) -> None:
        """
        Push an item onto the stack.

        Raises:
            CapacityExceeded: ledger is full
        """
        if self.count >= self._max_capacity:
            raise CapacityExceeded(self._max_capacity)

        self._items.append(item)
        self._emit_event(LogisticsEventType.ITEM_STORED, {'count': self.count})

    def take(self) -> Item:
        """
        Pop the most recently stored item.

        Raises:
            StorageEmpty: ledger is empty (callers check is_empty first)
        """
        if not self._items:
            raise StorageEmpty()

        item = self._items.pop()
        self._emit_event(LogisticsEventType.ITEM_TAKEN, {'count': self.count})
        return item
