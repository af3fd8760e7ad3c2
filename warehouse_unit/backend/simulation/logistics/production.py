"""
Production Pool

Elastic set of producer units feeding a shared output buffer.

CRITICAL RULES:
- Pool size is changed ONLY through set_target_size() (never self-initiated)
- Shrink removes the most recently added unit first (stack discipline)
- A unit emits at most one item per tick and restarts its timer at zero
"""

import logging
from typing import List, Optional, Tuple

from .base import EventSource, ParamValidator
from .items import Item
from ..flow.events import LogisticsEventType

logger = logging.getLogger("ProductionPool")


class ProducerUnit:
    """
    Single manufacturer: emits one item every 60 / production_per_minute seconds.
    """

    def __init__(self, unit_id: str, production_per_minute: float):
        self.id = unit_id
        self.production_per_minute = ParamValidator.validate_positive(
            production_per_minute, "Production per minute")
        self.interval = 60.0 / production_per_minute
        self.timer = 0.0
        self.active = True
        self.produced_count = 0

    def turn_on(self):
        self.active = True

    def turn_off(self):
        self.active = False

    def tick(self, dt: float) -> bool:
        """
        Accumulate elapsed time.

        Returns:
            True if the unit completed an item this tick
        """
        if not self.active:
            return False

        self.timer += dt
        if self.timer >= self.interval:
            # Full restart, remainder is dropped
            self.timer = 0.0
            self.produced_count += 1
            return True
        return False


class ProductionPool(EventSource):
    """
    Manufacturer pool with shared LIFO output buffer.

    Carriers pull from the buffer; producers push into it. Both happen
    inside the tick loop, so access is serialized per tick.
    """

    device_id = "production_pool"

    def __init__(self, production_per_minute: float = 10.0, storage_positions: int = 4,
                 item_size: Tuple[float, float, float] = (1.0, 1.0, 1.0)):
        self.production_per_minute = ParamValidator.validate_positive(
            production_per_minute, "Production per minute")
        self.storage_positions = ParamValidator.validate_positive(storage_positions, "Storage positions")
        self.item_size = item_size

        self._units: List[ProducerUnit] = []
        self._output: List[Item] = []
        self._next_unit_number = 1
        self.produced_count = 0

    # ========== Sizing ==========

    @property
    def size(self) -> int:
        return len(self._units)

    @property
    def units(self) -> List[ProducerUnit]:
        return list(self._units)

    def set_target_size(self, target: int) -> None:
        """
        Grow or shrink the pool to exactly `target` units.

        New units start with a zero timer; removed units are turned off
        and their partial progress is discarded.
        """
        ParamValidator.validate_non_negative(target, "Target size")
        if target == self.size:
            return

        previous = self.size
        while self.size < target:
            unit = ProducerUnit(f"producer_{self._next_unit_number}", self.production_per_minute)
            self._next_unit_number += 1
            self._units.append(unit)

        while self.size > target:
            unit = self._units.pop()
            unit.turn_off()

        logger.info(f"Pool resized {previous} -> {self.size}")
        self._emit_event(LogisticsEventType.POOL_RESIZED, {'previous': previous, 'size': self.size})

    # ========== Production ==========

    def tick(self, dt: float) -> int:
        """
        Advance every unit by dt.

        Returns:
            Number of items produced this tick
        """
        produced = 0
        for unit in self._units:
            if unit.tick(dt):
                self._output.append(Item(*self.item_size))
                produced += 1
                self._emit_event(LogisticsEventType.ITEM_PRODUCED, {'unit_id': unit.id})

        self.produced_count += produced
        return produced

    # ========== Output Buffer ==========

    @property
    def output_count(self) -> int:
        return len(self._output)

    def pull(self) -> Optional[Item]:
        """Pop the most recently produced item (None if the buffer is empty)."""
        if not self._output:
            return None
        return self._output.pop()

    def slot_for(self, index: int) -> Tuple[int, int]:
        """(position, layer) of the buffered item at index."""
        return index % self.storage_positions, index // self.storage_positions
