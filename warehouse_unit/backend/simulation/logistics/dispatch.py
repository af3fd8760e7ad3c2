"""
Dispatch Controller

Owns outstanding demand; sizes the ProductionPool and spawns carriers.

CRITICAL RULES:
- request_items() only ever GROWS the pool (grow-first, shrink-later)
- Demand is serviced in fixed carrier_capacity trips; the last partial
  batch rounds the remainder away
- clean_pool() removes at most ONE unit per call
  and never shrinks the pool below outstanding demand
- Shortfall from timed-out carriers is re-requested on the next tick
"""

import logging
from typing import List

from .base import EventSource, ParamValidator
from .carriers import Carrier, CarrierFleet
from .production import ProductionPool
from ..flow.events import LogisticsEventType

logger = logging.getLogger("Dispatch")


class DispatchController(EventSource):
    """
    Warehouse-side demand accounting.

    The pool and fleet handles are passed in by the factory; there is no
    process-wide manager instance.
    """

    device_id = "dispatch"

    def __init__(self, pool: ProductionPool, fleet: CarrierFleet):
        self.pool = pool
        self.fleet = fleet
        self._outstanding = 0

    @property
    def carrier_capacity(self) -> int:
        return self.fleet.carrier_capacity

    @property
    def outstanding_demand(self) -> int:
        return self._outstanding

    @property
    def has_requested_items(self) -> bool:
        return self._outstanding > 0

    @property
    def has_active_carriers(self) -> bool:
        return self.fleet.active_count > 0

    @property
    def active_carriers(self) -> int:
        return self.fleet.active_count

    def request_items(self, amount: int) -> None:
        """Record demand and grow the pool to cover it."""
        ParamValidator.validate_non_negative(amount, "Requested amount")
        self._outstanding += amount
        self._emit_event(LogisticsEventType.DEMAND_REQUESTED,
                         {'amount': amount, 'outstanding': self._outstanding})

        self.pool.set_target_size(max(self.pool.size, self._outstanding))

    def tick(self) -> List[Carrier]:
        """
        Drain outstanding demand into carrier trips.

        Returns:
            Carriers spawned this tick
        """
        shortfall = self.fleet.take_shortfall()
        if shortfall:
            logger.info(f"Re-requesting {shortfall} items left behind by timed-out carriers")
            self.request_items(shortfall)

        spawned = []
        while self._outstanding > 0:
            spawned.append(self.fleet.spawn(self.carrier_capacity))
            self._outstanding = max(self._outstanding - self.carrier_capacity, 0)
        self._outstanding = 0

        if spawned:
            logger.debug(f"Dispatched {len(spawned)} carriers")
        return spawned

    def clean_pool(self, minimum_keep: int) -> bool:
        """
        Gradual shrink: remove one unit if the pool is above minimum_keep
        and above outstanding demand.

        Returns:
            True if a unit was removed
        """
        ParamValidator.validate_non_negative(minimum_keep, "Minimum keep")
        if self.pool.size <= max(minimum_keep, self._outstanding):
            return False
        self.pool.set_target_size(self.pool.size - 1)
        return True
