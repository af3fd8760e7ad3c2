"""
Carrier Fleet

Transient carriers fetching batches from the ProductionPool into the
StorageLedger.

State machine:
    IDLE -> TRAVELING_OUT -> LOADING -> TRAVELING_BACK -> UNLOADING -> TERMINATED

CRITICAL RULES:
- carry() is the ONLY external trigger; every later transition is driven
  by elapsed time and buffer state inside tick()
- Travel is a timer, never a blocking wait
- A full ledger blocks the carrier in UNLOADING (items stay in the hold)
- A loading timeout hands the unloaded remainder back as fleet shortfall
"""

import logging
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from .base import EventSource, ParamValidator
from .errors import CapacityExceeded, CarrierStateError
from .items import Item
from .production import ProductionPool
from .storage import StorageLedger
from ..flow.events import LogisticsEventType

logger = logging.getLogger("Carrier")


class CarrierState(Enum):
    IDLE = "Idle"
    TRAVELING_OUT = "TravelingOut"
    LOADING = "Loading"
    TRAVELING_BACK = "TravelingBack"
    UNLOADING = "Unloading"
    TERMINATED = "Terminated"


def hold_slot(index: int) -> Tuple[int, int]:
    """(position, layer) on the carrier fork: two items per layer."""
    return index % 2, index // 2


class Carrier(EventSource):
    """
    Single carrier trip.

    Owns its held items from loading until they are stored.
    """

    def __init__(self, carrier_id: str, pool: ProductionPool, storage: StorageLedger,
                 capacity: int = 5, traveling_time: float = 5.0,
                 loading_timeout: Optional[float] = None):
        self.id = carrier_id
        self.device_id = carrier_id
        self.pool = pool
        self.storage = storage
        self.capacity = ParamValidator.validate_positive(capacity, "Carrier capacity")
        self.traveling_time = ParamValidator.validate_non_negative(traveling_time, "Traveling time")
        if loading_timeout is not None:
            ParamValidator.validate_positive(loading_timeout, "Loading timeout")
        self.loading_timeout = loading_timeout

        self.state = CarrierState.IDLE
        self.requested = 0
        self.delivered = 0
        self._hold: List[Item] = []
        self._travel_elapsed = 0.0
        self._loading_elapsed = 0.0
        self._blocked = False
        self._shortfall = 0

    # ========== Read-Only State ==========

    @property
    def held(self) -> int:
        return len(self._hold)

    @property
    def is_full(self) -> bool:
        return self.held >= self.requested

    @property
    def is_terminated(self) -> bool:
        return self.state == CarrierState.TERMINATED

    @property
    def is_blocked(self) -> bool:
        return self._blocked

    @property
    def travel_progress(self) -> float:
        """0..1 progress of the current travel leg (1.0 when not traveling)."""
        if self.state not in (CarrierState.TRAVELING_OUT, CarrierState.TRAVELING_BACK):
            return 1.0
        if self.traveling_time == 0:
            return 1.0
        return min(self._travel_elapsed / self.traveling_time, 1.0)

    def take_shortfall(self) -> int:
        """Items a timed-out trip left unloaded; cleared once read."""
        shortfall, self._shortfall = self._shortfall, 0
        return shortfall

    def hold_slots(self) -> List[Tuple[int, int]]:
        return [hold_slot(i) for i in range(self.held)]

    # ========== Commands ==========

    def carry(self, requested_amount: int) -> None:
        """
        Start a trip: IDLE -> TRAVELING_OUT.

        The request is clamped to the carrier capacity.
        """
        if self.state != CarrierState.IDLE:
            raise CarrierStateError(f"{self.id} already dispatched (state={self.state.value})")
        ParamValidator.validate_non_negative(requested_amount, "Requested amount")

        self.requested = min(requested_amount, self.capacity)
        self._enter(CarrierState.TRAVELING_OUT)

    # ========== Cyclic Execution ==========

    def tick(self, dt: float) -> None:
        """
        Advance the trip by dt seconds.

        Arrival ticks fall through into LOADING/UNLOADING so the carrier
        acts in the same tick it arrives.
        """
        if self.state == CarrierState.TRAVELING_OUT:
            if self._advance_travel(dt):
                self._enter(CarrierState.LOADING)
                self._loading_tick(0.0)

        elif self.state == CarrierState.LOADING:
            self._loading_tick(dt)

        elif self.state == CarrierState.TRAVELING_BACK:
            if self._advance_travel(dt):
                self._enter(CarrierState.UNLOADING)
                self._unloading_tick()

        elif self.state == CarrierState.UNLOADING:
            self._unloading_tick()

    def _enter(self, state: CarrierState) -> None:
        logger.debug(f"{self.id}: {self.state.value} -> {state.value}")
        self.state = state
        self._travel_elapsed = 0.0

    def _advance_travel(self, dt: float) -> bool:
        self._travel_elapsed += dt
        return self._travel_elapsed >= self.traveling_time

    def _loading_tick(self, dt: float) -> None:
        while not self.is_full:
            item = self.pool.pull()
            if item is None:
                break
            self._hold.append(item)

        if self.is_full:
            self._depart(LogisticsEventType.CARRIER_LOADED)
            return

        # Starved: re-poll next tick
        self._loading_elapsed += dt
        if self.loading_timeout is not None and self._loading_elapsed >= self.loading_timeout:
            logger.warning(
                f"{self.id}: loading timeout after {self._loading_elapsed:.1f}s "
                f"({self.held}/{self.requested} items), departing with partial load"
            )
            self._shortfall = self.requested - self.held
            self._depart(LogisticsEventType.LOADING_TIMEOUT)

    def _depart(self, event_type: LogisticsEventType) -> None:
        self._emit_event(event_type, {'held': self.held, 'requested': self.requested})
        self._enter(CarrierState.TRAVELING_BACK)

    def _unloading_tick(self) -> None:
        while self._hold:
            item = self._hold.pop()
            try:
                self.storage.store(item)
            except CapacityExceeded:
                self._hold.append(item)
                if not self._blocked:
                    self._blocked = True
                    logger.warning(f"{self.id}: storage full, holding {self.held} items")
                    self._emit_event(LogisticsEventType.STORAGE_BLOCKED, {'held': self.held})
                return
            self.delivered += 1

        self._blocked = False
        self._emit_event(LogisticsEventType.CARRIER_UNLOADED, {'delivered': self.delivered})
        self._enter(CarrierState.TERMINATED)

    def get_tags(self) -> Dict[str, Any]:
        return {
            f"{self.id}.state": self.state.value,
            f"{self.id}.held": self.held,
            f"{self.id}.requested": self.requested,
            f"{self.id}.progress": round(self.travel_progress * 100.0, 2),
        }


class CarrierFleet(EventSource):
    """
    Roster of active carriers.

    Spawned by the DispatchController; a carrier leaves the roster on the
    tick it terminates.
    """

    device_id = "carrier_fleet"

    def __init__(self, pool: ProductionPool, storage: StorageLedger,
                 carrier_capacity: int = 5, traveling_time: float = 5.0,
                 loading_timeout: Optional[float] = None):
        self.pool = pool
        self.storage = storage
        self.carrier_capacity = ParamValidator.validate_positive(carrier_capacity, "Carrier capacity")
        self.traveling_time = traveling_time
        self.loading_timeout = loading_timeout

        self._active: List[Carrier] = []
        self._next_carrier_number = 1
        self.completed_trips = 0
        self._shortfall = 0

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def carriers(self) -> List[Carrier]:
        return list(self._active)

    @property
    def items_in_transit(self) -> int:
        return sum(c.held for c in self._active)

    def take_shortfall(self) -> int:
        """Demand dropped by timed-out carriers since the last call."""
        shortfall, self._shortfall = self._shortfall, 0
        return shortfall

    def spawn(self, requested_amount: int) -> Carrier:
        carrier = Carrier(
            f"carrier_{self._next_carrier_number}",
            self.pool,
            self.storage,
            capacity=self.carrier_capacity,
            traveling_time=self.traveling_time,
            loading_timeout=self.loading_timeout,
        )
        self._next_carrier_number += 1
        carrier.set_event_dispatcher(self._event_dispatcher)
        carrier.carry(requested_amount)
        self._active.append(carrier)

        logger.info(f"{carrier.id} dispatched for {carrier.requested} items")
        self._emit_event(LogisticsEventType.CARRIER_DISPATCHED,
                         {'carrier_id': carrier.id, 'requested': carrier.requested})
        return carrier

    def tick(self, dt: float) -> None:
        for carrier in self._active:
            carrier.tick(dt)
            self._shortfall += carrier.take_shortfall()

        finished = [c for c in self._active if c.is_terminated]
        if finished:
            self._active = [c for c in self._active if not c.is_terminated]
            self.completed_trips += len(finished)
            for carrier in finished:
                logger.info(f"{carrier.id} terminated after delivering {carrier.delivered} items")

    def get_tags(self) -> Dict[str, Any]:
        tags = {}
        for carrier in self._active:
            tags.update(carrier.get_tags())
        return tags
