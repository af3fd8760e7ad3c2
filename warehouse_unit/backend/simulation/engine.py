import logging
import threading
import time
from typing import Dict, Any, Optional

from .flow import EventDispatcher, FlowTracker
from .logistics import (
    CarrierFleet,
    DispatchController,
    ProductionPool,
    Shop,
    StorageLedger,
)

logger = logging.getLogger("SimulationEngine")


class SimulationEngine:
    """
    Owns the fixed-timestep loop and the simulation clock.

    This is the explicit context handle for one warehouse loop: every
    component is constructed by the factory and reached through here.
    """
    def __init__(self, pool: ProductionPool, storage: StorageLedger, fleet: CarrierFleet,
                 dispatch: DispatchController, shop: Shop, time_step: float = 0.2,
                 event_dispatcher: Optional[EventDispatcher] = None):
        """
        Initialize Simulation Engine with FIXED timestep.

        Args:
            time_step: Fixed simulation timestep in seconds (default: 0.2s = 5 Hz)

        CRITICAL: External commands (spawn customer, capacity edits) must
        hold `lock` so they never interleave with step().
        """
        self.pool = pool
        self.storage = storage
        self.fleet = fleet
        self.dispatch = dispatch
        self.shop = shop

        self.time_step = time_step  # FIXED timestep (deterministic)
        self.running = False
        self.ticks = 0
        self.sim_time = 0.0  # Global simulation clock (seconds)
        self.post_step_callbacks = []
        self.lock = threading.RLock()

        self.event_dispatcher = event_dispatcher or EventDispatcher(keep_log=False)
        self.flow_tracker = FlowTracker(self.event_dispatcher)
        self.flow_tracker.kpis.set_start_time(self.sim_time)
        for component in (pool, storage, fleet, dispatch, shop):
            component.set_event_dispatcher(self.event_dispatcher)

    def set_post_step_callback(self, callback):
        self.post_step_callbacks.append(callback)

    def step(self, dt: Optional[float] = None):
        """
        Advance simulation by one time step.

        Ordering within a tick:
        1. Shop (takes stock, idle keep-warm / pool shrink)
        2. Dispatch (demand accounting + carrier spawn, before producers run)
        3. Production (all completions land before any carrier loads)
        4. Carriers (travel, loading, unloading)
        """
        dt = self.time_step if dt is None else dt
        with self.lock:
            self.event_dispatcher.set_time(self.sim_time)

            self.shop.tick()
            self.dispatch.tick()
            self.pool.tick(dt)
            self.fleet.tick(dt)

            for callback in self.post_step_callbacks:
                callback()

            self.sim_time += dt
            self.ticks += 1

    def run_for(self, seconds: float) -> None:
        """Step until `seconds` of simulation time have elapsed (no sleeping)."""
        for _ in range(int(round(seconds / self.time_step))):
            self.step()

    def run_loop(self):
        """
        Blocking real-time loop.
        The service runs this in a background thread.
        """
        self.running = True
        logger.info(">>> Simulation Started")
        while self.running:
            start_time = time.time()
            self.step()
            elapsed = time.time() - start_time
            time.sleep(max(0.0, self.time_step - elapsed))
        logger.info(">>> Simulation Stopped")

    def stop(self):
        self.running = False

    # ========== External Commands ==========

    def spawn_customer(self, requested_items: Optional[int] = None):
        with self.lock:
            self.event_dispatcher.set_time(self.sim_time)
            return self.shop.spawn_customer(requested_items)

    def set_max_capacity(self, max_capacity: int) -> None:
        with self.lock:
            self.storage.set_max_capacity(max_capacity)

    # ========== Read-Only Views ==========

    def stock_snapshot(self) -> Dict[str, int]:
        """
        Where every produced item currently is.

        produced == in_buffer + in_transit + in_storage + delivered always holds.
        """
        with self.lock:
            return {
                "produced": self.pool.produced_count,
                "in_buffer": self.pool.output_count,
                "in_transit": self.fleet.items_in_transit,
                "in_storage": self.storage.count,
                "delivered": self.shop.delivered_items + self.shop.items_in_orders,
            }

    def get_all_tags(self) -> Dict[str, Any]:
        """
        Collects a flat tag snapshot for the SCADA store.
        """
        with self.lock:
            tags = {
                "Sim.Time": round(self.sim_time, 3),
                "Sim.Ticks": self.ticks,
                "Warehouse.StoredAmount": self.storage.count,
                "Warehouse.MaxCapacity": self.storage.max_capacity,
                "Warehouse.RequestedItems": self.dispatch.outstanding_demand,
                "Warehouse.ActiveCarriers": self.fleet.active_count,
                "Production.Manufacturers": self.pool.size,
                "Production.Buffered": self.pool.output_count,
            }
            tags.update(self.shop.get_tags())
            tags.update(self.fleet.get_tags())
            return tags

    def get_production_metrics(self) -> Dict[str, Any]:
        with self.lock:
            metrics = self.flow_tracker.get_metrics(self.sim_time)
            metrics["fill_percent"] = round(
                self.flow_tracker.kpis.calculate_fill_ratio(self.storage.count, self.storage.max_capacity), 2)
            metrics["stock"] = self.stock_snapshot()
            return metrics
