"""
Logistics Flow Tracker

Event-driven stock-flow tracking.

CRITICAL RULES:
- Event-reactive ONLY (no dt-based processing)
- NO control logic
- Read-only metrics for UI/Analytics

Architecture:
  Pool/Carriers/Ledger/Shop emit events -> FlowTracker reacts -> Updates counts/KPIs
"""

from typing import Dict, Any
import logging
from .events import EventDispatcher, Event, LogisticsEventType
from .counters import CounterSystem
from .kpi_tracker import KPITracker

logger = logging.getLogger("FlowTracker")


class FlowTracker:
    """
    Subscribes to logistics events and maintains counters and KPIs.
    """

    def __init__(self, event_dispatcher: EventDispatcher):
        self.dispatcher = event_dispatcher
        self.counters = CounterSystem()
        self.kpis = KPITracker(self.counters)
        self._order_placed_at: Dict[str, float] = {}

        self._subscribe_to_events()

        logger.info("FlowTracker initialized (event-reactive mode)")

    def _subscribe_to_events(self) -> None:
        """Subscribe to all logistics events"""
        on = self.dispatcher.subscribe

        # Production
        on(LogisticsEventType.ITEM_PRODUCED, self._count('items_produced'))
        on(LogisticsEventType.POOL_RESIZED, self._count('pool_resizes'))

        # Dispatch / Carriers
        on(LogisticsEventType.DEMAND_REQUESTED, self._on_demand_requested)
        on(LogisticsEventType.CARRIER_DISPATCHED, self._count('carriers_dispatched'))
        on(LogisticsEventType.CARRIER_LOADED, self._count('carriers_loaded'))
        on(LogisticsEventType.LOADING_TIMEOUT, self._count('loading_timeouts'))
        on(LogisticsEventType.STORAGE_BLOCKED, self._count('storage_blocked'))
        on(LogisticsEventType.CARRIER_UNLOADED, self._count('carriers_completed'))

        # Storage
        on(LogisticsEventType.ITEM_STORED, self._count('items_stored'))
        on(LogisticsEventType.ITEM_TAKEN, self._count('items_taken'))

        # Shop
        on(LogisticsEventType.ORDER_PLACED, self._on_order_placed)
        on(LogisticsEventType.ORDER_SATISFIED, self._on_order_satisfied)

    # ========== Event Handlers ==========

    def _count(self, counter_name: str):
        def handler(event: Event) -> None:
            self.counters.increment(counter_name)
        return handler

    def _on_demand_requested(self, event: Event) -> None:
        self.counters.increment('items_requested', event.data.get('amount', 0))

    def _on_order_placed(self, event: Event) -> None:
        self.counters.increment('orders_placed')
        self._order_placed_at[event.data['customer_id']] = event.timestamp

    def _on_order_satisfied(self, event: Event) -> None:
        self.counters.increment('orders_satisfied')
        self.counters.increment('items_delivered', event.data.get('delivered', 0))

        placed_at = self._order_placed_at.pop(event.data['customer_id'], None)
        if placed_at is not None:
            self.kpis.record_lead_time(event.timestamp - placed_at)
        logger.debug(f"Order satisfied: {event.data['customer_id']}")

    # ========== Read-Only Metrics ==========

    def get_metrics(self, current_time: float) -> Dict[str, Any]:
        """
        Get all logistics metrics (read-only).

        Args:
            current_time: Current simulation time (seconds)
        """
        return self.kpis.get_all_metrics(current_time)

    def get_counters(self) -> Dict[str, int]:
        """Get all counters (read-only)"""
        return self.counters.get_all()
