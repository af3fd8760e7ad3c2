"""
Event System for Logistics Tracking

Event-driven architecture for stock-flow tracking.

CRITICAL RULES:
- Events are emitted by logistics components (pool, carriers, ledger, shop)
- FlowTracker ONLY reacts to events
- Timestamps are simulation time, never wall-clock
"""

from dataclasses import dataclass
from typing import Dict, Any, Callable, List
from enum import Enum


class LogisticsEventType(str, Enum):
    """
    Logistics event types.

    Events are emitted on discrete state changes,
    NOT on every simulation tick.
    """
    # Production
    ITEM_PRODUCED = "ITEM_PRODUCED"
    POOL_RESIZED = "POOL_RESIZED"

    # Demand / Dispatch
    DEMAND_REQUESTED = "DEMAND_REQUESTED"
    CARRIER_DISPATCHED = "CARRIER_DISPATCHED"

    # Carrier lifecycle
    CARRIER_LOADED = "CARRIER_LOADED"
    LOADING_TIMEOUT = "LOADING_TIMEOUT"
    STORAGE_BLOCKED = "STORAGE_BLOCKED"
    CARRIER_UNLOADED = "CARRIER_UNLOADED"

    # Storage
    ITEM_STORED = "ITEM_STORED"
    ITEM_TAKEN = "ITEM_TAKEN"

    # Shop
    ORDER_PLACED = "ORDER_PLACED"
    ORDER_SATISFIED = "ORDER_SATISFIED"


@dataclass
class Event:
    """
    Logistics event.

    Emitted when a component completes a discrete step.
    """
    type: LogisticsEventType
    timestamp: float  # Simulation time (seconds)
    device_id: str
    data: Dict[str, Any]  # Event-specific data (amount, carrier_id, etc.)

    def __repr__(self) -> str:
        return f"Event({self.type.value}, t={self.timestamp:.1f}s, device={self.device_id})"


class EventDispatcher:
    """
    Event dispatcher for pub-sub pattern.

    Also carries the simulation clock used to stamp events; the
    SimulationEngine advances it once per tick.
    """

    def __init__(self, keep_log: bool = True):
        self._subscribers: Dict[LogisticsEventType, List[Callable]] = {}
        self._event_log: List[Event] = []  # For debugging/replay
        self._keep_log = keep_log
        self.now = 0.0

    def set_time(self, sim_time: float) -> None:
        """Set the simulation time used for event timestamps"""
        self.now = sim_time

    def subscribe(self, event_type: LogisticsEventType, callback: Callable[[Event], None]) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Event type to subscribe to
            callback: Function to call when event is emitted
        """
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(callback)

    def emit(self, event: Event) -> None:
        """
        Emit an event to all subscribers.

        Args:
            event: Event to emit
        """
        if self._keep_log:
            self._event_log.append(event)

        for callback in self._subscribers.get(event.type, []):
            callback(event)

    def get_event_log(self) -> List[Event]:
        """Get event log (for debugging/analysis)"""
        return self._event_log.copy()

    def clear_log(self) -> None:
        """Clear event log"""
        self._event_log.clear()
