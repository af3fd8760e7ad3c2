"""
Logistics Flow Tracking

Event-driven stock-flow tracking system.

Responsibilities:
- Subscribe to logistics events
- Maintain counts per flow stage
- Emit read-only metrics

NO:
- Control logic
- Dispatch or sizing decisions
"""

from .events import Event, EventDispatcher, LogisticsEventType
from .counters import CounterSystem
from .kpi_tracker import KPITracker
from .flow_tracker import FlowTracker

__all__ = [
    'Event',
    'EventDispatcher',
    'LogisticsEventType',
    'CounterSystem',
    'KPITracker',
    'FlowTracker'
]
