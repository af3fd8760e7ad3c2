"""
KPI Tracker for Logistics Tracking

Calculates logistics KPIs from counters.

CRITICAL RULES:
- Read-only consumer of counter state
- NO control logic
"""

from typing import Dict, Any, List
from .counters import CounterSystem


class KPITracker:
    """
    Logistics KPI calculator.

    Calculates metrics from counters for analytics/UI.
    """

    def __init__(self, counters: CounterSystem):
        self.counters = counters
        self.start_time = 0.0
        self.lead_times: List[float] = []

    def set_start_time(self, time: float) -> None:
        """Set simulation start time"""
        self.start_time = time

    def record_lead_time(self, seconds: float) -> None:
        """Record order placement -> satisfaction time"""
        self.lead_times.append(seconds)

    def calculate_throughput(self, current_time: float) -> float:
        """
        Calculate delivered items per hour.

        Args:
            current_time: Current simulation time (seconds)
        """
        elapsed_hours = (current_time - self.start_time) / 3600.0

        if elapsed_hours <= 0:
            return 0.0

        return self.counters.get('items_delivered') / elapsed_hours

    def calculate_average_lead_time(self) -> float:
        """Average order lead time in seconds (0 if no order completed)"""
        if not self.lead_times:
            return 0.0
        return sum(self.lead_times) / len(self.lead_times)

    def calculate_fill_ratio(self, stored: int, capacity: int) -> float:
        """
        Warehouse fill percentage.

        Returns:
            Fill % (0-100); a zero-capacity warehouse reports 100 when
            it holds stock and 0 otherwise
        """
        if capacity <= 0:
            return 100.0 if stored > 0 else 0.0
        return (stored / capacity) * 100.0

    def get_all_metrics(self, current_time: float) -> Dict[str, Any]:
        """
        Get all KPIs.

        Args:
            current_time: Current simulation time (seconds)
        """
        return {
            # Counts
            'items_produced': self.counters.get('items_produced'),
            'items_stored': self.counters.get('items_stored'),
            'items_taken': self.counters.get('items_taken'),
            'items_delivered': self.counters.get('items_delivered'),
            'orders_placed': self.counters.get('orders_placed'),
            'orders_satisfied': self.counters.get('orders_satisfied'),
            'carriers_dispatched': self.counters.get('carriers_dispatched'),
            'carriers_completed': self.counters.get('carriers_completed'),
            'loading_timeouts': self.counters.get('loading_timeouts'),
            'storage_blocked': self.counters.get('storage_blocked'),

            # Rates
            'throughput_per_hour': round(self.calculate_throughput(current_time), 2),
            'average_lead_time_s': round(self.calculate_average_lead_time(), 2),
        }
