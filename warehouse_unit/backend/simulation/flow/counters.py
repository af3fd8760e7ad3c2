"""
Counter System for Logistics Tracking

CRITICAL RULES:
- Counts are event-driven, not time-based
- Counters never go negative
"""

from typing import Dict, Optional


class CounterSystem:
    """
    Logistics counter system.

    Maintains named integer counters. All increments are event-driven.
    """

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def increment(self, counter_name: str, amount: int = 1) -> None:
        """
        Increment a counter.

        Args:
            counter_name: Name of counter (e.g., 'items_produced', 'items_stored')
            amount: Amount to increment by
        """
        if amount < 0:
            raise ValueError("Counter increments must not be negative")
        self._counters[counter_name] = self._counters.get(counter_name, 0) + amount

    def get(self, counter_name: str) -> int:
        """
        Get counter value.

        Returns:
            Counter value (0 if not exists)
        """
        return self._counters.get(counter_name, 0)

    def get_all(self) -> Dict[str, int]:
        """Get all counters"""
        return self._counters.copy()

    def reset(self, counter_name: Optional[str] = None) -> None:
        """
        Reset counter(s).

        Args:
            counter_name: Counter to reset (None = reset all)
        """
        if counter_name is None:
            self._counters.clear()
        elif counter_name in self._counters:
            self._counters[counter_name] = 0
