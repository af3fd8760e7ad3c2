"""
Logistics Error Taxonomy

All errors raised by the logistics core derive from LogisticsError.

CRITICAL RULES:
- Errors are local to the component that raises them
- Callers check before calling (has_space / is_empty)
- The only handled error is CapacityExceeded during carrier unload
"""


class LogisticsError(Exception):
    """Base class for logistics core errors."""


class CapacityExceeded(LogisticsError):
    """Raised when storing into a full StorageLedger."""

    def __init__(self, capacity: int):
        super().__init__(f"Storage full (capacity={capacity})")
        self.capacity = capacity


class StorageEmpty(LogisticsError):
    """Raised when taking from an empty StorageLedger."""

    def __init__(self):
        super().__init__("Storage is empty")


class CarrierStateError(LogisticsError):
    """Raised on an illegal carrier trigger (e.g. carry() twice)."""
