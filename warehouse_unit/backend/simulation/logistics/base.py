"""
Shared building blocks for logistics components.

- ParamValidator: parameter checks raising ValueError
- EventSource: event dispatcher wiring (set by SimulationEngine)
"""

from typing import Dict, Any, Optional

from ..flow.events import Event


class ParamValidator:
    """Helper to validate component parameters."""

    @staticmethod
    def validate_positive(value, name):
        if value <= 0:
            raise ValueError(f"{name} must be positive")
        return value

    @staticmethod
    def validate_non_negative(value, name):
        if value < 0:
            raise ValueError(f"{name} must not be negative")
        return value


class EventSource:
    """
    Mixin for components that emit logistics events.

    Emission is a no-op until a dispatcher is attached, so components
    can be exercised standalone in unit tests.
    """

    device_id: str = "logistics"

    _event_dispatcher: Optional[Any] = None

    def set_event_dispatcher(self, dispatcher):
        """
        Set event dispatcher for event emission.

        Called by SimulationEngine during component registration.
        """
        self._event_dispatcher = dispatcher

    def _emit_event(self, event_type, data: Dict[str, Any] = None):
        if self._event_dispatcher is None:
            return

        event = Event(
            type=event_type,
            timestamp=self._event_dispatcher.now,
            device_id=self.device_id,
            data=data or {}
        )
        self._event_dispatcher.emit(event)
