from abc import ABC, abstractmethod
from typing import Dict, Any


class ISource(ABC):
    """
    Interface for data sources (e.g. the warehouse REST API).
    """
    @abstractmethod
    def read(self) -> Dict[str, Any]:
        """
        Reads data from the source.
        Returns a dictionary of {tag_name: value}; empty on failure.
        """
        pass


class ISink(ABC):
    """
    Interface for data sinks (e.g. SCADA text file, MQTT).
    """
    @abstractmethod
    def write(self, data: Dict[Any, Any]) -> None:
        """
        Writes data to the sink.
        Keys are tag names, or channel ids when a mapping is applied.
        """
        pass


class IAdapter(ABC):
    @abstractmethod
    def connect(self):
        pass

    @abstractmethod
    def disconnect(self):
        pass
