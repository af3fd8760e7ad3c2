import logging
import time
from typing import Dict, Any, Optional

from .interfaces import ISource, ISink

logger = logging.getLogger("DataGateway")


class DataEngine:
    """
    Core Logic: Read -> Map -> Write.
    """
    def __init__(self, source: ISource, sink: ISink, mapping: Optional[Dict[str, int]] = None):
        self.source = source
        self.sink = sink
        self.mapping = mapping
        self.running = False
        self.cycles = 0

    def step(self) -> bool:
        """
        One polling cycle.

        Returns:
            True if data was forwarded to the sink
        """
        raw_data = self.source.read()
        if not raw_data:
            return False

        self.sink.write(self.process(raw_data))
        return True

    def process(self, raw_data: Dict[str, Any]) -> Dict[Any, Any]:
        """
        Maps tag names to channel ids.
        If mapping is None, returns raw data as-is; unmapped tags are dropped.
        """
        if self.mapping is None:
            return raw_data

        return {self.mapping[tag]: value for tag, value in raw_data.items() if tag in self.mapping}

    def run(self, interval: float = 1.0, max_cycles: Optional[int] = None):
        self.running = True
        logger.info(f">>> Gateway Started. Polling every {interval}s...")
        try:
            while self.running:
                self.step()
                self.cycles += 1
                if max_cycles is not None and self.cycles >= max_cycles:
                    break
                time.sleep(interval)
        except KeyboardInterrupt:
            pass
        finally:
            self.running = False
            logger.info(">>> Gateway Stopped.")
