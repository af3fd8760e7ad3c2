import threading
from typing import Dict, Any


class ScadaStore:
    """
    Tag snapshot shared between the simulation thread and the API.

    One store per service; the simulation loop writes, request handlers read.
    """

    def __init__(self):
        self._store: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def update(self, tags: Dict[str, Any]):
        """
        Replace the snapshot with a fresh set of tags.
        """
        with self._lock:
            self._store = dict(tags)

    def get_all(self) -> Dict[str, Any]:
        """
        Get entire state snapshot.
        """
        with self._lock:
            return self._store.copy()

    def get(self, tag_name: str):
        with self._lock:
            return self._store.get(tag_name)
