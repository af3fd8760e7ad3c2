import logging

import requests

from ..core.interfaces import ISource, IAdapter

logger = logging.getLogger("RestSource")


class RestSourceAdapter(ISource, IAdapter):
    """
    Reads the tag snapshot from the warehouse REST API.
    """
    def __init__(self, url: str, timeout: float = 2.0):
        self.url = url
        self.timeout = timeout
        self.session = None

    def connect(self):
        self.session = requests.Session()

    def disconnect(self):
        if self.session is not None:
            self.session.close()
            self.session = None

    def read(self) -> dict:
        client = self.session or requests
        try:
            response = client.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"REST Source Read Failed: {e}")
            return {}

        if response.status_code != 200:
            logger.warning(f"REST Source returned {response.status_code}")
            return {}
        return response.json()
