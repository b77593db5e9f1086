"""Stop data sources: local documents and an HTTP JSON endpoint."""

from __future__ import annotations

import logging

import requests
import yaml

from stopboard.errors import StopDataError
from stopboard.models import StopData, parse_stop_data

logger = logging.getLogger(__name__)


def load_stop_data(path: str) -> StopData:
    """Load a stop data document from a JSON or YAML file.

    YAML is a superset of JSON, so one loader handles both formats.

    Raises:
        OSError: if the file cannot be read.
        StopDataError: if the document is not valid or has the wrong shape.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise StopDataError(f"could not parse stop data in {path}") from e
    stop_data = parse_stop_data(raw)
    logger.debug("Loaded %d agencies from %s", len(stop_data), path)
    return stop_data


class StopDataClient:
    """Client for an HTTP endpoint serving a stop data JSON document."""

    def __init__(self, timeout: int = 10) -> None:
        """Initialize the client.

        Creates a requests.Session for connection reuse across refreshes,
        with an Accept: application/json header on all requests.

        Args:
            timeout: Request timeout in seconds.
        """
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def get_raw(self, url: str) -> dict:
        """Fetch the raw stop data document.

        GET {url} with the configured timeout.
        """
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def fetch(self, url: str) -> StopData:
        """Fetch and parse stop data, preserving the server's line order."""
        stop_data = parse_stop_data(self.get_raw(url))
        logger.info("Fetched %d agencies from %s", len(stop_data), url)
        return stop_data
