"""CLI API client for interacting with the stats-simulator server."""

import os
from typing import Any, Dict, Optional

import httpx

# The base URL can be configured via an environment variable
API_BASE_URL = os.getenv("STATSIM_API_URL", "http://127.0.0.1:8000")


class APIClient:
    """A client for making requests to the stats-simulator API."""

    def __init__(self, base_url: str = API_BASE_URL):
        self.base_url = base_url
        self.client = httpx.Client(base_url=self.base_url)

    def get_state(self) -> httpx.Response:
        """Fetches the simulator state and progress."""
        response = self.client.get("/simulator/state")
        response.raise_for_status()
        return response

    def update_params(self, changes: Dict[str, Any]) -> httpx.Response:
        """Sends a partial parameter update."""
        response = self.client.patch("/simulator/params", json=changes)
        response.raise_for_status()
        return response

    def start(self) -> httpx.Response:
        response = self.client.post("/simulator/start")
        response.raise_for_status()
        return response

    def stop(self) -> httpx.Response:
        response = self.client.post("/simulator/stop")
        response.raise_for_status()
        return response

    def reset(self) -> httpx.Response:
        response = self.client.post("/simulator/reset")
        response.raise_for_status()
        return response

    def get_results(self, limit: int = 100, offset: int = 0) -> httpx.Response:
        """Fetches a page of completed experiments."""
        params = {"limit": limit, "offset": offset}
        response = self.client.get("/simulator/results", params=params)
        response.raise_for_status()
        return response

    def get_histogram(self, binning: Optional[str] = None) -> httpx.Response:
        params = {"binning": binning} if binning else {}
        response = self.client.get("/simulator/histogram", params=params)
        response.raise_for_status()
        return response

    def get_statistics(self) -> httpx.Response:
        response = self.client.get("/simulator/statistics")
        response.raise_for_status()
        return response

    def get_selection(self) -> httpx.Response:
        response = self.client.get("/simulator/selection")
        response.raise_for_status()
        return response

    def select_bar(self, index: int) -> httpx.Response:
        """Selects a histogram bar by its index."""
        response = self.client.post("/simulator/selection", json={"index": index})
        response.raise_for_status()
        return response

    def clear_selection(self) -> httpx.Response:
        response = self.client.delete("/simulator/selection")
        response.raise_for_status()
        return response

    def set_animation_speed(self, speed_ms: int) -> httpx.Response:
        response = self.client.put(
            "/simulator/animation-speed", json={"speed_ms": speed_ms}
        )
        response.raise_for_status()
        return response
