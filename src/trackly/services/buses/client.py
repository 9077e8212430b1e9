"""HTTP client for the external bus data server."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class BusServerClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.bus_server_url
        if not self.base_url:
            raise ValueError("Bus server URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.bus_server_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.bus_server_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.bus_server_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request with retries and return the decoded JSON body."""
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.request(method, url, **kwargs)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # Client errors are not going to change on retry
                    if e.response.status_code < 500:
                        raise
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Bus server request timed out after {self.max_retries} attempts: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Bus server timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.ConnectError, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to bus server at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Bus server network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    def list_buses(self) -> list[dict]:
        """Fetch every bus record (route and schedules) from the server."""
        data = self._request("GET", self.base_url)
        if not isinstance(data, list):
            raise ValueError("Bus server response is not a list of buses.")
        logger.info(f"Fetched {len(data)} bus records from {self.base_url}")
        return data

    def add_bus(self, payload: dict) -> Any:
        result = self._request("POST", self.base_url, json=payload)
        logger.info(f"Bus added: {payload.get('vehicleNumber')}")
        return result


def check_health(base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check that the bus server answers a listing request."""
    base = base_url or settings.bus_server_url
    if not base:
        return False
    try:
        with httpx.Client(timeout=settings.bus_server_timeout_seconds, transport=transport) as client:
            response = client.get(base)
        response.raise_for_status()
        return isinstance(response.json(), list)
    except httpx.HTTPError:
        return False
    except ValueError:
        # Body was not JSON
        return False
