from __future__ import annotations

"""Async HTTP Client for Data Sources
====================================

Thin httpx wrapper shared by the source adapters. Each adapter registers a
named endpoint (base URL, headers, timeout, optional rate limit) and issues
GET requests against it.

Retry policy:
- transport errors and 5xx responses are retried with linear backoff
- 4xx responses fail immediately
- a body that is not valid JSON fails immediately
"""

import asyncio
import time
from typing import Any, Dict, Optional

import httpx
from loguru import logger

__all__ = ["DataHTTPClient", "HTTPClientError"]


class HTTPClientError(Exception):
    """Raised when a request fails after all retries."""

    def __init__(self, message: str, status_code: int = None, response_text: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class DataHTTPClient:
    """Async HTTP client with named endpoints, retries and rate limiting.

    Example:
        ```python
        async with DataHTTPClient(max_retries=2) as client:
            await client.add_endpoint("coingecko", "https://api.coingecko.com/api/v3")
            coin = await client.get("coingecko", "/coins/bitcoin", params={"tickers": "false"})
        ```
    """

    def __init__(
        self,
        default_timeout: float = 30.0,
        default_headers: Optional[Dict[str, str]] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        default_rate_limit: Optional[float] = None,
    ):
        """Initialize the HTTP client.

        Args:
            default_timeout: Default timeout for all requests in seconds
            default_headers: Default headers applied to all requests
            max_retries: Maximum number of retry attempts for failed requests
            retry_delay: Base delay between retry attempts in seconds
            default_rate_limit: Default minimum seconds between requests (None = no limit)
        """
        self._default_timeout = default_timeout
        self._default_headers = default_headers or {}
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._default_rate_limit = default_rate_limit

        self._endpoints: Dict[str, Dict[str, Any]] = {}
        self._clients: Dict[str, httpx.AsyncClient] = {}
        self._last_request_times: Dict[str, float] = {}

        logger.debug(f"Initialized DataHTTPClient with {default_timeout}s timeout")

    async def add_endpoint(
        self,
        name: str,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        rate_limit: Optional[float] = None,
    ) -> None:
        """Register (or replace) a named endpoint.

        Args:
            name: Unique identifier for this endpoint
            base_url: Base URL for the endpoint
            headers: Additional headers specific to this endpoint
            timeout: Custom timeout for this endpoint (overrides default)
            rate_limit: Minimum seconds between requests (overrides default)
        """
        if name in self._endpoints:
            logger.warning(f"Endpoint '{name}' already exists, updating configuration")
            if name in self._clients:
                await self._clients.pop(name).aclose()

        self._endpoints[name] = {
            "base_url": base_url,
            "headers": {**self._default_headers, **(headers or {})},
            "timeout": timeout or self._default_timeout,
            "rate_limit": rate_limit if rate_limit is not None else self._default_rate_limit,
        }
        logger.debug(f"Added endpoint '{name}' with base URL: {base_url}")

    def get_endpoints(self) -> Dict[str, str]:
        """Mapping of endpoint names to their base URLs."""
        return {name: config["base_url"] for name, config in self._endpoints.items()}

    def _get_client(self, endpoint_name: str) -> httpx.AsyncClient:
        if endpoint_name not in self._endpoints:
            available = list(self._endpoints.keys())
            raise ValueError(f"Endpoint '{endpoint_name}' not configured. Available: {available}")

        if endpoint_name not in self._clients:
            config = self._endpoints[endpoint_name]
            self._clients[endpoint_name] = httpx.AsyncClient(
                base_url=config["base_url"],
                headers=config["headers"],
                timeout=config["timeout"],
            )
            logger.debug(f"Created HTTP client for endpoint '{endpoint_name}'")

        return self._clients[endpoint_name]

    async def _apply_rate_limit(self, endpoint_name: str) -> None:
        rate_limit = self._endpoints[endpoint_name].get("rate_limit")
        if rate_limit is None:
            return

        elapsed = time.monotonic() - self._last_request_times.get(endpoint_name, float("-inf"))
        if elapsed < rate_limit:
            sleep_time = rate_limit - elapsed
            logger.debug(f"Rate limiting: sleeping {sleep_time:.2f}s for endpoint '{endpoint_name}'")
            await asyncio.sleep(sleep_time)

        self._last_request_times[endpoint_name] = time.monotonic()

    async def get(
        self,
        endpoint_name: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retries: Optional[int] = None,
    ) -> Any:
        """GET ``path`` on a registered endpoint and return the decoded JSON body.

        Raises:
            ValueError: If the endpoint is not configured
            HTTPClientError: For HTTP errors or invalid responses
        """
        client = self._get_client(endpoint_name)
        max_retries = retries if retries is not None else self._max_retries

        await self._apply_rate_limit(endpoint_name)

        last_error: Optional[HTTPClientError] = None

        for attempt in range(max_retries + 1):
            try:
                logger.debug(f"GET {endpoint_name}{path} (attempt {attempt + 1})")
                response = await client.request("GET", path, params=params, headers=headers)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                last_error = HTTPClientError(
                    f"HTTP {e.response.status_code} error: {e.response.text}",
                    e.response.status_code,
                    e.response.text,
                )
                # Client errors are final
                if 400 <= e.response.status_code < 500:
                    break
            except httpx.RequestError as e:
                last_error = HTTPClientError(f"Request failed: {e}")
            else:
                try:
                    return response.json()
                except ValueError as e:
                    raise HTTPClientError(
                        f"Invalid JSON response: {e}", response.status_code, response.text
                    ) from e

            if attempt < max_retries:
                delay = self._retry_delay * (attempt + 1)
                logger.debug(f"Retrying request after {delay}s delay")
                await asyncio.sleep(delay)

        logger.error(f"Request to {endpoint_name}{path} failed after {attempt + 1} attempts")
        raise last_error

    async def aclose(self) -> None:
        """Close every underlying httpx client."""
        for endpoint_name, client in self._clients.items():
            await client.aclose()
            logger.debug(f"Closed HTTP client for endpoint '{endpoint_name}'")
        self._clients.clear()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
