"""
Base Client Classes

Base class for HTTP clients with common patterns for initialization, timeout
handling and mapping of transport failures into registry errors.
"""

from typing import Any, Dict, Optional
from abc import ABC

import httpx

from core.errors import ConnectionFailedError, TransportError, TransportTimeoutError
from core.logging import log


class BaseHTTPClient(ABC):
    """
    Base class for HTTP-based API clients.

    Provides common functionality:
    - HTTP client management
    - Request timeout management
    - Transport error mapping

    Requests are issued once. A failed call surfaces immediately as a
    ``TransportError`` subclass and is never retried.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, client: Optional[httpx.Client] = None):
        """
        Initialize base HTTP client.

        Args:
            config: Configuration dict with:
                - base_url: Base URL for API
                - timeout: Request timeout in seconds (default: 30.0)
            client: Pre-built ``httpx.Client`` to use instead of creating one
                (the caller keeps ownership of it)
        """
        config = config or {}
        self.base_url = config.get("base_url", "").rstrip("/")
        self.timeout = config.get("timeout", 30.0)
        self._client: Optional[httpx.Client] = client
        self._owns_client = client is None

    def _ensure_client(self) -> httpx.Client:
        """
        Ensure HTTP client is initialized.

        Returns:
            httpx.Client instance
        """
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make a single HTTP request.

        HTTP error statuses are returned as-is for the caller to interpret;
        only failures to obtain a response are raised.

        Raises:
            TransportTimeoutError: the request timed out
            ConnectionFailedError: the connection could not be established or broke
            TransportError: any other transport failure
        """
        client = self._ensure_client()
        try:
            return client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            log.error(f"{method} {url} timed out after {self.timeout}s: {e}")
            raise TransportTimeoutError(f"Request to {self.base_url or 'server'} timed out: {e}") from e
        except (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError) as e:
            log.error(f"{method} {url} failed: {e}")
            raise ConnectionFailedError(f"Could not reach {self.base_url or 'server'}: {e}") from e
        except httpx.HTTPError as e:
            log.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Request to {self.base_url or 'server'} failed: {e}") from e

    def close(self):
        """Close HTTP client."""
        if self._client is not None and self._owns_client:
            self._client.close()
        self._client = None
