from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import httpx


class BaseTransport(ABC):
    """Base class for transports that perform the actual API calls.

    Subclasses can accept an external httpx.AsyncClient for connection
    pooling, or create their own on first use. A client created by the
    transport is owned by it and closed by ``aclose``; an injected client
    is left to its owner.
    """

    def __init__(
        self,
        api_base: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0
    ):
        """Initialize the transport.

        Args:
            api_base: The API base URL
            http_client: Optional shared HTTP client for connection pooling
            timeout: Request timeout in seconds
        """
        self._http_client = http_client
        self._owns_client = http_client is None
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout

    @property
    def http_client(self) -> Optional[httpx.AsyncClient]:
        """Get the HTTP client, if one exists yet."""
        return self._http_client

    def _build_headers(self, auth_token: Optional[str] = None) -> Dict[str, str]:
        """Build the HTTP headers for an API request.

        Args:
            auth_token: Access token to authorize the call with

        Returns:
            Dictionary of HTTP headers
        """
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if auth_token:
            headers["Authorization"] = auth_token
        return headers

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout)

    def _get_client(self) -> httpx.AsyncClient:
        """Get the HTTP client to use for requests, creating it lazily."""
        if self._http_client is None:
            self._http_client = self._create_client()
        return self._http_client

    @asynccontextmanager
    async def _client_context(self) -> AsyncGenerator[httpx.AsyncClient, None]:
        """Yield the HTTP client for a single call."""
        yield self._get_client()

    def _get_endpoint_url(self, endpoint: str) -> str:
        """Build full URL for an API endpoint.

        Args:
            endpoint: API endpoint path (e.g., "/member")

        Returns:
            Full URL
        """
        return f"{self.api_base}/{str(endpoint).lstrip('/')}"

    @abstractmethod
    async def send(
        self,
        method: str,
        endpoint: str,
        args: Optional[Dict[str, Any]] = None,
        auth_token: Optional[str] = None
    ) -> Any:
        """Perform one API call.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            args: Query parameters (GET/DELETE) or JSON body (POST/PUT)
            auth_token: Access token to authorize the call with

        Returns:
            The decoded response body

        Raises:
            TransportError: If the call fails
        """
        pass

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
