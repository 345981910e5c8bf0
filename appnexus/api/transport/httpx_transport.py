"""httpx-backed transport for the AppNexus API.

AppNexus wraps every payload in a ``{"response": {...}}`` envelope and
reports failures inside it (``status: "error"`` plus an ``error``
message), sometimes with a 2xx status. The transport unwraps the envelope
and turns envelope errors into TransportError.
"""

import time
from typing import Any, Dict, Optional

import httpx

from appnexus.api.core.config import ClientSettings
from appnexus.api.core.http_client import create_http_client
from appnexus.api.core.logging import get_log_context, get_logger
from appnexus.api.exceptions import TransportError
from appnexus.api.transport.base import BaseTransport

logger = get_logger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class HttpxTransport(BaseTransport):
    """Transport sending API calls through an httpx.AsyncClient.

    If http_client is provided, it will be used for all requests (connection reuse)
    and left open on ``aclose``. If not, the transport builds one from settings on
    first use, honouring the proxy.
    """

    def __init__(
        self,
        api_base: str,
        proxy: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        client_settings: Optional[ClientSettings] = None
    ):
        """Initialize the transport.

        Args:
            api_base: The AppNexus API base URL
            proxy: Optional proxy URL for all requests
            http_client: Optional shared HTTP client
            timeout: Single timeout in seconds overriding the granular settings
            client_settings: Settings for the lazily created HTTP client
        """
        super().__init__(api_base, http_client, timeout or 60.0)
        self.proxy = proxy
        self._timeout_override = timeout
        self._client_settings = client_settings

    def _create_client(self) -> httpx.AsyncClient:
        overrides = {}
        if self._timeout_override is not None:
            overrides["timeout"] = self._timeout_override
        return create_http_client(self._client_settings, proxy=self.proxy, **overrides)

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    @staticmethod
    def _unwrap(body: Any) -> Any:
        if isinstance(body, dict) and isinstance(body.get("response"), dict):
            return body["response"]
        return body

    async def send(
        self,
        method: str,
        endpoint: str,
        args: Optional[Dict[str, Any]] = None,
        auth_token: Optional[str] = None
    ) -> Any:
        """Send a request and return the unwrapped response payload.

        GET and DELETE send ``args`` as query parameters; POST and PUT send
        them as the JSON body.

        Raises:
            TransportError: On network failure, non-2xx status, a non-JSON
                body or an error reported in the response envelope
        """
        method = method.upper()
        url = self._get_endpoint_url(endpoint)
        headers = self._build_headers(auth_token)

        request_kwargs: Dict[str, Any] = {"headers": headers}
        if args:
            if method in BODY_METHODS:
                request_kwargs["json"] = args
            else:
                request_kwargs["params"] = args

        start = time.perf_counter()
        try:
            async with self._client_context() as client:
                resp = await client.request(method, url, **request_kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {endpoint} failed: {type(e).__name__}: {e}") from e

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.debug(
            "API call completed",
            extra=get_log_context(
                method=method,
                endpoint=str(endpoint),
                status_code=resp.status_code,
                duration_ms=duration_ms,
            ),
        )

        body = self._decode(resp)
        payload = self._unwrap(body)

        if resp.is_error:
            message = None
            if isinstance(payload, dict):
                message = payload.get("error") or payload.get("error_description")
            raise TransportError(
                message or f"{method} {endpoint} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=payload,
            )

        if isinstance(body, str):
            raise TransportError(
                f"{method} {endpoint} returned a non-JSON body",
                status_code=resp.status_code,
                body=body,
            )

        if isinstance(payload, dict) and (payload.get("status") == "error" or payload.get("error")):
            raise TransportError(
                payload.get("error") or f"{method} {endpoint} reported an error",
                status_code=resp.status_code,
                body=payload,
            )

        return payload
