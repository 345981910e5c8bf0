"""AppNexus API client.

The client wraps every outbound call in two guards before handing it to
the transport:

1. admission by the rate limiter of the call's category (auth, read or
   write), suspending the caller while the bucket is empty;
2. an expiry check on the access token, re-authorizing with the stored
   credentials when the token is stale.

Calls to the authentication endpoint skip the expiry check, which is what
lets re-authorization itself go through ``request``.
"""

import asyncio
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

from appnexus.api.core.config import ClientSettings, settings
from appnexus.api.core.logging import get_log_context, get_logger
from appnexus.api.endpoints import AUTHENTICATION_SERVICE
from appnexus.api.rate_limit import CategoryRateLimiter, RateLimits
from appnexus.api.services.authorizer import Authorizer
from appnexus.api.services.token_state import Token, TokenState
from appnexus.api.transport.base import BaseTransport
from appnexus.api.transport.httpx_transport import HttpxTransport

logger = get_logger(__name__)


@dataclass
class ClientOptions:
    """Per-instance client configuration.

    ``api_base``, ``proxy`` and ``limits`` are fixed at construction;
    ``token`` reflects the client's current access token.
    """
    api_base: str
    proxy: Optional[str]
    limits: RateLimits
    token_state: TokenState = field(default_factory=TokenState, repr=False)

    @property
    def token(self) -> Optional[Token]:
        return self.token_state.token


class Client:
    """Authenticated, rate-limited AppNexus API client.

    Usage:
        async with Client() as client:
            await client.authorize("user", "secret")
            members = await client.get(Endpoint.MEMBER_SERVICE)
    """

    def __init__(
        self,
        api_base: Optional[str] = None,
        proxy: Optional[str] = None,
        limits: Union[RateLimits, Mapping[str, int], None] = None,
        *,
        transport: Optional[BaseTransport] = None,
        clock: Callable[[], float] = time.time,
        client_settings: Optional[ClientSettings] = None
    ):
        """Initialize the client.

        Args:
            api_base: API domain (default https://api.appnexus.com)
            proxy: Optional proxy URL
            limits: Permits per window for auth, read and write; a mapping
                may omit categories to keep the configured limits
            transport: Transport performing the HTTP calls (an
                HttpxTransport for ``api_base`` if omitted)
            clock: Wall-clock source used to stamp and age tokens
            client_settings: Settings supplying defaults (module settings
                if omitted)
        """
        cfg = client_settings or settings

        if limits is None:
            limits = cfg.rate_limits
        elif not isinstance(limits, RateLimits):
            limits = replace(cfg.rate_limits, **dict(limits))

        api_base = api_base or cfg.api_base
        proxy = proxy or cfg.proxy

        self._token_state = TokenState(clock=clock)
        self.options = ClientOptions(
            api_base=api_base,
            proxy=proxy,
            limits=limits,
            token_state=self._token_state,
        )

        self._limiter = CategoryRateLimiter(
            limits,
            auth_period=cfg.auth_period_seconds,
            read_period=cfg.read_period_seconds,
            write_period=cfg.write_period_seconds,
        )
        self.transport = transport or HttpxTransport(
            api_base, proxy=proxy, client_settings=cfg
        )
        self._authorizer = Authorizer(self.request, self._token_state)
        self._refresh_task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, client_settings: Optional[ClientSettings] = None, **kwargs) -> "Client":
        """Create a client configured entirely from settings.

        When the settings carry a username and password they are stored
        on the client, so the first request authorizes on its own.
        """
        cfg = client_settings or settings
        client = cls(
            api_base=cfg.api_base,
            proxy=cfg.proxy,
            limits=cfg.rate_limits,
            client_settings=cfg,
            **kwargs
        )
        if cfg.username and cfg.password:
            client._authorizer.set_credentials(cfg.username, cfg.password)
        return client

    @property
    def limiters(self) -> CategoryRateLimiter:
        return self._limiter

    async def rate_limiter(self, method: str, endpoint: str) -> Optional[int]:
        """Wait for admission in the bucket the call belongs to.

        Returns:
            Permits remaining in that bucket, or None when the call is not
            rate limited

        Raises:
            RateLimitError: If the bucket fails to grant admission
        """
        return await self._limiter.acquire(method, endpoint)

    def is_expired(self, reference_time: float = 0.0) -> bool:
        """Check if the access token is expired (see TokenState.is_expired)."""
        return self._token_state.is_expired(reference_time)

    async def authorize(self, username: Optional[str], password: Optional[str]) -> str:
        """Exchange credentials for an access token.

        Raises:
            CredentialError: If username or password is missing
            TransportError: If the authentication call fails
        """
        return await self._authorizer.authorize(username, password)

    async def refresh_token(self) -> str:
        """Re-authorize with the credentials from the last ``authorize`` call.

        Raises:
            CredentialError: If ``authorize`` was never called
        """
        return await self._authorizer.refresh_token()

    async def _refresh(self) -> str:
        try:
            return await self._authorizer.refresh_token()
        finally:
            self._refresh_task = None

    async def _ensure_fresh_token(self, method: str, endpoint: str) -> None:
        # Single-flight: every caller awaits the same in-flight refresh and
        # shares its result or its error.
        if self._refresh_task is None:
            logger.info(
                "Access token expired, re-authorizing",
                extra=get_log_context(method=method, endpoint=str(endpoint)),
            )
            self._refresh_task = asyncio.ensure_future(self._refresh())
        await asyncio.shield(self._refresh_task)

    async def request(
        self,
        method: str,
        endpoint: str,
        args: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Send an API call with rate limiting and token renewal.

        Args:
            method: HTTP method
            endpoint: API endpoint path (see Endpoint)
            args: Query parameters or JSON body

        Returns:
            The response payload from the transport

        Raises:
            RateLimitError: If rate limiter admission fails
            CredentialError: If the token is expired and no credentials are
                stored; the transport is not called
            TransportError: If the underlying call fails
        """
        await self.rate_limiter(method, endpoint)

        if endpoint != AUTHENTICATION_SERVICE and self.is_expired():
            await self._ensure_fresh_token(method, endpoint)

        return await self.transport.send(method, endpoint, args, self._token_state.value)

    async def get(self, endpoint: str, args: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", endpoint, args)

    async def post(self, endpoint: str, args: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", endpoint, args)

    async def put(self, endpoint: str, args: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", endpoint, args)

    async def delete(self, endpoint: str, args: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", endpoint, args)

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self.transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
