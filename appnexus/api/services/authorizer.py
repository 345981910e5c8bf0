"""Credential exchange and token renewal.

The authorizer owns the credentials of a single client instance and is
the only writer of its token state. Authentication requests are sent
through the client's rate-limited dispatch so they draw from the auth
bucket like any other call to the authentication endpoint.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from appnexus.api.core.logging import get_log_context, get_logger
from appnexus.api.endpoints import AUTHENTICATION_SERVICE
from appnexus.api.exceptions import CredentialError, TransportError
from appnexus.api.services.token_state import TokenState

logger = get_logger(__name__)

SendFunc = Callable[[str, str, Optional[Dict[str, Any]]], Awaitable[Any]]


@dataclass(frozen=True)
class Credentials:
    """Username and password used to obtain tokens."""
    username: str
    password: str = field(repr=False)


class Authorizer:
    """Exchanges credentials for access tokens.

    Attributes:
        token_state: Token storage shared with the owning client
    """

    def __init__(self, send: SendFunc, token_state: TokenState):
        """Initialize the authorizer.

        Args:
            send: Coroutine ``send(method, endpoint, args)`` used to reach
                the authentication endpoint
            token_state: Token storage to write issued tokens to
        """
        self._send = send
        self.token_state = token_state
        self._credentials: Optional[Credentials] = None

    @property
    def has_credentials(self) -> bool:
        return self._credentials is not None

    def set_credentials(self, username: Optional[str], password: Optional[str]) -> None:
        """Store credentials without authenticating.

        The next expired-token check re-authorizes with them.

        Raises:
            CredentialError: If username or password is empty
        """
        if not username or not password:
            raise CredentialError()
        self._credentials = Credentials(username=username, password=password)

    async def authorize(self, username: Optional[str], password: Optional[str]) -> str:
        """Authenticate and store the issued token.

        Args:
            username: API username
            password: API password

        Returns:
            The access token value

        Raises:
            CredentialError: If username or password is empty; no request
                is made in that case
            TransportError: If the request fails or the response carries
                no token
        """
        if not username or not password:
            raise CredentialError()

        self._credentials = Credentials(username=username, password=password)
        self.token_state.clear()

        response = await self._send(
            "POST",
            AUTHENTICATION_SERVICE,
            {"auth": {"username": username, "password": password}},
        )

        value = response.get("token") if isinstance(response, dict) else None
        if not value:
            raise TransportError(
                "Authentication response did not contain a token",
                body=response,
            )

        self.token_state.set(value)
        logger.info(
            "Authorized AppNexus client",
            extra=get_log_context(endpoint=str(AUTHENTICATION_SERVICE)),
        )
        return value

    async def refresh_token(self) -> str:
        """Re-authorize with the stored credentials.

        This is a full re-authorization, not a refresh grant.

        Raises:
            CredentialError: If ``authorize`` was never called
        """
        credentials = self._credentials
        if credentials is None:
            raise CredentialError()

        logger.debug("Refreshing expired token")
        return await self.authorize(credentials.username, credentials.password)
