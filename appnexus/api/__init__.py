"""AppNexus API client package.

This package provides:
- The rate-limited, self-authorizing client (Client)
- Endpoint paths (Endpoint, AUTHENTICATION_SERVICE)
- Exceptions (CredentialError, RateLimitError, TransportError)
"""

from appnexus.api.client import Client, ClientOptions
from appnexus.api.endpoints import AUTHENTICATION_SERVICE, Endpoint
from appnexus.api.exceptions import (
    AppNexusError,
    CredentialError,
    RateLimitError,
    TransportError,
)
from appnexus.api.rate_limit import RateLimits
from appnexus.api.services import TOKEN_LIFETIME, Token

__all__ = [
    "Client",
    "ClientOptions",
    "AUTHENTICATION_SERVICE",
    "Endpoint",
    "AppNexusError",
    "CredentialError",
    "RateLimitError",
    "TransportError",
    "RateLimits",
    "TOKEN_LIFETIME",
    "Token",
]
