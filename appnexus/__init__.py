"""Authenticated, rate-limited client for the AppNexus API."""

from appnexus.api import (
    AUTHENTICATION_SERVICE,
    Client,
    CredentialError,
    Endpoint,
    RateLimitError,
    RateLimits,
    TransportError,
)

__all__ = [
    "AUTHENTICATION_SERVICE",
    "Client",
    "CredentialError",
    "Endpoint",
    "RateLimitError",
    "RateLimits",
    "TransportError",
]
