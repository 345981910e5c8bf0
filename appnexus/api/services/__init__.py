"""Services package for the client.

This package provides:
- Token storage with expiry checks (TokenState)
- Credential exchange and re-authorization (Authorizer)
"""

from appnexus.api.services.authorizer import Authorizer, Credentials
from appnexus.api.services.token_state import TOKEN_LIFETIME, Token, TokenState

__all__ = [
    "Authorizer",
    "Credentials",
    "TOKEN_LIFETIME",
    "Token",
    "TokenState",
]
