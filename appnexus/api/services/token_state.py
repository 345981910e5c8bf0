"""Access token storage and expiry checks."""

import time
from dataclasses import dataclass
from typing import Callable, Optional


# Seconds after issuance at which a token is treated as expired
TOKEN_LIFETIME = 60 * 60


@dataclass(frozen=True)
class Token:
    """An issued access token and its acquisition time (epoch seconds)."""
    value: str
    issued_at: float

    def __repr__(self) -> str:
        return f"Token(value='***', issued_at={self.issued_at})"


class TokenState:
    """Holds the current token for one client.

    The token is an immutable object replaced wholesale, so a concurrent
    reader sees either the previous token or the new one.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._token: Optional[Token] = None

    @property
    def token(self) -> Optional[Token]:
        return self._token

    @property
    def value(self) -> Optional[str]:
        """Raw token string, or None if never authenticated."""
        return self._token.value if self._token else None

    def set(self, value: str) -> Token:
        """Store a freshly issued token stamped with the current time."""
        token = Token(value=value, issued_at=self._clock())
        self._token = token
        return token

    def clear(self) -> None:
        self._token = None

    def age(self) -> Optional[float]:
        """Seconds since the current token was issued."""
        if self._token is None:
            return None
        return self._clock() - self._token.issued_at

    def is_expired(self, reference_time: float = 0.0) -> bool:
        """Check whether the current token has outlived TOKEN_LIFETIME.

        Uses the token's issuance time when a token exists, otherwise
        ``reference_time``. With the default of 0 a client that has never
        authenticated always reports expired.

        Args:
            reference_time: Fallback issuance time in epoch seconds

        Returns:
            True if ``issued_at + TOKEN_LIFETIME <= now``
        """
        token = self._token
        issued_at = token.issued_at if token else reference_time
        return issued_at + TOKEN_LIFETIME <= self._clock()
