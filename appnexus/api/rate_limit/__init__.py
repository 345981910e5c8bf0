"""Client-side rate limiting for outbound API calls.

This package keeps one token bucket per request category (auth, read,
write) and routes each call to the bucket its method and endpoint
belong to.
"""

from typing import Callable, Dict, Optional

from appnexus.api.core.logging import get_log_context, get_logger
from appnexus.api.endpoints import AUTHENTICATION_SERVICE

# Re-export models
from appnexus.api.rate_limit.models import (
    MAX_AUTH_PERIOD,
    MAX_READ_PERIOD,
    MAX_WRITE_PERIOD,
    RateLimitCategory,
    RateLimitResult,
    RateLimits,
    TokenBucket,
)
from appnexus.api.rate_limit.limiter import RateLimiter

logger = get_logger(__name__)

__all__ = [
    # Models
    "RateLimitCategory",
    "RateLimitResult",
    "RateLimits",
    "TokenBucket",
    # Limiters
    "RateLimiter",
    "CategoryRateLimiter",
    "select_category",
]

WRITE_METHODS = frozenset({"POST", "PUT", "DELETE"})


def select_category(method: str, endpoint: str) -> Optional[RateLimitCategory]:
    """Pick the rate limit category for a call.

    Rules, in order: the authentication endpoint always uses the auth
    bucket; POST, PUT and DELETE use write; GET uses read. Any other
    method is not rate limited.

    Args:
        method: HTTP method
        endpoint: API endpoint path

    Returns:
        The category, or None when the call is not rate limited
    """
    if endpoint == AUTHENTICATION_SERVICE:
        return RateLimitCategory.AUTH

    method = (method or "").upper()
    if method in WRITE_METHODS:
        return RateLimitCategory.WRITE
    if method == "GET":
        return RateLimitCategory.READ
    return None


class CategoryRateLimiter:
    """Three independent limiters, one per category."""

    def __init__(
        self,
        limits: Optional[RateLimits] = None,
        auth_period: float = MAX_AUTH_PERIOD,
        read_period: float = MAX_READ_PERIOD,
        write_period: float = MAX_WRITE_PERIOD,
        limiter_factory: Callable[..., RateLimiter] = RateLimiter,
    ):
        """Build one limiter per category.

        Args:
            limits: Permits per window for each category (defaults 10/100/60)
            auth_period: Auth window in seconds
            read_period: Read window in seconds
            write_period: Write window in seconds
            limiter_factory: Callable building a limiter from
                (max_permits, window_seconds, name=...)
        """
        self.limits = limits or RateLimits()
        periods = {
            RateLimitCategory.AUTH: auth_period,
            RateLimitCategory.READ: read_period,
            RateLimitCategory.WRITE: write_period,
        }
        self._limiters: Dict[RateLimitCategory, RateLimiter] = {
            category: limiter_factory(
                self.limits.for_category(category),
                period,
                name=category.value,
            )
            for category, period in periods.items()
        }

    def __getitem__(self, category: RateLimitCategory) -> RateLimiter:
        return self._limiters[category]

    async def acquire(self, method: str, endpoint: str) -> Optional[int]:
        """Wait for a permit in the bucket the call belongs to.

        Returns:
            Permits remaining in that bucket, or None if the call is not
            rate limited

        Raises:
            RateLimitError: If the bucket fails to grant admission
        """
        category = select_category(method, endpoint)
        if category is None:
            return None

        remaining = await self._limiters[category].acquire()
        logger.debug(
            "Rate limit permit granted",
            extra=get_log_context(
                method=method,
                endpoint=str(endpoint),
                category=category.value,
                remaining=remaining,
            ),
        )
        return remaining
