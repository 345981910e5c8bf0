"""Client-side token bucket rate limiter.

Each limiter guards one request category. The bucket refills
continuously at ``max_permits / window_seconds`` permits per second and
never holds more than ``max_permits``. Callers that find the bucket empty
are suspended, in arrival order, until enough permits have accumulated.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from appnexus.api.core.logging import get_logger
from appnexus.api.exceptions import RateLimitError
from appnexus.api.rate_limit.models import RateLimitResult, TokenBucket

logger = get_logger(__name__)

# Tolerance for float drift when comparing fractional permit counts
EPSILON = 1e-9


class RateLimiter:
    """Async token bucket limiting admissions per rolling window.

    Concurrent ``acquire`` calls are served first-come-first-served: the
    waiter at the head holds the bucket lock while it sleeps for the
    refill, so later callers queue behind it.

    A permit is charged the moment it is granted. Cancelling a caller
    while it is still waiting consumes nothing; a granted permit is never
    refunded.
    """

    def __init__(
        self,
        max_permits: int,
        window_seconds: float,
        name: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the limiter with a full bucket.

        Args:
            max_permits: Maximum admissions per window (bucket capacity)
            window_seconds: Window length in seconds
            name: Label used in log messages and errors
            clock: Monotonic time source in seconds
            sleep: Coroutine used to wait for refill

        Raises:
            ValueError: If max_permits or window_seconds is not positive
        """
        if max_permits < 1:
            raise ValueError("max_permits must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_permits = max_permits
        self.window_seconds = window_seconds
        self.name = name or "default"
        self._clock = clock
        self._sleep = sleep
        self._rate = max_permits / window_seconds
        self._bucket = TokenBucket(tokens=float(max_permits), last_update=clock())
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._bucket.last_update)
        self._bucket.tokens = min(
            float(self.max_permits),
            self._bucket.tokens + elapsed * self._rate
        )
        self._bucket.last_update = now

    def _check_permits(self, permits: int) -> None:
        if permits < 1:
            raise RateLimitError(
                f"Invalid permit count {permits} for '{self.name}' limiter",
                category=self.name,
            )
        if permits > self.max_permits:
            raise RateLimitError(
                f"Requested {permits} permits but '{self.name}' bucket holds "
                f"at most {self.max_permits}",
                category=self.name,
            )

    async def acquire(self, permits: int = 1) -> int:
        """Wait until ``permits`` are available, then consume them.

        Args:
            permits: Number of permits to take (default 1)

        Returns:
            Whole permits remaining in the bucket after this admission

        Raises:
            RateLimitError: If the request can never be satisfied or the
                bucket machinery fails
        """
        self._check_permits(permits)

        try:
            async with self._lock:
                while True:
                    self._refill()
                    if self._bucket.tokens + EPSILON >= permits:
                        self._bucket.tokens = max(0.0, self._bucket.tokens - permits)
                        return int(self._bucket.tokens + EPSILON)

                    delay = (permits - self._bucket.tokens) / self._rate
                    logger.debug(
                        f"'{self.name}' bucket empty, waiting {delay:.3f}s for refill"
                    )
                    await self._sleep(delay)
        except (asyncio.CancelledError, RateLimitError):
            raise
        except Exception as e:
            raise RateLimitError(
                f"'{self.name}' limiter failed: {type(e).__name__}: {e}",
                category=self.name,
            ) from e

    def try_acquire(self, permits: int = 1) -> RateLimitResult:
        """Take permits only if they are available right now.

        Never jumps the queue: while any caller is waiting in ``acquire``
        the attempt is refused.
        """
        self._check_permits(permits)

        if not self._lock.locked():
            self._refill()
            if self._bucket.tokens + EPSILON >= permits:
                self._bucket.tokens = max(0.0, self._bucket.tokens - permits)
                return RateLimitResult(
                    allowed=True,
                    limit=self.max_permits,
                    remaining=int(self._bucket.tokens + EPSILON),
                )

        retry_after = max(0.0, (permits - self._bucket.tokens) / self._rate)
        return RateLimitResult(
            allowed=False,
            limit=self.max_permits,
            remaining=0,
            retry_after=retry_after,
        )

    @property
    def available_permits(self) -> float:
        """Current (fractional) permits in the bucket."""
        self._refill()
        return self._bucket.tokens

    def reset(self) -> None:
        """Refill the bucket to capacity."""
        self._bucket = TokenBucket(
            tokens=float(self.max_permits),
            last_update=self._clock()
        )
