"""Rate limiting data models.

This module contains dataclasses for rate limit state and results.
"""

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional


# Default permits per window
MAX_AUTH_PER_PERIOD = 10
MAX_READ_PER_PERIOD = 100
MAX_WRITE_PER_PERIOD = 60

# Default window lengths in seconds
MAX_AUTH_PERIOD = 300.0
MAX_READ_PERIOD = 60.0
MAX_WRITE_PERIOD = 60.0


class RateLimitCategory(StrEnum):
    """Request categories with independent quotas."""
    AUTH = "auth"
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class RateLimits:
    """Maximum permits per window for each category."""
    auth: int = MAX_AUTH_PER_PERIOD
    read: int = MAX_READ_PER_PERIOD
    write: int = MAX_WRITE_PER_PERIOD

    def __post_init__(self) -> None:
        for name in ("auth", "read", "write"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} limit must be at least 1")

    def for_category(self, category: RateLimitCategory) -> int:
        return getattr(self, category.value)


@dataclass
class RateLimitResult:
    """Result of a non-blocking admission attempt."""
    allowed: bool
    limit: int
    remaining: int
    retry_after: Optional[float] = None


@dataclass
class TokenBucket:
    """Token bucket state for the continuously refilling algorithm."""
    tokens: float = field(default_factory=float)
    last_update: float = field(default_factory=time.monotonic)
