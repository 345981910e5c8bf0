"""Shared fixtures for the client test suite."""

import asyncio

import pytest


class FakeClock:
    """Controllable time source.

    ``sleep`` advances the clock instead of waiting, so rate limiter
    refill can be tested without real delays.
    """

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()
