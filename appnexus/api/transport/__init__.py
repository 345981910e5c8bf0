"""Transports package for the AppNexus client.

This package provides:
- Base transport interface (BaseTransport)
- httpx implementation (HttpxTransport)
- In-memory implementation for tests (MockTransport)
"""

from appnexus.api.transport.base import BaseTransport
from appnexus.api.transport.httpx_transport import HttpxTransport
from appnexus.api.transport.mock import MockTransport, RecordedCall

__all__ = [
    "BaseTransport",
    "HttpxTransport",
    "MockTransport",
    "RecordedCall",
]
