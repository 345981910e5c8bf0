"""Core utilities for the AppNexus client."""

from appnexus.api.core.config import ClientSettings, settings
from appnexus.api.core.http_client import create_http_client
from appnexus.api.core.logging import get_logger, setup_logging

__all__ = [
    "ClientSettings",
    "settings",
    "create_http_client",
    "get_logger",
    "setup_logging",
]
