"""HTTP client construction for the transport layer.

Builds ``httpx.AsyncClient`` instances with the granular timeouts,
connection pool limits and optional proxy configured in settings.
"""

from typing import Optional

import httpx

from appnexus.api.core.config import ClientSettings, settings


def create_http_client(
    client_settings: Optional[ClientSettings] = None,
    proxy: Optional[str] = None,
    **kwargs
) -> httpx.AsyncClient:
    """Create a new HTTP client with default settings.

    The returned client should be closed when done:
        async with create_http_client() as client:
            ...

    Args:
        client_settings: Settings to read defaults from (module settings if omitted)
        proxy: Optional proxy URL; falls back to the configured proxy
        **kwargs: Override default settings. Can include:
            - timeout: Single timeout value (overrides all granular timeouts)
            - connect_timeout: Connection timeout
            - read_timeout: Read timeout
            - write_timeout: Write timeout
            - pool_timeout: Pool acquisition timeout
            - max_connections: Maximum connections
            - max_keepalive_connections: Maximum keepalive connections
            - keepalive_expiry: Keepalive expiration time

    Returns:
        A new httpx.AsyncClient instance.
    """
    cfg = client_settings or settings

    timeout_override = kwargs.get("timeout")
    if timeout_override is not None:
        timeout = httpx.Timeout(timeout_override)
    else:
        timeout = httpx.Timeout(
            connect=kwargs.get("connect_timeout", cfg.httpx_connect_timeout),
            read=kwargs.get("read_timeout", cfg.httpx_read_timeout),
            write=kwargs.get("write_timeout", cfg.httpx_write_timeout),
            pool=kwargs.get("pool_timeout", cfg.httpx_pool_timeout),
        )

    limits = httpx.Limits(
        max_connections=kwargs.get("max_connections", cfg.httpx_max_connections),
        max_keepalive_connections=kwargs.get(
            "max_keepalive_connections", cfg.httpx_max_keepalive_connections
        ),
        keepalive_expiry=kwargs.get("keepalive_expiry", cfg.httpx_keepalive_expiry),
    )

    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        proxy=proxy or cfg.proxy,
    )
