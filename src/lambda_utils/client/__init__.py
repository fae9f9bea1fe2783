"""Resilient HTTP querying for lambda_utils.

Provides a process-wide :class:`httpx.AsyncClient` and a GET helper that
retries transport failures with jittered exponential backoff.

Functions:
    :func:`get_client` -- the shared client, built on first use.
    :func:`http_get` -- retrying GET returning the body as text.

Example::

    from lambda_utils.client import http_get

    body = await http_get("https://api.example.com/prices", {"symbol": "ETH"})
"""

from lambda_utils.client.query import (
    aclose_client,
    backoff_delays,
    get_client,
    http_get,
    reset_client,
)

__all__ = ["get_client", "http_get", "aclose_client", "reset_client", "backoff_delays"]
