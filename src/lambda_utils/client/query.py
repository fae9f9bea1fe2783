"""Shared asynchronous HTTP client and retrying GET.

This module owns one process-wide :class:`httpx.AsyncClient`, created
lazily by :func:`get_client` and reused for the life of the process so
that every caller shares one connection pool. :func:`http_get` wraps a
GET request in bounded exponential-backoff retry:

- **Transport failures are retried** -- connect errors, timeouts, and other
  :class:`httpx.TransportError` subclasses, up to
  :attr:`~lambda_utils.models.RetryPolicy.max_retries` times.
- **Status failures are not** -- once a response arrives, a non-2xx status
  raises :class:`~lambda_utils.exceptions.HttpStatusError` immediately.

The body is returned as raw text; callers parse it themselves.

See Also:
    :class:`~lambda_utils.models.RetryPolicy` for the delay schedule.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

import httpx

from lambda_utils.exceptions import (
    ClientInitError,
    HttpStatusError,
    ResponseReadError,
    TransportError,
)
from lambda_utils.models import HttpClientConfig, RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_RETRY_POLICY = RetryPolicy()

_REQUEST_HEADERS = {
    "Accept": "application/json",
    "Accept-Encoding": "gzip",
}

QueryParams = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]

_client: Optional[httpx.AsyncClient] = None
_client_lock = threading.Lock()


# ------------------------------------------------------------------ #
# Shared client
# ------------------------------------------------------------------ #


def build_client(
    config: HttpClientConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Construct an :class:`httpx.AsyncClient` from *config*.

    httpx has no single whole-request deadline, so ``config.timeout`` is
    applied to each of the read, write, and pool-acquire phases while
    ``config.connect_timeout`` bounds connection setup. Redirects are
    followed, so the status check in :func:`http_get` sees the final
    response.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
        limits=httpx.Limits(
            max_keepalive_connections=config.max_idle_per_host,
            keepalive_expiry=config.pool_idle_timeout,
        ),
        follow_redirects=True,
        transport=transport,
    )


def get_client() -> httpx.AsyncClient:
    """Return the shared :class:`httpx.AsyncClient`, building it on first use.

    Initialisation is guarded by a lock with a double check, so concurrent
    first callers (tasks or threads) all receive the same fully built
    instance.

    Returns:
        The process-wide client.

    Raises:
        ClientInitError: If the client cannot be constructed (for example a
            broken TLS configuration). This is not retried.
    """
    global _client
    client = _client
    if client is not None:
        return client
    with _client_lock:
        if _client is None:
            try:
                _client = build_client(HttpClientConfig())
            except Exception as exc:
                raise ClientInitError(f"Failed to create HTTP client: {exc}") from exc
            logger.debug("Created shared HTTP client")
        return _client


def reset_client() -> None:
    """Forget the shared client without closing it.

    The next :func:`get_client` call builds a new one. Primarily useful in
    test suites; use :func:`aclose_client` to also release connections.
    """
    global _client
    with _client_lock:
        _client = None


async def aclose_client() -> None:
    """Close the shared client, if one exists, and forget it."""
    global _client
    with _client_lock:
        client, _client = _client, None
    if client is not None:
        await client.aclose()


# ------------------------------------------------------------------ #
# Retrying GET
# ------------------------------------------------------------------ #


def backoff_delays(policy: RetryPolicy) -> Iterator[float]:
    """Yield the delay to sleep before each retry allowed by *policy*."""
    for retry in range(1, policy.max_retries + 1):
        yield policy.delay(retry)


async def http_get(
    url: str,
    params: Optional[QueryParams] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    policy: Optional[RetryPolicy] = None,
) -> str:
    """Send a GET request with retry and return the response body as text.

    Args:
        url: Absolute request URL.
        params: Query parameters as a mapping or a sequence of pairs,
            serialised into the query string.
        client: Client to send with. Defaults to the shared client from
            :func:`get_client`.
        policy: Retry policy. Defaults to 3 retries, 100 ms base delay,
            2 s cap, with jitter.

    Returns:
        The decoded response body.

    Raises:
        ClientInitError: If the shared client cannot be built.
        TransportError: If no response was received after all retries.
        HttpStatusError: If the response status is not 2xx. Not retried.
        ResponseReadError: If the body cannot be read or decoded.
    """
    if client is None:
        client = get_client()
    if policy is None:
        policy = DEFAULT_RETRY_POLICY

    response = await _send_with_retry(client, url, params, policy)
    try:
        if not response.is_success:
            raise HttpStatusError(url, response.status_code)
        body = await _read_text(response, url)
    finally:
        await response.aclose()

    logger.debug("Response from %s: %s", url, body)
    return body


async def _send_with_retry(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[QueryParams],
    policy: RetryPolicy,
) -> httpx.Response:
    """Send the request until a response arrives or the policy is exhausted.

    The response is opened in streaming mode; the caller must close it.
    """
    delays = backoff_delays(policy)
    attempt = 0
    while True:
        attempt += 1
        request = client.build_request("GET", url, params=params, headers=_REQUEST_HEADERS)
        try:
            return await client.send(request, stream=True)
        except httpx.TransportError as exc:
            delay = next(delays, None)
            if delay is None:
                raise TransportError(url, attempt, str(exc)) from exc
            logger.debug(
                "Request to %s failed: %s, retrying in %.3fs (attempt %d/%d)",
                url,
                exc,
                delay,
                attempt,
                policy.max_attempts,
            )
            await asyncio.sleep(delay)


async def _read_text(response: httpx.Response, url: str) -> str:
    """Read the full body and decode it strictly with the response encoding."""
    try:
        content = await response.aread()
    except httpx.HTTPError as exc:
        raise ResponseReadError(url, str(exc)) from exc
    try:
        return content.decode(response.encoding or "utf-8")
    except (UnicodeDecodeError, LookupError) as exc:
        raise ResponseReadError(url, str(exc)) from exc
