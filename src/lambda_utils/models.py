"""Pydantic models shared across lambda_utils.

**Policy models** -- fixed tuning for the shared HTTP client:
    :class:`RetryPolicy` and :class:`HttpClientConfig`.

**Settings models** -- resolved by :mod:`lambda_utils.config` from the
project file, environment variables, and CLI flags:
    :class:`LoggingConfig`, :class:`CacheConfig`, and :class:`Settings`.

All models use Pydantic v2. The policy models are frozen so a policy
handed to :func:`~lambda_utils.client.http_get` cannot change mid-retry.
"""

from __future__ import annotations

import random
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- HTTP policy ---


class RetryPolicy(BaseModel):
    """Exponential backoff with a cap and optional jitter.

    The delay before retry *n* (1-based) starts at
    ``min(base_delay * 2 ** (n - 1), max_delay)``. With ``jitter`` enabled a
    random amount up to that floor is added, and the result is clamped to
    ``max_delay``, so a jittered delay always lies in ``[floor, max_delay]``.

    Example::

        policy = RetryPolicy()
        [policy.floor(n) for n in range(1, 4)]   # [0.1, 0.2, 0.4]
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    base_delay: float = Field(default=0.1, gt=0, description="First retry delay in seconds")
    max_delay: float = Field(default=2.0, gt=0, description="Cap on any single delay in seconds")
    jitter: bool = Field(default=True, description="Randomize each delay")

    @property
    def max_attempts(self) -> int:
        """Total attempts including the first one."""
        return self.max_retries + 1

    def floor(self, retry: int) -> float:
        """Return the un-jittered delay before retry number *retry* (1-based)."""
        if retry < 1:
            raise ValueError(f"retry index must be >= 1, got {retry}")
        return min(self.base_delay * 2 ** (retry - 1), self.max_delay)

    def delay(self, retry: int, rand: Callable[[], float] = random.random) -> float:
        """Return the delay to sleep before retry number *retry*.

        Args:
            retry: 1-based retry index.
            rand: Source of uniform values in ``[0, 1)``.
        """
        base = self.floor(retry)
        if not self.jitter:
            return base
        return min(base + base * rand(), self.max_delay)


class HttpClientConfig(BaseModel):
    """Construction settings for the shared :class:`httpx.AsyncClient`."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=30.0, description="Total request timeout in seconds")
    connect_timeout: float = Field(default=10.0, description="Connect timeout in seconds")
    pool_idle_timeout: float = Field(
        default=90.0, description="Seconds an idle keep-alive connection is kept"
    )
    max_idle_per_host: int = Field(default=10, description="Idle keep-alive connections to keep")


# --- Settings ---


class LoggingConfig(BaseModel):
    """Logger settings used by :func:`~lambda_utils.logger.set_up_logger`."""

    app_name: str = Field(default="lambda_utils", description="Logger name of the host program")
    verbose: bool = Field(default=False, description="Log at DEBUG instead of INFO")


class CacheConfig(BaseModel):
    """Cache-aside settings."""

    enabled: bool = Field(default=True, description="Read and write dated cache files")
    directory: Optional[str] = Field(
        default=None, description="Cache directory; the system temp dir when unset"
    )


class Settings(BaseModel):
    """Effective settings for a run.

    Loaded from ``./lambda_utils.json`` when present, then overridden by
    environment variables and CLI flags. See
    :func:`~lambda_utils.config.resolve_settings`.

    The shared client is always built from the default
    :class:`HttpClientConfig`, so it has no section here; unknown
    top-level keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
