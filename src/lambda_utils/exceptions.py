"""Exception hierarchy for lambda_utils.

All exceptions inherit from :class:`LambdaUtilsError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`lambda_utils.exit_codes`. The CLI entry point catches
``LambdaUtilsError`` and exits with the appropriate code.

Exceptions raised by a caller-supplied fetch callback are *not* part of
this hierarchy: :func:`~lambda_utils.cache.try_cached_query` lets them
propagate unchanged.

Subclass hierarchy::

    LambdaUtilsError (exit 1)
    +-- ConfigError         (exit 2)
    +-- TransportError      (exit 3)
    +-- HttpStatusError     (exit 4)
    +-- ResponseReadError   (exit 5)
    +-- ClientInitError     (exit 6)
    +-- CacheError          (exit 7)
        +-- CacheReadError
        +-- CacheWriteError
"""

from __future__ import annotations

from pathlib import Path

from lambda_utils.exit_codes import (
    EXIT_CACHE_IO,
    EXIT_CLIENT_INIT,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_STATUS,
    EXIT_INVALID_USAGE,
    EXIT_RESPONSE_READ,
    EXIT_TRANSPORT_ERROR,
)


class LambdaUtilsError(Exception):
    """Base exception for all lambda_utils errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(LambdaUtilsError):
    """Raised for invalid settings files or environment values."""

    exit_code = EXIT_INVALID_USAGE


class ClientInitError(LambdaUtilsError):
    """Raised when the shared HTTP client cannot be constructed. Never retried."""

    exit_code = EXIT_CLIENT_INIT


class TransportError(LambdaUtilsError):
    """Raised when no response was received after every retry was used up.

    Attributes:
        url: The request URL.
        attempts: How many attempts were made before giving up.
    """

    exit_code = EXIT_TRANSPORT_ERROR

    def __init__(self, url: str, attempts: int, reason: str = ""):
        message = f"Failed to make HTTP request to {url} after {attempts} attempts"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url
        self.attempts = attempts


class HttpStatusError(LambdaUtilsError):
    """Raised when a response arrived with a non-2xx status."""

    exit_code = EXIT_HTTP_STATUS

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP request failed for {url}: status {status_code}")
        self.url = url
        self.status_code = status_code


class ResponseReadError(LambdaUtilsError):
    """Raised when a response body cannot be read or decoded as text."""

    exit_code = EXIT_RESPONSE_READ

    def __init__(self, url: str, reason: str = ""):
        message = f"Failed to read response body from {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url


class CacheError(LambdaUtilsError):
    """Base class for cache file I/O failures.

    Attributes:
        path: The cache file that could not be read or written.
    """

    exit_code = EXIT_CACHE_IO
    action = "access"

    def __init__(self, path: Path, reason: str = ""):
        message = f"Failed to {self.action} cache file: {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class CacheReadError(CacheError):
    """Raised when an existing cache file cannot be read. Never treated as a miss."""

    action = "read"


class CacheWriteError(CacheError):
    """Raised when a fetched value cannot be written to its cache file."""

    action = "write"
