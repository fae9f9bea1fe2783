"""Numeric process exit codes for programs built on lambda_utils.

Each constant maps to a failure category and is referenced by the
corresponding :class:`~lambda_utils.exceptions.LambdaUtilsError` subclass.
Schedulers and shell wrappers can inspect the exit code to tell a flaky
network from a bad upstream response without parsing logs.

Example::

    $ lambda-utils get https://api.example.com/prices
    $ echo $?
    4   # EXIT_HTTP_STATUS -- the server answered with a non-2xx status
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments or configuration."""

EXIT_TRANSPORT_ERROR = 3
"""No response was received after all retries (timeout, DNS failure, connection refused)."""

EXIT_HTTP_STATUS = 4
"""A response was received but carried a non-2xx status."""

EXIT_RESPONSE_READ = 5
"""The response body could not be read or decoded."""

EXIT_CLIENT_INIT = 6
"""The shared HTTP client could not be constructed."""

EXIT_CACHE_IO = 7
"""Reading or writing a cache file failed."""
