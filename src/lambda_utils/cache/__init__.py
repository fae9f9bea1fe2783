"""Cache-aside helpers for lambda_utils.

This package provides :func:`try_cached_query`, which wraps any async
query with read-through/write-through file caching, and
:func:`dated_cache_path`, which names one cache file per logical name per
UTC day.
"""

from lambda_utils.cache.cache import QueryCallable, dated_cache_path, try_cached_query

__all__ = ["QueryCallable", "dated_cache_path", "try_cached_query"]
