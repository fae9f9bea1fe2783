"""Daily-rotating file cache for expensive queries.

Each logical cache name maps to one file per UTC calendar day::

    $TMPDIR/<name>.YYYYMMDD.json

Because the date is part of the file name, yesterday's entry is never
read again once the day rolls over; expiration is implicit and the old
files are left for the OS temp-directory housekeeping to reclaim. There
is no eviction and no locking: two concurrent misses for the same name
both run the query and the last write wins.

See Also:
    :func:`~lambda_utils.client.http_get` -- the usual query being cached.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Awaitable, Optional, Protocol

from lambda_utils.exceptions import CacheReadError, CacheWriteError

logger = logging.getLogger(__name__)


class QueryCallable(Protocol):
    """Zero-argument callable producing the text to cache.

    Any ``async def`` function or lambda returning a coroutine fits.
    """

    def __call__(self) -> Awaitable[str]: ...


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def dated_cache_path(
    name: str,
    *,
    directory: Optional[str | Path] = None,
    today: Optional[date] = None,
) -> Path:
    """Return today's cache path for *name*.

    The date is recomputed on every call, so a long-running process gets
    a fresh path after midnight UTC.

    Args:
        name: Logical cache name, used as the file name prefix.
        directory: Directory for the file. Defaults to the system temp
            directory.
        today: Date to stamp. Defaults to the current UTC date.

    Returns:
        ``<directory>/<name>.<YYYYMMDD>.json``.
    """
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    stamp = (today or _utc_today()).strftime("%Y%m%d")
    return base / f"{name}.{stamp}.json"


async def try_cached_query(
    use_cache: bool,
    cache_path: Path,
    query: QueryCallable,
) -> str:
    """Return cached content for *cache_path*, or run *query* and cache its result.

    With ``use_cache`` off the filesystem is not touched at all. With it on,
    an existing file is returned as-is without running *query*; otherwise
    *query* runs and its result is written before being returned.

    Args:
        use_cache: Whether to read and write the cache file.
        cache_path: File holding the cached text, usually from
            :func:`dated_cache_path`.
        query: Produces the text on a miss. Its exceptions propagate
            unchanged.

    Returns:
        The cached or freshly queried text.

    Raises:
        CacheReadError: If the file exists but cannot be read.
        CacheWriteError: If the fresh result cannot be written. The result
            is discarded in that case.
    """
    if not use_cache:
        return await query()

    cached = await _read_cache(cache_path)
    if cached is not None:
        return cached

    response = await query()
    await _write_cache(cache_path, response)
    return response


async def _read_cache(cache_path: Path) -> Optional[str]:
    """Return the file's text, or ``None`` when there is no file."""
    if not await asyncio.to_thread(cache_path.exists):
        return None
    logger.debug("Reading cache file: %s", cache_path)
    try:
        return await asyncio.to_thread(cache_path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CacheReadError(cache_path, str(exc)) from exc


async def _write_cache(cache_path: Path, response: str) -> None:
    logger.debug("Writing response to cache file: %s", cache_path)
    try:
        await asyncio.to_thread(cache_path.write_text, response, encoding="utf-8")
    except OSError as exc:
        raise CacheWriteError(cache_path, str(exc)) from exc
