"""lambda_utils -- Support library for short-lived client programs.

Scheduled cloud functions and cron jobs tend to need the same few things:
log lines the platform can collect, an HTTP client that shrugs off a
flaky network, and a way to avoid re-fetching the same data every run.
This package provides them.

Typical use::

    from lambda_utils.cache import dated_cache_path, try_cached_query
    from lambda_utils.client import http_get
    from lambda_utils.logger import init

    init("prices", __name__)
    body = await try_cached_query(
        True,
        dated_cache_path("prices"),
        lambda: http_get("https://api.example.com/prices", {"symbol": "ETH"}),
    )

Modules:
    client: Shared httpx client and retrying GET.
    cache: Daily-rotating file cache-aside helper.
    logger: Logging setup for entry points.
    models: Pydantic models for retry policy and settings.
    config: Settings resolution from file, environment, and CLI flags.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting for the CLI.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"
