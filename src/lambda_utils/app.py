"""Typer application and CLI entry point for lambda_utils.

The ``lambda-utils`` command exposes the cache-aside query layer from a
shell, which is handy for warming a cache from cron or checking what a
scheduled function will see::

    lambda-utils get https://api.example.com/prices -p symbol=ETH --cache prices
    lambda-utils cache-path prices

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Library errors are reported on stderr and mapped to
the exit codes in :mod:`lambda_utils.exit_codes`.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any, Optional

import typer

from lambda_utils import __version__
from lambda_utils.exceptions import LambdaUtilsError
from lambda_utils.exit_codes import EXIT_INVALID_USAGE


app = typer.Typer(
    name="lambda-utils",
    help="Cached, retrying HTTP queries for scheduled jobs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"lambda-utils {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: Optional[bool] = typer.Option(
        None, "--verbose/--no-verbose", "-v", help="Enable debug logging on stderr."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~lambda_utils.output.OutputManager` and
    stores shared options in ``ctx.obj``.
    """
    from lambda_utils.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _parse_params(raw: list[str]) -> list[tuple[str, str]]:
    """Split ``key=value`` strings into query parameter pairs, keeping order."""
    from lambda_utils.output import error

    pairs: list[tuple[str, str]] = []
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key:
            error(f"Invalid parameter {item!r}, expected key=value")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        pairs.append((key, value))
    return pairs


def _fail(exc: LambdaUtilsError) -> typer.Exit:
    from lambda_utils.output import error

    error(str(exc))
    return typer.Exit(code=exc.exit_code)


@app.command("get")
def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL to GET."),
    param: list[str] = typer.Option(
        [], "--param", "-p", help="Query parameter as key=value. Repeatable."
    ),
    cache: Optional[str] = typer.Option(
        None, "--cache", "-c", help="Logical cache name; caches the body for today (UTC)."
    ),
    use_cache: Optional[bool] = typer.Option(
        None, "--use-cache/--no-cache", help="Force caching on or off."
    ),
) -> None:
    """GET a URL with retry and print the body.

    With ``--cache NAME`` the body is read from, or written to, today's
    cache file for ``NAME`` unless caching is disabled by ``--no-cache``,
    ``LAMBDA_UTILS_USE_CACHE=0``, or the project config.

    Example::

        lambda-utils get https://api.example.com/prices -p symbol=ETH --cache prices
    """
    from lambda_utils.cache import dated_cache_path, try_cached_query
    from lambda_utils.client import aclose_client, http_get
    from lambda_utils.config import resolve_settings
    from lambda_utils.logger import set_up_logger
    from lambda_utils.output import format_response, info

    params = _parse_params(param)
    try:
        settings = resolve_settings(cli_use_cache=use_cache, cli_verbose=ctx.obj.get("verbose"))
    except LambdaUtilsError as exc:
        raise _fail(exc) from exc

    set_up_logger(
        settings.logging.app_name, __name__, settings.logging.verbose, stream=sys.stderr
    )

    caching = cache is not None and settings.cache.enabled
    cache_path = (
        dated_cache_path(cache, directory=settings.cache.directory) if cache is not None else None
    )

    async def _query() -> str:
        return await http_get(url, params, policy=settings.retry)

    async def _run() -> str:
        try:
            if cache_path is None:
                return await _query()
            return await try_cached_query(caching, cache_path, _query)
        finally:
            await aclose_client()

    try:
        body = asyncio.run(_run())
    except LambdaUtilsError as exc:
        raise _fail(exc) from exc

    if caching:
        info(f"Cache file: {cache_path}")
    format_response(body)


@app.command("cache-path")
def cache_path_command(
    name: str = typer.Argument(help="Logical cache name."),
) -> None:
    """Print today's cache file path for NAME."""
    from lambda_utils.cache import dated_cache_path
    from lambda_utils.config import resolve_settings
    from lambda_utils.output import get_output

    try:
        settings = resolve_settings()
    except LambdaUtilsError as exc:
        raise _fail(exc) from exc
    get_output().print_data(str(dated_cache_path(name, directory=settings.cache.directory)))


@app.command("config")
def config_command(ctx: typer.Context) -> None:
    """Show the resolved settings."""
    from lambda_utils.config import resolve_settings
    from lambda_utils.output import format_response

    try:
        settings = resolve_settings(cli_verbose=ctx.obj.get("verbose"))
    except LambdaUtilsError as exc:
        raise _fail(exc) from exc
    format_response(settings.model_dump(mode="json"))


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``lambda-utils`` console script."""
    _setup_signal_handlers()
    app()
