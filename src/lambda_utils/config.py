"""Settings resolution for programs built on lambda_utils.

Scheduled functions are configured almost entirely through their
environment, so the layers are few:

* **Project file** -- ``./lambda_utils.json``, validated into
  :class:`~lambda_utils.models.Settings`. See :func:`load_project_settings`.
* **Environment variables** -- ``LAMBDA_UTILS_USE_CACHE``,
  ``LAMBDA_UTILS_VERBOSE``, and ``LAMBDA_UTILS_CACHE_DIR``.
* **CLI flags** -- passed straight into :func:`resolve_settings`.

Invalid files and unparseable values raise
:class:`~lambda_utils.exceptions.ConfigError` rather than being ignored.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from lambda_utils.exceptions import ConfigError
from lambda_utils.models import Settings

PROJECT_CONFIG_FILENAME = "lambda_utils.json"

ENV_USE_CACHE = "LAMBDA_UTILS_USE_CACHE"
ENV_VERBOSE = "LAMBDA_UTILS_VERBOSE"
ENV_CACHE_DIR = "LAMBDA_UTILS_CACHE_DIR"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean environment value.

    Args:
        name: Variable name, used in the error message.
        value: Raw value; case and surrounding whitespace are ignored.

    Raises:
        ConfigError: If *value* is not a recognised boolean spelling.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return parse_bool(name, value)


def load_project_settings(directory: Optional[Path] = None) -> Optional[Settings]:
    """Load ``lambda_utils.json`` from *directory* (default: the working directory).

    Returns:
        The validated settings, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        return Settings.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


def resolve_settings(
    cli_use_cache: Optional[bool] = None,
    cli_verbose: Optional[bool] = None,
) -> Settings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_use_cache``, ``cli_verbose``)
        2. Environment variables
        3. Project file (``./lambda_utils.json``)
        4. Defaults

    Returns:
        The effective :class:`~lambda_utils.models.Settings`.
    """
    # 4 + 3. Defaults, overlaid by the project file
    settings = load_project_settings() or Settings()

    # 2. Environment
    env_use_cache = _env_bool(ENV_USE_CACHE)
    if env_use_cache is not None:
        settings.cache.enabled = env_use_cache
    env_verbose = _env_bool(ENV_VERBOSE)
    if env_verbose is not None:
        settings.logging.verbose = env_verbose
    env_cache_dir = os.environ.get(ENV_CACHE_DIR)
    if env_cache_dir:
        settings.cache.directory = env_cache_dir

    # 1. CLI flags
    if cli_use_cache is not None:
        settings.cache.enabled = cli_use_cache
    if cli_verbose is not None:
        settings.logging.verbose = cli_verbose

    return settings
