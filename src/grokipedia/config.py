"""Configuration loading with file, environment and flag precedence.

Precedence (high to low):

1. CLI flags (:class:`ConfigOverrides`)
2. Environment variables (``GROKIPEDIA_API_URL``, ``GROKIPEDIA_TIMEOUT``,
   ``GROKIPEDIA_NO_CACHE``, ``GROKIPEDIA_CACHE_DIR``,
   ``GROKIPEDIA_CACHE_TTL``, ``GROKIPEDIA_COLOR``)
3. YAML config file (``--config`` / ``GROKIPEDIA_CONFIG``, default
   ``~/.grokipedia/config.yml``)
4. Model defaults (:class:`~grokipedia.models.Settings`)

Sources are merged as plain nested dicts and validated once, so a bad
value from any layer surfaces as a single :class:`ConfigError`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from grokipedia.exceptions import ConfigError
from grokipedia.models import DEFAULT_CACHE_TTL, Settings

_APP_DIRNAME = ".grokipedia"
_CONFIG_FILENAME = "config.yml"
_ENV_PREFIX = "GROKIPEDIA_"

_TRUTHY = {"1", "true", "yes", "on"}

# Environment variable suffix -> (settings section, field).
_ENV_BINDINGS = {
    "API_URL": ("api", "url"),
    "TIMEOUT": ("api", "timeout"),
    "CACHE_DIR": ("cache", "dir"),
    "CACHE_TTL": ("cache", "ttl"),
    "COLOR": ("output", "color"),
}


@dataclass
class ConfigOverrides:
    """Values given on the command line.  ``None`` means "not given"."""

    config_file: Optional[str] = None
    api_url: Optional[str] = None
    timeout: Optional[int] = None
    no_cache: bool = False
    cache_dir: Optional[str] = None
    cache_ttl: Optional[int] = None
    max_retry_delay: Optional[float] = None
    deadline: Optional[float] = None
    color: Optional[str] = None


# --- Paths ---


def get_config_dir() -> Path:
    """Return ``~/.grokipedia``.  Not created; nothing is ever written there by this module."""
    return Path.home() / _APP_DIRNAME


def default_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def expand_path(path: str) -> str:
    """Expand a leading ``~`` and ``$VAR`` references in *path*."""
    if not path:
        return path
    return os.path.expandvars(os.path.expanduser(path))


# --- Sources ---


def load_config_file(path: Optional[str] = None) -> dict[str, Any]:
    """Read the YAML config file.

    Args:
        path: Explicit file path.  When ``None`` the default location is
            used and a missing file is not an error.

    Returns:
        The parsed mapping (empty when there is no file or it is empty).

    Raises:
        ConfigError: If an explicitly named file is missing, or any file
            is not valid YAML or not a mapping.
    """
    if path is not None:
        file_path = Path(expand_path(path))
        if not file_path.is_file():
            raise ConfigError(f"Config file not found: {file_path}")
    else:
        file_path = default_config_path()
        if not file_path.is_file():
            return {}

    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config file at {file_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file at {file_path}: expected a mapping")
    return data


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    layer: dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        layer.setdefault(section, {})[key] = value

    for name, (section, key) in _ENV_BINDINGS.items():
        value = environ.get(_ENV_PREFIX + name)
        if value:
            put(section, key, value)

    no_cache = environ.get(_ENV_PREFIX + "NO_CACHE", "")
    if no_cache.lower() in _TRUTHY:
        put("cache", "enabled", False)
    return layer


def _flag_layer(overrides: ConfigOverrides) -> dict[str, Any]:
    layer: dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        if value is not None:
            layer.setdefault(section, {})[key] = value

    put("api", "url", overrides.api_url)
    if overrides.timeout is not None and overrides.timeout > 0:
        put("api", "timeout", overrides.timeout)
    put("api", "max_retry_delay", overrides.max_retry_delay)
    put("api", "deadline", overrides.deadline)
    if overrides.no_cache:
        put("cache", "enabled", False)
    put("cache", "dir", overrides.cache_dir)
    put("cache", "ttl", overrides.cache_ttl)
    put("output", "color", overrides.color)
    return layer


def _deep_merge(base: dict[str, Any], top: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in top.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Resolution ---


def load_settings(
    overrides: Optional[ConfigOverrides] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve the effective :class:`~grokipedia.models.Settings`.

    Args:
        overrides: Values from CLI flags.
        environ: Environment mapping, ``os.environ`` by default.

    Raises:
        ConfigError: If the config file cannot be read or the merged values
            fail validation.
    """
    overrides = overrides or ConfigOverrides()
    environ = os.environ if environ is None else environ

    config_file = overrides.config_file or environ.get(_ENV_PREFIX + "CONFIG") or None
    merged = load_config_file(config_file)
    merged = _deep_merge(merged, _env_layer(environ))
    merged = _deep_merge(merged, _flag_layer(overrides))

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    settings.cache.dir = expand_path(settings.cache.dir)
    if settings.cache.ttl < 0:
        settings.cache.ttl = DEFAULT_CACHE_TTL
    return settings
