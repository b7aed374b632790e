"""Persistent user configuration for the RatingMatrix CLI.

Reads ~/.config/ratingmatrix/config.toml (respecting XDG_CONFIG_HOME) with
tomli. Values are looked up by dotted key, e.g. ``request.timeout`` maps to

    [request]
    timeout = 20

and can be overridden by the ``RATINGMATRIX_REQUEST_TIMEOUT`` environment
variable or an explicit CLI option.
"""

import contextlib
import os
from pathlib import Path
from typing import Any, TypeVar, cast

import tomli

# Determine config directory respecting XDG_CONFIG_HOME if set.
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
CONFIG_DIR = _xdg_config_home / "ratingmatrix"
CONFIG_FILE = CONFIG_DIR / "config.toml"

ENV_PREFIX = "RATINGMATRIX_"
_TRUTHY = {"1", "true", "yes", "on"}

T = TypeVar("T")


def _read_config_file() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""
    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve ``data["a"]["b"]`` for ``"a.b"``, or None if any level is missing."""
    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def env_var_name(dotted_key: str) -> str:
    """Convert a dotted key to its environment variable ("request.timeout" ->
    "RATINGMATRIX_REQUEST_TIMEOUT")."""
    return ENV_PREFIX + dotted_key.replace(".", "_").upper()


def _coerce(value: Any, default: T) -> T:
    """Coerce *value* to the type of *default*, returning *default* on failure.

    bool is checked before int because bool is a subclass of int.
    """
    if isinstance(default, bool):
        if isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            return cast(T, value.strip().lower() in _TRUTHY)
        return default
    if isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return cast(T, value)
        with contextlib.suppress(TypeError, ValueError):
            return cast(T, int(str(value).strip()))
        return default
    if isinstance(default, float):
        with contextlib.suppress(TypeError, ValueError):
            return cast(T, float(value))
        return default
    if default is None and isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return cast(T, int(text))
        with contextlib.suppress(ValueError):
            return cast(T, float(text))
    return cast(T, value)


def resolve_setting(key: str, *, default: T, cli_value: T | None = None) -> T:
    """Resolve *key* using precedence CLI > env > config file > default.

    Args:
        key: Dotted key path, e.g. ``"request.timeout"``.
        default: Value used when no override is found; its type drives coercion.
        cli_value: Value passed from a CLI option (None when not provided).

    Returns:
        The resolved value.
    """
    if cli_value is not None:
        return cli_value

    env_val = os.environ.get(env_var_name(key))
    if env_val is not None:
        return _coerce(env_val, default)

    file_val = _lookup_nested(_read_config_file(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    return default
