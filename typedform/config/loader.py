"""Layered TOML configuration for typedform.

A config directory holds ``default.toml`` and, optionally, one file per
environment. Both describe the same top-level sections as ``Settings``:

    app_name = "shop"

    [forms]
    empty_values = ["", "n/a"]
    strict_constraints = true

    [observability.logging]
    format = "console"

The environment file is merged over the defaults table by table, so it
only needs the keys it changes.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "TYPEDFORM_CONFIG_DIR"
ENVIRONMENT_VAR = "TYPEDFORM_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"


def get_config_dir() -> Path:
    """Locate the directory holding ``default.toml``.

    TYPEDFORM_CONFIG_DIR wins when set and must exist. Otherwise the
    working directory and each of its parents are searched for a
    ``config/`` directory; the first hit is used, and ``config/`` relative
    to the working directory is the fallback.
    """
    explicit = os.environ.get(CONFIG_DIR_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_VAR} points to a missing directory: {explicit}")
        return path

    cwd = Path.cwd()
    candidates = (directory / "config" for directory in (cwd, *cwd.parents))
    return next((c for c in candidates if c.is_dir()), Path("config"))


def get_environment() -> str:
    """Name of the environment overlay, from TYPEDFORM_ENV."""
    return os.environ.get(ENVIRONMENT_VAR) or DEFAULT_ENVIRONMENT


def load_toml(file_path: Path) -> dict[str, Any]:
    """Read one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    return tomllib.loads(file_path.read_text(encoding="utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Tables (``[forms]``, ``[observability.logging]``) merge key by key;
    scalars and arrays such as ``forms.empty_values`` are replaced whole.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(config_dir: Path | None = None, env: str | None = None) -> dict[str, Any]:
    """Read ``default.toml`` and merge the environment overlay over it.

    Args:
        config_dir: Directory to read from; discovered when omitted
        env: Overlay name (``{env}.toml``); TYPEDFORM_ENV when omitted

    Raises:
        FileNotFoundError: If ``default.toml`` is missing
    """
    directory = config_dir if config_dir is not None else get_config_dir()
    overlay = env or get_environment()

    default_path = directory / DEFAULT_FILE
    if not default_path.is_file():
        raise FileNotFoundError(
            f"{default_path} is required. Create {DEFAULT_FILE} there or set {CONFIG_DIR_VAR}."
        )

    config = load_toml(default_path)
    overlay_path = directory / f"{overlay}.toml"
    if overlay_path.is_file():
        config = deep_merge(config, load_toml(overlay_path))
    return config
