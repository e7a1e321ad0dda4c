"""typedform settings.

Precedence, highest first: explicit ``Settings(...)`` arguments,
TYPEDFORM_* environment variables (``TYPEDFORM_FORMS__TRIM_STRINGS=true``),
the environment TOML overlay, ``default.toml``, then model defaults.

    from typedform.config import get_settings

    forms = get_settings().forms
    if forms.strict_constraints:
        ...
"""

from functools import lru_cache
from pathlib import Path

from typedform.config.loader import load_config
from typedform.config.settings import Settings, set_toml_config


def build_settings(config_dir: Path | None = None, env: str | None = None) -> Settings:
    """Load TOML from ``config_dir`` for ``env`` and build fresh Settings."""
    set_toml_config(load_config(config_dir, env))
    return Settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings from the discovered config directory.

    Cached; use reload_settings() after changing files or TYPEDFORM_ENV.
    """
    return build_settings()


def reload_settings() -> Settings:
    """Drop the cached Settings and load them again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "build_settings", "get_settings", "reload_settings"]
