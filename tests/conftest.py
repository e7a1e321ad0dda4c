"""Shared test fixtures for the typedform test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from typedform.enums import FieldType
from typedform.schema import FieldSpec, Schema
from typedform.validation import ValidatorRegistry, validate_number


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"TYPEDFORM_DEBUG": "true"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear cached settings and TOML state around each test."""
    from typedform.config import get_settings
    from typedform.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults after tests that configure logging."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def line_item_schema() -> Schema:
    """Schema with a named, defaulted quantity."""
    return Schema(
        "line_item",
        [
            FieldSpec(name="name", type=FieldType.STRING),
            FieldSpec(name="qty", type=FieldType.INTEGER, default=1),
        ],
    )


@pytest.fixture
def qty_validators() -> ValidatorRegistry:
    """Positive quantity by default; bounded by stock when max_qty is given."""
    validators = ValidatorRegistry()

    @validators.register()
    def positive_qty(record, raw_input, constraints):
        return validate_number(record, "qty", greater_than=0)

    @validators.register("max_qty")
    def qty_within_stock(record, raw_input, constraints):
        return [
            *validate_number(record, "qty", greater_than=0),
            *validate_number(
                record, "qty", less_than_or_equal_to=constraints["max_qty"]
            ),
        ]

    return validators
