"""Unit tests for TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from typedform.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_flat_dicts(self) -> None:
        """Flat dictionaries are merged correctly."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"forms": {"trim_strings": False, "strict_constraints": True}}
        override = {"forms": {"trim_strings": True}}
        assert deep_merge(base, override) == {
            "forms": {"trim_strings": True, "strict_constraints": True}
        }

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict values in override replace base values."""
        assert deep_merge({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        """Valid TOML file is loaded correctly."""
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[forms]\nempty_values = ["", "n/a"]')
        assert load_toml(toml_file) == {"forms": {"empty_values": ["", "n/a"]}}

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path) -> None:
        """Invalid TOML syntax raises error."""
        invalid_file = tmp_path / "invalid.toml"
        invalid_file.write_text("this is not [valid toml")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(invalid_file)


class TestConfigDiscovery:
    """Tests for config directory and environment discovery."""

    def test_config_dir_from_env(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """TYPEDFORM_CONFIG_DIR takes precedence."""
        monkeypatch.setenv("TYPEDFORM_CONFIG_DIR", str(test_config_dir))
        assert get_config_dir() == test_config_dir

    def test_missing_config_dir_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A configured directory that does not exist is an error."""
        monkeypatch.setenv("TYPEDFORM_CONFIG_DIR", str(tmp_path / "missing"))
        with pytest.raises(FileNotFoundError):
            get_config_dir()

    def test_config_dir_found_in_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """config/ is discovered by walking up from the working directory."""
        (tmp_path / "config").mkdir()
        nested = tmp_path / "app" / "forms"
        nested.mkdir(parents=True)
        monkeypatch.delenv("TYPEDFORM_CONFIG_DIR", raising=False)
        monkeypatch.chdir(nested)
        assert get_config_dir() == tmp_path / "config"

    def test_default_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment defaults to development."""
        monkeypatch.delenv("TYPEDFORM_ENV", raising=False)
        assert get_environment() == "development"

    def test_empty_environment_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty TYPEDFORM_ENV counts as unset."""
        monkeypatch.setenv("TYPEDFORM_ENV", "")
        assert get_environment() == "development"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_environment_overrides_default(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Environment file is deep-merged over default.toml."""
        mock_toml_files({
            "default.toml": "[forms]\ntrim_strings = false\nstrict_constraints = true",
            "staging.toml": "[forms]\ntrim_strings = true",
        })
        monkeypatch.setenv("TYPEDFORM_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("TYPEDFORM_ENV", "staging")

        assert load_config() == {"forms": {"trim_strings": True, "strict_constraints": True}}

    def test_missing_default_raises(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """default.toml is required."""
        monkeypatch.setenv("TYPEDFORM_CONFIG_DIR", str(test_config_dir))
        with pytest.raises(FileNotFoundError, match="default.toml"):
            load_config()

    def test_explicit_directory_and_environment(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Arguments take precedence over TYPEDFORM_CONFIG_DIR and TYPEDFORM_ENV."""
        mock_toml_files({
            "default.toml": "app_name = 'shop'",
            "test.toml": "[observability.logging]\nformat = 'console'",
        })
        monkeypatch.setenv("TYPEDFORM_CONFIG_DIR", str(test_config_dir.parent))
        monkeypatch.setenv("TYPEDFORM_ENV", "production")

        assert load_config(test_config_dir, "test") == {
            "app_name": "shop",
            "observability": {"logging": {"format": "console"}},
        }

    def test_overlay_replaces_empty_values_whole(
        self, test_config_dir: Path, mock_toml_files
    ) -> None:
        """Arrays in the overlay replace the default array rather than extending it."""
        mock_toml_files({
            "default.toml": '[forms]\nempty_values = [""]\ntrim_strings = true',
            "staging.toml": '[forms]\nempty_values = ["n/a"]',
        })
        assert load_config(test_config_dir, "staging") == {
            "forms": {"empty_values": ["n/a"], "trim_strings": True}
        }

    def test_missing_overlay_is_optional(self, test_config_dir: Path, mock_toml_files) -> None:
        """An environment without its own file uses default.toml alone."""
        mock_toml_files({"default.toml": "debug = false"})
        assert load_config(test_config_dir, "qa") == {"debug": False}
