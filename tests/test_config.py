"""Tests for logleaf.config module.

Covers:
- ParserConfig defaults and validation
- Environment variable support
- Configuration load/save to YAML
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from logleaf.config import ParserConfig
from logleaf.core.health.taxonomy import SourceTag


def write_config(project: Path, section: dict) -> Path:
    """Write a config.yaml with the given parser section."""
    from ruamel.yaml import YAML

    config_dir = project / ".logleaf"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.yaml"

    yaml = YAML()
    with config_file.open("w", encoding="utf-8") as f:
        yaml.dump({"parser": section}, f)
    return config_file


# ============================================================================
# Defaults
# ============================================================================


class TestParserConfigDefaults:
    """Tests for ParserConfig default values."""

    def test_default_values(self):
        """Defaults match the parser's built-in settings."""
        config = ParserConfig()
        assert config.project_path == Path.cwd()
        assert config.max_input_length == 10_000
        assert config.exercise_time_placeholder == "--:--"
        assert config.default_source is None
        assert config.warn_on_hint_mismatch is True

    def test_config_file_location(self, tmp_path):
        """Config file lives under .logleaf/ in the project."""
        config = ParserConfig(project_path=tmp_path)
        assert config.config_file == tmp_path / ".logleaf" / "config.yaml"

    def test_rejects_non_positive_length(self):
        """max_input_length must be positive."""
        with pytest.raises(ValidationError):
            ParserConfig(max_input_length=0)

    def test_rejects_unknown_source(self):
        """default_source must be a known source tag."""
        with pytest.raises(ValidationError):
            ParserConfig(default_source="myspace")


class TestParserConfigEnvironmentVariables:
    """Tests for environment variable configuration."""

    def test_max_input_length_from_env(self, monkeypatch):
        """LOGLEAF_MAX_INPUT_LENGTH sets max_input_length."""
        monkeypatch.setenv("LOGLEAF_MAX_INPUT_LENGTH", "500")
        config = ParserConfig()
        assert config.max_input_length == 500

    def test_default_source_from_env(self, monkeypatch):
        """LOGLEAF_DEFAULT_SOURCE sets default_source."""
        monkeypatch.setenv("LOGLEAF_DEFAULT_SOURCE", "fitbit")
        config = ParserConfig()
        assert config.default_source is SourceTag.FITBIT

    def test_warn_flag_from_env(self, monkeypatch):
        """LOGLEAF_WARN_ON_HINT_MISMATCH accepts boolean strings."""
        monkeypatch.setenv("LOGLEAF_WARN_ON_HINT_MISMATCH", "false")
        config = ParserConfig()
        assert config.warn_on_hint_mismatch is False

    def test_project_path_from_env(self, monkeypatch, tmp_path):
        """LOGLEAF_PROJECT_PATH sets project_path."""
        monkeypatch.setenv("LOGLEAF_PROJECT_PATH", str(tmp_path))
        config = ParserConfig()
        assert config.project_path == tmp_path


# ============================================================================
# Load / Save
# ============================================================================


class TestParserConfigLoadSave:
    """Tests for configuration file loading and saving."""

    def test_load_without_file(self, tmp_path):
        """load() returns defaults when no config file exists."""
        config = ParserConfig.load(tmp_path)
        assert config.project_path == tmp_path
        assert config.max_input_length == 10_000

    def test_load_reads_parser_section(self, tmp_path):
        """load() applies values from the parser section."""
        write_config(
            tmp_path,
            {
                "max_input_length": 2000,
                "exercise_time_placeholder": "??:??",
                "default_source": "googlefit",
                "warn_on_hint_mismatch": False,
            },
        )

        config = ParserConfig.load(tmp_path)
        assert config.max_input_length == 2000
        assert config.exercise_time_placeholder == "??:??"
        assert config.default_source is SourceTag.GOOGLEFIT
        assert config.warn_on_hint_mismatch is False

    def test_env_beats_file(self, monkeypatch, tmp_path):
        """Environment variables take precedence over config.yaml."""
        write_config(tmp_path, {"max_input_length": 2000})
        monkeypatch.setenv("LOGLEAF_MAX_INPUT_LENGTH", "300")

        config = ParserConfig.load(tmp_path)
        assert config.max_input_length == 300

    def test_lower_case_env_beats_file(self, monkeypatch, tmp_path):
        """Env names match case-insensitively, as pydantic-settings reads them."""
        write_config(tmp_path, {"max_input_length": 500})
        monkeypatch.setenv("logleaf_max_input_length", "50")

        config = ParserConfig.load(tmp_path)
        assert config.max_input_length == 50

    def test_load_with_empty_config(self, tmp_path):
        """load() handles an empty config file."""
        config_dir = tmp_path / ".logleaf"
        config_dir.mkdir()
        (config_dir / "config.yaml").touch()

        config = ParserConfig.load(tmp_path)
        assert config.max_input_length == 10_000

    def test_load_ignores_other_sections(self, tmp_path):
        """Unknown keys and sections are ignored."""
        from ruamel.yaml import YAML

        config_dir = tmp_path / ".logleaf"
        config_dir.mkdir()
        yaml = YAML()
        with (config_dir / "config.yaml").open("w", encoding="utf-8") as f:
            yaml.dump({"theme": "dark", "parser": {"unknown_key": 1}}, f)

        config = ParserConfig.load(tmp_path)
        assert config.exercise_time_placeholder == "--:--"

    def test_load_invalid_value(self, tmp_path):
        """Invalid file values raise a validation error."""
        write_config(tmp_path, {"max_input_length": -1})

        with pytest.raises(ValidationError):
            ParserConfig.load(tmp_path)

    def test_save_and_reload(self, tmp_path):
        """load() reads previously saved configuration."""
        config = ParserConfig(
            project_path=tmp_path,
            max_input_length=750,
            default_source=SourceTag.FITBIT,
        )
        config.save()

        loaded = ParserConfig.load(tmp_path)
        assert loaded.max_input_length == 750
        assert loaded.default_source is SourceTag.FITBIT

    def test_saved_yaml_structure(self, tmp_path):
        """Saved config nests every parser key under "parser"."""
        from ruamel.yaml import YAML

        ParserConfig(project_path=tmp_path).save()

        yaml = YAML()
        with (tmp_path / ".logleaf" / "config.yaml").open(encoding="utf-8") as f:
            data = yaml.load(f)

        assert set(data["parser"]) == {
            "max_input_length",
            "exercise_time_placeholder",
            "default_source",
            "warn_on_hint_mismatch",
        }
        assert data["parser"]["default_source"] is None
