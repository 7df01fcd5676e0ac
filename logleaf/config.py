"""LogLeaf Configuration.

Includes:
- ParserConfig: Health post parser settings with environment variable support

Environment Variables:
    LOGLEAF_PROJECT_PATH: Directory holding .logleaf/config.yaml
    LOGLEAF_MAX_INPUT_LENGTH: Maximum characters examined per post
    LOGLEAF_EXERCISE_TIME_PLACEHOLDER: Start/end text for untimed workouts
    LOGLEAF_DEFAULT_SOURCE: Source hint applied when none is given
    LOGLEAF_WARN_ON_HINT_MISMATCH: Warn when category contradicts the hint
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.health.classifiers import DEFAULT_TIME_PLACEHOLDER
from .core.health.parser import MAX_INPUT_LENGTH
from .core.health.taxonomy import SourceTag

# Keys persisted to the "parser" section of config.yaml
PARSER_KEYS = (
    "max_input_length",
    "exercise_time_placeholder",
    "default_source",
    "warn_on_hint_mismatch",
)


class ParserConfig(BaseSettings):
    """Parser configuration with environment variable support.

    Configuration is loaded from environment variables with LOGLEAF_ prefix.
    For example, LOGLEAF_MAX_INPUT_LENGTH sets max_input_length.

    Precedence (highest to lowest):
        1. Environment variables (LOGLEAF_*)
        2. Config file (.logleaf/config.yaml)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="LOGLEAF_",
        extra="ignore",
    )

    project_path: Path = Field(default_factory=Path.cwd)

    max_input_length: int = Field(default=MAX_INPUT_LENGTH, gt=0)
    exercise_time_placeholder: str = DEFAULT_TIME_PLACEHOLDER
    default_source: Optional[SourceTag] = None
    warn_on_hint_mismatch: bool = True

    @property
    def config_file(self) -> Path:
        """Location of the YAML config for this project."""
        return self.project_path / ".logleaf" / "config.yaml"

    @classmethod
    def load(cls, path: Path) -> "ParserConfig":
        """Load configuration from .logleaf/config.yaml if it exists.

        Values from the file only fill fields that are not already set by
        environment variables.

        Args:
            path: Project path to load configuration for

        Returns:
            ParserConfig with file values applied (or defaults if no config exists)
        """
        import os

        from ruamel.yaml import YAML

        config_file = path / ".logleaf" / "config.yaml"
        overrides: dict = {}

        if config_file.exists():
            yaml = YAML(typ="safe")
            with config_file.open(encoding="utf-8") as f:
                data = yaml.load(f)

            # pydantic-settings matches env names case-insensitively
            env_names = {name.upper() for name in os.environ}
            section = (data or {}).get("parser") or {}
            for key in PARSER_KEYS:
                env_name = f"LOGLEAF_{key.upper()}"
                if key in section and env_name not in env_names:
                    overrides[key] = section[key]

        return cls(project_path=path, **overrides)

    def save(self) -> None:
        """Save configuration to .logleaf/config.yaml in the project path."""
        from ruamel.yaml import YAML

        config_file = self.config_file
        config_file.parent.mkdir(parents=True, exist_ok=True)

        yaml = YAML()
        yaml.default_flow_style = False

        data = {
            "parser": {
                "max_input_length": self.max_input_length,
                "exercise_time_placeholder": self.exercise_time_placeholder,
                "default_source": self.default_source.value if self.default_source else None,
                "warn_on_hint_mismatch": self.warn_on_hint_mismatch,
            }
        }

        with config_file.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)


__all__ = ["ParserConfig"]
