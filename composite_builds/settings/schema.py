# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Composite build configuration schema using Pydantic.

Configuration Priority
----------------------
Settings are loaded from multiple sources (highest to lowest):
1. Constructor arguments
2. Environment variables (COMPOSITE_* prefix, '__' for nesting)
3. Project config file (composite.yaml)
4. User config file (~/.composite/config.yaml)
5. Built-in defaults

Path Resolution
---------------
Relative ``included_builds`` entries resolve against the project directory:
the directory holding composite.yaml, else COMPOSITE_PROJECT_DIR, else CWD.
Constructor arguments are resolved to CWD by ``load_config`` beforehand.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, ClassVar, Iterator

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from composite_builds._internal.io.yaml import deep_merge, expand_env_vars, load_yaml
from composite_builds._internal.logging import LEVELS

from .constants import ENV_PREFIX, PROJECT_CONFIG_FILE, PROJECT_DIR_ENV, get_user_config_path


def _find_project_config() -> Path | None:
    """Find composite.yaml.

    If COMPOSITE_PROJECT_DIR is set only that directory is checked;
    otherwise walk up from CWD.
    """
    if project_dir_override := os.environ.get(PROJECT_DIR_ENV):
        candidate = Path(project_dir_override).resolve() / PROJECT_CONFIG_FILE
        return candidate if candidate.exists() else None

    current = Path.cwd().resolve()
    while current != current.parent:
        candidate = current / PROJECT_CONFIG_FILE
        if candidate.exists():
            return candidate
        current = current.parent

    return None


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source merging the user and project YAML files.

    Args:
        settings_cls: Settings class being built
        yaml_files: Explicit files to load instead of the standard locations
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_files: list[Path] | None = None):
        super().__init__(settings_cls)
        self.project_file_used: Path | None = None

        if yaml_files is None:
            yaml_files = []
            user_file = get_user_config_path()
            if user_file.exists():
                yaml_files.append(user_file)
            project_file = _find_project_config()
            if project_file:
                yaml_files.append(project_file)
                self.project_file_used = project_file
        elif yaml_files:
            self.project_file_used = yaml_files[-1]

        self.yaml_files = yaml_files
        self._data = self._load_and_merge_yaml_files()

    def _load_and_merge_yaml_files(self) -> dict[str, Any]:
        merged_data: dict[str, Any] = {}

        for yaml_file in self.yaml_files:
            try:
                data = expand_env_vars(load_yaml(yaml_file))
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                location = f"line {mark.line + 1}, column {mark.column + 1}" if mark else "unknown location"
                raise yaml.YAMLError(
                    f"\n\nInvalid YAML in config file: {yaml_file}\n"
                    f"Error at {location}: {getattr(e, 'problem', None) or e}\n\n"
                    f"Fix the syntax error and try again."
                ) from e
            merged_data = deep_merge(merged_data, data)

        return merged_data

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        if field_name in self._data:
            return self._data[field_name], field_name, True
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        data = self._data.copy()
        if self.project_file_used:
            data["config_file"] = self.project_file_used
        return data


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="normal", description="Console verbosity level: quiet | normal | verbose | debug"
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LEVELS:
            raise ValueError(f"must be one of: {' | '.join(LEVELS)}")
        return value


class CompositeConfig(BaseSettings):
    """Configuration for a composite build and its included builds."""

    included_builds: list[Path] = Field(
        default_factory=list,
        description="Directories of the builds to include, in inclusion order",
    )
    project_dir: Path | None = Field(
        default=None,
        description="Composite project root (defaults to the directory holding composite.yaml, else CWD)",
    )
    config_file: Path | None = Field(
        default=None, description="Project config file that was loaded, if any"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
        env_file=None,
    )

    # Set by load_config() for the duration of one construction
    yaml_files_override: ClassVar[list[Path] | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, yaml_files=cls.yaml_files_override),
        )

    @classmethod
    @contextmanager
    def yaml_files(cls, files: list[Path] | None) -> Iterator[None]:
        """Load ``files`` instead of the standard config locations while active."""
        previous = cls.yaml_files_override
        cls.yaml_files_override = files
        try:
            yield
        finally:
            cls.yaml_files_override = previous

    def model_post_init(self, __context: Any) -> None:
        """Detect the project directory and resolve included build paths."""
        if self.config_file is not None:
            self.project_dir = Path(self.config_file).resolve().parent
        elif self.project_dir is not None:
            self.project_dir = Path(self.project_dir).resolve()
        else:
            self.project_dir = Path.cwd().resolve()

        self.included_builds = [self._resolve(p, self.project_dir) for p in self.included_builds]

    @staticmethod
    def _resolve(path: Path, base: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else (base / path).resolve()
