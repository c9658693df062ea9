# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Configuration loading and management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any
from unittest.mock import patch

from pydantic import ValidationError
from rich.console import Console

from .constants import ENV_PREFIX
from .schema import CompositeConfig

console = Console(stderr=True)

_PATH_LIST_FIELDS = ("included_builds",)


def _resolve_cli_paths(overrides: dict[str, Any]) -> dict[str, Any]:
    """Resolve relative paths passed directly by the caller to CWD."""
    result = dict(overrides)
    cwd = Path.cwd()

    for key in _PATH_LIST_FIELDS:
        if result.get(key) is not None:
            result[key] = [
                str(Path(p)) if Path(p).is_absolute() else str((cwd / p).resolve())
                for p in result[key]
            ]
    if result.get("project_dir") is not None:
        result["project_dir"] = str((cwd / result["project_dir"]).resolve())

    return result


def load_config(project_file: Path | None = None, **overrides) -> CompositeConfig:
    """Load configuration with hierarchical priority.

    Priority order (highest to lowest):
    1. Keyword overrides
    2. Environment variables (COMPOSITE_* prefix)
    3. Project config file (composite.yaml, or ``project_file``)
    4. User config file (~/.composite/config.yaml; skipped with ``project_file``)
    5. Built-in defaults

    COMPOSITE_LOG_LEVEL is accepted as shorthand for COMPOSITE_LOGGING__LEVEL.
    """
    try:
        overrides = _resolve_cli_paths(overrides)

        if "logging" not in overrides and f"{ENV_PREFIX}LOG_LEVEL" in os.environ:
            overrides["logging"] = {"level": os.environ[f"{ENV_PREFIX}LOG_LEVEL"]}

        yaml_files = [Path(project_file)] if project_file is not None else None
        with CompositeConfig.yaml_files(yaml_files):
            return CompositeConfig(**overrides)

    except ValidationError as e:
        console.print("[bold red]Configuration validation failed:[/bold red]")
        for error in e.errors():
            field = " → ".join(str(x) for x in error["loc"])
            console.print(f"  [red]{field}: {error['msg']}[/red]")
        raise


@lru_cache(maxsize=1)
def get_config() -> CompositeConfig:
    """Get the cached configuration instance."""
    return load_config()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()


def get_default_config() -> CompositeConfig:
    """Get a configuration with only default values (no files or env vars)."""
    filtered_env = {k: v for k, v in os.environ.items() if not k.startswith(ENV_PREFIX)}

    with patch.dict(os.environ, filtered_env, clear=True):
        with CompositeConfig.yaml_files([]):
            return CompositeConfig()
