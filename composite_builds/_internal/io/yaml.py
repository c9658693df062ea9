# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""YAML helpers for configuration files.

- load_yaml(): Load YAML with no processing
- expand_env_vars(): Recursively expand ${VAR} syntax
- deep_merge(): Deep merge two dictionaries
"""

import os
from pathlib import Path
from typing import Any

import yaml


def load_yaml(file_path: str | Path) -> dict[str, Any]:
    """Load a YAML mapping from ``file_path``.

    Raises:
        FileNotFoundError: If the YAML file doesn't exist
        yaml.YAMLError: If the YAML is invalid or not a mapping
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with open(file_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise yaml.YAMLError(f"Expected a mapping at the top of {file_path}, got {type(data).__name__}")
    return data


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge with overlay taking precedence. Returns a new dict."""
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def expand_env_vars(data: Any) -> Any:
    """Recursively expand $VAR and ${VAR}; undefined variables are left as-is."""
    if isinstance(data, str):
        return os.path.expandvars(data)
    elif isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    else:
        return data
