# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Configuration file discovery constants."""

from pathlib import Path

ENV_PREFIX = "COMPOSITE_"

PROJECT_CONFIG_FILE = "composite.yaml"
PROJECT_DIR_ENV = f"{ENV_PREFIX}PROJECT_DIR"

USER_CONFIG_DIR_NAME = ".composite"
USER_CONFIG_FILE = "config.yaml"


def get_user_config_path() -> Path:
    """Get the user configuration file path: ~/.composite/config.yaml"""
    return Path.home() / USER_CONFIG_DIR_NAME / USER_CONFIG_FILE
