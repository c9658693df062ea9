# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Value types for included builds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from composite_builds.errors import ArgumentError

T = TypeVar("T")

TASK_PATH_SEPARATOR = ":"


class LauncherPhase(Enum):
    """Lifecycle phase of the current launcher generation.

    Attributes:
        NO_LAUNCHER: No launcher has been created yet
        LAUNCHER_LIVE: Launcher exists, nothing derived from it yet
        SETTINGS_LOADED: Settings loaded for the current generation
        CONFIGURED: Build configured for the current generation
        EXECUTED: Launcher discarded after execution, cached state retained
    """

    NO_LAUNCHER = "no_launcher"
    LAUNCHER_LIVE = "launcher_live"
    SETTINGS_LOADED = "settings_loaded"
    CONFIGURED = "configured"
    EXECUTED = "executed"


class _Unset:
    """Marker for a memoized value that has not been computed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class Cached(Generic[T]):
    """A value derived from the launcher of a given generation."""

    value: T
    generation: int

    def is_current(self, generation: int) -> bool:
        return self.generation == generation


def validate_task_path(path: str) -> str:
    """Check that ``path`` is a qualified task path and return it.

    Raises:
        ArgumentError: If the path does not start with ':'
    """
    if not isinstance(path, str) or not path.startswith(TASK_PATH_SEPARATOR):
        raise ArgumentError(
            f"Task path '{path}' is not a qualified task path "
            f"(e.g. ':task' or ':project:task')."
        )
    return path


@dataclass(frozen=True)
class TaskReference:
    """Reference to a task in an included build.

    Only the path syntax is checked. Resolving the reference to concrete
    tasks is left to the task selector of the consuming build.

    Attributes:
        build_name: Name of the included build that owns the task
        path: Qualified task path, e.g. ':b1:jar'
    """

    build_name: str
    path: str

    def __post_init__(self) -> None:
        validate_task_path(self.path)

    def __str__(self) -> str:
        return f"{self.build_name}{self.path}"
