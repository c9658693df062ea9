# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Collaborator contracts consumed by included builds.

Settings parsing, project configuration, task selection and task execution
all live outside this package. These protocols describe the narrow surface
an IncludedBuild calls into; any object providing the methods works.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Protocol, Sequence

if TYPE_CHECKING:
    from .listeners import BuildListener


# =============================================================================
# Settings and configured build
# =============================================================================

class ProjectDescriptor(Protocol):
    """Root project as declared by a build's settings."""

    @property
    def name(self) -> str:
        ...


class Settings(Protocol):
    """Loaded settings of a build."""

    @property
    def root_project(self) -> ProjectDescriptor:
        ...


class TaskExecutionGraph(Protocol):
    """Ordered plan of tasks to run for one build."""

    def add_tasks(self, tasks: Iterable[Any]) -> None:
        """Add concrete tasks (and their dependencies) to the plan."""
        ...

    def populate(self) -> None:
        """Finalize the plan from everything added so far."""
        ...


class TaskSelector(Protocol):
    """Resolves task paths within a configured build."""

    def get_selection(self, path: str) -> set[Any]:
        """Return the concrete tasks matching ``path``."""
        ...


class ConfiguredBuild(Protocol):
    """A fully configured build."""

    @property
    def task_graph(self) -> TaskExecutionGraph:
        ...

    def get_task_selector(self) -> TaskSelector:
        ...


# =============================================================================
# Launcher
# =============================================================================

class BuildParameters(Protocol):
    """Mutable start parameters of the build driven by a launcher."""

    task_names: Sequence[str]

    def add_listener(self, listener: BuildListener) -> None:
        ...


class Launcher(Protocol):
    """Drives settings loading, configuration and execution for one build.

    A launcher is used for at most one execution; afterwards the owning
    IncludedBuild drops it and creates a new one on next access.
    """

    def get_loaded_settings(self) -> Settings:
        ...

    def get_configured_build(self) -> ConfiguredBuild:
        ...

    def get_build_parameters(self) -> BuildParameters:
        ...

    def run_tasks(self, task_names: Sequence[str]) -> None:
        """Run the named tasks synchronously, raising on failure."""
        ...


class BuildLauncherFactory(Protocol):
    """Creates fresh launchers bound to one project directory."""

    def create(self) -> Launcher:
        ...
