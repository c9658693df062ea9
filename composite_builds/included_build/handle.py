# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Lifecycle coordinator for a single included build.

An IncludedBuild lazily creates a launcher for its project directory and
memoizes what it derives from it (settings, configured build). Each launcher
construction starts a new *generation*; values cached under an older
generation are cleared at that moment. ``execute`` drops the launcher when it
finishes, but the cached values stay readable through ``cached_settings`` and
``cached_configured_build`` until the next launcher is built.

Phases per generation:
    NO_LAUNCHER -> LAUNCHER_LIVE -> SETTINGS_LOADED -> CONFIGURED
        -> EXECUTED (launcher dropped, caches retained)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from .interfaces import (
    BuildLauncherFactory,
    ConfiguredBuild,
    Launcher,
    Settings,
    TaskSelector,
)
from .listeners import BuildListener
from .substitutions import (
    DependencySubstitutionRegistry,
    DependencySubstitutions,
    FrozenSubstitutions,
    SubstitutionAction,
)
from .types import UNSET, Cached, LauncherPhase, TaskReference, validate_task_path

logger = logging.getLogger(__name__)

TaskSelectorFactory = Callable[[ConfiguredBuild], TaskSelector]


def default_task_selector(configured_build: ConfiguredBuild) -> TaskSelector:
    """Ask the configured build for its own task selector."""
    return configured_build.get_task_selector()


class IncludedBuild:
    """State holder and operation surface for one included build.

    Not thread-safe: callers must serialize access to a given instance.

    Args:
        project_dir: Root directory of the included build
        launcher_factory: Creates a fresh launcher bound to ``project_dir``
        task_selector_factory: Returns a task selector for a configured build
    """

    def __init__(
        self,
        project_dir: str | Path,
        launcher_factory: BuildLauncherFactory,
        task_selector_factory: TaskSelectorFactory | None = None,
    ) -> None:
        self._project_dir = Path(project_dir)
        self._launcher_factory = launcher_factory
        self._task_selector_factory = task_selector_factory or default_task_selector

        self._name: str | object = UNSET
        self._launcher: Launcher | None = None
        self._generation = 0
        self._executed = False
        self._settings: Cached[Settings] | object = UNSET
        self._configured_build: Cached[ConfiguredBuild] | object = UNSET

        self._substitutions = DependencySubstitutionRegistry(
            lambda: DependencySubstitutions.for_included_build(self), owner=str(self)
        )

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def get_project_dir(self) -> Path:
        return self._project_dir

    def get_name(self) -> str:
        """Root project name declared by the build's settings.

        Computed once per IncludedBuild; later launcher resets do not
        recompute it.
        """
        if self._name is UNSET:
            self._name = self.get_loaded_settings().root_project.name
            logger.debug(f"{self} resolved name '{self._name}'")
        return self._name

    @property
    def name(self) -> str:
        return self.get_name()

    def task(self, path: str) -> TaskReference:
        """Reference a task of this build by its qualified path.

        Raises:
            ArgumentError: If ``path`` does not start with ':'
        """
        validate_task_path(path)
        return TaskReference(build_name=self.get_name(), path=path)

    # -------------------------------------------------------------------------
    # Dependency substitution
    # -------------------------------------------------------------------------

    def dependency_substitution(self, action: SubstitutionAction) -> None:
        """Register an action that declares substitution rules.

        Raises:
            StateError: If substitutions were already resolved
        """
        self._substitutions.register(action)

    def resolve_dependency_substitutions(self) -> FrozenSubstitutions:
        return self._substitutions.resolve()

    @property
    def substitutions_resolved(self) -> bool:
        return self._substitutions.is_resolved

    # -------------------------------------------------------------------------
    # Launcher generations
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Number of launchers constructed so far."""
        return self._generation

    @property
    def has_launcher(self) -> bool:
        return self._launcher is not None

    @property
    def phase(self) -> LauncherPhase:
        if self._launcher is None:
            return LauncherPhase.EXECUTED if self._executed else LauncherPhase.NO_LAUNCHER
        if self._current(self._configured_build) is not UNSET:
            return LauncherPhase.CONFIGURED
        if self._current(self._settings) is not UNSET:
            return LauncherPhase.SETTINGS_LOADED
        return LauncherPhase.LAUNCHER_LIVE

    @property
    def cached_settings(self) -> Settings | None:
        """Settings cached by the latest generation, even if its launcher is gone."""
        return self._settings.value if isinstance(self._settings, Cached) else None

    @property
    def cached_configured_build(self) -> ConfiguredBuild | None:
        """Configured build cached by the latest generation, even if its launcher is gone."""
        return self._configured_build.value if isinstance(self._configured_build, Cached) else None

    def _current(self, cached: Cached | object) -> Any:
        if isinstance(cached, Cached) and cached.is_current(self._generation):
            return cached.value
        return UNSET

    def _get_launcher(self) -> Launcher:
        if self._launcher is None:
            self._launcher = self._launcher_factory.create()
            self._generation += 1
            self._executed = False
            self._reset()
            logger.debug(f"{self} created launcher (generation {self._generation})")
        return self._launcher

    def _reset(self) -> None:
        self._settings = UNSET
        self._configured_build = UNSET

    def _discard_launcher(self) -> None:
        self._launcher = None
        self._executed = True

    # -------------------------------------------------------------------------
    # Settings and configuration
    # -------------------------------------------------------------------------

    def get_loaded_settings(self) -> Settings:
        launcher = self._get_launcher()
        settings = self._current(self._settings)
        if settings is UNSET:
            settings = launcher.get_loaded_settings()
            self._settings = Cached(settings, self._generation)
            logger.debug(f"{self} loaded settings (generation {self._generation})")
        return settings

    def get_configured_build(self) -> ConfiguredBuild:
        launcher = self._get_launcher()
        configured = self._current(self._configured_build)
        if configured is UNSET:
            self.get_loaded_settings()
            configured = launcher.get_configured_build()
            self._configured_build = Cached(configured, self._generation)
            logger.debug(f"{self} configured (generation {self._generation})")
        return configured

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def add_tasks(self, task_paths: Iterable[str]) -> None:
        """Select tasks by path and add them to the build's task graph.

        Not idempotent: adding the same path twice hands the selected tasks
        to the task graph twice.
        """
        configured = self.get_configured_build()
        selector = self._task_selector_factory(configured)
        for task_path in task_paths:
            tasks = selector.get_selection(task_path)
            logger.debug(f"{self} selected {len(tasks)} task(s) for '{task_path}'")
            configured.task_graph.add_tasks(tasks)

    def populate_task_graph(self) -> None:
        self.get_configured_build().task_graph.populate()

    def execute(self, task_names: Sequence[str], listener: BuildListener) -> None:
        """Run ``task_names`` with a launcher and drop the launcher afterwards.

        The launcher is dropped whether or not the run succeeds. Settings and
        the configured build stay cached until the next launcher is created.
        Failures raised by the launcher propagate unchanged.
        """
        task_names = list(task_names)
        launcher = self._get_launcher()
        try:
            parameters = launcher.get_build_parameters()
            parameters.task_names = task_names
            parameters.add_listener(listener)
            logger.info(f"Executing {task_names} in {self}")
            launcher.run_tasks(task_names)
        finally:
            self._discard_launcher()

    def __str__(self) -> str:
        return f"includedBuild[{self._project_dir.name}]"

    __repr__ = __str__
