# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""The set of included builds composed into one parent build."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator, Sequence

from composite_builds.errors import StateError, UnknownBuildError
from composite_builds.included_build import (
    BuildListener,
    FrozenSubstitutions,
    IncludedBuild,
)
from composite_builds.included_build.handle import TaskSelectorFactory
from composite_builds.included_build.interfaces import BuildLauncherFactory

if TYPE_CHECKING:
    from composite_builds.settings import CompositeConfig

logger = logging.getLogger(__name__)

LauncherFactoryProvider = Callable[[Path], BuildLauncherFactory]


class IncludedBuilds:
    """Holds one IncludedBuild per included directory, in inclusion order.

    Args:
        launcher_factory_provider: Returns the launcher factory for a directory
        task_selector_factory: Passed through to every IncludedBuild
    """

    def __init__(
        self,
        launcher_factory_provider: LauncherFactoryProvider,
        task_selector_factory: TaskSelectorFactory | None = None,
    ) -> None:
        self._launcher_factory_provider = launcher_factory_provider
        self._task_selector_factory = task_selector_factory
        self._builds: dict[Path, IncludedBuild] = {}

    @classmethod
    def from_config(
        cls,
        config: CompositeConfig,
        launcher_factory_provider: LauncherFactoryProvider,
        task_selector_factory: TaskSelectorFactory | None = None,
    ) -> IncludedBuilds:
        """Create the included builds listed in ``config.included_builds``."""
        builds = cls(launcher_factory_provider, task_selector_factory)
        for project_dir in config.included_builds:
            builds.include(project_dir)
        logger.debug(f"Included {len(builds)} build(s) from configuration")
        return builds

    def include(self, project_dir: str | Path) -> IncludedBuild:
        """Include ``project_dir``, returning the existing handle if already included."""
        key = Path(project_dir).resolve()
        build = self._builds.get(key)
        if build is None:
            build = IncludedBuild(
                key,
                self._launcher_factory_provider(key),
                task_selector_factory=self._task_selector_factory,
            )
            self._builds[key] = build
            logger.debug(f"Included {build}")
        return build

    def get_build(self, name: str) -> IncludedBuild:
        """Look up an included build by its root project name.

        Raises:
            UnknownBuildError: If no included build has that name
        """
        for build in self._builds.values():
            if build.get_name() == name:
                return build
        known = ", ".join(sorted(b.get_name() for b in self._builds.values())) or "none"
        raise UnknownBuildError(f"Included build '{name}' not found. Known builds: {known}")

    def validate_names(self) -> None:
        """Check that included builds have distinct root project names.

        Raises:
            StateError: If two included builds share a name
        """
        seen: dict[str, IncludedBuild] = {}
        for build in self._builds.values():
            name = build.get_name()
            if name in seen:
                raise StateError(
                    f"Included build {build.project_dir} has name '{name}' "
                    f"which is the same as included build {seen[name].project_dir}."
                )
            seen[name] = build

    def resolve_dependency_substitutions(self) -> dict[str, FrozenSubstitutions]:
        """Freeze the substitution rules of every included build, keyed by name."""
        return {
            build.get_name(): build.resolve_dependency_substitutions()
            for build in self._builds.values()
        }

    def execute(self, name: str, task_names: Sequence[str], listener: BuildListener) -> None:
        self.get_build(name).execute(task_names, listener)

    def __iter__(self) -> Iterator[IncludedBuild]:
        return iter(list(self._builds.values()))

    def __len__(self) -> int:
        return len(self._builds)

    def __contains__(self, project_dir: object) -> bool:
        if not isinstance(project_dir, (str, Path)):
            return False
        return Path(project_dir).resolve() in self._builds
