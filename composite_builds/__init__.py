# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""
composite_builds: lifecycle coordination for included builds

An included build is an external build directory composed into a parent
build. It contributes dependency substitutions and executable tasks.

Usage:
    from composite_builds import IncludedBuild, LoggingBuildListener

    # launcher_factory: any object whose create() returns a launcher
    build = IncludedBuild("../buildB", launcher_factory)
    build.dependency_substitution(
        lambda subs: subs.substitute("org.test:b1").using(subs.project(":b1"))
    )
    rules = build.resolve_dependency_substitutions()
    ref = build.task(":b1:jar")      # TaskReference('buildB', ':b1:jar')
    build.execute([":b1:jar"], LoggingBuildListener())

For a whole composite:
    from composite_builds import IncludedBuilds, get_config

    # launcher_factory_for(project_dir) returns a launcher factory
    builds = IncludedBuilds.from_config(get_config(), launcher_factory_for)
    builds.validate_names()
"""

__version__ = "0.1.0"

from .composite import IncludedBuilds
from .errors import ArgumentError, CompositeBuildError, StateError, UnknownBuildError
from .included_build import (
    BuildListener,
    BuildResult,
    DependencySubstitutions,
    FrozenSubstitutions,
    IncludedBuild,
    LauncherPhase,
    LoggingBuildListener,
    ModuleIdentifier,
    ProjectSelector,
    SubstitutionRule,
    TaskReference,
)
from .settings import CompositeConfig, get_config, load_config, reset_config

__all__ = [
    "__version__",
    "IncludedBuilds",
    "IncludedBuild",
    "TaskReference",
    "LauncherPhase",
    "DependencySubstitutions",
    "FrozenSubstitutions",
    "ModuleIdentifier",
    "ProjectSelector",
    "SubstitutionRule",
    "BuildListener",
    "BuildResult",
    "LoggingBuildListener",
    "CompositeBuildError",
    "ArgumentError",
    "StateError",
    "UnknownBuildError",
    "CompositeConfig",
    "get_config",
    "load_config",
    "reset_config",
]
