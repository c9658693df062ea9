# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Included build lifecycle: launcher generations, substitutions, task references."""

from .handle import IncludedBuild, default_task_selector
from .listeners import BuildListener, BuildResult, LoggingBuildListener
from .substitutions import (
    DependencySubstitutionRegistry,
    DependencySubstitutions,
    FrozenSubstitutions,
    ModuleIdentifier,
    ProjectSelector,
    SubstitutionRule,
)
from .types import UNSET, Cached, LauncherPhase, TaskReference, validate_task_path

__all__ = [
    "IncludedBuild",
    "default_task_selector",
    "BuildListener",
    "BuildResult",
    "LoggingBuildListener",
    "DependencySubstitutionRegistry",
    "DependencySubstitutions",
    "FrozenSubstitutions",
    "ModuleIdentifier",
    "ProjectSelector",
    "SubstitutionRule",
    "UNSET",
    "Cached",
    "LauncherPhase",
    "TaskReference",
    "validate_task_path",
]
