"""Test fixtures for composite_builds.

- fakes.py: in-memory launcher, settings, task graph and selector doubles
"""

from .fakes import (
    FakeBuildParameters,
    FakeConfiguredBuild,
    FakeLauncher,
    FakeLauncherFactory,
    FakeSettings,
    FakeTaskGraph,
    FakeTaskSelector,
)

__all__ = [
    "FakeBuildParameters",
    "FakeConfiguredBuild",
    "FakeLauncher",
    "FakeLauncherFactory",
    "FakeSettings",
    "FakeTaskGraph",
    "FakeTaskSelector",
]
