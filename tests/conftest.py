"""Global pytest configuration and fixtures."""

import logging

import pytest

from composite_builds.included_build import IncludedBuild
from composite_builds.settings import reset_config
from tests.fixtures.fakes import FakeLauncherFactory


@pytest.fixture(autouse=True)
def clean_config():
    """Drop the cached configuration around each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no COMPOSITE_* variables and a fake HOME."""
    import os

    for key in list(os.environ):
        if key.startswith("COMPOSITE_"):
            monkeypatch.delenv(key, raising=False)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))

    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def clean_logging():
    """Remove handlers from the composite_builds logger around each test."""
    package_logger = logging.getLogger("composite_builds")
    saved = (list(package_logger.handlers), package_logger.level)
    package_logger.handlers.clear()
    yield package_logger
    package_logger.handlers[:] = saved[0]
    package_logger.setLevel(saved[1])


@pytest.fixture
def launcher_factory():
    return FakeLauncherFactory("buildB")


@pytest.fixture
def build(tmp_path, launcher_factory):
    return IncludedBuild(tmp_path / "buildB", launcher_factory)
