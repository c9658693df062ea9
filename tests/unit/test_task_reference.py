"""Unit tests for task path validation and TaskReference values."""

import dataclasses

import pytest

from composite_builds.errors import ArgumentError
from composite_builds.included_build import TaskReference, validate_task_path


@pytest.mark.parametrize("path", ["jar", "b1:jar", "", " :jar", "/b1/jar"])
def test_unqualified_paths_rejected(path):
    with pytest.raises(ArgumentError, match="not a qualified task path"):
        validate_task_path(path)


@pytest.mark.parametrize("path", [":", ":jar", ":b1:jar", ":b1:sub:compileJava"])
def test_qualified_paths_accepted(path):
    assert validate_task_path(path) == path


def test_non_string_path_rejected():
    with pytest.raises(ArgumentError):
        validate_task_path(None)


def test_argument_error_is_value_error():
    with pytest.raises(ValueError):
        TaskReference("buildB", "jar")


def test_reference_keeps_path_exactly():
    ref = TaskReference("buildB", ":b1:jar")
    assert ref.build_name == "buildB"
    assert ref.path == ":b1:jar"
    assert str(ref) == "buildB:b1:jar"


def test_structural_equality_and_hashing():
    assert TaskReference("buildB", ":b1:jar") == TaskReference("buildB", ":b1:jar")
    assert TaskReference("buildB", ":b1:jar") != TaskReference("buildC", ":b1:jar")
    assert len({TaskReference("buildB", ":jar"), TaskReference("buildB", ":jar")}) == 1


def test_reference_is_immutable():
    ref = TaskReference("buildB", ":jar")
    with pytest.raises(dataclasses.FrozenInstanceError):
        ref.path = ":other"
