# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Exceptions raised by composite_builds.

Only argument and state violations are raised here. Failures coming out of a
launcher, a task selector or a task graph propagate exactly as raised.
"""


class CompositeBuildError(Exception):
    """Base class for errors raised by composite_builds itself."""

    pass


class ArgumentError(CompositeBuildError, ValueError):
    """Raised for malformed input such as an unqualified task path."""

    pass


class StateError(CompositeBuildError, RuntimeError):
    """Raised when an operation is attempted in the wrong lifecycle phase."""

    pass


class UnknownBuildError(ArgumentError, KeyError):
    """Raised when no included build matches a requested name."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
