# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Build listener interface.

IncludedBuild only forwards listeners to the launcher it executes with;
events are dispatched by the launcher.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome passed to ``BuildListener.build_finished``.

    Attributes:
        build: The build that finished (as given by the launcher)
        failure: Exception that ended the build, if any
    """

    build: Any
    failure: BaseException | None = None

    @property
    def successful(self) -> bool:
        return self.failure is None


class BuildListener:
    """Receives lifecycle events of one build.

    All callbacks are no-ops; subclasses override the ones they need.
    """

    def build_started(self, build: Any) -> None:
        pass

    def settings_evaluated(self, settings: Any) -> None:
        pass

    def projects_loaded(self, build: Any) -> None:
        pass

    def projects_evaluated(self, build: Any) -> None:
        pass

    def build_finished(self, result: BuildResult) -> None:
        pass


def _identity_of(build: Any) -> str:
    """Best effort display name for a build passed to a callback."""
    for attr in ("identity_path", "name"):
        value = getattr(build, attr, None)
        if value:
            return str(value)
    return str(build)


class LoggingBuildListener(BuildListener):
    """Logs every build event, tagged with the build's identity.

    Events are also kept in ``events`` as ``(event, identity)`` pairs so a
    caller can check that each event was delivered once per build.
    """

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger
        self.events: list[tuple[str, str]] = []

    def _record(self, event: str, identity: str) -> None:
        self.events.append((event, identity))
        self._log.info(f"buildListener.{event} [{identity}]")

    def build_started(self, build: Any) -> None:
        self._record("build_started", _identity_of(build))

    def settings_evaluated(self, settings: Any) -> None:
        root = getattr(settings, "root_project", None)
        self._record("settings_evaluated", _identity_of(root) if root is not None else str(settings))

    def projects_loaded(self, build: Any) -> None:
        self._record("projects_loaded", _identity_of(build))

    def projects_evaluated(self, build: Any) -> None:
        self._record("projects_evaluated", _identity_of(build))

    def build_finished(self, result: BuildResult) -> None:
        self._record("build_finished", _identity_of(result.build))
        if not result.successful:
            self._log.warning(f"Build {_identity_of(result.build)} failed: {result.failure}")

    def count(self, event: str, identity: str | None = None) -> int:
        """Number of times ``event`` was seen, optionally for one build."""
        return sum(
            1 for name, ident in self.events
            if name == event and (identity is None or ident == identity)
        )
