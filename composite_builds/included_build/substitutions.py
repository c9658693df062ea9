# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Dependency substitution rules contributed by an included build.

Rules are declared through actions registered on the included build. The
actions are replayed once, in registration order, against a single fresh
``DependencySubstitutions`` builder the first time the rules are resolved.
The result is frozen; registering further actions is an error from then on.

Usage:
    build.dependency_substitution(
        lambda subs: subs.substitute("org.test:b1").using(subs.project(":b1"))
    )
    rules = build.resolve_dependency_substitutions()
    rules.find("org.test:b1").target   # ProjectSelector('buildB', ':b1')
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Union

from composite_builds.errors import ArgumentError, StateError
from .types import TASK_PATH_SEPARATOR

logger = logging.getLogger(__name__)


# =============================================================================
# Rule values
# =============================================================================

@dataclass(frozen=True)
class ModuleIdentifier:
    """External module coordinates (version is not part of the identity)."""

    group: str
    name: str

    @classmethod
    def parse(cls, notation: str) -> ModuleIdentifier:
        """Parse 'group:name' or 'group:name:version'.

        Raises:
            ArgumentError: If the notation is malformed
        """
        parts = notation.split(":") if isinstance(notation, str) else []
        if len(parts) not in (2, 3) or not all(parts[:2]):
            raise ArgumentError(
                f"Invalid module notation '{notation}'. "
                f"Expected 'group:name' or 'group:name:version'."
            )
        return cls(group=parts[0], name=parts[1])

    def __str__(self) -> str:
        return f"{self.group}:{self.name}"


@dataclass(frozen=True)
class ProjectSelector:
    """A project inside an included build, used as a substitution target."""

    build_name: str
    project_path: str

    def __str__(self) -> str:
        return f"project '{self.project_path}' of build '{self.build_name}'"


SubstitutionTarget = Union[ModuleIdentifier, ProjectSelector]


@dataclass(frozen=True)
class SubstitutionRule:
    """Replace ``requested`` with ``target`` during resolution."""

    requested: ModuleIdentifier
    target: SubstitutionTarget

    def __str__(self) -> str:
        return f"{self.requested} -> {self.target}"


@dataclass(frozen=True)
class FrozenSubstitutions:
    """Immutable rule set produced by resolving an included build's actions."""

    owner: str
    rules: tuple[SubstitutionRule, ...] = ()

    def find(self, requested: str | ModuleIdentifier) -> SubstitutionRule | None:
        """Return the last rule declared for ``requested``, if any."""
        if isinstance(requested, str):
            requested = ModuleIdentifier.parse(requested)
        match = None
        for rule in self.rules:
            if rule.requested == requested:
                match = rule
        return match

    def __iter__(self) -> Iterator[SubstitutionRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


# =============================================================================
# Rule builder
# =============================================================================

class _PendingSubstitution:
    """Half-declared rule returned by ``DependencySubstitutions.substitute``."""

    def __init__(self, owner: DependencySubstitutions, requested: ModuleIdentifier):
        self._owner = owner
        self._requested = requested

    def using(self, target: str | SubstitutionTarget) -> SubstitutionRule:
        if isinstance(target, str):
            target = self._owner.module(target)
        return self._owner._add(SubstitutionRule(self._requested, target))


class DependencySubstitutions:
    """Mutable builder collecting substitution rules for one included build.

    The owning build's name is only looked up when a project target is
    created, so building rules does not force settings to load on its own.
    """

    def __init__(self, build_name: Callable[[], str], owner: str):
        self._build_name = build_name
        self._owner = owner
        self._rules: list[SubstitutionRule] = []
        self._frozen: FrozenSubstitutions | None = None

    @classmethod
    def for_included_build(cls, build) -> DependencySubstitutions:
        """Create an empty builder scoped to ``build``."""
        return cls(build.get_name, owner=str(build))

    def module(self, notation: str) -> ModuleIdentifier:
        return ModuleIdentifier.parse(notation)

    def project(self, path: str) -> ProjectSelector:
        """Select a project of the owning build by its path.

        Raises:
            ArgumentError: If the path does not start with ':'
        """
        if not isinstance(path, str) or not path.startswith(TASK_PATH_SEPARATOR):
            raise ArgumentError(
                f"Project path '{path}' in {self._owner} must start with '{TASK_PATH_SEPARATOR}'."
            )
        return ProjectSelector(build_name=self._build_name(), project_path=path)

    def substitute(self, requested: str | ModuleIdentifier) -> _PendingSubstitution:
        if isinstance(requested, str):
            requested = self.module(requested)
        return _PendingSubstitution(self, requested)

    def all(self, callback: Callable[[SubstitutionRule], None]) -> None:
        """Run ``callback`` for every rule declared so far."""
        for rule in list(self._rules):
            callback(rule)

    @property
    def rules(self) -> tuple[SubstitutionRule, ...]:
        return tuple(self._rules)

    def _add(self, rule: SubstitutionRule) -> SubstitutionRule:
        if self._frozen is not None:
            raise StateError(f"Cannot add substitution rule '{rule}': rules for {self._owner} are frozen.")
        self._rules.append(rule)
        return rule

    def freeze(self) -> FrozenSubstitutions:
        if self._frozen is None:
            self._frozen = FrozenSubstitutions(owner=self._owner, rules=tuple(self._rules))
        return self._frozen


SubstitutionAction = Callable[[DependencySubstitutions], None]


# =============================================================================
# Registry
# =============================================================================

class DependencySubstitutionRegistry:
    """Ordered substitution actions that freeze into one rule set.

    The registry counts as resolved as soon as resolution starts. An action
    that fails leaves the rules applied before it in place: the error
    propagates, registration stays closed, and the next ``resolve`` returns
    those rules frozen without replaying anything.

    Args:
        builder_factory: Creates the empty rule builder actions are applied to
        owner: Display name of the owning build, used in error messages
    """

    def __init__(self, builder_factory: Callable[[], DependencySubstitutions], owner: str):
        self._builder_factory = builder_factory
        self._owner = owner
        self._actions: list[SubstitutionAction] = []
        self._builder: DependencySubstitutions | None = None

    @property
    def is_resolved(self) -> bool:
        return self._builder is not None

    @property
    def pending(self) -> tuple[SubstitutionAction, ...]:
        return tuple(self._actions)

    def register(self, action: SubstitutionAction) -> None:
        """Queue ``action`` for replay at resolution time.

        Raises:
            StateError: If resolution has started, including from inside an action
        """
        if self._builder is not None:
            raise StateError(
                f"Cannot configure {self._owner} after dependency substitutions are resolved."
            )
        self._actions.append(action)

    def resolve(self) -> FrozenSubstitutions:
        """Apply all queued actions once and return the frozen rules."""
        if self._builder is None:
            self._builder = self._builder_factory()
            actions = tuple(self._actions)
            for action in actions:
                action(self._builder)
            logger.debug(
                f"Resolved {len(self._builder.rules)} dependency substitution(s) "
                f"from {len(actions)} action(s) for {self._owner}"
            )
        return self._builder.freeze()
