"""In-memory collaborators for IncludedBuild tests.

FakeLauncherFactory counts every launcher it creates and every settings load,
configuration pass and run performed by those launchers, so tests can assert
on how often a phase was entered.
"""

from dataclasses import dataclass, field
from typing import Any

from composite_builds.included_build import BuildResult


@dataclass(frozen=True)
class FakeProject:
    name: str

    @property
    def identity_path(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class FakeSettings:
    root_project: FakeProject
    generation: int = 0


class FakeTaskGraph:
    def __init__(self):
        self.added: list[set[str]] = []
        self.populated = 0

    def add_tasks(self, tasks) -> None:
        self.added.append(set(tasks))

    def populate(self) -> None:
        self.populated += 1

    @property
    def all_tasks(self) -> set[str]:
        return set().union(*self.added) if self.added else set()


class FakeTaskSelector:
    """Selects tasks by exact path, or by task name across all projects."""

    def __init__(self, tasks: list[str]):
        self.tasks = tasks
        self.requests: list[str] = []

    def get_selection(self, path: str) -> set[str]:
        self.requests.append(path)
        if path in self.tasks:
            return {path}
        matches = {t for t in self.tasks if t.rsplit(":", 1)[-1] == path.lstrip(":")}
        if not matches:
            raise LookupError(f"Task '{path}' not found")
        return matches


class FakeConfiguredBuild:
    def __init__(self, name: str, tasks: list[str], generation: int):
        self.name = name
        self.identity_path = f":{name}"
        self.generation = generation
        self.task_graph = FakeTaskGraph()
        self.selector = FakeTaskSelector(tasks)

    def get_task_selector(self) -> FakeTaskSelector:
        return self.selector


@dataclass
class FakeBuildParameters:
    task_names: list[str] = field(default_factory=list)
    listeners: list[Any] = field(default_factory=list)

    def add_listener(self, listener) -> None:
        self.listeners.append(listener)


class FakeLauncher:
    def __init__(self, factory: "FakeLauncherFactory", generation: int):
        self.factory = factory
        self.generation = generation
        self.parameters = FakeBuildParameters()
        self.settings: FakeSettings | None = None
        self.configured: FakeConfiguredBuild | None = None
        self.ran: list[list[str]] = []

    def get_loaded_settings(self) -> FakeSettings:
        self.factory.settings_loads += 1
        if self.factory.settings_error is not None:
            raise self.factory.settings_error
        self.settings = FakeSettings(FakeProject(self.factory.name), self.generation)
        return self.settings

    def get_configured_build(self) -> FakeConfiguredBuild:
        self.factory.configurations += 1
        if self.factory.configure_error is not None:
            raise self.factory.configure_error
        self.configured = FakeConfiguredBuild(self.factory.name, self.factory.tasks, self.generation)
        return self.configured

    def get_build_parameters(self) -> FakeBuildParameters:
        return self.parameters

    def run_tasks(self, task_names) -> None:
        self.factory.runs += 1
        self.ran.append(list(task_names))
        build = self.configured or FakeConfiguredBuild(self.factory.name, self.factory.tasks, self.generation)
        settings = self.settings or FakeSettings(FakeProject(self.factory.name), self.generation)
        error = self.factory.run_error

        for listener in self.parameters.listeners:
            listener.settings_evaluated(settings)
            listener.projects_loaded(build)
            listener.projects_evaluated(build)
            listener.build_finished(BuildResult(build=build, failure=error))

        if error is not None:
            raise error


class FakeLauncherFactory:
    """Launcher factory bound to one build named ``name``."""

    def __init__(self, name: str = "buildB", tasks: list[str] | None = None):
        self.name = name
        self.tasks = tasks if tasks is not None else [":b1:jar", ":b1:assemble", ":b2:jar", ":b2:assemble"]
        self.launchers: list[FakeLauncher] = []
        self.settings_loads = 0
        self.configurations = 0
        self.runs = 0
        self.settings_error: BaseException | None = None
        self.configure_error: BaseException | None = None
        self.run_error: BaseException | None = None

    def create(self) -> FakeLauncher:
        launcher = FakeLauncher(self, generation=len(self.launchers) + 1)
        self.launchers.append(launcher)
        return launcher

    @property
    def created(self) -> int:
        return len(self.launchers)

    @property
    def last(self) -> FakeLauncher:
        return self.launchers[-1]
