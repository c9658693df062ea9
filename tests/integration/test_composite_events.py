"""Composite build scenario: buildA includes buildB (b1, b2) and buildC.

Each included build is executed with a shared logging listener. Every
listener event must be delivered exactly once per build, and a second round
of executions must run on fresh launchers.
"""

import logging

import pytest

from composite_builds import IncludedBuilds, load_config
from composite_builds.included_build import LauncherPhase, LoggingBuildListener
from tests.fixtures.fakes import FakeLauncherFactory

EVENTS = ("settings_evaluated", "projects_loaded", "projects_evaluated", "build_finished")


@pytest.fixture
def composite(isolated_env):
    (isolated_env / "composite.yaml").write_text("included_builds:\n  - buildB\n  - buildC\n")
    tasks = {
        "buildB": [":b1:jar", ":b2:jar", ":b1:compileJava", ":b2:compileJava"],
        "buildC": [":jar", ":compileJava"],
    }
    factories = {}

    def provide(project_dir):
        factories[project_dir.name] = FakeLauncherFactory(project_dir.name, tasks[project_dir.name])
        return factories[project_dir.name]

    builds = IncludedBuilds.from_config(load_config(), provide)
    return builds, factories


def test_events_fire_once_per_included_build(composite, caplog):
    builds, factories = composite
    builds.validate_names()
    listener = LoggingBuildListener()

    with caplog.at_level(logging.INFO, logger="composite_builds"):
        for build in builds:
            build.add_tasks([":jar"] if build.name == "buildC" else [":b1:jar"])
            build.populate_task_graph()
            build.execute(["jar"], listener)

    for event in EVENTS:
        assert listener.count(event, ":buildB") == 1
        assert listener.count(event, ":buildC") == 1
    # listeners are registered after the build has started
    assert listener.count("build_started") == 0
    assert "buildListener.build_finished [:buildC]" in caplog.text
    assert all(b.phase is LauncherPhase.EXECUTED for b in builds)


def test_late_discovered_dependency_reuses_configured_state(composite):
    builds, factories = composite
    build_b = builds.get_build("buildB")

    build_b.add_tasks([":b1:jar"])
    # b2 is discovered while building the graph for buildC
    build_b.add_tasks([":b2:jar"])
    build_b.populate_task_graph()

    graph = build_b.get_configured_build().task_graph
    assert graph.all_tasks == {":b1:jar", ":b2:jar"}
    assert graph.populated == 1
    assert factories["buildB"].configurations == 1


def test_second_round_uses_fresh_launchers(composite):
    builds, factories = composite
    listener = LoggingBuildListener()

    for _ in range(2):
        for build in builds:
            build.get_configured_build()
            build.execute(["jar"], listener)

    for name in ("buildB", "buildC"):
        assert factories[name].created == 2
        assert factories[name].configurations == 2
        assert listener.count("build_finished", f":{name}") == 2


def test_substitutions_frozen_before_execution(composite):
    builds, _ = composite
    builds.get_build("buildB").dependency_substitution(
        lambda s: s.substitute("org.test:b1").using(s.project(":b1"))
    )
    builds.get_build("buildC").dependency_substitution(
        lambda s: s.substitute("org.test:buildC").using(s.project(":"))
    )

    resolved = builds.resolve_dependency_substitutions()

    assert str(resolved["buildB"].find("org.test:b1").target) == "project ':b1' of build 'buildB'"
    assert resolved["buildC"].find("org.test:buildC").target.project_path == ":"
    assert builds.get_build("buildB").task(":b1:jar").build_name == "buildB"
