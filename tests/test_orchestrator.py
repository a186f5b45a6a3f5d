"""Tests for schemalock.orchestrator."""

from __future__ import annotations

import pytest

from schemalock.config import ConfigError
from schemalock.errors import NotAMonorepoRootError, SchemaFileNotFoundError
from schemalock.orchestrator import Orchestrator
from tests._fixtures.project_builder import ProjectBuilder


def _seed_package(project: ProjectBuilder, package: str = "") -> None:
    prefix = f"{package}/" if package else ""
    project.write({f"{prefix}e.json": '{"events": {"page_view": {"name": "Page View"}}}'})
    project.write_config([{"events": "e.json", "output": "out.ts"}], package=package)


def test_generate_end_to_end_versions(project: ProjectBuilder) -> None:
    _seed_package(project)
    orchestrator = Orchestrator(tool_version="2.0.0")

    first = orchestrator.run_generate(str(project.path()))
    first_lock = project.read_json("schema.lock")

    project.write({"e.json": '{"events": {"page_view": {"name": "Page Viewed"}}}'})
    second = orchestrator.run_generate(str(project.path()))
    second_lock = project.read_json("schema.lock")

    third = orchestrator.run_generate(str(project.path()))
    third_lock = project.read_json("schema.lock")

    assert first.previous_version is None
    assert first_lock["generates"][0]["version"] == "1.0"
    assert second_lock["generates"][0]["version"] == "1.1"
    assert second_lock["generates"][0]["hash"] != first_lock["generates"][0]["hash"]
    assert second.previous_version == "1.0"
    assert [change.status for change in second.changes] == ["changed"]
    assert third_lock["generates"][0]["version"] == "1.1"
    assert third_lock["generates"][0]["hash"] == second_lock["generates"][0]["hash"]
    assert third_lock["hash"] == second_lock["hash"]
    assert third.lock.version == second.lock.version
    assert third_lock["toolVersion"] == "2.0.0"
    assert third_lock["configFile"] == "schema.config.json"


def test_generate_migrates_legacy_integer_versions(project: ProjectBuilder) -> None:
    _seed_package(project)
    orchestrator = Orchestrator(tool_version="2.0.0")
    orchestrator.run_generate(str(project.path()))
    lock = project.read_json("schema.lock")
    lock["version"] = 5
    project.write_json("schema.lock", lock)

    outcome = orchestrator.run_generate(str(project.path()))
    migrated = project.read_json("schema.lock")

    assert outcome.previous_version == "5.0"
    assert migrated["version"] == "5.0"
    assert migrated["generates"][0]["version"] == "1.0"


def test_generate_recovers_from_corrupt_lock(project: ProjectBuilder) -> None:
    _seed_package(project)
    project.write({"schema.lock": "{\"toolVersion\": "})

    outcome = Orchestrator(tool_version="2.0.0").run_generate(str(project.path()))

    assert outcome.previous_version is None
    assert project.read_json("schema.lock")["version"] == "1.0"


@pytest.mark.parametrize(
    "prior",
    [{}, {"isMonoRepo": True, "packages": [], "version": "3.2", "hash": "abc"}],
)
def test_generate_ignores_prior_lock_of_wrong_shape(project: ProjectBuilder, prior: dict) -> None:
    _seed_package(project)
    project.write_json("schema.lock", prior)

    outcome = Orchestrator(tool_version="2.0.0").run_generate(str(project.path()))

    assert outcome.previous_version is None
    assert project.read_json("schema.lock")["version"] == "1.0"


def test_generate_leaves_previous_lock_on_failure(project: ProjectBuilder) -> None:
    _seed_package(project)
    orchestrator = Orchestrator(tool_version="2.0.0")
    orchestrator.run_generate(str(project.path()))
    before = project.path("schema.lock").read_text(encoding="utf-8")
    project.write_config([{"events": "missing.json", "output": "out.ts"}])

    with pytest.raises(SchemaFileNotFoundError):
        orchestrator.run_generate(str(project.path()))

    assert project.path("schema.lock").read_text(encoding="utf-8") == before


def test_generate_with_explicit_config(project: ProjectBuilder) -> None:
    project.write(
        {
            "e.yaml": "events: {}",
            "config/alt.yml": """
                generates:
                  - events: ../e.yaml
                    output: ../out.ts
            """,
        }
    )

    outcome = Orchestrator(tool_version="2.0.0").run_generate(
        str(project.path()), config_path="config/alt.yml"
    )

    assert outcome.path == project.path("config/schema.lock").resolve()
    assert outcome.lock.config_file == "alt.yml"


def test_generate_requires_config(project: ProjectBuilder) -> None:
    with pytest.raises(ConfigError):
        Orchestrator().run_generate(str(project.path()))


def test_concat_writes_then_skips_unchanged(project: ProjectBuilder) -> None:
    project.write_manifest(name="root", private=True)
    for name in ("zeta", "alpha", "mu"):
        project.write_manifest(f"packages/{name}", name=name, version="1.0.0")
        _seed_package(project, f"packages/{name}")
    orchestrator = Orchestrator(tool_version="2.0.0")
    for name in ("zeta", "alpha", "mu"):
        orchestrator.run_generate(str(project.path(f"packages/{name}")))

    first = orchestrator.run_concat(str(project.path()))
    second = orchestrator.run_concat(str(project.path()))
    root_lock = project.read_json("schema.lock")

    assert first.written is True and first.previous_version is None
    assert [package["packageName"] for package in root_lock["packages"]] == ["alpha", "mu", "zeta"]
    assert root_lock["isMonoRepo"] is True
    assert second.written is False
    assert second.lock.version == "1.0"


def test_concat_bumps_after_package_change(project: ProjectBuilder) -> None:
    project.write_manifest(name="root")
    project.write_manifest("packages/web", name="web")
    _seed_package(project, "packages/web")
    orchestrator = Orchestrator(tool_version="2.0.0")
    orchestrator.run_generate(str(project.path("packages/web")))
    orchestrator.run_concat(str(project.path()))

    project.write({"packages/web/e.json": '{"events": {}}'})
    orchestrator.run_generate(str(project.path("packages/web")))
    outcome = orchestrator.run_concat(str(project.path()))

    assert outcome.written is True
    assert outcome.previous_version == "1.0"
    assert project.read_json("schema.lock")["version"] == "1.1"


def test_concat_outside_monorepo_root(project: ProjectBuilder) -> None:
    with pytest.raises(NotAMonorepoRootError):
        Orchestrator().run_concat(str(project.path()))
