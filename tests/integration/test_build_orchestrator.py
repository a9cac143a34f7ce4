import io
import os
import pytest
from stackbuild.PARSERS.manifest_parser import ManifestParser
from stackbuild.MANAGERS.build_orchestrator import BuildOrchestrator, build
from stackbuild.MODELS.build_options import BuildOptions
from stackbuild.MODELS.settings import BuildSettings
from stackbuild.exceptions import BuildError, InspectionError, ResolutionError

MANIFEST = """
services:
  web:
    build: .
    depends_on: [api, cache]
  api:
    build:
      context: api
    depends_on: [db]
  worker:
    build:
      context: api
    depends_on: [db]
  db:
    image: postgres:13
  cache:
    image: redis
  proxy:
    image: redis:latest
"""

@pytest.fixture
def manifest(write_dockerfile):
    write_dockerfile("Dockerfile", "FROM alpine\nARG VERSION=1.0\nARG TOKEN\n")
    write_dockerfile("api/Dockerfile", "FROM python:3.12\n")
    return ManifestParser().parse_from_string(MANIFEST)

def test_full_run(tmp_path, manifest, runner):
    sink = io.StringIO()
    options = BuildOptions(environment={"VERSION": "2.0"})

    build(manifest, str(tmp_path), "shop", sink, options, runner=runner)

    api_context = os.path.join(str(tmp_path), "api")
    web_context = os.path.join(str(tmp_path), ".")
    assert runner.calls == [
        ["build", "-f", os.path.join(api_context, "Dockerfile"), "-t", "shop/api", api_context],
        ["tag", "shop/api", "shop/worker"],
        ["build", "--build-arg", 'VERSION="2.0"', "-f", os.path.join(web_context, "Dockerfile"),
         "-t", "shop/web", web_context],
        ["images", "-q", "postgres:13"],
        ["pull", "postgres:13"],
        ["tag", "postgres:13", "shop/db"],
        ["images", "-q", "redis:latest"],
        ["pull", "redis:latest"],
        ["tag", "redis:latest", "shop/cache"],
        ["tag", "redis:latest", "shop/proxy"],
    ]
    assert "[web] Building shop/web" in sink.getvalue()

def test_no_cache_forces_flags_and_pulls(tmp_path, manifest, runner):
    runner.images["postgres:13"] = "abc\n"
    runner.images["redis:latest"] = "def\n"

    build(manifest, str(tmp_path), "shop", io.StringIO(), BuildOptions(cache=False), runner=runner)

    assert all(call[1] == "--no-cache" for call in runner.commands("build"))
    assert runner.commands("pull") == [["pull", "postgres:13"], ["pull", "redis:latest"]]

def test_cached_images_are_tagged_not_pulled(tmp_path, manifest, runner):
    runner.images["postgres:13"] = "abc\n"
    runner.images["redis:latest"] = "def\n"

    build(manifest, str(tmp_path), "shop", io.StringIO(), BuildOptions(cache=True), runner=runner)

    assert runner.commands("pull") == []
    assert ["tag", "redis:latest", "shop/cache"] in runner.calls
    assert ["tag", "redis:latest", "shop/proxy"] in runner.calls
    assert ["tag", "postgres:13", "shop/db"] in runner.calls

def test_service_filter(tmp_path, manifest, runner):
    orchestrator = BuildOrchestrator(manifest, runner=runner)
    orchestrator.build(str(tmp_path), "shop", io.StringIO(), BuildOptions(service="api"))

    assert runner.commands("build")[0][-2] == "shop/api"
    assert len(runner.commands("build")) == 1
    assert runner.commands("pull") == [["pull", "postgres:13"]]
    assert ["tag", "postgres:13", "shop/db"] in runner.calls
    assert not any("shop/web" in call or "shop/cache" in call for call in runner.calls)

def test_plan_is_side_effect_free(manifest, runner):
    plan = BuildOrchestrator(manifest, runner=runner).plan("shop", BuildOptions())
    assert [s.name for s in plan.builds] == ["api", "worker", "web"]
    assert plan.pulls.images == ["postgres:13", "redis:latest"]
    assert runner.calls == []

def test_build_failure_halts_everything(tmp_path, manifest, runner):
    runner.fail[("build",)] = 1

    with pytest.raises(BuildError, match="build error: build shop/api"):
        build(manifest, str(tmp_path), "shop", io.StringIO(), runner=runner)

    assert len(runner.calls) == 1

def test_inspection_failure_halts_everything(tmp_path, manifest, runner):
    runner.fail[("images",)] = 1

    with pytest.raises(InspectionError, match="postgres:13"):
        build(manifest, str(tmp_path), "shop", io.StringIO(), runner=runner)

    assert runner.commands("pull") == []
    assert runner.commands("images") == [["images", "-q", "postgres:13"]]

def test_unknown_service_fails_before_any_command(tmp_path, manifest, runner):
    with pytest.raises(ResolutionError):
        build(manifest, str(tmp_path), "shop", io.StringIO(), BuildOptions(service="nope"), runner=runner)
    assert runner.calls == []

def test_cache_does_not_survive_runs(tmp_path, manifest, runner):
    orchestrator = BuildOrchestrator(manifest, runner=runner)
    orchestrator.build(str(tmp_path), "shop", io.StringIO(), BuildOptions(service="api"))
    orchestrator.build(str(tmp_path), "shop", io.StringIO(), BuildOptions(service="api"))

    assert len(runner.commands("build")) == 2

def test_docker_binary_from_settings(tmp_path, manifest):
    seen = []

    class Recorder:
        def run(self, sink, command):
            seen.append(command[0])

        def combined_output(self, command):
            seen.append(command[0])
            return ""

    orchestrator = BuildOrchestrator(manifest, runner=Recorder(), settings=BuildSettings(docker_binary="podman"))
    orchestrator.build(str(tmp_path), "shop", io.StringIO())

    assert seen and set(seen) == {"podman"}
