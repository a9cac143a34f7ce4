# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Orchestration of image builds, pulls and tags for every service of a manifest.
"""
from typing import Optional, TextIO
from ..MODELS.manifest import Manifest
from ..MODELS.build_options import BuildOptions
from ..MODELS.settings import BuildSettings
from ..RUNNERS.command_runner import CommandRunner
from ..BUILDERS.build_cache import BuildCache
from ..BUILDERS.build_planner import BuildPlanner, BuildPlan
from ..BUILDERS.image_builder import ImageBuilder
from ..REGISTRY.pull_orchestrator import PullOrchestrator

class BuildOrchestrator:
    """
    Builds the images of a manifest's services in dependency order.

    Every step runs to completion before the next one starts: later builds
    may use images produced by earlier ones, and output stays in a
    predictable order.
    """
    def __init__(self,
                 manifest: Manifest,
                 runner: Optional[CommandRunner] = None,
                 settings: Optional[BuildSettings] = None):
        """
        Initializes the orchestrator.

        :param manifest: The application manifest.
        :param runner: Executes the docker commands; a new CommandRunner if omitted.
        :param settings: Process settings; read from the environment if omitted.
        """
        self.manifest = manifest
        self.runner = runner or CommandRunner()
        self.settings = settings or BuildSettings.from_env()
        self.planner = BuildPlanner()

    def plan(self, app_name: str, options: BuildOptions) -> BuildPlan:
        """
        Resolves the services to process and splits them into builds and pulls.

        :raises ResolutionError: On an unknown service or a dependency cycle.
        """
        services = self.manifest.run_order(options.service)
        return self.planner.plan(services, app_name)

    def build(self, working_dir: str, app_name: str, sink: TextIO, options: Optional[BuildOptions] = None):
        """
        Builds local images, then pulls and tags external ones.
        Any failure aborts the whole run.

        :param working_dir: Directory build contexts are relative to.
        :param app_name: Application namespace for destination tags.
        :param sink: Receives the output of every command.
        :param options: Cache, environment and service filter.
        :raises StackBuildError: On the first failing step.
        """
        options = options or BuildOptions()
        plan = self.plan(app_name, options)

        builder = ImageBuilder(self.runner,
                               base_dir=working_dir,
                               cache=BuildCache(),
                               docker_binary=self.settings.docker_binary)
        builder.build_all(plan.builds, app_name, sink, options)

        puller = PullOrchestrator(self.runner, docker_binary=self.settings.docker_binary)
        puller.pull_all(plan.pulls, sink, cache=options.cache)


def build(manifest: Manifest,
          working_dir: str,
          app_name: str,
          sink: TextIO,
          options: Optional[BuildOptions] = None,
          runner: Optional[CommandRunner] = None):
    """
    Builds every image of a manifest. See BuildOrchestrator.build.
    """
    BuildOrchestrator(manifest, runner=runner).build(working_dir, app_name, sink, options)
